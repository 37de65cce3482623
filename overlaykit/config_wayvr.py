"""Configuration of the embedded compositor: catalogs of apps and displays."""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

import yaml

from overlaykit.config import ConfigError, ConfigType, GeneralConfig, load_known_yaml

log = logging.getLogger(__name__)

SUPPORTED_VERSION = 1


class AttachTo(str, Enum):
    """What a display is positioned relative to."""

    NONE = "None"
    HAND_LEFT = "HandLeft"
    HAND_RIGHT = "HandRight"
    HEAD = "Head"
    STAGE = "Stage"


@dataclass
class Rotation:
    axis: tuple[float, float, float]
    angle: float


@dataclass
class WayVRAppEntry:
    """An application that can be launched on a display."""

    name: str
    target_display: str
    exec: str
    args: str | None = None
    env: list[str] | None = None
    shown_at_start: bool | None = None


@dataclass
class WayVRDisplay:
    width: int
    height: int
    scale: float | None = None
    rotation: Rotation | None = None
    pos: tuple[float, float, float] | None = None
    attach_to: AttachTo | None = None
    primary: bool | None = None


@dataclass
class WayVRCatalog:
    apps: list[WayVRAppEntry] = field(default_factory=list)

    def get_app(self, name: str) -> WayVRAppEntry | None:
        """Return the first app with the given name."""
        return next((app for app in self.apps if app.name == name), None)


@dataclass
class CompositorConfig:
    """Runtime settings handed to the compositor."""

    click_freeze_time_ms: int
    keyboard_repeat_delay_ms: int
    keyboard_repeat_rate: int
    auto_hide_delay: int | None


def _require(data: Mapping[str, Any], key: str, ctx: str) -> Any:
    if key not in data:
        raise ConfigError(f"{ctx}: missing field `{key}`")
    return data[key]


def _mapping(ctx: str, value: Any) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise ConfigError(f"{ctx}: expected a mapping, got {value!r}")
    return value


def _list(ctx: str, value: Any) -> Sequence[Any]:
    if isinstance(value, (str, bytes)) or not isinstance(value, Sequence):
        raise ConfigError(f"{ctx}: expected a list, got {value!r}")
    return value


def _uint(ctx: str, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value < 1 << 32:
        raise ConfigError(f"{ctx}: expected an unsigned 32-bit integer, got {value!r}")
    return value


def _float(ctx: str, value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigError(f"{ctx}: expected a number, got {value!r}")
    return float(value)


def _bool(ctx: str, value: Any) -> bool:
    if not isinstance(value, bool):
        raise ConfigError(f"{ctx}: expected a boolean, got {value!r}")
    return value


def _str(ctx: str, value: Any) -> str:
    if not isinstance(value, str):
        raise ConfigError(f"{ctx}: expected a string, got {value!r}")
    return value


def _vec3(ctx: str, value: Any) -> tuple[float, float, float]:
    items = _list(ctx, value)
    if len(items) != 3:
        raise ConfigError(f"{ctx}: expected 3 numbers, got {value!r}")
    x, y, z = (_float(ctx, item) for item in items)
    return (x, y, z)


def _optional(data: Mapping[str, Any], key: str, ctx: str, convert: Any) -> Any:
    value = data.get(key)
    return None if value is None else convert(f"{ctx}.{key}", value)


def _parse_rotation(ctx: str, value: Any) -> Rotation:
    data = _mapping(ctx, value)
    return Rotation(
        axis=_vec3(f"{ctx}.axis", _require(data, "axis", ctx)),
        angle=_float(f"{ctx}.angle", _require(data, "angle", ctx)),
    )


def _parse_attach_to(ctx: str, value: Any) -> AttachTo:
    try:
        return AttachTo(value)
    except ValueError:
        names = ", ".join(member.value for member in AttachTo)
        raise ConfigError(f"{ctx}: expected one of {names}, got {value!r}") from None


def _parse_app(ctx: str, value: Any) -> WayVRAppEntry:
    data = _mapping(ctx, value)
    env = data.get("env")
    return WayVRAppEntry(
        name=_str(f"{ctx}.name", _require(data, "name", ctx)),
        target_display=_str(f"{ctx}.target_display", _require(data, "target_display", ctx)),
        exec=_str(f"{ctx}.exec", _require(data, "exec", ctx)),
        args=_optional(data, "args", ctx, _str),
        env=None if env is None else [_str(f"{ctx}.env", e) for e in _list(f"{ctx}.env", env)],
        shown_at_start=_optional(data, "shown_at_start", ctx, _bool),
    )


def _parse_catalog(ctx: str, value: Any) -> WayVRCatalog:
    data = _mapping(ctx, value)
    apps = _list(f"{ctx}.apps", _require(data, "apps", ctx))
    return WayVRCatalog([_parse_app(f"{ctx}.apps", app) for app in apps])


def _parse_display(ctx: str, value: Any) -> WayVRDisplay:
    data = _mapping(ctx, value)
    return WayVRDisplay(
        width=_uint(f"{ctx}.width", _require(data, "width", ctx)),
        height=_uint(f"{ctx}.height", _require(data, "height", ctx)),
        scale=_optional(data, "scale", ctx, _float),
        rotation=_optional(data, "rotation", ctx, _parse_rotation),
        pos=_optional(data, "pos", ctx, _vec3),
        attach_to=_optional(data, "attach_to", ctx, _parse_attach_to),
        primary=_optional(data, "primary", ctx, _bool),
    )


@dataclass
class WayVRConfig:
    """Compositor configuration; displays are kept sorted by name."""

    version: int
    run_compositor_at_start: bool
    catalogs: dict[str, WayVRCatalog]
    displays: dict[str, WayVRDisplay]
    auto_hide: bool = True
    auto_hide_delay: int = 750
    keyboard_repeat_delay: int = 200
    keyboard_repeat_rate: int = 50

    def __post_init__(self) -> None:
        self.displays = dict(sorted(self.displays.items()))

    @classmethod
    def from_mapping(cls, data: Any) -> WayVRConfig:
        """Build a config from parsed YAML, raising ConfigError if malformed."""
        ctx = "wayvr"
        data = _mapping(ctx, data)
        catalogs = _mapping("catalogs", _require(data, "catalogs", ctx))
        displays = _mapping("displays", _require(data, "displays", ctx))
        extra: dict[str, Any] = {
            key: _uint(key, data[key])
            for key in ("auto_hide_delay", "keyboard_repeat_delay", "keyboard_repeat_rate")
            if key in data
        }
        if "auto_hide" in data:
            extra["auto_hide"] = _bool("auto_hide", data["auto_hide"])
        return cls(
            version=_uint("version", _require(data, "version", ctx)),
            run_compositor_at_start=_bool(
                "run_compositor_at_start", _require(data, "run_compositor_at_start", ctx)
            ),
            catalogs={
                _str("catalogs", name): _parse_catalog(f"catalogs.{name}", value)
                for name, value in catalogs.items()
            },
            displays={
                _str("displays", name): _parse_display(f"displays.{name}", value)
                for name, value in displays.items()
            },
            **extra,
        )

    def get_catalog(self, name: str) -> WayVRCatalog | None:
        return self.catalogs.get(name)

    def get_display(self, name: str) -> WayVRDisplay | None:
        return self.displays.get(name)

    def get_default_display(self) -> tuple[str, WayVRDisplay] | None:
        """Return the first primary display in name order, with its name."""
        return next(
            ((name, disp) for name, disp in self.displays.items() if disp.primary),
            None,
        )

    def compositor_config(self, general: GeneralConfig) -> CompositorConfig:
        return CompositorConfig(
            click_freeze_time_ms=general.click_freeze_time_ms,
            keyboard_repeat_delay_ms=self.keyboard_repeat_delay,
            keyboard_repeat_rate=self.keyboard_repeat_rate,
            auto_hide_delay=self.auto_hide_delay if self.auto_hide else None,
        )

    def check_primary(self) -> int:
        """Count primary displays; more than one is an error, none a warning."""
        count = sum(1 for disp in self.displays.values() if disp.primary)
        if count > 1:
            raise ConfigError("Number of primary displays is more than 1")
        if count == 0:
            log.warning("No primary display specified")
        return count

    def apps_shown_at_start(self) -> Iterator[tuple[str, str]]:
        """Yield (catalog name, app name) for every app to launch at start."""
        for catalog_name, catalog in self.catalogs.items():
            for app in catalog.apps:
                if app.shown_at_start:
                    yield catalog_name, app.name


def load_wayvr(fallback: str) -> WayVRConfig:
    """Load the user's wayvr.yaml, falling back to the given built-in text."""
    data = load_known_yaml(ConfigType.WAYVR, fallback)
    try:
        config = WayVRConfig.from_mapping(data)
    except ConfigError as exc:
        log.error("Failed to parse %s, falling back to defaults.", ConfigType.WAYVR.value)
        log.error("%s", exc)
        try:
            fallback_data = yaml.safe_load(fallback)
        except yaml.YAMLError as yaml_exc:
            raise ConfigError("No usable config found.") from yaml_exc
        config = WayVRConfig.from_mapping(fallback_data)
    if config.version != SUPPORTED_VERSION:
        raise ConfigError(f"WayVR config version {config.version} is not supported")
    return config