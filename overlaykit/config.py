"""General configuration: defaults, layered loading and saving."""

from __future__ import annotations

import datetime
import json
import logging
import math
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field, fields
from enum import Enum
from pathlib import Path
from typing import Any

import yaml

from overlaykit import config_io

log = logging.getLogger(__name__)

SETTINGS_FILE = "zz-saved-config.json5"
STATE_FILE = "zz-saved-state.json5"

_F32_MIN_NORMAL = 2.0**-126
_EMEA = -60 * 60
_APAC = 5 * 60 * 60


class ConfigError(Exception):
    """Raised when configuration cannot be read or is invalid."""


class LeftRight(str, Enum):
    LEFT = "Left"
    RIGHT = "Right"


class ConfigType(Enum):
    """Known YAML configuration files, by file name."""

    KEYBOARD = "keyboard.yaml"
    WATCH = "watch.yaml"
    SETTINGS = "settings.yaml"
    ANCHOR = "anchor.yaml"
    WAYVR = "wayvr.yaml"


def default_timezones(offset_seconds: int | None = None) -> list[str]:
    """Pick two clocks far from the given (or local) UTC offset."""
    if offset_seconds is None:
        offset = datetime.datetime.now().astimezone().utcoffset()
        offset_seconds = int(offset.total_seconds()) if offset else 0
    if offset_seconds < _EMEA:
        return ["Europe/Paris", "Asia/Tokyo"]
    if offset_seconds < _APAC:
        return ["America/New_York", "Asia/Tokyo"]
    return ["Europe/Paris", "America/New_York"]


def sanitize_range(name: str, value: float, low: float, high: float) -> None:
    """Raise ConfigError unless value is a normal number within [low, high]."""
    value = float(value)
    if (
        not math.isfinite(value)
        or abs(value) < _F32_MIN_NORMAL
        or value < low
        or value > high
    ):
        raise ConfigError(f"GeneralConfig: {name} needs to be between {low} and {high}")


Converter = Callable[[str, Any], Any]


def _as_float(name: str, value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigError(f"{name}: expected a number, got {value!r}")
    return float(value)


def _as_uint(bits: int) -> Converter:
    limit = (1 << bits) - 1

    def convert(name: str, value: Any) -> int:
        if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= limit:
            raise ConfigError(f"{name}: expected an integer between 0 and {limit}, got {value!r}")
        return value

    return convert


def _as_bool(name: str, value: Any) -> bool:
    if not isinstance(value, bool):
        raise ConfigError(f"{name}: expected a boolean, got {value!r}")
    return value


def _as_str(name: str, value: Any) -> str:
    if not isinstance(value, str):
        raise ConfigError(f"{name}: expected a string, got {value!r}")
    return value


def _as_str_list(name: str, value: Any) -> list[str]:
    if isinstance(value, str) or not isinstance(value, Sequence):
        raise ConfigError(f"{name}: expected a list of strings, got {value!r}")
    return [_as_str(name, item) for item in value]


def _as_vector(size: int) -> Converter:
    def convert(name: str, value: Any) -> tuple[float, ...]:
        if isinstance(value, str) or not isinstance(value, Sequence) or len(value) != size:
            raise ConfigError(f"{name}: expected {size} numbers, got {value!r}")
        return tuple(_as_float(name, item) for item in value)

    return convert


def _as_pairs(convert_value: Converter) -> Converter:
    def convert(name: str, value: Any) -> dict[str, Any]:
        if isinstance(value, Mapping):
            pairs = list(value.items())
        elif isinstance(value, Sequence) and not isinstance(value, str):
            pairs = []
            for item in value:
                if isinstance(item, str) or not isinstance(item, Sequence) or len(item) != 2:
                    raise ConfigError(f"{name}: expected [name, value] pairs, got {item!r}")
                pairs.append((item[0], item[1]))
        else:
            raise ConfigError(f"{name}: expected a list of pairs, got {value!r}")
        return {_as_str(name, k): convert_value(name, v) for k, v in pairs}

    return convert


def _as_str_dict(name: str, value: Any) -> dict[str, str]:
    if not isinstance(value, Mapping):
        raise ConfigError(f"{name}: expected a mapping, got {value!r}")
    return {_as_str(name, k): _as_str(name, v) for k, v in value.items()}


def _as_hand(name: str, value: Any) -> LeftRight:
    try:
        return LeftRight(value)
    except ValueError:
        raise ConfigError(f"{name}: expected Left or Right, got {value!r}") from None


def _opt(convert: Converter, default: Any = None, factory: Callable[[], Any] | None = None) -> Any:
    metadata = {"convert": convert}
    if factory is not None:
        return field(default_factory=factory, metadata=metadata)
    return field(default=default, metadata=metadata)


_u16 = _as_uint(16)
_u32 = _as_uint(32)


@dataclass
class GeneralConfig:
    """Settings shared by the whole application."""

    watch_pos: tuple[float, ...] = _opt(_as_vector(3), (-0.03, -0.01, 0.125))
    watch_rot: tuple[float, ...] = _opt(
        _as_vector(4), (-0.7071066, 0.0007963618, 0.7071066, 0.0)
    )
    watch_hand: LeftRight = _opt(_as_hand, LeftRight.LEFT)
    click_freeze_time_ms: int = _opt(_u32, 300)
    mouse_move_interval_ms: int = _opt(_u32, 10)
    notifications_enabled: bool = _opt(_as_bool, True)
    notifications_sound_enabled: bool = _opt(_as_bool, True)
    notification_topics: dict[str, str] = _opt(_as_str_dict, factory=dict)
    keyboard_sound_enabled: bool = _opt(_as_bool, True)
    keyboard_scale: float = _opt(_as_float, 1.0)
    desktop_view_scale: float = _opt(_as_float, 1.0)
    watch_view_angle_min: float = _opt(_as_float, 0.5)
    watch_view_angle_max: float = _opt(_as_float, 0.7)
    long_press_duration: float = _opt(_as_float, 1.0)
    osc_out_port: int = _opt(_u16, 9000)
    upright_screen_fix: bool = _opt(_as_bool, False)
    double_cursor_fix: bool = _opt(_as_bool, False)
    show_screens: list[str] = _opt(_as_str_list, factory=list)
    curve_values: dict[str, float] = _opt(_as_pairs(_as_float), factory=dict)
    transform_values: dict[str, tuple[float, ...]] = _opt(
        _as_pairs(_as_vector(12)), factory=dict
    )
    capture_method: str = _opt(_as_str, "auto")
    xr_grab_sensitivity: float = _opt(_as_float, 0.7)
    xr_click_sensitivity: float = _opt(_as_float, 0.7)
    xr_alt_click_sensitivity: float = _opt(_as_float, 0.7)
    xr_grab_sensitivity_release: float = _opt(_as_float, 0.5)
    xr_click_sensitivity_release: float = _opt(_as_float, 0.5)
    xr_alt_click_sensitivity_release: float = _opt(_as_float, 0.5)
    allow_sliding: bool = _opt(_as_bool, True)
    realign_on_showhide: bool = _opt(_as_bool, True)
    focus_follows_mouse_mode: bool = _opt(_as_bool, False)
    primary_font: str = _opt(_as_str, "LiberationSans:style=Bold")
    space_drag_multiplier: float = _opt(_as_float, 1.0)
    skybox_texture: str = _opt(_as_str, "")
    use_skybox: bool = _opt(_as_bool, True)
    use_passthrough: bool = _opt(_as_bool, True)
    screen_max_height: int = _opt(_u16, 1440)
    screen_render_down: bool = _opt(_as_bool, True)
    pointer_lerp_factor: float = _opt(_as_float, 0.3)
    space_rotate_unlocked: bool = _opt(_as_bool, False)
    alt_click_down: list[str] = _opt(_as_str_list, factory=list)
    alt_click_up: list[str] = _opt(_as_str_list, factory=list)
    timezones: list[str] = _opt(_as_str_list, factory=default_timezones)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> GeneralConfig:
        """Build a config from parsed data; missing keys take their defaults."""
        if data is None:
            data = {}
        if not isinstance(data, Mapping):
            raise ConfigError(f"Failed to deserialize settings: expected a mapping, got {data!r}")
        values = {
            f.name: f.metadata["convert"](f.name, data[f.name])
            for f in fields(cls)
            if f.name in data
        }
        return cls(**values)

    @classmethod
    def load_from_disk(cls) -> GeneralConfig:
        config = load_general()
        config.post_load()
        return config

    def post_load(self) -> None:
        """Check values that must lie within fixed bounds."""
        sanitize_range("keyboard_scale", self.keyboard_scale, 0.05, 5.0)
        sanitize_range("desktop_view_scale", self.desktop_view_scale, 0.05, 5.0)


def load_known_yaml(config_type: ConfigType, fallback: str) -> Any:
    """Parse the user's override of a known file, else the built-in fallback."""
    file_name = config_type.value
    for text in (config_io.load(file_name), fallback):
        if text is None:
            continue
        try:
            return yaml.safe_load(text)
        except yaml.YAMLError as exc:
            log.error("Failed to parse %s, falling back to defaults.", file_name)
            log.error("%s", exc)
    raise ConfigError("No usable config found.")


def load_custom_ui(name: str) -> Any:
    """Parse <name>.yaml from the config root."""
    filename = f"{name}.yaml"
    text = config_io.load(filename)
    if text is None:
        raise ConfigError(f"Could not read file at {filename}")
    try:
        return yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(str(exc)) from exc


def _read_source(path: Path) -> dict[str, Any]:
    suffix = path.suffix.lower()
    try:
        text = path.read_text(encoding="utf-8")
        if suffix in (".yaml", ".yml"):
            data = yaml.safe_load(text)
        elif suffix in (".json", ".json5"):
            data = json.loads(text)
        else:
            raise ConfigError(f"Failed to build settings: unsupported file format {path}")
    except (OSError, UnicodeDecodeError, yaml.YAMLError, json.JSONDecodeError) as exc:
        raise ConfigError(f"Failed to build settings: {path}: {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Failed to build settings: {path} does not hold a mapping")
    return data


def _deep_merge(target: dict[str, Any], source: Mapping[str, Any]) -> None:
    for key, value in source.items():
        current = target.get(key)
        if isinstance(current, dict) and isinstance(value, Mapping):
            _deep_merge(current, value)
        elif isinstance(value, Mapping):
            target[key] = {}
            _deep_merge(target[key], value)
        else:
            target[key] = value


def load_general() -> GeneralConfig:
    """Merge config.yaml files and every conf.d entry, later files winning."""
    conf_d = config_io.conf_d_path()
    sources = [
        path
        for path in (config_io.config_root() / "config.yaml", conf_d / "config.yaml")
        if path.exists()
    ]
    try:
        sources.extend(sorted(conf_d.iterdir(), key=lambda p: p.name))
    except OSError:
        pass

    merged: dict[str, Any] = {}
    for path in sources:
        log.info("Loading config file: %s", path)
        _deep_merge(merged, _read_source(path))
    return GeneralConfig.from_mapping(merged)


def save_settings(config: GeneralConfig) -> Path:
    """Write the settings-panel values into conf.d and return the file path."""
    settings = {
        "watch_pos": list(config.watch_pos),
        "watch_rot": list(config.watch_rot),
        "watch_hand": config.watch_hand.value,
        "watch_view_angle_min": config.watch_view_angle_min,
        "watch_view_angle_max": config.watch_view_angle_max,
        "notifications_enabled": config.notifications_enabled,
        "notifications_sound_enabled": config.notifications_sound_enabled,
        "realign_on_showhide": config.realign_on_showhide,
        "allow_sliding": config.allow_sliding,
        "space_drag_multiplier": config.space_drag_multiplier,
    }
    path = config_io.conf_d_path() / SETTINGS_FILE
    path.write_text(json.dumps(settings, indent=2), encoding="utf-8")
    return path


def save_layout(config: GeneralConfig) -> Path:
    """Write overlay visibility, curvature and transforms into conf.d."""
    state = {
        "show_screens": list(config.show_screens),
        "curve_values": [[name, value] for name, value in config.curve_values.items()],
        "transform_values": [
            [name, list(values)] for name, values in config.transform_values.items()
        ],
    }
    path = config_io.conf_d_path() / STATE_FILE
    path.write_text(json.dumps(state, indent=2), encoding="utf-8")
    return path