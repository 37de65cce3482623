import logging

import pytest

from overlaykit.config import ConfigError, GeneralConfig
from overlaykit.config_wayvr import (
    AttachTo,
    Rotation,
    WayVRConfig,
    load_wayvr,
)


def sample(**overrides):
    data = {
        "version": 1,
        "run_compositor_at_start": False,
        "catalogs": {
            "default_catalog": {
                "apps": [
                    {
                        "name": "Terminal",
                        "target_display": "Disp1",
                        "exec": "term",
                        "args": "-e sh",
                        "env": ["FOO=bar"],
                        "shown_at_start": True,
                    },
                    {"name": "Editor", "target_display": "Disp2", "exec": "edit"},
                ]
            }
        },
        "displays": {
            "Watch": {"width": 400, "height": 600, "attach_to": "HandRight"},
            "Disp2": {"width": 640, "height": 480, "primary": False},
            "Disp1": {
                "width": 1280,
                "height": 720,
                "scale": 1.25,
                "pos": [0, 1, -0.5],
                "rotation": {"axis": [0, 1, 0], "angle": 45},
                "primary": True,
            },
        },
    }
    data.update(overrides)
    return data


FALLBACK = """
version: 1
run_compositor_at_start: false
catalogs: {}
displays:
  Main:
    width: 800
    height: 600
    primary: true
"""


def test_defaults_from_source():
    config = WayVRConfig.from_mapping(sample())
    assert config.auto_hide is True
    assert config.auto_hide_delay == 750
    assert config.keyboard_repeat_delay == 200
    assert config.keyboard_repeat_rate == 50


def test_displays_sorted_by_name():
    config = WayVRConfig.from_mapping(sample())
    assert list(config.displays) == sorted(config.displays)


def test_display_fields_parsed():
    config = WayVRConfig.from_mapping(sample())
    disp = config.get_display("Disp1")
    assert disp.width == 1280
    assert disp.pos == (0.0, 1.0, -0.5)
    assert disp.rotation == Rotation(axis=(0.0, 1.0, 0.0), angle=45.0)
    assert config.get_display("Watch").attach_to is AttachTo.HAND_RIGHT
    assert config.get_display("missing") is None


def test_catalog_and_app_lookup():
    config = WayVRConfig.from_mapping(sample())
    catalog = config.get_catalog("default_catalog")
    app = catalog.get_app("Terminal")
    assert app.exec == "term"
    assert app.env == ["FOO=bar"]
    assert catalog.get_app("Editor").shown_at_start is None
    assert catalog.get_app("nope") is None
    assert config.get_catalog("nope") is None


def test_default_display_is_primary():
    config = WayVRConfig.from_mapping(sample())
    name, disp = config.get_default_display()
    assert name == "Disp1"
    assert disp.primary is True


def test_no_default_display_without_primary():
    data = sample(displays={"A": {"width": 1, "height": 1}})
    config = WayVRConfig.from_mapping(data)
    assert config.get_default_display() is None


def test_check_primary_counts_one():
    assert WayVRConfig.from_mapping(sample()).check_primary() == 1


def test_check_primary_rejects_two():
    data = sample(
        displays={
            "A": {"width": 1, "height": 1, "primary": True},
            "B": {"width": 1, "height": 1, "primary": True},
        }
    )
    with pytest.raises(ConfigError, match="more than 1"):
        WayVRConfig.from_mapping(data).check_primary()


def test_check_primary_warns_on_none(caplog):
    config = WayVRConfig.from_mapping(sample(displays={}))
    with caplog.at_level(logging.WARNING):
        assert config.check_primary() == 0
    assert "No primary display specified" in caplog.text


def test_apps_shown_at_start():
    config = WayVRConfig.from_mapping(sample())
    assert list(config.apps_shown_at_start()) == [("default_catalog", "Terminal")]


def test_compositor_config_auto_hide():
    general = GeneralConfig(click_freeze_time_ms=123)
    config = WayVRConfig.from_mapping(sample(keyboard_repeat_rate=33))
    comp = config.compositor_config(general)
    assert comp.click_freeze_time_ms == 123
    assert comp.keyboard_repeat_rate == 33
    assert comp.keyboard_repeat_delay_ms == config.keyboard_repeat_delay
    assert comp.auto_hide_delay == config.auto_hide_delay


def test_compositor_config_auto_hide_disabled():
    config = WayVRConfig.from_mapping(sample(auto_hide=False))
    assert config.compositor_config(GeneralConfig()).auto_hide_delay is None


@pytest.mark.parametrize(
    "data",
    [
        {k: v for k, v in sample().items() if k != "version"},
        sample(displays={"A": {"width": 1}}),
        sample(displays={"A": {"width": 1, "height": 1, "attach_to": "Elbow"}}),
        sample(displays={"A": {"width": -1, "height": 1}}),
        sample(catalogs={"c": {"apps": [{"name": "x", "exec": "y"}]}}),
        [1, 2, 3],
    ],
)
def test_malformed_config_raises(data):
    with pytest.raises(ConfigError):
        WayVRConfig.from_mapping(data)


def test_load_wayvr_uses_fallback(tmp_path, monkeypatch):
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
    config = load_wayvr(FALLBACK)
    assert list(config.displays) == ["Main"]


def test_load_wayvr_prefers_override(tmp_path, monkeypatch):
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
    root = tmp_path / "wlxoverlay"
    root.mkdir()
    (root / "wayvr.yaml").write_text(FALLBACK.replace("Main", "Override"))
    assert list(load_wayvr(FALLBACK).displays) == ["Override"]


def test_load_wayvr_bad_override_falls_back(tmp_path, monkeypatch):
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
    root = tmp_path / "wlxoverlay"
    root.mkdir()
    (root / "wayvr.yaml").write_text("catalogs: {}\n")
    assert list(load_wayvr(FALLBACK).displays) == ["Main"]


def test_load_wayvr_rejects_version(tmp_path, monkeypatch):
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
    with pytest.raises(ConfigError, match="version 2 is not supported"):
        load_wayvr(FALLBACK.replace("version: 1", "version: 2"))