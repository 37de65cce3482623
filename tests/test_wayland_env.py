import pytest

from overlaykit.wayland_env import (
    ProcessWayVREnv,
    WaylandEnv,
    export_display_number,
    parse_environ,
    read_process_env,
)


def test_default_display_string():
    assert WaylandEnv().display_num_string() == "wayland-20"


def test_display_string_follows_number():
    env = WaylandEnv(display_num=7)
    assert env.display_num_string() == "wayland-7"


def test_parse_environ_bytes():
    data = b"PATH=/bin\0WAYVR_DISPLAY_AUTH=abc\0WAYVR_DISPLAY_NAME=Disp1\0"
    assert parse_environ(data) == ProcessWayVREnv(display_auth="abc", display_name="Disp1")


def test_parse_environ_missing_vars():
    assert parse_environ("HOME=/root\0SHELL=/bin/sh") == ProcessWayVREnv()


def test_parse_environ_keeps_equals_in_value():
    env = parse_environ("WAYVR_DISPLAY_AUTH=a=b=c\0")
    assert env.display_auth == "a=b=c"
    assert env.display_name is None


def test_parse_environ_ignores_entries_without_separator():
    env = parse_environ("WAYVR_DISPLAY_NAME\0\0WAYVR_DISPLAY_NAME=x")
    assert env.display_name == "x"


def test_parse_environ_last_value_wins():
    env = parse_environ("WAYVR_DISPLAY_AUTH=first\0WAYVR_DISPLAY_AUTH=second")
    assert env.display_auth == "second"


def test_parse_environ_rejects_bad_utf8():
    with pytest.raises(UnicodeDecodeError):
        parse_environ(b"WAYVR_DISPLAY_AUTH=\xff\xfe")


def test_read_process_env_missing_pid():
    with pytest.raises(OSError):
        read_process_env(0)


def test_export_display_number(tmp_path, monkeypatch):
    monkeypatch.setenv("XDG_RUNTIME_DIR", str(tmp_path))
    path = export_display_number(21)
    assert path == tmp_path / "wayvr.disp"
    assert path.read_text() == "21\n"


def test_export_display_number_overwrites(tmp_path, monkeypatch):
    monkeypatch.setenv("XDG_RUNTIME_DIR", str(tmp_path))
    export_display_number(20)
    path = export_display_number(25)
    assert int(path.read_text()) == 25