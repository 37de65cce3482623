import pytest

from overlaykit import config_io


@pytest.fixture
def xdg(tmp_path, monkeypatch):
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
    return tmp_path


def test_config_root_uses_xdg_config_home(xdg):
    assert config_io.config_root() == xdg / "wlxoverlay"


def test_config_root_falls_back_to_home(tmp_path, monkeypatch):
    monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
    monkeypatch.setenv("HOME", str(tmp_path))
    assert config_io.config_root() == tmp_path / ".config" / "wlxoverlay"


def test_relative_xdg_config_home_is_ignored(tmp_path, monkeypatch):
    monkeypatch.setenv("XDG_CONFIG_HOME", "relative/dir")
    monkeypatch.setenv("HOME", str(tmp_path))
    assert config_io.config_root() == tmp_path / ".config" / "wlxoverlay"


def test_conf_d_is_inside_root(xdg):
    assert config_io.conf_d_path() == config_io.config_root() / "conf.d"


def test_ensure_config_root_creates_directories(xdg):
    root = config_io.ensure_config_root()
    assert root == config_io.config_root()
    assert root.is_dir()
    assert config_io.conf_d_path().is_dir()


def test_ensure_config_root_is_idempotent(xdg):
    first = config_io.ensure_config_root()
    second = config_io.ensure_config_root()
    assert first == second
    assert second.is_dir()


def test_load_reads_file_from_root(xdg):
    root = config_io.ensure_config_root()
    (root / "watch.yaml").write_text("width: 2\n", encoding="utf-8")
    assert config_io.load("watch.yaml") == "width: 2\n"


def test_load_missing_file_returns_none(xdg):
    config_io.ensure_config_root()
    assert config_io.load("absent.yaml") is None