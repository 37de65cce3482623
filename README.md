# overlaykit

Configuration handling, display layout and process bookkeeping for a VR
desktop overlay that hosts ordinary Wayland applications on virtual displays.

## Modules

- `overlaykit.config_io` finds the configuration root with `config_root()`.
  The root is `$XDG_CONFIG_HOME/wlxoverlay` when that variable holds an
  absolute path. Otherwise it is `~/.config/wlxoverlay`, and
  `/tmp/wlxoverlay` when no home directory can be found. The module also
  provides `conf_d_path()` for the drop-in directory, `ensure_config_root()`
  to create both directories, and `load(filename)`, which returns a file's
  text or `None`.
- `overlaykit.config` holds the general settings:
  - `GeneralConfig` is a dataclass with a default for every field.
    `GeneralConfig.from_mapping(data)` checks the type of each value and
    raises `ConfigError` on bad input.
  - `load_general()` merges the configuration files. It reads `config.yaml`
    in the root, then `conf.d/config.yaml`, then every entry of `conf.d` in
    name order. YAML and JSON/JSON5 (parsed as plain JSON) files are
    accepted. Later files override earlier ones and nested mappings are
    merged.
  - `GeneralConfig.load_from_disk()` loads the settings and then checks that
    `keyboard_scale` and `desktop_view_scale` lie between 0.05 and 5.0.
  - `save_settings(config)` writes the settings-panel values to
    `conf.d/zz-saved-config.json5`. `save_layout(config)` writes screens,
    curvature and transforms to `conf.d/zz-saved-state.json5`. Both return
    the path they wrote.
  - `load_known_yaml(config_type, fallback)` parses the user's copy of a
    `ConfigType` file and falls back to the YAML text you pass in.
    `load_custom_ui(name)` parses `<name>.yaml` from the root.
  - `default_timezones(offset_seconds)` picks two clocks far from a UTC
    offset.
- `overlaykit.config_wayvr` holds the compositor settings:
  - `WayVRConfig` describes app catalogs (`WayVRCatalog`, `WayVRAppEntry`)
    and displays (`WayVRDisplay`, `Rotation`, `AttachTo`). Displays are
    sorted by name.
  - `check_primary()` raises `ConfigError` when more than one display is
    primary.
  - `apps_shown_at_start()` yields `(catalog_name, app_name)` pairs.
  - `compositor_config(general)` builds a `CompositorConfig`.
  - `load_wayvr(fallback)` loads `wayvr.yaml` and rejects any version other
    than 1.
- `overlaykit.handle` provides `HandleVec`, a slot container with
  generational `Handle`s. A handle stops resolving once its slot is freed or
  reused.
- `overlaykit.event_queue` provides `SyncEventQueue`, a FIFO queue whose
  `read()` returns `None` when the queue is empty.
- `overlaykit.window` provides `Window` (position, size and hit-testing with
  `contains`) and `WindowManager`.
- `overlaykit.display`:
  - A `Display` tiles its windows in equal-width columns and finds the
    window under the cursor with `hovered_window`.
  - `tick` sends a `DisplayHideRequest` once the display has been empty
    longer than the auto-hide delay, and then runs pending `ProcessCleanup`
    tasks.
  - `Display.spawn_process` starts a program with `WAYLAND_DISPLAY` and a
    fresh `WAYVR_DISPLAY_AUTH` key set and with `DISPLAY` removed. It raises
    `RuntimeError` if the program cannot be started.
  - `MouseIndex` maps mouse buttons to Linux button codes.
- `overlaykit.process` provides `ManagedProcess` (a spawned child, stopped
  with SIGTERM) and `ExternalProcess` (a foreign pid, interrupted with
  SIGINT), plus `find_by_pid`.
- `overlaykit.wayland_env`:
  - `WaylandEnv` names the socket, for example `wayland-20`.
  - `parse_environ` and `read_process_env` pull `WAYVR_DISPLAY_AUTH` and
    `WAYVR_DISPLAY_NAME` out of `/proc/<pid>/environ` data.
  - `export_display_number` writes `wayvr.disp` into `$XDG_RUNTIME_DIR`, or
    into `/tmp` when that variable is unset.
- `overlaykit.wayvr` ties displays, processes and clients together in
  `WayVR`:
  - `new_toplevel` queues a window for its client's display.
  - `tick_events()` marks redraws, removes finished processes, ticks the
    displays and handles queued tasks. It returns the `NewExternalProcess`
    requests that are waiting.
- `overlaykit.dds` provides `dds_to_vk`, which maps a DDS format name or
  enum member to a Vulkan format name and raises `UnsupportedFormatError`
  for any other format.

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Example

```python
from overlaykit.config import GeneralConfig
from overlaykit.config_wayvr import load_wayvr
from overlaykit.wayvr import WayVR

FALLBACK = """
version: 1
run_compositor_at_start: false
catalogs: {}
displays:
  main: {width: 1920, height: 1080, primary: true}
"""

general = GeneralConfig.load_from_disk()
wayvr_config = load_wayvr(FALLBACK)
wayvr_config.check_primary()

core = WayVR(wayvr_config.compositor_config(general))
for name, display in wayvr_config.displays.items():
    core.create_display(display.width, display.height, name, bool(display.primary))

for catalog_name, app_name in wayvr_config.apps_shown_at_start():
    print(catalog_name, app_name)
```

## What it does not do

This package keeps the state and makes the decisions, but it does not run a
Wayland server:

- It does not open or accept connections on the socket. Callers register
  clients with `WayVR.add_client` and report new surfaces with
  `WayVR.new_toplevel`.
- It does not render display contents and does not forward mouse or
  keyboard input to applications.
- It does not upload DDS textures to the GPU. `overlaykit.dds` only maps
  format names.
- It ships no built-in default YAML files. Pass the fallback text to
  `load_known_yaml` and `load_wayvr` yourself.
- `load_custom_ui` returns the parsed YAML as-is.
- There is no command-line program.