[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "overlaykit"
version = "0.1.0"
description = "Configuration, display layout and process bookkeeping for a VR desktop overlay compositor"
requires-python = ">=3.10"
keywords = ["vr", "overlay", "wayland", "compositor", "configuration"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: POSIX :: Linux",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Desktop Environment",
]
dependencies = [
    "pyyaml",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["overlaykit"]

[tool.pytest.ini_options]
addopts = "-ra"
