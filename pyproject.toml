[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "pd2mm"
version = "0.1.0"
description = "Mod manager that unpacks zip mod archives and sorts their files according to JSON configuration files"
requires-python = ">=3.10"
dependencies = [
    "regex",
]
keywords = ["mods", "mod-manager", "games", "archives", "configuration"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Games/Entertainment",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
pd2mm = "pd2mm.app:main"
pd2mm-diff = "pd2mm.diff:main"

[tool.hatch.build.targets.wheel]
packages = ["pd2mm"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
