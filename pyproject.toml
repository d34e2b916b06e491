[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "treasure_hunt"
version = "0.1.0"
description = "Treasure hunts stored on disk, with a manager, a score calculator, a background monitor and an interactive hub."
requires-python = ">=3.10"
dependencies = []
keywords = ["treasure hunt", "game", "command line", "scores"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Games/Entertainment",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
treasure-manager = "treasure_hunt.manager:main"
treasure-calculator = "treasure_hunt.scores:main"
treasure-monitor = "treasure_hunt.monitor:main"
treasure-hub = "treasure_hunt.hub:main"

[tool.hatch.build.targets.wheel]
packages = ["treasure_hunt"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]
