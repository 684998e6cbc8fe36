[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "cubengine"
version = "0.1.0"
description = "A grid-based raycasting first-person game driven by .cub scene files"
requires-python = ">=3.10"
keywords = ["raycasting", "game", "first-person", "cub", "pygame", "maze", "dda"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Games/Entertainment :: First Person Shooters",
]
dependencies = [
    "numpy",
    "pillow",
    "pygame",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
cubengine = "cubengine.game:main"

[tool.hatch.build.targets.wheel]
packages = ["cubengine"]

[tool.pytest.ini_options]
addopts = "-ra"
