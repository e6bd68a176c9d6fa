[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "wadkit"
version = "0.1.0"
description = "Read classic IWAD archives: lumps, levels, sector lighting, patch images and TOML game metadata."
requires-python = ">=3.11"
dependencies = []
keywords = ["wad", "iwad", "doom", "bsp", "level", "lump", "patch", "game-data"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Games/Entertainment :: First Person Shooters",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["wadkit"]

[tool.hatch.build.targets.sdist]
include = ["wadkit", "tests", "README.md"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
