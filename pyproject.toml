[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "neta"
version = "0.1.0"
description = "A reference-image board: arrange, resize, rotate and auto-pack image frames on an endless canvas"
requires-python = ">=3.10"
keywords = ["moodboard", "reference", "images", "canvas", "packing", "viewer"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: X11 Applications",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Graphics :: Viewers",
]
dependencies = [
    "pygame",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
neta = "neta.app:main"

[tool.hatch.build.targets.wheel]
packages = ["neta"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
