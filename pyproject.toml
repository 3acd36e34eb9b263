[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "asciishooter"
version = "0.1.0"
description = "Terminal ray-casting first person shooter with a small console game engine"
requires-python = ">=3.10"
dependencies = [
    "blessed",
]
keywords = ["raycaster", "terminal", "game", "ascii", "fps", "console"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
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

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
asciishooter-classic = "asciishooter.classic:main"
asciishooter = "asciishooter.fps:main"

[tool.hatch.build.targets.wheel]
packages = ["asciishooter"]

[tool.pytest.ini_options]
addopts = "-ra"
