[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "itpengine"
version = "0.1.0"
description = "Core pieces of a small 3D game engine: vector and matrix math, asset caching, mesh and level loading, and point lighting."
requires-python = ">=3.10"
dependencies = []
keywords = ["game engine", "3d", "matrix", "vector", "mesh", "lighting"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Games/Entertainment",
    "Topic :: Multimedia :: Graphics :: 3D Rendering",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["itpengine"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
