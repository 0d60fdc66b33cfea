[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "listadversary"
version = "0.1.0"
description = "Adversary game graphs, potentials and lower-bound search for the list update problem"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "list update",
    "online algorithms",
    "competitive analysis",
    "work functions",
    "lower bounds",
    "game graph",
    "bellman-ford",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Science/Research",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Scientific/Engineering :: Mathematics",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["listadversary"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
