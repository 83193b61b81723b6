[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "mospkit"
version = "0.1.0"
description = "Incremental single- and two-objective shortest path trees on graphs that gain edges"
requires-python = ">=3.10"
dependencies = []
keywords = ["shortest-path", "bellman-ford", "multi-objective", "dynamic-graph", "sosp", "mosp"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Science/Research",
    "Environment :: Console",
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

[project.scripts]
mospkit = "mospkit.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["mospkit"]

[tool.pytest.ini_options]
addopts = "-ra"
