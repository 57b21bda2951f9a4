[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "symplace"
version = "0.1.0"
description = "Building blocks for analog placement under symmetry constraints: symmetry groups, skyline contours, adaptive perturbation, a timeout watchdog, problem file I/O and simulated annealing"
requires-python = ">=3.10"
dependencies = []
keywords = ["placement", "analog", "symmetry", "simulated annealing", "floorplanning", "eda"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Science/Research",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Electronic Design Automation (EDA)",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["symplace"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
