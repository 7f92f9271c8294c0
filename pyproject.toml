[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "sbmlsolve"
version = "0.1.0"
description = "Numerical building blocks for simulating biochemical reaction network models: postfix equation evaluation, state updates, error estimates, initial assignments and delays"
requires-python = ">=3.10"
dependencies = []
keywords = ["sbml", "simulation", "ode", "runge-kutta", "systems-biology", "kinetics"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Bio-Informatics",
    "Topic :: Scientific/Engineering :: Mathematics",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["sbmlsolve"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
