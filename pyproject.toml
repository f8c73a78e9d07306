[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "femcore"
version = "0.1.0"
description = "Finite-element meshes: element types, geometry and mesh file formats"
requires-python = ">=3.10"
dependencies = []
keywords = ["finite element", "mesh", "FEM", "gmsh", "netgen", "tetgen", "grummp"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Science/Research",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Scientific/Engineering :: Physics",
    "Topic :: Scientific/Engineering :: Mathematics",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["femcore"]

[tool.pytest.ini_options]
addopts = "-ra"
