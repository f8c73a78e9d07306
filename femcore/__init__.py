"""Finite-element meshes: element types, mesh geometry and mesh file formats."""

__version__ = "0.1.0"
__all__ = ["fetype", "mesh", "meshio"]