"""Finite element kinds, their numeric file codes and their sizes."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class FEType(Enum):
    """Kinds of finite element a mesh can be made of."""

    UNDEFINED = "undefined"
    FE1D2 = "fe1d2"
    FE2D3 = "fe2d3"
    FE2D4 = "fe2d4"
    FE2D6 = "fe2d6"
    FE2D3P = "fe2d3p"
    FE2D4P = "fe2d4p"
    FE2D6P = "fe2d6p"
    FE3D4 = "fe3d4"
    FE3D8 = "fe3d8"
    FE3D10 = "fe3d10"
    FE3D3S = "fe3d3s"
    FE3D4S = "fe3d4s"
    FE3D6S = "fe3d6s"


@dataclass(frozen=True)
class FEInfo:
    """Element kind with its boundary element size, node count and dimension."""

    fe_type: FEType
    be_size: int
    fe_size: int
    dim: int


_UNDEFINED_INFO = FEInfo(FEType.UNDEFINED, 0, 0, 0)

_BY_CODE: dict[int, FEInfo] = {
    3: FEInfo(FEType.FE2D3, 2, 3, 2),
    4: FEInfo(FEType.FE3D4, 3, 4, 3),
    6: FEInfo(FEType.FE2D6, 3, 6, 2),
    8: FEInfo(FEType.FE3D8, 4, 8, 3),
    10: FEInfo(FEType.FE3D10, 6, 10, 3),
    24: FEInfo(FEType.FE2D4, 2, 4, 2),
    34: FEInfo(FEType.FE1D2, 1, 2, 1),
    123: FEInfo(FEType.FE2D3P, 0, 3, 2),
    124: FEInfo(FEType.FE2D4P, 0, 4, 2),
    125: FEInfo(FEType.FE2D6P, 0, 6, 2),
    223: FEInfo(FEType.FE3D3S, 0, 3, 3),
    224: FEInfo(FEType.FE3D4S, 0, 4, 3),
    225: FEInfo(FEType.FE3D6S, 0, 6, 3),
}

_CODES: dict[FEType, int] = {info.fe_type: code for code, info in _BY_CODE.items()}

_BY_NAME: dict[str, FEInfo] = {
    info.fe_type.value: info for info in _BY_CODE.values()
}
# Files naming "fe3d10" have always been loaded with the eight-node type tag.
_BY_NAME["fe3d10"] = FEInfo(FEType.FE3D8, 6, 10, 3)

_NAMES: dict[FEType, str] = {
    FEType.UNDEFINED: "undefined",
    FEType.FE1D2: "linear one-dimensional element (2 nodes)",
    FEType.FE2D3: "linear triangular element (3 nodes)",
    FEType.FE2D4: "bilinear quadrilateral element (4 nodes)",
    FEType.FE2D6: "quadratic triangular element (6 nodes)",
    FEType.FE2D3P: "linear triangular plate element (3 nodes)",
    FEType.FE2D4P: "bilinear quadrilateral plate element (4 nodes)",
    FEType.FE2D6P: "quadratic triangular plate element (6 nodes)",
    FEType.FE3D4: "linear tetrahedral element (4 nodes)",
    FEType.FE3D8: "trilinear hexahedral element (8 nodes)",
    FEType.FE3D10: "quadratic tetrahedral element (10 nodes)",
    FEType.FE3D3S: "linear triangular shell element (3 nodes)",
    FEType.FE3D4S: "bilinear quadrilateral shell element (4 nodes)",
    FEType.FE3D6S: "quadratic triangular shell element (6 nodes)",
}

_FREEDOM: dict[FEType, int] = {
    FEType.FE1D2: 1,
    FEType.FE2D3: 2,
    FEType.FE2D4: 2,
    FEType.FE2D6: 2,
    FEType.FE2D3P: 3,
    FEType.FE2D4P: 3,
    FEType.FE2D6P: 3,
    FEType.FE3D4: 3,
    FEType.FE3D8: 3,
    FEType.FE3D10: 3,
    FEType.FE3D3S: 6,
    FEType.FE3D4S: 6,
    FEType.FE3D6S: 6,
}


def fe_info(code: int) -> FEInfo:
    """Element data for a numeric file code; undefined with zero sizes if unknown."""
    return _BY_CODE.get(code, _UNDEFINED_INFO)


def fe_info_by_name(name: str) -> FEInfo:
    """Element data for a textual element name; undefined with zero sizes if unknown."""
    return _BY_NAME.get(name, _UNDEFINED_INFO)


def fe_code(fe_type: FEType) -> int:
    """Numeric file code of an element kind, 0 for an undefined kind."""
    return _CODES.get(fe_type, 0)


def fe_name(fe_type: FEType) -> str:
    """Human-readable description of an element kind."""
    return _NAMES[fe_type]


def freedom(fe_type: FEType) -> int:
    """Number of degrees of freedom per node for an element kind."""
    return _FREEDOM.get(fe_type, 0)