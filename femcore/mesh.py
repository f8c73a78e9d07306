"""Finite element mesh: vertex coordinates, elements, boundary elements and geometry."""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from femcore.fetype import FEType, fe_name as _fe_name, freedom as _freedom


class MeshError(ValueError):
    """A mesh is malformed or an operation on it cannot be carried out."""


_PLATE = (FEType.FE2D3P, FEType.FE2D4P, FEType.FE2D6P)
_SHELL = (FEType.FE3D3S, FEType.FE3D4S, FEType.FE3D6S)

_THIRD = 0.333333333333
_SIXTH_2D = 0.16666666666
_TWO_THIRDS_2D = 0.66666666666
_THIRD_V = 0.33333333333

_SURFACE_SHARE: dict[FEType, list[float]] = {
    FEType.FE1D2: [1.0],
    FEType.FE2D3: [0.5, 0.5],
    FEType.FE2D4: [0.5, 0.5],
    FEType.FE2D6: [_SIXTH_2D, _SIXTH_2D, _TWO_THIRDS_2D],
    FEType.FE2D3P: [_THIRD] * 3,
    FEType.FE3D3S: [_THIRD] * 3,
    FEType.FE3D4: [_THIRD] * 3,
    FEType.FE2D4P: [0.25] * 4,
    FEType.FE3D4S: [0.25] * 4,
    FEType.FE3D8: [0.25] * 4,
    FEType.FE2D6P: [0.0, 0.0, 0.0, _THIRD, _THIRD, _THIRD],
    FEType.FE3D6S: [0.0, 0.0, 0.0, _THIRD, _THIRD, _THIRD],
    FEType.FE3D10: [0.0, 0.0, 0.0, _THIRD, _THIRD, _THIRD],
}

_VOLUME_SHARE: dict[FEType, list[float]] = {
    FEType.FE1D2: [0.5, 0.5],
    FEType.FE2D3: [_THIRD_V] * 3,
    FEType.FE2D3P: [_THIRD_V] * 3,
    FEType.FE3D3S: [_THIRD_V] * 3,
    FEType.FE2D4: [0.25] * 4,
    FEType.FE2D4P: [0.25] * 4,
    FEType.FE3D4S: [0.25] * 4,
    FEType.FE2D6: [0.0, 0.0, 0.0, _THIRD_V, _THIRD_V, _THIRD_V],
    FEType.FE2D6P: [0.0, 0.0, 0.0, _THIRD_V, _THIRD_V, _THIRD_V],
    FEType.FE3D6S: [0.0, 0.0, 0.0, _THIRD_V, _THIRD_V, _THIRD_V],
    FEType.FE3D4: [0.25] * 4,
    FEType.FE3D8: [0.125] * 8,
    FEType.FE3D10: [-0.05] * 4 + [0.2] * 6,
}

_HEX_SPLIT = ((0, 1, 4, 7), (4, 1, 5, 7), (1, 2, 6, 7), (1, 5, 6, 7), (1, 2, 3, 7), (0, 3, 1, 7))

Matrix = list[list[float]]


def _distance(a: Sequence[float], b: Sequence[float]) -> float:
    return math.sqrt(sum((p - q) ** 2 for p, q in zip(a, b)))


def _heron(a: float, b: float, c: float) -> float:
    p = 0.5 * (a + b + c)
    return math.sqrt(max(0.0, p * (p - a) * (p - b) * (p - c)))


def _det3(m: Sequence[Sequence[float]]) -> float:
    return (
        m[0][0] * (m[1][1] * m[2][2] - m[1][2] * m[2][1])
        - m[0][1] * (m[1][0] * m[2][2] - m[1][2] * m[2][0])
        + m[0][2] * (m[1][0] * m[2][1] - m[1][1] * m[2][0])
    )


def _volume1d2(px: Matrix) -> float:
    return abs(px[0][0] - px[1][0])


def _volume2d3(px: Matrix) -> float:
    return _heron(_distance(px[0], px[1]), _distance(px[0], px[2]), _distance(px[2], px[1]))


def _volume2d4(px: Matrix) -> float:
    diagonal = _distance(px[0], px[2])
    first = _heron(_distance(px[0], px[1]), _distance(px[2], px[1]), diagonal)
    return first + _heron(_distance(px[0], px[3]), _distance(px[2], px[3]), diagonal)


def _tetra(p0: Sequence[float], p1: Sequence[float], p2: Sequence[float], p3: Sequence[float]) -> float:
    m = [[q[k] - p0[k] for k in range(3)] for q in (p1, p2, p3)]
    return abs(_det3(m)) / 6


def _volume3d4(px: Matrix) -> float:
    return _tetra(px[0], px[1], px[2], px[3])


def _volume3d8(px: Matrix) -> float:
    return sum(_tetra(px[a], px[b], px[c], px[d]) for a, b, c, d in _HEX_SPLIT)


def _padded(row: Iterable[float]) -> list[float]:
    values = [float(v) for v in row]
    return values + [0.0] * (3 - len(values))


@dataclass
class Mesh:
    """A finite element mesh of one element kind."""

    fe_type: FEType = FEType.UNDEFINED
    x: list[list[float]] = field(default_factory=list)
    fe: list[list[int]] = field(default_factory=list)
    be: list[list[int]] = field(default_factory=list)
    mesh_map: list[list[int]] = field(default_factory=list)
    min_x: list[float] = field(default_factory=lambda: [0.0, 0.0, 0.0])
    max_x: list[float] = field(default_factory=lambda: [0.0, 0.0, 0.0])

    def clear(self) -> None:
        """Drop all mesh data."""
        self.fe_type = FEType.UNDEFINED
        self.x = []
        self.fe = []
        self.be = []
        self.mesh_map = []

    def set_mesh(
        self,
        fe_type: FEType,
        x: Iterable[Sequence[float]],
        fe: Iterable[Sequence[int]],
        be: Iterable[Sequence[int]],
    ) -> None:
        """Replace the mesh with the given data and rebuild derived information."""
        self.clear()
        self.fe_type = fe_type
        self.x = [[float(v) for v in row] for row in x]
        self.fe = [[int(v) for v in row] for row in fe]
        self.be = [[int(v) for v in row] for row in be]
        self.update_min_max()
        self.create_mesh_map()

    def num_vertex(self) -> int:
        return len(self.x)

    def num_fe(self) -> int:
        return len(self.fe)

    def num_be(self) -> int:
        return len(self.be)

    def dimension(self) -> int:
        return len(self.x[0]) if self.x else 0

    def freedom(self) -> int:
        """Degrees of freedom per node."""
        return _freedom(self.fe_type)

    def fe_name(self) -> str:
        return _fe_name(self.fe_type)

    def size_fe(self) -> int:
        return len(self.fe[0]) if self.fe else 0

    def size_be(self) -> int:
        return len(self.be[0]) if self.be else 0

    def base_size_fe(self) -> int:
        """Number of corner nodes of an element."""
        if self.fe_type in (FEType.FE2D6, FEType.FE2D6P, FEType.FE3D6S):
            return 3
        if self.fe_type is FEType.FE3D10:
            return 4
        return self.size_fe()

    def base_size_be(self) -> int:
        """Number of corner nodes of a boundary element."""
        if self.fe_type is FEType.FE2D6:
            return 2
        if self.fe_type in (FEType.FE3D10, FEType.FE2D6P, FEType.FE3D6S):
            return 3
        return self.size_be()

    def is_1d(self) -> bool:
        return self.fe_type is FEType.FE1D2

    def is_2d(self) -> bool:
        return self.fe_type in (FEType.FE2D3, FEType.FE2D4, FEType.FE2D6)

    def is_3d(self) -> bool:
        return self.fe_type in (FEType.FE3D4, FEType.FE3D8, FEType.FE3D10)

    def is_plate(self) -> bool:
        return self.fe_type in _PLATE

    def is_shell(self) -> bool:
        return self.fe_type in _SHELL

    def update_min_max(self) -> None:
        """Recompute the bounding box of the vertices."""
        if not self.x:
            raise MeshError("mesh has no vertices")
        rows = [_padded(row[:3]) for row in self.x]
        columns = list(zip(*rows))
        self.min_x = [min(col) for col in columns]
        self.max_x = [max(col) for col in columns]

    def create_mesh_map(self) -> None:
        """Build, for every vertex, the sorted list of vertices it shares an element with.

        Only neighbours with an index not below the vertex itself are kept.
        """
        links: list[set[int]] = [set() for _ in self.x]
        for element in self.fe:
            for j in element:
                links[j].update(k for k in element if k >= j)
        self.mesh_map = [sorted(s) for s in links]

    def coord_vertex(self, i: int) -> list[float]:
        """Coordinates of a vertex, padded to three components."""
        return _padded(self.x[i])

    def coord_fe(self, index: int) -> Matrix:
        """Coordinates of the nodes of an element, each padded to three components."""
        return [_padded(self.x[n]) for n in self.fe[index]]

    def coord_be(self, index: int) -> Matrix:
        """Coordinates of the nodes of a boundary element, each padded to three components."""
        return [_padded(self.x[n]) for n in self.be[index]]

    def _center(self, nodes: Sequence[int]) -> list[float]:
        dim = self.dimension()
        center = [sum(self.x[n][j] for n in nodes) / len(nodes) for j in range(dim)]
        return _padded(center)

    def center_fe(self, index: int) -> list[float]:
        """Centre of an element's corner nodes."""
        return self._center(self.fe[index][: self.base_size_fe()])

    def center_be(self, index: int) -> list[float]:
        """Centre of a boundary element's corner nodes."""
        return self._center(self.be[index][: self.base_size_be()])

    def normal(self, index: int) -> list[float]:
        """Unit normal of a boundary element."""
        dim = self.dimension()
        if dim == 1:
            return [1.0, 0.0, 0.0]
        if dim == 2 and self.is_plate():
            return [0.0, 0.0, 1.0]
        if dim == 2:
            a, b = (self.x[n] for n in self.be[index][:2])
            v = [a[1] - b[1], b[0] - a[0], 0.0]
        else:
            p0, p1, p2 = (_padded(self.x[n]) for n in self.be[index][:3])
            v = [
                (p1[1] - p0[1]) * (p2[2] - p0[2]) - (p2[1] - p0[1]) * (p1[2] - p0[2]),
                (p2[0] - p0[0]) * (p1[2] - p0[2]) - (p1[0] - p0[0]) * (p2[2] - p0[2]),
                (p1[0] - p0[0]) * (p2[1] - p0[1]) - (p2[0] - p0[0]) * (p1[1] - p0[1]),
            ]
        length = math.sqrt(sum(c * c for c in v))
        if length == 0:
            raise MeshError(f"boundary element {index} is degenerate")
        return [c / length for c in v]

    def surface_load_share(self) -> list[float]:
        """Shares of a surface load taken by the nodes of a boundary element."""
        return list(_SURFACE_SHARE.get(self.fe_type, []))

    def volume_load_share(self) -> list[float]:
        """Shares of a volume load taken by the nodes of an element."""
        return list(_VOLUME_SHARE.get(self.fe_type, []))

    def be_volume(self, index: int) -> float:
        """Length or area of a boundary element."""
        t = self.fe_type
        if t is FEType.FE1D2:
            return 1.0
        coords = self.coord_be(index)
        if t in (FEType.FE2D3, FEType.FE2D4, FEType.FE2D6):
            return _volume1d2(coords)
        if t in (FEType.FE2D3P, FEType.FE3D3S, FEType.FE2D6P, FEType.FE3D6S, FEType.FE3D4, FEType.FE3D10):
            return _volume2d3(coords)
        if t in (FEType.FE2D4P, FEType.FE3D4S, FEType.FE3D8):
            return _volume2d4(coords)
        return 0.0

    def fe_volume(self, index: int) -> float:
        """Length, area or volume of an element."""
        t = self.fe_type
        coords = self.coord_fe(index)
        if t is FEType.FE1D2:
            return _volume1d2(coords)
        if t in (FEType.FE2D3, FEType.FE2D3P, FEType.FE2D6, FEType.FE2D6P, FEType.FE3D3S, FEType.FE3D6S):
            return _volume2d3(coords)
        if t in (FEType.FE2D4, FEType.FE2D4P, FEType.FE3D4S):
            return _volume2d4(coords)
        if t in (FEType.FE3D4, FEType.FE3D10):
            return _volume3d4(coords)
        if t is FEType.FE3D8:
            return _volume3d8(coords)
        return 0.0

    def summary(self) -> str:
        """Short description: element kind, node count and element count."""
        return (
            f"FE type: {self.fe_name()}\n"
            f"Number of nodes: {self.num_vertex()}\n"
            f"Number of FE: {self.num_fe()}\n"
        )