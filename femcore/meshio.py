"""Reading and writing meshes in the supported file formats."""

from __future__ import annotations

import io
import os
import struct
from collections.abc import Callable, Iterable, Sequence
from itertools import islice
from pathlib import Path
from typing import TextIO, Union

from femcore.fetype import FEInfo, FEType, fe_code, fe_info, fe_info_by_name
from femcore.mesh import Mesh, MeshError

PathLike = Union[str, "os.PathLike[str]"]

_SIGNATURE = b"NTRout"
_UINT_MAX = 0xFFFFFFFF
_PLATE_OR_SHELL = (
    FEType.FE2D3P,
    FEType.FE2D4P,
    FEType.FE2D6P,
    FEType.FE3D3S,
    FEType.FE3D4S,
    FEType.FE3D6S,
)
_NEEDS_BOUNDARY = (FEType.FE2D3, FEType.FE2D4, FEType.FE3D4, FEType.FE3D8)


class _Cursor:
    """Whitespace-token and line reader over a text stream."""

    def __init__(self, stream: TextIO) -> None:
        self._stream = stream
        self._pending = ""

    def _getc(self) -> str:
        if self._pending:
            c, self._pending = self._pending, ""
            return c
        return self._stream.read(1)

    def next_token(self) -> str | None:
        """The next whitespace-delimited word, or None at the end of the stream."""
        c = self._getc()
        while c and c.isspace():
            c = self._getc()
        if not c:
            return None
        chars = []
        while c and not c.isspace():
            chars.append(c)
            c = self._getc()
        self._pending = c
        return "".join(chars)

    def token(self) -> str:
        word = self.next_token()
        if word is None:
            raise MeshError("unexpected end of mesh data")
        return word

    def line(self) -> str | None:
        """The rest of the current line, or None at the end of the stream."""
        c = self._getc()
        if not c:
            return None
        chars = []
        while c and c != "\n":
            chars.append(c)
            c = self._getc()
        return "".join(chars)

    def integer(self) -> int:
        text = self.token()
        try:
            return int(text)
        except ValueError:
            raise MeshError(f"expected an integer, got {text!r}") from None

    def unsigned(self) -> int:
        return self.integer() & _UINT_MAX

    def real(self) -> float:
        text = self.token()
        try:
            return float(text)
        except ValueError:
            raise MeshError(f"expected a number, got {text!r}") from None

    def reals(self, rows: int, width: int) -> list[list[float]]:
        return [[self.real() for _ in range(width)] for _ in range(rows)]

    def unsigneds(self, rows: int, width: int) -> list[list[int]]:
        return [[self.unsigned() for _ in range(width)] for _ in range(rows)]


def _text_cursor(path: PathLike) -> _Cursor:
    return _Cursor(io.StringIO(Path(path).read_text()))


def _extension(name: str) -> str:
    pos = name.rfind(".")
    if pos < 0:
        raise MeshError(f"undefined file type: {name!r}")
    return name[pos + 1 :].upper()


def _rows(values: Iterable, count: int, width: int) -> list[list]:
    it = iter(values)
    return [list(islice(it, width)) for _ in range(count)]


def _element_info(word: str) -> FEInfo:
    try:
        info = fe_info(int(word))
    except ValueError:
        info = fe_info_by_name(word)
    if info.fe_type is FEType.UNDEFINED:
        raise MeshError(f"unknown element type {word!r}")
    return info


def read_mesh(path: PathLike) -> Mesh:
    """Read a mesh, choosing the format from the file extension."""
    name = os.fspath(path)
    ext = _extension(name)
    reader = _READERS.get(ext)
    if reader is None:
        raise MeshError(f"undefined file type: {name!r}")
    mesh = reader(name)
    mesh.create_mesh_map()
    mesh.update_min_max()
    return mesh


def write_mesh(mesh: Mesh, path: PathLike) -> None:
    """Write a mesh as TRP or TRPA, chosen by the file extension."""
    name = os.fspath(path)
    ext = _extension(name)
    if ext == "TRP":
        write_trp(mesh, name)
    elif ext == "TRPA":
        write_trpa(mesh, name)
    else:
        raise MeshError(f"undefined file type: {name!r}")


class _Binary:
    """Sequential little-endian reader over a byte string."""

    def __init__(self, data: bytes, offset: int = 0) -> None:
        self._data = data
        self._offset = offset

    def take(self, code: str, count: int) -> tuple:
        fmt = f"<{count}{code}"
        size = struct.calcsize(fmt)
        if self._offset + size > len(self._data):
            raise MeshError("unexpected end of TRP data")
        values = struct.unpack_from(fmt, self._data, self._offset)
        self._offset += size
        return values


def read_trp(path: PathLike) -> Mesh:
    """Read a binary TRP mesh file."""
    data = Path(path).read_bytes()
    if data[: len(_SIGNATURE)] != _SIGNATURE:
        raise MeshError("not a TRP file")
    reader = _Binary(data, len(_SIGNATURE))
    code, n_be, n_x, _ = reader.take("I", 4)
    info = fe_info(code)
    if info.fe_type is FEType.UNDEFINED:
        raise MeshError(f"unknown element type code {code}")
    x = _rows(reader.take("d", n_x * info.dim), n_x, info.dim)
    (n_fe,) = reader.take("I", 1)
    fe = _rows(reader.take("I", n_fe * info.fe_size), n_fe, info.fe_size)
    be = _rows(reader.take("I", n_be * info.be_size), n_be, info.be_size)
    return Mesh(fe_type=info.fe_type, x=x, fe=fe, be=be)


def write_trp(mesh: Mesh, path: PathLike) -> None:
    """Write a mesh as a binary TRP file."""
    parts = [
        _SIGNATURE,
        struct.pack("<4I", fe_code(mesh.fe_type), mesh.num_be(), mesh.num_vertex(), mesh.num_vertex()),
    ]
    parts += [struct.pack(f"<{len(row)}d", *row) for row in mesh.x]
    parts.append(struct.pack("<I", mesh.num_fe()))
    parts += [struct.pack(f"<{len(row)}I", *(v & _UINT_MAX for v in row)) for row in mesh.fe]
    parts += [struct.pack(f"<{len(row)}I", *(v & _UINT_MAX for v in row)) for row in mesh.be]
    Path(path).write_bytes(b"".join(parts))


def read_trpa(path: PathLike) -> Mesh:
    """Read a text TRPA mesh file; the element type may be a code or a name."""
    cursor = _text_cursor(path)
    info = _element_info(cursor.token())
    if not 1 <= info.dim <= 3:
        raise MeshError("invalid element dimension")
    n_x = cursor.unsigned()
    if n_x == 0:
        raise MeshError("mesh has no vertices")
    x = cursor.reals(n_x, info.dim)
    n_fe = cursor.unsigned()
    if n_fe == 0:
        raise MeshError("mesh has no elements")
    fe = cursor.unsigneds(n_fe, info.fe_size)
    n_be = cursor.unsigned()
    if n_be == 0 and info.fe_type in _NEEDS_BOUNDARY:
        raise MeshError("mesh has no boundary elements")
    if info.fe_type in _PLATE_OR_SHELL:
        be = [list(row) for row in fe]
    else:
        be = cursor.unsigneds(n_be, info.be_size)
    return Mesh(fe_type=info.fe_type, x=x, fe=fe, be=be)


def _format_rows(rows: Sequence[Sequence[float]], fmt: Callable[[float], str]) -> list[str]:
    return ["".join(f"{fmt(v)} " for v in row) for row in rows]


def _real6(value: float) -> str:
    return format(value, "g")


def _real16(value: float) -> str:
    return format(value, ".16g")


def write_trpa(mesh: Mesh, path: PathLike) -> None:
    """Write a mesh as a text TRPA file."""
    lines = [str(fe_code(mesh.fe_type)), str(mesh.num_vertex())]
    lines += _format_rows(mesh.x, _real6)
    lines.append(str(mesh.num_fe()))
    lines += _format_rows(mesh.fe, str)
    lines.append(str(mesh.num_be()))
    lines += _format_rows(mesh.be, str)
    Path(path).write_text("\n".join(lines) + "\n")


def _skip_to_line(cursor: _Cursor, header: str) -> None:
    while True:
        text = cursor.line()
        if text is None:
            raise MeshError(f"section {header!r} not found")
        if text.rstrip("\r") == header:
            return


def read_vol(path: PathLike) -> Mesh:
    """Read a NETGEN volume mesh (linear tetrahedra)."""
    cursor = _text_cursor(path)

    _skip_to_line(cursor, "surfaceelements")
    be = []
    for _ in range(cursor.unsigned()):
        row = cursor.unsigneds(1, 8)[0]
        be.append([v - 1 for v in row[5:]])

    _skip_to_line(cursor, "volumeelements")
    fe = []
    for _ in range(cursor.unsigned()):
        row = cursor.unsigneds(1, 6)[0]
        fe.append([v - 1 for v in row[2:]])

    _skip_to_line(cursor, "points")
    x = cursor.reals(cursor.unsigned(), 3)
    return Mesh(fe_type=FEType.FE3D4, x=x, fe=fe, be=be)


def _attach_face(row: list[int], v1: int, v2: int) -> None:
    if row[0] == _UINT_MAX:
        row[0], row[1] = v1, v2
        return
    if v1 in (row[0], row[1]):
        v1 = _UINT_MAX
    if v2 in (row[0], row[1]):
        v2 = _UINT_MAX
    if v1 != _UINT_MAX:
        row[2] = v1
    if v2 != _UINT_MAX:
        row[2] = v2


def read_grummp(path: PathLike) -> Mesh:
    """Read a GRUMMP two-dimensional triangular mesh (.mesh)."""
    cursor = _text_cursor(path)
    n_fe = cursor.unsigned()
    n_inner = cursor.unsigned()
    n_boundary = cursor.unsigned()
    n_x = cursor.unsigned()
    x = cursor.reals(n_x, 2)
    faces = cursor.unsigneds(n_inner + n_boundary, 4)
    be = [row[2:4] for row in faces[n_inner:]]

    fe = [[_UINT_MAX] * 3 for _ in range(n_fe)]
    for cell, v1, v2 in ((row[0], row[2], row[3]) for row in faces[:n_inner]):
        if cell >= n_fe:
            continue
        _attach_face(fe[cell], v1, v2)
    for cell, v1, v2 in ((row[1], row[2], row[3]) for row in faces[:n_inner]):
        if cell == _UINT_MAX:
            continue
        if cell >= n_fe:
            raise MeshError(f"face refers to missing element {cell}")
        _attach_face(fe[cell], v1, v2)
    return Mesh(fe_type=FEType.FE2D3, x=x, fe=fe, be=be)


def _expect(cursor: _Cursor, word: str) -> None:
    found = cursor.next_token()
    if found != word:
        raise MeshError(f"expected {word!r}, found {found!r}")


def read_msh(path: PathLike) -> Mesh:
    """Read a Gmsh 4 mesh of triangles and tetrahedra.

    Node coordinates are kept in three components; a file holding only
    triangles off the plane z = 0 is read as a triangular shell.
    """
    cursor = _text_cursor(path)
    _expect(cursor, "$MeshFormat")
    while True:
        word = cursor.next_token()
        if word is None:
            raise MeshError("section '$Nodes' not found")
        if word == "$Nodes":
            break

    is2d = True
    tx: list[list[float]] = []
    num_entities = cursor.integer()
    for _ in range(3):
        cursor.integer()
    for _ in range(num_entities):
        for _ in range(3):
            cursor.integer()
        count = cursor.integer()
        for _ in range(count):
            cursor.token()
        for point in cursor.reals(count, 3):
            if point[2] > 1.0e-6:
                is2d = False
            tx.append(point)
    _expect(cursor, "$EndNodes")
    _expect(cursor, "$Elements")

    tfe: list[list[int]] = []
    tbe: list[list[int]] = []
    num_entities = cursor.integer()
    cursor.integer()
    min_tag = cursor.integer()
    cursor.integer()
    for _ in range(num_entities):
        dim = cursor.integer()
        cursor.integer()
        elm_type = cursor.integer()
        count = cursor.integer()
        cursor.line()
        for _ in range(count):
            text = cursor.line()
            if text is None:
                raise MeshError("unexpected end of element data")
            if dim == 0 or (dim == 1 and not is2d):
                continue
            try:
                elm = [int(word) - min_tag for word in text.split()[1:]]
            except ValueError:
                raise MeshError(f"malformed element line {text!r}") from None
            if elm_type == 1:
                if is2d:
                    tbe.append(elm)
            elif elm_type == 2:
                (tfe if is2d else tbe).append(elm)
            elif elm_type == 4:
                if is2d:
                    raise MeshError("tetrahedron in a planar mesh")
                tfe.append(elm)
            else:
                raise MeshError(f"unsupported element type {elm_type}")
    _expect(cursor, "$EndElements")

    fe_type = FEType.FE3D4
    if not tfe:
        tfe = tbe
        fe_type = FEType.FE3D3S
    if not tfe or not tbe:
        raise MeshError("mesh has no elements")
    fe_width = len(tfe[0])
    be_width = len(tbe[0])
    return Mesh(
        fe_type=fe_type,
        x=tx,
        fe=[list(row[:fe_width]) for row in tfe],
        be=[list(row[:be_width]) for row in tbe],
    )


def read_tetgen(path: PathLike) -> Mesh:
    """Read a TetGen mesh from the .node, .ele and .face files sharing a base name."""
    name = os.fspath(path)
    base = name[: name.rfind(".")] if "." in name else name

    cursor = _text_cursor(base + ".node")
    num = cursor.integer()
    for _ in range(3):
        cursor.integer()
    if num == 0:
        raise MeshError("no nodes in .node file")
    x = []
    for _ in range(num):
        cursor.integer()
        x.append([cursor.real() for _ in range(3)])

    cursor = _text_cursor(base + ".ele")
    num = cursor.integer()
    cursor.integer()
    cursor.integer()
    if num == 0:
        raise MeshError("no elements in .ele file")
    fe = []
    for _ in range(num):
        cursor.integer()
        fe.append([cursor.integer() - 1 for _ in range(4)])

    cursor = _text_cursor(base + ".face")
    num = cursor.integer()
    cursor.integer()
    if num == 0:
        raise MeshError("no faces in .face file")
    be = []
    for _ in range(num):
        cursor.integer()
        be.append([cursor.integer() - 1 for _ in range(3)])
        cursor.integer()
    return Mesh(fe_type=FEType.FE3D4, x=x, fe=fe, be=be)


def write_block(mesh: Mesh, out: TextIO) -> None:
    """Write a mesh as the text block used inside result files."""
    lines = ["Mesh", str(fe_code(mesh.fe_type)), str(mesh.num_vertex())]
    lines += _format_rows(mesh.x, _real16)
    lines.append(str(mesh.num_fe()))
    lines += _format_rows(mesh.fe, str)
    if mesh.fe_type in _PLATE_OR_SHELL:
        lines.append("0")
    else:
        lines.append(str(mesh.num_be()))
        lines += _format_rows(mesh.be, str)
    out.write("\n".join(lines) + "\n")


def read_block(stream: TextIO) -> Mesh:
    """Read a mesh block written by :func:`write_block`.

    The whitespace character ending the block is consumed.
    """
    cursor = _Cursor(stream)
    cursor.token()
    info = _element_info(cursor.token())
    x = cursor.reals(cursor.unsigned(), info.dim)
    fe = cursor.unsigneds(cursor.unsigned(), info.fe_size)
    n_be = cursor.unsigned()
    if info.fe_type in _PLATE_OR_SHELL:
        be = [list(row) for row in fe]
    else:
        be = cursor.unsigneds(n_be, info.be_size)
    mesh = Mesh(fe_type=info.fe_type, x=x, fe=fe, be=be)
    if x:
        mesh.update_min_max()
    return mesh


_READERS: dict[str, Callable[[str], Mesh]] = {
    "TRP": read_trp,
    "TRPA": read_trpa,
    "VOL": read_vol,
    "MESH": read_grummp,
    "MSH": read_msh,
    "NODE": read_tetgen,
    "ELE": read_tetgen,
    "FACE": read_tetgen,
}