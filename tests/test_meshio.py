import io
import struct

import pytest

from femcore.fetype import FEType
from femcore.mesh import Mesh, MeshError
from femcore.meshio import (
    read_block,
    read_grummp,
    read_mesh,
    read_msh,
    read_tetgen,
    read_trp,
    read_trpa,
    read_vol,
    write_block,
    write_mesh,
    write_trp,
    write_trpa,
)

TRI_X = [[0.0, 0.0], [1.0, 0.0], [0.0, 1.0], [1.0, 1.0]]
TRI_FE = [[0, 1, 2], [1, 3, 2]]
TRI_BE = [[0, 1], [1, 3], [3, 2], [2, 0]]


def triangle_mesh():
    mesh = Mesh()
    mesh.set_mesh(FEType.FE2D3, TRI_X, TRI_FE, TRI_BE)
    return mesh


def test_trp_round_trip(tmp_path):
    path = tmp_path / "plate.trp"
    write_trp(triangle_mesh(), path)
    mesh = read_trp(path)
    assert mesh.fe_type is FEType.FE2D3
    assert mesh.x == TRI_X
    assert mesh.fe == TRI_FE
    assert mesh.be == TRI_BE


def test_trp_header_bytes(tmp_path):
    path = tmp_path / "plate.trp"
    write_trp(triangle_mesh(), path)
    data = path.read_bytes()
    assert data[:6] == b"NTRout"
    code, n_be, n_x, n_x2 = struct.unpack_from("<4I", data, 6)
    assert code == 3
    assert (n_be, n_x, n_x2) == (len(TRI_BE), len(TRI_X), len(TRI_X))


def test_trp_bad_signature(tmp_path):
    path = tmp_path / "bad.trp"
    path.write_bytes(b"XXXXXX" + bytes(16))
    with pytest.raises(MeshError):
        read_trp(path)


def test_trp_truncated(tmp_path):
    path = tmp_path / "cut.trp"
    write_trp(triangle_mesh(), path)
    path.write_bytes(path.read_bytes()[:-3])
    with pytest.raises(MeshError):
        read_trp(path)


def test_trpa_round_trip(tmp_path):
    path = tmp_path / "plate.trpa"
    write_trpa(triangle_mesh(), path)
    assert path.read_text().splitlines()[0] == "3"
    mesh = read_trpa(path)
    assert mesh.fe_type is FEType.FE2D3
    assert mesh.x == TRI_X
    assert mesh.fe == TRI_FE
    assert mesh.be == TRI_BE


def test_trpa_type_by_name_and_plate_copies_elements(tmp_path):
    path = tmp_path / "p.trpa"
    path.write_text("fe2d3p\n3\n0 0\n1 0\n0 1\n1\n0 1 2\n0\n")
    mesh = read_trpa(path)
    assert mesh.fe_type is FEType.FE2D3P
    assert mesh.be == mesh.fe == [[0, 1, 2]]


def test_trpa_missing_boundary_is_error(tmp_path):
    path = tmp_path / "p.trpa"
    path.write_text("3\n3\n0 0\n1 0\n0 1\n1\n0 1 2\n0\n")
    with pytest.raises(MeshError):
        read_trpa(path)


def test_trpa_unknown_type(tmp_path):
    path = tmp_path / "p.trpa"
    path.write_text("fe9d9\n1\n0 0\n")
    with pytest.raises(MeshError):
        read_trpa(path)


def test_read_mesh_builds_map_and_bounds(tmp_path):
    path = tmp_path / "plate.TRPA"
    write_trpa(triangle_mesh(), path)
    mesh = read_mesh(path)
    assert mesh.mesh_map == triangle_mesh().mesh_map
    assert mesh.min_x == [0.0, 0.0, 0.0]
    assert mesh.max_x == [1.0, 1.0, 0.0]


def test_unknown_extension_errors(tmp_path):
    with pytest.raises(MeshError):
        read_mesh(tmp_path / "mesh.xyz")
    with pytest.raises(MeshError):
        write_mesh(triangle_mesh(), tmp_path / "mesh.xyz")
    with pytest.raises(MeshError):
        read_mesh("noextension")


def test_write_mesh_dispatch(tmp_path):
    path = tmp_path / "m.trp"
    write_mesh(triangle_mesh(), path)
    assert read_mesh(path).fe == TRI_FE


VOL_TEXT = """mesh3d
dimension
3
surfaceelements
1
1 1 0 0 3 1 2 3
volumeelements
1
1 4 1 2 3 4
points
4
0 0 0
1 0 0
0 1 0
0 0 1
"""


def test_read_vol(tmp_path):
    path = tmp_path / "cube.vol"
    path.write_text(VOL_TEXT)
    mesh = read_vol(path)
    assert mesh.fe_type is FEType.FE3D4
    assert mesh.be == [[0, 1, 2]]
    assert mesh.fe == [[0, 1, 2, 3]]
    assert mesh.x[3] == [0.0, 0.0, 1.0]


def test_read_vol_missing_section(tmp_path):
    path = tmp_path / "cube.vol"
    path.write_text("mesh3d\nsurfaceelements\n0\n")
    with pytest.raises(MeshError):
        read_vol(path)


GRUMMP_TEXT = """1 3 3 3
0 0
1 0
0 1
0 -1 0 1
0 -1 1 2
0 -1 2 0
0 -1 0 1
0 -1 1 2
0 -1 2 0
"""


def test_read_grummp(tmp_path):
    path = tmp_path / "tri.mesh"
    path.write_text(GRUMMP_TEXT)
    mesh = read_mesh(path)
    assert mesh.fe_type is FEType.FE2D3
    assert mesh.fe == [[0, 1, 2]]
    assert mesh.be == [[0, 1], [1, 2], [2, 0]]
    assert read_grummp(path).x == [[0.0, 0.0], [1.0, 0.0], [0.0, 1.0]]


MSH_TEXT = """$MeshFormat
4.1 0 8
$EndMeshFormat
$Nodes
1 4 1 4
3 1 0 4
1
2
3
4
0 0 0
1 0 0
0 1 0
0 0 1
$EndNodes
$Elements
2 2 1 2
2 1 2 1
1 1 2 3
3 1 4 1
2 1 2 3 4
$EndElements
"""

MSH_SHELL = """$MeshFormat
4.1 0 8
$EndMeshFormat
$Nodes
1 3 1 3
2 1 0 3
1
2
3
0 0 1
1 0 1
0 1 1
$EndNodes
$Elements
1 1 1 1
2 1 2 1
1 1 2 3
$EndElements
"""


def test_read_msh_tetrahedra(tmp_path):
    path = tmp_path / "tet.msh"
    path.write_text(MSH_TEXT)
    mesh = read_msh(path)
    assert mesh.fe_type is FEType.FE3D4
    assert mesh.fe == [[0, 1, 2, 3]]
    assert mesh.be == [[0, 1, 2]]
    assert len(mesh.x) == 4


def test_read_msh_shell(tmp_path):
    path = tmp_path / "shell.msh"
    path.write_text(MSH_SHELL)
    mesh = read_msh(path)
    assert mesh.fe_type is FEType.FE3D3S
    assert mesh.fe == mesh.be == [[0, 1, 2]]


def test_read_msh_bad_header(tmp_path):
    path = tmp_path / "bad.msh"
    path.write_text("$Other\n")
    with pytest.raises(MeshError):
        read_msh(path)


def write_tetgen(tmp_path):
    (tmp_path / "box.node").write_text("4 3 0 0\n1 0 0 0\n2 1 0 0\n3 0 1 0\n4 0 0 1\n")
    (tmp_path / "box.ele").write_text("1 4 0\n1 1 2 3 4\n")
    (tmp_path / "box.face").write_text("1 1\n1 1 2 3 -1\n")


def test_read_tetgen(tmp_path):
    write_tetgen(tmp_path)
    mesh = read_tetgen(tmp_path / "box.node")
    assert mesh.fe_type is FEType.FE3D4
    assert mesh.fe == [[0, 1, 2, 3]]
    assert mesh.be == [[0, 1, 2]]
    via_ele = read_mesh(tmp_path / "box.ele")
    assert via_ele.min_x == [0.0, 0.0, 0.0]
    assert via_ele.max_x == [1.0, 1.0, 1.0]


def test_read_tetgen_empty_nodes(tmp_path):
    write_tetgen(tmp_path)
    (tmp_path / "box.node").write_text("0 3 0 0\n")
    with pytest.raises(MeshError):
        read_tetgen(tmp_path / "box.face")


def test_block_round_trip_keeps_following_data():
    out = io.StringIO()
    write_block(triangle_mesh(), out)
    out.write("next\n")
    assert out.getvalue().startswith("Mesh\n")
    stream = io.StringIO(out.getvalue())
    mesh = read_block(stream)
    assert mesh.fe_type is FEType.FE2D3
    assert mesh.x == TRI_X
    assert mesh.fe == TRI_FE
    assert mesh.be == TRI_BE
    assert stream.read().strip() == "next"


def test_block_shell_writes_no_boundary():
    mesh = Mesh()
    mesh.set_mesh(FEType.FE3D3S, [[0, 0, 1], [1, 0, 1], [0, 1, 1]], [[0, 1, 2]], [[0, 1, 2]])
    out = io.StringIO()
    write_block(mesh, out)
    assert out.getvalue().splitlines()[-1] == "0"
    back = read_block(io.StringIO(out.getvalue()))
    assert back.fe_type is FEType.FE3D3S
    assert back.be == back.fe == [[0, 1, 2]]


def test_block_truncated():
    with pytest.raises(MeshError):
        read_block(io.StringIO("Mesh\n3\n3\n0 0\n"))