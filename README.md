# femcore

Finite-element meshes for structural analysis: the element types, the mesh
itself with its geometry, and readers and writers for several mesh file
formats. The package has no third-party dependencies.

## Modules

### `femcore.fetype`

`FEType` lists the supported element kinds: `FE1D2`, `FE2D3`, `FE2D4`,
`FE2D6`, the plate elements `FE2D3P`, `FE2D4P`, `FE2D6P`, the solids
`FE3D4`, `FE3D8`, `FE3D10`, the shells `FE3D3S`, `FE3D4S`, `FE3D6S`, and
`UNDEFINED`.

- `fe_info(code)` maps a numeric file code (3, 4, 6, 8, 10, 24, 34, 123,
  124, 125, 223, 224, 225) to an `FEInfo` holding `fe_type`, `be_size`,
  `fe_size` and `dim`; an unknown code gives `UNDEFINED` with zero sizes.
- `fe_info_by_name(name)` does the same for names such as `"fe2d3"`. The
  name `"fe3d10"` yields a ten-node entry tagged `FE3D8`, as mesh files
  have always been loaded.
- `fe_code(fe_type)` gives the numeric code back (0 for `UNDEFINED`).
- `fe_name(fe_type)` gives a readable description.
- `freedom(fe_type)` gives the degrees of freedom per node (1, 2, 3 or 6).

### `femcore.mesh`

`Mesh` is a dataclass with `fe_type`, vertex coordinates `x`, element
connectivity `fe`, boundary element connectivity `be`, the node map
`mesh_map` and the bounding box `min_x` / `max_x`.

- `set_mesh(fe_type, x, fe, be)` replaces the data and rebuilds the bounding
  box and node map; `clear()` drops everything.
- Sizes: `num_vertex()`, `num_fe()`, `num_be()`, `dimension()`,
  `size_fe()`, `size_be()`, and `base_size_fe()` / `base_size_be()` for the
  number of corner nodes of quadratic elements.
- Kind: `is_1d()`, `is_2d()`, `is_3d()`, `is_plate()`, `is_shell()`,
  `freedom()`, `fe_name()`.
- Geometry: `coord_vertex(i)`, `coord_fe(index)`, `coord_be(index)`
  (coordinates padded to three components), `center_fe(index)`,
  `center_be(index)`, `normal(index)` (unit normal of a boundary element),
  `fe_volume(index)` and `be_volume(index)` (length, area or volume).
- Loads: `surface_load_share()` and `volume_load_share()` give the share of
  a load carried by each node of an element.
- `update_min_max()` recomputes the bounding box; `create_mesh_map()`
  lists, for each vertex, the sorted vertices with an index not below its
  own that share an element with it.
- `summary()` returns the element kind, node count and element count.

Errors — no vertices, a degenerate boundary element — are raised as
`MeshError`, a subclass of `ValueError`.

### `femcore.meshio`

- `read_mesh(path)` chooses a reader from the file extension (case does not
  matter) and then builds the node map and bounding box:
  - `.trp` — binary, `read_trp`;
  - `.trpa` — text, `read_trpa`; the element type may be a code or a name;
  - `.vol` — NETGEN, linear tetrahedra, `read_vol`;
  - `.mesh` — GRUMMP two-dimensional triangles, `read_grummp`;
  - `.msh` — Gmsh 4 triangles and tetrahedra, `read_msh`; coordinates are
    kept in three components and a mesh with no tetrahedra is read as a
    triangular shell;
  - `.node`, `.ele`, `.face` — TetGen, `read_tetgen`, which reads all three
    files sharing the base name.
- `write_mesh(mesh, path)` writes `.trp` (`write_trp`) or `.trpa`
  (`write_trpa`). TRPA coordinates are written with six significant digits.
- `write_block(mesh, out)` and `read_block(stream)` store a mesh as a text
  block, with coordinates at sixteen significant digits, inside a larger
  text stream.

Malformed or truncated files, unknown extensions and unknown element types
raise `MeshError`; a file that cannot be opened raises the usual `OSError`.

## Example

```python
from femcore.fetype import FEType
from femcore.mesh import Mesh
from femcore.meshio import read_mesh, write_mesh

mesh = Mesh()
mesh.set_mesh(
    FEType.FE2D3,
    x=[[0.0, 0.0], [1.0, 0.0], [0.0, 1.0]],
    fe=[[0, 1, 2]],
    be=[[0, 1], [1, 2], [2, 0]],
)
print(mesh.summary())
print(mesh.fe_volume(0))   # 0.5
print(mesh.center_fe(0))   # [0.333..., 0.333..., 0.0]

write_mesh(mesh, "triangle.trp")
again = read_mesh("triangle.trp")
print(again.mesh_map)      # [[0, 1, 2], [1, 2], [2]]
```

## What it does not do

The package describes and stores meshes only. It does not assemble or solve
finite-element problems, has no material, load or boundary-condition
settings, no expression language, no storage of calculation results beyond
the mesh block, and no command-line program.

## Tests

```
pip install .[test]
pytest
```