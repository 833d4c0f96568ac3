# mimzy

A small ray-tracing toolkit for triangle meshes, in pure Python with no
dependencies. It provides 3D vector, ray, bounding-box and triangle geometry,
plus two acceleration structures for finding the nearest triangle a ray hits:

- `mimzy.bvh.BVH`: a bounding volume hierarchy split with a binned
  surface-area heuristic (8 bins, leaves of up to 10 triangles).
- `mimzy.kdtree.KDTree`: a k-d tree split with a surface-area heuristic over
  sorted triangle bound edges, with a cost model in `KDOptions`
  (`intersection_cost=5`, `traversal_cost=1`, `maximum_depth=8`).

## Installation

```
pip install .
```

For the test suite:

```
pip install ".[test]"
pytest
```

## Command line

The `mimzy` command loads a Wavefront OBJ model, builds a k-d tree over its
triangles and writes a shaded rendering as a plain-text PPM image.

```
mimzy model.obj
mimzy model.obj --output picture.ppm --width 400 --height 300 --depth 10
```

Options:

- `--output`: path of the PPM image (default `output.ppm`)
- `--width`, `--height`: image size in pixels (default 800x600)
- `--depth`: maximum k-d tree depth (default 8)

The camera sits at `(0, 0, 9)` and looks down the negative z axis. Each pixel
is lit with an ambient term of 0.2 plus a diffuse term of 0.5 from a fixed
directional light; pixels where no triangle is hit are black. Run without a
model path, the command does nothing and exits successfully.

Only `v` (vertex) and `f` (face) lines of the OBJ file are read; faces with
more than three corners are split into a fan of triangles, and negative
(relative) vertex indices are supported. Shading uses each triangle's
geometric normal, so normals, texture coordinates and materials in the file
are ignored.

## Library use

```python
from mimzy.vector import Vector3
from mimzy.triangle import Triangle
from mimzy.ray import Ray
from mimzy.kdtree import KDTree, KDOptions
from mimzy.bvh import BVH

triangles = [
    Triangle(Vector3(-1.0, -1.0, 0.0), Vector3(1.0, -1.0, 0.0), Vector3(0.0, 1.0, 0.0)),
]

tree = KDTree(triangles, KDOptions())
tree.build(8)

ray = Ray(Vector3(0.0, 0.0, 5.0), Vector3(0.0, 0.0, -1.0))
hit = tree.intersect(ray)
if hit is not None:
    print(hit.position, hit.normal)

bvh = BVH(triangles)
bvh.build()
print(bvh.intersect(ray))
```

`intersect` returns a `Hit` holding the hit position and the unit normal of
the triangle that was struck, or `None` when the ray misses or the structure
has not been built yet. `BVH` raises `ValueError` when given no triangles, and
`KDTree.build` raises `ValueError` for a negative depth.

The geometry types can be used on their own:

- `Vector3`: an immutable vector with arithmetic, `dot`, `cross`, `length`,
  `normalized`, component-wise `minimum`/`maximum` and `with_component`.
- `Ray`: origin and direction; calling `ray(t)` gives the point at `t`.
- `BoundingBox`: `from_points`, `expand`, `extent`, `maximum_extent`,
  `surface_area`, `split_surface_areas`, `volume`, `intersect` (entry and exit
  parameters, or two infinities on a miss) and `vertices`.
- `Triangle`: `bounding_box`, `centroid`, `normal` and `intersect`
  (the ray parameter of the hit, or `None`).

The rendering steps are also available from `mimzy.render`:
`load_wavefront`, `build_triangles`, `render` (returns RGBA8888 pixels row by
row) and `write_ppm`.

## What it does not do

The package renders only to a PPM file; it does not open a window to display
the image. The `SplitMethod` enumeration in `mimzy.bvh` names strategies, but
the BVH always builds with the binned surface-area heuristic.