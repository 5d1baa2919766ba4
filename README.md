# itpengine

The data and math core of a small 3D game engine. It has no rendering back end.
It covers these parts:

- `itpengine.vecmath` holds `Vector3`, `Vector4` and `Matrix4`. Matrices are row-major and use the row-vector convention. Translation sits in the last row. The module also has the helpers `dot`, `cross`, `lerp`, `normalize`, `transform`, `transpose`, `to_radians` and `is_close_enough`.
- `itpengine.asset_cache` holds `AssetCache`. It is a name-keyed cache that calls a loader function the first time an asset is requested.
- `itpengine.mesh` reads `itpmesh` version 3 JSON files. `parse_mesh` and `load_mesh` return a `Mesh` that holds the packed vertex data, the indices and the vertex layout. Malformed files raise `MeshFormatError`.
- `itpengine.lighting` holds the lighting constant block. It has eight point-light slots and an ambient colour, and it can be packed to bytes. It also holds the `PointLight` component, which claims a slot and keeps that slot's position in step with its object.
- `itpengine.game` reads `itplevel` version 2 files with `parse_level` and `load_level`. It also holds `Game`, which tracks held keys, the ambient light and light allocation.

## Installation

```
pip install itpengine
```

To run the tests, install the `test` extra:

```
pip install "itpengine[test]"
pytest
```

## Example

```python
from itpengine.vecmath import Matrix4, Vector3, transform, to_radians

m = Matrix4.create_rotation_z(to_radians(90.0)) * Matrix4.create_translation(Vector3(1.0, 2.0, 3.0))
p = transform(Vector3(1.0, 0.0, 0.0), m)

inv = Matrix4(m.to_list())
inv.invert()
assert (m * inv).is_close(Matrix4.identity(), 0.001)
```

Loading a level:

```python
from itpengine.game import Game

game = Game()
level = game.load_level("Assets/Levels/Level07.itplevel")
for obj in level.render_objects:
    print(obj.mesh, obj.position)
```