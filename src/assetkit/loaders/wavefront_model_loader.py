"""
Wavefront Model Loader

Imports static polygon models from .obj files.

Faces are expanded into one vertex per corner and then welded, so every
mesh ends up with unique vertices and an indexed triangle list.
"""

import logging
from pathlib import Path
from typing import List, Optional

from .base import AssetImporter, TokenLine
from .material import Material
from .model import Mesh, Model, Vertex

logger = logging.getLogger(__name__)


COMMENT_FLAG = "#"
OBJECT_FLAG = "o"
POSITION_FLAG = "v"
TEXTURE_COORDINATES_FLAG = "vt"
NORMAL_FLAG = "vn"
FACE_FLAG = "f"
FACE_PARTS_SEPARATOR = "/"
SHADING_MODE_FLAG = "s"
MATERIAL_LIBRARY_FLAG = "mtllib"
MATERIAL_FLAG = "usemtl"


def weld_vertices(mesh: Mesh) -> Mesh:
    """
    Merge identical vertices of a mesh in place.

    Two vertices are identical when position, normal and texture
    coordinates are all equal. Every element is redirected to the first
    occurrence of its vertex, later duplicates are dropped and the
    remaining vertices keep their relative order. Triangle count and
    winding are unchanged; welding a welded mesh is a no-op.

    Args:
        mesh: Mesh whose elements index into its vertices

    Returns:
        The same mesh
    """
    unique: List[Vertex] = []
    first_index = {}
    remap = []

    for vertex in mesh.vertices:
        key = vertex.key()
        if key not in first_index:
            first_index[key] = len(unique)
            unique.append(vertex)
        remap.append(first_index[key])

    mesh.vertices = unique
    mesh.elements = [remap[element] for element in mesh.elements]
    return mesh


class WavefrontModelLoader(AssetImporter):
    """Streaming parser for .obj files producing a static Model."""

    asset_type = Model
    file_extensions = (".obj",)
    comment_prefix = COMMENT_FLAG

    def parse(self, path: Path, registry) -> None:
        name = path.stem

        meshes: List[Mesh] = []
        current: Optional[Mesh] = None

        positions = []
        normals = []
        texture_coordinates = []

        for line in self.read_lines(path):
            keyword = line.keyword

            if keyword == OBJECT_FLAG:
                current = Mesh(line.as_text(1))
                meshes.append(current)

            elif keyword == POSITION_FLAG:
                positions.append(line.as_floats(1, 3))

            elif keyword == TEXTURE_COORDINATES_FLAG:
                u, v = line.as_floats(1, 2)
                texture_coordinates.append((u, 1.0 - v))

            elif keyword == NORMAL_FLAG:
                normals.append(line.as_floats(1, 3))

            elif keyword == FACE_FLAG:
                if current is None:
                    # Geometry before any object statement
                    current = Mesh(name)
                    meshes.append(current)

                corners = [
                    self._parse_corner(line, i, positions, texture_coordinates, normals)
                    for i in range(1, len(line))
                ]
                if len(corners) < 3:
                    raise line.error(f"face needs at least 3 corners, got {len(corners)}")

                # Fan out polygons into triangles
                for i in range(1, len(corners) - 1):
                    current.vertices.extend([corners[0], corners[i], corners[i + 1]])

            elif keyword == SHADING_MODE_FLAG:
                pass

            elif keyword == MATERIAL_LIBRARY_FLAG:
                registry.import_file(Material, line.as_text(1))

            elif keyword == MATERIAL_FLAG:
                if current is None:
                    current = Mesh(name)
                    meshes.append(current)
                current.material = registry.retrieve(Material, line.as_text(1))

        for mesh in meshes:
            mesh.elements = list(range(len(mesh.vertices)))
            weld_vertices(mesh)

        model = Model(name, path.name, meshes)
        registry.register(model)
        logger.info(
            f"Imported {model.name}: {len(meshes)} meshes, "
            f"{sum(len(m.vertices) for m in meshes)} vertices"
        )

    def _parse_corner(self, line: TokenLine, index: int, positions, texture_coordinates, normals) -> Vertex:
        """Resolve one p/t/n face corner (1-based, negative counts from the end)."""
        parts = line.parts[index].split(FACE_PARTS_SEPARATOR)

        def lookup(slot, values, default):
            if slot >= len(parts) or parts[slot] == "":
                return default
            try:
                reference = int(parts[slot])
            except ValueError:
                raise line.error(f"face corner {line.parts[index]!r} is not numeric") from None

            position = reference - 1 if reference > 0 else len(values) + reference
            if reference == 0 or not 0 <= position < len(values):
                raise line.error(f"face corner {line.parts[index]!r} references a missing element")
            return values[position]

        if not parts[0]:
            raise line.error(f"face corner {line.parts[index]!r} has no position")

        return Vertex(
            position=lookup(0, positions, None),
            texture_coordinates=lookup(1, texture_coordinates, (0.0, 0.0)),
            normal=lookup(2, normals, (0.0, 0.0, 0.0)),
        )
