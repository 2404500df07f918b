"""
id Tech 4 Model Loader

Imports skinned models from .md5mesh files.

File layout:
    MD5Version 10
    numJoints N
    numMeshes M
    joints {
        "name" parent ( px py pz ) ( rx ry rz )
    }
    mesh {
        shader "name"
        numverts V
        vert i ( u v ) startWeight weightCount
        numtris T
        tri i a b c
        numweights W
        weight i joint bias ( x y z )
    }
"""

import logging
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import numpy as np

from ..animation.skeleton import Skeleton
from ..animation.transforms import compute_w, rotate_vector
from ..config.settings import (
    DEFAULT_TEXTURE_EXTENSION, DIFFUSE_TEXTURE_SUFFIX, HEIGHT_TEXTURE_SUFFIX,
    IDTECH4_VERSION, NORMAL_TEXTURE_SUFFIX, SPECULAR_TEXTURE_SUFFIX,
)
from ..errors import MalformedCountError, MalformedLineError, UnsupportedVersionError
from .base import AssetImporter, TokenLine
from .material import Material
from .model import Mesh, SkeletalModel, SkinnedVertex, Weight
from .texture import Texture

logger = logging.getLogger(__name__)


VERSION_FLAG = "MD5Version"
BONE_COUNT_FLAG = "numJoints"
MESH_COUNT_FLAG = "numMeshes"
BONE_BLOCK_FLAG = "joints"
MESH_BLOCK_FLAG = "mesh"
BLOCK_END_FLAG = "}"

SHADER_FLAG = "shader"
VERTEX_COUNT_FLAG = "numverts"
VERTEX_FLAG = "vert"
TRIANGLE_COUNT_FLAG = "numtris"
TRIANGLE_FLAG = "tri"
WEIGHT_COUNT_FLAG = "numweights"
WEIGHT_FLAG = "weight"


class ParseState(Enum):
    HEADER = "header"
    BONES = "bones"
    MESH = "mesh"


class _MeshBuilder:
    """Accumulates one mesh block until its closing brace."""

    def __init__(self):
        self.name = ""
        self.material: Optional[Material] = None

        self.declared_vertices = 0
        self.declared_triangles = 0
        self.declared_weights = 0

        # vertex index -> (u, v, first weight, weight count)
        self.vertices: Dict[int, Tuple[float, float, int, int]] = {}
        self.elements: List[int] = []
        # weight index -> (bone, bias, offset)
        self.weights: Dict[int, Tuple[int, float, Tuple[float, float, float]]] = {}


class IdTech4ModelLoader(AssetImporter):
    """
    Streaming parser for .md5mesh files.

    Produces one SkeletalModel named after the file stem. Vertex positions
    are resolved from the weights against the bind pose, so the model is
    ready to skin as soon as it is registered.
    """

    asset_type = SkeletalModel
    file_extensions = (".md5mesh",)

    def parse(self, path: Path, registry) -> None:
        name = path.stem

        state = ParseState.HEADER
        skeleton: Optional[Skeleton] = None
        bone_transforms = []
        declared_meshes = 0
        meshes: List[Mesh] = []
        current: Optional[_MeshBuilder] = None

        for line in self.read_lines(path):
            keyword = line.keyword

            if state == ParseState.BONES:
                if keyword == BLOCK_END_FLAG:
                    if len(skeleton) != skeleton.bone_count:
                        raise MalformedCountError(
                            f"expected {skeleton.bone_count} joints, found {len(skeleton)}"
                        )
                    state = ParseState.HEADER
                else:
                    bone_transforms.append(self._parse_bone(line, skeleton))

            elif state == ParseState.MESH:
                if keyword == BLOCK_END_FLAG:
                    meshes.append(self._build_mesh(current, skeleton, bone_transforms))
                    current = None
                    state = ParseState.HEADER
                else:
                    self._parse_mesh_line(line, current, registry)

            elif keyword == VERSION_FLAG:
                version = line.as_int(1)
                if version != IDTECH4_VERSION:
                    raise UnsupportedVersionError(
                        f"MD5Version {version} is not supported (expected {IDTECH4_VERSION})"
                    )

            elif keyword == BONE_COUNT_FLAG:
                skeleton = Skeleton(line.as_int(1), name)

            elif keyword == MESH_COUNT_FLAG:
                declared_meshes = line.as_int(1)

            elif keyword == BONE_BLOCK_FLAG:
                if skeleton is None:
                    raise line.error(f"'{BONE_BLOCK_FLAG}' block before '{BONE_COUNT_FLAG}'")
                state = ParseState.BONES

            elif keyword == MESH_BLOCK_FLAG:
                if skeleton is None:
                    raise line.error(f"'{MESH_BLOCK_FLAG}' block before '{BONE_COUNT_FLAG}'")
                current = _MeshBuilder()
                state = ParseState.MESH

        if state != ParseState.HEADER:
            raise MalformedLineError(f"unterminated '{state.value}' block at end of file")

        if skeleton is None:
            raise MalformedCountError(f"missing '{BONE_COUNT_FLAG}' declaration")

        if len(meshes) != declared_meshes:
            raise MalformedCountError(f"expected {declared_meshes} meshes, found {len(meshes)}")

        model = SkeletalModel(name, path.name, skeleton, meshes)
        registry.register(model)
        logger.info(f"Imported {model.name}: {len(skeleton)} bones, {len(meshes)} meshes")

    # ------------------------------------------------------------------
    # Joints
    # ------------------------------------------------------------------

    def _parse_bone(self, line: TokenLine, skeleton: Skeleton):
        """ "name" parent ( px py pz ) ( rx ry rz ) """
        bone = skeleton.add_bone(line.as_text(0), line.as_int(1))

        position = np.array(line.as_floats(3, 3))
        rotation = compute_w(*line.as_floats(8, 3))
        skeleton.set_bind_transform(bone.index, position, rotation)

        return position, rotation

    # ------------------------------------------------------------------
    # Meshes
    # ------------------------------------------------------------------

    def _parse_mesh_line(self, line: TokenLine, mesh: _MeshBuilder, registry):
        keyword = line.keyword

        if keyword == SHADER_FLAG:
            mesh.name, mesh.material = self._resolve_shader(line.as_text(1), registry)

        elif keyword == VERTEX_COUNT_FLAG:
            mesh.declared_vertices = line.as_int(1)

        elif keyword == TRIANGLE_COUNT_FLAG:
            mesh.declared_triangles = line.as_int(1)

        elif keyword == WEIGHT_COUNT_FLAG:
            mesh.declared_weights = line.as_int(1)

        elif keyword == VERTEX_FLAG:
            # vert i ( u v ) start count
            mesh.vertices[line.as_int(1)] = (
                line.as_float(3), line.as_float(4), line.as_int(6), line.as_int(7),
            )

        elif keyword == TRIANGLE_FLAG:
            # tri i a b c
            mesh.elements.extend([line.as_int(2), line.as_int(3), line.as_int(4)])

        elif keyword == WEIGHT_FLAG:
            # weight i joint bias ( x y z )
            mesh.weights[line.as_int(1)] = (
                line.as_int(2), line.as_float(3), line.as_floats(5, 3),
            )

    def _resolve_shader(self, shader: str, registry) -> Tuple[str, Material]:
        """
        Build the material a shader reference points at.

        A shader with an extension names the diffuse texture directly;
        otherwise the four texture files are derived from the shader name.
        """
        shader_path = Path(shader)
        material = Material(shader_path.stem)

        if shader_path.suffix:
            material.diffuse_texture = registry.retrieve_file(Texture, shader_path.name)
        else:
            def texture(suffix):
                return registry.retrieve_file(
                    Texture, f"{shader_path.name}{suffix}{DEFAULT_TEXTURE_EXTENSION}"
                )

            material.diffuse_texture = texture(DIFFUSE_TEXTURE_SUFFIX)
            material.specular_texture = texture(SPECULAR_TEXTURE_SUFFIX)
            material.normal_texture = texture(NORMAL_TEXTURE_SUFFIX)
            material.height_texture = texture(HEIGHT_TEXTURE_SUFFIX)

        return shader_path.stem, material

    def _build_mesh(self, builder: _MeshBuilder, skeleton: Skeleton, bone_transforms) -> Mesh:
        """Validate a closed mesh block and resolve its vertex positions."""
        label = builder.name or "mesh"

        if len(builder.vertices) != builder.declared_vertices:
            raise MalformedCountError(
                f"mesh '{label}' declares {builder.declared_vertices} vertices, "
                f"found {len(builder.vertices)}"
            )
        if len(builder.elements) != builder.declared_triangles * 3:
            raise MalformedCountError(
                f"mesh '{label}' declares {builder.declared_triangles} triangles, "
                f"found {len(builder.elements) // 3}"
            )

        vertices = []
        for index in sorted(builder.vertices):
            u, v, start, count = builder.vertices[index]
            vertex = SkinnedVertex(texture_coordinates=(u, v))
            position = np.zeros(3)

            for weight_index in range(start, start + count):
                if weight_index not in builder.weights:
                    continue
                bone_index, bias, offset = builder.weights[weight_index]
                if not 0 <= bone_index < len(bone_transforms):
                    raise MalformedCountError(
                        f"mesh '{label}' weight {weight_index} references unknown joint {bone_index}"
                    )

                vertex.add_weight(Weight(bone_index, bias, offset))
                bone_position, bone_rotation = bone_transforms[bone_index]
                position += (bone_position + rotate_vector(bone_rotation, offset)) * bias

            vertex.position = tuple(float(p) for p in position)
            vertices.append(vertex)

        weight_total = sum(len(vertex.weights) for vertex in vertices)
        if weight_total != builder.declared_weights or len(builder.weights) != builder.declared_weights:
            raise MalformedCountError(
                f"mesh '{label}' declares {builder.declared_weights} weights, "
                f"found {len(builder.weights)} ({weight_total} referenced by vertices)"
            )

        for element in builder.elements:
            if not 0 <= element < len(vertices):
                raise MalformedCountError(
                    f"mesh '{label}' triangle references missing vertex {element}"
                )

        return Mesh(builder.name, builder.material, vertices, builder.elements)
