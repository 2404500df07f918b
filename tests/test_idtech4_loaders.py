"""Tests for the .md5mesh / .md5anim importers"""

import numpy as np
import pytest
from PIL import Image

from conftest import SKINNED_MESH, animation_text
from assetkit.animation.animation import Animation
from assetkit.config.settings import DEFAULT_POSE_NAME
from assetkit.errors import (
    MalformedCountError,
    MalformedHierarchyError,
    MalformedLineError,
    UnsupportedComplexityError,
    UnsupportedVersionError,
)
from assetkit.loaders.model import Model, RenderMode, SkeletalModel
from assetkit.loaders.texture import Texture


def test_import_skinned_model(write_asset, make_registry):
    """Bones, bind pose and weighted vertex positions"""
    write_asset("guard.md5mesh", SKINNED_MESH)
    registry = make_registry()

    model = registry.retrieve(SkeletalModel, "guard")

    assert model is not None
    assert model.file == "guard.md5mesh"
    assert [b.name for b in model.skeleton.bones] == ["root", "child"]
    assert model.skeleton.parent_indices() == [-1, 0]
    assert np.allclose(model.skeleton.bind_pose.position(1), [0.0, 0.0, 1.0])

    mesh = model.meshes[0]
    assert mesh.name == "skin"
    assert mesh.elements == [0, 1, 2]
    assert np.allclose(mesh.vertices[0].position, [1.0, 0.0, 0.0])
    assert np.allclose(mesh.vertices[1].position, [0.0, 1.0, 0.0])
    # half from the child bone (0, 0, 1) + (0, 0, 1), half from the root
    assert np.allclose(mesh.vertices[2].position, [0.0, 0.0, 1.0])
    assert mesh.vertices[1].texture_coordinates == (1.0, 0.0)
    assert [w.bone_index for w in mesh.vertices[2].weights] == [1, 0]


def test_model_is_found_as_model(write_asset, make_registry):
    """Type lookups match subclasses"""
    write_asset("guard.md5mesh", SKINNED_MESH)
    registry = make_registry()

    assert isinstance(registry.retrieve(Model, "guard"), SkeletalModel)


def test_default_pose_is_identity_skinning(write_asset, make_registry):
    """At the bind pose every skinning matrix is the identity"""
    write_asset("guard.md5mesh", SKINNED_MESH)
    model = make_registry().retrieve(SkeletalModel, "guard")

    matrices = model.set_pose(DEFAULT_POSE_NAME)

    assert matrices.shape == (2, 4, 4)
    assert np.allclose(matrices, np.tile(np.eye(4), (2, 1, 1)), atol=1e-6)


def test_rotated_bone_vertex(write_asset, make_registry):
    """Weight offsets are rotated by the bone's bind rotation"""
    text = SKINNED_MESH.replace(
        '"root"\t-1 ( 0 0 0 ) ( 0 0 0 )', '"root"\t-1 ( 0 0 0 ) ( 0 0 0.70710678 )'
    )
    write_asset("guard.md5mesh", text)
    model = make_registry().retrieve(SkeletalModel, "guard")

    assert np.allclose(model.meshes[0].vertices[0].position, [0.0, -1.0, 0.0], atol=1e-6)


def test_shader_diffuse_file(write_asset, make_registry, assets_dir):
    """A shader with an extension names the diffuse texture"""
    write_asset("guard.md5mesh", SKINNED_MESH)
    Image.new("RGBA", (2, 3), (255, 0, 0, 255)).save(assets_dir / "skin.png")
    registry = make_registry()

    material = registry.retrieve(SkeletalModel, "guard").meshes[0].material

    assert material.name == "skin"
    assert material.diffuse_texture is registry.retrieve_file(Texture, "skin.png")
    assert material.diffuse_texture.width == 2
    assert material.specular_texture is None


def test_shader_texture_set(write_asset, make_registry, assets_dir):
    """A shader without extension resolves the suffixed texture set"""
    write_asset("guard.md5mesh", SKINNED_MESH.replace('"skin.png"', '"models/guard/body"'))
    textures = assets_dir / "textures"
    textures.mkdir()
    for suffix in ("_d", "_local"):
        Image.new("RGB", (1, 1)).save(textures / f"body{suffix}.png")
    registry = make_registry()

    mesh = registry.retrieve(SkeletalModel, "guard").meshes[0]

    assert mesh.name == "body"
    assert mesh.material.diffuse_texture.file == "body_d.png"
    assert mesh.material.normal_texture.file == "body_local.png"
    assert mesh.material.specular_texture is None
    assert mesh.material.height_texture is None


def test_skeleton_mesh(write_asset, make_registry):
    """One debug triangle per bone, kept apart from the real meshes"""
    write_asset("guard.md5mesh", SKINNED_MESH)
    model = make_registry().retrieve(SkeletalModel, "guard")

    skeleton_mesh = model.skeleton_mesh

    assert skeleton_mesh.render_mode == RenderMode.NONE
    assert skeleton_mesh.triangle_count == 2
    assert len(skeleton_mesh.vertices) == 6
    assert np.allclose(skeleton_mesh.vertices[4].position, [0.5, 0.5, 1.5])
    assert all(len(v.weights) == 1 and v.weights[0].bias == 1.0 for v in skeleton_mesh.vertices)
    assert skeleton_mesh not in model.meshes


def test_vertex_buffers(write_asset, make_registry):
    """Skinned vertices flatten to 13 floats"""
    write_asset("guard.md5mesh", SKINNED_MESH)
    model = make_registry().retrieve(SkeletalModel, "guard")

    vertices = model.vertex_array()

    assert vertices.dtype == np.float32
    assert len(vertices) == 3 * 13
    third = vertices[26:39]
    assert np.allclose(third[:5], [0.0, 0.0, 1.0, 0.0, 1.0])
    assert np.allclose(third[5:9], [1.0, 0.0, 0.0, 0.0])
    assert np.allclose(third[9:13], [0.5, 0.5, 0.0, 0.0])
    assert model.element_array().tolist() == [0, 1, 2]


@pytest.mark.parametrize("original, replacement", [
    ("numverts 3", "numverts 4"),
    ("numtris 1", "numtris 2"),
    ("numweights 4", "numweights 5"),
    ("numMeshes 1", "numMeshes 2"),
    ("numJoints 2", "numJoints 3"),
])
def test_count_mismatch_registers_nothing(write_asset, make_registry, original, replacement):
    write_asset("guard.md5mesh", SKINNED_MESH.replace(original, replacement))
    registry = make_registry()

    with pytest.raises(MalformedCountError) as excinfo:
        registry.import_file(SkeletalModel, "guard.md5mesh")

    assert excinfo.value.file == "guard.md5mesh"
    assert registry.retrieve_all(Model) == []
    # Claimed even though it failed: never attempted again
    assert registry.retrieve(SkeletalModel, "guard") is None


def test_unsupported_version(write_asset, make_registry):
    write_asset("guard.md5mesh", SKINNED_MESH.replace("MD5Version 10", "MD5Version 11"))

    with pytest.raises(UnsupportedVersionError):
        make_registry().import_file(SkeletalModel, "guard.md5mesh")


def test_bone_cap(write_asset, make_registry):
    write_asset("guard.md5mesh", SKINNED_MESH.replace("numJoints 2", "numJoints 51"))

    with pytest.raises(UnsupportedComplexityError):
        make_registry().import_file(SkeletalModel, "guard.md5mesh")


def test_weight_cap(write_asset, make_registry):
    """More than four weights on one vertex is rejected"""
    text = SKINNED_MESH.replace("vert 2 ( 0 1 ) 2 2", "vert 2 ( 0 1 ) 2 5").replace(
        "numweights 4\n",
        "numweights 7\n\tweight 4 0 0.1 ( 0 0 0 )\n\tweight 5 0 0.1 ( 0 0 0 )\n\tweight 6 0 0.1 ( 0 0 0 )\n",
    )
    write_asset("guard.md5mesh", text)

    with pytest.raises(UnsupportedComplexityError):
        make_registry().import_file(SkeletalModel, "guard.md5mesh")


def test_parent_after_child(write_asset, make_registry):
    write_asset("guard.md5mesh", SKINNED_MESH.replace('"child"\t0', '"child"\t1'))

    with pytest.raises(MalformedHierarchyError):
        make_registry().import_file(SkeletalModel, "guard.md5mesh")


def test_malformed_number_names_line(write_asset, make_registry):
    write_asset("guard.md5mesh", SKINNED_MESH.replace("tri 0 0 1 2", "tri 0 0 one 2"))

    with pytest.raises(MalformedLineError) as excinfo:
        make_registry().import_file(SkeletalModel, "guard.md5mesh")

    assert excinfo.value.file == "guard.md5mesh"
    assert excinfo.value.line_number == 21
    assert str(excinfo.value).startswith("guard.md5mesh:21:")


def test_import_animation_model_space(write_asset, make_registry):
    """Child bones are composed with their already converted parent"""
    write_asset("walk.md5anim", animation_text())
    registry = make_registry()

    animation = registry.retrieve(Animation, "walk")

    assert animation.file == "walk.md5anim"
    assert animation.frame_rate == 24
    assert animation.frame_count == 10
    assert animation.frames[3].name == "walk.3"
    assert np.allclose(animation.frames[3].position(0), [3.0, 0.0, 0.0])
    assert np.allclose(animation.frames[3].position(1), [3.0, 0.0, 1.0])


def test_animation_child_follows_rotated_parent(write_asset, make_registry):
    """A child offset along x is turned by its parent's -90 degree z rotation, then moved"""
    text = animation_text(frame_count=1).replace(
        "\t0 0 0 0 0 0\n\t0 0 1 0 0 0\n", "\t2 0 0 0 0 0.70710678\n\t1 0 0 0 0 0\n"
    )
    write_asset("turn.md5anim", text)

    frame = make_registry().retrieve(Animation, "turn").frames[0]

    assert np.allclose(frame.position(0), [2.0, 0.0, 0.0], atol=1e-6)
    assert np.allclose(frame.position(1), [2.0, -1.0, 0.0], atol=1e-6)
    assert np.allclose(frame[1][:3, :3], frame[0][:3, :3], atol=1e-6)


def test_animation_frame_count_mismatch(write_asset, make_registry):
    write_asset("walk.md5anim", animation_text(frame_count=2, declared_frames=3))
    registry = make_registry()

    with pytest.raises(MalformedCountError):
        registry.import_file(Animation, "walk.md5anim")

    assert registry.retrieve_all(Animation) == []


def test_animation_frame_bone_mismatch(write_asset, make_registry):
    text = animation_text(frame_count=1).replace("\t0 0 1 0 0 0\n", "")
    write_asset("walk.md5anim", text)

    with pytest.raises(MalformedCountError):
        make_registry().import_file(Animation, "walk.md5anim")


def test_animation_base_frame_too_long(write_asset, make_registry):
    text = animation_text(frame_count=1).replace(
        "\t( 0 0 1 ) ( 0 0 0 )\n", "\t( 0 0 1 ) ( 0 0 0 )\n\t( 0 0 2 ) ( 0 0 0 )\n"
    )
    write_asset("walk.md5anim", text)

    with pytest.raises(MalformedCountError):
        make_registry().import_file(Animation, "walk.md5anim")


def test_animation_base_frame_too_short(write_asset, make_registry):
    text = animation_text(frame_count=1).replace("\t( 0 0 1 ) ( 0 0 0 )\n", "")
    write_asset("walk.md5anim", text)
    registry = make_registry()

    with pytest.raises(MalformedCountError):
        registry.import_file(Animation, "walk.md5anim")

    assert registry.retrieve_all(Animation) == []


def test_animation_hierarchy_count(write_asset, make_registry):
    write_asset("walk.md5anim", animation_text(frame_count=1).replace("numJoints 2", "numJoints 3"))

    with pytest.raises(MalformedCountError):
        make_registry().import_file(Animation, "walk.md5anim")
