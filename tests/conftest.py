"""Shared fixtures: small asset files written into a temporary assets directory."""

import pytest

from assetkit.core.asset_registry import AssetRegistry


SKINNED_MESH = """\
MD5Version 10
commandline ""

numJoints 2
numMeshes 1

joints {
	"root"	-1 ( 0 0 0 ) ( 0 0 0 )		// origin
	"child"	0 ( 0 0 1 ) ( 0 0 0 )		// root
}

mesh {
	shader "skin.png"

	numverts 3
	vert 0 ( 0 0 ) 0 1
	vert 1 ( 1 0 ) 1 1
	vert 2 ( 0 1 ) 2 2

	numtris 1
	tri 0 0 1 2

	numweights 4
	weight 0 0 1.0 ( 1 0 0 )
	weight 1 0 1.0 ( 0 1 0 )
	weight 2 1 0.5 ( 0 0 1 )
	weight 3 0 0.5 ( 0 0 0 )
}
"""


def animation_text(frame_count=10, declared_frames=None, frame_rate=24):
    """Two-bone .md5anim whose root moves one unit along x per frame."""
    declared = frame_count if declared_frames is None else declared_frames
    lines = [
        "MD5Version 10",
        'commandline ""',
        "",
        f"numFrames {declared}",
        "numJoints 2",
        f"frameRate {frame_rate}",
        "numAnimatedComponents 6",
        "",
        "hierarchy {",
        '\t"root"\t-1 63 0',
        '\t"child"\t0 63 6',
        "}",
        "",
        "bounds {",
        "\t( -1 -1 -1 ) ( 1 1 1 )",
        "}",
        "",
        "baseframe {",
        "\t( 0 0 0 ) ( 0 0 0 )",
        "\t( 0 0 1 ) ( 0 0 0 )",
        "}",
    ]
    for i in range(frame_count):
        lines += [
            "",
            f"frame {i} {{",
            f"\t{i} 0 0 0 0 0",
            "\t0 0 1 0 0 0",
            "}",
        ]
    return "\n".join(lines) + "\n"


QUAD_OBJ = """\
# quad made of two triangles
mtllib quad.mtl
o Quad
v 0 0 0
v 1 0 0
v 1 1 0
v 0 1 0
vt 0 0
vt 1 0
vt 1 1
vt 0 1
vn 0 0 1
usemtl Red
s off
f 1/1/1 2/2/1 3/3/1
f 1/1/1 3/3/1 4/4/1
"""


QUAD_MTL = """\
# two materials
newmtl Red
Ka 0.1 0.0 0.0
Kd 1.0 0.0 0.0
Ks 0.5 0.5 0.5
Ns 32
Tr 0.25
illum 2

newmtl Blue
Kd 0.0 0.0 1.0
d 0.5
"""


@pytest.fixture
def assets_dir(tmp_path):
    """Empty assets directory."""
    directory = tmp_path / "assets"
    directory.mkdir()
    return directory


@pytest.fixture
def write_asset(assets_dir):
    """Write a text asset into the assets directory and return its path."""
    def write(name, text):
        path = assets_dir / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text)
        return path
    return write


@pytest.fixture
def make_registry(assets_dir):
    """Build a scanned registry with the default importers."""
    def make():
        registry = AssetRegistry(assets_dir)
        registry.register_default_importers()
        registry.scan()
        return registry
    return make
