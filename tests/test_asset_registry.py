"""Tests for AssetRegistry"""

import logging

import pytest

from conftest import QUAD_MTL, QUAD_OBJ, SKINNED_MESH
from assetkit.animation.animation import Animation
from assetkit.core.asset_registry import AssetRegistry, create_default_registry
from assetkit.errors import MalformedLineError
from assetkit.loaders.base import AssetImporter
from assetkit.loaders.material import Material
from assetkit.loaders.model import Model, SkeletalModel
from assetkit.loaders.texture import Texture


class Note:
    def __init__(self, name, file):
        self.name = name
        self.file = file


class CountingImporter(AssetImporter):
    """Registers one Note per file and counts how often it ran."""

    asset_type = Note
    file_extensions = (".note",)

    def __init__(self):
        self.calls = []

    def parse(self, path, registry):
        self.calls.append(path.name)
        registry.register(Note(path.stem, path.name))


def test_scan_skips_ignorable_files(write_asset, assets_dir):
    write_asset("a.note", "")
    write_asset("nested/deeper/b.note", "")
    write_asset(".DS_Store", "")
    registry = AssetRegistry(assets_dir)

    files = registry.scan()

    assert sorted(files) == ["a.note", "b.note"]
    assert files["b.note"] == assets_dir / "nested" / "deeper" / "b.note"


def test_retrieve_imports_exactly_once(write_asset, assets_dir):
    write_asset("memo.note", "")
    importer = CountingImporter()
    registry = AssetRegistry(assets_dir, importers=[importer])
    registry.scan()

    first = registry.retrieve(Note, "memo")
    second = registry.retrieve(Note, "memo")

    assert first is not None
    assert first is second
    assert importer.calls == ["memo.note"]
    assert registry.retrieve_file(Note, "memo.note") is first
    assert registry.get_stats()['imports'] == 1


def test_retrieve_unavailable(assets_dir):
    registry = AssetRegistry(assets_dir, importers=[CountingImporter()])
    registry.scan()

    assert registry.retrieve(Note, "missing") is None
    assert registry.retrieve_file(Note, "missing.note") is None


def test_unsupported_extension_is_ignored(write_asset, assets_dir, caplog):
    write_asset("readme.txt", "hello")
    registry = AssetRegistry(assets_dir, importers=[CountingImporter()])
    registry.scan()

    with caplog.at_level(logging.WARNING):
        result = registry.import_file(Note, "readme.txt")

    assert result is None
    assert len(registry) == 0
    assert "unsupported format (.txt)" in caplog.text


def test_duplicate_extension_rejected():
    registry = AssetRegistry(importers=[CountingImporter()])

    with pytest.raises(ValueError):
        registry.register_importer(CountingImporter())


def test_register_is_idempotent():
    registry = AssetRegistry()
    note = Note("x", "x.note")

    registry.register(note)
    registry.register(note)
    registry.register_many([note, Note("x", "x.note")])

    assert len(registry.retrieve_all(Note)) == 2


def test_import_all_continues_past_failures(write_asset, make_registry):
    write_asset("good.obj", "v 0 0 0\nv 1 0 0\nv 0 1 0\nf 1 2 3\n")
    write_asset("bad.obj", "v 0 0 zero\n")
    write_asset("guard.md5mesh", SKINNED_MESH)
    registry = make_registry()

    failures = registry.import_all()

    assert [file for file, _ in failures] == ["bad.obj"]
    assert isinstance(failures[0][1], MalformedLineError)
    assert {m.name for m in registry.retrieve_all(Model)} == {"good", "guard"}
    # Already claimed files are not retried
    assert registry.import_all() == []


def test_import_all_by_type(write_asset, make_registry):
    write_asset("quad.obj", QUAD_OBJ)
    write_asset("quad.mtl", QUAD_MTL)
    write_asset("guard.md5mesh", SKINNED_MESH)
    registry = make_registry()

    registry.import_all(Material)

    assert len(registry.retrieve_all(Material)) == 2
    assert registry.retrieve_all(Model) == []

    registry.import_all(SkeletalModel)
    assert [m.name for m in registry.retrieve_all(Model)] == ["guard"]


def test_import_by_name_uses_available_files(write_asset, make_registry):
    write_asset("walk.md5anim", "MD5Version 10\nnumFrames 0\nnumJoints 0\nframeRate 24\n")
    registry = make_registry()

    registry.import_by_name(Animation, "walk")

    assert registry.retrieve_all(Animation)[0].frame_count == 0
    assert "walk.md5anim" in registry.imported_files


def test_shutdown_clears_everything(write_asset, make_registry):
    write_asset("quad.mtl", QUAD_MTL)
    registry = make_registry()
    registry.import_all()

    registry.shutdown()

    assert len(registry) == 0
    assert registry.imported_files == set()
    assert registry.available_files == {}


def test_default_registry(write_asset, assets_dir):
    write_asset("quad.obj", QUAD_OBJ)

    registry = create_default_registry(assets_dir)

    assert "quad.obj" in registry.available_files
    assert registry.importer_for("skin.PNG").asset_type is Texture
    assert registry.importer_for("guard.md5mesh").asset_type is SkeletalModel
    assert registry.importer_for("notes.txt") is None
