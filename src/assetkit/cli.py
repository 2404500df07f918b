"""
Command-line interface for inspecting and bulk-importing asset folders.

    assetkit [--assets DIR] [--verbose] list
    assetkit [--assets DIR] [--verbose] import [KIND]
    assetkit [--assets DIR] [--verbose] inspect FILE
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Sequence

from .animation.animation import Animation
from .config.settings import LOG_FORMAT, load_import_settings
from .core.asset_registry import asset_types_in_import_order, create_default_registry
from .errors import AssetImportError
from .loaders.material import Material
from .loaders.model import Model, SkeletalModel
from .loaders.texture import Texture

logger = logging.getLogger(__name__)

KINDS = {kind.__name__.lower(): kind for kind in asset_types_in_import_order()}


def configure_logging(verbose: bool = False, level: str | None = None) -> None:
    """Configure the root logger for command-line use."""
    if verbose:
        level = "DEBUG"
    elif level is None:
        level = load_import_settings()["log_level"]
    logging.basicConfig(level=getattr(logging, level, logging.INFO), format=LOG_FORMAT)


def describe(asset) -> list[str]:
    """Human-readable summary lines for an imported asset."""
    if isinstance(asset, Model):
        kind = "SkeletalModel" if isinstance(asset, SkeletalModel) else "Model"
        lines = [f"{kind} '{asset.name}' ({asset.file})"]
        for mesh in asset.meshes:
            material = mesh.material.name if mesh.material else "-"
            lines.append(
                f"  mesh '{mesh.name}': {len(mesh.vertices)} vertices, "
                f"{mesh.triangle_count} triangles, material {material}"
            )
        if isinstance(asset, SkeletalModel):
            lines.append(f"  bones: {len(asset.skeleton)}")
            for bone in asset.skeleton.bones:
                parent = "-" if bone.parent_index is None else asset.skeleton.bones[bone.parent_index].name
                lines.append(f"    {bone.index:3d} {bone.name} (parent {parent})")
        return lines

    if isinstance(asset, Animation):
        return [
            f"Animation '{asset.name}' ({asset.file}): {asset.frame_count} frames "
            f"@ {asset.frame_rate} fps, {asset.duration:.2f}s"
        ]

    if isinstance(asset, Material):
        textures = [
            f"{slot}={getattr(asset, slot + '_texture').file}"
            for slot in ("ambient", "diffuse", "specular", "alpha", "bump", "normal", "height")
            if getattr(asset, slot + '_texture') is not None
        ]
        return [f"Material '{asset.name}' ({asset.library}): {', '.join(textures) or 'no textures'}"]

    if isinstance(asset, Texture):
        return [f"Texture '{asset.name}' ({asset.file}): {asset.width}x{asset.height}"]

    return [repr(asset)]


def _list(registry, args) -> int:
    for name, path in sorted(registry.available_files.items()):
        importer = registry.importer_for(name)
        kind = importer.asset_type.__name__ if importer else "-"
        print(f"{kind:14s} {path.relative_to(registry.assets_dir)}")
    return 0


def _import(registry, args) -> int:
    asset_type = KINDS[args.kind] if args.kind else None
    failures = registry.import_all(asset_type)

    for kind in asset_types_in_import_order():
        if asset_type is None or kind is asset_type:
            print(f"{kind.__name__}: {len(registry.retrieve_all(kind))} imported")

    for file, error in failures:
        print(f"[failed] {file}: {error}")
    return 1 if failures else 0


def _inspect(registry, args) -> int:
    file = args.file
    importer = registry.importer_for(file)
    if importer is None:
        print(f"No importer for {Path(file).name}")
        return 2

    try:
        registry.import_file(importer.asset_type, file)
    except AssetImportError as e:
        print(f"[failed] {e}")
        return 1

    name = Path(file).name
    assets = [asset for asset in registry.retrieve_all() if getattr(asset, "file", None) == name]
    if not assets:
        print(f"Nothing imported from {name}")
        return 1

    for asset in assets:
        for line in describe(asset):
            print(line)
    return 0


def cli(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="assetkit",
        description="Import and inspect id Tech 4 and Wavefront assets.",
    )
    parser.add_argument(
        "--assets",
        type=Path,
        help="Assets directory to scan (defaults to the configured assets directory).",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("list", help="List the files found in the assets directory.")

    import_parser = subparsers.add_parser("import", help="Import every asset (or one kind).")
    import_parser.add_argument("kind", nargs="?", choices=sorted(KINDS), help="Only import this kind.")

    inspect_parser = subparsers.add_parser("inspect", help="Import one file and describe its assets.")
    inspect_parser.add_argument("file", help="File name inside the assets directory, or a path.")

    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    registry = create_default_registry(args.assets)
    commands = {"list": _list, "import": _import, "inspect": _inspect}
    try:
        return commands[args.command](registry, args)
    finally:
        registry.shutdown()


def main(argv: Sequence[str] | None = None) -> int:
    """CLI-compatible entry point."""

    return cli(argv)


if __name__ == "__main__":
    raise SystemExit(cli())
