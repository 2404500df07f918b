"""Core pipeline components"""
from .asset_registry import AssetRegistry, create_default_registry
from .geometry_utils import generate_skeleton_mesh

__all__ = [
    "AssetRegistry",
    "create_default_registry",
    "generate_skeleton_mesh",
]
