"""
AssetKit - Offline 3D Asset Import Pipeline

Imports id Tech 4 (.md5mesh/.md5anim) and Wavefront (.obj/.mtl) assets
into meshes, materials, skeletons and precomputed skinning matrices.
"""

# Core
from .core.asset_registry import AssetRegistry, create_default_registry

# Assets
from .loaders import Material, Mesh, Model, SkeletalModel, Texture
from .animation import Animation, AnimationController, Pose, Skeleton

# Errors
from .errors import (
    AssetImportError,
    MalformedCountError,
    MalformedHierarchyError,
    MalformedImageError,
    MalformedLineError,
    UnsupportedComplexityError,
    UnsupportedFileFormatError,
    UnsupportedVersionError,
)

__version__ = "0.1.0"
__all__ = [
    # Core
    "AssetRegistry",
    "create_default_registry",
    # Assets
    "Material",
    "Mesh",
    "Model",
    "SkeletalModel",
    "Texture",
    "Animation",
    "AnimationController",
    "Pose",
    "Skeleton",
    # Errors
    "AssetImportError",
    "MalformedCountError",
    "MalformedHierarchyError",
    "MalformedImageError",
    "MalformedLineError",
    "UnsupportedComplexityError",
    "UnsupportedFileFormatError",
    "UnsupportedVersionError",
]
