"""
Asset Pipeline Configuration Settings

All configuration constants for the import pipeline.
Modify these values to change importer behavior.
"""

import json
import logging
from pathlib import Path

logger = logging.getLogger(__name__)

# ============================================================================
# Project Paths
# ============================================================================

PROJECT_ROOT = Path(__file__).parent.parent.parent.parent
ASSETS_DIR = PROJECT_ROOT / "assets"
IMPORT_SETTINGS_PATH = ASSETS_DIR / "config" / "import_settings.json"

# Files that are never offered to an importer
IGNORABLE_FILES = (".DS_Store", "Thumbs.db")

# ============================================================================
# id Tech 4 (.md5mesh / .md5anim)
# ============================================================================

IDTECH4_VERSION = 10           # Only MD5Version 10 is understood
MAXIMUM_BONES_PER_MODEL = 50   # Hard cap on joints per skeleton
MAXIMUM_WEIGHTS_PER_VERTEX = 4  # Bone influences per skinned vertex

# Texture names derived from an extension-less "shader" reference
DIFFUSE_TEXTURE_SUFFIX = "_d"
SPECULAR_TEXTURE_SUFFIX = "_s"
NORMAL_TEXTURE_SUFFIX = "_local"
HEIGHT_TEXTURE_SUFFIX = "_h"
DEFAULT_TEXTURE_EXTENSION = ".png"

# ============================================================================
# Models & Poses
# ============================================================================

DEFAULT_POSE_NAME = "Default"  # Reserved name of the bind pose on every model

# Floats per flattened vertex
STATIC_VERTEX_STRIDE = 5  # position(3) + texcoord(2)
SKINNED_VERTEX_STRIDE = STATIC_VERTEX_STRIDE + 2 * MAXIMUM_WEIGHTS_PER_VERTEX

# Offset applied to the second vertex of each debug skeleton bone triangle
SKELETON_MESH_BONE_OFFSET = 0.5

# ============================================================================
# Importing
# ============================================================================

# Bulk import order: dependencies (textures, materials) first
IMPORT_ORDER = ("Texture", "Material", "Model", "Animation")

# ============================================================================
# Logging
# ============================================================================

LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"
LOG_LEVEL = "INFO"


def load_import_settings(path: Path = None) -> dict:
    """
    Load optional importer overrides from a JSON configuration file.

    Recognised keys: ``assets_dir``, ``ignorable_files``, ``log_level``.

    Args:
        path: Settings file (default: assets/config/import_settings.json)

    Returns:
        Dictionary with every recognised key filled in
    """
    settings = {
        "assets_dir": ASSETS_DIR,
        "ignorable_files": tuple(IGNORABLE_FILES),
        "log_level": LOG_LEVEL,
    }

    config_path = Path(path) if path is not None else IMPORT_SETTINGS_PATH
    if not config_path.exists():
        return settings

    try:
        with open(config_path, 'r') as f:
            config = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        logger.warning("Could not read import settings %s: %s", config_path, e)
        return settings

    if "assets_dir" in config:
        assets_dir = Path(config["assets_dir"])
        if not assets_dir.is_absolute():
            assets_dir = config_path.parent / assets_dir
        settings["assets_dir"] = assets_dir
    if "ignorable_files" in config:
        settings["ignorable_files"] = tuple(config["ignorable_files"])
    if "log_level" in config:
        settings["log_level"] = str(config["log_level"]).upper()

    return settings
