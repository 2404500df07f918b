"""
Texture Loader

Imports image files through Pillow.
"""

import logging
from pathlib import Path

from ..errors import MalformedImageError
from .base import AssetImporter
from .texture import Texture

logger = logging.getLogger(__name__)


class TextureLoader(AssetImporter):
    """Decodes an image into an RGBA Texture named after the file stem."""

    asset_type = Texture
    file_extensions = (".bmp", ".exif", ".tiff", ".png", ".gif", ".jpg", ".jpeg")

    def parse(self, path: Path, registry) -> None:
        try:
            texture = Texture.from_file(path)
        except OSError as e:
            # Pillow raises UnidentifiedImageError (an OSError) for unknown data
            raise MalformedImageError(f"cannot decode image: {e}") from e

        registry.register(texture)
        logger.debug(f"Imported texture {texture.name} ({texture.width}x{texture.height})")
