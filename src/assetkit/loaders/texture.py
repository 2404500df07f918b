"""
Texture

Decoded image data referenced by materials.
"""

from pathlib import Path

import numpy as np
from PIL import Image


class Texture:
    """
    CPU-side RGBA image.

    Pixels are kept as a (height, width, 4) uint8 array; creating GPU
    objects from it is left to the renderer.
    """

    def __init__(self, name: str, file: str, pixels: np.ndarray):
        """
        Initialize texture.

        Args:
            name: Texture name (file name without extension)
            file: Source file name
            pixels: (height, width, 4) uint8 RGBA data
        """
        self.name = name
        self.file = file
        self.pixels = pixels

    @classmethod
    def from_file(cls, path) -> 'Texture':
        """
        Decode an image file into an RGBA texture.

        Args:
            path: Path to the image

        Returns:
            Texture named after the file stem
        """
        path = Path(path)
        with Image.open(path) as image:
            pixels = np.array(image.convert("RGBA"), dtype=np.uint8)
        return cls(path.stem, path.name, pixels)

    @classmethod
    def blank(cls, color=(255, 255, 255, 255)) -> 'Texture':
        """1x1 single-colour texture (no source file)."""
        pixels = np.array(color, dtype=np.uint8).reshape(1, 1, 4)
        return cls("", "", pixels)

    @property
    def width(self) -> int:
        return self.pixels.shape[1]

    @property
    def height(self) -> int:
        return self.pixels.shape[0]

    def __repr__(self):
        return f"Texture(name='{self.name}', size={self.width}x{self.height})"
