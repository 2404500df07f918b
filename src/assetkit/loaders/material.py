"""
Material

Handles classic Phong material properties and textures.
"""

from typing import Optional

from .texture import Texture


class Material:
    """
    Represents a Phong-style material with textures.

    Supports the Wavefront material model:
    - Ambient / Diffuse / Specular colours (RGBA)
    - Alpha and shininess scalars
    - Ambient, diffuse, specular, alpha and bump maps
    - Normal and height maps (id Tech 4 shaders)
    """

    def __init__(self, name: str = "Material", library: str = "", file: str = ""):
        """
        Initialize material.

        Args:
            name: Material name (registry key)
            library: Name of the material library (file stem) it came from
            file: Source file name of the library
        """
        self.name = name
        self.library = library
        self.file = file

        # Colours (RGBA, alpha implicitly 1.0)
        self.ambient_color = (0.0, 0.0, 0.0, 1.0)
        self.diffuse_color = (1.0, 1.0, 1.0, 1.0)
        self.specular_color = (0.0, 0.0, 0.0, 1.0)
        self.emission_color = (0.0, 0.0, 0.0, 1.0)

        self.alpha = 1.0
        self.shininess = 0.0
        self.illumination_mode = 0

        # Texture references (resolved through the asset registry)
        self.ambient_texture: Optional[Texture] = None
        self.diffuse_texture: Optional[Texture] = None
        self.specular_texture: Optional[Texture] = None
        self.alpha_texture: Optional[Texture] = None
        self.bump_texture: Optional[Texture] = None
        self.normal_texture: Optional[Texture] = None
        self.height_texture: Optional[Texture] = None

    @classmethod
    def blank(cls) -> 'Material':
        """Untitled material with a 1x1 white diffuse texture."""
        material = cls("", "")
        material.diffuse_texture = Texture.blank()
        return material

    def has_diffuse(self) -> bool:
        """Check if material has a diffuse texture"""
        return self.diffuse_texture is not None

    def has_normal_map(self) -> bool:
        """Check if material has a normal map"""
        return self.normal_texture is not None

    def __repr__(self):
        return f"Material(name='{self.name}', library='{self.library}')"
