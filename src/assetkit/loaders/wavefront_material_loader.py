"""
Wavefront Material Loader

Imports material libraries (.mtl). One library usually defines several
materials; each is registered under its own name.
"""

import logging
from pathlib import Path
from typing import List, Optional

from .base import AssetImporter, TokenLine
from .material import Material
from .texture import Texture

logger = logging.getLogger(__name__)


COMMENT_FLAG = "#"
NEW_MATERIAL_FLAG = "newmtl"
AMBIENT_COLOR_FLAG = "Ka"
DIFFUSE_COLOR_FLAG = "Kd"
SPECULAR_COLOR_FLAG = "Ks"
ALPHA_FLAG = "d"
INVERSE_ALPHA_FLAG = "Tr"
SHININESS_FLAGS = ("Ns", "Ni")
ILLUMINATION_MODE_FLAG = "illum"

# Texture directive -> Material attribute
TEXTURE_FLAGS = {
    "map_Ka": "ambient_texture",
    "map_Kd": "diffuse_texture",
    "map_Ks": "specular_texture",
    "map_d": "alpha_texture",
    "map_bump": "bump_texture",
    "bump": "bump_texture",
}

COLOR_FLAGS = {
    AMBIENT_COLOR_FLAG: "ambient_color",
    DIFFUSE_COLOR_FLAG: "diffuse_color",
    SPECULAR_COLOR_FLAG: "specular_color",
}

# Directives that belong to a material; anything else is skipped
MATERIAL_FLAGS = {
    *COLOR_FLAGS, *TEXTURE_FLAGS, *SHININESS_FLAGS,
    ALPHA_FLAG, INVERSE_ALPHA_FLAG, ILLUMINATION_MODE_FLAG,
}


class WavefrontMaterialLoader(AssetImporter):
    """Streaming parser for .mtl material libraries."""

    asset_type = Material
    file_extensions = (".mtl",)
    comment_prefix = COMMENT_FLAG

    def parse(self, path: Path, registry) -> None:
        library = path.stem
        materials: List[Material] = []
        current: Optional[Material] = None

        for line in self.read_lines(path):
            keyword = line.keyword

            if keyword == NEW_MATERIAL_FLAG:
                current = Material(line.as_text(1), library, path.name)
                materials.append(current)
                continue

            if keyword not in MATERIAL_FLAGS:
                continue
            if current is None:
                raise line.error(f"'{keyword}' before any '{NEW_MATERIAL_FLAG}'")

            if keyword in COLOR_FLAGS:
                setattr(current, COLOR_FLAGS[keyword], (*line.as_floats(1, 3), 1.0))
            elif keyword == ALPHA_FLAG:
                current.alpha = line.as_float(1)
            elif keyword == INVERSE_ALPHA_FLAG:
                current.alpha = 1.0 - line.as_float(1)
            elif keyword in SHININESS_FLAGS:
                current.shininess = line.as_float(1)
            elif keyword == ILLUMINATION_MODE_FLAG:
                current.illumination_mode = line.as_int(1)
            elif keyword in TEXTURE_FLAGS:
                setattr(current, TEXTURE_FLAGS[keyword], self._texture(line, registry))

        registry.register_many(materials)
        logger.info(f"Imported material library {library}: {[m.name for m in materials]}")

    def _texture(self, line: TokenLine, registry) -> Optional[Texture]:
        # Options such as "-bm 1.0" precede the file name
        file = Path(line.as_text(len(line) - 1)).name
        return registry.retrieve_file(Texture, file)
