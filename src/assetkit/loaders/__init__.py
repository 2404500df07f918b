"""Asset types and the importers for each supported file format."""

from .texture import Texture
from .material import Material
from .model import Mesh, Model, RenderMode, SkeletalModel, SkinnedVertex, Vertex, Weight
from .base import AssetImporter
from .idtech4_model_loader import IdTech4ModelLoader
from .idtech4_animation_loader import IdTech4AnimationLoader
from .wavefront_model_loader import WavefrontModelLoader, weld_vertices
from .wavefront_material_loader import WavefrontMaterialLoader
from .texture_loader import TextureLoader

__all__ = [
    'Texture', 'Material', 'Mesh', 'Model', 'RenderMode', 'SkeletalModel',
    'SkinnedVertex', 'Vertex', 'Weight', 'AssetImporter',
    'IdTech4ModelLoader', 'IdTech4AnimationLoader', 'WavefrontModelLoader',
    'WavefrontMaterialLoader', 'TextureLoader', 'weld_vertices',
]
