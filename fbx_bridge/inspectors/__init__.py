"""Inspector implementations that extract one scene term list each."""

from .animation import AnimationInspector, baked_keyframes
from .materials import MaterialInspector
from .meshes import MeshInspector
from .nodes import NodeInspector
from .textures import TextureInspector

__all__ = [
    "AnimationInspector",
    "MaterialInspector",
    "MeshInspector",
    "NodeInspector",
    "TextureInspector",
    "baked_keyframes",
]
