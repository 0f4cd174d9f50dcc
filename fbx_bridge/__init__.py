"""Marshal FBX scenes to and from plain ``dict``/``list`` scene terms."""

from .api import extract_scene, load_fbx, load_fbx_binary, write_fbx, write_fbx_binary
from .config import BridgeConfig
from .core.sdk import SaveFormat
from .models import Animation, Keyframe, Material, Mesh, Node, Scene, Texture
from .result import Outcome

__all__ = [
    "Animation",
    "BridgeConfig",
    "Keyframe",
    "Material",
    "Mesh",
    "Node",
    "Outcome",
    "SaveFormat",
    "Scene",
    "Texture",
    "extract_scene",
    "load_fbx",
    "load_fbx_binary",
    "write_fbx",
    "write_fbx_binary",
]
