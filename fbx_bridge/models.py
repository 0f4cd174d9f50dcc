"""Domain models for scene terms.

Each entity is a typed record with explicit optional fields. ``to_term``
produces the generic ``dict``/``list`` form, emitting a key only when its data
exists; ``from_term`` parses that form permissively: wrongly shaped fields are
defaulted or dropped, never reported.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from .core import codec
from .core.exceptions import MalformedInputError
from .utils import Vector2, Vector3, Vector4, is_index, is_real

logger = logging.getLogger(__name__)

Term = Dict[str, Any]

ORIGIN: Vector3 = (0.0, 0.0, 0.0)
IDENTITY_ROTATION: Vector4 = (0.0, 0.0, 0.0, 1.0)
UNIT_SCALE: Vector3 = (1.0, 1.0, 1.0)

CHANNELS = ("translation", "rotation", "scale")
_CHANNEL_SIZES = {"translation": 3, "rotation": 4, "scale": 3}


def _get_id(term: Mapping[str, Any], key: str) -> Optional[int]:
    value = term.get(key)
    return int(value) if is_index(value) else None


def _get_name(term: Mapping[str, Any], key: str = "name") -> Optional[str]:
    value = term.get(key)
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    if isinstance(value, str):
        return value
    return None


def _get_vector(term: Mapping[str, Any], key: str, size: int) -> Optional[Tuple[float, ...]]:
    value = term.get(key)
    if isinstance(value, (list, tuple)) and len(value) == size and all(is_real(v) for v in value):
        return tuple(float(v) for v in value)
    return None


def _get_groups(term: Mapping[str, Any], key: str, arity: int) -> Optional[List[Tuple[float, ...]]]:
    if key not in term:
        return None
    try:
        groups = codec.unpack(term[key], arity)
    except MalformedInputError as exc:
        logger.debug("Ignoring %s: %s", key, exc)
        return None
    return groups or None


def _get_ids(term: Mapping[str, Any], key: str) -> List[int]:
    value = term.get(key)
    if not isinstance(value, (list, tuple)):
        return []
    return [int(item) for item in value if is_index(item)]


def _as_mapping_list(value: Any) -> List[Mapping[str, Any]]:
    if not isinstance(value, (list, tuple)):
        return []
    return [item for item in value if isinstance(item, Mapping)]


@dataclass
class Node:
    id: Optional[int] = None
    name: str = ""
    parent_id: Optional[int] = None
    children: List[int] = field(default_factory=list)
    translation: Vector3 = ORIGIN
    rotation: Vector4 = IDENTITY_ROTATION
    scale: Vector3 = UNIT_SCALE
    mesh_id: Optional[int] = None

    def to_term(self) -> Term:
        term: Term = {"id": self.id, "name": self.name}
        if self.parent_id is not None:
            term["parent_id"] = self.parent_id
        if self.children:
            term["children"] = list(self.children)
        term["translation"] = list(self.translation)
        term["rotation"] = list(self.rotation)
        term["scale"] = list(self.scale)
        if self.mesh_id is not None:
            term["mesh_id"] = self.mesh_id
        return term

    @classmethod
    def from_term(cls, term: Mapping[str, Any]) -> "Node":
        return cls(
            id=_get_id(term, "id"),
            name=_get_name(term) or "",
            parent_id=_get_id(term, "parent_id"),
            children=_get_ids(term, "children"),
            translation=_get_vector(term, "translation", 3) or ORIGIN,
            rotation=_get_vector(term, "rotation", 4) or IDENTITY_ROTATION,
            scale=_get_vector(term, "scale", 3) or UNIT_SCALE,
            mesh_id=_get_id(term, "mesh_id"),
        )


@dataclass
class Mesh:
    id: Optional[int] = None
    name: str = ""
    positions: Optional[List[Vector3]] = None
    indices: Optional[List[int]] = None
    normals: Optional[List[Vector3]] = None
    texcoords: Optional[List[Vector2]] = None
    material_ids: List[int] = field(default_factory=list)

    @property
    def vertex_count(self) -> int:
        return len(self.positions or ())

    def to_term(self) -> Term:
        term: Term = {"id": self.id, "name": self.name}
        if self.positions:
            term["positions"] = codec.pack(self.positions)
            if self.indices:
                term["indices"] = list(self.indices)
        if self.normals:
            term["normals"] = codec.pack(self.normals)
        if self.texcoords:
            term["texcoords"] = codec.pack(self.texcoords)
        if self.material_ids:
            term["material_ids"] = list(self.material_ids)
        return term

    @classmethod
    def from_term(cls, term: Mapping[str, Any]) -> "Mesh":
        indices: Optional[List[int]] = None
        if "indices" in term:
            try:
                indices = codec.unpack_indices(term["indices"]) or None
            except MalformedInputError as exc:
                logger.debug("Ignoring indices: %s", exc)
        return cls(
            id=_get_id(term, "id"),
            name=_get_name(term) or "",
            positions=_get_groups(term, "positions", 3),
            indices=indices,
            normals=_get_groups(term, "normals", 3),
            texcoords=_get_groups(term, "texcoords", 2),
            material_ids=_get_ids(term, "material_ids"),
        )


@dataclass
class Material:
    """Surface material; only ``diffuse_color`` is written back to FBX."""

    id: Optional[int] = None
    name: str = ""
    diffuse_color: Optional[Vector3] = None
    specular_color: Optional[Vector3] = None
    emissive_color: Optional[Vector3] = None

    def to_term(self) -> Term:
        term: Term = {"id": self.id, "name": self.name}
        for key in ("diffuse_color", "specular_color", "emissive_color"):
            value = getattr(self, key)
            if value is not None:
                term[key] = list(value)
        return term

    @classmethod
    def from_term(cls, term: Mapping[str, Any]) -> "Material":
        return cls(
            id=_get_id(term, "id"),
            name=_get_name(term) or "",
            diffuse_color=_get_vector(term, "diffuse_color", 3),
            specular_color=_get_vector(term, "specular_color", 3),
            emissive_color=_get_vector(term, "emissive_color", 3),
        )


@dataclass
class Texture:
    id: Optional[int] = None
    name: str = ""
    file_path: Optional[str] = None

    def to_term(self) -> Term:
        term: Term = {"id": self.id, "name": self.name}
        if self.file_path:
            term["file_path"] = self.file_path
        return term

    @classmethod
    def from_term(cls, term: Mapping[str, Any]) -> "Texture":
        return cls(
            id=_get_id(term, "id"),
            name=_get_name(term) or "",
            file_path=_get_name(term, "file_path") or None,
        )


@dataclass
class Keyframe:
    """One timestamped sample of a single transform channel."""

    node_id: int
    time: float
    channel: str
    value: Tuple[float, ...]

    def to_term(self) -> Term:
        return {"node_id": self.node_id, "time": self.time, self.channel: list(self.value)}

    @classmethod
    def from_term(cls, term: Mapping[str, Any]) -> Optional["Keyframe"]:
        node_id = _get_id(term, "node_id")
        time = term.get("time")
        if node_id is None or not is_real(time):
            return None
        present = [channel for channel in CHANNELS if channel in term]
        if len(present) != 1:
            return None
        channel = present[0]
        value = _get_vector(term, channel, _CHANNEL_SIZES[channel])
        if value is None:
            return None
        return cls(node_id=node_id, time=float(time), channel=channel, value=value)


@dataclass
class Animation:
    id: Optional[int] = None
    name: str = ""
    keyframes: List[Keyframe] = field(default_factory=list)

    def to_term(self) -> Term:
        return {
            "id": self.id,
            "name": self.name,
            "keyframes": [keyframe.to_term() for keyframe in self.keyframes],
        }

    @classmethod
    def from_term(cls, term: Mapping[str, Any]) -> "Animation":
        keyframes: List[Keyframe] = []
        for entry in _as_mapping_list(term.get("keyframes")):
            keyframe = Keyframe.from_term(entry)
            if keyframe is None:
                logger.debug("Ignoring malformed keyframe %r", entry)
                continue
            keyframes.append(keyframe)
        return cls(id=_get_id(term, "id"), name=_get_name(term) or "", keyframes=keyframes)


@dataclass
class Scene:
    version: str = ""
    nodes: List[Node] = field(default_factory=list)
    meshes: List[Mesh] = field(default_factory=list)
    materials: List[Material] = field(default_factory=list)
    textures: List[Texture] = field(default_factory=list)
    animations: List[Animation] = field(default_factory=list)

    def to_term(self) -> Term:
        return {
            "version": self.version,
            "nodes": [node.to_term() for node in self.nodes],
            "meshes": [mesh.to_term() for mesh in self.meshes],
            "materials": [material.to_term() for material in self.materials],
            "textures": [texture.to_term() for texture in self.textures],
            "animations": [animation.to_term() for animation in self.animations],
        }

    @classmethod
    def from_term(cls, term: Any) -> "Scene":
        if not isinstance(term, Mapping):
            logger.debug("Scene term is a %s, not a mapping; treating as empty", type(term).__name__)
            return cls()
        return cls(
            version=_get_name(term, "version") or "",
            nodes=[Node.from_term(entry) for entry in _as_mapping_list(term.get("nodes"))],
            meshes=[Mesh.from_term(entry) for entry in _as_mapping_list(term.get("meshes"))],
            materials=[Material.from_term(entry) for entry in _as_mapping_list(term.get("materials"))],
            textures=[Texture.from_term(entry) for entry in _as_mapping_list(term.get("textures"))],
            animations=[Animation.from_term(entry) for entry in _as_mapping_list(term.get("animations"))],
        )

    @property
    def counts(self) -> Dict[str, int]:
        return {
            "nodes": len(self.nodes),
            "meshes": len(self.meshes),
            "materials": len(self.materials),
            "textures": len(self.textures),
            "animations": len(self.animations),
        }


def keyframe_streams(keyframes: Sequence[Keyframe]) -> Dict[Tuple[int, str], List[Keyframe]]:
    """Group keyframes into per-node, per-channel streams, keeping their order."""

    streams: Dict[Tuple[int, str], List[Keyframe]] = {}
    for keyframe in keyframes:
        streams.setdefault((keyframe.node_id, keyframe.channel), []).append(keyframe)
    return streams
