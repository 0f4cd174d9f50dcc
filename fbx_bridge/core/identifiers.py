"""Typed id tables replacing SDK object pointers at the scene term boundary."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, Optional, Tuple

from . import traversal


def _handle_key(handle) -> int:
    # SDK wrappers are not guaranteed to be identical objects for the same
    # native pointer, so objects are keyed by their unique id.
    return int(handle.GetUniqueID())


class IdentifierTable:
    """Bidirectional mapping between typed ids and SDK objects of one kind."""

    def __init__(self, kind: str) -> None:
        self.kind = kind
        self._handles: Dict[int, Any] = {}
        self._ids: Dict[int, int] = {}

    def __len__(self) -> int:
        return len(self._handles)

    def __iter__(self) -> Iterator[Tuple[int, Any]]:
        return iter(list(self._handles.items()))

    def __contains__(self, typed_id: object) -> bool:
        return typed_id in self._handles

    def register(self, typed_id: int, handle) -> bool:
        """Record ``typed_id -> handle``.

        The first registration of an id wins; later duplicates are ignored
        and reported by returning ``False``.
        """

        if typed_id in self._handles:
            return False
        self._handles[typed_id] = handle
        self._ids.setdefault(_handle_key(handle), typed_id)
        return True

    def append(self, handle) -> int:
        """Register ``handle`` under the next free index and return it."""

        typed_id = len(self._handles)
        while typed_id in self._handles:
            typed_id += 1
        self.register(typed_id, handle)
        return typed_id

    def id_of(self, handle) -> Optional[int]:
        if handle is None:
            return None
        return self._ids.get(_handle_key(handle))

    def resolve(self, typed_id: Optional[int]) -> Optional[Any]:
        if typed_id is None:
            return None
        return self._handles.get(typed_id)


@dataclass
class IdentifierRegistry:
    """One :class:`IdentifierTable` per entity kind, scoped to a single call."""

    nodes: IdentifierTable = field(default_factory=lambda: IdentifierTable("node"))
    meshes: IdentifierTable = field(default_factory=lambda: IdentifierTable("mesh"))
    materials: IdentifierTable = field(default_factory=lambda: IdentifierTable("material"))
    textures: IdentifierTable = field(default_factory=lambda: IdentifierTable("texture"))
    animations: IdentifierTable = field(default_factory=lambda: IdentifierTable("animation"))

    @classmethod
    def index_scene(cls, scene) -> "IdentifierRegistry":
        """Assign typed ids to every entity of ``scene`` in natural index order."""

        registry = cls()
        for node in traversal.iter_scene_nodes(scene):
            registry.nodes.append(node)
        for mesh in traversal.iter_meshes(scene):
            registry.meshes.append(mesh)
        for material in traversal.iter_materials(scene):
            registry.materials.append(material)
        for texture in traversal.iter_textures(scene):
            registry.textures.append(texture)
        for stack in traversal.iter_anim_stacks(scene):
            registry.animations.append(stack)
        return registry
