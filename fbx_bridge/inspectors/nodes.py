"""Node hierarchy and local transform inspector."""

from __future__ import annotations

from typing import List

from ..core.identifiers import IdentifierRegistry
from ..core.session import SceneContext, SceneInspector
from ..models import Node
from ..utils import vector_to_tuple


class NodeInspector(SceneInspector):
    """Describe every non-root node with its links, local transform and mesh."""

    id = "nodes"

    def collect(self, context: SceneContext) -> List[Node]:
        registry = context.identifiers
        return [_describe_node(node_id, node, registry) for node_id, node in registry.nodes]


def _describe_node(node_id: int, node, registry: IdentifierRegistry) -> Node:
    matrix = node.EvaluateLocalTransform()

    # Children of the SDK root are unregistered, so they come out as top-level.
    children = []
    for idx in range(node.GetChildCount()):
        child_id = registry.nodes.id_of(node.GetChild(idx))
        if child_id is not None:
            children.append(child_id)

    return Node(
        id=node_id,
        name=node.GetName() or "",
        parent_id=registry.nodes.id_of(node.GetParent()),
        children=children,
        translation=vector_to_tuple(matrix.GetT(), 3),
        rotation=vector_to_tuple(matrix.GetQ(), 4),
        scale=vector_to_tuple(matrix.GetS(), 3),
        mesh_id=registry.meshes.id_of(node.GetMesh()),
    )
