"""Mesh geometry inspector."""

from __future__ import annotations

from typing import List, Optional, Tuple

from ..core.identifiers import IdentifierRegistry
from ..core.session import SceneContext, SceneInspector
from ..models import Mesh
from ..utils import vector_to_tuple


class MeshInspector(SceneInspector):
    """Flatten control points, polygon corners and the first normal/UV layers."""

    id = "meshes"

    def collect(self, context: SceneContext) -> List[Mesh]:
        registry = context.identifiers
        return [_describe_mesh(mesh_id, mesh, registry) for mesh_id, mesh in registry.meshes]


def _describe_mesh(mesh_id: int, mesh, registry: IdentifierRegistry) -> Mesh:
    positions = [vector_to_tuple(mesh.GetControlPointAt(idx), 3) for idx in range(mesh.GetControlPointsCount())]

    indices: List[int] = []
    if positions:
        for polygon in range(mesh.GetPolygonCount()):
            for corner in range(mesh.GetPolygonSize(polygon)):
                vertex = mesh.GetPolygonVertex(polygon, corner)
                if vertex >= 0:
                    indices.append(int(vertex))

    normals = None
    if mesh.GetElementNormalCount() > 0:
        normals = _direct_array(mesh.GetElementNormal(0), 3)

    texcoords = None
    if mesh.GetElementUVCount() > 0:
        texcoords = _direct_array(mesh.GetElementUV(0), 2)

    return Mesh(
        id=mesh_id,
        name=mesh.GetName() or "",
        positions=positions or None,
        indices=indices or None,
        normals=normals or None,
        texcoords=texcoords or None,
        material_ids=_material_ids(mesh, registry),
    )


def _direct_array(element, size: int) -> Optional[List[Tuple[float, ...]]]:
    if element is None:
        return None
    array = element.GetDirectArray()
    return [vector_to_tuple(array.GetAt(idx), size) for idx in range(array.GetCount())]


def _material_ids(mesh, registry: IdentifierRegistry) -> List[int]:
    host = mesh.GetNode()
    if host is None:
        return []
    material_ids = []
    for idx in range(host.GetMaterialCount()):
        material_id = registry.materials.id_of(host.GetMaterial(idx))
        if material_id is not None:
            material_ids.append(material_id)
    return material_ids
