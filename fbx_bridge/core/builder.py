"""Rebuild an FBX scene from a scene term in two phases.

Phase 1 creates every node, mesh, material and texture and records its
declared id. Phase 2 resolves the integer foreign keys (``parent_id``,
``mesh_id``, ``material_ids``, keyframe ``node_id``) against those tables and
wires the SDK objects together. Unresolved references are dropped unless the builder runs
with ``strict_references``.
"""

from __future__ import annotations

import logging
import math
from typing import Any, Dict, List, Optional, Sequence, Tuple

from ..models import Animation, Keyframe, Material, Mesh, Node, Scene, Texture, keyframe_streams
from ..utils import Vector3, Vector4, resolve_enum_value, vector_to_tuple
from . import codec, sdk
from .exceptions import FBXAllocationError, MalformedInputError, UnresolvedReferenceError
from .identifiers import IdentifierRegistry, IdentifierTable

logger = logging.getLogger(__name__)

_AXES = ("X", "Y", "Z")


class SceneBuilder:
    """Populate an empty SDK scene from a :class:`~fbx_bridge.models.Scene`."""

    def __init__(self, scene: Any, *, strict_references: bool = False) -> None:
        self.scene = scene
        self.strict_references = strict_references
        self.identifiers = IdentifierRegistry()
        self._mesh_models: Dict[int, Mesh] = {}

    def build(self, document: Scene) -> Any:
        fbx, _ = sdk.import_fbx_module()

        # Phase 1: create and index.
        created_nodes = [(model, self._create_node(fbx, model)) for model in document.nodes]
        for mesh in document.meshes:
            self._create_mesh(fbx, mesh)
        for material in document.materials:
            self._create_material(fbx, material)
        for texture in document.textures:
            self._create_texture(fbx, texture)

        # Phase 2: resolve foreign keys.
        self._wire_nodes(created_nodes)
        for animation in document.animations:
            self._create_animation(fbx, animation)

        logger.debug(
            "Built scene: %d node(s), %d mesh(es), %d material(s), %d texture(s), %d animation(s)",
            len(document.nodes),
            len(document.meshes),
            len(document.materials),
            len(document.textures),
            len(document.animations),
        )
        return self.scene

    # Phase 1 -------------------------------------------------------------
    def _create_node(self, fbx_module, model: Node) -> Any:
        node = _create(fbx_module.FbxNode, self.scene, model.name, "node")
        _register(self.identifiers.nodes, model.id, node)

        node.SetRotationOrder(
            resolve_enum_value(fbx_module.FbxNode, "eSourcePivot"),
            resolve_enum_value(fbx_module.EFbxRotationOrder, "eEulerXYZ"),
        )
        node.LclTranslation.Set(fbx_module.FbxDouble3(*model.translation))
        node.LclRotation.Set(fbx_module.FbxDouble3(*quaternion_to_euler(fbx_module, model.rotation)))
        node.LclScaling.Set(fbx_module.FbxDouble3(*model.scale))
        return node

    def _create_mesh(self, fbx_module, model: Mesh) -> Any:
        mesh = _create(fbx_module.FbxMesh, self.scene, model.name, "mesh")
        _register(self.identifiers.meshes, model.id, mesh)
        if model.id is not None:
            self._mesh_models.setdefault(model.id, model)

        if model.positions:
            mesh.InitControlPoints(len(model.positions))
            for index, position in enumerate(model.positions):
                mesh.SetControlPointAt(fbx_module.FbxVector4(*position), index)

        if model.indices:
            self._set_triangles(mesh, model)
        if model.normals:
            element = mesh.CreateElementNormal()
            _map_by_control_point(fbx_module, element)
            direct = element.GetDirectArray()
            for normal in model.normals:
                direct.Add(fbx_module.FbxVector4(*normal))
        if model.texcoords:
            element = mesh.CreateElementUV("UVMap")
            _map_by_control_point(fbx_module, element)
            direct = element.GetDirectArray()
            for uv in model.texcoords:
                direct.Add(fbx_module.FbxVector2(*uv))
        return mesh

    def _set_triangles(self, mesh, model: Mesh) -> None:
        try:
            triangles = codec.unpack_faces(model.indices)
        except MalformedInputError as exc:
            logger.debug("Mesh %r: indices not set (%s)", model.name, exc)
            return

        vertex_count = model.vertex_count
        skipped = 0
        for triangle in triangles:
            if any(index >= vertex_count for index in triangle):
                skipped += 1
                continue
            mesh.BeginPolygon()
            for index in triangle:
                mesh.AddPolygon(index)
            mesh.EndPolygon()
        if skipped:
            logger.debug("Mesh %r: skipped %d triangle(s) with out-of-range indices", model.name, skipped)

    def _create_material(self, fbx_module, model: Material) -> Any:
        # Only the diffuse color is written; specular/emissive stay read-only.
        material = _create(fbx_module.FbxSurfaceLambert, self.scene, model.name, "material")
        _register(self.identifiers.materials, model.id, material)
        if model.diffuse_color is not None:
            material.Diffuse.Set(fbx_module.FbxDouble3(*model.diffuse_color))
        return material

    def _create_texture(self, fbx_module, model: Texture) -> Any:
        texture = _create(fbx_module.FbxFileTexture, self.scene, model.name, "texture")
        _register(self.identifiers.textures, model.id, texture)
        if model.file_path:
            texture.SetFileName(model.file_path)
        return texture

    # Phase 2 -------------------------------------------------------------
    def _wire_nodes(self, created: Sequence[Tuple[Node, Any]]) -> None:
        root = self.scene.GetRootNode()
        parent_links: Dict[int, Optional[int]] = {
            model.id: model.parent_id
            for model, node in created
            if model.id is not None and self.identifiers.nodes.resolve(model.id) is node
        }

        for model, node in created:
            parent = self._resolve_parent(model, node, parent_links)
            (parent if parent is not None else root).AddChild(node)

            if model.mesh_id is None:
                continue
            mesh = self.identifiers.meshes.resolve(model.mesh_id)
            if mesh is None:
                self._unresolved(f"Node {model.id} references missing mesh {model.mesh_id}")
                continue
            node.SetNodeAttribute(mesh)
            self._attach_materials(node, self._mesh_models[model.mesh_id])

    def _attach_materials(self, node, mesh_model: Mesh) -> None:
        for material_id in mesh_model.material_ids:
            material = self.identifiers.materials.resolve(material_id)
            if material is None:
                self._unresolved(f"Mesh {mesh_model.id} references missing material {material_id}")
                continue
            node.AddMaterial(material)

    def _resolve_parent(self, model: Node, node, parent_links: Dict[int, Optional[int]]) -> Optional[Any]:
        if model.parent_id is None:
            return None
        parent = self.identifiers.nodes.resolve(model.parent_id)
        if parent is None:
            self._unresolved(f"Node {model.id} references missing parent {model.parent_id}")
            return None
        if model.id in parent_links and _closes_cycle(model.id, parent_links):
            parent_links[model.id] = None
            self._unresolved(f"Node {model.id} parent {model.parent_id} would create a cycle")
            return None
        return parent

    def _create_animation(self, fbx_module, model: Animation) -> Any:
        name = model.name or "Take"
        stack = _create(fbx_module.FbxAnimStack, self.scene, name, "animation stack")
        layer = _create(fbx_module.FbxAnimLayer, self.scene, f"{name}_Layer", "animation layer")
        stack.AddMember(layer)
        _register(self.identifiers.animations, model.id, stack)

        times: List[float] = []
        for (node_id, channel), keyframes in keyframe_streams(model.keyframes).items():
            node = self.identifiers.nodes.resolve(node_id)
            if node is None:
                self._unresolved(f"Animation {model.id} keyframes reference missing node {node_id}")
                continue
            _write_channel(fbx_module, node, layer, channel, keyframes)
            times.extend(keyframe.time for keyframe in keyframes)

        if times:
            stack.SetLocalTimeSpan(
                fbx_module.FbxTimeSpan(_fbx_time(fbx_module, min(times)), _fbx_time(fbx_module, max(times)))
            )
        return stack

    def _unresolved(self, message: str) -> None:
        if self.strict_references:
            raise UnresolvedReferenceError(message)
        logger.debug("%s; dropped", message)


def quaternion_to_euler(fbx_module, rotation: Vector4) -> Vector3:
    """Decompose an ``[x, y, z, w]`` quaternion into XYZ Euler angles in degrees."""

    matrix = fbx_module.FbxAMatrix()
    matrix.SetQ(fbx_module.FbxQuaternion(*_normalized(rotation)))
    return vector_to_tuple(matrix.GetR(), 3)


def _normalized(rotation: Vector4) -> Vector4:
    length = math.sqrt(sum(component * component for component in rotation))
    if length == 0.0 or not math.isfinite(length):
        return (0.0, 0.0, 0.0, 1.0)
    x, y, z, w = (component / length for component in rotation)
    return (x, y, z, w)


def _closes_cycle(node_id: int, parent_links: Dict[int, Optional[int]]) -> bool:
    seen = set()
    current = parent_links.get(node_id)
    while current is not None and current not in seen:
        if current == node_id:
            return True
        seen.add(current)
        current = parent_links.get(current)
    return False


def _create(sdk_class, scene, name: str, label: str) -> Any:
    obj = sdk_class.Create(scene, name)
    if obj is None:
        raise FBXAllocationError(f"Failed to create {label} '{name}'")
    return obj


def _register(table: IdentifierTable, typed_id: Optional[int], handle) -> None:
    if typed_id is None:
        logger.debug("Created %s without an id; it cannot be referenced", table.kind)
    elif not table.register(typed_id, handle):
        logger.debug("Duplicate %s id %d; keeping the first declaration", table.kind, typed_id)


def _map_by_control_point(fbx_module, element) -> None:
    element.SetMappingMode(resolve_enum_value(fbx_module.FbxLayerElement, "eByControlPoint"))
    element.SetReferenceMode(resolve_enum_value(fbx_module.FbxLayerElement, "eDirect"))


def _fbx_time(fbx_module, seconds: float) -> Any:
    time = fbx_module.FbxTime()
    time.SetSecondDouble(seconds)
    return time


def _write_channel(fbx_module, node, layer, channel: str, keyframes: List[Keyframe]) -> None:
    prop = {
        "translation": node.LclTranslation,
        "rotation": node.LclRotation,
        "scale": node.LclScaling,
    }[channel]
    interpolation = resolve_enum_value(fbx_module.FbxAnimCurveDef, "eInterpolationLinear")
    curves = [prop.GetCurve(layer, axis, True) for axis in _AXES]

    for curve in curves:
        curve.KeyModifyBegin()
    for keyframe in keyframes:
        values = keyframe.value
        if channel == "rotation":
            values = quaternion_to_euler(fbx_module, keyframe.value)
        time = _fbx_time(fbx_module, keyframe.time)
        for curve, value in zip(curves, values):
            key_index = curve.KeyAdd(time)[0]
            curve.KeySetValue(key_index, float(value))
            curve.KeySetInterpolation(key_index, interpolation)
    for curve in curves:
        curve.KeyModifyEnd()
