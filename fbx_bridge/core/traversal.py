"""Utilities for enumerating FBX scene contents in natural index order."""

from __future__ import annotations

from typing import Iterator

from . import sdk


def iter_scene_nodes(scene) -> Iterator:
    """Yield every node of ``scene`` except the implicit root node."""

    root = scene.GetRootNode()
    root_uid = root.GetUniqueID() if root is not None else None
    for idx in range(scene.GetNodeCount()):
        node = scene.GetNode(idx)
        if node is None or node.GetUniqueID() == root_uid:
            continue
        yield node


def iter_src_objects(owner, class_id) -> Iterator:
    """Yield the source objects of ``owner`` whose type matches ``class_id``."""

    fbx, _ = sdk.import_fbx_module()
    criteria = fbx.FbxCriteria.ObjectType(class_id)
    for idx in range(owner.GetSrcObjectCount(criteria)):
        obj = owner.GetSrcObject(criteria, idx)
        if obj is not None:
            yield obj


def iter_members(collection, class_id) -> Iterator:
    """Yield members of an ``FbxCollection`` (e.g. the layers of an anim stack)."""

    fbx, _ = sdk.import_fbx_module()
    criteria = fbx.FbxCriteria.ObjectType(class_id)
    for idx in range(collection.GetMemberCount(criteria)):
        yield collection.GetMember(criteria, idx)


def iter_meshes(scene) -> Iterator:
    fbx, _ = sdk.import_fbx_module()
    yield from iter_src_objects(scene, fbx.FbxMesh.ClassId)


def iter_materials(scene) -> Iterator:
    for idx in range(scene.GetMaterialCount()):
        material = scene.GetMaterial(idx)
        if material is not None:
            yield material


def iter_textures(scene) -> Iterator:
    for idx in range(scene.GetTextureCount()):
        texture = scene.GetTexture(idx)
        if texture is not None:
            yield texture


def iter_anim_stacks(scene) -> Iterator:
    fbx, _ = sdk.import_fbx_module()
    yield from iter_src_objects(scene, fbx.FbxAnimStack.ClassId)


def iter_anim_layers(stack) -> Iterator:
    fbx, _ = sdk.import_fbx_module()
    yield from iter_members(stack, fbx.FbxAnimLayer.ClassId)
