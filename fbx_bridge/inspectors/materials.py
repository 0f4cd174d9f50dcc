"""Surface material color inspector."""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence, Tuple

from ..core import sdk
from ..core.session import SceneContext, SceneInspector
from ..models import Material
from ..utils import Vector3, vector_to_tuple

logger = logging.getLogger(__name__)

# Checked in order; the first PBR property holding a color wins over the legacy one.
_COLOR_SOURCES: Dict[str, Tuple[Sequence[str], str]] = {
    "diffuse_color": (("base_color", "baseColor", "Maya|base_color", "Maya|baseColor"), "DiffuseColor"),
    "specular_color": (
        ("specular_color", "specularColor", "Maya|specular_color", "Maya|specularColor"),
        "SpecularColor",
    ),
    "emissive_color": (
        ("emission_color", "emissionColor", "Maya|emission_color", "Maya|emissionColor"),
        "EmissiveColor",
    ),
}


class MaterialInspector(SceneInspector):
    id = "materials"

    def collect(self, context: SceneContext) -> List[Material]:
        fbx, _ = sdk.import_fbx_module()
        materials = []
        for material_id, material in context.identifiers.materials:
            colors = {
                key: read_color(fbx, material, pbr_names, legacy_name)
                for key, (pbr_names, legacy_name) in _COLOR_SOURCES.items()
            }
            materials.append(Material(id=material_id, name=material.GetName() or "", **colors))
        return materials


def read_color(fbx_module, material, pbr_names: Sequence[str], legacy_name: str) -> Optional[Vector3]:
    """Return the first color found under ``pbr_names``, else under ``legacy_name``."""

    for name in (*pbr_names, legacy_name):
        color = _property_color(fbx_module, material.FindProperty(name))
        if color is not None:
            return color
    return None


def _property_color(fbx_module, prop) -> Optional[Vector3]:
    if prop is None or not prop.IsValid():
        return None
    data_type = prop.GetPropertyDataType().GetType()
    if data_type == fbx_module.eFbxDouble3:
        value = fbx_module.FbxPropertyDouble3(prop).Get()
    elif data_type == fbx_module.eFbxDouble4:
        value = fbx_module.FbxPropertyDouble4(prop).Get()
    else:
        logger.debug("Property %s is not a color", prop.GetName())
        return None
    return vector_to_tuple(value, 3)
