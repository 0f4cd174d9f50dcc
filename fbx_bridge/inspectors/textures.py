"""Texture inspector."""

from __future__ import annotations

from typing import List

from ..core.session import SceneContext, SceneInspector
from ..models import Texture


class TextureInspector(SceneInspector):
    id = "textures"

    def collect(self, context: SceneContext) -> List[Texture]:
        textures = []
        for texture_id, texture in context.identifiers.textures:
            # Only file textures carry a path; procedural ones expose no GetFileName.
            get_file_name = getattr(texture, "GetFileName", None)
            file_path = str(get_file_name() or "") if callable(get_file_name) else ""
            textures.append(Texture(id=texture_id, name=texture.GetName() or "", file_path=file_path or None))
        return textures
