import pytest

import fake_fbx
from fbx_bridge.core import sdk

CUBE_POSITIONS = [
    -1.0, -1.0, -1.0,
    1.0, -1.0, -1.0,
    1.0, 1.0, -1.0,
    -1.0, 1.0, -1.0,
    -1.0, -1.0, 1.0,
    1.0, -1.0, 1.0,
    1.0, 1.0, 1.0,
    -1.0, 1.0, 1.0,
]

CUBE_INDICES = [
    0, 2, 1, 0, 3, 2,
    4, 5, 6, 4, 6, 7,
    0, 1, 5, 0, 5, 4,
    2, 3, 7, 2, 7, 6,
    1, 2, 6, 1, 6, 5,
    0, 4, 7, 0, 7, 3,
]


@pytest.fixture(autouse=True)
def fake_sdk(request, monkeypatch):
    """Route every SDK import to the in-memory fake unless a test needs the real bindings."""

    if request.node.get_closest_marker("real_sdk"):
        yield None
        return
    monkeypatch.setattr(sdk, "import_fbx_module", lambda: (fake_fbx, fake_fbx))
    monkeypatch.setattr(fake_fbx.FbxManager, "instances", [])
    yield fake_fbx


@pytest.fixture
def cube_term():
    return {
        "nodes": [{"id": 0, "name": "Root", "mesh_id": 0}],
        "meshes": [{"id": 0, "name": "Cube", "positions": list(CUBE_POSITIONS), "indices": list(CUBE_INDICES)}],
        "materials": [],
        "textures": [],
        "animations": [],
    }


@pytest.fixture
def fake_scene():
    return fake_fbx.FbxScene.Create(None, "Scene")
