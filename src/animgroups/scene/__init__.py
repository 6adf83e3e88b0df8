"""Host scene access: the store protocol and an in-memory implementation."""

from animgroups.scene.base import NodeInfo, SceneStore
from animgroups.scene.memory import MemoryScene, SceneLoadError

__all__ = [
    "MemoryScene",
    "NodeInfo",
    "SceneLoadError",
    "SceneStore",
]
