"""Scene store protocol and shared types for host integrations."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@dataclass(frozen=True)
class NodeInfo:
    """A scene node resolved at lookup time.

    Handles are reassigned whenever the host recreates a node, so a
    ``NodeInfo`` is only valid for the duration of the call that produced it.
    """

    handle: int
    name: str
    parent_name: str


@runtime_checkable
class SceneStore(Protocol):
    """Protocol for the host scene: root-object properties plus node lookup."""

    ticks_per_frame: int

    def get_string_property(self, key: str) -> str | None:
        """Return the string property stored under ``key``, or ``None``."""
        ...

    def set_string_property(self, key: str, value: str) -> None:
        """Store ``value`` under ``key`` on the root object."""
        ...

    def delete_property(self, key: str) -> None:
        """Remove the property stored under ``key`` if present."""
        ...

    def get_string_array_property(self, key: str) -> list[str]:
        """Return the string array stored under ``key`` (empty when absent)."""
        ...

    def set_string_array_property(self, key: str, values: list[str]) -> None:
        """Store ``values`` under ``key`` on the root object."""
        ...

    def resolve_node_by_handle(self, handle: int) -> NodeInfo | None:
        """Look up a node by its handle."""
        ...

    def resolve_node_by_name(self, name: str) -> NodeInfo | None:
        """Look up the first node with the given name."""
        ...

    def animation_range(self) -> tuple[int, int]:
        """Return the current timeline range in ticks."""
        ...
