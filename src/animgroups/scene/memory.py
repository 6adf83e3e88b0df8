"""In-memory scene store for tests and offline editing of snapshot files."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from animgroups.models.group import DEFAULT_TICKS_PER_FRAME
from animgroups.scene.base import NodeInfo

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)

ROOT_HANDLE = 0
ROOT_NAME = "Scene Root"


class SceneLoadError(ValueError):
    """Raised when a scene snapshot file cannot be loaded."""


class NodeRecord(BaseModel):
    """A node as written to a snapshot file."""

    handle: int = Field(gt=ROOT_HANDLE)
    name: str
    parent: int = ROOT_HANDLE


class SceneSnapshot(BaseModel):
    """On-disk form of a :class:`MemoryScene`."""

    ticks_per_frame: int = Field(default=DEFAULT_TICKS_PER_FRAME, gt=0)
    range_start: int = 0
    range_end: int = 100 * DEFAULT_TICKS_PER_FRAME
    properties: dict[str, str] = Field(default_factory=dict)
    array_properties: dict[str, list[str]] = Field(default_factory=dict)
    nodes: list[NodeRecord] = Field(default_factory=list)


@dataclass
class _Node:
    name: str
    parent: int


class MemoryScene:
    """A scene store held entirely in memory.

    Nodes hang off an implicit root named ``"Scene Root"``. Handles are
    allocated from an increasing counter and never reused, like a host that
    assigns a fresh handle whenever a node is created.
    """

    def __init__(
        self,
        ticks_per_frame: int = DEFAULT_TICKS_PER_FRAME,
        range_start: int = 0,
        range_end: int | None = None,
    ) -> None:
        self.ticks_per_frame = ticks_per_frame
        self.range_start = range_start
        self.range_end = range_end if range_end is not None else 100 * ticks_per_frame
        self.properties: dict[str, str] = {}
        self.array_properties: dict[str, list[str]] = {}
        self._nodes: dict[int, _Node] = {ROOT_HANDLE: _Node(name=ROOT_NAME, parent=ROOT_HANDLE)}
        self._next_handle = ROOT_HANDLE + 1

    # -- root object properties ------------------------------------------------

    def get_string_property(self, key: str) -> str | None:
        return self.properties.get(key)

    def set_string_property(self, key: str, value: str) -> None:
        self.properties[key] = value

    def delete_property(self, key: str) -> None:
        self.properties.pop(key, None)

    def get_string_array_property(self, key: str) -> list[str]:
        return list(self.array_properties.get(key, []))

    def set_string_array_property(self, key: str, values: list[str]) -> None:
        self.array_properties[key] = list(values)

    def animation_range(self) -> tuple[int, int]:
        return self.range_start, self.range_end

    # -- nodes -----------------------------------------------------------------

    def add_node(self, name: str, parent: str | None = None) -> int:
        """Create a node under ``parent`` (by name, default root) and return its handle."""
        parent_handle = self._handle_for(parent) if parent is not None else ROOT_HANDLE
        handle = self._next_handle
        self._next_handle += 1
        self._nodes[handle] = _Node(name=name, parent=parent_handle)
        return handle

    def remove_node(self, handle: int) -> None:
        """Delete a node; its children move up to the root."""
        if handle == ROOT_HANDLE:
            msg = "cannot remove the scene root"
            raise ValueError(msg)
        del self._nodes[handle]
        for node in self._nodes.values():
            if node.parent == handle:
                node.parent = ROOT_HANDLE

    def rename_node(self, handle: int, name: str) -> None:
        self._nodes[handle].name = name

    def reparent_node(self, handle: int, parent: str | None) -> None:
        self._nodes[handle].parent = self._handle_for(parent) if parent is not None else ROOT_HANDLE

    def resolve_node_by_handle(self, handle: int) -> NodeInfo | None:
        node = self._nodes.get(handle)
        if node is None:
            return None
        return NodeInfo(handle=handle, name=node.name, parent_name=self._parent_name(handle))

    def resolve_node_by_name(self, name: str) -> NodeInfo | None:
        for handle in sorted(self._nodes):
            if self._nodes[handle].name == name:
                return NodeInfo(handle=handle, name=name, parent_name=self._parent_name(handle))
        return None

    def _handle_for(self, name: str) -> int:
        info = self.resolve_node_by_name(name)
        if info is None:
            msg = f"no node named {name!r}"
            raise KeyError(msg)
        return info.handle

    def _parent_name(self, handle: int) -> str:
        if handle == ROOT_HANDLE:
            return ""
        return self._nodes[self._nodes[handle].parent].name

    # -- snapshot files --------------------------------------------------------

    def snapshot(self) -> SceneSnapshot:
        return SceneSnapshot(
            ticks_per_frame=self.ticks_per_frame,
            range_start=self.range_start,
            range_end=self.range_end,
            properties=dict(self.properties),
            array_properties={k: list(v) for k, v in self.array_properties.items()},
            nodes=[
                NodeRecord(handle=handle, name=node.name, parent=node.parent)
                for handle, node in sorted(self._nodes.items())
                if handle != ROOT_HANDLE
            ],
        )

    @classmethod
    def from_snapshot(cls, snapshot: SceneSnapshot) -> MemoryScene:
        scene = cls(
            ticks_per_frame=snapshot.ticks_per_frame,
            range_start=snapshot.range_start,
            range_end=snapshot.range_end,
        )
        scene.properties = dict(snapshot.properties)
        scene.array_properties = {k: list(v) for k, v in snapshot.array_properties.items()}
        for record in snapshot.nodes:
            scene._nodes[record.handle] = _Node(name=record.name, parent=record.parent)
        for record in snapshot.nodes:
            if record.parent not in scene._nodes:
                msg = f"node {record.handle} references missing parent {record.parent}"
                raise SceneLoadError(msg)
        if snapshot.nodes:
            scene._next_handle = max(r.handle for r in snapshot.nodes) + 1
        return scene

    def save(self, path: Path) -> Path:
        """Write the scene to a JSON snapshot file."""
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.snapshot().model_dump_json(indent=2))
        logger.debug("Saved scene snapshot %s", path)
        return path

    @classmethod
    def load(cls, path: Path) -> MemoryScene:
        """Load a scene from a JSON snapshot file."""
        try:
            text = path.read_text()
        except FileNotFoundError:
            msg = f"scene file not found: {path}"
            raise SceneLoadError(msg) from None
        except PermissionError:
            msg = f"permission denied reading scene file: {path}"
            raise SceneLoadError(msg) from None
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            msg = f"scene file contains invalid JSON: {exc}"
            raise SceneLoadError(msg) from None
        try:
            snapshot = SceneSnapshot.model_validate(data)
        except PydanticValidationError as exc:
            msg = f"scene file has invalid structure: {exc}"
            raise SceneLoadError(msg) from None
        return cls.from_snapshot(snapshot)
