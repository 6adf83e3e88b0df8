"""Ordered collection of animation groups and its sync with store and JSON."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator
from typing import TYPE_CHECKING

import jsonschema
from pydantic import ValidationError as PydanticValidationError

from animgroups.config import AppConfig, load_config
from animgroups.errors import ParseError
from animgroups.models.group import AnimationGroup, format_record
from animgroups.models.portable import (
    AnimationGroupData,
    ImportReport,
    NodeData,
    PortableDocument,
    ReconciliationSkip,
)
from animgroups.validation import validate_portable_json

if TYPE_CHECKING:
    from pathlib import Path

    from animgroups.scene.base import SceneStore

logger = logging.getLogger(__name__)


class AnimationGroupCollection:
    """The animation groups of one scene, in display order.

    The collection owns its groups; the scene store is only borrowed and is
    read fresh on every load, export and import.
    """

    def __init__(self, store: SceneStore, *, app_config: AppConfig | None = None) -> None:
        self.store = store
        self.config = app_config if app_config is not None else load_config()
        self._groups: list[AnimationGroup] = []

    def __len__(self) -> int:
        return len(self._groups)

    def __iter__(self) -> Iterator[AnimationGroup]:
        return iter(self._groups)

    def __getitem__(self, index: int) -> AnimationGroup:
        return self._groups[index]

    @property
    def index_property(self) -> str:
        return self.config.index_property

    # -- in-memory editing -----------------------------------------------------

    def append(self, group: AnimationGroup) -> None:
        self._groups.append(group)

    def create(self, name: str | None = None) -> AnimationGroup:
        """Add a new group covering the scene's current animation range."""
        group = AnimationGroup.for_scene(self.store, name or self.config.default_group_name)
        self._groups.append(group)
        return group

    def remove(self, group: AnimationGroup, *, delete: bool = True) -> None:
        """Drop ``group``; its stored property is deleted unless ``delete`` is False.

        The index still lists the group until the next :meth:`save_to_store`.
        """
        self._groups.remove(group)
        if delete:
            group.delete(self.store)

    def clear(self) -> None:
        self._groups.clear()

    def find(self, name_or_id: str) -> AnimationGroup | None:
        """Return the first group whose key or name matches."""
        for group in self._groups:
            if name_or_id in (group.key, group.name):
                return group
        return None

    # -- persistent store ------------------------------------------------------

    def _read_index(self) -> list[str]:
        return self.store.get_string_array_property(self.index_property)

    def _read_groups(self) -> list[AnimationGroup]:
        groups: list[AnimationGroup] = []
        for key in self._read_index():
            group = AnimationGroup(ticks_per_frame=self.store.ticks_per_frame)
            group.load(self.store, key)
            groups.append(group)
        return groups

    def load_from_store(self) -> None:
        """Replace the contents with the groups listed in the store's index.

        A group that fails to decode aborts the load and leaves the collection
        as it was.
        """
        groups = self._read_groups()
        self._groups = groups
        logger.info("Loaded %d animation group(s) from %s", len(groups), self.index_property)

    def save_to_store(self) -> int:
        """Write every dirty group, then rewrite the full index.

        Returns the number of group properties written.
        """
        written = 0
        for group in self._groups:
            if group.is_dirty:
                group.save(self.store)
                written += 1
        self.store.set_string_array_property(self.index_property, [g.key for g in self._groups])
        logger.info("Saved %d of %d animation group(s)", written, len(self._groups))
        return written

    # -- portable document -----------------------------------------------------

    def to_portable(self) -> list[AnimationGroupData]:
        """Build the portable document from what is currently persisted."""
        documents: list[AnimationGroupData] = []
        for group in self._read_groups():
            nodes: list[NodeData] = []
            for handle in group.node_handles:
                info = self.store.resolve_node_by_handle(handle)
                if info is None:
                    logger.warning(
                        "Node %d of animation group '%s' no longer exists", handle, group.name,
                    )
                    nodes.append(NodeData(handle=handle, name="", parent_name=""))
                    continue
                nodes.append(NodeData(handle=handle, name=info.name, parent_name=info.parent_name))
            documents.append(
                AnimationGroupData(
                    id=group.id,
                    name=group.name,
                    start_tick=group.ticks_start,
                    end_tick=group.ticks_end,
                    node_data_list=nodes,
                )
            )
        return documents

    def export_to_portable(self, path: Path) -> Path:
        """Write the persisted groups to ``path`` as one JSON document."""
        documents = self.to_portable()
        payload = PortableDocument.dump_json(documents, by_alias=True, indent=self.config.json_indent)
        path.write_bytes(payload)
        logger.info("Exported %d animation group(s) -> %s", len(documents), path)
        return path

    def _reconcile(
        self, data: AnimationGroupData,
    ) -> tuple[list[int], ReconciliationSkip | None]:
        # Handles from another session are never trusted; name + parent name
        # must still match, and a single mismatch voids the whole member list.
        handles: list[int] = []
        for node in data.node_data_list:
            current = self.store.resolve_node_by_name(node.name)
            if current is None:
                reason = "node is missing"
            elif current.parent_name != node.parent_name:
                reason = (
                    f"parent changed from '{node.parent_name}' to '{current.parent_name}'"
                )
            else:
                handles.append(current.handle)
                continue
            logger.warning(
                "Dropping members of animation group '%s': '%s' %s",
                data.name, node.name, reason,
            )
            skip = ReconciliationSkip(
                group_id=data.id, group_name=data.name, node_name=node.name, reason=reason,
            )
            return [], skip
        return handles, None

    def import_from_portable(self, json_text: str | bytes) -> ImportReport:
        """Replace the stored groups with those of a portable document.

        Members are matched against the current scene by name and parent name.
        Each group is written under its original id, the index is rewritten,
        and the collection is reloaded from the store.

        Raises
        ------
        ParseError
            If the text is not JSON or does not match the portable schema.
        """
        self.clear()

        try:
            raw = json.loads(json_text)
        except json.JSONDecodeError as exc:
            msg = f"animation group file contains invalid JSON: {exc}"
            raise ParseError(msg) from None
        try:
            validate_portable_json(raw)
            documents = PortableDocument.validate_python(raw)
        except jsonschema.ValidationError as exc:
            msg = f"animation group file has invalid structure: {exc.message}"
            raise ParseError(msg) from None
        except PydanticValidationError as exc:
            msg = f"animation group file has invalid structure: {exc}"
            raise ParseError(msg) from None

        report = ImportReport()
        keys: list[str] = []
        for data in documents:
            handles, skip = self._reconcile(data)
            if skip is not None:
                report.skipped.append(skip)
            key = str(data.id)
            self.store.set_string_property(
                key, format_record(data.name, data.start_tick, data.end_tick, handles),
            )
            keys.append(key)
            report.imported.append(data.id)

        self.store.set_string_array_property(self.index_property, keys)
        self.load_from_store()
        logger.info(
            "Imported %d animation group(s), %d without members",
            len(report.imported), len(report.skipped),
        )
        return report

    def import_from_file(self, path: Path) -> ImportReport:
        """Read ``path`` and import it with :meth:`import_from_portable`."""
        return self.import_from_portable(path.read_text(encoding="utf-8"))
