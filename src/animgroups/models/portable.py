"""Portable interchange document models (the exported JSON file)."""

from __future__ import annotations

from dataclasses import dataclass, field
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from animgroups.models.group import PROPERTY_SEPARATOR, TICK_MAX, TICK_MIN


class NodeData(BaseModel):
    """A member node captured by handle, name and parent name at export time."""

    model_config = ConfigDict(populate_by_name=True)

    handle: int = Field(alias="Handle", ge=0)
    name: str = Field(alias="Name")
    parent_name: str = Field(alias="ParentName")


class AnimationGroupData(BaseModel):
    """One animation group as it appears in the portable document."""

    model_config = ConfigDict(populate_by_name=True)

    id: UUID = Field(alias="ID")
    # a separator in the name would shift every field of the stored record
    name: str = Field(alias="Name", pattern=f"^[^{PROPERTY_SEPARATOR}]*$")
    start_tick: int = Field(alias="StartTick", ge=TICK_MIN, le=TICK_MAX)
    end_tick: int = Field(alias="EndTick", ge=TICK_MIN, le=TICK_MAX)
    node_data_list: list[NodeData] = Field(alias="NodeDataList", default_factory=list)


PortableDocument = TypeAdapter(list[AnimationGroupData])


@dataclass
class ReconciliationSkip:
    """A group whose membership was dropped during import."""

    group_id: UUID
    group_name: str
    node_name: str
    reason: str


@dataclass
class ImportReport:
    """Outcome of importing a portable document."""

    imported: list[UUID] = field(default_factory=list)
    skipped: list[ReconciliationSkip] = field(default_factory=list)

    @property
    def fully_restored(self) -> bool:
        return not self.skipped
