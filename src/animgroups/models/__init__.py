"""animgroups data models."""

from animgroups.models.group import (
    DEFAULT_NAME,
    PROPERTY_SEPARATOR,
    AnimationGroup,
    format_record,
)
from animgroups.models.portable import (
    AnimationGroupData,
    ImportReport,
    NodeData,
    PortableDocument,
    ReconciliationSkip,
)

__all__ = [
    "DEFAULT_NAME",
    "PROPERTY_SEPARATOR",
    "AnimationGroup",
    "AnimationGroupData",
    "ImportReport",
    "NodeData",
    "PortableDocument",
    "ReconciliationSkip",
    "format_record",
]
