"""Animation group record and its compact property encoding."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Sequence
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from animgroups.errors import FormatError, ParseError

if TYPE_CHECKING:
    from animgroups.scene.base import SceneStore

logger = logging.getLogger(__name__)

PROPERTY_SEPARATOR = ";"
DISPLAY_NAME_FORMAT = "{name} ({start:d}, {end:d})"
DEFAULT_NAME = "Animation"
DEFAULT_TICKS_PER_FRAME = 160

# ' ' and '=' are rejected by the host's property storage
FORBIDDEN_NAME_CHARS = (" ", "=", PROPERTY_SEPARATOR)

_INT_RE = re.compile(r"[+-]?\d+")
_UINT_RE = re.compile(r"\+?\d+")
TICK_MIN, TICK_MAX = -(2**31), 2**31 - 1
_UINT32_MAX = 2**32 - 1


def format_record(name: str, ticks_start: int, ticks_end: int, node_handles: Iterable[int]) -> str:
    """Join record fields into the ``name;start;end;h1;h2;...`` property value.

    No validation is done here; an empty handle list still produces the
    trailing empty field.
    """
    nodes = PROPERTY_SEPARATOR.join(str(h) for h in node_handles)
    return PROPERTY_SEPARATOR.join((name, str(ticks_start), str(ticks_end), nodes))


def _parse_int(text: str) -> int | None:
    text = text.strip()
    if not _INT_RE.fullmatch(text):
        return None
    value = int(text)
    return value if TICK_MIN <= value <= TICK_MAX else None


def _parse_handle(text: str) -> int | None:
    text = text.strip()
    if not _UINT_RE.fullmatch(text):
        return None
    value = int(text)
    return value if value <= _UINT32_MAX else None


class AnimationGroup:
    """A named, time-ranged set of scene nodes with change tracking.

    Ticks are the source of truth for the range; the frame properties are
    rounded views over them. Every ``set_*`` method returns ``True`` when the
    value actually changed and only then marks the group dirty.
    """

    def __init__(
        self,
        name: str = DEFAULT_NAME,
        ticks_start: int = 0,
        ticks_end: int | None = None,
        node_handles: Iterable[int] = (),
        *,
        group_id: UUID | None = None,
        ticks_per_frame: int = DEFAULT_TICKS_PER_FRAME,
    ) -> None:
        if ticks_per_frame <= 0:
            msg = f"ticks_per_frame must be positive, got {ticks_per_frame}"
            raise ValueError(msg)
        self.ticks_per_frame = ticks_per_frame
        self._id = group_id or uuid4()
        self._name = name
        self._ticks_start = ticks_start
        self._ticks_end = ticks_end if ticks_end is not None else 100 * ticks_per_frame
        self._node_handles: list[int] = list(node_handles)
        self._dirty = True

    @classmethod
    def for_scene(cls, store: SceneStore, name: str = DEFAULT_NAME) -> AnimationGroup:
        """Create a group spanning the scene's current animation range."""
        start, end = store.animation_range()
        return cls(name, start, end, ticks_per_frame=store.ticks_per_frame)

    # -- read access -----------------------------------------------------------

    @property
    def id(self) -> UUID:
        return self._id

    @property
    def key(self) -> str:
        """Property name this group is stored under."""
        return str(self._id)

    @property
    def name(self) -> str:
        return self._name

    @property
    def ticks_start(self) -> int:
        return self._ticks_start

    @property
    def ticks_end(self) -> int:
        return self._ticks_end

    @property
    def frame_start(self) -> int:
        return round(self._ticks_start / self.ticks_per_frame)

    @property
    def frame_end(self) -> int:
        return round(self._ticks_end / self.ticks_per_frame)

    @property
    def node_handles(self) -> tuple[int, ...]:
        return tuple(self._node_handles)

    @property
    def is_dirty(self) -> bool:
        return self._dirty

    # -- mutation --------------------------------------------------------------

    def set_id(self, value: UUID) -> bool:
        if value == self._id:
            return False
        self._id = value
        self._dirty = True
        return True

    def set_name(self, value: str) -> bool:
        if value == self._name:
            return False
        self._name = value
        self._dirty = True
        return True

    def set_ticks_start(self, value: int) -> bool:
        if value == self._ticks_start:
            return False
        self._ticks_start = value
        self._dirty = True
        return True

    def set_ticks_end(self, value: int) -> bool:
        if value == self._ticks_end:
            return False
        self._ticks_end = value
        self._dirty = True
        return True

    def set_frame_start(self, value: int) -> bool:
        # compared against the rounded view, not the stored ticks
        if value == self.frame_start:
            return False
        self._ticks_start = value * self.ticks_per_frame
        self._dirty = True
        return True

    def set_frame_end(self, value: int) -> bool:
        if value == self.frame_end:
            return False
        self._ticks_end = value * self.ticks_per_frame
        self._dirty = True
        return True

    def set_node_handles(self, value: Sequence[int]) -> bool:
        if list(value) == self._node_handles:
            return False
        self._node_handles = list(value)
        self._dirty = True
        return True

    def copy_from(self, other: AnimationGroup) -> None:
        """Take over every field of ``other``, including its id."""
        self._id = other._id
        self._name = other._name
        self._ticks_start = other._ticks_start
        self._ticks_end = other._ticks_end
        self._node_handles = list(other._node_handles)
        self.ticks_per_frame = other.ticks_per_frame
        self._dirty = True

    def copy(self) -> AnimationGroup:
        group = AnimationGroup(ticks_per_frame=self.ticks_per_frame)
        group.copy_from(self)
        return group

    # -- encoding --------------------------------------------------------------

    def _serialize(self) -> tuple[str, str]:
        bad = [c for c in FORBIDDEN_NAME_CHARS if c in self._name]
        if bad:
            msg = (
                f"Invalid character(s) in animation name {self._name!r}. Spaces, equal "
                f"signs and the separator '{PROPERTY_SEPARATOR}' are not allowed."
            )
            raise FormatError(msg)
        value = format_record(self._name, self._ticks_start, self._ticks_end, self._node_handles)
        return self.key, value

    def encode(self) -> tuple[str, str]:
        """Return ``(key, value)`` for storage and mark the group clean.

        Raises
        ------
        FormatError
            If the name contains a space, ``=`` or ``;``.
        """
        key, value = self._serialize()
        self._dirty = False
        return key, value

    def decode(self, key: str, value: str | None) -> None:
        """Populate the group from a storage key and its property value.

        ``value`` of ``None`` means the index lists a key with no stored
        property; the group keeps its defaults and no error is raised. Names
        are taken verbatim so legacy data with illegal characters still loads.

        Raises
        ------
        ParseError
            If the key is not a UUID, a tick value is not an integer, or any
            node handle fails to parse (``count`` reports how many).
        FormatError
            If the value has fewer than four fields.
        """
        try:
            self._id = UUID(key)
        except ValueError:
            msg = f"Invalid ID {key!r}, can't deserialize."
            raise ParseError(msg) from None

        if value is None:
            logger.debug("No stored data for animation group %s", key)
            return

        # stays set if anything below raises
        self._dirty = True

        fields = value.split(PROPERTY_SEPARATOR)
        if len(fields) < 4:
            msg = f"Invalid number of properties ({len(fields)}) in {value!r}, can't deserialize."
            raise FormatError(msg)

        name = fields[0]
        ticks_start = _parse_int(fields[1])
        if ticks_start is None:
            msg = f"Failed to parse start tick {fields[1]!r}."
            raise ParseError(msg)
        ticks_end = _parse_int(fields[2])
        if ticks_end is None:
            msg = f"Failed to parse end tick {fields[2]!r}."
            raise ParseError(msg)

        tail = fields[3:]
        handles: list[int] = []
        if tail != [""]:
            failed = 0
            for token in tail:
                handle = _parse_handle(token)
                if handle is None:
                    failed += 1
                    continue
                handles.append(handle)
            if failed:
                msg = f"Failed to parse {failed} node ids."
                raise ParseError(msg, count=failed)

        self._name = name
        self._ticks_start = ticks_start
        self._ticks_end = ticks_end
        self._node_handles = handles
        self._dirty = False

    # -- store access ----------------------------------------------------------

    def load(self, store: SceneStore, key: str) -> None:
        """Decode the group stored under ``key``."""
        self.decode(key, store.get_string_property(key))

    def save(self, store: SceneStore) -> None:
        """Encode and write the group; it stays dirty if the write fails."""
        key, value = self._serialize()
        store.set_string_property(key, value)
        self._dirty = False
        logger.debug("Saved animation group %s (%s)", self._name, key)

    def delete(self, store: SceneStore) -> None:
        """Remove the group's property from the store."""
        store.delete_property(self.key)
        self._dirty = True

    # -- dunder ----------------------------------------------------------------

    def _fields(self) -> tuple[UUID, str, int, int, tuple[int, ...]]:
        return self._id, self._name, self._ticks_start, self._ticks_end, self.node_handles

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AnimationGroup):
            return NotImplemented
        return self._fields() == other._fields()

    __hash__ = None  # type: ignore[assignment]

    def __str__(self) -> str:
        return DISPLAY_NAME_FORMAT.format(name=self._name, start=self.frame_start, end=self.frame_end)

    def __repr__(self) -> str:
        return (
            f"AnimationGroup(name={self._name!r}, ticks_start={self._ticks_start}, "
            f"ticks_end={self._ticks_end}, node_handles={self._node_handles!r}, "
            f"group_id={self._id!r})"
        )
