"""Tests for the AnimationGroup record and its property encoding."""

from uuid import UUID, uuid4

import pytest

from animgroups.errors import FormatError, ParseError
from animgroups.models import AnimationGroup
from animgroups.scene.memory import MemoryScene


def _clean(**kwargs) -> AnimationGroup:
    group = AnimationGroup(**kwargs)
    group.encode()
    assert not group.is_dirty
    return group


def test_new_group_is_dirty():
    group = AnimationGroup()
    assert group.is_dirty
    assert group.name == "Animation"
    assert group.node_handles == ()
    assert isinstance(group.id, UUID)


def test_ids_are_unique():
    assert AnimationGroup().id != AnimationGroup().id


def test_for_scene_uses_animation_range(scene: MemoryScene):
    group = AnimationGroup.for_scene(scene, "Idle")
    assert group.name == "Idle"
    assert (group.ticks_start, group.ticks_end) == scene.animation_range()
    assert group.ticks_per_frame == 160


@pytest.mark.parametrize(
    ("setter", "same", "different"),
    [
        ("set_name", "Walk", "Run"),
        ("set_ticks_start", 160, 320),
        ("set_ticks_end", 1600, 3200),
        ("set_frame_start", 1, 2),
        ("set_frame_end", 10, 20),
        ("set_node_handles", [1, 2, 3], [1, 2, 4]),
    ],
)
def test_setter_marks_dirty_only_on_change(setter, same, different):
    group = _clean(name="Walk", ticks_start=160, ticks_end=1600, node_handles=[1, 2, 3])

    assert getattr(group, setter)(same) is False
    assert not group.is_dirty

    assert getattr(group, setter)(different) is True
    assert group.is_dirty


def test_set_id_marks_dirty_only_on_change():
    group_id = uuid4()
    group = _clean(group_id=group_id)
    assert group.set_id(UUID(str(group_id))) is False
    assert not group.is_dirty
    assert group.set_id(uuid4()) is True
    assert group.is_dirty


def test_node_handles_compared_elementwise():
    group = _clean(node_handles=[1, 2])
    assert group.set_node_handles((1, 2)) is False
    assert group.set_node_handles([2, 1]) is True
    assert group.node_handles == (2, 1)


def test_node_handles_keep_duplicates_and_order():
    group = AnimationGroup(node_handles=[5, 3, 5])
    assert group.node_handles == (5, 3, 5)


def test_frame_start_writes_ticks():
    group = AnimationGroup(ticks_per_frame=160)
    group.set_frame_start(10)
    assert group.ticks_start == 1600


def test_frame_view_rounds_to_nearest():
    group = AnimationGroup(ticks_per_frame=160)
    group.set_ticks_start(1605)
    assert group.frame_start == 10
    group.set_ticks_end(1590)
    assert group.frame_end == 10


def test_frame_setter_is_noop_for_same_rounded_frame():
    group = _clean(ticks_start=1605, ticks_per_frame=160)
    assert group.set_frame_start(10) is False
    assert group.ticks_start == 1605


def test_invalid_ticks_per_frame():
    with pytest.raises(ValueError, match="ticks_per_frame"):
        AnimationGroup(ticks_per_frame=0)


def test_str_uses_frames():
    group = AnimationGroup("Walk", 1600, 3200, ticks_per_frame=160)
    assert str(group) == "Walk (10, 20)"


# ---------------------------------------------------------------------------
# Encoding
# ---------------------------------------------------------------------------


def test_encode_format():
    group = AnimationGroup("Walk", 1600, 3200, [3, 7, 7])
    key, value = group.encode()
    assert key == str(group.id)
    assert value == "Walk;1600;3200;3;7;7"
    assert not group.is_dirty


def test_encode_without_members_keeps_empty_tail():
    _, value = AnimationGroup("Idle", 0, 800).encode()
    assert value == "Idle;0;800;"


@pytest.mark.parametrize("name", ["Walk Cycle", "a=b", "a;b"])
def test_encode_rejects_illegal_names(name: str):
    group = AnimationGroup(name)
    with pytest.raises(FormatError, match="not allowed"):
        group.encode()
    assert group.is_dirty


def test_encode_decode_round_trip():
    original = AnimationGroup("Jump", -160, 4800, [4, 2, 9])
    key, value = original.encode()

    decoded = AnimationGroup()
    decoded.decode(key, value)
    assert decoded == original
    assert not decoded.is_dirty


# ---------------------------------------------------------------------------
# Decoding
# ---------------------------------------------------------------------------


def test_decode_populates_fields():
    key = str(uuid4())
    group = AnimationGroup()
    group.decode(key, "Run;160;960;11;12")
    assert group.key == key
    assert group.name == "Run"
    assert (group.ticks_start, group.ticks_end) == (160, 960)
    assert group.node_handles == (11, 12)
    assert not group.is_dirty


def test_decode_empty_tail_has_no_members():
    group = AnimationGroup(node_handles=[1])
    group.decode(str(uuid4()), "Idle;0;800;")
    assert group.node_handles == ()
    assert not group.is_dirty


def test_decode_keeps_legacy_names():
    group = AnimationGroup()
    group.decode(str(uuid4()), "Old Name=1;0;10;")
    assert group.name == "Old Name=1"


def test_decode_missing_value_keeps_defaults():
    key = str(uuid4())
    group = AnimationGroup()
    group.decode(key, None)
    assert group.key == key
    assert group.name == "Animation"
    assert group.node_handles == ()
    assert group.is_dirty


@pytest.mark.parametrize("key", ["", "not-a-uuid", "1234"])
def test_decode_invalid_key(key: str):
    with pytest.raises(ParseError, match="Invalid ID"):
        AnimationGroup().decode(key, "Walk;0;10;")


@pytest.mark.parametrize("value", ["", "Walk", "Walk;0", "Walk;0;10"])
def test_decode_too_few_fields(value: str):
    group = _clean()
    with pytest.raises(FormatError, match="number of properties"):
        group.decode(str(uuid4()), value)
    assert group.is_dirty


@pytest.mark.parametrize(
    "value", ["Walk;x;10;", "Walk;0;;", "Walk;1.5;10;", "Walk;0;99999999999;"],
)
def test_decode_bad_ticks(value: str):
    group = _clean()
    with pytest.raises(ParseError, match="tick"):
        group.decode(str(uuid4()), value)
    assert group.is_dirty


def test_decode_reports_single_member_failure():
    group = _clean()
    with pytest.raises(ParseError, match="Failed to parse 1 node ids") as exc_info:
        group.decode(str(uuid4()), "Walk;0;10;1;x;3")
    assert exc_info.value.count == 1
    assert group.is_dirty


def test_decode_reports_all_member_failures():
    group = _clean(node_handles=[42])
    with pytest.raises(ParseError) as exc_info:
        group.decode(str(uuid4()), "Walk;0;10;1;a;2;-3;b")
    assert exc_info.value.count == 3
    assert "3 node ids" in str(exc_info.value)
    # no partial member list is kept
    assert group.node_handles == (42,)


def test_decode_rejects_handles_beyond_uint32():
    with pytest.raises(ParseError) as exc_info:
        AnimationGroup().decode(str(uuid4()), "Walk;0;10;4294967295;4294967296")
    assert exc_info.value.count == 1


# ---------------------------------------------------------------------------
# Store access
# ---------------------------------------------------------------------------


def test_save_writes_property(scene: MemoryScene):
    group = AnimationGroup("Wave", 0, 160, [2])
    group.save(scene)
    assert scene.get_string_property(group.key) == "Wave;0;160;2"
    assert not group.is_dirty


def test_save_with_illegal_name_writes_nothing(scene: MemoryScene):
    group = AnimationGroup("bad name")
    with pytest.raises(FormatError):
        group.save(scene)
    assert scene.get_string_property(group.key) is None
    assert group.is_dirty


def test_load_reads_property(scene: MemoryScene):
    original = AnimationGroup("Wave", 0, 160, [2])
    original.save(scene)
    loaded = AnimationGroup()
    loaded.load(scene, original.key)
    assert loaded == original


def test_delete_removes_property(scene: MemoryScene):
    group = AnimationGroup("Wave")
    group.save(scene)
    group.delete(scene)
    assert scene.get_string_property(group.key) is None
    assert group.is_dirty


def test_copy_is_equal_and_dirty():
    original = _clean(name="Wave", ticks_start=16, ticks_end=32, node_handles=[1])
    duplicate = original.copy()
    assert duplicate == original
    assert duplicate is not original
    assert duplicate.is_dirty
    duplicate.set_node_handles([2])
    assert original.node_handles == (1,)
