import pytest

from floorplanner.core.model import (
    AttachmentRef,
    Corner,
    Door,
    DoorSwing,
    DoorType,
    ObjectShape,
    Rect,
    RoomObject,
    TargetKind,
    part_key,
    split_wall_ref,
)


def test_parse_attachment_ref():
    ref = AttachmentRef.parse("living:bottom-right")
    assert ref.target_id == "living"
    assert ref.corner is Corner.BOTTOM_RIGHT
    assert str(ref) == "living:bottom-right"


def test_parse_splits_on_last_colon():
    ref = AttachmentRef.parse("floor:1:top-right")
    assert ref.target_id == "floor:1"
    assert ref.corner is Corner.TOP_RIGHT


@pytest.mark.parametrize("value", ["living", "living:middle", ":top-left", 42])
def test_parse_rejects_bad_refs(value):
    with pytest.raises(ValueError):
        AttachmentRef.parse(value)


def test_attachment_targets():
    assert AttachmentRef.parse("zeropoint:top-left").target.kind is TargetKind.ORIGIN
    assert AttachmentRef.parse("parent:top-left").target.kind is TargetKind.PARENT
    target = AttachmentRef.parse("kitchen:top-left").target
    assert target.kind is TargetKind.ENTITY
    assert target.entity_id == "kitchen"


def test_rect_edges():
    rect = Rect(100, 200, 300, 400)
    assert rect.right == 400
    assert rect.bottom == 600
    assert rect.bounds == (100, 200, 400, 600)


def test_object_size():
    assert RoomObject(ObjectShape.CIRCLE, width=600, height=100).size == (600, 600)
    assert RoomObject(ObjectShape.SQUARE, width=600).size == (600, 600)
    assert RoomObject(ObjectShape.SQUARE, width=600, height=100).size == (600, 100)


def test_door_is_opening():
    assert not Door("a:top", 800).is_opening
    assert Door("a:top", 800, type=DoorType.OPENING).is_opening
    assert Door("a:top", 800, swing=DoorSwing.OPENING).is_opening


def test_keys_and_wall_refs():
    assert part_key("living", "nook") == "living/nook"
    assert split_wall_ref("living/nook:left") == ("living/nook", "left")
    assert split_wall_ref("living") == ("living", "")
