import json

import pytest

from floorplanner.core.model import AttachmentRef, Room, RoomPart


def make_room(room_id, attach_to="zeropoint:top-left", width=3000, depth=3000, **kwargs):
    return Room(
        id=room_id,
        width=width,
        depth=depth,
        attach_to=AttachmentRef.parse(attach_to),
        **kwargs,
    )


def make_part(part_id, attach_to="parent:top-left", width=1000, depth=1000, **kwargs):
    return RoomPart(
        id=part_id,
        width=width,
        depth=depth,
        attach_to=AttachmentRef.parse(attach_to),
        **kwargs,
    )


@pytest.fixture
def sample_document():
    return {
        "grid_step": 1000,
        "rooms": [
            {
                "id": "living",
                "name": "Living Room",
                "attachTo": "zeropoint:top-left",
                "width": 4000,
                "depth": 3000,
                "parts": [
                    {"id": "nook", "attachTo": "parent:top-right", "width": 1000, "depth": 1500},
                ],
                "objects": [
                    {"type": "square", "x": 100, "y": 100, "width": 800, "height": 400, "text": "Sofa"},
                    {"type": "circle", "radius": 300, "roomAnchor": "bottom-right", "anchor": "bottom-right"},
                ],
            },
            {
                "id": "kitchen",
                "attachTo": "living:bottom-left",
                "width": 3000,
                "depth": 2000,
            },
        ],
        "doors": [
            {"room": "living:bottom", "offset": 1000, "width": 800, "swing": "inwards-left"},
            {"room": "nook:right", "offset": 200, "width": 700, "type": "opening"},
        ],
        "windows": [
            {"room": "kitchen:left", "offset": 500, "width": 1200},
        ],
    }


@pytest.fixture
def plan_file(tmp_path, sample_document):
    path = tmp_path / "plan.json"
    path.write_text(json.dumps(sample_document), encoding="utf-8")
    return path


