import pytest

hypothesis = pytest.importorskip("hypothesis")
from hypothesis import given, strategies as st

from conftest import make_room
from floorplanner.core.model import Corner
from floorplanner.engine.errors import ErrorKind
from floorplanner.engine.resolver import resolve
from floorplanner.geom.corners import get_corner

sizes = st.integers(min_value=1, max_value=20000)
corners = st.sampled_from(list(Corner))


@given(width=sizes, depth=sizes)
def test_origin_stability(width, depth):
    result = resolve([make_room("A", "zeropoint:top-left", width, depth)])
    assert (result.rooms["A"].x, result.rooms["A"].y) == (0, 0)


@given(corner=corners, w1=sizes, d1=sizes, w2=sizes, d2=sizes)
def test_anchor_round_trip(corner, w1, d1, w2, d2):
    rooms = [
        make_room("R2", "zeropoint:top-left", w2, d2),
        make_room("R1", f"R2:{corner.value}", w1, d1),
    ]
    result = resolve(rooms)

    r1 = result.rooms["R1"].rect
    r2 = result.rooms["R2"].rect
    assert get_corner(r1, Corner.TOP_LEFT) == get_corner(r2, corner)


@given(n=st.integers(min_value=2, max_value=12))
def test_cycle_detection(n):
    ids = [f"r{i}" for i in range(n)]
    rooms = [make_room("base", "zeropoint:top-left")]
    rooms += [make_room(ids[i], f"{ids[(i + 1) % n]}:top-right") for i in range(n)]

    result = resolve(rooms)

    assert list(result.rooms) == ["base"]
    assert len(result.errors) == n
    for error, room_id in zip(result.errors, ids):
        assert error.kind is ErrorKind.CIRCULAR_DEPENDENCY
        assert error.entity_id == room_id
        assert error.members == tuple(ids)


@given(k=st.integers(min_value=1, max_value=8), m=st.integers(min_value=0, max_value=8))
def test_partial_rendering(k, m):
    valid = [make_room("v0", "zeropoint:top-left")]
    valid += [make_room(f"v{i}", f"v{i - 1}:top-right") for i in range(1, k)]
    broken = [make_room(f"b{j}", f"ghost{j}:top-left") for j in range(m)]

    result = resolve(broken + valid)

    assert set(result.rooms) == {room.id for room in valid}
    assert len(result.errors) == m
    assert all(error.kind is ErrorKind.MISSING_REFERENCE for error in result.errors)
