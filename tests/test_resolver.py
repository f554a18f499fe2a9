from conftest import make_part, make_room
from floorplanner.config import ResolverConfig
from floorplanner.core.model import Corner, ObjectShape, Point, RoomObject
from floorplanner.engine.errors import ErrorKind, Severity
from floorplanner.engine.resolver import resolve


def test_concrete_scenario():
    rooms = [
        make_room("A", "zeropoint:top-left", 3000, 3000),
        make_room("B", "A:top-right", 2000, 2000),
    ]
    result = resolve(rooms)

    assert (result.rooms["A"].x, result.rooms["A"].y) == (0, 0)
    assert (result.rooms["B"].x, result.rooms["B"].y) == (3000, 0)
    assert result.errors == ()
    assert result.ok


def test_forward_reference_resolves():
    rooms = [
        make_room("B", "A:bottom-left", 2000, 1000),
        make_room("A", "zeropoint:top-left", 3000, 3000),
    ]
    result = resolve(rooms)

    assert (result.rooms["B"].x, result.rooms["B"].y) == (0, 3000)
    assert list(result.rooms) == ["B", "A"]


def test_own_anchor_and_offset():
    rooms = [make_room("A", "zeropoint:top-left", 3000, 2000, anchor=Corner.BOTTOM_RIGHT, offset=(100, -50))]
    result = resolve(rooms)

    assert (result.rooms["A"].x, result.rooms["A"].y) == (-2900, -2050)


def test_self_reference_is_a_cycle():
    result = resolve([make_room("A", "A:top-left")])

    assert result.rooms == {}
    (error,) = result.errors
    assert error.kind is ErrorKind.CIRCULAR_DEPENDENCY
    assert error.members == ("A",)


def test_missing_reference_details():
    result = resolve([make_room("A", "zeropoint:top-left"), make_room("B", "ghost:top-left", name="Bath")])

    (error,) = result.errors
    assert error.kind is ErrorKind.MISSING_REFERENCE
    assert error.entity_id == "B"
    assert error.target_id == "ghost"
    assert error.missing_id == "ghost"
    assert error.severity is Severity.ERROR
    assert '"Bath"' in error.message
    assert '"ghost" not found' in error.message


def test_dependent_of_missing_reference():
    rooms = [
        make_room("C", "B:top-right"),
        make_room("B", "ghost:top-left"),
        make_room("A", "zeropoint:top-left"),
    ]
    result = resolve(rooms)

    assert list(result.rooms) == ["A"]
    assert [e.entity_id for e in result.errors] == ["C", "B"]
    assert all(e.kind is ErrorKind.MISSING_REFERENCE for e in result.errors)
    assert result.errors[0].target_id == "B"
    assert result.errors[0].missing_id == "ghost"


def test_dependent_of_cycle_reports_the_cycle():
    rooms = [
        make_room("D", "A:top-right"),
        make_room("A", "B:top-right"),
        make_room("B", "A:top-right"),
    ]
    result = resolve(rooms)

    assert result.rooms == {}
    assert [e.entity_id for e in result.errors] == ["D", "A", "B"]
    assert all(e.kind is ErrorKind.CIRCULAR_DEPENDENCY for e in result.errors)
    assert all(e.members == ("A", "B") for e in result.errors)
    assert "A -> B -> A" in result.errors[0].message


def test_parent_is_not_a_room_target():
    result = resolve([make_room("A", "parent:top-left")])

    (error,) = result.errors
    assert error.kind is ErrorKind.MISSING_REFERENCE
    assert error.missing_id == "parent"


def test_room_named_parent_does_not_capture_parent_target():
    rooms = [make_room("parent", "zeropoint:top-left"), make_room("A", "parent:top-right")]
    result = resolve(rooms)

    assert list(result.rooms) == ["parent"]
    (error,) = result.errors
    assert error.kind is ErrorKind.MISSING_REFERENCE
    assert error.entity_id == "A"
    assert error.missing_id == "parent"
    assert error.severity is Severity.ERROR
    assert not result.ok


def test_part_named_zeropoint_does_not_capture_origin_target():
    parts = (make_part("zeropoint", "parent:top-left"), make_part("b", "zeropoint:top-right"))
    result = resolve([make_room("r", parts=parts)])

    assert list(result.parts) == ["r/zeropoint"]
    (error,) = result.errors
    assert error.kind is ErrorKind.MISSING_REFERENCE
    assert error.entity_id == "r/b"
    assert error.missing_id == "zeropoint"
    assert not result.ok


def test_duplicate_room_id_keeps_first_declaration():
    rooms = [
        make_room("A", "zeropoint:top-left", 3000, 3000),
        make_room("A", "zeropoint:bottom-right", 1000, 1000, offset=(500, 500)),
    ]
    result = resolve(rooms)

    room = result.rooms["A"]
    assert (room.x, room.y, room.room.width) == (0, 0, 3000)
    (error,) = result.errors
    assert error.kind is ErrorKind.DUPLICATE_ID
    assert error.entity_id == "A"
    assert error.severity is Severity.ERROR
    assert not result.ok


def test_duplicate_part_id_is_reported_with_key():
    parts = (make_part("nook", "parent:top-right", 1000, 1000), make_part("nook", "parent:bottom-left", 500, 500))
    result = resolve([make_room("r", parts=parts)])

    assert result.parts["r/nook"].part.width == 1000
    assert (result.parts["r/nook"].x, result.parts["r/nook"].y) == (3000, 0)
    assert [(e.kind, e.entity_id) for e in result.errors] == [(ErrorKind.DUPLICATE_ID, "r/nook")]


def test_stalled_chain_under_ceiling_is_not_max_iterations():
    rooms = [make_room("A", "B:top-right"), make_room("B", "parent:top-left")]
    result = resolve(rooms, ResolverConfig(max_iterations=20))

    assert all(e.kind is ErrorKind.MISSING_REFERENCE for e in result.errors)
    assert [e.missing_id for e in result.errors] == ["parent", "parent"]


def test_max_iterations_exceeded():
    # Declared in reverse, so every pass resolves exactly one more room
    chain = [make_room("r0", "zeropoint:top-left", 100, 100)]
    chain += [make_room(f"r{i}", f"r{i - 1}:top-right", 100, 100) for i in range(1, 25)]
    result = resolve(list(reversed(chain)), ResolverConfig(max_iterations=20))

    assert set(result.rooms) == {f"r{i}" for i in range(20)}
    assert [e.entity_id for e in result.errors] == [f"r{i}" for i in range(24, 19, -1)]
    assert all(e.kind is ErrorKind.MAX_ITERATIONS_EXCEEDED for e in result.errors)
    assert all(e.severity is Severity.WARNING for e in result.errors)
    assert result.ok


def test_long_chain_within_limit():
    chain = [make_room("r0", "zeropoint:top-left", 100, 100)]
    chain += [make_room(f"r{i}", f"r{i - 1}:top-right", 100, 100) for i in range(1, 20)]
    result = resolve(list(reversed(chain)))

    assert len(result.rooms) == 20
    assert result.rooms["r19"].x == 1900


def test_idempotence():
    rooms = [
        make_room("B", "A:bottom-right", 1500, 1000, anchor=Corner.TOP_RIGHT),
        make_room("A", "zeropoint:top-left", 4000, 3000, parts=(make_part("p", "parent:top-right"),)),
        make_room("C", "ghost:top-left"),
        make_room("D", "E:top-left"),
        make_room("E", "D:top-left"),
    ]
    assert resolve(rooms) == resolve(rooms)


def test_parts_resolve_against_parent_and_siblings():
    parts = (
        make_part("nook2", "nook:bottom-left", 1000, 500),
        make_part("nook", "parent:top-right", 1000, 1500),
    )
    room = make_room("living", "zeropoint:top-left", 4000, 3000, parts=parts)
    result = resolve([make_room("hall", "zeropoint:top-left", 1000, 1000), room])

    assert set(result.parts) == {"living/nook", "living/nook2"}
    assert (result.parts["living/nook"].x, result.parts["living/nook"].y) == (4000, 0)
    assert (result.parts["living/nook2"].x, result.parts["living/nook2"].y) == (4000, 1500)
    assert [p.id for p in result.parts_of("living")] == ["nook2", "nook"]
    assert result.parts_of("hall") == []


def test_part_ids_are_scoped_to_their_room():
    a = make_room("a", "zeropoint:top-left", 2000, 2000, parts=(make_part("closet", "parent:top-right"),))
    b = make_room("b", "a:bottom-left", 2000, 2000, parts=(make_part("closet", "parent:bottom-left"),))
    result = resolve([a, b])

    assert result.rect_of("a/closet").x == 2000
    assert (result.rect_of("b/closet").x, result.rect_of("b/closet").y) == (0, 4000)


def test_part_errors_use_composite_key():
    parts = (
        make_part("lost", "missing:top-left"),
        make_part("origin", "zeropoint:top-left"),
        make_part("ok", "parent:top-left"),
    )
    result = resolve([make_room("living", parts=parts)])

    assert list(result.parts) == ["living/ok"]
    assert [e.entity_id for e in result.errors] == ["living/lost", "living/origin"]
    assert result.errors[0].missing_id == "missing"
    assert result.errors[1].missing_id == "zeropoint"


def test_part_cycle_members_are_keys():
    parts = (make_part("x", "y:top-left"), make_part("y", "x:top-left"))
    result = resolve([make_room("r", parts=parts)])

    assert all(e.members == ("r/x", "r/y") for e in result.errors)


def test_unresolved_room_skips_its_parts():
    room = make_room("lost", "ghost:top-left", parts=(make_part("p"),))
    result = resolve([room])

    assert result.parts == {}
    assert len(result.errors) == 1


def test_objects_are_placed_in_their_owner():
    objects = (
        RoomObject(ObjectShape.SQUARE, x=-100, y=-100, width=500, height=200,
                   room_anchor=Corner.BOTTOM_RIGHT, anchor=Corner.BOTTOM_RIGHT),
        RoomObject(ObjectShape.CIRCLE, x=100, y=100, width=600),
    )
    room = make_room("r", "zeropoint:top-left", 4000, 3000, offset=(1000, 0), objects=objects)
    result = resolve([room])

    square, circle = result.objects
    assert (square.rect.x, square.rect.y, square.rect.width, square.rect.height) == (4400, 2700, 500, 200)
    assert circle.center == Point(1400, 400)
    assert circle.owner_key == "r"
    assert circle.index == 1


def test_part_objects_use_part_key():
    part = make_part("nook", "parent:top-right", objects=(RoomObject(ObjectShape.SQUARE),))
    result = resolve([make_room("r", parts=(part,))])

    (placed,) = result.objects
    assert placed.owner_key == "r/nook"
    assert (placed.rect.x, placed.rect.y) == (3000, 0)


def test_normalize_shifts_everything_to_origin():
    objects = (RoomObject(ObjectShape.SQUARE, width=100),)
    rooms = [
        make_room("A", "zeropoint:top-left", 3000, 2000, anchor=Corner.BOTTOM_RIGHT, objects=objects),
        make_room("B", "A:top-right", 1000, 1000),
    ]
    result = resolve(rooms, ResolverConfig(normalize=True))

    assert (result.rooms["A"].x, result.rooms["A"].y) == (0, 0)
    assert (result.rooms["B"].x, result.rooms["B"].y) == (3000, 0)
    assert (result.objects[0].rect.x, result.objects[0].rect.y) == (0, 0)


def test_empty_graph():
    result = resolve([])
    assert result.rooms == {}
    assert result.errors == ()
