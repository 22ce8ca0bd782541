import pytest

from games.battle.engine.models import PHASE_COUNTDOWN, PHASE_LOBBY, Identity
from games.battle.errors import RoomFull, RoomNotFound, RoomNotJoinable
from games.battle.state import RoomRegistry, generate_room_id

ALICE = Identity(user_id="alice", username="Alice")
BOB = Identity(user_id="bob", username="Bob")
CAROL = Identity(user_id="carol", username="Carol")


@pytest.fixture
def registry():
    return RoomRegistry()


def test_room_ids_are_prefixed_and_unique():
    ids = {generate_room_id() for _ in range(50)}
    assert len(ids) == 50
    assert all(room_id.startswith("room_") for room_id in ids)


def test_create_puts_creator_in_lobby(registry):
    room = registry.create("sid-a", ALICE)

    assert registry.get(room.id) is room
    assert room.phase == PHASE_LOBBY
    assert room.dominance == 0
    assert room.energy == {"p1": 100.0, "p2": 100.0}
    assert [p.user_id for p in room.players] == ["alice"]
    assert room.players[0].base.power == 100
    assert room.players[0].base.stability == 100
    assert registry.room_for("sid-a") is room


def test_join_appends_second_player(registry):
    room = registry.create("sid-a", ALICE)

    joined = registry.join(room.id, "sid-b", BOB)

    assert joined is room
    assert [p.user_id for p in room.players] == ["alice", "bob"]
    assert room.phase == PHASE_LOBBY
    assert registry.room_for("sid-b") is room


def test_join_unknown_room(registry):
    with pytest.raises(RoomNotFound) as exc:
        registry.join("room_missing", "sid-b", BOB)
    assert exc.value.payload == {"error": "Room not found"}

    with pytest.raises(RoomNotFound):
        registry.join(None, "sid-b", BOB)
    assert registry.room_for("sid-b") is None


def test_join_full_room_does_not_mutate(registry):
    room = registry.create("sid-a", ALICE)
    registry.join(room.id, "sid-b", BOB)

    with pytest.raises(RoomFull):
        registry.join(room.id, "sid-c", CAROL)
    assert len(room.players) == 2
    assert registry.room_for("sid-c") is None


def test_join_outside_lobby_rejected(registry):
    room = registry.create("sid-a", ALICE)
    room.phase = PHASE_COUNTDOWN

    with pytest.raises(RoomNotJoinable) as exc:
        registry.join(room.id, "sid-b", BOB)
    assert str(exc.value) == "Room is not joinable"
    assert len(room.players) == 1


def test_leave_preserves_remaining_order(registry):
    room = registry.create("sid-a", ALICE)
    registry.join(room.id, "sid-b", BOB)

    result = registry.leave(room.id, "sid-a")

    assert result is room
    assert [p.user_id for p in room.players] == ["bob"]
    assert registry.room_for("sid-a") is None
    assert registry.room_for("sid-b") is room


def test_leave_unknown_room_returns_none(registry):
    assert registry.leave("room_missing", "sid-a") is None
    assert registry.leave(None, "sid-a") is None


def test_remove_is_idempotent_and_unbinds(registry):
    room = registry.create("sid-a", ALICE)
    registry.join(room.id, "sid-b", BOB)

    registry.remove(room.id)
    registry.remove(room.id)

    assert registry.get(room.id) is None
    assert room.id not in registry
    assert len(registry) == 0
    assert registry.room_for("sid-a") is None
    assert registry.room_for("sid-b") is None


def test_non_string_ids_are_unknown(registry):
    registry.create("sid-a", ALICE)

    assert registry.get(["x"]) is None
    assert registry.get({"id": "x"}) is None
    assert ["x"] not in registry
    with pytest.raises(RoomNotFound):
        registry.join(["x"], "sid-b", BOB)
