"""播放房间中继单元测试。"""

from typing import Any

import pytest

from src.modules.realtime.application.room_hub import PlaybackRoomHub

pytestmark = pytest.mark.anyio


class FakeConnection:
    def __init__(self, name: str, *, broken: bool = False) -> None:
        self.name = name
        self.broken = broken
        self.sent: list[dict[str, Any]] = []

    async def send_json(self, data: Any) -> None:
        if self.broken:
            raise RuntimeError("Cannot call send once a close message has been sent")
        self.sent.append(data)


async def test_progress_reaches_other_members_only() -> None:
    hub = PlaybackRoomHub()
    sender, listener = FakeConnection("a"), FakeConnection("b")
    hub.join("mix-1", sender)
    hub.join("mix-1", listener)

    delivered = await hub.relay_progress(sender, "mix-1", {"currentTime": 12.5})

    assert delivered == 1
    assert sender.sent == []
    assert listener.sent == [
        {"currentTime": 12.5, "room": "mix-1", "event": "progress-update"}
    ]


async def test_other_rooms_are_not_notified() -> None:
    hub = PlaybackRoomHub()
    sender, same_room, other_room = (
        FakeConnection("a"),
        FakeConnection("b"),
        FakeConnection("c"),
    )
    hub.join("mix-1", sender)
    hub.join("mix-1", same_room)
    hub.join("mix-2", other_room)

    await hub.relay_progress(sender, "mix-1", {"currentTime": 1})

    assert len(same_room.sent) == 1
    assert other_room.sent == []


async def test_sender_outside_room_still_relays() -> None:
    hub = PlaybackRoomHub()
    listener = FakeConnection("b")
    hub.join("mix-1", listener)

    delivered = await hub.relay_progress(FakeConnection("x"), "mix-1", {})

    assert delivered == 1


async def test_dead_connection_is_dropped() -> None:
    hub = PlaybackRoomHub()
    sender, dead, alive = (
        FakeConnection("a"),
        FakeConnection("b", broken=True),
        FakeConnection("c"),
    )
    for conn in (sender, dead, alive):
        hub.join("mix-1", conn)

    delivered = await hub.relay_progress(sender, "mix-1", {"currentTime": 3})

    assert delivered == 1
    assert len(alive.sent) == 1
    assert hub.members("mix-1") == 2


async def test_leave_all_removes_from_every_room() -> None:
    hub = PlaybackRoomHub()
    conn = FakeConnection("a")
    hub.join("mix-1", conn)
    hub.join("mix-2", conn)

    hub.leave_all(conn)

    assert hub.members("mix-1") == 0
    assert hub.members("mix-2") == 0


async def test_joining_twice_does_not_duplicate_delivery() -> None:
    hub = PlaybackRoomHub()
    sender, listener = FakeConnection("a"), FakeConnection("b")
    hub.join("mix-1", sender)
    hub.join("mix-1", listener)
    hub.join("mix-1", listener)

    await hub.relay_progress(sender, "mix-1", {"currentTime": 7})

    assert hub.members("mix-1") == 2
    assert len(listener.sent) == 1
