"""Realtime module application dependencies."""

from typing import NoReturn

from src.modules.realtime.application.room_hub import PlaybackRoomHub


def _missing_dependency(name: str) -> NoReturn:
    raise RuntimeError(f"Missing dependency override for {name}")


async def get_room_hub() -> PlaybackRoomHub:
    _missing_dependency("PlaybackRoomHub")
