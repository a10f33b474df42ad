"""In-process playback room hub."""

from __future__ import annotations

from collections import defaultdict
from typing import Any

from loguru import logger
from starlette.websockets import WebSocketDisconnect

from src.modules.realtime.domain.connection import RelayConnection
from src.modules.realtime.domain.events import PlayerEvent


class PlaybackRoomHub:
    """Relay playback progress between clients subscribed to the same room.

    仅单进程内有效；多实例部署时各实例的房间互不可见。
    """

    def __init__(self) -> None:
        # WebSocket 不可哈希（Mapping 子类），按对象身份比较
        self._rooms: dict[str, list[RelayConnection]] = defaultdict(list)

    def join(self, room: str, connection: RelayConnection) -> None:
        members = self._rooms[room]
        if not any(member is connection for member in members):
            members.append(connection)
        logger.debug(f"Connection joined room {room} ({len(self._rooms[room])} members)")

    def leave_all(self, connection: RelayConnection) -> None:
        for room in list(self._rooms):
            members = [m for m in self._rooms[room] if m is not connection]
            if members:
                self._rooms[room] = members
            else:
                del self._rooms[room]

    def members(self, room: str) -> int:
        return len(self._rooms.get(room, ()))

    async def relay_progress(
        self,
        sender: RelayConnection,
        room: str,
        data: dict[str, Any],
    ) -> int:
        """Forward a progress update to every other member of the room.

        Returns:
            成功送达的连接数
        """
        message = {**data, "room": room, "event": PlayerEvent.PROGRESS_UPDATE.value}
        delivered = 0
        for member in list(self._rooms.get(room, ())):
            if member is sender:
                continue
            try:
                await member.send_json(message)
            except (WebSocketDisconnect, RuntimeError, OSError) as exc:
                # 对端已断开，清理后继续转发给其它成员
                logger.debug(f"Dropping dead connection from room {room}: {exc}")
                self.leave_all(member)
                continue
            delivered += 1
        return delivered
