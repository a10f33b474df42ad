"""Playback relay WebSocket route."""

import json
from typing import Any

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect
from loguru import logger

from src.modules.realtime.application.dependencies import get_room_hub
from src.modules.realtime.application.room_hub import PlaybackRoomHub
from src.modules.realtime.domain.events import PlayerEvent

router = APIRouter(tags=["realtime"])


def _parse_message(raw: str) -> dict[str, Any] | None:
    try:
        message = json.loads(raw)
    except ValueError:
        return None
    if not isinstance(message, dict):
        return None
    room = message.get("room")
    if not isinstance(room, str) or not room:
        return None
    return message


@router.websocket("/ws/player")
async def player_relay(
    websocket: WebSocket,
    hub: PlaybackRoomHub = Depends(get_room_hub),
) -> None:
    """Relay audio progress between clients of the same room."""
    await websocket.accept()
    logger.info("New player relay client connected")
    try:
        while True:
            frame = await websocket.receive()
            if frame["type"] == "websocket.disconnect":
                logger.info("Player relay client disconnected")
                break
            text = frame.get("text")
            if text is None:
                # 二进制帧不属于中继协议
                logger.debug("Ignoring binary relay frame")
                continue
            message = _parse_message(text)
            if message is None:
                logger.debug("Ignoring malformed relay message")
                continue

            event = message.get("event")
            room = message["room"]
            if event == PlayerEvent.JOIN.value:
                hub.join(room, websocket)
                await websocket.send_json(
                    {"event": PlayerEvent.JOINED.value, "room": room}
                )
            elif event == PlayerEvent.PROGRESS.value:
                payload = {
                    k: v for k, v in message.items() if k not in ("event", "room")
                }
                await hub.relay_progress(websocket, room, payload)
            else:
                logger.debug(f"Ignoring unknown relay event: {event}")
    except WebSocketDisconnect:
        logger.info("Player relay client disconnected")
    finally:
        hub.leave_all(websocket)
