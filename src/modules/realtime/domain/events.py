"""Playback relay event names."""

from enum import Enum


class PlayerEvent(str, Enum):
    """WebSocket 消息中的 event 字段。"""

    JOIN = "join-player"
    JOINED = "player-joined"
    PROGRESS = "audio-progress"
    PROGRESS_UPDATE = "progress-update"
