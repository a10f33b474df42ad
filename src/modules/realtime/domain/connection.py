"""Relay connection port."""

from typing import Any, Protocol


class RelayConnection(Protocol):
    """Anything able to push a JSON message to one client."""

    async def send_json(self, data: Any, mode: str = "text") -> None: ...
