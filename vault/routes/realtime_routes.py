"""WebSocket channel that streams catalog changes to live viewers."""

import asyncio
import json
from typing import Any

from fastapi import APIRouter, WebSocket, WebSocketDisconnect, status

from common.logging_config import get_logger
from vault.exceptions import InvalidNamespaceError
from vault.schemas.files import FileListEvent, FileRecordResponse
from vault.service_locator import VaultServices
from vault.utils import validate_namespace

logger = get_logger(__name__)

router = APIRouter(tags=["Realtime"])


class WebSocketSink:
    """
    Hashable wrapper so a connection can be stored in hub groups.
    """

    def __init__(self, websocket: WebSocket):
        self.websocket = websocket

    async def send_json(self, data: Any) -> None:
        await self.websocket.send_json(data)

    async def close(self) -> None:
        await self.websocket.close(code=status.WS_1011_INTERNAL_ERROR)


async def _send_error(websocket: WebSocket, detail: str) -> None:
    await websocket.send_json({"type": "error", "detail": detail})


async def _join(services: VaultServices, sink: WebSocketSink, user: str) -> None:
    async def send_snapshot() -> None:
        loop = asyncio.get_running_loop()
        records = await loop.run_in_executor(None, services.catalog.query_by_user, user)
        snapshot = FileListEvent(
            user=user,
            files=[FileRecordResponse.from_record(record) for record in records],
        )
        await sink.send_json(snapshot.model_dump())

    await services.hub.subscribe(sink, user, on_join=send_snapshot)


@router.websocket("/ws")
async def realtime_channel(websocket: WebSocket):
    """
    Real-time channel.

    Client messages:
        - {"type": "join", "user": "<name>"}: subscribe; answered once with a
          "file_list" snapshot, then "file_added" events follow
        - {"type": "leave", "user": "<name>"}: unsubscribe
    """
    services: VaultServices = websocket.app.state.services
    sink = WebSocketSink(websocket)

    await websocket.accept()
    try:
        while True:
            frame = await websocket.receive()
            if frame["type"] == "websocket.disconnect":
                raise WebSocketDisconnect(frame.get("code", status.WS_1000_NORMAL_CLOSURE))
            raw = frame.get("text")
            if raw is None:
                await _send_error(websocket, "Messages must be JSON text frames")
                continue
            try:
                message = json.loads(raw)
            except json.JSONDecodeError:
                await _send_error(websocket, "Messages must be JSON objects")
                continue
            if not isinstance(message, dict):
                await _send_error(websocket, "Messages must be JSON objects")
                continue

            message_type = message.get("type")
            raw_user = message.get("user")
            try:
                user = validate_namespace(raw_user if isinstance(raw_user, str) else None)
            except InvalidNamespaceError as e:
                await _send_error(websocket, str(e))
                continue

            if message_type == "join":
                await _join(services, sink, user)
            elif message_type == "leave":
                await services.hub.unsubscribe(sink, user)
            else:
                await _send_error(websocket, f"Unknown message type: {message_type}")
    except WebSocketDisconnect:
        logger.debug("Viewer disconnected")
    finally:
        await services.hub.unsubscribe_all(sink)
