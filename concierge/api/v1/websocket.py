"""WebSocket API for real-time concierge chat."""

import asyncio
import json
import uuid
from typing import Set

from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from pydantic import ValidationError

from ...models.events import ClientCommand
from ...services import ConnectionHub
from ...utils.logger import get_app_logger

router = APIRouter(tags=["websocket"])

# Global connection hub instance (will be set by main.py)
hub: ConnectionHub = None
logger = get_app_logger()


async def _send_error(websocket: WebSocket, content: str) -> None:
    await websocket.send_json({"type": "error", "content": content})


@router.websocket("/ws/chat")
async def chat_endpoint(websocket: WebSocket):
    """
    WebSocket endpoint for guest chat clients.

    Each inbound frame is a JSON command (see ClientCommand). send_message
    runs as a background task so a slow orchestration pass never blocks
    typing signals or status requests from the same connection.

    Args:
        websocket: WebSocket connection
    """
    await websocket.accept()
    connection_id = str(uuid.uuid4())
    tasks: Set[asyncio.Task] = set()
    error = None

    try:
        await hub.connect(connection_id, websocket)

        while True:
            data = await websocket.receive_text()

            try:
                command = ClientCommand(**json.loads(data))
            except json.JSONDecodeError:
                await _send_error(websocket, "Invalid JSON message")
                continue
            except (ValidationError, TypeError) as e:
                await _send_error(websocket, f"Invalid command: {e}")
                continue

            if command.type == "ping":
                await websocket.send_json({"type": "pong"})
                continue

            if command.type not in ("join_conversation", "leave_conversation", "send_message", "typing", "get_status"):
                await _send_error(websocket, f"Unknown message type: {command.type}")
                continue

            if not command.conversation_id:
                await _send_error(websocket, "conversation_id is required")
                continue

            if command.type == "join_conversation":
                await hub.join_conversation(connection_id, command.conversation_id, command.user_id)

            elif command.type == "leave_conversation":
                await hub.leave_conversation(connection_id, command.conversation_id)

            elif command.type == "send_message":
                task = asyncio.create_task(hub.send_message(
                    connection_id,
                    command.conversation_id,
                    command.message or "",
                    command.message_id
                ))
                tasks.add(task)
                task.add_done_callback(tasks.discard)

            elif command.type == "typing":
                await hub.send_typing_indicator(connection_id, command.conversation_id, command.is_typing)

            elif command.type == "get_status":
                await hub.get_status(connection_id, command.conversation_id)

    except WebSocketDisconnect:
        logger.info(f"WebSocket disconnected: {connection_id}")

    except Exception as e:
        error = e
        logger.error(f"WebSocket error for connection {connection_id}: {e}")

    finally:
        await hub.disconnect(connection_id, error)
        # In-flight passes finish on their own; their group broadcasts still go out
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        logger.info(f"WebSocket connection closed: {connection_id}")
