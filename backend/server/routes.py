"""
Route registration for the recorder API.

Responsibilities:
- Define HTTP and WebSocket endpoints
- Wire the chat bridge WebSocket to the gateway
- Pull dependencies from app.state
"""

from __future__ import annotations

import asyncio
import json
from typing import Any

from fastapi import FastAPI, WebSocket, WebSocketDisconnect
from fastapi.websockets import WebSocketState

from observability.logger import log_event
from session.chat_message import ChatMessage
from session.gateway import ChatGateway, GatewayResult


def register_routes(app: FastAPI) -> None:
    """Register all routes on the FastAPI app."""
    @app.get("/health")
    async def health() -> dict[str, str]: # pyright: ignore[reportUnusedFunction]
        gateway: ChatGateway = app.state.gateway
        browser = app.state.browser
        status = "ok" if browser is None or browser.connected else "degraded"
        return {
            "status": status,
            "session_state": gateway.state_machine.state.state_type.value,
        }

    @app.websocket("/ws")
    async def bridge_endpoint(ws: WebSocket) -> None: # pyright: ignore[reportUnusedFunction]
        """
        Chat bridge connection.

        Inbound:  {"type": "MESSAGE", "message": {...}}
        Outbound: REPLY / DIRECT / ATTACHMENT / JOIN_VOICE / LEAVE_VOICE

        Each message is dispatched in its own task so the socket keeps
        reading while a start or a save is in flight. Sends share one
        lock so a message's frames go out contiguously.
        """
        await ws.accept()
        gateway: ChatGateway = app.state.gateway
        send_lock = asyncio.Lock()
        in_flight: set[asyncio.Task[None]] = set()

        async def close_fatal(exc: Exception) -> None:
            log_event({
                "event_type": "WS_FATAL_ERROR",
                "exception": type(exc).__name__,
                "message": str(exc),
            })
            async with send_lock:
                if ws.client_state is WebSocketState.CONNECTED:
                    await ws.close(code=1011)

        async def dispatch(message: ChatMessage) -> None:
            try:
                result = await gateway.on_message(message)
            except Exception as exc:  # pylint: disable=broad-exception-caught
                await close_fatal(exc)
                return

            try:
                async with send_lock:
                    await _flush_gateway_result(ws, result)
            except (WebSocketDisconnect, RuntimeError) as exc:
                # Bridge went away while the command ran
                log_event({
                    "event_type": "REPLY_UNDELIVERED",
                    "frames": len(result.frames()),
                    "error": repr(exc),
                })

        try:
            while True:
                payload = await ws.receive_text()
                message = _decode_bridge_frame(payload)
                if message is None:
                    continue

                task = asyncio.create_task(dispatch(message))
                in_flight.add(task)
                task.add_done_callback(in_flight.discard)

        except WebSocketDisconnect:
            log_event({
                "event_type": "BRIDGE_DISCONNECTED",
                "in_flight": len(in_flight),
            })

        except Exception as exc:  # pylint: disable=broad-exception-caught
            await close_fatal(exc)

        finally:
            # Admitted commands run to completion, including a save in progress
            if in_flight:
                await asyncio.gather(*in_flight, return_exceptions=True)


def _decode_bridge_frame(payload: str) -> ChatMessage | None:
    try:
        data: Any = json.loads(payload)
    except json.JSONDecodeError as e:
        log_event({
            "event_type": "JSON_DECODE_ERROR",
            "error": str(e),
            "payload_preview": payload[:100],
        })
        return None

    msg_type = data.get("type") if isinstance(data, dict) else None
    if msg_type != "MESSAGE":
        log_event({
            "event_type": "UNKNOWN_MESSAGE_TYPE",
            "msg_type": msg_type,
        })
        return None

    try:
        return ChatMessage.from_payload(data["message"])
    except (KeyError, TypeError) as e:
        log_event({
            "event_type": "BRIDGE_FRAME_INVALID",
            "error": repr(e),
            "payload_preview": payload[:100],
        })
        return None


async def _flush_gateway_result(
    ws: WebSocket,
    result: GatewayResult,
) -> None:
    for frame in result.frames():
        await ws.send_text(json.dumps(frame))
