"""Realtime messaging hub.

In-memory registry of authenticated WebSocket connections for a single process.
Each connection runs its own receive loop and owns an outbound queue drained by
a dedicated writer task, so routing a message to a slow peer only enqueues.
The registry holds no authoritative data: after a restart clients reconnect and
missed messages are fetched from chat history.
"""

from __future__ import annotations

import asyncio
import logging

from fastapi import WebSocket, WebSocketDisconnect
from starlette.concurrency import run_in_threadpool

from src.auth.jwt import ACCESS, InvalidTokenError, verify_token
from src.messages import service as message_service
from src.realtime.protocol import (
    MESSAGE_RECEIVED,
    MESSAGE_SENT,
    WS_CLOSE_AUTH_TIMEOUT,
    WS_CLOSE_INTERNAL_ERROR,
    WS_CLOSE_INVALID_MESSAGE,
    WS_CLOSE_PROTOCOL_VIOLATION,
    WS_CLOSE_SLOW_CONSUMER,
    WS_CLOSE_UNAUTHORIZED,
    AuthenticateEvent,
    InvalidFrameError,
    SendMessageEvent,
    message_event,
    parse_client_event,
)
from src.utils.errors import InvalidRequestError, NotFoundError, ProtocolViolation

logger = logging.getLogger(__name__)


async def _receive_text(websocket: WebSocket) -> str:
    message = await websocket.receive()
    if message["type"] == "websocket.disconnect":
        raise WebSocketDisconnect(message.get("code", 1000), message.get("reason"))
    text = message.get("text")
    if text is None:
        raise InvalidFrameError("Binary frames are not supported")
    return text


class ClientConnection:
    """One accepted socket, its authenticated user and its bounded outbound queue."""

    def __init__(self, websocket: WebSocket, outbox_size: int = 256):
        self.websocket = websocket
        self.user_id: str | None = None
        self._outbox: asyncio.Queue[dict | None] = asyncio.Queue(maxsize=outbox_size)
        self._writer: asyncio.Task | None = None
        self._closer: asyncio.Task | None = None
        self._stopped = False

    @property
    def stopped(self) -> bool:
        return self._stopped

    def start(self) -> None:
        self._writer = asyncio.create_task(self._drain())

    def push(self, payload: dict) -> None:
        if self._stopped:
            return
        try:
            self._outbox.put_nowait(payload)
        except asyncio.QueueFull:
            # Undelivered frames stay readable through chat history
            logger.warning("Outbound queue full for %s; closing slow consumer", self.user_id or "anonymous")
            self._stopped = True
            if self._writer is not None:
                self._writer.cancel()
            self._closer = asyncio.create_task(self._close_socket(WS_CLOSE_SLOW_CONSUMER, "Slow consumer"))

    async def _drain(self) -> None:
        while True:
            payload = await self._outbox.get()
            if payload is None:
                return
            try:
                await self.websocket.send_json(payload)
            except Exception:
                logger.info("Dropping outbound frames for %s: socket is gone", self.user_id or "anonymous")
                return

    def stop(self) -> None:
        """Stop accepting frames; the writer exits once the queue is flushed."""
        if self._stopped:
            return
        self._stopped = True
        try:
            self._outbox.put_nowait(None)
        except asyncio.QueueFull:
            if self._writer is not None:
                self._writer.cancel()

    async def _close_socket(self, code: int, reason: str) -> None:
        try:
            await self.websocket.close(code=code, reason=reason)
        except RuntimeError:
            logger.debug("Socket for %s already closed", self.user_id or "anonymous")

    async def close(self, code: int, reason: str = "") -> None:
        self.stop()
        if self._writer is not None:
            # asyncio.wait does not re-raise a cancelled writer
            await asyncio.wait({self._writer})
        await self._close_socket(code, reason)


class MessagingHub:
    """Routes chat messages between authenticated connections."""

    def __init__(self, auth_timeout: float = 5.0, outbox_size: int = 256) -> None:
        self.auth_timeout = auth_timeout
        self.outbox_size = outbox_size
        self._lock = asyncio.Lock()
        self._connections: dict[str, ClientConnection] = {}

    # --- Registry ---

    async def _register(self, connection: ClientConnection) -> None:
        async with self._lock:
            previous = self._connections.get(connection.user_id)
            self._connections[connection.user_id] = connection
        if previous is not None:
            logger.info("User %s reconnected; previous connection superseded", connection.user_id)
        logger.info("User %s authenticated on realtime channel", connection.user_id)

    async def _unregister(self, connection: ClientConnection) -> None:
        if connection.user_id is None:
            return
        async with self._lock:
            # A stale close must not evict a newer connection for the same user
            if self._connections.get(connection.user_id) is connection:
                del self._connections[connection.user_id]

    async def connection_for(self, user_id: str) -> ClientConnection | None:
        async with self._lock:
            return self._connections.get(user_id)

    def lookup(self, user_id: str) -> ClientConnection | None:
        return self._connections.get(user_id)

    def is_online(self, user_id: str) -> bool:
        return user_id in self._connections

    def online_user_ids(self) -> set[str]:
        return set(self._connections)

    # --- Connection lifecycle ---

    async def serve(self, websocket: WebSocket) -> None:
        await websocket.accept()
        connection = ClientConnection(websocket, self.outbox_size)
        connection.start()
        try:
            if await self._authenticate(connection):
                await self._register(connection)
                await self._receive_loop(connection)
        except WebSocketDisconnect as exc:
            logger.info("Connection for %s closed by client (code %s)", connection.user_id or "anonymous", exc.code)
        finally:
            connection.stop()
            await asyncio.shield(self._unregister(connection))

    async def _authenticate(self, connection: ClientConnection) -> bool:
        try:
            raw = await asyncio.wait_for(_receive_text(connection.websocket), timeout=self.auth_timeout)
        except asyncio.TimeoutError:
            logger.info("Closing connection: no authentication within %.1fs", self.auth_timeout)
            await connection.close(WS_CLOSE_AUTH_TIMEOUT, "Authentication timeout")
            return False
        except InvalidFrameError:
            raw = None

        event = None
        if raw is not None:
            try:
                event = parse_client_event(raw)
            except InvalidFrameError:
                event = None
        if not isinstance(event, AuthenticateEvent):
            await connection.close(WS_CLOSE_UNAUTHORIZED, "Authentication required")
            return False

        try:
            payload = verify_token(event.token, ACCESS)
        except InvalidTokenError:
            logger.info("Rejected realtime connection: invalid token")
            await connection.close(WS_CLOSE_UNAUTHORIZED, "Invalid or expired token")
            return False

        connection.user_id = payload["sub"]
        return True

    async def _receive_loop(self, connection: ClientConnection) -> None:
        # One frame at a time keeps per-connection submission order
        while True:
            try:
                raw = await _receive_text(connection.websocket)
                event = parse_client_event(raw)
                await self._handle(connection, event)
            except ProtocolViolation as exc:
                logger.warning("Protocol violation from %s: %s", connection.user_id, exc.message)
                await connection.close(WS_CLOSE_PROTOCOL_VIOLATION, exc.message)
                return
            except (InvalidRequestError, NotFoundError) as exc:
                logger.info("Rejected frame from %s: %s", connection.user_id, exc.message)
                await connection.close(WS_CLOSE_INVALID_MESSAGE, exc.message)
                return
            except WebSocketDisconnect:
                raise
            except Exception:
                logger.exception("Failed to handle frame from %s", connection.user_id)
                await connection.close(WS_CLOSE_INTERNAL_ERROR, "Internal error")
                return

    async def _handle(self, connection: ClientConnection, event: AuthenticateEvent | SendMessageEvent) -> None:
        if isinstance(event, AuthenticateEvent):
            raise ProtocolViolation("Connection is already authenticated")
        if event.sender_id != connection.user_id:
            raise ProtocolViolation("senderId does not match the authenticated user")

        # Persist before any delivery; a started write finishes even if the socket goes away
        message = await asyncio.shield(
            run_in_threadpool(message_service.save_message, event.sender_id, event.receiver_id, event.content)
        )

        receiver = await self.connection_for(message.receiver_id)
        if receiver is not None:
            receiver.push(message_event(MESSAGE_RECEIVED, message))
        connection.push(message_event(MESSAGE_SENT, message))
