"""
WebSocket Broadcast Hub

Single owner of the live observer connection set.

Architecture:
- Request handlers / WebSocket endpoints -> enqueue op -> worker task -> sockets
- Ops (register, unregister, broadcast, flush) travel through one anyio memory
  stream, so they are applied in enqueue order by exactly one task
- Only the worker reads or mutates the connection set

Failure isolation:
- A send that raises or exceeds WS_SEND_TIMEOUT_SECONDS drops that connection only
- Enqueue never waits on delivery
"""

import math
from enum import StrEnum
from typing import Optional, Protocol

import anyio
from anyio import ClosedResourceError, create_memory_object_stream
from anyio.abc import TaskGroup
from anyio.streams.memory import MemoryObjectReceiveStream, MemoryObjectSendStream
import attrs
import orjson

from src.platform.config.core_setting import settings
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.seat_metrics import metrics
from src.service.seat_reservation.app.interface.i_seat_event_broadcaster import (
    ISeatEventBroadcaster,
)
from src.service.seat_reservation.domain.domain_event.seat_update_event import SeatUpdateEvent


CONNECTED_GREETING = orjson.dumps({'type': 'CONNECTED'}).decode()


class ObserverConnection(Protocol):
    """The slice of starlette's WebSocket the hub relies on"""

    async def send_text(self, data: str) -> None: ...

    async def close(self, code: int = 1000, reason: Optional[str] = None) -> None: ...


class _OpKind(StrEnum):
    REGISTER = 'register'
    UNREGISTER = 'unregister'
    BROADCAST = 'broadcast'
    FLUSH = 'flush'


@attrs.define
class _HubOp:
    kind: _OpKind
    connection: Optional[ObserverConnection] = None
    message: Optional[str] = None
    done: Optional[anyio.Event] = None


class WebSocketBroadcastHub(ISeatEventBroadcaster):
    def __init__(self, *, send_timeout: float = settings.WS_SEND_TIMEOUT_SECONDS) -> None:
        self.send_timeout = send_timeout
        self._connections: set[ObserverConnection] = set()
        self._send_stream: MemoryObjectSendStream[_HubOp]
        self._receive_stream: MemoryObjectReceiveStream[_HubOp]
        self._send_stream, self._receive_stream = create_memory_object_stream[_HubOp](
            max_buffer_size=math.inf
        )
        self._running = False
        self._stopped: Optional[anyio.Event] = None

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def connection_count(self) -> int:
        return len(self._connections)

    # ========== Lifecycle ==========

    async def start(self, *, task_group: TaskGroup) -> None:
        task_group.start_soon(self.run)

    async def run(self) -> None:
        """Worker loop. Returns after stop() once every queued op has been applied."""
        self._running = True
        self._stopped = anyio.Event()
        Logger.base.info('📡 [HUB] Broadcast worker started')
        try:
            async with self._receive_stream:
                async for op in self._receive_stream:
                    await self._apply(op)
        finally:
            with anyio.CancelScope(shield=True):
                for connection in list(self._connections):
                    await self._drop(connection)
            self._running = False
            assert self._stopped is not None
            self._stopped.set()
            Logger.base.info('📡 [HUB] Broadcast worker stopped')

    async def stop(self) -> None:
        """Close the op stream and wait for the worker to drain it"""
        await self._send_stream.aclose()
        if self._running and self._stopped is not None:
            await self._stopped.wait()

    # ========== Ops ==========

    async def register(
        self, connection: ObserverConnection, *, greeting: Optional[str] = None
    ) -> None:
        self._enqueue(_HubOp(kind=_OpKind.REGISTER, connection=connection, message=greeting))

    async def unregister(self, connection: ObserverConnection) -> None:
        self._enqueue(_HubOp(kind=_OpKind.UNREGISTER, connection=connection))

    async def broadcast(self, message: bytes | str) -> None:
        text = message.decode() if isinstance(message, bytes) else message
        self._enqueue(_HubOp(kind=_OpKind.BROADCAST, message=text))

    async def broadcast_seat_update(self, *, event: SeatUpdateEvent) -> None:
        await self.broadcast(event.to_message())

    async def flush(self) -> None:
        """Wait until every op enqueued before this call has been applied"""
        done = anyio.Event()
        if self._enqueue(_HubOp(kind=_OpKind.FLUSH, done=done)):
            await done.wait()

    def _enqueue(self, op: _HubOp) -> bool:
        try:
            self._send_stream.send_nowait(op)
        except ClosedResourceError:
            Logger.base.warning(f'⚠️ [HUB] Hub stopped, dropping {op.kind} op')
            return False
        return True

    # ========== Worker side ==========

    async def _apply(self, op: _HubOp) -> None:
        if op.kind == _OpKind.REGISTER:
            assert op.connection is not None
            await self._register(op.connection, greeting=op.message)
        elif op.kind == _OpKind.UNREGISTER:
            assert op.connection is not None
            if op.connection in self._connections:
                await self._drop(op.connection)
        elif op.kind == _OpKind.BROADCAST:
            assert op.message is not None
            await self._fan_out(op.message)
        elif op.kind == _OpKind.FLUSH:
            assert op.done is not None
            op.done.set()

    async def _register(
        self, connection: ObserverConnection, *, greeting: Optional[str]
    ) -> None:
        if connection in self._connections:
            return
        self._connections.add(connection)
        metrics.observer_connections.set(len(self._connections))
        Logger.base.info(f'📡 [HUB] Observer registered (total: {len(self._connections)})')
        if greeting is not None and not await self._send(connection, greeting):
            await self._drop(connection)

    async def _fan_out(self, message: str) -> None:
        failed = []
        for connection in list(self._connections):
            delivered = await self._send(connection, message)
            metrics.record_delivery(delivered=delivered)
            if not delivered:
                failed.append(connection)

        for connection in failed:
            await self._drop(connection)

        Logger.base.debug(
            f'📡 [HUB] Broadcast delivered={len(self._connections)}, dropped={len(failed)}'
        )

    async def _send(self, connection: ObserverConnection, message: str) -> bool:
        try:
            with anyio.fail_after(self.send_timeout):
                await connection.send_text(message)
        except TimeoutError:
            Logger.base.warning(f'⚠️ [HUB] Send timed out after {self.send_timeout}s')
            return False
        except Exception as e:
            Logger.base.warning(f'⚠️ [HUB] Send failed: {type(e).__name__}: {e}')
            return False
        return True

    async def _drop(self, connection: ObserverConnection) -> None:
        self._connections.discard(connection)
        metrics.observer_connections.set(len(self._connections))
        try:
            await connection.close()
        except Exception as e:
            # Peer already gone; nothing left to close
            Logger.base.debug(f'📡 [HUB] Close ignored: {type(e).__name__}: {e}')
        Logger.base.info(f'📡 [HUB] Observer removed (total: {len(self._connections)})')
