from __future__ import annotations
import asyncio
from typing import List, Union
from .types import LogEvent, RunState

Update = Union[LogEvent, RunState]

_CLOSED = object()

class EventStream:
    """File ordonnée écrite par le moteur et vidée par un consommateur.

    Transporte les `LogEvent` et les transitions de `RunState` dans l'ordre
    d'émission; l'itération s'arrête à la fermeture du flux.
    """
    def __init__(self) -> None:
        self._queue: asyncio.Queue = asyncio.Queue()
        self.closed = False

    def put(self, item: Update) -> None:
        if self.closed:
            raise RuntimeError("EventStream fermé")
        self._queue.put_nowait(item)

    def close(self) -> None:
        if not self.closed:
            self.closed = True
            self._queue.put_nowait(_CLOSED)

    def __aiter__(self) -> "EventStream":
        return self

    async def __anext__(self) -> Update:
        item = await self._queue.get()
        if item is _CLOSED:
            # reste terminal pour les itérations suivantes
            self._queue.put_nowait(_CLOSED)
            raise StopAsyncIteration
        return item

    async def collect(self) -> List[Update]:
        return [item async for item in self]

    async def events(self) -> List[LogEvent]:
        return [item async for item in self if isinstance(item, LogEvent)]
