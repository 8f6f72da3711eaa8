from __future__ import annotations
from typing import Callable, List, Optional, Tuple
from .stream import EventStream, Update
from .types import LogEvent, RunState

class EventSink:
    """
    Consommateur du flux d'événements côté présentation.

    - conserve le journal dans l'ordre d'émission
    - suit le dernier `RunState` et son libellé de progression
    - `clear()` vide son propre journal sans toucher au moteur
    """
    def __init__(self, on_event: Optional[Callable[[LogEvent], None]] = None,
                 on_state: Optional[Callable[[RunState], None]] = None) -> None:
        self.on_event = on_event
        self.on_state = on_state
        self._events: List[LogEvent] = []
        # id monotone: un client SSE reprend après `clear()` sans doublons
        self._offset = 0
        self.state = RunState.idle()

    @property
    def events(self) -> List[LogEvent]:
        return list(self._events)

    @property
    def current_step(self) -> str:
        return self.state.label

    @property
    def last_id(self) -> int:
        return self._offset + len(self._events)

    def receive(self, item: Update) -> None:
        if isinstance(item, LogEvent):
            self._events.append(item)
            if self.on_event:
                self.on_event(item)
        elif isinstance(item, RunState):
            self.state = item
            if self.on_state:
                self.on_state(item)
        else:
            raise TypeError(f"élément de flux inattendu: {item!r}")

    async def drain(self, stream: EventStream) -> RunState:
        async for item in stream:
            self.receive(item)
        return self.state

    def since(self, last_id: int) -> List[Tuple[int, LogEvent]]:
        """Événements d'id > last_id (ids à partir de 1)."""
        start = max(0, last_id - self._offset)
        return [(self._offset + i + 1, e) for i, e in enumerate(self._events[start:], start)]

    def clear(self) -> None:
        self._offset += len(self._events)
        self._events.clear()
