from __future__ import annotations
import asyncio
from typing import Callable, List, Optional, Tuple
from .base import ActionExecutor
from ..core.planner import resolve_selector

class SimulatedExecutor(ActionExecutor):
    """
    Exécuteur déterministe pour tests/démo: aucune action réelle.
    Consigne chaque action (kind, valeur) et peut respecter les attentes.
    """
    def __init__(self, platform: str = "linkedin", *, honor_waits: bool = False,
                 on_log: Optional[Callable[[str], None]] = None) -> None:
        self.platform = platform
        self.honor_waits = honor_waits
        self.on_log = on_log
        self.actions: List[Tuple[str, object]] = []

    def _log(self, msg: str) -> None:
        if self.on_log:
            self.on_log(msg)

    async def navigate(self, url: str) -> None:
        self.actions.append(("navigate", url))
        self._log(f"Navigating to: {url}")

    async def click(self, selector: str) -> None:
        self.actions.append(("click", selector))
        self._log(f"Clicking element: {resolve_selector(self.platform, selector)}")

    async def type(self, text: str) -> None:
        self.actions.append(("type", text))
        self._log(f"Typing: {text}")

    async def wait(self, duration_ms: int) -> None:
        self.actions.append(("wait", duration_ms))
        if self.honor_waits:
            await asyncio.sleep(max(0, duration_ms) / 1000)
