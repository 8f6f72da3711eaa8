from __future__ import annotations
from typing import Callable, Optional
from ..config import Settings
from ..actions.base import ActionExecutor
from ..actions.simulated import SimulatedExecutor
from .engine import ExecutionEngine

def build_engine(settings: Settings, executor: ActionExecutor | None = None, *, platform: str | None = None,
                 on_log: Optional[Callable[[str], None]] = None) -> ExecutionEngine:
    # sans exécuteur fourni: simulation (aucune automatisation réelle)
    if executor is None:
        executor = SimulatedExecutor(platform or settings.general.default_platform,
                                     honor_waits=settings.executor.honor_waits,
                                     on_log=on_log)
    return ExecutionEngine(executor, pacing=settings.pacing, kill_switch_path=settings.general.kill_switch_path)
