from __future__ import annotations
import asyncio
from typing import List, Optional, Sequence
from ..actions.base import ActionExecutor
from ..config import Pacing
from ..security.kill import check_kill, KillSwitchEngaged
from .errors import AlreadyRunning, ActionExecutionFailure
from .intent import parse_intent
from .planner import plan_steps
from .stream import EventStream
from .types import EventKind, LogEvent, RunState, RunStatus, Step, Plan

STOPPED_BY_USER = "Execution stopped by user"
STOPPED_BY_KILL = "Execution stopped by kill-switch"
COMPLETED_MESSAGE = "🎉 Task completed successfully!"

class ExecutionEngine:
    """Machine d'état séquentielle: une étape à la fois, arrêt coopératif.

    `start` planifie l'exécution sur la boucle asyncio courante et retourne
    le flux d'événements de ce run. `stop` n'interrompt jamais une action en
    cours: la demande est observée à la prochaine frontière d'étape.
    """
    def __init__(self, executor: ActionExecutor, *, pacing: Pacing | None = None,
                 kill_switch_path: str | None = None) -> None:
        self.executor = executor
        self.pacing = pacing or Pacing()
        self.kill_switch_path = kill_switch_path
        self._state = RunState.idle()
        self._log: List[LogEvent] = []
        self._stop_requested = False
        self._stream: Optional[EventStream] = None
        self._task: Optional[asyncio.Task] = None

    # ---------------- Lecture ----------------
    @property
    def state(self) -> RunState:
        return self._state

    @property
    def log(self) -> List[LogEvent]:
        return list(self._log)

    @property
    def is_running(self) -> bool:
        return self._state.status is RunStatus.RUNNING

    # ---------------- Commandes ----------------
    def start(self, prompt: str, platform: str) -> EventStream:
        loop = asyncio.get_running_loop()
        stream = self._begin()
        self._task = loop.create_task(self._run_prompt(prompt, platform, stream))
        return stream

    def start_plan(self, plan: Sequence[Step]) -> EventStream:
        loop = asyncio.get_running_loop()
        stream = self._begin()
        self._task = loop.create_task(self._run_plan(tuple(plan), stream))
        return stream

    def stop(self) -> None:
        if self.is_running:
            self._stop_requested = True

    async def wait(self) -> RunState:
        if self._task is not None:
            await self._task
        return self._state

    async def run(self, prompt: str, platform: str) -> RunState:
        """Lance un run et vide son flux jusqu'à l'état terminal."""
        async for _ in self.start(prompt, platform):
            pass
        return await self.wait()

    # ---------------- Interne ----------------
    def _begin(self) -> EventStream:
        if self.is_running:
            raise AlreadyRunning("Une exécution est déjà en cours")
        self._stop_requested = False
        self._log = []
        self._stream = EventStream()
        self._set_state(RunState.running("Analyzing request..."))
        return self._stream

    def _set_state(self, state: RunState) -> None:
        self._state = state
        if self._stream is not None:
            self._stream.put(state)

    async def _emit(self, kind: EventKind, message: str, *, paced: bool = True) -> LogEvent:
        event = LogEvent(kind, message)
        self._log.append(event)
        if self._stream is not None:
            self._stream.put(event)
        if paced:
            await _sleep_ms(self.pacing.event_pacing_ms)
        return event

    async def _run_prompt(self, prompt: str, platform: str, stream: EventStream) -> None:
        try:
            await self._emit(EventKind.INFO, "Parsing user intent from prompt...")
            await _sleep_ms(self.pacing.parse_delay_ms)
            intent = parse_intent(prompt, platform)
            await self._emit(EventKind.SUCCESS, f"Intent identified: {intent.action}")

            self._set_state(RunState.running("Planning navigation..."))
            await self._emit(EventKind.INFO, "Planning execution steps...")
            await _sleep_ms(self.pacing.plan_delay_ms)
            plan = plan_steps(intent)
            await self._emit(EventKind.SUCCESS, f"Generated {len(plan)} steps")

            await self._execute(plan)
        except Exception as exc:
            await self._fail_unexpected(exc)
        finally:
            stream.close()

    async def _run_plan(self, plan: Plan, stream: EventStream) -> None:
        try:
            await self._execute(plan)
        except Exception as exc:
            await self._fail_unexpected(exc)
        finally:
            stream.close()

    async def _fail_unexpected(self, exc: Exception) -> None:
        # l'instance reste utilisable: seul ce run se termine en échec
        await self._emit(EventKind.ERROR, f"Unexpected error: {exc}", paced=False)
        self._set_state(RunState.failed(str(exc)))

    def _stop_reason(self) -> str | None:
        if self._stop_requested:
            return STOPPED_BY_USER
        try:
            check_kill(self.kill_switch_path)
        except KillSwitchEngaged:
            return STOPPED_BY_KILL
        return None

    async def _execute(self, plan: Plan) -> None:
        total = len(plan)
        for index, step in enumerate(plan):
            reason = self._stop_reason()
            if reason:
                await self._emit(EventKind.WARNING, reason, paced=False)
                self._set_state(RunState.stopped())
                return

            self._set_state(RunState.running(step.description, index, total))
            await self._emit(EventKind.INFO, f"Executing: {step.description}")
            try:
                await self._perform(step)
            except Exception as exc:
                failure = exc if isinstance(exc, ActionExecutionFailure) else ActionExecutionFailure(step, exc)
                await self._emit(EventKind.ERROR, f"✗ {step.description}: {failure.reason}", paced=False)
                self._set_state(RunState.failed(str(failure)))
                return
            await _sleep_ms(self.pacing.step_delay_ms)
            await self._emit(EventKind.SUCCESS, f"✓ {step.description}")

        await self._emit(EventKind.SUCCESS, COMPLETED_MESSAGE, paced=False)
        self._set_state(RunState.completed())

    async def _perform(self, step: Step) -> None:
        # dispatch par type d'étape; la durée d'attente est déléguée à l'exécuteur
        if step.kind == "navigate":
            await self.executor.navigate(step.url)
        elif step.kind == "click":
            await self.executor.click(step.selector)
        elif step.kind == "type":
            await self.executor.type(step.text)
        elif step.kind == "wait":
            await self.executor.wait(step.duration_ms)
        else:
            raise ActionExecutionFailure(step, reason=f"unknown step kind: {step.kind}")

async def _sleep_ms(ms: int) -> None:
    # sleep(0) rend la main même sans délai configuré
    await asyncio.sleep(max(0, ms) / 1000)
