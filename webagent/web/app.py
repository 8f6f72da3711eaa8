from __future__ import annotations
import json, asyncio
from dataclasses import asdict
from typing import Optional
from fastapi import FastAPI, Query, HTTPException
from fastapi.responses import StreamingResponse, JSONResponse
from pydantic import BaseModel
from ..config import Settings
from ..actions.base import ActionExecutor
from ..actions.simulated import SimulatedExecutor
from ..core.engine import ExecutionEngine
from ..core.errors import AlreadyRunning
from ..core.orchestrator import build_engine
from ..core.intent import parse_intent
from ..core.planner import plan_steps, PLATFORMS, platform_label
from ..core.sink import EventSink
from ..core.types import LogEvent
from ..security.kill import engage_kill, release_kill
from ..tools.logs import log_event

class RunRequest(BaseModel):
    prompt: str
    platform: Optional[str] = None
    wait: bool = False

def _intent_dict(intent) -> dict:
    return {"action": intent.action, **asdict(intent)}

def _step_dict(step) -> dict:
    return {"kind": step.kind, **asdict(step)}

def _event_dict(event_id: int, event: LogEvent) -> dict:
    return {"id": event_id, **event.to_dict()}

def create_app(settings: Settings, *, executor: ActionExecutor | None = None) -> FastAPI:
    app = FastAPI(title="WebAgent", docs_url=None, redoc_url=None)

    app.state.settings = settings
    app.state.engine = build_engine(settings, executor,
                                    on_log=lambda msg: log_event(settings, msg, kind="action"))
    app.state.sink = EventSink(on_event=lambda e: log_event(settings, e.message, kind=e.kind.value))
    app.state.drain_task = None

    def _state_payload() -> dict:
        engine: ExecutionEngine = app.state.engine
        return {**engine.state.to_dict(), "current_step": app.state.sink.current_step}

    @app.get("/api/health")
    def health() -> dict:
        return {"status": "ok"}

    @app.get("/api/platforms")
    def platforms() -> dict:
        items = [{"id": pid, "label": label} for pid, label in PLATFORMS.items()]
        return {"default": settings.general.default_platform, "items": items}

    @app.get("/api/plan")
    def preview_plan(prompt: str, platform: str | None = None) -> dict:
        pid = (platform or settings.general.default_platform).lower()
        intent = parse_intent(prompt, pid)
        steps = plan_steps(intent)
        return {
            "platform": {"id": pid, "label": platform_label(pid)},
            "intent": _intent_dict(intent),
            "count": len(steps),
            "steps": [_step_dict(s) for s in steps],
        }

    @app.post("/api/run")
    async def run(req: RunRequest):
        if not req.prompt.strip():
            raise HTTPException(status_code=400, detail="Prompt vide")
        engine: ExecutionEngine = app.state.engine
        sink: EventSink = app.state.sink
        pid = (req.platform or settings.general.default_platform).lower()
        try:
            stream = engine.start(req.prompt, pid)
        except AlreadyRunning as e:
            raise HTTPException(status_code=409, detail=str(e))
        # la tâche du run n'a pas encore démarré: aucune action sur l'ancienne plateforme
        if isinstance(engine.executor, SimulatedExecutor):
            engine.executor.platform = pid

        # le flux précédent est fermé: finir de le vider avant la remise à zéro
        previous = app.state.drain_task
        if previous is not None:
            await previous
        # nouveau run -> journal affiché remis à zéro (ids SSE restent monotones)
        sink.clear()
        sink.state = engine.state
        app.state.drain_task = asyncio.create_task(sink.drain(stream))
        if not req.wait:
            return JSONResponse(status_code=202, content={"status": "accepted", "state": _state_payload()})

        await app.state.drain_task
        await engine.wait()
        return {
            "status": engine.state.status.value,
            "state": _state_payload(),
            "events": [_event_dict(i, e) for i, e in sink.since(0)],
        }

    @app.post("/api/stop")
    def stop() -> dict:
        app.state.engine.stop()
        return {"state": _state_payload()}

    @app.get("/api/state")
    def state() -> dict:
        return _state_payload()

    @app.get("/api/events")
    def list_events(last_id: int = 0, limit: int = 200) -> list[dict]:
        rows = app.state.sink.since(max(0, last_id))
        return [_event_dict(i, e) for i, e in rows[: max(1, min(1000, limit))]]

    @app.delete("/api/events")
    def clear_events() -> dict:
        app.state.sink.clear()
        return {"status": "cleared", "last_id": app.state.sink.last_id}

    def _draining() -> bool:
        task = app.state.drain_task
        return task is not None and not task.done()

    async def _sse_generator(last_id: int | None, once: bool = False):
        poll_interval = 0.1
        _last = last_id or 0
        while True:
            rows = app.state.sink.since(_last)
            if rows:
                for event_id, event in rows:
                    _last = event_id
                    payload = _event_dict(event_id, event)
                    chunk = f"id: {_last}\ndata: {json.dumps(payload, ensure_ascii=False)}\n\n".encode("utf-8")
                    yield chunk
                if once:
                    break
            else:
                # plus rien à lire et flux du run épuisé: fin du flux
                if once or not _draining():
                    break
                await asyncio.sleep(poll_interval)

    @app.get("/api/events/stream")
    async def events_stream(last_id: int | None = Query(default=None), once: bool = Query(default=False)) -> StreamingResponse:
        gen = _sse_generator(last_id=last_id, once=once)
        return StreamingResponse(gen, media_type="text/event-stream", headers={"Cache-Control": "no-cache", "X-Accel-Buffering": "no"})

    @app.post("/api/kill")
    def kill() -> dict:
        if not settings.general.kill_switch_path:
            raise HTTPException(status_code=400, detail="Kill-switch file path non configuré")
        p = engage_kill(settings.general.kill_switch_path)
        log_event(settings, f"kill-switch engaged: {p}", kind="warning")
        return {"status": "engaged", "path": str(p)}

    @app.delete("/api/kill")
    def release() -> dict:
        if not settings.general.kill_switch_path:
            raise HTTPException(status_code=400, detail="Kill-switch file path non configuré")
        released = release_kill(settings.general.kill_switch_path)
        return {"status": "released" if released else "not_engaged"}

    return app
