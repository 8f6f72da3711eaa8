import asyncio
import time
from pathlib import Path
from starlette.testclient import TestClient

from webagent.actions.simulated import SimulatedExecutor
from webagent.config import load_settings
from webagent.web.app import create_app

def _settings(tmp_path: Path):
    return load_settings(config="config", profile="instant",
                         overrides={"log_dir": str(tmp_path / "logs"), "kill_switch_path": str(tmp_path / "kill")})

class SlowExecutor(SimulatedExecutor):
    async def navigate(self, url):
        await asyncio.sleep(0.05)
        await super().navigate(url)

    async def click(self, selector):
        await asyncio.sleep(0.05)
        await super().click(selector)

def test_api_health_platforms_and_plan(tmp_path: Path):
    client = TestClient(create_app(_settings(tmp_path)))

    r = client.get("/api/health")
    assert r.status_code == 200 and r.json()["status"] == "ok"

    r = client.get("/api/platforms")
    js = r.json()
    assert js["default"] == "linkedin"
    assert {"id": "gmail", "label": "Gmail"} in js["items"]

    r = client.get("/api/plan", params={"prompt": 'Send a message to John Smith saying "Hey"'})
    js = r.json()
    assert js["intent"] == {"action": "send_message", "platform": "linkedin", "contact": "John Smith", "message": "Hey"}
    assert js["count"] == 10
    assert js["steps"][2] == {"kind": "wait", "duration_ms": 500, "description": "Wait for messaging panel to load"}

def test_run_wait_returns_ordered_events(tmp_path: Path):
    s = _settings(tmp_path)
    with TestClient(create_app(s)) as client:
        r = client.post("/api/run", json={"prompt": "Create a post sharing my article", "platform": "linkedin", "wait": True})
        assert r.status_code == 200
        js = r.json()
        assert js["status"] == "completed"
        assert js["state"]["current_step"] == "Completed!"
        messages = [e["message"] for e in js["events"]]
        assert messages[:4] == [
            "Parsing user intent from prompt...",
            "Intent identified: create_post",
            "Planning execution steps...",
            "Generated 5 steps",
        ]
        assert messages[-1] == "🎉 Task completed successfully!"
        assert [e["id"] for e in js["events"]] == list(range(1, len(messages) + 1))

        r = client.get("/api/events", params={"last_id": 4})
        assert r.json()[0]["message"] == "Executing: Navigate to LinkedIn feed"

        r = client.delete("/api/events")
        assert r.json()["status"] == "cleared"
        assert client.get("/api/events").json() == []
        assert client.get("/api/state").json()["status"] == "completed"

    log = (tmp_path / "logs" / "webagent.log").read_text(encoding="utf-8")
    assert "Intent identified: create_post" in log

def test_run_conflict_and_stop(tmp_path: Path):
    app = create_app(_settings(tmp_path), executor=SlowExecutor())
    with TestClient(app) as client:
        r = client.post("/api/run", json={"prompt": 'Send a message to Ann "hi"'})
        assert r.status_code == 202
        assert r.json()["state"]["status"] == "running"

        r = client.post("/api/run", json={"prompt": "post something"})
        assert r.status_code == 409

        r = client.post("/api/stop")
        assert r.status_code == 200

        deadline = time.time() + 5
        state = client.get("/api/state").json()
        while state["current_step"] not in ("Stopped by user", "Completed!") and time.time() < deadline:
            time.sleep(0.02)
            state = client.get("/api/state").json()
        assert state["status"] == "stopped"

        messages = [e["message"] for e in client.get("/api/events").json()]
        assert messages[-1] == "Execution stopped by user"
        assert "🎉 Task completed successfully!" not in messages

        # moteur terminal -> nouveau run accepté
        r = client.post("/api/run", json={"prompt": "connect", "wait": True})
        assert r.json()["status"] == "completed"

def test_empty_prompt_rejected(tmp_path: Path):
    client = TestClient(create_app(_settings(tmp_path)))
    r = client.post("/api/run", json={"prompt": "  "})
    assert r.status_code == 400

def test_back_to_back_runs_keep_logs_separate(tmp_path: Path):
    import httpx

    app = create_app(_settings(tmp_path))

    async def go():
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
            r = await client.post("/api/run", json={"prompt": "connect"})
            assert r.status_code == 202
            engine = app.state.engine
            for _ in range(10_000):
                if engine.state.is_terminal:
                    break
                await asyncio.sleep(0)
            assert engine.state.is_terminal
            r = await client.post("/api/run", json={"prompt": "Create a post about AI", "wait": True})
            return r.json()

    js = asyncio.run(go())
    messages = [e.message for e in app.state.sink.events]
    assert messages[0] == "Parsing user intent from prompt..."
    assert messages[1] == "Intent identified: create_post"
    assert messages.count("🎉 Task completed successfully!") == 1
    assert [e["message"] for e in js["events"]] == messages
    assert js["state"]["current_step"] == "Completed!"

def test_run_uses_requested_platform_for_actions(tmp_path: Path):
    with TestClient(create_app(_settings(tmp_path))) as client:
        r = client.post("/api/run", json={"prompt": 'Send a message to Ann "hi"', "platform": "twitter", "wait": True})
        assert r.json()["status"] == "completed"
        r = client.post("/api/run", json={"prompt": 'Send a message to Ann "hi"', "platform": "linkedin", "wait": True})
        assert r.json()["status"] == "completed"

    log = (tmp_path / "logs" / "webagent.log").read_text(encoding="utf-8")
    assert "| action | Navigating to: /" in log
    assert "| action | Typing: Ann" in log
    # twitter n'a pas de table de sélecteurs: id logique tel quel
    assert "| action | Clicking element: nav:messaging" in log
    assert '| action | Clicking element: [data-nav="messaging"]' in log
