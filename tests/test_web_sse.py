from pathlib import Path
from starlette.testclient import TestClient

from webagent.config import load_settings
from webagent.web.app import create_app

def test_sse_once_snapshot(tmp_path: Path):
    s = load_settings(config="config", profile="instant", overrides={"log_dir": str(tmp_path / "logs")})
    with TestClient(create_app(s)) as client:
        client.post("/api/run", json={"prompt": "Create a post about AI", "wait": True})

        with client.stream("GET", "/api/events/stream", params={"once": "true"}) as st:
            text = "".join(st.iter_text())
        assert "data:" in text
        assert "id: 1\n" in text
        assert "Task completed successfully" in text

        with client.stream("GET", "/api/events/stream", params={"last_id": 10_000}) as st:
            assert "".join(st.iter_text()) == ""
