from __future__ import annotations
from datetime import datetime, timezone
from pathlib import Path
from ..config import Settings

def log_event(settings: Settings, message: str, *, kind: str = "info") -> Path:
    log_dir = Path(settings.general.log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    path = log_dir / "webagent.log"
    ts = datetime.now(timezone.utc).isoformat(timespec="seconds").replace("+00:00", "Z")
    with path.open("a", encoding="utf-8") as f:
        f.write(f"{ts} | {kind} | {message}\n")
    return path
