from __future__ import annotations
from pathlib import Path

class KillSwitchEngaged(Exception):
    """Raised when kill-switch is engaged."""

def check_kill(kill_switch_path: str | None) -> None:
    """Raise if the kill-switch file exists."""
    if not kill_switch_path:
        return
    p = Path(kill_switch_path)
    if p.exists():
        raise KillSwitchEngaged(f"Kill-switch engaged: {p}")

def engage_kill(kill_switch_path: str) -> Path:
    p = Path(kill_switch_path)
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text("KILLED", encoding="utf-8")
    return p

def release_kill(kill_switch_path: str) -> bool:
    p = Path(kill_switch_path)
    if p.exists():
        p.unlink()
        return True
    return False
