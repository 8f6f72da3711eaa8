from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import ClassVar, Optional, Tuple, Union

# ---------------- Intents ----------------

@dataclass(frozen=True)
class SendMessage:
    action: ClassVar[str] = "send_message"
    platform: str
    contact: str
    message: str

@dataclass(frozen=True)
class CreatePost:
    action: ClassVar[str] = "create_post"
    platform: str
    content: str

@dataclass(frozen=True)
class SendConnection:
    action: ClassVar[str] = "send_connection"
    platform: str
    profile: str

@dataclass(frozen=True)
class Navigate:
    action: ClassVar[str] = "navigate"
    platform: str
    destination: str = "home"

Intent = Union[SendMessage, CreatePost, SendConnection, Navigate]

# ---------------- Steps ----------------

@dataclass(frozen=True)
class NavigateStep:
    kind: ClassVar[str] = "navigate"
    url: str
    description: str

@dataclass(frozen=True)
class ClickStep:
    kind: ClassVar[str] = "click"
    selector: str
    description: str

@dataclass(frozen=True)
class TypeStep:
    kind: ClassVar[str] = "type"
    text: str
    description: str

@dataclass(frozen=True)
class WaitStep:
    kind: ClassVar[str] = "wait"
    duration_ms: int
    description: str

Step = Union[NavigateStep, ClickStep, TypeStep, WaitStep]
Plan = Tuple[Step, ...]

# ---------------- Events ----------------

class EventKind(str, Enum):
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"

def _now() -> datetime:
    return datetime.now(timezone.utc)

@dataclass(frozen=True)
class LogEvent:
    kind: EventKind
    message: str
    timestamp: datetime = field(default_factory=_now)

    @property
    def time_label(self) -> str:
        return self.timestamp.astimezone().strftime("%H:%M:%S")

    def to_dict(self) -> dict:
        return {
            "kind": self.kind.value,
            "message": self.message,
            "timestamp": self.timestamp.isoformat(timespec="seconds").replace("+00:00", "Z"),
            "time": self.time_label,
        }

# ---------------- Run state ----------------

class RunStatus(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    STOPPED = "stopped"
    COMPLETED = "completed"
    FAILED = "failed"

TERMINAL = frozenset({RunStatus.STOPPED, RunStatus.COMPLETED, RunStatus.FAILED})

@dataclass(frozen=True)
class RunState:
    status: RunStatus
    step_index: Optional[int] = None
    step_count: Optional[int] = None
    description: str = ""
    error: Optional[str] = None

    @classmethod
    def idle(cls) -> "RunState":
        return cls(RunStatus.IDLE)

    @classmethod
    def running(cls, description: str, step_index: int | None = None, step_count: int | None = None) -> "RunState":
        return cls(RunStatus.RUNNING, step_index, step_count, description)

    @classmethod
    def stopped(cls) -> "RunState":
        return cls(RunStatus.STOPPED)

    @classmethod
    def completed(cls) -> "RunState":
        return cls(RunStatus.COMPLETED)

    @classmethod
    def failed(cls, error: str) -> "RunState":
        return cls(RunStatus.FAILED, error=error)

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL

    @property
    def label(self) -> str:
        """Libellé de progression affiché par la couche de présentation."""
        if self.status is RunStatus.RUNNING:
            if self.step_index is None:
                return self.description
            return f"Step {self.step_index + 1}/{self.step_count}: {self.description}"
        if self.status is RunStatus.COMPLETED:
            return "Completed!"
        if self.status is RunStatus.STOPPED:
            return "Stopped by user"
        if self.status is RunStatus.FAILED:
            return f"Failed: {self.error}"
        return "Ready"

    def to_dict(self) -> dict:
        return {
            "status": self.status.value,
            "step_index": self.step_index,
            "step_count": self.step_count,
            "description": self.description,
            "error": self.error,
            "label": self.label,
        }
