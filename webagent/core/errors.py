from __future__ import annotations
from typing import Optional

class WebAgentError(Exception):
    """Base pour les erreurs du moteur."""

class AlreadyRunning(WebAgentError):
    """Un `start` a été demandé alors qu'une exécution est active."""

class ActionExecutionFailure(WebAgentError):
    """Échec d'une action remonté par l'exécuteur."""

    def __init__(self, step, cause: Optional[BaseException] = None, reason: str | None = None) -> None:
        self.step = step
        self.cause = cause
        if reason is None:
            reason = "action failed"
            if cause is not None:
                reason = str(cause) or type(cause).__name__
        self.reason = reason
        super().__init__(f"{step.description}: {self.reason}")
