from __future__ import annotations

class ActionExecutor:
    """Capacité externe qui réalise l'effet d'une étape.

    Chaque méthode se termine normalement (succès) ou lève une exception
    (échec, propagé au moteur comme `ActionExecutionFailure`).
    """
    async def navigate(self, url: str) -> None:  # pragma: no cover - interface
        raise NotImplementedError

    async def click(self, selector: str) -> None:  # pragma: no cover - interface
        raise NotImplementedError

    async def type(self, text: str) -> None:  # pragma: no cover - interface
        raise NotImplementedError

    async def wait(self, duration_ms: int) -> None:  # pragma: no cover - interface
        raise NotImplementedError
