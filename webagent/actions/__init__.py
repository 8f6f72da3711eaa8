from .base import ActionExecutor
from .simulated import SimulatedExecutor

__all__ = ["ActionExecutor", "SimulatedExecutor"]
