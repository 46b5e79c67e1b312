"""
Stage executor interface.

An executor is a named table of async actions. The engine calls an
action directly by name; `run` is the generic entry point used by
callers that only know the action as a string.
"""
from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable, Dict
import logging

logger = logging.getLogger(__name__)

Action = Callable[..., Awaitable[Dict[str, Any]]]


class BaseExecutor(ABC):
    """Base class for MEKD stage executors"""

    name: str = "base"

    def __init__(self, config: Dict[str, Any] = None):
        self.config = config or {}
        logger.info(f"Initialized executor: {self.name}")

    @property
    def knowledge(self) -> Dict[str, Any]:
        """Knowledge bases handed over by the engine, if any."""
        return self.config.get("knowledge") or {}

    @abstractmethod
    def actions(self) -> Dict[str, Action]:
        """Action name -> coroutine method"""

    async def run(self, action: str, inputs: Dict[str, Any]) -> Dict[str, Any]:
        table = self.actions()
        if action not in table:
            return {"error": f"Unknown action: {action}", "available": list(table)}
        return await table[action](**inputs)

    def get_capabilities(self) -> list[str]:
        return list(self.actions())
