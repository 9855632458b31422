"""Base use case."""

from abc import ABC, abstractmethod
from typing import Any

from pydantic import BaseModel


class BaseUseCase(ABC):
    """Base use case for orchestrating domain services."""

    @abstractmethod
    async def execute(self, request: Any) -> Any:
        pass


class ActionResult(BaseModel):
    """Outcome of a user-facing action.

    ``data`` holds the payload on success and the message on failure.
    """

    success: bool
    data: Any = None

    @classmethod
    def ok(cls, data: Any = None) -> "ActionResult":
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, message: str) -> "ActionResult":
        return cls(success=False, data=message)
