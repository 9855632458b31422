"""Host event bus.

The host platform notifies interested components of login, logout, session
validation, signup validation and identity deletion through callbacks
registered here. A handler blocks the host action by raising.
"""

from abc import ABC, abstractmethod
from collections import defaultdict
from collections.abc import Awaitable, Callable
from enum import Enum
from typing import Any

import logfire

Handler = Callable[..., Awaitable[Any]]


class HostEvent(str, Enum):
    """Events raised by the host platform."""

    LOGIN = "login"
    LOGOUT = "logout"
    VALIDATE_SESSION = "validate_session"
    SIGNUP_VALIDATE = "signup_validate"
    DELETE_IDENTITY = "delete_identity"


class EventBus(ABC):
    """Callback registration capability offered by the host."""

    @abstractmethod
    def subscribe(self, event: HostEvent, handler: Handler) -> None:
        """Register a handler for an event."""
        pass

    @abstractmethod
    async def emit(self, event: HostEvent, **kwargs: Any) -> list[Any]:
        """Run every handler of an event in registration order.

        Returns:
            Handler results, in order
        """
        pass


class InProcessEventBus(EventBus):
    """Event bus that calls handlers directly in the current task."""

    def __init__(self) -> None:
        self._handlers: dict[HostEvent, list[Handler]] = defaultdict(list)

    def subscribe(self, event: HostEvent, handler: Handler) -> None:
        self._handlers[event].append(handler)

    async def emit(self, event: HostEvent, **kwargs: Any) -> list[Any]:
        handlers = self._handlers.get(event, [])
        with logfire.span("event_bus.emit", host_event=event.value, handlers=len(handlers)):
            return [await handler(**kwargs) for handler in handlers]
