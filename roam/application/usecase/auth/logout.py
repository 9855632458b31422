"""Logout use case."""

import logfire

from roam.domain.service import SessionHost
from roam.util.events import EventBus, HostEvent


class LogoutUseCase:
    """Use case for ending the local session."""

    def __init__(self, event_bus: EventBus) -> None:
        self.event_bus = event_bus

    async def execute(self, session: SessionHost) -> None:
        """Fire the logout event, then tear down the local session.

        Handlers run first so the roaming cookie is gone before the session is.
        """
        identity_id = session.current_identity_id
        await self.event_bus.emit(HostEvent.LOGOUT, session=session)
        await session.logout()

        if identity_id is not None:
            logfire.info("Identity logged out", identity_id=str(identity_id))
