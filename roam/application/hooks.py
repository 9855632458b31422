"""Host event registrations."""

from roam.domain.service import RoamingSessionManager, SignupService, SiteScopeService
from roam.util.events import EventBus, HostEvent


def register_hooks(
    bus: EventBus,
    roaming_session_manager: RoamingSessionManager,
    signup_service: SignupService,
    site_scope_service: SiteScopeService,
) -> EventBus:
    """Subscribe the roaming, signup and site scope handlers to host events.

    Handler keyword arguments:
        validate_session: ``session``
        login: ``session``, ``identity``
        logout: ``session``
        signup_validate: ``site_id``, ``user_name``, ``user_email``
        delete_identity: ``identity_id``, ``site_id`` (raises SiteScopeError to block)
    """
    bus.subscribe(HostEvent.VALIDATE_SESSION, roaming_session_manager.on_validate_session)
    bus.subscribe(HostEvent.LOGIN, roaming_session_manager.on_login)
    bus.subscribe(HostEvent.LOGOUT, roaming_session_manager.on_logout)
    bus.subscribe(HostEvent.SIGNUP_VALIDATE, signup_service.validate_signup)
    bus.subscribe(HostEvent.DELETE_IDENTITY, site_scope_service.ensure_deletable)
    return bus
