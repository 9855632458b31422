"""Domain services."""

from roam.domain.service.account_linker import AccountLinker
from roam.domain.service.config_service import ConfigService
from roam.domain.service.identity_service import IdentityService
from roam.domain.service.network_policy import NetworkPolicy
from roam.domain.service.rate_limiter import RateLimiter
from roam.domain.service.roaming_session import RoamingSessionManager, SessionHost
from roam.domain.service.session_service import SessionService
from roam.domain.service.signup_service import SignupService, SignupValidation
from roam.domain.service.site_scope_service import SiteScopeService
from roam.domain.service.site_service import SiteService
from roam.domain.service.token_service import TokenService

__all__ = [
    "AccountLinker",
    "ConfigService",
    "IdentityService",
    "NetworkPolicy",
    "RateLimiter",
    "RoamingSessionManager",
    "SessionHost",
    "SessionService",
    "SignupService",
    "SignupValidation",
    "SiteScopeService",
    "SiteService",
    "TokenService",
]
