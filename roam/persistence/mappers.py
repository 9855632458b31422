"""Mappers for converting between database rows and domain models.

Since we're using Pydantic domain models (immutable), we use manual mapping
instead of SQLAlchemy's classical imperative mapping.
"""

from typing import Any, Dict
from uuid import UUID

from roam.domain.model import Identity, PendingSignup, Site
from roam.domain.value import IdentityId, SiteId


def _uuid(value: Any) -> UUID:
    return UUID(value) if isinstance(value, str) else value


def row_to_identity(row: Dict[str, Any]) -> Identity:
    """Convert database row to Identity domain model.

    Args:
        row: Database row as dict

    Returns:
        Identity domain model
    """
    return Identity(
        id=IdentityId(_uuid(row["id"])),
        user_login=row["user_login"],
        user_email=row["user_email"],
        password_hash=row["password_hash"],
        site_id=SiteId(row["site_id"]),
        main_id=IdentityId(_uuid(row["main_id"])) if row.get("main_id") else None,
        created_at=row["created_at"],
    )


def identity_to_dict(identity: Identity) -> Dict[str, Any]:
    """Convert Identity domain model to database dict."""
    return identity.model_dump()


def row_to_site(row: Dict[str, Any]) -> Site:
    """Convert database row to Site domain model."""
    return Site(
        id=SiteId(row["id"]),
        domain=row["domain"],
        path=row["path"],
        scheme=row["scheme"],
    )


def site_to_dict(site: Site) -> Dict[str, Any]:
    """Convert Site domain model to database dict."""
    return site.model_dump()


def row_to_signup(row: Dict[str, Any]) -> PendingSignup:
    """Convert database row to PendingSignup domain model."""
    return PendingSignup(
        user_login=row["user_login"],
        user_email=row["user_email"],
        site_id=SiteId(row["site_id"]),
        activation_key=row["activation_key"],
        registered_at=row["registered_at"],
    )


def signup_to_dict(signup: PendingSignup) -> Dict[str, Any]:
    """Convert PendingSignup domain model to database dict."""
    return signup.model_dump()
