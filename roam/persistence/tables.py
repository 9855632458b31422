"""SQLAlchemy table definitions for Roam.

Identities, sites and signups belong to the host platform; Roam owns the
``main_id`` and ``site_id`` columns plus the options and cleanup tables.
"""

from sqlalchemy import (
    Column,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    String,
    Table,
    Text,
    UniqueConstraint,
)
from sqlalchemy.dialects.postgresql import TIMESTAMP, UUID

metadata = MetaData()

# ============================================================================
# SITES TABLE
# ============================================================================
sites_table = Table(
    "sites",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("domain", String(255), nullable=False),
    Column("path", String(255), nullable=False, server_default="/"),
    Column("scheme", String(5), nullable=False, server_default="https"),
    UniqueConstraint("domain", "path", name="uq_site_domain_path"),
)

# ============================================================================
# IDENTITIES TABLE (site-scoped)
# ============================================================================
identities_table = Table(
    "identities",
    metadata,
    Column("id", UUID, primary_key=True),
    Column("user_login", String(60), nullable=False),
    Column("user_email", String(100), nullable=False),
    Column("password_hash", Text, nullable=False),
    Column("site_id", Integer, ForeignKey("sites.id"), nullable=False),
    Column(
        "main_id", UUID, ForeignKey("identities.id", ondelete="SET NULL"), nullable=True
    ),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    UniqueConstraint("site_id", "user_login", name="uq_identity_site_login"),
    UniqueConstraint("site_id", "user_email", name="uq_identity_site_email"),
)

Index("idx_identities_main_id", identities_table.c.main_id)

# ============================================================================
# SIGNUPS TABLE (site-scoped reservations)
# ============================================================================
signups_table = Table(
    "signups",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("user_login", String(60), nullable=False),
    Column("user_email", String(100), nullable=False),
    Column("site_id", Integer, ForeignKey("sites.id"), nullable=False),
    Column("activation_key", String(50), nullable=False),
    Column(
        "registered_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
)

Index("idx_signups_site_login", signups_table.c.site_id, signups_table.c.user_login)
Index("idx_signups_site_email", signups_table.c.site_id, signups_table.c.user_email)

# ============================================================================
# NETWORK OPTIONS TABLE
# ============================================================================
network_options_table = Table(
    "network_options",
    metadata,
    Column("name", String(64), primary_key=True),
    Column("value", Text, nullable=False),
)

# ============================================================================
# PENDING CLEANUP TABLE
# ============================================================================
pending_cleanup_table = Table(
    "pending_cleanup",
    metadata,
    Column("site_id", Integer, primary_key=True),
    Column("identity_id", UUID, primary_key=True),
    Column(
        "marked_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
)
