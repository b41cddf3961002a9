"""
Database entity for per-organization billing records.
"""

from sqlalchemy import Column, String, Integer, DateTime, ForeignKey, Index

from common.db.base import Base, BigIntegerType, TimestampMixin


class OrgBillingEntity(TimestampMixin, Base):
    """
    Billing identifiers and seat metadata for one organization.

    Keyed by org_id, so there is at most one row per organization. Empty
    strings mean "not known yet"; last_sync_time is NULL until the first
    successful seat sync.
    """

    __tablename__ = "org_billing"

    org_id = Column(
        BigIntegerType,
        ForeignKey("organizations.id", ondelete="CASCADE"),
        primary_key=True,
        autoincrement=False,
    )

    # Payments sidecar identifiers
    subscription_id = Column(String(255), nullable=False, default="", server_default="")
    customer_id = Column(String(255), nullable=False, default="", server_default="")
    checkout_session_id = Column(
        String(255), nullable=False, default="", server_default=""
    )

    # Last quantity accepted by the payments sidecar
    last_seat_count = Column(Integer, nullable=False, default=0, server_default="0")
    last_sync_time = Column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        Index("idx_org_billing_subscription_id", "subscription_id"),
        Index("idx_org_billing_checkout_session_id", "checkout_session_id"),
        Index("idx_org_billing_last_sync_time", "last_sync_time"),
    )


# Columns an upsert may write; timestamps stay server-managed
MUTABLE_COLUMNS = (
    "subscription_id",
    "customer_id",
    "checkout_session_id",
    "last_seat_count",
    "last_sync_time",
)
