"""
Domain models for organization billing records.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class OrgBilling(BaseModel):
    """
    Durable billing record of one organization.

    A non-empty subscription_id means the organization is treated as
    subscribed; the payments sidecar can always override that.
    last_seat_count is the most recent quantity the sidecar accepted.
    """

    model_config = ConfigDict(from_attributes=True)

    org_id: int
    subscription_id: str = ""
    customer_id: str = ""
    checkout_session_id: str = ""
    last_seat_count: int = 0
    last_sync_time: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    def has_subscription(self) -> bool:
        return bool(self.subscription_id)

    def to_upsert(self, **changes) -> "OrgBillingUpsertModel":
        """Upsert model carrying this record's mutable fields plus changes."""
        data = self.model_dump(include=set(OrgBillingUpsertModel.model_fields))
        data.update(changes)
        return OrgBillingUpsertModel(**data)


class OrgBillingUpsertModel(BaseModel):
    """Full set of mutable fields written by an upsert."""

    org_id: int
    subscription_id: str = ""
    customer_id: str = ""
    checkout_session_id: str = ""
    last_seat_count: int = Field(default=0, ge=0)
    last_sync_time: Optional[datetime] = None
