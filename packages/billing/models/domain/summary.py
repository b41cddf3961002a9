"""
Read model behind the organization billing settings page.
"""

from typing import Optional
from pydantic import BaseModel, computed_field

from packages.billing.models.domain.org_billing import OrgBilling
from packages.billing.models.domain.subscription import SubscriptionSummary


class BillingSummary(BaseModel):
    """
    Billing state of one organization as shown to its owners.

    Fields stay empty when the gate is off, no record exists, or a lookup
    failed; seat_count is the live count, billing.last_seat_count the synced one.
    """

    gate_enabled: bool
    billing: Optional[OrgBilling] = None
    seat_count: Optional[int] = None
    subscription: Optional[SubscriptionSummary] = None
    customer_id: str = ""

    @computed_field
    @property
    def can_open_portal(self) -> bool:
        return bool(self.customer_id) or bool(
            self.billing and self.billing.subscription_id
        )
