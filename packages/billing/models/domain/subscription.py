"""
Domain model for a subscription as reported by the payments sidecar.
"""

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class SubscriptionSummary(BaseModel):
    """Remote subscription state. The sidecar names the customer `customer`."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: str
    status: str = ""
    quantity: int = 0
    customer_id: str = Field(
        default="", validation_alias=AliasChoices("customer", "customer_id")
    )
    current_period_end: int = 0

    @field_validator("status", "customer_id", mode="before")
    @classmethod
    def none_to_empty(cls, v):
        return "" if v is None else v
