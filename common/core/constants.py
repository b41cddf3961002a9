from enum import Enum


class Environment(str, Enum):
    """Environment profiles."""

    LOCAL = "local"
    DEV = "dev"
    STAGING = "staging"
    PRODUCTION = "production"


# Name of the team every organization is created with
OWNER_TEAM_NAME = "Owners"

PAYMENT_REQUIRED_MESSAGE = "Payment is required to create an organization"
BILLING_TOKEN_USED_MESSAGE = "This payment has already been used to create an organization"
NO_SUBSCRIPTION_TO_SYNC_MESSAGE = "No subscription to sync seats for this organization"
NO_BILLING_CUSTOMER_MESSAGE = "No billing customer found for this organization"
