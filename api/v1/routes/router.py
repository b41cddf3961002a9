from fastapi import APIRouter

from api.v1.routes import (
    health,
)
from packages.billing.routes import billing, org_billing
from packages.organizations.routes import organizations

api_router = APIRouter()

# Health check
api_router.include_router(health.router, prefix="/health", tags=["health"])

# Checkout flow used before the organization exists
api_router.include_router(billing.router, prefix="/billing", tags=["billing"])

# Organization creation and per-organization billing
api_router.include_router(
    organizations.router, prefix="/organizations", tags=["organizations"]
)
api_router.include_router(
    org_billing.router, prefix="/organizations", tags=["billing"]
)
