"""
Service for creating organizations behind the payment gate.
"""

from typing import Optional

from common.core.constants import OWNER_TEAM_NAME
from common.core.exceptions import NotFoundError, OrganizationNameTakenError
from common.core.otel_axiom_exporter import trace_span, get_logger
from common.db.scoped import transaction
from packages.billing.models.domain.checkout import PendingBillingLinkage
from packages.billing.services.checkout_service import CheckoutService
from packages.organizations.models.domain.enums import AccessMode, UnitType
from packages.organizations.models.domain.organization import (
    OrganizationCreateModel,
    OrganizationCreation,
    TeamCreateModel,
    TeamUnit,
)
from packages.organizations.repositories.organization_repository import (
    OrganizationRepository,
)
from packages.organizations.repositories.team_repository import TeamRepository
from packages.users.repositories.user_repository import UserRepository

logger = get_logger(__name__)


def owner_team_model(org_id: int) -> TeamCreateModel:
    """Owner team: full access on every unit, may create org repositories."""
    return TeamCreateModel(
        org_id=org_id,
        name=OWNER_TEAM_NAME,
        access_mode=AccessMode.OWNER,
        can_create_org_repo=True,
        includes_all_repositories=True,
        units=[TeamUnit(type=unit, access_mode=AccessMode.OWNER) for unit in UnitType],
    )


class OrganizationService:
    """Service for organization lifecycle operations."""

    def __init__(self):
        self.org_repo = OrganizationRepository()
        self.team_repo = TeamRepository()
        self.user_repo = UserRepository()
        self.checkout_service = CheckoutService()

    @trace_span
    async def create_organization(
        self,
        create_model: OrganizationCreateModel,
        owner_user_id: int,
        billing_token: str = "",
        pending: Optional[PendingBillingLinkage] = None,
    ) -> OrganizationCreation:
        """
        Create an organization with its owner team.

        The payment gate is checked first; the organization, owner team and
        owner membership commit together. Billing linkage happens after the
        commit and never fails the creation.

        Raises:
            GateBlocked: payment is required and absent
            OrganizationNameTakenError: the name is in use
            NotFoundError: the owner user does not exist
        """
        pending = pending or PendingBillingLinkage()
        verified = await self.checkout_service.ensure_creation_allowed(
            billing_token=billing_token, pending=pending
        )

        async with transaction():
            if await self.org_repo.get_by_name(create_model.name):
                raise OrganizationNameTakenError(create_model.name)
            if await self.user_repo.get(owner_user_id) is None:
                raise NotFoundError(f"User {owner_user_id} not found")

            org = await self.org_repo.create_organization(create_model)
            owner_team = await self.team_repo.create_team(owner_team_model(org.id))
            await self.team_repo.add_member(org.id, owner_team.id, owner_user_id)

        logger.info(
            f"Organization created: {org.name}",
            extra={"org_id": org.id, "owner_user_id": owner_user_id},
        )

        subscription_id = pending.subscription_id
        customer_id = pending.customer_id
        if verified is not None:
            subscription_id = verified.subscription_id or subscription_id
            customer_id = verified.customer_id or customer_id

        billing = await self.checkout_service.link_billing(
            org.id,
            subscription_id=subscription_id,
            customer_id=customer_id,
            checkout_session_id=billing_token or pending.checkout_session_id,
        )
        return OrganizationCreation(
            organization=org, owner_team=owner_team, billing=billing
        )
