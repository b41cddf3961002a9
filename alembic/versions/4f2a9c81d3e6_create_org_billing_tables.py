"""create_org_billing_tables

Revision ID: 4f2a9c81d3e6
Revises:
Create Date: 2026-10-19 09:12:44.518203

Initial schema for gated organization creation and seat billing.

Tables:
- users: Seat holders and organization owners
- organizations, teams, team_units, team_users: Membership the seat count derives from
- org_billing: One billing record per organization (payments sidecar identifiers + last synced seat count)
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '4f2a9c81d3e6'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now(), onupdate=sa.func.now()),
    ]


def upgrade() -> None:
    """Create membership and billing tables."""

    op.create_table(
        'users',
        sa.Column('id', sa.BigInteger(), nullable=False, autoincrement=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('lower_name', sa.String(255), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('full_name', sa.String(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_users_id', 'users', ['id'])
    op.create_index('ix_users_lower_name', 'users', ['lower_name'], unique=True)
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table(
        'organizations',
        sa.Column('id', sa.BigInteger(), nullable=False, autoincrement=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('lower_name', sa.String(255), nullable=False),
        sa.Column('visibility', sa.String(20), nullable=False, server_default='public'),
        sa.Column('repo_admin_change_team_access', sa.Boolean(), nullable=False, server_default=sa.false()),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_organizations_id', 'organizations', ['id'])
    op.create_index('ix_organizations_lower_name', 'organizations', ['lower_name'], unique=True)

    op.create_table(
        'teams',
        sa.Column('id', sa.BigInteger(), nullable=False, autoincrement=True),
        sa.Column('org_id', sa.BigInteger(), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('lower_name', sa.String(255), nullable=False),
        # Org-wide access level (0 none .. 4 owner)
        sa.Column('access_mode', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('can_create_org_repo', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('includes_all_repositories', sa.Boolean(), nullable=False, server_default=sa.false()),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['org_id'], ['organizations.id'], ondelete='CASCADE'),
        sa.UniqueConstraint('org_id', 'lower_name', name='uq_teams_org_id_lower_name'),
    )
    op.create_index('ix_teams_id', 'teams', ['id'])
    op.create_index('ix_teams_org_id', 'teams', ['org_id'])

    op.create_table(
        'team_units',
        sa.Column('id', sa.BigInteger(), nullable=False, autoincrement=True),
        sa.Column('org_id', sa.BigInteger(), nullable=False),
        sa.Column('team_id', sa.BigInteger(), nullable=False),
        sa.Column('type', sa.Integer(), nullable=False),
        sa.Column('access_mode', sa.Integer(), nullable=False, server_default='0'),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['team_id'], ['teams.id'], ondelete='CASCADE'),
        sa.UniqueConstraint('team_id', 'type', name='uq_team_units_team_id_type'),
    )
    op.create_index('ix_team_units_id', 'team_units', ['id'])
    op.create_index('ix_team_units_org_id', 'team_units', ['org_id'])

    op.create_table(
        'team_users',
        sa.Column('id', sa.BigInteger(), nullable=False, autoincrement=True),
        sa.Column('org_id', sa.BigInteger(), nullable=False),
        sa.Column('team_id', sa.BigInteger(), nullable=False),
        sa.Column('uid', sa.BigInteger(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['team_id'], ['teams.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['uid'], ['users.id'], ondelete='CASCADE'),
        sa.UniqueConstraint('team_id', 'uid', name='uq_team_users_team_id_uid'),
    )
    op.create_index('ix_team_users_id', 'team_users', ['id'])
    op.create_index('ix_team_users_org_id', 'team_users', ['org_id'])
    op.create_index('idx_team_users_uid', 'team_users', ['uid'])

    # One row per organization; the upsert conflicts on org_id
    op.create_table(
        'org_billing',
        sa.Column('org_id', sa.BigInteger(), nullable=False, autoincrement=False),
        sa.Column('subscription_id', sa.String(255), nullable=False, server_default=''),
        sa.Column('customer_id', sa.String(255), nullable=False, server_default=''),
        sa.Column('checkout_session_id', sa.String(255), nullable=False, server_default=''),
        sa.Column('last_seat_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('last_sync_time', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('org_id'),
        sa.ForeignKeyConstraint(['org_id'], ['organizations.id'], ondelete='CASCADE'),
    )
    op.create_index('idx_org_billing_subscription_id', 'org_billing', ['subscription_id'])
    op.create_index('idx_org_billing_checkout_session_id', 'org_billing', ['checkout_session_id'])
    op.create_index('idx_org_billing_last_sync_time', 'org_billing', ['last_sync_time'])


def downgrade() -> None:
    """Drop membership and billing tables."""
    op.drop_table('org_billing')
    op.drop_table('team_users')
    op.drop_table('team_units')
    op.drop_table('teams')
    op.drop_table('organizations')
    op.drop_table('users')
