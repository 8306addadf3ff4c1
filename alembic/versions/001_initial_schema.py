"""Initial schema.

Revision ID: 001
Revises:
Create Date: 2026-10-19

Creates tenants, profiles, academies, plans, subscriptions, athletes,
classes, groups and audit_logs.
"""

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision = "001"
down_revision = None
branch_labels = None
depends_on = None

ROLES = ("super_admin", "admin", "owner", "coach", "athlete", "parent")
PLAN_CODES = ("free", "pro", "premium")
SUBSCRIPTION_STATUSES = ("trialing", "active", "past_due", "cancelled")


def upgrade() -> None:
    """Create all tables."""
    op.create_table(
        "tenants",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_table(
        "profiles",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("user_id", sa.String(64), nullable=False),
        sa.Column("tenant_id", sa.String(36), sa.ForeignKey("tenants.id"), nullable=True),
        sa.Column("active_academy_id", sa.String(36), nullable=True),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("name", sa.String(255), nullable=True),
        sa.Column("role", sa.Enum(*ROLES, name="userrole"), nullable=False, server_default="owner"),
        sa.Column("can_login", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_profiles_user_id", "profiles", ["user_id"], unique=True)
    op.create_index("ix_profiles_tenant_id", "profiles", ["tenant_id"])

    op.create_table(
        "academies",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("tenant_id", sa.String(36), sa.ForeignKey("tenants.id"), nullable=False),
        sa.Column("owner_id", sa.String(36), sa.ForeignKey("profiles.id"), nullable=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("academy_type", sa.String(50), nullable=True),
        sa.Column("country", sa.String(100), nullable=True),
        sa.Column("region", sa.String(100), nullable=True),
        sa.Column("city", sa.String(100), nullable=True),
        sa.Column("is_public", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("is_suspended", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("suspended_at", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_academies_tenant_id", "academies", ["tenant_id"])

    op.create_table(
        "plans",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("code", sa.Enum(*PLAN_CODES, name="plancode"), nullable=False, unique=True),
        sa.Column("nickname", sa.String(100), nullable=True),
        sa.Column("price_eur", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("athlete_limit", sa.Integer(), nullable=True),
        sa.Column("academy_limit", sa.Integer(), nullable=True),
        sa.Column("stripe_price_id", sa.String(100), nullable=True),
    )

    op.create_table(
        "subscriptions",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column(
            "tenant_id", sa.String(36), sa.ForeignKey("tenants.id"), nullable=False, unique=True
        ),
        sa.Column("plan_id", sa.String(36), sa.ForeignKey("plans.id"), nullable=True),
        sa.Column(
            "status",
            sa.Enum(*SUBSCRIPTION_STATUSES, name="subscriptionstatus"),
            nullable=False,
            server_default="active",
        ),
        sa.Column("current_period_start", sa.DateTime(), nullable=True),
        sa.Column("current_period_end", sa.DateTime(), nullable=True),
        sa.Column("cancel_at_period_end", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("stripe_customer_id", sa.String(100), nullable=True),
        sa.Column("stripe_subscription_id", sa.String(100), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    )
    op.create_index(
        "ix_subscriptions_stripe_subscription_id", "subscriptions", ["stripe_subscription_id"]
    )

    for table, extra in (
        ("athletes", [sa.Column("level", sa.String(50), nullable=True),
                      sa.Column("status", sa.String(20), nullable=False, server_default="active")]),
        ("classes", [sa.Column("capacity", sa.Integer(), nullable=True),
                     sa.Column("monthly_fee", sa.Numeric(10, 2), nullable=True)]),
        ("groups", [sa.Column("discipline", sa.String(50), nullable=True)]),
    ):
        op.create_table(
            table,
            sa.Column("id", sa.String(36), primary_key=True),
            sa.Column("tenant_id", sa.String(36), sa.ForeignKey("tenants.id"), nullable=False),
            sa.Column("academy_id", sa.String(36), sa.ForeignKey("academies.id"), nullable=False),
            sa.Column("name", sa.String(255), nullable=False),
            *extra,
            sa.Column("created_at", sa.DateTime(), nullable=False),
        )
        op.create_index(f"ix_{table}_tenant_id", table, ["tenant_id"])
        op.create_index(f"ix_{table}_academy_id", table, ["academy_id"])

    op.create_table(
        "audit_logs",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("user_id", sa.String(64), nullable=True),
        sa.Column("action", sa.String(100), nullable=False),
        sa.Column("meta", sa.JSON(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )


def downgrade() -> None:
    """Drop all tables."""
    for table in (
        "audit_logs",
        "groups",
        "classes",
        "athletes",
        "subscriptions",
        "plans",
        "academies",
        "profiles",
        "tenants",
    ):
        op.drop_table(table)
