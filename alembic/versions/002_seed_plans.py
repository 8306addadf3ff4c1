"""Seed the plan catalogue.

Revision ID: 002
Revises: 001
Create Date: 2026-10-19

Inserts free (0 EUR), pro (19 EUR) and premium (49 EUR). Stripe price IDs
are filled in per environment.
"""

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision = "002"
down_revision = "001"
branch_labels = None
depends_on = None

plans = sa.table(
    "plans",
    sa.column("id", sa.String),
    sa.column("code", sa.String),
    sa.column("nickname", sa.String),
    sa.column("price_eur", sa.Integer),
    sa.column("athlete_limit", sa.Integer),
    sa.column("academy_limit", sa.Integer),
)


def upgrade() -> None:
    op.bulk_insert(
        plans,
        [
            {"id": "plan-free", "code": "free", "nickname": "Free", "price_eur": 0,
             "athlete_limit": 50, "academy_limit": 1},
            {"id": "plan-pro", "code": "pro", "nickname": "Pro", "price_eur": 19,
             "athlete_limit": 200, "academy_limit": None},
            {"id": "plan-premium", "code": "premium", "nickname": "Premium", "price_eur": 49,
             "athlete_limit": None, "academy_limit": None},
        ],
    )


def downgrade() -> None:
    op.execute("DELETE FROM plans WHERE id IN ('plan-free', 'plan-pro', 'plan-premium')")
