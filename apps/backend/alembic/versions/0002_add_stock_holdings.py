"""add stock holdings table

Revision ID: 0002_stock
Revises: 0001_initial
Create Date: 2026-10-20 09:00:00.000000
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "0002_stock"
down_revision: Union[str, None] = "0001_initial"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "stock",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("year", sa.Integer(), nullable=False),
        sa.Column("month", sa.Integer(), nullable=False),
        sa.Column("ticker", sa.String(length=32), nullable=False),
        sa.Column("name", sa.String(length=120), nullable=True),
        sa.Column("buy_amount", sa.Integer(), nullable=False),
        sa.Column("shares", sa.Float(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.CheckConstraint("buy_amount > 0", name="ck_stock_buy_amount_positive"),
    )
    op.create_index("ix_stock_period", "stock", ["year", "month"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_stock_period", table_name="stock")
    op.drop_table("stock")
