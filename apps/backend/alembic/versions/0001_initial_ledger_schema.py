"""initial ledger schema

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-19 09:00:00.000000
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "0001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


ENTRY_TYPE = sa.Enum("income", "expense", name="entry_type")


def upgrade() -> None:
    op.create_table(
        "account",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("initial_balance", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("is_main", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.UniqueConstraint("name", name="uq_account_name"),
    )

    op.create_table(
        "category",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("type", ENTRY_TYPE, nullable=False),
        sa.Column("major", sa.String(length=100), nullable=False),
        sa.Column("middle", sa.String(length=100), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.UniqueConstraint("type", "major", "middle", name="uq_category_labels"),
    )

    op.create_table(
        "transaction",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("type", ENTRY_TYPE, nullable=False),
        sa.Column("year", sa.Integer(), nullable=False),
        sa.Column("month", sa.Integer(), nullable=False),
        sa.Column("day", sa.Integer(), nullable=True),
        sa.Column("account_id", sa.Integer(), nullable=False),
        sa.Column("category_id", sa.Integer(), nullable=True),
        sa.Column("amount", sa.Integer(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("linked_transaction_id", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["account_id"], ["account.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["category_id"], ["category.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["linked_transaction_id"], ["transaction.id"], ondelete="SET NULL"),
        sa.CheckConstraint("amount > 0", name="ck_transaction_amount_positive"),
        sa.CheckConstraint("month BETWEEN 1 AND 12", name="ck_transaction_month"),
        sa.CheckConstraint(
            "linked_transaction_id IS NULL OR linked_transaction_id != id",
            name="ck_transaction_link_not_self",
        ),
    )
    op.create_index("ix_transaction_period", "transaction", ["year", "month"], unique=False)
    op.create_index("ix_transaction_category", "transaction", ["category_id"], unique=False)

    op.create_table(
        "budget",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("year", sa.Integer(), nullable=False),
        sa.Column("month", sa.Integer(), nullable=False),
        sa.Column("category_id", sa.Integer(), nullable=False),
        sa.Column("amount", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(["category_id"], ["category.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("year", "month", "category_id", name="uq_budget_period_category"),
    )

    op.create_table(
        "savingsproduct",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("type", sa.Enum("savings_plan", "deposit", name="savings_product_type"), nullable=False),
        sa.Column("bank", sa.String(length=100), nullable=False),
        sa.Column("name", sa.String(length=120), nullable=True),
        sa.Column("pay_day", sa.Integer(), nullable=True),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("interest_rate", sa.Float(), nullable=False),
        sa.Column("interest_type", sa.Enum("simple", "compound", name="interest_type"), nullable=False),
        sa.Column("term_months", sa.Integer(), nullable=False),
        sa.Column("amount", sa.Integer(), nullable=False),
        sa.Column("tax_type", sa.Enum("비과세", "일반과세", "세금우대", name="tax_type"), nullable=False),
        sa.Column("category_id", sa.Integer(), nullable=True),
        sa.Column("memo", sa.Text(), nullable=True),
        sa.Column("initial_paid", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["category_id"], ["category.id"], ondelete="SET NULL"),
        sa.CheckConstraint("term_months > 0", name="ck_savings_term_positive"),
    )


def downgrade() -> None:
    op.drop_table("savingsproduct")
    op.drop_table("budget")
    op.drop_index("ix_transaction_category", table_name="transaction")
    op.drop_index("ix_transaction_period", table_name="transaction")
    op.drop_table("transaction")
    op.drop_table("category")
    op.drop_table("account")
