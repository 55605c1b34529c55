"""accounting schema

Revision ID: 0001
Revises:
Create Date: 2026-10-19
"""

from alembic import op
import sqlalchemy as sa


revision = "0001"
down_revision = None
branch_labels = None
depends_on = None


ACCOUNT_TYPES = ("asset", "liability", "equity", "revenue", "expense")
TRANSACTION_STATUSES = ("draft", "posted")


def upgrade() -> None:
    op.create_table(
        "accounting_accounts",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("code", sa.String(20), nullable=False, unique=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column(
            "account_type",
            sa.Enum(*ACCOUNT_TYPES, name="account_type_enum"),
            nullable=False,
        ),
        sa.Column(
            "parent_id",
            sa.Integer(),
            sa.ForeignKey("accounting_accounts.id"),
            nullable=True,
        ),
        sa.Column("balance", sa.Numeric(15, 2), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index(
        "ix_accounting_accounts_parent_id",
        "accounting_accounts",
        ["parent_id"],
    )

    op.create_table(
        "accounting_categories",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(100), nullable=False, unique=True),
        sa.Column("description", sa.String(255), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )

    op.create_table(
        "accounting_vendors",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(150), nullable=False, unique=True),
        sa.Column("contact_email", sa.String(255), nullable=True),
        sa.Column("phone", sa.String(30), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )

    op.create_table(
        "accounting_transactions",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("transaction_number", sa.String(50), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("description", sa.String(500), nullable=True),
        sa.Column("reference", sa.String(100), nullable=True),
        sa.Column(
            "status",
            sa.Enum(
                *TRANSACTION_STATUSES,
                name="transaction_status_enum",
                create_constraint=True,
            ),
            nullable=False,
        ),
        sa.Column("total_amount", sa.Numeric(15, 2), nullable=False),
        sa.Column("created_by", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index(
        "ix_accounting_transactions_transaction_number",
        "accounting_transactions",
        ["transaction_number"],
        unique=True,
    )
    op.create_index(
        "ix_accounting_transactions_date",
        "accounting_transactions",
        ["date"],
    )
    op.create_index(
        "ix_accounting_transactions_status",
        "accounting_transactions",
        ["status"],
    )

    op.create_table(
        "accounting_entries",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "transaction_id",
            sa.Integer(),
            sa.ForeignKey("accounting_transactions.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "account_id",
            sa.Integer(),
            sa.ForeignKey("accounting_accounts.id"),
            nullable=False,
        ),
        sa.Column(
            "category_id",
            sa.Integer(),
            sa.ForeignKey("accounting_categories.id"),
            nullable=True,
        ),
        sa.Column(
            "vendor_id",
            sa.Integer(),
            sa.ForeignKey("accounting_vendors.id"),
            nullable=True,
        ),
        sa.Column("description", sa.String(255), nullable=True),
        sa.Column("debit", sa.Numeric(15, 2), nullable=False),
        sa.Column("credit", sa.Numeric(15, 2), nullable=False),
        sa.CheckConstraint("debit >= 0", name="ck_entry_debit_non_negative"),
        sa.CheckConstraint("credit >= 0", name="ck_entry_credit_non_negative"),
    )
    for column in ("transaction_id", "account_id", "category_id"):
        op.create_index(
            f"ix_accounting_entries_{column}",
            "accounting_entries",
            [column],
        )

    counters = op.create_table(
        "accounting_counters",
        sa.Column("name", sa.String(50), primary_key=True),
        sa.Column("value", sa.BigInteger(), nullable=False),
    )
    op.bulk_insert(counters, [{"name": "transaction_number", "value": 0}])


def downgrade() -> None:
    op.drop_table("accounting_counters")
    op.drop_table("accounting_entries")
    op.drop_table("accounting_transactions")
    op.drop_table("accounting_vendors")
    op.drop_table("accounting_categories")
    op.drop_table("accounting_accounts")
    sa.Enum(name="transaction_status_enum").drop(op.get_bind(), checkfirst=True)
    sa.Enum(name="account_type_enum").drop(op.get_bind(), checkfirst=True)
