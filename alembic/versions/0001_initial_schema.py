"""initial payouts schema

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-19

"""

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision = "0001_initial_schema"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "trainer_banking",
        sa.Column("trainer_id", sa.String(length=255), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column("payout_name", sa.String(length=255), nullable=True),
        sa.Column("payout_country", sa.String(length=2), nullable=True),
        sa.Column("payout_iban", sa.String(length=64), nullable=True),
        sa.Column("payout_bic", sa.String(length=16), nullable=True),
        sa.Column(
            "auto_payout",
            sa.Boolean(),
            server_default=sa.text("false"),
            nullable=False,
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("trainer_id"),
    )

    op.create_table(
        "payouts_summary",
        sa.Column("trainer_id", sa.String(length=255), nullable=False),
        sa.Column(
            "available_cents",
            sa.BigInteger(),
            server_default=sa.text("0"),
            nullable=False,
        ),
        sa.Column(
            "pending_cents",
            sa.BigInteger(),
            server_default=sa.text("0"),
            nullable=False,
        ),
        sa.Column(
            "currency",
            sa.String(length=3),
            server_default=sa.text("'EUR'"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.CheckConstraint("available_cents >= 0", name="non_negative_available"),
        sa.CheckConstraint("pending_cents >= 0", name="non_negative_pending"),
        sa.PrimaryKeyConstraint("trainer_id"),
    )

    op.create_table(
        "payouts_history",
        sa.Column(
            "id",
            sa.BigInteger(),
            sa.Identity(always=False),
            nullable=False,
        ),
        sa.Column("trainer_id", sa.String(length=255), nullable=False),
        sa.Column("type", sa.String(length=20), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False),
        sa.Column("amount_cents", sa.BigInteger(), nullable=False),
        sa.Column(
            "currency",
            sa.String(length=3),
            server_default=sa.text("'EUR'"),
            nullable=False,
        ),
        sa.Column(
            "date",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column("source_ref", sa.String(length=255), nullable=True),
        sa.Column("meta", postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.CheckConstraint("amount_cents > 0", name="positive_history_amount"),
        sa.CheckConstraint(
            "type IN ('sale', 'withdraw', 'paid')", name="valid_history_type"
        ),
        sa.CheckConstraint(
            "status IN ('available', 'requested', 'paid')",
            name="valid_history_status",
        ),
        sa.CheckConstraint(
            "(type = 'sale' AND status = 'available') "
            "OR (type = 'withdraw' AND status = 'requested') "
            "OR (type = 'paid' AND status = 'paid')",
            name="history_type_status_consistency",
        ),
        sa.ForeignKeyConstraint(
            ["trainer_id"],
            ["payouts_summary.trainer_id"],
            ondelete="RESTRICT",
        ),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_index(
        "idx_payouts_history_trainer_date",
        "payouts_history",
        ["trainer_id", "date"],
        unique=False,
    )
    op.create_index(
        "idx_payouts_history_source_ref",
        "payouts_history",
        ["source_ref"],
        unique=False,
    )


def downgrade() -> None:
    op.drop_index("idx_payouts_history_source_ref", table_name="payouts_history")
    op.drop_index("idx_payouts_history_trainer_date", table_name="payouts_history")
    op.drop_table("payouts_history")
    op.drop_table("payouts_summary")
    op.drop_table("trainer_banking")
