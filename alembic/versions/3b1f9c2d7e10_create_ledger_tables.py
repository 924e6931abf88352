"""create ledger tables

Revision ID: 3b1f9c2d7e10
Revises:
Create Date: 2026-10-12 00:00:00.000000

"""

from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "3b1f9c2d7e10"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "projects",
        sa.Column("id", sa.BigInteger(), autoincrement=False, nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("location", sa.String(length=255), nullable=False),
        sa.Column("category", sa.String(length=32), nullable=False),
        sa.Column("start_ts", sa.BigInteger(), nullable=False),
        sa.Column("end_ts", sa.BigInteger(), nullable=False),
        sa.Column("owner", sa.String(length=128), nullable=False),
        sa.Column("status", sa.String(length=16), nullable=False),
        sa.Column("verified", sa.Boolean(), nullable=False),
        sa.Column("total_credits", sa.BigInteger(), nullable=False),
        sa.Column("available_credits", sa.BigInteger(), nullable=False),
        sa.Column("retired_credits", sa.BigInteger(), nullable=False),
        sa.Column("verification_data", sa.LargeBinary(), nullable=True),
        sa.Column("registry_url", sa.Text(), nullable=False),
        sa.Column("created_at", sa.BigInteger(), nullable=False),
        sa.CheckConstraint("start_ts < end_ts", name="project_date_range"),
        sa.CheckConstraint("available_credits >= 0", name="available_non_negative"),
        sa.CheckConstraint("retired_credits >= 0", name="retired_non_negative"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_projects_owner", "projects", ["owner"])

    op.create_table(
        "verification_records",
        sa.Column("project_id", sa.BigInteger(), nullable=False),
        sa.Column("sequence", sa.Integer(), nullable=False),
        sa.Column("verifier", sa.String(length=128), nullable=False),
        sa.Column("timestamp", sa.BigInteger(), nullable=False),
        sa.Column("credits_issued", sa.BigInteger(), nullable=False),
        sa.Column("report_url", sa.Text(), nullable=False),
        sa.Column("methodology", sa.String(length=255), nullable=False),
        sa.Column("period_start", sa.BigInteger(), nullable=False),
        sa.Column("period_end", sa.BigInteger(), nullable=False),
        sa.CheckConstraint("credits_issued > 0", name="credits_issued_positive"),
        sa.CheckConstraint("period_start <= period_end", name="verification_period"),
        sa.ForeignKeyConstraint(["project_id"], ["projects.id"]),
        sa.PrimaryKeyConstraint("project_id", "sequence"),
    )

    op.create_table(
        "verifiers",
        sa.Column("id", sa.String(length=128), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("credentials", sa.Text(), nullable=False),
        sa.Column("authorized_by", sa.String(length=128), nullable=False),
        sa.Column("authorized_at", sa.BigInteger(), nullable=False),
        sa.Column("status", sa.String(length=16), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "credit_batches",
        sa.Column("id", sa.BigInteger(), autoincrement=False, nullable=False),
        sa.Column("project_id", sa.BigInteger(), nullable=False),
        sa.Column("vintage_year", sa.Integer(), nullable=False),
        sa.Column("quantity", sa.BigInteger(), nullable=False),
        sa.Column("remaining", sa.BigInteger(), nullable=False),
        sa.Column("unit_price", sa.BigInteger(), nullable=False),
        sa.Column("created_at", sa.BigInteger(), nullable=False),
        sa.Column("status", sa.String(length=16), nullable=False),
        sa.CheckConstraint("quantity > 0", name="batch_quantity_positive"),
        sa.CheckConstraint(
            "remaining >= 0 AND remaining <= quantity", name="batch_remaining_range"
        ),
        sa.CheckConstraint("unit_price > 0", name="batch_price_positive"),
        sa.CheckConstraint("vintage_year >= 2020", name="batch_vintage_floor"),
        sa.ForeignKeyConstraint(["project_id"], ["projects.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_credit_batches_project_id", "credit_batches", ["project_id"])

    op.create_table(
        "credit_holdings",
        sa.Column("holder", sa.String(length=128), nullable=False),
        sa.Column("project_id", sa.BigInteger(), nullable=False),
        sa.Column("vintage_year", sa.Integer(), nullable=False),
        sa.Column("balance", sa.BigInteger(), nullable=False),
        sa.CheckConstraint("balance >= 0", name="balance_non_negative"),
        sa.ForeignKeyConstraint(["project_id"], ["projects.id"]),
        sa.PrimaryKeyConstraint("holder", "project_id", "vintage_year"),
    )

    op.create_table(
        "retirements",
        sa.Column("id", sa.BigInteger(), autoincrement=False, nullable=False),
        sa.Column("account", sa.String(length=128), nullable=False),
        sa.Column("project_id", sa.BigInteger(), nullable=False),
        sa.Column("vintage_year", sa.Integer(), nullable=False),
        sa.Column("batch_id", sa.BigInteger(), nullable=True),
        sa.Column("quantity", sa.BigInteger(), nullable=False),
        sa.Column("reason", sa.Text(), nullable=False),
        sa.Column("beneficiary", sa.String(length=128), nullable=True),
        sa.Column("timestamp", sa.BigInteger(), nullable=False),
        sa.Column("certificate_url", sa.Text(), nullable=True),
        sa.CheckConstraint("quantity > 0", name="retirement_quantity_positive"),
        sa.CheckConstraint(
            "beneficiary IS NULL OR beneficiary <> account",
            name="retirement_beneficiary_not_self",
        ),
        sa.ForeignKeyConstraint(["project_id"], ["projects.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_retirements_account", "retirements", ["account"])

    op.create_table(
        "id_sequences",
        sa.Column("name", sa.String(length=64), nullable=False),
        sa.Column("next_value", sa.BigInteger(), nullable=False),
        sa.PrimaryKeyConstraint("name"),
    )


def downgrade() -> None:
    op.drop_table("id_sequences")
    op.drop_index("ix_retirements_account", table_name="retirements")
    op.drop_table("retirements")
    op.drop_table("credit_holdings")
    op.drop_index("ix_credit_batches_project_id", table_name="credit_batches")
    op.drop_table("credit_batches")
    op.drop_table("verifiers")
    op.drop_table("verification_records")
    op.drop_index("ix_projects_owner", table_name="projects")
    op.drop_table("projects")
