"""create academic years

Revision ID: 20261018_0002
Revises: 20261018_0001
Create Date: 2026-10-18 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

revision = "20261018_0002"
down_revision = "20261018_0001"
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "academic_years",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True, nullable=False),
        sa.Column("year", sa.Integer(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_academic_years_year", "academic_years", ["year"], unique=True)
    op.execute("INSERT INTO academic_years (year, is_active) VALUES (2026, true)")


def downgrade() -> None:
    op.drop_index("ix_academic_years_year", table_name="academic_years")
    op.drop_table("academic_years")
