"""Create issue_reports table

Revision ID: 002
Revises: 001
Create Date: 2025-05-26 00:00:00.000000+00:00

shipment_id is intentionally created WITHOUT a foreign key: reports may
reference unknown or removed shipments.
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "issue_reports",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("image_url", sa.Text(), nullable=True),
        sa.Column("shipment_id", sa.Integer(), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.Column("is_important", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column("is_fixed", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column("resolved_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_issue_reports_shipment_id", "issue_reports", ["shipment_id"])
    op.create_index("idx_issue_reports_created_at", "issue_reports", ["created_at"])


def downgrade() -> None:
    op.drop_index("idx_issue_reports_created_at", table_name="issue_reports")
    op.drop_index("idx_issue_reports_shipment_id", table_name="issue_reports")
    op.drop_table("issue_reports")
