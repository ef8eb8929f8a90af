"""Create shipments table

Revision ID: 001
Revises: None
Create Date: 2025-05-20 00:00:00.000000+00:00

Shipment records: free-text status and delivery fields, optional revenue,
audit columns written by status updates.
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "shipments",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("status", sa.String(100), nullable=False),
        sa.Column("destination", sa.String(255), nullable=True),
        sa.Column("assigned_to", sa.String(100), nullable=True),
        # Free text as entered in the dashboard (e.g. "15-03-2025")
        sa.Column("expected_delivery", sa.String(50), nullable=True),
        sa.Column("weight", sa.String(50), nullable=True),
        sa.Column("revenue", sa.Numeric(12, 2), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.Column("last_updated_by", sa.String(100), nullable=True),
        sa.Column("last_updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_shipments_assigned_to", "shipments", ["assigned_to"])
    op.create_index("idx_shipments_created_at", "shipments", ["created_at"])


def downgrade() -> None:
    """Drops the table. All shipment data is lost."""
    op.drop_index("idx_shipments_created_at", table_name="shipments")
    op.drop_index("idx_shipments_assigned_to", table_name="shipments")
    op.drop_table("shipments")
