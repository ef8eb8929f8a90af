"""Create app_feedback table

Revision ID: 003
Revises: 002
Create Date: 2025-05-27 00:00:00.000000+00:00
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

revision: str = "003"
down_revision: Union[str, None] = "002"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "app_feedback",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("overall_rating", sa.Integer(), nullable=False),
        sa.Column("best_feature", sa.String(1000), nullable=True),
        sa.Column("missing_feature", sa.String(1000), nullable=True),
        sa.Column("suggestions", sa.String(2000), nullable=True),
        sa.Column("would_recommend", sa.Boolean(), nullable=True),
        sa.Column(
            "submitted_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.CheckConstraint(
            "overall_rating BETWEEN 1 AND 5", name="ck_app_feedback_overall_rating"
        ),
        sa.PrimaryKeyConstraint("id"),
    )


def downgrade() -> None:
    op.drop_table("app_feedback")
