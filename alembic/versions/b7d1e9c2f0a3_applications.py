"""applications

Revision ID: b7d1e9c2f0a3
Revises: a1c2e3f4a5b6
Create Date: 2026-10-17

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


revision: str = "b7d1e9c2f0a3"
down_revision: Union[str, None] = "a1c2e3f4a5b6"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # application_status already exists (notifications.status)
    status_enum = postgresql.ENUM("PENDING", "APPROVED", "REJECTED", name="application_status", create_type=False)
    op.create_table(
        "applications",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("event_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("applicant_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("status", status_enum, nullable=False),
        sa.Column("message", sa.Text(), nullable=True),
        sa.Column("is_observer", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("verdict", sa.Text(), nullable=True),
        sa.Column("submitted_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(["event_id"], ["events.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["applicant_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_applications_event_id"), "applications", ["event_id"], unique=False)
    op.create_index(op.f("ix_applications_applicant_id"), "applications", ["applicant_id"], unique=False)


def downgrade() -> None:
    op.drop_index(op.f("ix_applications_applicant_id"), table_name="applications")
    op.drop_index(op.f("ix_applications_event_id"), table_name="applications")
    op.drop_table("applications")
