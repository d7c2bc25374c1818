"""create job_applications and interviews

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-17
"""
from alembic import op
import sqlalchemy as sa


revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None

APPLICATION_STATUSES = ("applied", "interview", "offer", "rejected")
INTERVIEW_TYPES = ("phone", "video", "onsite", "final")
INTERVIEW_STATUSES = ("scheduled", "completed", "cancelled", "rescheduled")


def upgrade():
    op.create_table(
        "job_applications",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("company", sa.String(255), nullable=False),
        sa.Column("position", sa.String(255), nullable=False),
        sa.Column("status", sa.Enum(*APPLICATION_STATUSES, name="application_status"), nullable=False),
        sa.Column("application_date", sa.DateTime(), nullable=False),
        sa.Column("salary", sa.Integer()),
        sa.Column("location", sa.String(255)),
        sa.Column("job_url", sa.String(1024)),
        sa.Column("notes", sa.Text()),
        sa.Column("contact_email", sa.String(255)),
        sa.Column("contact_name", sa.String(255)),
        sa.Column("next_step_date", sa.DateTime()),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_job_applications_status", "job_applications", ["status"])
    op.create_index("ix_job_applications_created_at", "job_applications", ["created_at"])

    op.create_table(
        "interviews",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column(
            "application_id",
            sa.String(36),
            sa.ForeignKey("job_applications.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("interview_type", sa.Enum(*INTERVIEW_TYPES, name="interview_type"), nullable=False),
        sa.Column("scheduled_date", sa.DateTime(), nullable=False),
        sa.Column("duration", sa.Integer()),
        sa.Column("interviewer_name", sa.String(255)),
        sa.Column("interviewer_email", sa.String(255)),
        sa.Column("location", sa.Text()),
        sa.Column("notes", sa.Text()),
        sa.Column("feedback", sa.Text()),
        sa.Column("status", sa.Enum(*INTERVIEW_STATUSES, name="interview_status"), nullable=False),
        sa.Column("round", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_interviews_application_id", "interviews", ["application_id"])
    op.create_index("ix_interviews_scheduled_date", "interviews", ["scheduled_date"])


def downgrade():
    op.drop_index("ix_interviews_scheduled_date", table_name="interviews")
    op.drop_index("ix_interviews_application_id", table_name="interviews")
    op.drop_table("interviews")
    op.drop_index("ix_job_applications_created_at", table_name="job_applications")
    op.drop_index("ix_job_applications_status", table_name="job_applications")
    op.drop_table("job_applications")
