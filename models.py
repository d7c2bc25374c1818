import enum
import uuid
from datetime import datetime, timezone

from sqlalchemy.orm import relationship
from sqlalchemy import Column, Integer, String, ForeignKey, Text, DateTime, Enum as SAEnum
from database import Base


def utcnow() -> datetime:
    """Current time as naive UTC, the form every DateTime column stores."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _new_id() -> str:
    return str(uuid.uuid4())


class ApplicationStatus(str, enum.Enum):
    applied = "applied"
    interview = "interview"
    offer = "offer"
    rejected = "rejected"


# Applications still waiting on a next step; offers and rejections are closed
OPEN_APPLICATION_STATUSES = (ApplicationStatus.applied, ApplicationStatus.interview)


class InterviewType(str, enum.Enum):
    phone = "phone"
    video = "video"
    onsite = "onsite"
    final = "final"


class InterviewStatus(str, enum.Enum):
    scheduled = "scheduled"
    completed = "completed"
    cancelled = "cancelled"
    rescheduled = "rescheduled"


class JobApplication(Base):
    __tablename__ = "job_applications"

    id = Column(String(36), primary_key=True, default=_new_id)
    company = Column(String(255), nullable=False)
    position = Column(String(255), nullable=False)
    status = Column(
        SAEnum(ApplicationStatus, name="application_status"),
        default=ApplicationStatus.applied,
        nullable=False,
        index=True,
    )
    application_date = Column(DateTime, default=utcnow, nullable=False)
    salary = Column(Integer, nullable=True)
    location = Column(String(255), nullable=True)
    job_url = Column(String(1024), nullable=True)
    notes = Column(Text, nullable=True)
    contact_email = Column(String(255), nullable=True)
    contact_name = Column(String(255), nullable=True)
    next_step_date = Column(DateTime, nullable=True)

    created_at = Column(DateTime, default=utcnow, nullable=False, index=True)
    updated_at = Column(DateTime, default=utcnow, nullable=False)

    interviews = relationship(
        "Interview",
        back_populates="application",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="Interview.scheduled_date",
    )


class Interview(Base):
    __tablename__ = "interviews"

    id = Column(String(36), primary_key=True, default=_new_id)
    application_id = Column(
        String(36),
        ForeignKey("job_applications.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    interview_type = Column(SAEnum(InterviewType, name="interview_type"), nullable=False)
    scheduled_date = Column(DateTime, nullable=False, index=True)
    duration = Column(Integer, nullable=True)  # minutes
    interviewer_name = Column(String(255), nullable=True)
    interviewer_email = Column(String(255), nullable=True)
    location = Column(Text, nullable=True)  # address for onsite, meeting link for video
    notes = Column(Text, nullable=True)
    feedback = Column(Text, nullable=True)
    status = Column(
        SAEnum(InterviewStatus, name="interview_status"),
        default=InterviewStatus.scheduled,
        nullable=False,
    )
    round = Column(Integer, default=1, nullable=False)

    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, nullable=False)

    application = relationship("JobApplication", back_populates="interviews")
