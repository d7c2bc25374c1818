import math
from datetime import timedelta

import structlog
from sqlalchemy import func, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

import models
import schemas
from errors import NotFoundError, StorageError, ValidationError

logger = structlog.get_logger(__name__)


def _commit(db: Session, action: str):
    """Commit, turning driver/ORM failures into an opaque StorageError."""
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Storage failure", action=action, exc_info=exc)
        raise StorageError(f"Failed to {action}") from exc


def _touch(record):
    """Advance updated_at, strictly later than its previous value."""
    now = models.utcnow()
    if record.updated_at is not None and now <= record.updated_at:
        now = record.updated_at + timedelta(microseconds=1)
    record.updated_at = now


def _like_pattern(query: str) -> str:
    escaped = query.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


# --- Job application CRUD ---
def create_application(db: Session, application: schemas.JobApplicationCreate):
    now = models.utcnow()
    data = application.model_dump()
    data["application_date"] = data.get("application_date") or now
    db_application = models.JobApplication(**data, created_at=now, updated_at=now)
    db.add(db_application)
    _commit(db, "create application")
    db.refresh(db_application)
    logger.info("Created application", application_id=db_application.id)
    return db_application


def get_application(db: Session, application_id: str):
    """Returns None for an unknown id; callers decide whether that is a 404."""
    return (
        db.query(models.JobApplication)
        .filter(models.JobApplication.id == application_id)
        .first()
    )


def get_all_applications(db: Session):
    return (
        db.query(models.JobApplication)
        .order_by(models.JobApplication.created_at.desc())
        .all()
    )


def update_application(
    db: Session, application_id: str, changes: schemas.JobApplicationUpdate
):
    db_application = get_application(db, application_id)
    if not db_application:
        raise NotFoundError("Application not found")

    for key, value in changes.model_dump(exclude_unset=True).items():
        setattr(db_application, key, value)
    _touch(db_application)
    db.add(db_application)
    _commit(db, "update application")
    db.refresh(db_application)
    return db_application


def delete_application(db: Session, application_id: str) -> bool:
    """Delete an application and, through the cascade, its interviews."""
    db_application = get_application(db, application_id)
    if not db_application:
        return False

    db.delete(db_application)
    _commit(db, "delete application")
    logger.info("Deleted application", application_id=application_id)
    return True


def get_applications_by_status(db: Session, status: models.ApplicationStatus):
    return (
        db.query(models.JobApplication)
        .filter(models.JobApplication.status == status)
        .order_by(models.JobApplication.created_at.desc())
        .all()
    )


def search_applications(db: Session, query: str):
    """Case-insensitive substring match on company, position or status."""
    lowered = query.lower()
    pattern = _like_pattern(query)
    matching_statuses = [s for s in models.ApplicationStatus if lowered in s.value]

    conditions = [
        models.JobApplication.company.ilike(pattern, escape="\\"),
        models.JobApplication.position.ilike(pattern, escape="\\"),
    ]
    if matching_statuses:
        conditions.append(models.JobApplication.status.in_(matching_statuses))

    return (
        db.query(models.JobApplication)
        .filter(or_(*conditions))
        .order_by(models.JobApplication.created_at.desc())
        .all()
    )


def get_applications_by_company_position(db: Session, company: str, position: str):
    return (
        db.query(models.JobApplication)
        .filter(
            func.lower(models.JobApplication.company) == company.strip().lower(),
            func.lower(models.JobApplication.position) == position.strip().lower(),
        )
        .order_by(models.JobApplication.created_at.desc())
        .all()
    )


def get_application_stats(db: Session) -> schemas.ApplicationStats:
    rows = (
        db.query(models.JobApplication.status, func.count())
        .group_by(models.JobApplication.status)
        .all()
    )
    by_status = {status: count for status, count in rows}
    total = sum(by_status.values())
    interviews = by_status.get(models.ApplicationStatus.interview, 0)
    offers = by_status.get(models.ApplicationStatus.offer, 0)
    rejected = by_status.get(models.ApplicationStatus.rejected, 0)
    responded = interviews + offers + rejected
    # Half-up rounding; round() would send 12.5 to 12
    response_rate = math.floor(responded / total * 100 + 0.5) if total > 0 else 0

    return schemas.ApplicationStats(
        total=total,
        interviews=interviews,
        offers=offers,
        rejected=rejected,
        response_rate=response_rate,
    )


def get_upcoming_deadlines(db: Session, days: int = 7):
    """Open applications whose next step falls within the next ``days`` days."""
    now = models.utcnow()
    return (
        db.query(models.JobApplication)
        .filter(
            models.JobApplication.next_step_date.isnot(None),
            models.JobApplication.next_step_date >= now,
            models.JobApplication.next_step_date <= now + timedelta(days=days),
            models.JobApplication.status.in_(models.OPEN_APPLICATION_STATUSES),
        )
        .order_by(models.JobApplication.next_step_date.asc())
        .all()
    )


def get_overdue_deadlines(db: Session):
    now = models.utcnow()
    return (
        db.query(models.JobApplication)
        .filter(
            models.JobApplication.next_step_date.isnot(None),
            models.JobApplication.next_step_date < now,
            models.JobApplication.status.in_(models.OPEN_APPLICATION_STATUSES),
        )
        .order_by(models.JobApplication.next_step_date.asc())
        .all()
    )


# --- Interview CRUD ---
def _require_application(db: Session, application_id: str):
    if get_application(db, application_id) is None:
        raise ValidationError(
            "Invalid interview data",
            errors=[
                {
                    "loc": ["applicationId"],
                    "msg": f"Application {application_id} does not exist",
                    "type": "not_found",
                }
            ],
        )


def create_interview(db: Session, interview: schemas.InterviewCreate):
    _require_application(db, interview.application_id)

    now = models.utcnow()
    db_interview = models.Interview(**interview.model_dump(), created_at=now, updated_at=now)
    db.add(db_interview)
    _commit(db, "create interview")
    db.refresh(db_interview)
    logger.info(
        "Created interview",
        interview_id=db_interview.id,
        application_id=db_interview.application_id,
    )
    return db_interview


def get_interview(db: Session, interview_id: str):
    return db.query(models.Interview).filter(models.Interview.id == interview_id).first()


def get_interviews_by_application(db: Session, application_id: str):
    return (
        db.query(models.Interview)
        .filter(models.Interview.application_id == application_id)
        .order_by(models.Interview.scheduled_date.asc())
        .all()
    )


def update_interview(db: Session, interview_id: str, changes: schemas.InterviewUpdate):
    db_interview = get_interview(db, interview_id)
    if not db_interview:
        raise NotFoundError("Interview not found")

    data = changes.model_dump(exclude_unset=True)
    if "application_id" in data:
        _require_application(db, data["application_id"])

    for key, value in data.items():
        setattr(db_interview, key, value)
    _touch(db_interview)
    db.add(db_interview)
    _commit(db, "update interview")
    db.refresh(db_interview)
    return db_interview


def delete_interview(db: Session, interview_id: str) -> bool:
    db_interview = get_interview(db, interview_id)
    if not db_interview:
        return False

    db.delete(db_interview)
    _commit(db, "delete interview")
    return True


def get_upcoming_interviews(db: Session):
    """Scheduled interviews from now on, soonest first. Evaluated per call."""
    return (
        db.query(models.Interview)
        .filter(
            models.Interview.scheduled_date >= models.utcnow(),
            models.Interview.status == models.InterviewStatus.scheduled,
        )
        .order_by(models.Interview.scheduled_date.asc())
        .all()
    )
