from datetime import timedelta

import pytest
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.orm import Session

import crud
import models
import schemas
from errors import NotFoundError, ValidationError


def _interview(application_id: str, **fields) -> schemas.InterviewCreate:
    data = {
        "application_id": application_id,
        "interview_type": "phone",
        "scheduled_date": models.utcnow() + timedelta(days=1),
    }
    data.update(fields)
    return schemas.InterviewCreate(**data)


def test_create_interview_defaults(db_session: Session, make_application):
    application = make_application()

    interview = crud.create_interview(db_session, _interview(application.id))

    assert interview.id
    assert interview.status == models.InterviewStatus.scheduled
    assert interview.round == 1
    assert interview.created_at == interview.updated_at


def test_create_interview_requires_existing_application(db_session: Session):
    with pytest.raises(ValidationError) as exc_info:
        crud.create_interview(db_session, _interview("no-such-application"))

    assert exc_info.value.errors[0]["loc"] == ["applicationId"]
    assert db_session.query(models.Interview).count() == 0


@pytest.mark.parametrize("duration", [10, 481])
def test_interview_duration_bounds(duration):
    with pytest.raises(PydanticValidationError):
        _interview("app-id", duration=duration)


@pytest.mark.parametrize("field, value", [("round", 0), ("interview_type", "coffee"), ("status", "maybe")])
def test_interview_rejects_invalid_values(field, value):
    with pytest.raises(PydanticValidationError):
        _interview("app-id", **{field: value})


def test_interviews_by_application_ordered_by_date(db_session: Session, make_application):
    application = make_application()
    other = make_application(company="Other")
    now = models.utcnow()
    final = crud.create_interview(
        db_session, _interview(application.id, interview_type="final", scheduled_date=now + timedelta(days=9), round=3)
    )
    screen = crud.create_interview(db_session, _interview(application.id, scheduled_date=now + timedelta(days=1)))
    crud.create_interview(db_session, _interview(other.id))

    interviews = crud.get_interviews_by_application(db_session, application.id)

    assert [i.id for i in interviews] == [screen.id, final.id]


def test_update_interview_records_feedback(db_session: Session, make_application):
    application = make_application()
    interview = crud.create_interview(db_session, _interview(application.id, duration=45))
    previous_updated_at = interview.updated_at

    updated = crud.update_interview(
        db_session,
        interview.id,
        schemas.InterviewUpdate(status="completed", feedback="Went well"),
    )

    assert updated.status == models.InterviewStatus.completed
    assert updated.feedback == "Went well"
    assert updated.duration == 45
    assert updated.updated_at > previous_updated_at


def test_update_interview_unknown_id(db_session: Session):
    with pytest.raises(NotFoundError):
        crud.update_interview(db_session, "missing", schemas.InterviewUpdate(notes="x"))


def test_update_interview_rejects_unknown_application(db_session: Session, make_application):
    application = make_application()
    interview = crud.create_interview(db_session, _interview(application.id))

    with pytest.raises(ValidationError):
        crud.update_interview(db_session, interview.id, schemas.InterviewUpdate(application_id="missing"))


def test_delete_interview(db_session: Session, make_application):
    application = make_application()
    interview = crud.create_interview(db_session, _interview(application.id))

    assert crud.delete_interview(db_session, interview.id) is True
    assert crud.get_interview(db_session, interview.id) is None
    assert crud.delete_interview(db_session, interview.id) is False
    # the parent application is untouched
    assert crud.get_application(db_session, application.id) is not None


def test_upcoming_interviews_filters_past_and_inactive(db_session: Session, make_application):
    application = make_application()
    now = models.utcnow()
    later = crud.create_interview(db_session, _interview(application.id, scheduled_date=now + timedelta(days=5)))
    sooner = crud.create_interview(db_session, _interview(application.id, scheduled_date=now + timedelta(hours=2)))
    crud.create_interview(db_session, _interview(application.id, scheduled_date=now - timedelta(days=1)))
    crud.create_interview(
        db_session,
        _interview(application.id, scheduled_date=now + timedelta(days=2), status="cancelled"),
    )

    upcoming = crud.get_upcoming_interviews(db_session)

    assert [i.id for i in upcoming] == [sooner.id, later.id]
