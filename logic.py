from typing import Any, Optional

import structlog
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.orm import Session

import crud
import models
import schemas
from errors import StorageError, ValidationError
from linkedin_parser import extract_job_id, parse_csv_data

# Set up logging
logger = structlog.get_logger(__name__)

UNKNOWN_COMPANY = "Unknown Company"
UNKNOWN_POSITION = "Unknown Position"
BULK_IMPORT_DEFAULT_NOTES = "Imported from LinkedIn"
NOTES_DESCRIPTION_LENGTH = 200


def _validate(schema_cls, data: dict[str, Any], message: str = "Invalid application data"):
    try:
        return schema_cls.model_validate(data)
    except PydanticValidationError as exc:
        raise ValidationError.from_pydantic(exc, message) from exc


def _application_payload(job: schemas.ParsedJob, default_notes: Optional[str]) -> dict[str, Any]:
    """Build a create-application payload from a parsed job record."""
    payload: dict[str, Any] = {
        "company": job.company or UNKNOWN_COMPANY,
        "position": job.title or UNKNOWN_POSITION,
        "status": models.ApplicationStatus.applied,
        "application_date": models.utcnow(),
    }
    if job.location:
        payload["location"] = job.location
    if job.job_url:
        payload["job_url"] = job.job_url

    if job.description:
        payload["notes"] = f"LinkedIn Import: {job.description[:NOTES_DESCRIPTION_LENGTH]}..."
    elif default_notes:
        payload["notes"] = default_notes
    return payload


# ---------------------------------------------------------------------------
def bulk_import(db: Session, csv_text: str) -> schemas.BulkImportResult:
    """
    Create one application per usable CSV row.

    Rows are validated and saved independently: a row that fails validation
    or storage is logged and skipped, the rest of the batch still goes in.
    ``total_processed`` counts the rows the parser produced, so the number of
    failures is ``total_processed - len(applications)``.

    Raises
    ------
    ValidationError  • if the CSV has no header or no data rows
    """
    jobs = parse_csv_data(csv_text)
    created = []

    for index, job in enumerate(jobs):
        try:
            application = _validate(
                schemas.JobApplicationCreate,
                _application_payload(job, BULK_IMPORT_DEFAULT_NOTES),
            )
            created.append(crud.create_application(db, application))
        except (ValidationError, StorageError) as exc:
            logger.warning(
                "Skipping imported job",
                index=index,
                title=job.title,
                company=job.company,
                error=exc.message,
            )

    logger.info("Bulk import finished", total_processed=len(jobs), created=len(created))
    return schemas.BulkImportResult(
        message=f"Successfully imported {len(created)} applications",
        applications=[schemas.JobApplication.model_validate(a) for a in created],
        total_processed=len(jobs),
    )


def create_from_parsed_job(
    db: Session,
    job: schemas.ParsedJob,
    overrides: Optional[dict[str, Any]] = None,
):
    """Persist a user-confirmed parsed job; all-or-nothing.

    ``overrides`` uses the same field names as a partial update (camelCase or
    snake_case) and is applied on top of the synthesized payload.
    """
    if not job.title.strip() or not job.company.strip():
        raise ValidationError("Job title and company are required")

    payload = _application_payload(job, default_notes=None)
    if overrides:
        changes = _validate(schemas.JobApplicationUpdate, overrides)
        payload.update(changes.model_dump(exclude_unset=True))

    application = _validate(schemas.JobApplicationCreate, payload)
    return crud.create_application(db, application)


def _same_posting(existing_url: Optional[str], new_url: Optional[str]) -> bool:
    if not existing_url or not new_url:
        return True
    existing_id, new_id = extract_job_id(existing_url), extract_job_id(new_url)
    if existing_id and new_id:
        return existing_id == new_id
    return existing_url == new_url


def capture_application(db: Session, application: schemas.JobApplicationCreate):
    """Record an application detected by the browser extension.

    Returns ``(record, created)``. A posting already tracked under the same
    company and position is returned as-is instead of being stored twice.
    """
    candidates = crud.get_applications_by_company_position(
        db, application.company, application.position
    )
    for existing in candidates:
        if _same_posting(existing.job_url, application.job_url):
            logger.info(
                "Duplicate capture ignored",
                application_id=existing.id,
                company=application.company,
                position=application.position,
            )
            return existing, False

    return crud.create_application(db, application), True


def generate_application_suggestions(
    profile: schemas.LinkedInProfile, job: schemas.ParsedJob
) -> schemas.ApplicationSuggestions:
    """Score how well a profile fits a job from skill and title overlap."""
    match_score = 0
    notes = ""

    if profile.skills and job.description:
        description = job.description.lower()
        matching_skills = [s for s in profile.skills if s.strip() and s.lower() in description]
        if matching_skills:
            match_score += len(matching_skills) * 10
            notes += f"Matching skills: {', '.join(matching_skills)}. "

    if profile.experience and job.title:
        title = job.title.lower()
        relevant = [
            exp
            for exp in profile.experience
            if exp.title.strip() and (exp.title.lower() in title or title in exp.title.lower())
        ]
        if relevant:
            match_score += 20
            notes += f"Relevant experience: {relevant[0].title} at {relevant[0].company}. "

    if not notes:
        notes = "Consider highlighting relevant experience and skills when applying."

    return schemas.ApplicationSuggestions(
        notes=notes.strip(),
        match_score=min(match_score, 100),
        suggested_salary=None,
    )
