from datetime import datetime, timezone
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from models import ApplicationStatus, InterviewStatus, InterviewType


class CamelModel(BaseModel):
    """Base for wire models: camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        extra="ignore",
    )


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str):
        value = value.strip()
        return value or None
    return value


def _required_text(value: Optional[str]) -> str:
    if value is None:
        raise ValueError("field cannot be null")
    value = value.strip()
    if not value:
        raise ValueError("field cannot be empty")
    return value


def _not_null(value: Any) -> Any:
    if value is None:
        raise ValueError("field cannot be null")
    return value


# --- Job application schemas ---
_APPLICATION_OPTIONAL_TEXT = (
    "location",
    "job_url",
    "notes",
    "contact_email",
    "contact_name",
)


class JobApplicationCreate(CamelModel):
    company: str = Field(max_length=255)
    position: str = Field(max_length=255)
    status: ApplicationStatus = ApplicationStatus.applied
    application_date: Optional[datetime] = None
    salary: Optional[int] = None
    location: Optional[str] = Field(default=None, max_length=255)
    job_url: Optional[str] = Field(default=None, max_length=1024)
    notes: Optional[str] = None
    contact_email: Optional[str] = Field(default=None, max_length=255)
    contact_name: Optional[str] = Field(default=None, max_length=255)
    next_step_date: Optional[datetime] = None

    @field_validator("company", "position")
    @classmethod
    def strip_required(cls, v):
        return _required_text(v)

    @field_validator(*_APPLICATION_OPTIONAL_TEXT, mode="before")
    @classmethod
    def blank_optional(cls, v):
        return _blank_to_none(v)

    @field_validator("application_date", "next_step_date")
    @classmethod
    def normalize_dates(cls, v):
        return to_naive_utc(v)


class JobApplicationUpdate(CamelModel):
    """Partial update: only fields present in the payload are applied.

    ``null`` clears nullable fields; it is rejected for company, position,
    status and applicationDate.
    """

    company: Optional[str] = Field(default=None, max_length=255)
    position: Optional[str] = Field(default=None, max_length=255)
    status: Optional[ApplicationStatus] = None
    application_date: Optional[datetime] = None
    salary: Optional[int] = None
    location: Optional[str] = Field(default=None, max_length=255)
    job_url: Optional[str] = Field(default=None, max_length=1024)
    notes: Optional[str] = None
    contact_email: Optional[str] = Field(default=None, max_length=255)
    contact_name: Optional[str] = Field(default=None, max_length=255)
    next_step_date: Optional[datetime] = None

    @field_validator("company", "position")
    @classmethod
    def strip_required(cls, v):
        return _required_text(v)

    @field_validator("status")
    @classmethod
    def reject_null_status(cls, v):
        return _not_null(v)

    @field_validator(*_APPLICATION_OPTIONAL_TEXT, mode="before")
    @classmethod
    def blank_optional(cls, v):
        return _blank_to_none(v)

    @field_validator("application_date", "next_step_date")
    @classmethod
    def normalize_dates(cls, v, info):
        if info.field_name == "application_date":
            _not_null(v)
        return to_naive_utc(v)


class JobApplication(CamelModel):
    id: str
    company: str
    position: str
    status: ApplicationStatus
    application_date: datetime
    salary: Optional[int] = None
    location: Optional[str] = None
    job_url: Optional[str] = None
    notes: Optional[str] = None
    contact_email: Optional[str] = None
    contact_name: Optional[str] = None
    next_step_date: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class ApplicationStats(CamelModel):
    total: int
    interviews: int
    offers: int
    rejected: int
    response_rate: int


# --- Interview schemas ---
_INTERVIEW_OPTIONAL_TEXT = (
    "interviewer_name",
    "interviewer_email",
    "location",
    "notes",
    "feedback",
)


class InterviewCreate(CamelModel):
    application_id: str
    interview_type: InterviewType
    scheduled_date: datetime
    duration: Optional[int] = Field(default=None, ge=15, le=480)
    interviewer_name: Optional[str] = Field(default=None, max_length=255)
    interviewer_email: Optional[str] = Field(default=None, max_length=255)
    location: Optional[str] = None
    notes: Optional[str] = None
    feedback: Optional[str] = None
    status: InterviewStatus = InterviewStatus.scheduled
    round: int = Field(default=1, ge=1)

    @field_validator("application_id")
    @classmethod
    def strip_application_id(cls, v):
        return _required_text(v)

    @field_validator(*_INTERVIEW_OPTIONAL_TEXT, mode="before")
    @classmethod
    def blank_optional(cls, v):
        return _blank_to_none(v)

    @field_validator("scheduled_date")
    @classmethod
    def normalize_dates(cls, v):
        return to_naive_utc(v)


class InterviewUpdate(CamelModel):
    application_id: Optional[str] = None
    interview_type: Optional[InterviewType] = None
    scheduled_date: Optional[datetime] = None
    duration: Optional[int] = Field(default=None, ge=15, le=480)
    interviewer_name: Optional[str] = Field(default=None, max_length=255)
    interviewer_email: Optional[str] = Field(default=None, max_length=255)
    location: Optional[str] = None
    notes: Optional[str] = None
    feedback: Optional[str] = None
    status: Optional[InterviewStatus] = None
    round: Optional[int] = Field(default=None, ge=1)

    @field_validator("application_id")
    @classmethod
    def strip_application_id(cls, v):
        return _required_text(v)

    @field_validator("interview_type", "status", "round")
    @classmethod
    def reject_null(cls, v):
        return _not_null(v)

    @field_validator(*_INTERVIEW_OPTIONAL_TEXT, mode="before")
    @classmethod
    def blank_optional(cls, v):
        return _blank_to_none(v)

    @field_validator("scheduled_date")
    @classmethod
    def normalize_dates(cls, v):
        return to_naive_utc(_not_null(v))


class Interview(CamelModel):
    id: str
    application_id: str
    interview_type: InterviewType
    scheduled_date: datetime
    duration: Optional[int] = None
    interviewer_name: Optional[str] = None
    interviewer_email: Optional[str] = None
    location: Optional[str] = None
    notes: Optional[str] = None
    feedback: Optional[str] = None
    status: InterviewStatus
    round: int
    created_at: datetime
    updated_at: datetime


# --- LinkedIn import schemas ---
class ParsedJob(CamelModel):
    """Loosely-typed job record produced by the parsers; never persisted."""

    title: str = ""
    company: str = ""
    location: str = ""
    description: str = ""
    job_url: str = ""
    employment_type: str = ""


class ParseJobRequest(CamelModel):
    job_url: Optional[str] = None
    job_text: Optional[str] = None


class BulkImportRequest(CamelModel):
    csv_data: Optional[str] = None


class BulkImportResult(CamelModel):
    message: str
    applications: List[JobApplication]
    total_processed: int


class CreateFromParsedJobRequest(CamelModel):
    job_data: ParsedJob = Field(default_factory=ParsedJob)
    application_data: dict[str, Any] = Field(default_factory=dict)


class ProfileExperience(CamelModel):
    title: str
    company: str
    duration: str = ""
    description: Optional[str] = None


class LinkedInProfile(CamelModel):
    name: str
    headline: Optional[str] = None
    location: Optional[str] = None
    email: Optional[str] = None
    profile_url: Optional[str] = None
    summary: Optional[str] = None
    experience: List[ProfileExperience] = Field(default_factory=list)
    skills: List[str] = Field(default_factory=list)


class SuggestionRequest(CamelModel):
    profile: LinkedInProfile
    job_data: ParsedJob


class ApplicationSuggestions(CamelModel):
    notes: str
    match_score: int
    suggested_salary: Optional[int] = None


class DeleteResult(CamelModel):
    message: str
    deleted: bool
