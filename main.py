from typing import List, Optional

from fastapi import (
    FastAPI,
    Depends,
    Query,
    Request,
    Response,
    status,
)
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session
import structlog

import models
import schemas
import crud
import logic
import linkedin_parser
from database import create_db_and_tables, get_db
from errors import NotFoundError, TrackerError, ValidationError, simplify_errors
from settings import get_settings, Settings
from request_id_middleware import RequestIdMiddleware
from observability import init_observability


# Initialise observability before creating app
init_observability()
logger = structlog.get_logger(__name__)

# Create DB tables on startup
create_db_and_tables()

app = FastAPI(
    title="Job Tracker",
    description="Track job applications and interviews, with LinkedIn import",
    version="0.1.0",
)

# --- CORS Middleware ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins,
    # Browser extension pages
    allow_origin_regex=r"chrome-extension://.*",
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(RequestIdMiddleware)


# --- Error handlers --- #
@app.exception_handler(TrackerError)
async def tracker_error_handler(request: Request, exc: TrackerError):
    if exc.status_code >= 500:
        logger.error("Request failed", error=exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.info("Rejected invalid request", path=request.url.path)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"message": "Invalid request data", "errors": simplify_errors(exc.errors())},
    )


@app.exception_handler(Exception)
async def global_handler(request: Request, exc: Exception):
    logger.error("Unhandled error", exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"message": "An unexpected error occurred"},
    )


@app.get("/health", include_in_schema=False)
def health():
    return {"status": "ok"}


# --- Job Application Endpoints ---
@app.get("/api/applications", response_model=List[schemas.JobApplication], tags=["Applications"])
def get_applications_endpoint(db: Session = Depends(get_db)):
    return crud.get_all_applications(db)


@app.get(
    "/api/applications/status/{application_status}",
    response_model=List[schemas.JobApplication],
    tags=["Applications"],
)
def get_applications_by_status_endpoint(
    application_status: models.ApplicationStatus, db: Session = Depends(get_db)
):
    return crud.get_applications_by_status(db, application_status)


@app.get(
    "/api/applications/search/{query}",
    response_model=List[schemas.JobApplication],
    tags=["Applications"],
)
def search_applications_endpoint(query: str, db: Session = Depends(get_db)):
    return crud.search_applications(db, query)


@app.get("/api/applications/{application_id}", response_model=schemas.JobApplication, tags=["Applications"])
def get_application_endpoint(application_id: str, db: Session = Depends(get_db)):
    application = crud.get_application(db, application_id)
    if not application:
        raise NotFoundError("Application not found")
    return application


@app.post(
    "/api/applications",
    response_model=schemas.JobApplication,
    status_code=status.HTTP_201_CREATED,
    tags=["Applications"],
)
def create_application_endpoint(
    application: schemas.JobApplicationCreate, db: Session = Depends(get_db)
):
    return crud.create_application(db, application)


@app.put("/api/applications/{application_id}", response_model=schemas.JobApplication, tags=["Applications"])
def update_application_endpoint(
    application_id: str,
    changes: schemas.JobApplicationUpdate,
    db: Session = Depends(get_db),
):
    return crud.update_application(db, application_id, changes)


@app.delete("/api/applications/{application_id}", response_model=schemas.DeleteResult, tags=["Applications"])
def delete_application_endpoint(application_id: str, db: Session = Depends(get_db)):
    if not crud.delete_application(db, application_id):
        raise NotFoundError("Application not found")
    return schemas.DeleteResult(message="Application deleted successfully", deleted=True)


@app.get(
    "/api/applications/{application_id}/interviews",
    response_model=List[schemas.Interview],
    tags=["Interviews"],
)
def get_application_interviews_endpoint(application_id: str, db: Session = Depends(get_db)):
    return crud.get_interviews_by_application(db, application_id)


@app.get("/api/stats", response_model=schemas.ApplicationStats, tags=["Applications"])
def get_stats_endpoint(db: Session = Depends(get_db)):
    return crud.get_application_stats(db)


# --- Deadline Endpoints ---
@app.get("/api/deadlines/upcoming", response_model=List[schemas.JobApplication], tags=["Deadlines"])
def get_upcoming_deadlines_endpoint(
    days: Optional[int] = Query(default=None, ge=1, le=365),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    return crud.get_upcoming_deadlines(db, days or settings.upcoming_deadline_days)


@app.get("/api/deadlines/overdue", response_model=List[schemas.JobApplication], tags=["Deadlines"])
def get_overdue_deadlines_endpoint(db: Session = Depends(get_db)):
    return crud.get_overdue_deadlines(db)


# --- Interview Endpoints ---
@app.post(
    "/api/interviews",
    response_model=schemas.Interview,
    status_code=status.HTTP_201_CREATED,
    tags=["Interviews"],
)
def create_interview_endpoint(interview: schemas.InterviewCreate, db: Session = Depends(get_db)):
    return crud.create_interview(db, interview)


@app.get("/api/interviews/upcoming", response_model=List[schemas.Interview], tags=["Interviews"])
def get_upcoming_interviews_endpoint(db: Session = Depends(get_db)):
    return crud.get_upcoming_interviews(db)


@app.get("/api/interviews/{interview_id}", response_model=schemas.Interview, tags=["Interviews"])
def get_interview_endpoint(interview_id: str, db: Session = Depends(get_db)):
    interview = crud.get_interview(db, interview_id)
    if not interview:
        raise NotFoundError("Interview not found")
    return interview


@app.put("/api/interviews/{interview_id}", response_model=schemas.Interview, tags=["Interviews"])
def update_interview_endpoint(
    interview_id: str,
    changes: schemas.InterviewUpdate,
    db: Session = Depends(get_db),
):
    return crud.update_interview(db, interview_id, changes)


@app.delete("/api/interviews/{interview_id}", response_model=schemas.DeleteResult, tags=["Interviews"])
def delete_interview_endpoint(interview_id: str, db: Session = Depends(get_db)):
    if not crud.delete_interview(db, interview_id):
        raise NotFoundError("Interview not found")
    return schemas.DeleteResult(message="Interview deleted successfully", deleted=True)


# --- LinkedIn Import Endpoints ---
@app.post("/api/linkedin/parse-job", response_model=schemas.ParsedJob, tags=["LinkedIn"])
def parse_job_endpoint(request: schemas.ParseJobRequest):
    """Parse pasted posting text; a bare URL only yields the URL itself."""
    if not request.job_url and not request.job_text:
        raise ValidationError("Either jobUrl or jobText is required")

    if request.job_text:
        return linkedin_parser.parse_job_from_text(request.job_text, request.job_url)

    job = linkedin_parser.parse_job_url(request.job_url)
    if job is None:
        raise ValidationError("Failed to parse LinkedIn job URL")
    return job


@app.post("/api/linkedin/bulk-import", response_model=schemas.BulkImportResult, tags=["LinkedIn"])
def bulk_import_endpoint(request: schemas.BulkImportRequest, db: Session = Depends(get_db)):
    if not request.csv_data:
        raise ValidationError("CSV data is required")
    return logic.bulk_import(db, request.csv_data)


@app.post(
    "/api/linkedin/create-application",
    response_model=schemas.JobApplication,
    status_code=status.HTTP_201_CREATED,
    tags=["LinkedIn"],
)
def create_application_from_job_endpoint(
    request: schemas.CreateFromParsedJobRequest, db: Session = Depends(get_db)
):
    return logic.create_from_parsed_job(db, request.job_data, request.application_data)


@app.post("/api/linkedin/suggestions", response_model=schemas.ApplicationSuggestions, tags=["LinkedIn"])
def application_suggestions_endpoint(request: schemas.SuggestionRequest):
    return logic.generate_application_suggestions(request.profile, request.job_data)


# --- Browser Extension Endpoint ---
@app.post(
    "/api/extension/applications",
    response_model=schemas.JobApplication,
    status_code=status.HTTP_201_CREATED,
    tags=["Extension"],
)
def capture_application_endpoint(
    application: schemas.JobApplicationCreate,
    response: Response,
    db: Session = Depends(get_db),
):
    """Create an application detected on LinkedIn; 200 with the existing record if already tracked."""
    record, created = logic.capture_application(db, application)
    if not created:
        response.status_code = status.HTTP_200_OK
    return record


# --- Main execution --- (for running with uvicorn)
if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
