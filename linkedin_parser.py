"""Heuristic extraction of job records from LinkedIn postings and CSV exports.

Pasted postings carry no reliable markup, so ``parse_job_from_text`` walks the
lines once and assigns fields by position and by a few cheap patterns, the way
LinkedIn usually lays out the top card (title, company, location, employment
type, then the description). It is best effort: sparse or odd input degrades
to empty strings instead of raising.
"""
from __future__ import annotations

import re
from typing import Optional

import structlog

import schemas
from errors import ValidationError

logger = structlog.get_logger(__name__)

LINKEDIN_JOB_URL_REGEX = re.compile(r"linkedin\.com/jobs/view/(\d+)")
LINKEDIN_PROFILE_URL_REGEX = re.compile(r"linkedin\.com/in/([a-zA-Z0-9-]+)")

# Case-sensitive: "IN" and "OR" are states, "in" and "or" are words
US_STATE_REGEX = re.compile(
    r"\b(CA|NY|TX|FL|WA|IL|PA|OH|NC|GA|VA|MI|IN|TN|MO|MD|WI|MN|CO|AL|SC|LA|KY|OR|OK|CT"
    r"|AR|MS|KS|UT|NV|NM|WV|NE|ID|HI|AK|DE|MT|ND|SD|VT|NH|RI|WY|DC)\b"
)
KNOWN_PLACE_REGEX = re.compile(
    r"\b(United States|USA|Canada|Remote|New York|San Francisco|Los Angeles|Chicago|Boston"
    r"|Seattle|Austin|Denver|Miami|Atlanta|Dallas|Houston|Phoenix|Philadelphia|San Diego"
    r"|Portland|Nashville)\b",
    re.IGNORECASE,
)
EMPLOYMENT_TYPE_REGEX = re.compile(
    r"full.time|part.time|contract|freelance|internship|temporary|permanent",
    re.IGNORECASE,
)

DESCRIPTION_MAX_LENGTH = 500

# CSV header aliases -> ParsedJob field
CSV_HEADER_FIELDS = {
    "title": "title",
    "position": "title",
    "job title": "title",
    "company": "company",
    "company name": "company",
    "location": "location",
    "url": "job_url",
    "job url": "job_url",
    "link": "job_url",
    "description": "description",
    "employment type": "employment_type",
    "type": "employment_type",
}


def extract_job_id(url: str) -> Optional[str]:
    """Return the numeric job id of a ``linkedin.com/jobs/view/<id>`` URL."""
    match = LINKEDIN_JOB_URL_REGEX.search(url or "")
    return match.group(1) if match else None


def extract_profile_username(url: str) -> Optional[str]:
    """Return the vanity name of a ``linkedin.com/in/<name>`` URL."""
    match = LINKEDIN_PROFILE_URL_REGEX.search(url or "")
    return match.group(1) if match else None


def parse_job_url(job_url: str) -> Optional[schemas.ParsedJob]:
    """Accept a LinkedIn job URL without fetching it.

    LinkedIn does not allow scraping, so only the URL itself is carried over;
    every other field is left empty for the user to fill in. Returns None for
    URLs that are not LinkedIn job postings.
    """
    job_id = extract_job_id(job_url)
    if not job_id:
        logger.info("Rejected non-LinkedIn job URL", job_url=job_url)
        return None
    return schemas.ParsedJob(job_url=job_url)


def _mentions_linkedin_or_link(line: str) -> bool:
    return "linkedin" in line.lower() or "http" in line


def _clean_company(line: str) -> str:
    line = re.sub(r"^at\s+", "", line, flags=re.IGNORECASE)
    line = re.sub(r"\s+·.*$", "", line)
    return re.sub(r"\s*\|.*$", "", line)


def _looks_like_location(line: str) -> bool:
    return (
        "," in line
        or "remote" in line.lower()
        or US_STATE_REGEX.search(line) is not None
        or KNOWN_PLACE_REGEX.search(line) is not None
    )


def _description_start(lines: list[str]) -> int:
    first = -1
    for index, line in enumerate(lines):
        lowered = line.lower()
        if (
            len(line) > 50
            or "description" in lowered
            or "we are" in lowered
            or "seeking" in lowered
        ):
            first = index
            break
    return min(3, max(2, first))


def parse_job_from_text(text: str, job_url: Optional[str] = None) -> schemas.ParsedJob:
    """Extract title, company, location, employment type and description from pasted text."""
    lines = [line.strip() for line in (text or "").split("\n")]
    lines = [line for line in lines if line]

    title = ""
    company = ""
    location = ""
    employment_type = ""

    for line in lines:
        if (
            not title
            and len(line) > 2
            and "@" not in line
            and "·" not in line
            and not _mentions_linkedin_or_link(line)
        ):
            title = line
            continue

        if title and not company and len(line) > 1 and not _mentions_linkedin_or_link(line):
            company = _clean_company(line)
            continue

        if not location and _looks_like_location(line):
            location = line
            continue

        if not employment_type and EMPLOYMENT_TYPE_REGEX.search(line):
            employment_type = line
            continue

    if not title and lines:
        title = lines[0]

    if not company and len(lines) > 1:
        second_line = lines[1]
        if not _mentions_linkedin_or_link(second_line):
            company = _clean_company(second_line)

    description = "\n".join(lines[_description_start(lines):])[:DESCRIPTION_MAX_LENGTH]

    logger.debug(
        "Parsed job text",
        title=title,
        company=company,
        location=location,
        line_count=len(lines),
    )
    return schemas.ParsedJob(
        title=title,
        company=company,
        location=location,
        description=description,
        job_url=job_url or "",
        employment_type=employment_type,
    )


def parse_csv_data(csv_text: str) -> list[schemas.ParsedJob]:
    """Map CSV rows to job records by header name.

    Values are split on bare commas; quoted fields are not supported. Rows
    without both a title and a company are skipped.
    """
    lines = [line.strip() for line in (csv_text or "").split("\n")]
    lines = [line for line in lines if line]

    if len(lines) < 2:
        raise ValidationError("CSV must have at least a header row and one data row")

    headers = [header.strip().lower() for header in lines[0].split(",")]
    jobs: list[schemas.ParsedJob] = []

    for row_number, line in enumerate(lines[1:], start=2):
        values = [value.strip() for value in line.split(",")]
        fields: dict[str, str] = {}
        for index, header in enumerate(headers):
            field = CSV_HEADER_FIELDS.get(header)
            if field is None:
                continue
            fields[field] = values[index] if index < len(values) else ""

        if fields.get("title") and fields.get("company"):
            jobs.append(schemas.ParsedJob(**fields))
        else:
            logger.debug("Skipping CSV row without title or company", row=row_number)

    logger.info("Parsed CSV data", rows=len(lines) - 1, jobs=len(jobs))
    return jobs
