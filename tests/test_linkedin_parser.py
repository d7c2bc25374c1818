import pytest

from errors import ValidationError
from linkedin_parser import (
    extract_job_id,
    extract_profile_username,
    parse_csv_data,
    parse_job_from_text,
    parse_job_url,
)

JOB_URL = "https://www.linkedin.com/jobs/view/3791234567/?refId=abc"


# --- Pasted text ---

def test_parse_typical_posting():
    text = (
        "Senior Frontend Developer\n"
        "Google\n"
        "San Francisco, CA\n"
        "\n"
        "We are looking for a senior frontend developer with 5 years..."
    )

    job = parse_job_from_text(text)

    assert job.title == "Senior Frontend Developer"
    assert job.company == "Google"
    assert job.location == "San Francisco, CA"
    assert job.description.startswith("We are looking")
    assert job.job_url == ""
    assert job.employment_type == ""


@pytest.mark.parametrize("text", ["", "   \n\n  \t\n"])
def test_parse_empty_text_yields_empty_fields(text):
    job = parse_job_from_text(text)

    assert job.model_dump() == {
        "title": "",
        "company": "",
        "location": "",
        "description": "",
        "job_url": "",
        "employment_type": "",
    }


def test_company_prefix_and_suffix_are_stripped():
    text = "Data Engineer\nat Stripe · 3 days ago\nRemote\nFull-time\nAbout the role\nWe are seeking a builder"

    job = parse_job_from_text(text)

    assert job.title == "Data Engineer"
    assert job.company == "Stripe"
    assert job.location == "Remote"
    assert job.employment_type == "Full-time"
    # first descriptive line is index 5, start is capped at 3
    assert job.description == "Full-time\nAbout the role\nWe are seeking a builder"


def test_linkedin_chrome_lines_are_skipped_and_url_hint_kept():
    text = (
        "LinkedIn\n"
        "https://www.linkedin.com/jobs/view/123\n"
        "Product Manager\n"
        "Acme Corp | Series B\n"
        "New York, NY"
    )

    job = parse_job_from_text(text, JOB_URL)

    assert job.title == "Product Manager"
    assert job.company == "Acme Corp"
    assert job.location == "New York, NY"
    assert job.job_url == JOB_URL
    # no descriptive line: description starts at line 2
    assert job.description == "Product Manager\nAcme Corp | Series B\nNew York, NY"


def test_first_location_wins():
    job = parse_job_from_text("Engineer\nAcme\nAustin, TX\nBoston, MA")

    assert job.location == "Austin, TX"


def test_state_codes_are_case_sensitive():
    job = parse_job_from_text("Engineer\nAcme\nfind us in the office\nOnsite in WA")

    assert job.location == "Onsite in WA"


def test_fallbacks_when_no_line_qualifies_as_title():
    job = parse_job_from_text("QA\n@hiring · now")

    assert job.title == "QA"
    assert job.company == "@hiring"


def test_fallback_company_skips_links():
    job = parse_job_from_text("Backend Engineer\nhttps://example.com/apply")

    assert job.title == "Backend Engineer"
    assert job.company == ""


def test_description_is_truncated():
    job = parse_job_from_text("Title\nCompany\n" + "x" * 600)

    assert job.description == "x" * 500


# --- URLs ---

def test_parse_job_url_keeps_only_the_url():
    job = parse_job_url(JOB_URL)

    assert job is not None
    assert job.job_url == JOB_URL
    assert job.title == job.company == job.location == job.description == ""


def test_parse_job_url_rejects_other_sites():
    assert parse_job_url("https://example.com/jobs/1") is None


def test_url_helpers():
    assert extract_job_id(JOB_URL) == "3791234567"
    assert extract_job_id("https://www.linkedin.com/feed/") is None
    assert extract_profile_username("https://www.linkedin.com/in/jane-doe-42/") == "jane-doe-42"
    assert extract_profile_username("https://example.com/in/") is None


# --- CSV ---

def test_parse_csv_drops_rows_without_title_or_company():
    csv_text = "title,company,location\nBackend Engineer,Microsoft,Seattle WA\n,OnlyCompany,Nowhere"

    jobs = parse_csv_data(csv_text)

    assert len(jobs) == 1
    assert (jobs[0].title, jobs[0].company, jobs[0].location) == ("Backend Engineer", "Microsoft", "Seattle WA")


@pytest.mark.parametrize("csv_text", ["", "title,company,location", "title,company\n\n   \n"])
def test_parse_csv_requires_header_and_data(csv_text):
    with pytest.raises(ValidationError):
        parse_csv_data(csv_text)


def test_parse_csv_header_aliases():
    csv_text = (
        " Job Title , Company Name ,Link,Type,Description,Notes\n"
        "SRE,Netflix,https://jobs.example/1,Contract,Keep things up,ignored"
    )

    [job] = parse_csv_data(csv_text)

    assert job.title == "SRE"
    assert job.company == "Netflix"
    assert job.job_url == "https://jobs.example/1"
    assert job.employment_type == "Contract"
    assert job.description == "Keep things up"


def test_parse_csv_short_rows_fill_missing_columns():
    [job] = parse_csv_data("position,company,location\r\nDeveloper,Acme\r\n")

    assert job.title == "Developer"
    assert job.location == ""
