"""Pydantic models for job postings."""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import Field

from jobportal.models.base import CamelModel


class JobStatus(str, Enum):
    """Status of a job posting."""
    ACTIVE = "active"
    PAUSED = "paused"
    CLOSED = "closed"
    DRAFT = "draft"


class JobType(str, Enum):
    FULL_TIME = "full-time"
    PART_TIME = "part-time"
    CONTRACT = "contract"
    INTERNSHIP = "internship"
    FREELANCE = "freelance"


class JobLevel(str, Enum):
    """Seniority level a job is advertised at."""
    ENTRY = "entry"
    JUNIOR = "junior"
    MID = "mid"
    SENIOR = "senior"
    LEAD = "lead"
    EXECUTIVE = "executive"


class RemoteType(str, Enum):
    REMOTE = "remote"
    HYBRID = "hybrid"
    ON_SITE = "on-site"


class EducationLevel(str, Enum):
    HIGH_SCHOOL = "high-school"
    BACHELOR = "bachelor"
    MASTER = "master"
    PHD = "phd"
    ANY = "any"


class SalaryPeriod(str, Enum):
    HOURLY = "hourly"
    MONTHLY = "monthly"
    YEARLY = "yearly"


class ExperienceUnit(str, Enum):
    MONTHS = "months"
    YEARS = "years"


class QuestionType(str, Enum):
    TEXT = "text"
    TEXTAREA = "textarea"
    FILE = "file"
    MULTIPLE_CHOICE = "multiple-choice"


class JobLocation(CamelModel):
    """Where the job is based.

    Attributes:
        city: City name.
        state: State or region.
        country: Country name.
        remote: True if the job can be done fully remotely.
        remote_type: Working arrangement (remote, hybrid, on-site).
    """
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    remote: bool = False
    remote_type: RemoteType = RemoteType.ON_SITE


class ExperienceRange(CamelModel):
    min: Optional[float] = Field(default=None, ge=0)
    max: Optional[float] = Field(default=None, ge=0)
    unit: ExperienceUnit = ExperienceUnit.YEARS


class EducationRequirement(CamelModel):
    level: Optional[EducationLevel] = None
    field: List[str] = []


class JobRequirements(CamelModel):
    """Candidate requirements for a job.

    Attributes:
        skills: Required skill names.
        experience: Required experience range.
        education: Required education level and fields of study.
        certifications: Required certifications.
    """
    skills: List[str] = []
    experience: Optional[ExperienceRange] = None
    education: Optional[EducationRequirement] = None
    certifications: List[str] = []


class SalaryRange(CamelModel):
    min: Optional[float] = Field(default=None, ge=0)
    max: Optional[float] = Field(default=None, ge=0)
    currency: str = "USD"
    period: SalaryPeriod = SalaryPeriod.YEARLY
    negotiable: bool = False


class ContactInfo(CamelModel):
    email: Optional[str] = None
    phone: Optional[str] = None
    website: Optional[str] = None


class JobQuestion(CamelModel):
    """Screening question asked of applicants."""
    question: str
    required: bool = False
    type: QuestionType = QuestionType.TEXT
    options: List[str] = []


class Job(CamelModel):
    """Represents a job posting owned by one employer account.

    Attributes:
        id: Unique job identifier (UUID from database).
        title: Job title.
        company: ID of the employer user who posted the job.
        company_name: Employer's company name at posting time.
        location: Where the job is based.
        description: Full job description.
        requirements: Skills, experience and education requirements.
        salary: Salary range, currency and period.
        job_type: Employment type.
        industry: Industry the job belongs to.
        level: Seniority level.
        status: Posting status; closed/paused postings stop accepting
            applications.
        approved: Whether an admin (or auto-approval) approved the posting.
        application_count: Number of applications received.
        views: Number of detail views.
    """
    id: Optional[str] = None
    title: str
    company: Optional[str] = None
    company_name: Optional[str] = None
    location: JobLocation = JobLocation()
    description: str = ""
    requirements: JobRequirements = JobRequirements()
    salary: SalaryRange = SalaryRange()
    benefits: List[str] = []
    job_type: JobType
    industry: Optional[str] = None
    department: Optional[str] = None
    level: JobLevel = JobLevel.MID
    application_deadline: Optional[datetime] = None
    start_date: Optional[datetime] = None
    status: JobStatus = JobStatus.ACTIVE
    is_featured: bool = False
    is_urgent: bool = False
    application_count: int = 0
    views: int = 0
    tags: List[str] = []
    contact_info: Optional[ContactInfo] = None
    application_instructions: Optional[str] = None
    questions: List[JobQuestion] = []
    keywords: List[str] = []
    approved: bool = False
    approved_by: Optional[str] = None
    approved_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class JobSort(str, Enum):
    NEWEST = "newest"
    OLDEST = "oldest"
    SALARY_HIGH = "salary-high"
    SALARY_LOW = "salary-low"
    RELEVANCE = "relevance"


class JobSearchFilters(CamelModel):
    """Filters for the public job listing.

    Attributes:
        search: Text matched against title, description and company name.
        location: Text matched against city, state and country.
        job_type: Exact job type.
        industry: Text matched against industry.
        level: Exact level.
        remote: Only remote (True) or only non-remote (False) jobs.
        salary_min: Minimum of the advertised salary range must be at least this.
        salary_max: Maximum of the advertised salary range must be at most this.
        sort: Result ordering.
    """
    search: Optional[str] = None
    location: Optional[str] = None
    job_type: Optional[JobType] = None
    industry: Optional[str] = None
    level: Optional[JobLevel] = None
    remote: Optional[bool] = None
    salary_min: Optional[float] = Field(default=None, ge=0)
    salary_max: Optional[float] = Field(default=None, ge=0)
    sort: JobSort = JobSort.NEWEST
