"""Pydantic models for user accounts and candidate/employer profiles."""

import uuid
from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import Field

from jobportal.models.base import CamelModel


class UserRole(str, Enum):
    CANDIDATE = "candidate"
    EMPLOYER = "employer"
    ADMIN = "admin"


class Availability(str, Enum):
    IMMEDIATELY = "immediately"
    TWO_WEEKS = "2-weeks"
    ONE_MONTH = "1-month"
    THREE_MONTHS = "3-months"
    NEGOTIABLE = "negotiable"


class CompanySize(str, Enum):
    TINY = "1-10"
    SMALL = "11-50"
    MEDIUM = "51-200"
    LARGE = "201-500"
    XLARGE = "501-1000"
    ENTERPRISE = "1000+"


def _new_entry_id() -> str:
    return str(uuid.uuid4())


class UserLocation(CamelModel):
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None


class WorkExperience(CamelModel):
    """A work experience entry on a candidate profile.

    Attributes:
        id: Entry identifier, used to edit or remove a single entry.
        title: Job title held.
        company: Employer name.
        location: Free-text location of the role.
        start_date: Start of employment.
        end_date: End of employment (None while current).
        current: True if this is the candidate's current role.
        description: Description of responsibilities.
    """
    id: str = Field(default_factory=_new_entry_id)
    title: str
    company: Optional[str] = None
    location: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    current: bool = False
    description: Optional[str] = None


class EducationEntry(CamelModel):
    """An education entry on a candidate profile."""
    id: str = Field(default_factory=_new_entry_id)
    degree: str
    institution: Optional[str] = None
    field: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    gpa: Optional[float] = Field(default=None, ge=0)


class ResumeReference(CamelModel):
    url: str
    filename: Optional[str] = None


class SalaryExpectation(CamelModel):
    min: Optional[float] = Field(default=None, ge=0)
    max: Optional[float] = Field(default=None, ge=0)
    currency: Optional[str] = None


class CandidateProfile(CamelModel):
    """Candidate-specific profile data used for matching and applications.

    Attributes:
        skills: Skill names.
        experience: Work history, most recent first.
        education: Education history.
        resume: Reference to the uploaded resume.
        preferred_job_types: Job types the candidate wants (job type values).
        salary_expectation: Expected salary range.
        availability: When the candidate can start.
    """
    skills: List[str] = []
    experience: List[WorkExperience] = []
    education: List[EducationEntry] = []
    resume: Optional[ResumeReference] = None
    preferred_job_types: List[str] = []
    salary_expectation: Optional[SalaryExpectation] = None
    availability: Optional[Availability] = None


class EmployerProfile(CamelModel):
    company_name: Optional[str] = None
    company_size: Optional[CompanySize] = None
    industry: Optional[str] = None
    company_website: Optional[str] = None
    company_description: Optional[str] = None
    company_logo: Optional[str] = None
    verified: bool = False


class UserProfile(CamelModel):
    first_name: str = ""
    last_name: str = ""
    phone: Optional[str] = None
    location: Optional[UserLocation] = None
    avatar: Optional[str] = None
    bio: Optional[str] = None
    website: Optional[str] = None
    linkedin_profile: Optional[str] = None
    github_profile: Optional[str] = None


class User(CamelModel):
    """A user account: candidate, employer or admin.

    Only the profile section matching the role is expected to be populated.
    """
    id: str
    email: str
    role: UserRole = UserRole.CANDIDATE
    profile: UserProfile = UserProfile()
    candidate_profile: Optional[CandidateProfile] = None
    employer_profile: Optional[EmployerProfile] = None
    is_active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def full_name(self) -> str:
        return f"{self.profile.first_name} {self.profile.last_name}".strip()

    @property
    def is_candidate(self) -> bool:
        return self.role == UserRole.CANDIDATE

    @property
    def is_employer(self) -> bool:
        return self.role == UserRole.EMPLOYER

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN
