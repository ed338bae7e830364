"""Request schemas for user profile and user administration endpoints."""

from datetime import datetime
from typing import List, Optional

from pydantic import Field

from jobportal.models.base import CamelModel
from jobportal.models.job import JobType
from jobportal.models.user import (
    Availability,
    CompanySize,
    EducationEntry,
    SalaryExpectation,
    UserLocation,
    UserRole,
    WorkExperience,
)


class UpdateProfileRequest(CamelModel):
    first_name: Optional[str] = Field(default=None, min_length=1)
    last_name: Optional[str] = Field(default=None, min_length=1)
    phone: Optional[str] = None
    location: Optional[UserLocation] = None
    bio: Optional[str] = Field(default=None, max_length=500)
    website: Optional[str] = None
    linkedin_profile: Optional[str] = None
    github_profile: Optional[str] = None


class UpdateCandidateProfileRequest(CamelModel):
    """Fields of the candidate profile that feed matching and applications."""
    skills: Optional[List[str]] = None
    experience: Optional[List[WorkExperience]] = None
    education: Optional[List[EducationEntry]] = None
    preferred_job_types: Optional[List[JobType]] = None
    salary_expectation: Optional[SalaryExpectation] = None
    availability: Optional[Availability] = None


class AddExperienceRequest(CamelModel):
    title: str = Field(min_length=1)
    company: str = Field(min_length=1)
    location: Optional[str] = None
    start_date: datetime
    end_date: Optional[datetime] = None
    current: bool = False
    description: Optional[str] = None


class UpdateExperienceRequest(CamelModel):
    """Fields to change on one experience entry; omitted fields are kept."""
    title: Optional[str] = Field(default=None, min_length=1)
    company: Optional[str] = Field(default=None, min_length=1)
    location: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    current: Optional[bool] = None
    description: Optional[str] = None


class AddEducationRequest(CamelModel):
    degree: str = Field(min_length=1)
    institution: str = Field(min_length=1)
    field: Optional[str] = None
    start_date: datetime
    end_date: Optional[datetime] = None
    gpa: Optional[float] = Field(default=None, ge=0, le=4)


class UpdateEducationRequest(CamelModel):
    degree: Optional[str] = Field(default=None, min_length=1)
    institution: Optional[str] = Field(default=None, min_length=1)
    field: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    gpa: Optional[float] = Field(default=None, ge=0, le=4)


class ResumeRequest(CamelModel):
    """Reference to a resume already stored elsewhere."""
    resume_url: str = Field(min_length=1)
    filename: Optional[str] = None


class UpdateEmployerProfileRequest(CamelModel):
    company_name: Optional[str] = Field(default=None, min_length=1)
    company_size: Optional[CompanySize] = None
    industry: Optional[str] = None
    company_website: Optional[str] = None
    company_description: Optional[str] = None


class UpdateUserStatusRequest(CamelModel):
    is_active: bool


class UpdateUserRoleRequest(CamelModel):
    role: UserRole
