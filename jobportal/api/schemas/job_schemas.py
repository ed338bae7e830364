"""Request and response schemas for job endpoints.

Create/update schemas list exactly the fields an employer may set; counters,
ownership and approval are never taken from the request body.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import Field

from jobportal.models.base import CamelModel
from jobportal.models.job import (
    ContactInfo,
    JobLevel,
    JobLocation,
    JobQuestion,
    JobRequirements,
    JobStatus,
    JobType,
    SalaryRange,
)


class CreateJobRequest(CamelModel):
    """Request model for posting a new job."""
    title: str = Field(min_length=1)
    description: str = Field(min_length=1)
    job_type: JobType
    industry: str = Field(min_length=1)
    department: Optional[str] = None
    level: JobLevel = JobLevel.MID
    location: JobLocation = JobLocation()
    requirements: JobRequirements = JobRequirements()
    salary: SalaryRange = SalaryRange()
    benefits: List[str] = []
    application_deadline: Optional[datetime] = None
    start_date: Optional[datetime] = None
    status: JobStatus = JobStatus.ACTIVE
    is_urgent: bool = False
    tags: List[str] = []
    contact_info: Optional[ContactInfo] = None
    application_instructions: Optional[str] = None
    questions: List[JobQuestion] = []
    keywords: List[str] = []


class UpdateJobRequest(CamelModel):
    """Request model for updating a job. Only provided fields change."""
    title: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = Field(default=None, min_length=1)
    job_type: Optional[JobType] = None
    industry: Optional[str] = Field(default=None, min_length=1)
    department: Optional[str] = None
    level: Optional[JobLevel] = None
    location: Optional[JobLocation] = None
    requirements: Optional[JobRequirements] = None
    salary: Optional[SalaryRange] = None
    benefits: Optional[List[str]] = None
    application_deadline: Optional[datetime] = None
    start_date: Optional[datetime] = None
    status: Optional[JobStatus] = None
    is_urgent: Optional[bool] = None
    tags: Optional[List[str]] = None
    contact_info: Optional[ContactInfo] = None
    application_instructions: Optional[str] = None
    questions: Optional[List[JobQuestion]] = None
    keywords: Optional[List[str]] = None


class RejectJobRequest(CamelModel):
    """Request model for rejecting a job posting."""
    reason: Optional[str] = None


class JobListResponse(CamelModel):
    """Paginated job listing. Job records are returned as stored, plus
    `matchScore` for candidate callers."""
    jobs: List[Dict[str, Any]]
    pagination: Dict[str, Any]
    total: int
