"""Pydantic models for the job portal."""

from jobportal.models.base import CamelModel
from jobportal.models.job import (
    JobStatus,
    JobType,
    JobLevel,
    RemoteType,
    EducationLevel,
    SalaryPeriod,
    JobLocation,
    JobRequirements,
    SalaryRange,
    JobQuestion,
    JobSort,
    JobSearchFilters,
    Job
)
from jobportal.models.user import (
    UserRole,
    Availability,
    UserLocation,
    WorkExperience,
    EducationEntry,
    ResumeReference,
    CandidateProfile,
    EmployerProfile,
    UserProfile,
    User
)
from jobportal.models.application import (
    ApplicationStatus,
    InterviewType,
    CommunicationType,
    Interviewer,
    InterviewDetails,
    Evaluation,
    OfferSalary,
    Offer,
    TimelineEntry,
    Communication,
    Application
)

__all__ = [
    "CamelModel",
    "JobStatus",
    "JobType",
    "JobLevel",
    "RemoteType",
    "EducationLevel",
    "SalaryPeriod",
    "JobLocation",
    "JobRequirements",
    "SalaryRange",
    "JobQuestion",
    "JobSort",
    "JobSearchFilters",
    "Job",
    "UserRole",
    "Availability",
    "UserLocation",
    "WorkExperience",
    "EducationEntry",
    "ResumeReference",
    "CandidateProfile",
    "EmployerProfile",
    "UserProfile",
    "User",
    "ApplicationStatus",
    "InterviewType",
    "CommunicationType",
    "Interviewer",
    "InterviewDetails",
    "Evaluation",
    "OfferSalary",
    "Offer",
    "TimelineEntry",
    "Communication",
    "Application"
]
