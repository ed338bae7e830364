"""Request schemas for application endpoints."""

from datetime import datetime
from typing import List, Optional

from pydantic import Field, HttpUrl

from jobportal.models.base import CamelModel
from jobportal.models.application import (
    COVER_LETTER_MAX_LENGTH,
    AdditionalFile,
    Answer,
    ApplicationStatus,
    Attachment,
    CommunicationType,
    InterviewType,
    OfferSalary,
)

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class SubmitApplicationRequest(CamelModel):
    """Request model for applying to a job."""
    job_id: str = Field(min_length=1)
    cover_letter: str = Field(min_length=1, max_length=COVER_LETTER_MAX_LENGTH)
    resume: Optional[HttpUrl] = None
    answers: List[Answer] = []
    additional_files: List[AdditionalFile] = []


class UpdateStatusRequest(CamelModel):
    status: ApplicationStatus
    notes: Optional[str] = None


class InterviewerRequest(CamelModel):
    name: str = Field(min_length=1)
    email: str = Field(pattern=EMAIL_PATTERN)
    role: Optional[str] = None


class ScheduleInterviewRequest(CamelModel):
    """Request model for scheduling an interview."""
    date: datetime
    time: str = Field(min_length=1)
    type: InterviewType
    location: Optional[str] = None
    meeting_link: Optional[HttpUrl] = None
    notes: Optional[str] = None
    interviewer: InterviewerRequest


class EvaluateRequest(CamelModel):
    """Partial evaluation update. Omitted fields keep their current value."""
    technical_skills: Optional[int] = Field(default=None, ge=1, le=5)
    communication_skills: Optional[int] = Field(default=None, ge=1, le=5)
    cultural_fit: Optional[int] = Field(default=None, ge=1, le=5)
    problem_solving: Optional[int] = Field(default=None, ge=1, le=5)
    overall_rating: Optional[int] = Field(default=None, ge=1, le=5)
    notes: Optional[str] = None
    strengths: Optional[List[str]] = None
    areas_for_improvement: Optional[List[str]] = None
    recommended: Optional[bool] = None


class MakeOfferRequest(CamelModel):
    """Request model for extending a job offer."""
    salary: OfferSalary
    benefits: List[str] = []
    start_date: datetime
    terms: Optional[str] = None
    deadline: datetime


class CommunicationRequest(CamelModel):
    """Request model for logging a message on an application.

    When `to` is omitted the message goes to the other party: the employer
    for the applicant, the applicant for everyone else.
    """
    type: CommunicationType = CommunicationType.MESSAGE
    to: Optional[str] = None
    subject: Optional[str] = None
    message: str = Field(min_length=1)
    attachments: List[Attachment] = []
