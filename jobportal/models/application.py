"""Pydantic models for job applications and their lifecycle sub-records."""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import Field

from jobportal.models.base import CamelModel
from jobportal.models.job import SalaryPeriod
from jobportal.models.user import ResumeReference

COVER_LETTER_MAX_LENGTH = 2000


class ApplicationStatus(str, Enum):
    """Status of an application. Also the vocabulary of timeline actions."""
    APPLIED = "applied"
    REVIEWING = "reviewing"
    SHORTLISTED = "shortlisted"
    INTERVIEW_SCHEDULED = "interview-scheduled"
    INTERVIEWED = "interviewed"
    OFFERED = "offered"
    HIRED = "hired"
    REJECTED = "rejected"
    WITHDRAWN = "withdrawn"


class InterviewType(str, Enum):
    PHONE = "phone"
    VIDEO = "video"
    IN_PERSON = "in-person"


class CommunicationType(str, Enum):
    EMAIL = "email"
    MESSAGE = "message"
    NOTE = "note"


class AdditionalFile(CamelModel):
    name: Optional[str] = None
    url: str
    type: Optional[str] = None


class Answer(CamelModel):
    question: str
    answer: Optional[str] = None
    file_url: Optional[str] = None


class Interviewer(CamelModel):
    name: str
    email: str
    role: Optional[str] = None


class InterviewDetails(CamelModel):
    """A scheduled interview.

    Attributes:
        scheduled: True once an interview has been scheduled.
        date: Interview date.
        time: Free-text time of day (e.g. "14:30").
        type: Phone, video or in-person.
        location: Address for in-person interviews.
        meeting_link: Link for video interviews.
        notes: Notes for the candidate.
        interviewer: Who conducts the interview.
    """
    scheduled: bool = False
    date: Optional[datetime] = None
    time: Optional[str] = None
    type: InterviewType = InterviewType.VIDEO
    location: Optional[str] = None
    meeting_link: Optional[str] = None
    notes: Optional[str] = None
    interviewer: Optional[Interviewer] = None


class Evaluation(CamelModel):
    """Employer evaluation of an applicant. Ratings are 1-5."""
    technical_skills: Optional[int] = Field(default=None, ge=1, le=5)
    communication_skills: Optional[int] = Field(default=None, ge=1, le=5)
    cultural_fit: Optional[int] = Field(default=None, ge=1, le=5)
    problem_solving: Optional[int] = Field(default=None, ge=1, le=5)
    overall_rating: Optional[int] = Field(default=None, ge=1, le=5)
    notes: Optional[str] = None
    strengths: List[str] = []
    areas_for_improvement: List[str] = []
    recommended: bool = False


class OfferSalary(CamelModel):
    amount: float = Field(ge=0)
    currency: str = "USD"
    period: SalaryPeriod = SalaryPeriod.YEARLY


class Offer(CamelModel):
    """A job offer extended to the applicant.

    Salary is empty when the application was moved to offered directly
    through a status update rather than by making an offer.
    """
    salary: Optional[OfferSalary] = None
    benefits: List[str] = []
    start_date: Optional[datetime] = None
    terms: Optional[str] = None
    deadline: Optional[datetime] = None
    accepted: bool = False
    accepted_at: Optional[datetime] = None


class TimelineEntry(CamelModel):
    """One entry of the append-only application timeline."""
    action: ApplicationStatus
    date: datetime
    performed_by: Optional[str] = None
    notes: Optional[str] = None


class Attachment(CamelModel):
    name: Optional[str] = None
    url: str


class Communication(CamelModel):
    """A message, email or note exchanged about an application."""
    type: CommunicationType
    from_user: str = Field(alias="from")
    to_user: str = Field(alias="to")
    subject: Optional[str] = None
    message: str
    attachments: List[Attachment] = []
    read: bool = False
    sent_at: Optional[datetime] = None


class Application(CamelModel):
    """A candidate's application to a job.

    Attributes:
        id: Unique application identifier (UUID from database).
        job: ID of the job applied to.
        applicant: ID of the candidate user.
        employer: ID of the employer owning the job (denormalized).
        status: Current lifecycle status.
        cover_letter: Cover letter text.
        match_score: Submission-time score (0-100).
        skills: Candidate skills snapshot taken at submission.
        experience: Candidate experience titles snapshot.
        education: Candidate degrees snapshot.
        interview: Scheduled interview, if any.
        communications: Append-only communications log.
        evaluation: Employer evaluation, if any.
        timeline: Append-only log of status changes.
        offer: Job offer, if any.
    """
    id: Optional[str] = None
    job: str
    applicant: str
    employer: str
    status: ApplicationStatus = ApplicationStatus.APPLIED
    cover_letter: str = Field(min_length=1, max_length=COVER_LETTER_MAX_LENGTH)
    resume: Optional[ResumeReference] = None
    additional_files: List[AdditionalFile] = []
    answers: List[Answer] = []
    match_score: Optional[int] = Field(default=None, ge=0, le=100)
    skills: List[str] = []
    experience: List[str] = []
    education: List[str] = []
    interview: Optional[InterviewDetails] = None
    communications: List[Communication] = []
    evaluation: Optional[Evaluation] = None
    timeline: List[TimelineEntry] = []
    offer: Optional[Offer] = None
    is_favorite: bool = False
    tags: List[str] = []
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
