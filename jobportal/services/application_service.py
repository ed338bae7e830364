"""Service layer for job applications and their lifecycle.

Handles submission, visibility and authorization, and delegates status
changes and sub-records (interview, evaluation, offer, communications) to
the lifecycle tracker. Every lifecycle change is written back in a single
database call that replaces the status and sub-record and appends the new
timeline entry or communication in place.
"""

import logging
from typing import Any, Dict, List, Optional

from jobportal import lifecycle
from jobportal.api.schemas.application_schemas import (
    CommunicationRequest,
    EvaluateRequest,
    MakeOfferRequest,
    ScheduleInterviewRequest,
    SubmitApplicationRequest,
)
from jobportal.models import (
    Application,
    ApplicationStatus,
    Communication,
    InterviewDetails,
    Interviewer,
    Offer,
    ResumeReference,
    TimelineEntry,
    User,
)
from jobportal.repositories.application_repository import ApplicationRepository
from jobportal.repositories.base_repository import DuplicateRecordError
from jobportal.repositories.job_repository import JobRepository
from jobportal.scoring import score_application
from jobportal.utils.pagination import build_pagination, page_offset

logger = logging.getLogger(__name__)

ALREADY_APPLIED_MESSAGE = "You have already applied to this job"
NOT_ACCEPTING_MESSAGE = "This job is not accepting applications"
RECENT_APPLICATIONS_LIMIT = 5


class ApplicationService:
    """Service for submitting and managing job applications.

    Attributes:
        application_repository: Repository for application data access.
        job_repository: Repository for job data access.
        enforce_transitions: Reject status moves outside
            lifecycle.ALLOWED_TRANSITIONS when True.
    """

    def __init__(
        self,
        application_repository: ApplicationRepository,
        job_repository: JobRepository,
        enforce_transitions: bool = False
    ):
        self.application_repository = application_repository
        self.job_repository = job_repository
        self.enforce_transitions = enforce_transitions

    def submit_application(self, user: User, request: SubmitApplicationRequest) -> Application:
        """Submit a candidate's application to a job.

        Takes a snapshot of the candidate's skills, experience titles and
        degrees, computes the submission-time match score, records the
        `applied` timeline entry and increments the job's application count.

        Args:
            user: The applying candidate.
            request: Job ID, cover letter and optional attachments.

        Returns:
            The created Application.

        Raises:
            PermissionError: If the caller is not a candidate.
            ValueError: If the job is missing (not found), closed or
                unapproved, or the candidate already applied.
        """
        if not user.is_candidate:
            raise PermissionError("Only candidates can apply to jobs")

        job = self.job_repository.get_by_id(request.job_id)
        if not job:
            raise ValueError(f"Job with ID {request.job_id} not found")

        if job.get("status") != "active" or not job.get("approved"):
            raise ValueError(NOT_ACCEPTING_MESSAGE)

        if self.application_repository.get_by_job_and_applicant(request.job_id, user.id):
            raise ValueError(ALREADY_APPLIED_MESSAGE)

        profile = user.candidate_profile
        skills = list(profile.skills) if profile else []
        experience = [entry.title for entry in profile.experience] if profile else []
        education = [entry.degree for entry in profile.education] if profile else []

        application = Application(
            job=request.job_id,
            applicant=user.id,
            employer=job["company"],
            cover_letter=request.cover_letter,
            resume=ResumeReference(url=str(request.resume)) if request.resume else None,
            answers=request.answers,
            additional_files=request.additional_files,
            skills=skills,
            experience=experience,
            education=education,
            match_score=score_application(skills, experience, education),
        )
        lifecycle.record_status(application, ApplicationStatus.APPLIED, user.id)

        try:
            record = self.application_repository.create(application.to_record())
        except DuplicateRecordError:
            # Lost a race with a concurrent submission for the same pair
            raise ValueError(ALREADY_APPLIED_MESSAGE)

        self.job_repository.increment_counter(request.job_id, "applicationCount")

        logger.info(f"Application {record.get('id')} submitted by {user.id} for job {request.job_id}")
        return Application.model_validate(record)

    def list_applications(
        self,
        user: User,
        status: Optional[ApplicationStatus] = None,
        job_id: Optional[str] = None,
        page: int = 1,
        limit: int = 10
    ) -> Dict[str, Any]:
        """List applications visible to the caller.

        Candidates see their own applications, employers the applications
        to their jobs, admins everything.

        Returns:
            Dictionary with applications, pagination block and total.
        """
        filters = self._scope_filters(user)
        if status:
            filters["status"] = ApplicationStatus(status).value
        if job_id:
            filters["job"] = job_id

        records, total = self.application_repository.find(filters, offset=page_offset(page, limit), limit=limit)
        return {
            "applications": [Application.model_validate(record) for record in records],
            "pagination": build_pagination(page, limit, total, len(records)),
            "total": total
        }

    def get_application(self, application_id: str, user: User) -> Application:
        """Get an application the caller is allowed to see.

        Raises:
            ValueError: If application not found.
            PermissionError: If the caller is neither its applicant, its
                employer nor an admin.
        """
        application = self._get_or_raise(application_id)

        if user.is_candidate and application.applicant != user.id:
            raise PermissionError("Not authorized to view this application")
        if user.is_employer and application.employer != user.id:
            raise PermissionError("Not authorized to view this application")

        return application

    def update_status(
        self,
        application_id: str,
        user: User,
        status: ApplicationStatus,
        notes: Optional[str] = None
    ) -> Application:
        """Set an application's status and record it in the timeline.

        Raises:
            ValueError: If not found, or the status is invalid/refused.
            PermissionError: If the caller is not the job's employer or an admin.
        """
        application = self._get_for_employer(application_id, user, "update this application")
        entry = lifecycle.record_status(
            application,
            status,
            user.id,
            notes,
            enforce_transitions=self.enforce_transitions
        )
        logger.info(f"Application {application_id} moved to {application.status} by {user.id}")
        return self._save(application, ["status"], timeline_entry=entry)

    def schedule_interview(
        self,
        application_id: str,
        user: User,
        request: ScheduleInterviewRequest
    ) -> Application:
        """Schedule an interview and move the application to interview-scheduled."""
        application = self._get_for_employer(
            application_id, user, "schedule interview for this application"
        )

        details = InterviewDetails(
            scheduled=True,
            date=request.date,
            time=request.time,
            type=request.type,
            location=request.location,
            meeting_link=str(request.meeting_link) if request.meeting_link else None,
            notes=request.notes,
            interviewer=Interviewer(**request.interviewer.model_dump()),
        )
        lifecycle.schedule_interview(
            application, details, user.id, enforce_transitions=self.enforce_transitions
        )
        logger.info(f"Interview scheduled for application {application_id} by {user.id}")
        return self._save(application, ["status", "interview"], timeline_entry=application.timeline[-1])

    def evaluate(self, application_id: str, user: User, request: EvaluateRequest) -> Application:
        """Merge evaluation fields into the application. Status is unchanged."""
        application = self._get_for_employer(application_id, user, "evaluate this application")
        lifecycle.evaluate(application, request.model_dump(exclude_unset=True, exclude_none=True))
        return self._save(application, ["evaluation"])

    def make_offer(self, application_id: str, user: User, request: MakeOfferRequest) -> Application:
        """Extend a job offer and move the application to offered."""
        application = self._get_for_employer(application_id, user, "make offer for this application")

        offer = Offer(
            salary=request.salary,
            benefits=request.benefits,
            start_date=request.start_date,
            terms=request.terms,
            deadline=request.deadline,
        )
        lifecycle.make_offer(application, offer, user.id, enforce_transitions=self.enforce_transitions)
        logger.info(f"Offer made on application {application_id} by {user.id}")
        return self._save(application, ["status", "offer"], timeline_entry=application.timeline[-1])

    def accept_offer(self, application_id: str, user: User) -> Application:
        """Accept the offer on the caller's own application.

        Raises:
            ValueError: If not found or there is no outstanding offer.
            PermissionError: If the caller is not the applicant.
        """
        application = self._get_for_applicant(application_id, user, "accept offer for this application")
        lifecycle.accept_offer(application, user.id)
        logger.info(f"Offer accepted on application {application_id}")
        return self._save(application, ["status", "offer"], timeline_entry=application.timeline[-1])

    def withdraw(self, application_id: str, user: User) -> Application:
        """Withdraw the caller's own application.

        Raises:
            ValueError: If not found, or already hired or withdrawn.
            PermissionError: If the caller is not the applicant.
        """
        application = self._get_for_applicant(application_id, user, "withdraw this application")
        lifecycle.withdraw(application, user.id)
        logger.info(f"Application {application_id} withdrawn")
        return self._save(application, ["status"], timeline_entry=application.timeline[-1])

    def add_communication(
        self,
        application_id: str,
        user: User,
        request: CommunicationRequest
    ) -> Application:
        """Log a message on an application.

        The applicant, the job's employer and admins may post.
        """
        application = self._get_or_raise(application_id)
        is_applicant = application.applicant == user.id
        if not (is_applicant or application.employer == user.id or user.is_admin):
            raise PermissionError("Not authorized to message on this application")

        recipient = request.to or (application.employer if is_applicant else application.applicant)
        communication = Communication(
            type=request.type,
            from_user=user.id,
            to_user=recipient,
            subject=request.subject,
            message=request.message,
            attachments=request.attachments,
        )
        lifecycle.add_communication(application, communication)
        return self._save(application, [], communication=application.communications[-1])

    def get_stats(self, user: User) -> Dict[str, Any]:
        """Count the caller's visible applications per status.

        Returns:
            Dictionary with per-status counts, the total and the most recent
            applications.
        """
        scope = self._scope_filters(user)

        stats = {}
        for status in ApplicationStatus:
            count = self.application_repository.count({**scope, "status": status.value})
            if count:
                stats[status.value] = count

        recent, total = self.application_repository.find(scope, limit=RECENT_APPLICATIONS_LIMIT)
        return {
            "stats": stats,
            "total_applications": total,
            "recent_applications": [Application.model_validate(record) for record in recent]
        }

    # Helpers

    @staticmethod
    def _scope_filters(user: User) -> Dict[str, Any]:
        if user.is_candidate:
            return {"applicant": user.id}
        if user.is_employer:
            return {"employer": user.id}
        return {}

    def _get_or_raise(self, application_id: str) -> Application:
        record = self.application_repository.get_by_id(application_id)
        if not record:
            raise ValueError(f"Application with ID {application_id} not found")
        return Application.model_validate(record)

    def _get_for_employer(self, application_id: str, user: User, action: str) -> Application:
        application = self._get_or_raise(application_id)
        if application.employer != user.id and not user.is_admin:
            logger.warning(f"User {user.id} refused: not authorized to {action} ({application_id})")
            raise PermissionError(f"Not authorized to {action}")
        return application

    def _get_for_applicant(self, application_id: str, user: User, action: str) -> Application:
        application = self._get_or_raise(application_id)
        if application.applicant != user.id:
            logger.warning(f"User {user.id} refused: not authorized to {action} ({application_id})")
            raise PermissionError(f"Not authorized to {action}")
        return application

    def _save(
        self,
        application: Application,
        fields: List[str],
        timeline_entry: Optional[TimelineEntry] = None,
        communication: Optional[Communication] = None
    ) -> Application:
        """Replace the given fields and append the new entries in one write."""
        record = application.to_record(exclude_none=False)
        changes = {}
        for name in fields:
            alias = Application.model_fields[name].alias or name
            changes[alias] = record[alias]

        saved = self.application_repository.apply_change(
            application.id,
            changes,
            timeline_entry=timeline_entry.to_record() if timeline_entry else None,
            communication=communication.to_record() if communication else None
        )
        return Application.model_validate(saved)
