"""Service for job management and business logic."""

import logging
from datetime import datetime, timezone
from typing import List, Dict, Optional, Any

from jobportal.api.schemas.job_schemas import CreateJobRequest, UpdateJobRequest
from jobportal.models import JobSearchFilters, JobSort, JobStatus, User
from jobportal.repositories.job_repository import JobRepository
from jobportal.services.scoring_service import ScoringService
from jobportal.utils.pagination import build_pagination, page_offset

logger = logging.getLogger(__name__)

# How many open jobs are scored when building recommendations
RECOMMENDATION_POOL_FACTOR = 5
RECOMMENDATION_POOL_MIN = 50


class JobService:
    """Service for managing jobs with business logic.

    Attributes:
        job_repository: Repository for job data access.
        scoring_service: Match scorer for candidate callers.
    """

    def __init__(self, job_repository: JobRepository, scoring_service: ScoringService):
        """Initialize the service with a repository.

        Args:
            job_repository: JobRepository instance.
            scoring_service: ScoringService instance.
        """
        self.job_repository = job_repository
        self.scoring_service = scoring_service

    def list_jobs(
        self,
        filters: JobSearchFilters,
        page: int = 1,
        limit: int = 10,
        viewer: Optional[User] = None
    ) -> Dict[str, Any]:
        """List active, approved jobs with filtering, sorting and pagination.

        Args:
            filters: Listing filters and sort order.
            page: 1-based page number.
            limit: Page size.
            viewer: The caller; candidates get a `matchScore` per job.

        Returns:
            Dictionary with jobs, pagination block and total.
        """
        jobs, total = self.job_repository.search(filters, offset=page_offset(page, limit), limit=limit)

        self.scoring_service.annotate_jobs(jobs, viewer)

        # A searching candidate sorting by relevance gets best matches first
        if viewer is not None and viewer.is_candidate and filters.search and filters.sort == JobSort.RELEVANCE.value:
            jobs.sort(key=lambda job: job.get("matchScore") or 0, reverse=True)

        return {
            "jobs": jobs,
            "pagination": build_pagination(page, limit, total, len(jobs)),
            "total": total
        }

    def get_job(self, job_id: str, viewer: Optional[User] = None) -> Dict[str, Any]:
        """Get a job by ID and count the view.

        Args:
            job_id: Job UUID.
            viewer: The caller; candidates get a `matchScore`.

        Returns:
            Job record.

        Raises:
            ValueError: If job not found.
        """
        job = self.job_repository.get_by_id(job_id)
        if not job:
            raise ValueError(f"Job with ID {job_id} not found")

        job["views"] = self.job_repository.increment_counter(job_id, "views")

        match_score = self.scoring_service.score_job(job, viewer)
        if match_score is not None:
            job["matchScore"] = match_score

        return job

    def create_job(self, user: User, request: CreateJobRequest) -> Dict[str, Any]:
        """Create a new job owned by the calling employer.

        Jobs posted by admins or verified employers are approved immediately;
        everything else waits for moderation.

        Args:
            user: The posting employer or admin.
            request: Whitelisted job fields.

        Returns:
            Created job record.

        Raises:
            PermissionError: If the caller is not an employer or admin.
            ValueError: If the employer has no company name on their profile.
        """
        if not (user.is_employer or user.is_admin):
            raise PermissionError("Only employers can post jobs")

        company_name = user.employer_profile.company_name if user.employer_profile else None
        if not company_name:
            if not user.is_admin:
                raise ValueError("Employer profile must include a company name before posting jobs")
            company_name = user.full_name or user.email

        job_data = request.to_record()
        job_data.update({
            "company": user.id,
            "companyName": company_name,
            "applicationCount": 0,
            "views": 0,
            "approved": False
        })

        verified = bool(user.employer_profile and user.employer_profile.verified)
        if user.is_admin or verified:
            job_data["approved"] = True
            job_data["approvedBy"] = user.id
            job_data["approvedAt"] = datetime.now(timezone.utc).isoformat()

        job = self.job_repository.create(job_data)
        logger.info(f"Job {job.get('id')} created by {user.id} (approved={job_data['approved']})")
        return job

    def update_job(self, job_id: str, user: User, request: UpdateJobRequest) -> Dict[str, Any]:
        """Update a job.

        Args:
            job_id: Job UUID.
            user: The caller; must own the job or be an admin.
            request: Fields to change. Omitted fields are left alone.

        Returns:
            Updated job record.

        Raises:
            ValueError: If job not found.
            PermissionError: If the caller may not edit this job.
        """
        job = self._get_owned_job(job_id, user, "edit this job")

        updates = request.model_dump(by_alias=True, mode="json", exclude_unset=True, exclude_none=True)
        if not updates:
            return job

        updates["updatedAt"] = datetime.now(timezone.utc).isoformat()
        return self.job_repository.update(job_id, updates)

    def delete_job(self, job_id: str, user: User) -> bool:
        """Delete a job.

        Args:
            job_id: Job UUID.
            user: The caller; must own the job or be an admin.

        Returns:
            True if deletion successful.

        Raises:
            ValueError: If job not found.
            PermissionError: If the caller may not delete this job.
        """
        self._get_owned_job(job_id, user, "delete this job")
        deleted = self.job_repository.delete(job_id)
        logger.info(f"Job {job_id} deleted by {user.id}")
        return deleted

    def list_employer_jobs(
        self,
        user: User,
        status: Optional[JobStatus] = None,
        page: int = 1,
        limit: int = 10
    ) -> Dict[str, Any]:
        """List jobs posted by the calling employer, any status.

        Raises:
            PermissionError: If the caller is not an employer or admin.
        """
        if not (user.is_employer or user.is_admin):
            raise PermissionError("Only employers can list their jobs")

        filters: Dict[str, Any] = {"company": user.id}
        if status:
            filters["status"] = status.value if isinstance(status, JobStatus) else status

        jobs, total = self.job_repository.find(filters, offset=page_offset(page, limit), limit=limit)
        return {
            "jobs": jobs,
            "pagination": build_pagination(page, limit, total, len(jobs)),
            "total": total
        }

    def recommended_jobs(self, user: User, limit: int = 10) -> List[Dict[str, Any]]:
        """Recommend open jobs to a candidate, best match first.

        The pool keeps open jobs that require at least one of the
        candidate's skills, are of a preferred job type, and are in the
        candidate's city, state or country or remote. Each filter applies
        only when the candidate has the matching profile data. The pool is
        then ranked by match score.

        Raises:
            PermissionError: If the caller is not a candidate.
        """
        if not user.is_candidate:
            raise PermissionError("Only candidates can access recommended jobs")

        profile = user.candidate_profile
        preferred = profile.preferred_job_types if profile else []
        skills = [skill.strip() for skill in (profile.skills if profile else []) if skill.strip()]
        location = user.profile.location.model_dump() if user.profile.location else None
        pool_size = max(limit * RECOMMENDATION_POOL_FACTOR, RECOMMENDATION_POOL_MIN)

        jobs = self.job_repository.get_open_jobs(
            job_types=preferred or None,
            skills=skills or None,
            location=location,
            limit=pool_size
        )
        return self.scoring_service.rank_jobs(jobs, user)[:limit]

    def approve_job(self, job_id: str, admin: User) -> Dict[str, Any]:
        """Approve a job posting so it shows up in listings.

        Raises:
            PermissionError: If the caller is not an admin.
            ValueError: If job not found.
        """
        self._require_admin(admin)
        self._get_job_or_raise(job_id)

        job = self.job_repository.update(job_id, {
            "approved": True,
            "approvedBy": admin.id,
            "approvedAt": datetime.now(timezone.utc).isoformat()
        })
        logger.info(f"Job {job_id} approved by {admin.id}")
        return job

    def reject_job(self, job_id: str, admin: User, reason: Optional[str] = None) -> Dict[str, Any]:
        """Reject a job posting: unapprove and close it.

        Raises:
            PermissionError: If the caller is not an admin.
            ValueError: If job not found.
        """
        self._require_admin(admin)
        self._get_job_or_raise(job_id)

        job = self.job_repository.update(job_id, {
            "approved": False,
            "status": JobStatus.CLOSED.value
        })
        logger.info(f"Job {job_id} rejected by {admin.id}: {reason or 'no reason given'}")
        return job

    def list_jobs_for_moderation(
        self,
        admin: User,
        status: Optional[str] = None,
        approved: Optional[bool] = None,
        search: Optional[str] = None,
        page: int = 1,
        limit: int = 20
    ) -> Dict[str, Any]:
        """List jobs of any status for admins."""
        self._require_admin(admin)

        jobs, total = self.job_repository.search_admin(
            status=status,
            approved=approved,
            search=search,
            offset=page_offset(page, limit),
            limit=limit
        )
        return {
            "jobs": jobs,
            "pagination": build_pagination(page, limit, total, len(jobs)),
            "total": total
        }

    def _get_job_or_raise(self, job_id: str) -> Dict[str, Any]:
        job = self.job_repository.get_by_id(job_id)
        if not job:
            raise ValueError(f"Job with ID {job_id} not found")
        return job

    def _get_owned_job(self, job_id: str, user: User, action: str) -> Dict[str, Any]:
        job = self._get_job_or_raise(job_id)
        if job.get("company") != user.id and not user.is_admin:
            logger.warning(f"User {user.id} refused: not authorized to {action} ({job_id})")
            raise PermissionError(f"Not authorized to {action}")
        return job

    @staticmethod
    def _require_admin(user: User) -> None:
        if not user.is_admin:
            raise PermissionError("Admin access required")
