"""Service for the admin dashboard and platform-wide listings."""

import logging
from collections import Counter
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple, Union

from jobportal.constants import TOP_INDUSTRIES_LIMIT
from jobportal.models import Application, ApplicationStatus, JobStatus, User, UserRole
from jobportal.repositories.application_repository import ApplicationRepository
from jobportal.repositories.job_repository import JobRepository
from jobportal.repositories.user_repository import UserRepository
from jobportal.utils.pagination import build_pagination, page_offset

logger = logging.getLogger(__name__)


def _month_of(value: Union[str, datetime]) -> Tuple[int, int]:
    if isinstance(value, datetime):
        return value.year, value.month
    # ISO 8601 text: YYYY-MM-...
    return int(value[0:4]), int(value[5:7])


def monthly_counts(records: List[Dict[str, Any]], count_approved: bool = False) -> List[Dict[str, int]]:
    """Group records by the year and month of `createdAt`, oldest month first.

    Args:
        records: Records carrying `createdAt` (and `approved` when counted).
        count_approved: Also count approved records per month.

    Returns:
        List of {year, month, count} dicts, with `approved` when requested.
    """
    buckets: Dict[Tuple[int, int], Dict[str, int]] = {}
    for record in records:
        if not record.get("createdAt"):
            continue
        bucket = buckets.setdefault(_month_of(record["createdAt"]), {"count": 0, "approved": 0})
        bucket["count"] += 1
        if record.get("approved"):
            bucket["approved"] += 1

    trends = []
    for (year, month), bucket in sorted(buckets.items()):
        entry = {"year": year, "month": month, "count": bucket["count"]}
        if count_approved:
            entry["approved"] = bucket["approved"]
        trends.append(entry)
    return trends


def ranked_counts(
    records: List[Dict[str, Any]],
    column: str,
    limit: Optional[int] = None
) -> List[Dict[str, Any]]:
    """Count records per value of `column`, most frequent first. Empty values are skipped."""
    counts = Counter(record.get(column) for record in records if record.get(column))
    ranked = sorted(counts.items(), key=lambda item: (-item[1], item[0]))
    return [{column: value, "count": count} for value, count in ranked[:limit]]


class AdminService:
    """Aggregates counts across users, jobs and applications for admins.

    Attributes:
        user_repository: Repository for user data access.
        job_repository: Repository for job data access.
        application_repository: Repository for application data access.
    """

    def __init__(
        self,
        user_repository: UserRepository,
        job_repository: JobRepository,
        application_repository: ApplicationRepository
    ):
        self.user_repository = user_repository
        self.job_repository = job_repository
        self.application_repository = application_repository

    def dashboard(self, admin: User) -> Dict[str, Any]:
        """Build the platform overview.

        Args:
            admin: The calling admin.

        Returns:
            Dictionary with user, job and application counts broken down by
            role and status, plus the number of jobs awaiting approval.

        Raises:
            PermissionError: If the caller is not an admin.
        """
        self._require_admin(admin)

        users_by_role = {
            role.value: self.user_repository.count({"role": role.value}) for role in UserRole
        }
        jobs_by_status = {
            status.value: self.job_repository.count({"status": status.value}) for status in JobStatus
        }
        applications_by_status = {
            status.value: self.application_repository.count({"status": status.value})
            for status in ApplicationStatus
        }

        return {
            "users": {"total": self.user_repository.count(), "byRole": users_by_role},
            "jobs": {
                "total": self.job_repository.count(),
                "byStatus": jobs_by_status,
                "pendingApprovals": self.job_repository.count({"approved": False})
            },
            "applications": {
                "total": self.application_repository.count(),
                "byStatus": applications_by_status
            }
        }

    def analytics(self, admin: User) -> Dict[str, Any]:
        """Build growth and distribution figures for the admin analytics page.

        Returns:
            Dictionary with monthly user growth, job trends (with approved
            counts) and application trends, the top industries and job types
            among approved jobs, and the application status distribution.

        Raises:
            PermissionError: If the caller is not an admin.
        """
        self._require_admin(admin)

        users = self.user_repository.select_columns(["createdAt"])
        jobs = self.job_repository.select_columns(["createdAt", "approved", "industry", "jobType"])
        applications = self.application_repository.select_columns(["createdAt", "status"])
        approved_jobs = [job for job in jobs if job.get("approved")]

        return {
            "userGrowth": monthly_counts(users),
            "jobTrends": monthly_counts(jobs, count_approved=True),
            "applicationTrends": monthly_counts(applications),
            "topIndustries": ranked_counts(approved_jobs, "industry", limit=TOP_INDUSTRIES_LIMIT),
            "topJobTypes": ranked_counts(approved_jobs, "jobType"),
            "applicationStatusDistribution": ranked_counts(applications, "status")
        }

    def list_applications(
        self,
        admin: User,
        status: Optional[ApplicationStatus] = None,
        page: int = 1,
        limit: int = 20
    ) -> Dict[str, Any]:
        """List every application on the platform, newest first."""
        self._require_admin(admin)

        filters = {"status": ApplicationStatus(status).value} if status else {}
        records, total = self.application_repository.find(
            filters, offset=page_offset(page, limit), limit=limit
        )
        return {
            "applications": [Application.model_validate(record) for record in records],
            "pagination": build_pagination(page, limit, total, len(records)),
            "total": total
        }

    @staticmethod
    def _require_admin(user: User) -> None:
        if not user.is_admin:
            logger.warning(f"User {user.id} refused admin access")
            raise PermissionError("Admin access required")
