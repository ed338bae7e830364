"""Repository for job data access operations."""

from typing import Dict, List, Optional, Any, Tuple

from supabase import Client

from jobportal.constants import JOBS_TABLE, INCREMENT_JOB_COUNTER_RPC
from jobportal.models.job import JobSearchFilters, JobSort
from jobportal.repositories.base_repository import BaseRepository, sanitize_pattern


class JobRepository(BaseRepository):
    """Repository for managing job data persistence.

    Attributes:
        db_client: Supabase client instance for database operations.
    """

    internal_columns = ("searchText", "requiredSkills")

    def __init__(self, db_client: Client):
        """Initialize the repository with a database client.

        Args:
            db_client: Supabase client instance.
        """
        super().__init__(db_client, JOBS_TABLE)

    def search(
        self,
        filters: JobSearchFilters,
        offset: int = 0,
        limit: int = 10
    ) -> Tuple[List[Dict[str, Any]], int]:
        """Search active, approved jobs.

        Args:
            filters: Listing filters and sort order.
            offset: Number of records to skip.
            limit: Maximum number of records to return.

        Returns:
            Tuple of (job records, total number of matching jobs).

        Raises:
            Exception: If database query fails.
        """
        try:
            query = (
                self.db_client.table(self.table_name)
                .select("*", count="exact")
                .eq("status", "active")
                .eq("approved", True)
            )

            if filters.search:
                # searchText covers title, description, company, location, tags and keywords
                query = query.ilike("searchText", f"%{sanitize_pattern(filters.search)}%")

            if filters.location:
                term = sanitize_pattern(filters.location)
                query = query.or_(
                    f"location->>city.ilike.%{term}%,"
                    f"location->>state.ilike.%{term}%,"
                    f"location->>country.ilike.%{term}%"
                )

            if filters.job_type:
                query = query.eq("jobType", filters.job_type)
            if filters.industry:
                query = query.ilike("industry", f"%{sanitize_pattern(filters.industry)}%")
            if filters.level:
                query = query.eq("level", filters.level)
            if filters.remote is not None:
                query = query.eq("location->>remote", "true" if filters.remote else "false")
            if filters.salary_min is not None:
                query = query.gte("salary->min", filters.salary_min)
            if filters.salary_max is not None:
                query = query.lte("salary->max", filters.salary_max)

            for column, descending in self._sort_columns(filters.sort):
                query = query.order(column, desc=descending)

            response = query.range(offset, offset + limit - 1).execute()
            return [self._public(record) for record in response.data], response.count or 0
        except Exception as error:
            raise Exception(f"Failed to search jobs: {str(error)}")

    @staticmethod
    def _sort_columns(sort: str) -> List[Tuple[str, bool]]:
        if sort == JobSort.OLDEST.value:
            return [("createdAt", False)]
        if sort == JobSort.SALARY_HIGH.value:
            return [("salary->max", True)]
        if sort == JobSort.SALARY_LOW.value:
            return [("salary->min", False)]
        if sort == JobSort.NEWEST.value:
            # Featured jobs first
            return [("isFeatured", True), ("createdAt", True)]
        return [("createdAt", True)]

    def get_open_jobs(
        self,
        job_types: Optional[List[str]] = None,
        skills: Optional[List[str]] = None,
        location: Optional[Dict[str, Optional[str]]] = None,
        limit: int = 50
    ) -> List[Dict[str, Any]]:
        """Retrieve active, approved jobs, featured and newest first.

        Args:
            job_types: Optional job types to restrict to.
            skills: Keep only jobs requiring at least one of these skills.
            location: City, state and country; keep jobs matching any of
                them, plus remote jobs.
            limit: Maximum number of records to return.

        Returns:
            List of job records.
        """
        try:
            query = (
                self.db_client.table(self.table_name)
                .select("*")
                .eq("status", "active")
                .eq("approved", True)
            )

            if job_types:
                query = query.in_("jobType", job_types)
            if skills:
                query = query.ov("requiredSkills", skills)

            conditions = [
                f"location->>{key}.ilike.%{sanitize_pattern(value)}%"
                for key, value in (location or {}).items()
                if value and sanitize_pattern(value)
            ]
            if conditions:
                conditions.append("location->>remote.eq.true")
                query = query.or_(",".join(conditions))

            response = (
                query.order("isFeatured", desc=True)
                .order("createdAt", desc=True)
                .limit(limit)
                .execute()
            )
            return [self._public(record) for record in response.data]
        except Exception as error:
            raise Exception(f"Failed to get open jobs: {str(error)}")

    def search_admin(
        self,
        status: Optional[str] = None,
        approved: Optional[bool] = None,
        search: Optional[str] = None,
        offset: int = 0,
        limit: int = 20
    ) -> Tuple[List[Dict[str, Any]], int]:
        """List jobs of any status for moderation.

        Returns:
            Tuple of (job records, total number of matching jobs).
        """
        try:
            query = self.db_client.table(self.table_name).select("*", count="exact")

            if status:
                query = query.eq("status", status)
            if approved is not None:
                query = query.eq("approved", approved)
            if search:
                term = sanitize_pattern(search)
                query = query.or_(
                    f"title.ilike.%{term}%,companyName.ilike.%{term}%,description.ilike.%{term}%"
                )

            response = (
                query.order("createdAt", desc=True)
                .range(offset, offset + limit - 1)
                .execute()
            )
            return [self._public(record) for record in response.data], response.count or 0
        except Exception as error:
            raise Exception(f"Failed to search jobs for moderation: {str(error)}")

    def increment_counter(self, job_id: str, counter: str) -> int:
        """Atomically increment a job counter in the database.

        Args:
            job_id: The unique identifier of the job.
            counter: "applicationCount" or "views".

        Returns:
            The counter value after the increment.

        Raises:
            Exception: If the RPC call fails.
        """
        try:
            response = self.db_client.rpc(
                INCREMENT_JOB_COUNTER_RPC,
                {"job_id": job_id, "counter": counter}
            ).execute()
            return response.data or 0
        except Exception as error:
            raise Exception(f"Failed to increment job {counter}: {str(error)}")
