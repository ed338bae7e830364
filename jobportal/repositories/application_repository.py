"""Repository for application data access operations."""

from typing import Dict, Optional, Any

from supabase import Client

from jobportal.constants import APPLICATIONS_TABLE, APPLY_APPLICATION_CHANGE_RPC
from jobportal.repositories.base_repository import BaseRepository


class ApplicationRepository(BaseRepository):
    """Repository for managing job application persistence.

    The applications table carries a unique index on (job, applicant);
    `create` raises DuplicateRecordError when it is violated.

    Attributes:
        db_client: Supabase client instance for database operations.
    """

    def __init__(self, db_client: Client):
        super().__init__(db_client, APPLICATIONS_TABLE)

    def get_by_job_and_applicant(self, job_id: str, applicant_id: str) -> Optional[Dict[str, Any]]:
        """Retrieve the application a candidate submitted for a job, if any.

        Args:
            job_id: The job's unique identifier.
            applicant_id: The candidate's unique identifier.

        Returns:
            Application record if found, None otherwise.
        """
        try:
            response = (
                self.db_client.table(self.table_name)
                .select("*")
                .eq("job", job_id)
                .eq("applicant", applicant_id)
                .limit(1)
                .execute()
            )
            return response.data[0] if response.data else None
        except Exception as error:
            raise Exception(f"Failed to get application by job and applicant: {str(error)}")

    def apply_change(
        self,
        application_id: str,
        changes: Dict[str, Any],
        timeline_entry: Optional[Dict[str, Any]] = None,
        communication: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        """Write a lifecycle change in one database call.

        Replaces the columns in `changes` and appends the timeline entry and
        communication to their arrays server-side, so concurrent changes to
        the same application never overwrite each other's entries.

        Args:
            application_id: The application's unique identifier.
            changes: Column values to replace (status, interview, evaluation, offer).
            timeline_entry: Timeline entry to append, if any.
            communication: Communication to append, if any.

        Returns:
            The updated application record.

        Raises:
            ValueError: If the application does not exist.
            Exception: If the RPC call fails.
        """
        try:
            response = self.db_client.rpc(
                APPLY_APPLICATION_CHANGE_RPC,
                {
                    "application_id": application_id,
                    "changes": changes,
                    "timeline_entry": timeline_entry,
                    "communication": communication
                }
            ).execute()
        except Exception as error:
            raise Exception(f"Failed to update application: {str(error)}")

        if not response.data:
            raise ValueError(f"Application with ID {application_id} not found")

        return response.data
