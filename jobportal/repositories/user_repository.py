"""Repository for user account data access operations."""

from typing import Dict, List, Optional, Any, Tuple

from supabase import Client

from jobportal.constants import USERS_TABLE
from jobportal.repositories.base_repository import BaseRepository, sanitize_pattern


class UserRepository(BaseRepository):
    """Repository for managing user accounts and profiles.

    Attributes:
        db_client: Supabase client instance for database operations.
    """

    def __init__(self, db_client: Client):
        super().__init__(db_client, USERS_TABLE)

    def search(
        self,
        role: Optional[str] = None,
        is_active: Optional[bool] = None,
        search: Optional[str] = None,
        offset: int = 0,
        limit: int = 20
    ) -> Tuple[List[Dict[str, Any]], int]:
        """List users for administration.

        Args:
            role: Optional role filter.
            is_active: Optional active-flag filter.
            search: Text matched against first name, last name and email.
            offset: Number of records to skip.
            limit: Maximum number of records to return.

        Returns:
            Tuple of (user records, total number of matching users).
        """
        try:
            query = self.db_client.table(self.table_name).select("*", count="exact")

            if role:
                query = query.eq("role", role)
            if is_active is not None:
                query = query.eq("isActive", is_active)
            if search:
                term = sanitize_pattern(search)
                query = query.or_(
                    f"profile->>firstName.ilike.%{term}%,"
                    f"profile->>lastName.ilike.%{term}%,"
                    f"email.ilike.%{term}%"
                )

            response = (
                query.order("createdAt", desc=True)
                .range(offset, offset + limit - 1)
                .execute()
            )
            return response.data, response.count or 0
        except Exception as error:
            raise Exception(f"Failed to search users: {str(error)}")
