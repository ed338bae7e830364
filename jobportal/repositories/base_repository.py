"""Base repository with common CRUD operations for all repositories."""

from typing import Dict, List, Optional, Any, Tuple

from postgrest.exceptions import APIError
from supabase import Client

from jobportal.constants import FETCH_BATCH_SIZE, UNIQUE_VIOLATION_CODE


class DuplicateRecordError(Exception):
    """Raised when an insert or update violates a unique constraint."""


def sanitize_pattern(value: str) -> str:
    """Strip characters that would break PostgREST `or` filter syntax."""
    return "".join(char for char in value if char not in ",()*%\\").strip()


class BaseRepository:
    """Base repository providing common CRUD operations.

    Encapsulates standard database operations that are shared across
    all repositories, reducing code duplication and ensuring consistency.

    Attributes:
        db_client: Supabase client instance for database operations.
        table_name: Name of the database table this repository manages.
        internal_columns: Generated columns dropped from returned records.
    """

    internal_columns: Tuple[str, ...] = ()

    def __init__(self, db_client: Client, table_name: str):
        """Initialize the base repository.

        Args:
            db_client: Supabase client instance.
            table_name: Name of the database table (e.g., "jobs", "applications").
        """
        self.db_client = db_client
        self.table_name = table_name

    def _public(self, record: Dict[str, Any]) -> Dict[str, Any]:
        for column in self.internal_columns:
            record.pop(column, None)
        return record

    def get_by_id(self, record_id: str) -> Optional[Dict[str, Any]]:
        """Retrieve a single record by its ID.

        Args:
            record_id: The unique identifier of the record.

        Returns:
            Record as dictionary if found, None otherwise.

        Raises:
            Exception: If database query fails.
        """
        try:
            response = (
                self.db_client.table(self.table_name)
                .select("*")
                .eq("id", record_id)
                .limit(1)
                .execute()
            )
            return self._public(response.data[0]) if response.data else None
        except Exception as error:
            raise Exception(f"Failed to get {self.table_name} by ID: {str(error)}")

    def find(
        self,
        filters: Optional[Dict[str, Any]] = None,
        offset: int = 0,
        limit: Optional[int] = None,
        order_by: str = "createdAt",
        descending: bool = True
    ) -> Tuple[List[Dict[str, Any]], int]:
        """Retrieve a page of records matching equality filters.

        Args:
            filters: Column-value pairs combined with AND.
            offset: Number of records to skip.
            limit: Maximum number of records to return (None for all).
            order_by: Column to sort by.
            descending: Sort direction.

        Returns:
            Tuple of (records, total number of matching records).

        Raises:
            Exception: If database query fails.
        """
        try:
            query = self.db_client.table(self.table_name).select("*", count="exact")

            for column, value in (filters or {}).items():
                query = query.eq(column, value)

            query = query.order(order_by, desc=descending)

            if limit is not None:
                query = query.range(offset, offset + limit - 1)

            response = query.execute()
            return [self._public(record) for record in response.data], response.count or 0
        except Exception as error:
            raise Exception(f"Failed to query {self.table_name}: {str(error)}")

    def count(self, filters: Optional[Dict[str, Any]] = None) -> int:
        """Count records matching equality filters.

        Raises:
            Exception: If database query fails.
        """
        try:
            query = self.db_client.table(self.table_name).select("id", count="exact", head=True)

            for column, value in (filters or {}).items():
                query = query.eq(column, value)

            return query.execute().count or 0
        except Exception as error:
            raise Exception(f"Failed to count {self.table_name}: {str(error)}")

    def select_columns(
        self,
        columns: List[str],
        filters: Optional[Dict[str, Any]] = None
    ) -> List[Dict[str, Any]]:
        """Retrieve selected columns of every record matching equality filters.

        Reads in batches so the server-side row cap does not truncate the
        result.

        Args:
            columns: Column names to return.
            filters: Column-value pairs combined with AND.

        Returns:
            List of partial records.

        Raises:
            Exception: If database query fails.
        """
        rows: List[Dict[str, Any]] = []
        offset = 0
        try:
            while True:
                query = self.db_client.table(self.table_name).select(",".join(columns))
                for column, value in (filters or {}).items():
                    query = query.eq(column, value)

                response = query.order("id").range(offset, offset + FETCH_BATCH_SIZE - 1).execute()
                rows.extend(response.data)
                if len(response.data) < FETCH_BATCH_SIZE:
                    return rows
                offset += FETCH_BATCH_SIZE
        except Exception as error:
            raise Exception(f"Failed to read {self.table_name}: {str(error)}")

    def create(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """Insert a new record into the table.

        Args:
            data: Dictionary containing record data matching the table schema.

        Returns:
            Dictionary containing the inserted record.

        Raises:
            DuplicateRecordError: If a unique constraint is violated.
            Exception: If insertion fails for any other reason.
        """
        try:
            response = self.db_client.table(self.table_name).insert(data).execute()
            return self._public(response.data[0]) if response.data else {}
        except APIError as error:
            if error.code == UNIQUE_VIOLATION_CODE:
                raise DuplicateRecordError(f"Duplicate {self.table_name} record: {error.message}")
            raise Exception(f"Failed to create {self.table_name}: {error.message}")
        except Exception as error:
            raise Exception(f"Failed to create {self.table_name}: {str(error)}")

    def update(self, record_id: str, updates: Dict[str, Any]) -> Dict[str, Any]:
        """Update a record with new data.

        Args:
            record_id: The unique identifier of the record to update.
            updates: Dictionary of fields to update.

        Returns:
            Updated record as dictionary.

        Raises:
            ValueError: If the record does not exist.
            Exception: If update fails.
        """
        try:
            response = (
                self.db_client.table(self.table_name)
                .update(updates)
                .eq("id", record_id)
                .execute()
            )
        except Exception as error:
            raise Exception(f"Failed to update {self.table_name}: {str(error)}")

        if not response.data:
            raise ValueError(f"{self.table_name.rstrip('s').capitalize()} with ID {record_id} not found")

        return self._public(response.data[0])

    def delete(self, record_id: str) -> bool:
        """Delete a record from the table.

        Args:
            record_id: The unique identifier of the record to delete.

        Returns:
            True if deletion was successful.

        Raises:
            Exception: If deletion fails.
        """
        try:
            (
                self.db_client.table(self.table_name)
                .delete()
                .eq("id", record_id)
                .execute()
            )
            return True
        except Exception as error:
            raise Exception(f"Failed to delete {self.table_name}: {str(error)}")
