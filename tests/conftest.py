"""Test configuration and fixtures.

Repositories are replaced by in-memory fakes exposing the same methods as
the Supabase-backed ones, including the unique (job, applicant) index on
applications and the atomic job counters.
"""

import copy
import itertools
import os
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional, Tuple

import pytest

# Test configuration, set before the application module reads its settings
TEST_LOG_DIR = "test_logs"
TEST_JWT_SECRET = "test-secret-key"

os.environ["LOG_DIR"] = TEST_LOG_DIR
os.environ["JWT_SECRET_KEY"] = TEST_JWT_SECRET
os.environ["ENFORCE_STATUS_TRANSITIONS"] = "false"

from jobportal.repositories.base_repository import DuplicateRecordError  # noqa: E402
from jobportal.services.admin_service import AdminService  # noqa: E402
from jobportal.services.application_service import ApplicationService  # noqa: E402
from jobportal.services.job_service import JobService  # noqa: E402
from jobportal.services.scoring_service import ScoringService  # noqa: E402
from jobportal.services.user_service import UserService  # noqa: E402
from tests.records import (  # noqa: E402
    ADMIN,
    CANDIDATE,
    CLOSED_JOB,
    EMPLOYER,
    FRONTEND_JOB,
    OTHER_CANDIDATE,
    OTHER_EMPLOYER,
    PENDING_JOB,
    REMOTE_JOB,
)

_CLOCK_START = datetime(2024, 1, 1, tzinfo=timezone.utc)


class FakeRepository:
    """In-memory stand-in for BaseRepository."""

    table_name = "records"
    unique_keys: Tuple[str, ...] = ()

    def __init__(self):
        self.records: Dict[str, Dict[str, Any]] = {}
        self._sequence = itertools.count()

    def seed(self, record: Dict[str, Any]) -> Dict[str, Any]:
        """Insert a record directly, bypassing unique checks."""
        record = copy.deepcopy(record)
        record.setdefault("id", str(uuid.uuid4()))
        record.setdefault("createdAt", self._next_timestamp())
        self.records[record["id"]] = record
        return copy.deepcopy(record)

    def get_by_id(self, record_id: str) -> Optional[Dict[str, Any]]:
        record = self.records.get(record_id)
        return copy.deepcopy(record) if record else None

    def find(
        self,
        filters: Optional[Dict[str, Any]] = None,
        offset: int = 0,
        limit: Optional[int] = None,
        order_by: str = "createdAt",
        descending: bool = True
    ) -> Tuple[List[Dict[str, Any]], int]:
        matches = self._match(filters)
        matches.sort(key=lambda record: record.get(order_by) or "", reverse=descending)
        page = matches[offset:offset + limit] if limit is not None else matches[offset:]
        return copy.deepcopy(page), len(matches)

    def count(self, filters: Optional[Dict[str, Any]] = None) -> int:
        return len(self._match(filters))

    def select_columns(self, columns: List[str], filters: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        return [{column: record.get(column) for column in columns} for record in self._match(filters)]

    def create(self, data: Dict[str, Any]) -> Dict[str, Any]:
        for existing in self.records.values():
            if self.unique_keys and all(existing.get(key) == data.get(key) for key in self.unique_keys):
                raise DuplicateRecordError(f"Duplicate {self.table_name} record")
        return self.seed(data)

    def update(self, record_id: str, updates: Dict[str, Any]) -> Dict[str, Any]:
        if record_id not in self.records:
            raise ValueError(f"Record with ID {record_id} not found")
        self.records[record_id].update(copy.deepcopy(updates))
        return copy.deepcopy(self.records[record_id])

    def delete(self, record_id: str) -> bool:
        self.records.pop(record_id, None)
        return True

    def _match(self, filters: Optional[Dict[str, Any]]) -> List[Dict[str, Any]]:
        return [
            record for record in self.records.values()
            if all(record.get(column) == value for column, value in (filters or {}).items())
        ]

    def _next_timestamp(self) -> str:
        return (_CLOCK_START + timedelta(seconds=next(self._sequence))).isoformat()


def _contains(value: Optional[str], term: str) -> bool:
    return bool(value) and term.lower() in value.lower()


def _search_text(job: Dict[str, Any]) -> str:
    location = job.get("location") or {}
    parts = [job.get("title"), job.get("description"), job.get("companyName")]
    parts += [location.get(key) for key in ("city", "state", "country")]
    parts += (job.get("tags") or []) + (job.get("keywords") or [])
    return " ".join(part for part in parts if part)


def _near(job: Dict[str, Any], location: Optional[Dict[str, Optional[str]]]) -> bool:
    places = {key: value for key, value in (location or {}).items() if value}
    if not places:
        return True
    job_location = job.get("location") or {}
    return bool(job_location.get("remote")) or any(
        _contains(job_location.get(key), value) for key, value in places.items()
    )


class FakeJobRepository(FakeRepository):
    table_name = "jobs"

    def search(self, filters, offset: int = 0, limit: int = 10):
        matches = [
            job for job in self.records.values()
            if job.get("status") == "active" and job.get("approved")
        ]
        if filters.search:
            matches = [job for job in matches if _contains(_search_text(job), filters.search)]
        if filters.location:
            matches = [
                job for job in matches
                if any(_contains((job.get("location") or {}).get(key), filters.location)
                       for key in ("city", "state", "country"))
            ]
        if filters.job_type:
            matches = [job for job in matches if job.get("jobType") == filters.job_type]
        if filters.level:
            matches = [job for job in matches if job.get("level") == filters.level]
        if filters.remote is not None:
            matches = [job for job in matches if bool((job.get("location") or {}).get("remote")) == filters.remote]

        matches.sort(key=lambda job: job.get("createdAt") or "", reverse=filters.sort != "oldest")
        return copy.deepcopy(matches[offset:offset + limit]), len(matches)

    def get_open_jobs(self, job_types=None, skills=None, location=None, limit: int = 50):
        jobs = [
            job for job in self.records.values()
            if job.get("status") == "active" and job.get("approved")
            and (not job_types or job.get("jobType") in job_types)
            and (not skills or set(skills) & set((job.get("requirements") or {}).get("skills") or []))
            and _near(job, location)
        ]
        jobs.sort(key=lambda job: job.get("createdAt") or "", reverse=True)
        return copy.deepcopy(jobs[:limit])

    def search_admin(self, status=None, approved=None, search=None, offset: int = 0, limit: int = 20):
        filters = {}
        if status:
            filters["status"] = status
        if approved is not None:
            filters["approved"] = approved
        matches = self._match(filters)
        if search:
            matches = [job for job in matches if _contains(job.get("title"), search)]
        return copy.deepcopy(matches[offset:offset + limit]), len(matches)

    def increment_counter(self, job_id: str, counter: str) -> int:
        job = self.records[job_id]
        job[counter] = (job.get(counter) or 0) + 1
        return job[counter]


class FakeApplicationRepository(FakeRepository):
    table_name = "applications"
    unique_keys = ("job", "applicant")

    def __init__(self):
        super().__init__()
        # Simulates a concurrent submission slipping past the pre-check
        self.hide_existing = False

    def get_by_job_and_applicant(self, job_id: str, applicant_id: str):
        if self.hide_existing:
            return None
        matches = self._match({"job": job_id, "applicant": applicant_id})
        return copy.deepcopy(matches[0]) if matches else None

    def apply_change(self, application_id: str, changes, timeline_entry=None, communication=None):
        if application_id not in self.records:
            raise ValueError(f"Application with ID {application_id} not found")
        record = self.records[application_id]
        record.update(copy.deepcopy(changes))
        if timeline_entry is not None:
            record.setdefault("timeline", []).append(copy.deepcopy(timeline_entry))
        if communication is not None:
            record.setdefault("communications", []).append(copy.deepcopy(communication))
        return copy.deepcopy(record)


class FakeUserRepository(FakeRepository):
    table_name = "users"

    def search(self, role=None, is_active=None, search=None, offset: int = 0, limit: int = 20):
        filters = {}
        if role:
            filters["role"] = role
        if is_active is not None:
            filters["isActive"] = is_active
        matches = self._match(filters)
        if search:
            matches = [user for user in matches if _contains(user.get("email"), search)]
        return copy.deepcopy(matches[offset:offset + limit]), len(matches)


@pytest.fixture
def user_repository():
    repository = FakeUserRepository()
    for record in (CANDIDATE, OTHER_CANDIDATE, EMPLOYER, OTHER_EMPLOYER, ADMIN):
        repository.seed(record)
    return repository


@pytest.fixture
def job_repository():
    repository = FakeJobRepository()
    for record in (FRONTEND_JOB, REMOTE_JOB, CLOSED_JOB, PENDING_JOB):
        repository.seed(record)
    return repository


@pytest.fixture
def application_repository():
    return FakeApplicationRepository()


@pytest.fixture
def user_service(user_repository):
    return UserService(user_repository)


@pytest.fixture
def job_service(job_repository):
    return JobService(job_repository, ScoringService())


@pytest.fixture
def application_service(application_repository, job_repository):
    return ApplicationService(application_repository, job_repository)


@pytest.fixture
def admin_service(user_repository, job_repository, application_repository):
    return AdminService(user_repository, job_repository, application_repository)


@pytest.fixture
def candidate(user_service):
    return user_service.get_user(CANDIDATE["id"])


@pytest.fixture
def other_candidate(user_service):
    return user_service.get_user(OTHER_CANDIDATE["id"])


@pytest.fixture
def employer(user_service):
    return user_service.get_user(EMPLOYER["id"])


@pytest.fixture
def other_employer(user_service):
    return user_service.get_user(OTHER_EMPLOYER["id"])


@pytest.fixture
def admin(user_service):
    return user_service.get_user(ADMIN["id"])


@pytest.fixture
def client(user_repository, job_repository, application_repository):
    """TestClient wired to the in-memory repositories."""
    from fastapi.testclient import TestClient

    from jobportal.api.dependencies import (
        get_application_repository,
        get_job_repository,
        get_user_repository,
    )
    from jobportal.main import app

    app.dependency_overrides[get_user_repository] = lambda: user_repository
    app.dependency_overrides[get_job_repository] = lambda: job_repository
    app.dependency_overrides[get_application_repository] = lambda: application_repository
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    """Build a bearer header for a user ID."""
    from jobportal.auth import create_access_token

    def _headers(user_id: str) -> Dict[str, str]:
        return {"Authorization": f"Bearer {create_access_token(user_id)}"}

    return _headers
