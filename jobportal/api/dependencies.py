"""FastAPI dependency providers for repositories and services.

Each provider builds on the process-wide Supabase client. Tests swap the
repository providers through `app.dependency_overrides`.
"""

from fastapi import Depends

from jobportal.config import get_settings
from jobportal.database.client import get_supabase
from jobportal.repositories.application_repository import ApplicationRepository
from jobportal.repositories.job_repository import JobRepository
from jobportal.repositories.user_repository import UserRepository
from jobportal.services.admin_service import AdminService
from jobportal.services.application_service import ApplicationService
from jobportal.services.job_service import JobService
from jobportal.services.scoring_service import ScoringService
from jobportal.services.user_service import UserService


# Repositories
def get_user_repository() -> UserRepository:
    return UserRepository(get_supabase())


def get_job_repository() -> JobRepository:
    return JobRepository(get_supabase())


def get_application_repository() -> ApplicationRepository:
    return ApplicationRepository(get_supabase())


# Services
def get_scoring_service() -> ScoringService:
    return ScoringService()


def get_user_service(
    user_repository: UserRepository = Depends(get_user_repository)
) -> UserService:
    return UserService(user_repository)


def get_job_service(
    job_repository: JobRepository = Depends(get_job_repository),
    scoring_service: ScoringService = Depends(get_scoring_service)
) -> JobService:
    return JobService(job_repository, scoring_service)


def get_application_service(
    application_repository: ApplicationRepository = Depends(get_application_repository),
    job_repository: JobRepository = Depends(get_job_repository)
) -> ApplicationService:
    return ApplicationService(
        application_repository,
        job_repository,
        enforce_transitions=get_settings().enforce_status_transitions
    )


def get_admin_service(
    user_repository: UserRepository = Depends(get_user_repository),
    job_repository: JobRepository = Depends(get_job_repository),
    application_repository: ApplicationRepository = Depends(get_application_repository)
) -> AdminService:
    return AdminService(user_repository, job_repository, application_repository)
