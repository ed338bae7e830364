"""FastAPI application for the job portal: jobs, applications, users and admin."""

import logging
from typing import Optional

from fastapi import Depends, FastAPI, Query, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from jobportal.api.dependencies import (
    get_admin_service,
    get_application_service,
    get_job_service,
    get_user_service,
)
from jobportal.api.schemas.application_schemas import (
    CommunicationRequest,
    EvaluateRequest,
    MakeOfferRequest,
    ScheduleInterviewRequest,
    SubmitApplicationRequest,
    UpdateStatusRequest,
)
from jobportal.api.schemas.job_schemas import (
    CreateJobRequest,
    JobListResponse,
    RejectJobRequest,
    UpdateJobRequest,
)
from jobportal.api.schemas.responses import (
    ApplicationListResponse,
    ApplicationResponse,
    ApplicationStatsResponse,
    MessageResponse,
)
from jobportal.api.schemas.user_schemas import (
    AddEducationRequest,
    AddExperienceRequest,
    ResumeRequest,
    UpdateCandidateProfileRequest,
    UpdateEducationRequest,
    UpdateEmployerProfileRequest,
    UpdateExperienceRequest,
    UpdateProfileRequest,
    UpdateUserRoleRequest,
    UpdateUserStatusRequest,
)
from jobportal.auth import get_current_user, get_optional_user, require_admin
from jobportal.config import get_settings
from jobportal.logging_config import setup_logging
from jobportal.models import (
    Application,
    ApplicationStatus,
    JobLevel,
    JobSearchFilters,
    JobSort,
    JobStatus,
    JobType,
    User,
    UserRole,
)
from jobportal.services.admin_service import AdminService
from jobportal.services.application_service import ApplicationService
from jobportal.services.job_service import JobService
from jobportal.services.user_service import UserService

settings = get_settings()
setup_logging("jobportal", level=settings.log_level, log_dir=settings.log_dir)
logger = logging.getLogger(__name__)


app = FastAPI(title="Job Portal API")

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Global exception handlers
@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    """Return field-level validation errors as 400 Bad Request."""
    return JSONResponse(
        status_code=400,
        content={"errors": jsonable_encoder(exc.errors())}
    )


@app.exception_handler(ValueError)
async def value_error_handler(request: Request, exc: ValueError):
    """Convert ValueError to appropriate HTTP exception.

    - "not found" → 404 Not Found
    - Everything else (invalid state, duplicates) → 400 Bad Request
    """
    status_code = 404 if "not found" in str(exc).lower() else 400
    return JSONResponse(
        status_code=status_code,
        content={"detail": str(exc)}
    )


@app.exception_handler(PermissionError)
async def permission_error_handler(request: Request, exc: PermissionError):
    """Convert PermissionError to 403 Forbidden."""
    return JSONResponse(
        status_code=403,
        content={"detail": str(exc)}
    )


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception):
    """Convert unhandled exceptions to 500 Internal Server Error.

    The traceback is logged; clients only see a generic message. Malformed
    UUIDs rejected by the database are reported as 404.
    """
    if "invalid input syntax for type uuid" in str(exc).lower():
        return JSONResponse(
            status_code=404,
            content={"detail": "Resource not found"}
        )

    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=500,
        content={"detail": "Server error"}
    )


@app.get("/")
def root():
    """Health check endpoint.

    Returns:
        Dictionary with status indicator.
    """
    return {"status": "ok"}


# Job endpoints
@app.get("/api/jobs", response_model=JobListResponse)
def list_jobs(
    page: int = Query(1, ge=1),
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    search: Optional[str] = None,
    location: Optional[str] = None,
    job_type: Optional[JobType] = Query(None, alias="jobType"),
    industry: Optional[str] = None,
    level: Optional[JobLevel] = None,
    remote: Optional[bool] = None,
    salary_min: Optional[float] = Query(None, alias="salaryMin", ge=0),
    salary_max: Optional[float] = Query(None, alias="salaryMax", ge=0),
    sort: JobSort = JobSort.NEWEST,
    viewer: Optional[User] = Depends(get_optional_user),
    job_service: JobService = Depends(get_job_service)
):
    """List active, approved jobs.

    Anonymous callers may browse. Authenticated candidates additionally get
    a `matchScore` on every job.

    Example:
        GET /api/jobs?search=python&jobType=full-time&remote=true&page=2
    """
    filters = JobSearchFilters(
        search=search,
        location=location,
        job_type=job_type,
        industry=industry,
        level=level,
        remote=remote,
        salary_min=salary_min,
        salary_max=salary_max,
        sort=sort
    )
    return job_service.list_jobs(filters, page=page, limit=limit, viewer=viewer)


@app.get("/api/jobs/recommended")
def recommended_jobs(
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    user: User = Depends(get_current_user),
    job_service: JobService = Depends(get_job_service)
):
    """Open jobs ranked by match score for the calling candidate."""
    return job_service.recommended_jobs(user, limit=limit)


@app.get("/api/jobs/employer/my-jobs", response_model=JobListResponse)
def my_jobs(
    page: int = Query(1, ge=1),
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    status: Optional[JobStatus] = None,
    user: User = Depends(get_current_user),
    job_service: JobService = Depends(get_job_service)
):
    """Jobs posted by the calling employer, any status."""
    return job_service.list_employer_jobs(user, status=status, page=page, limit=limit)


@app.get("/api/jobs/{job_id}")
def get_job(
    job_id: str,
    viewer: Optional[User] = Depends(get_optional_user),
    job_service: JobService = Depends(get_job_service)
):
    """Get a job by ID. Each call counts one view."""
    return job_service.get_job(job_id, viewer=viewer)


@app.post("/api/jobs", status_code=201)
def create_job(
    request: CreateJobRequest,
    user: User = Depends(get_current_user),
    job_service: JobService = Depends(get_job_service)
):
    """Post a new job as the calling employer."""
    return job_service.create_job(user, request)


@app.put("/api/jobs/{job_id}")
def update_job(
    job_id: str,
    request: UpdateJobRequest,
    user: User = Depends(get_current_user),
    job_service: JobService = Depends(get_job_service)
):
    """Update a job owned by the caller. Unknown fields are ignored."""
    return job_service.update_job(job_id, user, request)


@app.delete("/api/jobs/{job_id}", response_model=MessageResponse)
def delete_job(
    job_id: str,
    user: User = Depends(get_current_user),
    job_service: JobService = Depends(get_job_service)
):
    """Delete a job owned by the caller."""
    job_service.delete_job(job_id, user)
    return MessageResponse(message="Job deleted successfully")


@app.post("/api/jobs/{job_id}/approve")
def approve_job(
    job_id: str,
    admin: User = Depends(require_admin),
    job_service: JobService = Depends(get_job_service)
):
    """Approve a pending job (admins only)."""
    job = job_service.approve_job(job_id, admin)
    return {"message": "Job approved successfully", "job": job}


# Application endpoints
@app.post("/api/applications", response_model=ApplicationResponse, status_code=201)
def submit_application(
    request: SubmitApplicationRequest,
    user: User = Depends(get_current_user),
    application_service: ApplicationService = Depends(get_application_service)
):
    """Apply to a job as the calling candidate."""
    application = application_service.submit_application(user, request)
    return ApplicationResponse(message="Application submitted successfully", application=application)


@app.get("/api/applications", response_model=ApplicationListResponse)
def list_applications(
    page: int = Query(1, ge=1),
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    status: Optional[ApplicationStatus] = None,
    job_id: Optional[str] = Query(None, alias="jobId"),
    user: User = Depends(get_current_user),
    application_service: ApplicationService = Depends(get_application_service)
):
    """Applications visible to the caller: own for candidates, received for employers."""
    return application_service.list_applications(user, status=status, job_id=job_id, page=page, limit=limit)


@app.get("/api/applications/stats/dashboard", response_model=ApplicationStatsResponse)
def application_stats(
    user: User = Depends(get_current_user),
    application_service: ApplicationService = Depends(get_application_service)
):
    """Per-status application counts in the caller's scope."""
    return application_service.get_stats(user)


@app.get("/api/applications/{application_id}", response_model=Application)
def get_application(
    application_id: str,
    user: User = Depends(get_current_user),
    application_service: ApplicationService = Depends(get_application_service)
):
    return application_service.get_application(application_id, user)


@app.put("/api/applications/{application_id}/status", response_model=ApplicationResponse)
def update_application_status(
    application_id: str,
    request: UpdateStatusRequest,
    user: User = Depends(get_current_user),
    application_service: ApplicationService = Depends(get_application_service)
):
    """Move an application to a new status (employer or admin)."""
    application = application_service.update_status(application_id, user, request.status, request.notes)
    return ApplicationResponse(message="Application status updated successfully", application=application)


@app.post("/api/applications/{application_id}/interview", response_model=ApplicationResponse)
def schedule_interview(
    application_id: str,
    request: ScheduleInterviewRequest,
    user: User = Depends(get_current_user),
    application_service: ApplicationService = Depends(get_application_service)
):
    application = application_service.schedule_interview(application_id, user, request)
    return ApplicationResponse(message="Interview scheduled successfully", application=application)


@app.post("/api/applications/{application_id}/evaluate", response_model=ApplicationResponse)
def evaluate_application(
    application_id: str,
    request: EvaluateRequest,
    user: User = Depends(get_current_user),
    application_service: ApplicationService = Depends(get_application_service)
):
    """Record evaluation ratings and notes. Ratings are integers 1-5."""
    application = application_service.evaluate(application_id, user, request)
    return ApplicationResponse(message="Application evaluated successfully", application=application)


@app.post("/api/applications/{application_id}/offer", response_model=ApplicationResponse)
def make_offer(
    application_id: str,
    request: MakeOfferRequest,
    user: User = Depends(get_current_user),
    application_service: ApplicationService = Depends(get_application_service)
):
    application = application_service.make_offer(application_id, user, request)
    return ApplicationResponse(message="Job offer made successfully", application=application)


@app.post("/api/applications/{application_id}/accept-offer", response_model=ApplicationResponse)
def accept_offer(
    application_id: str,
    user: User = Depends(get_current_user),
    application_service: ApplicationService = Depends(get_application_service)
):
    application = application_service.accept_offer(application_id, user)
    return ApplicationResponse(message="Offer accepted successfully", application=application)


@app.post("/api/applications/{application_id}/withdraw", response_model=ApplicationResponse)
def withdraw_application(
    application_id: str,
    user: User = Depends(get_current_user),
    application_service: ApplicationService = Depends(get_application_service)
):
    application = application_service.withdraw(application_id, user)
    return ApplicationResponse(message="Application withdrawn successfully", application=application)


@app.post("/api/applications/{application_id}/communications", response_model=ApplicationResponse)
def add_communication(
    application_id: str,
    request: CommunicationRequest,
    user: User = Depends(get_current_user),
    application_service: ApplicationService = Depends(get_application_service)
):
    application = application_service.add_communication(application_id, user, request)
    return ApplicationResponse(message="Communication added successfully", application=application)


# User profile endpoints
@app.get("/api/users/profile", response_model=User)
def get_profile(
    user: User = Depends(get_current_user),
    user_service: UserService = Depends(get_user_service)
):
    return user_service.get_profile(user)


@app.put("/api/users/profile")
def update_profile(
    request: UpdateProfileRequest,
    user: User = Depends(get_current_user),
    user_service: UserService = Depends(get_user_service)
):
    updated = user_service.update_profile(user, request)
    return {"message": "Profile updated successfully", "user": updated}


@app.put("/api/users/candidate-profile")
def update_candidate_profile(
    request: UpdateCandidateProfileRequest,
    user: User = Depends(get_current_user),
    user_service: UserService = Depends(get_user_service)
):
    updated = user_service.update_candidate_profile(user, request)
    return {"message": "Candidate profile updated successfully", "user": updated}


@app.post("/api/users/candidate-profile/experience")
def add_experience(
    request: AddExperienceRequest,
    user: User = Depends(get_current_user),
    user_service: UserService = Depends(get_user_service)
):
    experience = user_service.add_experience(user, request)
    return {"message": "Experience added successfully", "experience": experience}


@app.put("/api/users/candidate-profile/experience/{entry_id}")
def update_experience(
    entry_id: str,
    request: UpdateExperienceRequest,
    user: User = Depends(get_current_user),
    user_service: UserService = Depends(get_user_service)
):
    experience = user_service.update_experience(user, entry_id, request)
    return {"message": "Experience updated successfully", "experience": experience}


@app.delete("/api/users/candidate-profile/experience/{entry_id}", response_model=MessageResponse)
def delete_experience(
    entry_id: str,
    user: User = Depends(get_current_user),
    user_service: UserService = Depends(get_user_service)
):
    user_service.delete_experience(user, entry_id)
    return {"message": "Experience deleted successfully"}


@app.post("/api/users/candidate-profile/education")
def add_education(
    request: AddEducationRequest,
    user: User = Depends(get_current_user),
    user_service: UserService = Depends(get_user_service)
):
    education = user_service.add_education(user, request)
    return {"message": "Education added successfully", "education": education}


@app.put("/api/users/candidate-profile/education/{entry_id}")
def update_education(
    entry_id: str,
    request: UpdateEducationRequest,
    user: User = Depends(get_current_user),
    user_service: UserService = Depends(get_user_service)
):
    education = user_service.update_education(user, entry_id, request)
    return {"message": "Education updated successfully", "education": education}


@app.delete("/api/users/candidate-profile/education/{entry_id}", response_model=MessageResponse)
def delete_education(
    entry_id: str,
    user: User = Depends(get_current_user),
    user_service: UserService = Depends(get_user_service)
):
    user_service.delete_education(user, entry_id)
    return {"message": "Education deleted successfully"}


@app.post("/api/users/resume")
def set_resume(
    request: ResumeRequest,
    user: User = Depends(get_current_user),
    user_service: UserService = Depends(get_user_service)
):
    """Store the URL of a resume hosted elsewhere."""
    resume = user_service.set_resume(user, request)
    return {"message": "Resume uploaded successfully", "resume": resume}


@app.delete("/api/users/resume", response_model=MessageResponse)
def delete_resume(
    user: User = Depends(get_current_user),
    user_service: UserService = Depends(get_user_service)
):
    user_service.delete_resume(user)
    return {"message": "Resume deleted successfully"}


@app.put("/api/users/employer-profile")
def update_employer_profile(
    request: UpdateEmployerProfileRequest,
    user: User = Depends(get_current_user),
    user_service: UserService = Depends(get_user_service)
):
    updated = user_service.update_employer_profile(user, request)
    return {"message": "Employer profile updated successfully", "user": updated}


# Admin endpoints
@app.get("/api/admin/dashboard")
def admin_dashboard(
    admin: User = Depends(require_admin),
    admin_service: AdminService = Depends(get_admin_service)
):
    """Platform-wide counts of users, jobs and applications."""
    return admin_service.dashboard(admin)


@app.get("/api/admin/analytics")
def admin_analytics(
    admin: User = Depends(require_admin),
    admin_service: AdminService = Depends(get_admin_service)
):
    """Monthly growth, top industries and job types, and application status distribution."""
    return admin_service.analytics(admin)


@app.get("/api/admin/users")
def admin_list_users(
    page: int = Query(1, ge=1),
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    role: Optional[UserRole] = None,
    is_active: Optional[bool] = Query(None, alias="isActive"),
    search: Optional[str] = None,
    admin: User = Depends(require_admin),
    user_service: UserService = Depends(get_user_service)
):
    return user_service.list_users(admin, role=role, is_active=is_active, search=search, page=page, limit=limit)


@app.put("/api/admin/users/{user_id}/status")
def admin_set_user_status(
    user_id: str,
    request: UpdateUserStatusRequest,
    admin: User = Depends(require_admin),
    user_service: UserService = Depends(get_user_service)
):
    user = user_service.set_user_active(admin, user_id, request.is_active)
    message = "User activated successfully" if request.is_active else "User deactivated successfully"
    return {"message": message, "user": user}


@app.put("/api/admin/users/{user_id}/role")
def admin_set_user_role(
    user_id: str,
    request: UpdateUserRoleRequest,
    admin: User = Depends(require_admin),
    user_service: UserService = Depends(get_user_service)
):
    user = user_service.set_user_role(admin, user_id, request.role)
    return {"message": "User role updated successfully", "user": user}


@app.get("/api/admin/jobs", response_model=JobListResponse)
def admin_list_jobs(
    page: int = Query(1, ge=1),
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    status: Optional[JobStatus] = None,
    approved: Optional[bool] = None,
    search: Optional[str] = None,
    admin: User = Depends(require_admin),
    job_service: JobService = Depends(get_job_service)
):
    """All jobs regardless of status, for moderation."""
    return job_service.list_jobs_for_moderation(
        admin,
        status=status.value if status else None,
        approved=approved,
        search=search,
        page=page,
        limit=limit
    )


@app.post("/api/admin/jobs/{job_id}/approve")
def admin_approve_job(
    job_id: str,
    admin: User = Depends(require_admin),
    job_service: JobService = Depends(get_job_service)
):
    job = job_service.approve_job(job_id, admin)
    return {"message": "Job approved successfully", "job": job}


@app.post("/api/admin/jobs/{job_id}/reject")
def admin_reject_job(
    job_id: str,
    request: Optional[RejectJobRequest] = None,
    admin: User = Depends(require_admin),
    job_service: JobService = Depends(get_job_service)
):
    job = job_service.reject_job(job_id, admin, reason=request.reason if request else None)
    return {"message": "Job rejected successfully", "job": job}


@app.get("/api/admin/applications", response_model=ApplicationListResponse)
def admin_list_applications(
    page: int = Query(1, ge=1),
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    status: Optional[ApplicationStatus] = None,
    admin: User = Depends(require_admin),
    admin_service: AdminService = Depends(get_admin_service)
):
    return admin_service.list_applications(admin, status=status, page=page, limit=limit)


@app.post("/api/admin/employers/{user_id}/verify")
def admin_verify_employer(
    user_id: str,
    admin: User = Depends(require_admin),
    user_service: UserService = Depends(get_user_service)
):
    employer = user_service.verify_employer(admin, user_id)
    return {"message": "Employer verified successfully", "user": employer}
