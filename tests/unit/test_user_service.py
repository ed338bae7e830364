"""Tests for profile updates, user administration and the admin dashboard."""

import pytest

from jobportal.api.schemas.user_schemas import (
    AddEducationRequest,
    AddExperienceRequest,
    ResumeRequest,
    UpdateCandidateProfileRequest,
    UpdateEducationRequest,
    UpdateEmployerProfileRequest,
    UpdateExperienceRequest,
    UpdateProfileRequest,
)
from jobportal.api.schemas.application_schemas import SubmitApplicationRequest
from jobportal.services.admin_service import monthly_counts, ranked_counts


def test_update_profile_merges_fields(user_service, candidate):
    updated = user_service.update_profile(candidate, UpdateProfileRequest(bio="Analytical engines"))

    assert updated.profile.bio == "Analytical engines"
    assert updated.profile.first_name == "Ada"
    assert updated.profile.location.city == "Austin"


def test_update_candidate_profile_replaces_given_sections(user_service, user_repository, candidate):
    request = UpdateCandidateProfileRequest.model_validate({"skills": ["Python"], "preferredJobTypes": ["contract"]})
    updated = user_service.update_candidate_profile(candidate, request)

    assert updated.candidate_profile.skills == ["Python"]
    assert updated.candidate_profile.preferred_job_types == ["contract"]
    assert len(updated.candidate_profile.experience) == 3
    assert user_repository.records[candidate.id]["candidateProfile"]["skills"] == ["Python"]


def test_candidate_profile_is_for_candidates(user_service, employer):
    with pytest.raises(PermissionError):
        user_service.update_candidate_profile(employer, UpdateCandidateProfileRequest(skills=["Sales"]))


def test_add_experience_assigns_an_id(user_service, user_repository, candidate):
    request = AddExperienceRequest.model_validate({
        "title": "Staff Engineer",
        "company": "Analytical Engines",
        "startDate": "2020-01-01T00:00:00Z",
    })

    entry = user_service.add_experience(candidate, request)

    stored = user_repository.records[candidate.id]["candidateProfile"]["experience"]
    assert entry.id
    assert [item["id"] for item in stored] == ["experience-1", "experience-2", "experience-3", entry.id]
    assert stored[-1]["company"] == "Analytical Engines"


def test_update_experience_merges_fields(user_service, user_repository, candidate):
    entry = user_service.update_experience(
        candidate, "experience-2", UpdateExperienceRequest(company="Babbage & Co")
    )

    assert entry.title == "Web Developer"
    assert entry.company == "Babbage & Co"
    stored = user_repository.records[candidate.id]["candidateProfile"]["experience"]
    assert stored[1] == entry.to_record(exclude_none=False)


def test_delete_experience(user_service, candidate):
    user_service.delete_experience(candidate, "experience-1")

    titles = [entry.title for entry in user_service.get_user(candidate.id).candidate_profile.experience]
    assert titles == ["Web Developer", "Intern"]


def test_missing_profile_entries_are_not_found(user_service, candidate):
    with pytest.raises(ValueError, match="Experience not found"):
        user_service.delete_experience(candidate, "missing")
    with pytest.raises(ValueError, match="Education not found"):
        user_service.update_education(candidate, "missing", UpdateEducationRequest(field="Maths"))


def test_education_entries(user_service, candidate):
    request = AddEducationRequest.model_validate({
        "degree": "MSc Mathematics",
        "institution": "University of London",
        "startDate": "2018-09-01T00:00:00Z",
        "gpa": 3.9,
    })
    added = user_service.add_education(candidate, request)
    updated = user_service.update_education(candidate, "education-1", UpdateEducationRequest(field="Computing"))
    user_service.delete_education(candidate, added.id)

    education = user_service.get_user(candidate.id).candidate_profile.education
    assert updated.degree == "BSc Computer Science"
    assert [(entry.id, entry.field) for entry in education] == [("education-1", "Computing")]


def test_profile_entries_are_for_candidates(user_service, employer):
    with pytest.raises(PermissionError):
        user_service.delete_experience(employer, "experience-1")
    with pytest.raises(PermissionError):
        user_service.set_resume(employer, ResumeRequest(resume_url="https://files.example/cv.pdf"))


def test_set_and_delete_resume(user_service, user_repository, candidate):
    resume = user_service.set_resume(candidate, ResumeRequest(resume_url="https://files.example/ada.pdf"))

    assert resume.filename == "resume.pdf"
    assert user_repository.records[candidate.id]["candidateProfile"]["resume"] == {
        "url": "https://files.example/ada.pdf",
        "filename": "resume.pdf",
    }

    user_service.delete_resume(candidate)
    assert user_repository.records[candidate.id]["candidateProfile"]["resume"] is None


def test_employer_cannot_self_verify(user_service, employer):
    request = UpdateEmployerProfileRequest.model_validate({"companyName": "Acme Corp", "verified": True})
    updated = user_service.update_employer_profile(employer, request)

    assert updated.employer_profile.company_name == "Acme Corp"
    assert updated.employer_profile.verified is False


def test_verify_employer(user_service, admin, employer, candidate):
    verified = user_service.verify_employer(admin, employer.id)
    assert verified.employer_profile.verified is True

    with pytest.raises(ValueError, match="not an employer"):
        user_service.verify_employer(admin, candidate.id)


def test_admin_cannot_change_own_account(user_service, admin):
    with pytest.raises(ValueError, match="Cannot deactivate your own account"):
        user_service.set_user_active(admin, admin.id, False)
    with pytest.raises(ValueError, match="Cannot change your own role"):
        user_service.set_user_role(admin, admin.id, "candidate")


def test_set_user_active_and_role(user_service, admin, candidate):
    assert user_service.set_user_active(admin, candidate.id, False).is_active is False
    assert user_service.set_user_role(admin, candidate.id, "employer").role == "employer"


def test_user_admin_requires_admin(user_service, employer, candidate):
    with pytest.raises(PermissionError):
        user_service.set_user_active(employer, candidate.id, False)
    with pytest.raises(PermissionError):
        user_service.list_users(employer)


def test_list_users_filters_by_role(user_service, admin):
    result = user_service.list_users(admin, role="candidate")
    assert result["total"] == 2
    assert {user.role for user in result["users"]} == {"candidate"}


def test_dashboard_counts(admin_service, application_service, admin, candidate):
    application_service.submit_application(
        candidate, SubmitApplicationRequest(job_id="job-1", cover_letter="Hello")
    )

    dashboard = admin_service.dashboard(admin)

    assert dashboard["users"]["total"] == 5
    assert dashboard["users"]["byRole"] == {"candidate": 2, "employer": 2, "admin": 1}
    assert dashboard["jobs"]["total"] == 4
    assert dashboard["jobs"]["byStatus"]["closed"] == 1
    assert dashboard["jobs"]["pendingApprovals"] == 1
    assert dashboard["applications"]["total"] == 1
    assert dashboard["applications"]["byStatus"]["applied"] == 1


def test_dashboard_requires_admin(admin_service, employer):
    with pytest.raises(PermissionError):
        admin_service.dashboard(employer)


def test_admin_application_listing(admin_service, application_service, admin, candidate, other_candidate):
    for user in (candidate, other_candidate):
        application_service.submit_application(
            user, SubmitApplicationRequest(job_id="job-1", cover_letter="Hello")
        )

    assert admin_service.list_applications(admin)["total"] == 2
    assert admin_service.list_applications(admin, status="rejected")["total"] == 0


def test_analytics(admin_service, application_service, user_repository, admin, candidate):
    user_repository.seed({"email": "late@example.com", "role": "candidate", "createdAt": "2024-03-15T10:00:00+00:00"})
    application_service.submit_application(
        candidate, SubmitApplicationRequest(job_id="job-1", cover_letter="Hello")
    )

    analytics = admin_service.analytics(admin)

    assert analytics["userGrowth"] == [
        {"year": 2024, "month": 1, "count": 5},
        {"year": 2024, "month": 3, "count": 1},
    ]
    assert analytics["jobTrends"] == [{"year": 2024, "month": 1, "count": 4, "approved": 3}]
    assert analytics["applicationTrends"] == [{"year": 2024, "month": 1, "count": 1}]
    assert analytics["topIndustries"] == [{"industry": "Software", "count": 3}]
    assert analytics["topJobTypes"] == [
        {"jobType": "full-time", "count": 2},
        {"jobType": "contract", "count": 1},
    ]
    assert analytics["applicationStatusDistribution"] == [{"status": "applied", "count": 1}]


def test_analytics_requires_admin(admin_service, candidate):
    with pytest.raises(PermissionError):
        admin_service.analytics(candidate)


def test_ranked_counts_break_ties_by_value_and_limit():
    records = [{"industry": name} for name in ("Retail", "Energy", "Retail", "Banking", None)]

    assert ranked_counts(records, "industry", limit=2) == [
        {"industry": "Retail", "count": 2},
        {"industry": "Banking", "count": 1},
    ]


def test_monthly_counts_skip_records_without_dates():
    records = [{"createdAt": "2023-12-31T23:59:59+00:00"}, {"createdAt": None}]

    assert monthly_counts(records) == [{"year": 2023, "month": 12, "count": 1}]
