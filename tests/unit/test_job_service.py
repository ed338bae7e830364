"""Tests for JobService listing, ownership and moderation."""

import pytest

from jobportal.api.schemas.job_schemas import CreateJobRequest, UpdateJobRequest
from jobportal.models import JobSearchFilters
from tests.records import FRONTEND_JOB


def _create_request(**overrides):
    data = {
        "title": "Data Engineer",
        "description": "Pipelines all day",
        "jobType": "full-time",
        "industry": "Software",
        "requirements": {"skills": ["Python", "SQL"]},
    }
    data.update(overrides)
    return CreateJobRequest.model_validate(data)


def test_list_jobs_hides_closed_and_unapproved(job_service):
    result = job_service.list_jobs(JobSearchFilters())

    assert {job["id"] for job in result["jobs"]} == {"job-1", "job-2"}
    assert result["total"] == 2
    assert result["pagination"] == {"current": 1, "total": 1, "hasNext": False, "hasPrev": False}


def test_list_jobs_adds_match_score_for_candidates_only(job_service, candidate, employer):
    anonymous = job_service.list_jobs(JobSearchFilters())
    as_employer = job_service.list_jobs(JobSearchFilters(), viewer=employer)
    as_candidate = job_service.list_jobs(JobSearchFilters(), viewer=candidate)

    assert all("matchScore" not in job for job in anonymous["jobs"])
    assert all("matchScore" not in job for job in as_employer["jobs"])
    scores = {job["id"]: job["matchScore"] for job in as_candidate["jobs"]}
    assert scores == {"job-1": 67, "job-2": 20}


def test_relevance_sort_orders_by_match_score(job_service, candidate):
    result = job_service.list_jobs(
        JobSearchFilters(search="engineer", sort="relevance"), viewer=candidate
    )
    assert [job["id"] for job in result["jobs"]] == ["job-1", "job-2"]


def test_search_matches_location_tags_and_keywords(job_service, job_repository):
    job_repository.seed({
        **FRONTEND_JOB,
        "id": "job-5",
        "title": "Platform Engineer",
        "location": {"city": "Denver", "state": "CO", "country": "USA"},
        "tags": ["kubernetes"],
        "keywords": ["terraform"],
    })

    for term in ("denver", "Kubernetes", "terraform"):
        result = job_service.list_jobs(JobSearchFilters(search=term))
        assert [job["id"] for job in result["jobs"]] == ["job-5"]


def test_get_job_counts_views(job_service, job_repository, candidate):
    job_service.get_job("job-1")
    job = job_service.get_job("job-1", viewer=candidate)

    assert job["views"] == 2
    assert job_repository.records["job-1"]["views"] == 2
    assert job["matchScore"] == 67


def test_get_missing_job(job_service):
    with pytest.raises(ValueError, match="not found"):
        job_service.get_job("missing")


def test_create_job_from_unverified_employer_waits_for_approval(job_service, employer):
    job = job_service.create_job(employer, _create_request())

    assert job["company"] == employer.id
    assert job["companyName"] == "Acme"
    assert job["approved"] is False
    assert job["applicationCount"] == 0


def test_create_job_auto_approves_verified_employers(job_service, other_employer):
    job = job_service.create_job(other_employer, _create_request())

    assert job["approved"] is True
    assert job["approvedBy"] == other_employer.id


def test_create_job_ignores_fields_outside_whitelist(job_service, employer):
    request = _create_request(applicationCount=999, views=50, approved=True, company="someone-else")
    job = job_service.create_job(employer, request)

    assert job["applicationCount"] == 0
    assert job["views"] == 0
    assert job["approved"] is False
    assert job["company"] == employer.id


def test_candidates_cannot_post_jobs(job_service, candidate):
    with pytest.raises(PermissionError):
        job_service.create_job(candidate, _create_request())


def test_update_job_applies_only_provided_fields(job_service, job_repository, employer):
    request = UpdateJobRequest.model_validate({"title": "Senior Frontend Engineer", "views": 1000})
    job = job_service.update_job("job-1", employer, request)

    assert job["title"] == "Senior Frontend Engineer"
    assert job["views"] == 0
    assert job["description"] == "Build user interfaces"


def test_update_job_requires_owner(job_service, other_employer):
    with pytest.raises(PermissionError, match="Not authorized to edit this job"):
        job_service.update_job("job-1", other_employer, UpdateJobRequest(title="Mine now"))


def test_admin_can_delete_any_job(job_service, job_repository, admin):
    assert job_service.delete_job("job-1", admin) is True
    assert "job-1" not in job_repository.records


def test_recommended_jobs_filter_by_preferred_type(job_service, candidate):
    jobs = job_service.recommended_jobs(candidate)

    assert [job["id"] for job in jobs] == ["job-1"]
    assert jobs[0]["matchScore"] == 67


def test_recommended_jobs_need_a_shared_skill_and_nearby_or_remote(job_service, job_repository, candidate):
    job_repository.seed({**FRONTEND_JOB, "id": "job-5", "location": {"city": "Berlin", "remote": False}})
    job_repository.seed({**FRONTEND_JOB, "id": "job-6", "location": {"city": "Lisbon", "remote": True}})
    job_repository.seed({**FRONTEND_JOB, "id": "job-7", "requirements": {"skills": ["Rust"]}})

    jobs = job_service.recommended_jobs(candidate)

    assert {job["id"] for job in jobs} == {"job-1", "job-6"}


def test_recommended_jobs_without_matching_skills(job_service, other_candidate):
    assert job_service.recommended_jobs(other_candidate) == []


def test_recommended_jobs_are_for_candidates(job_service, employer):
    with pytest.raises(PermissionError, match="Only candidates"):
        job_service.recommended_jobs(employer)


def test_list_employer_jobs_includes_every_status(job_service, employer, other_employer):
    assert job_service.list_employer_jobs(employer)["total"] == 4
    assert job_service.list_employer_jobs(employer, status="closed")["total"] == 1
    assert job_service.list_employer_jobs(other_employer)["total"] == 0


def test_approve_and_reject(job_service, job_repository, admin):
    approved = job_service.approve_job("job-4", admin)
    assert approved["approved"] is True
    assert approved["approvedBy"] == admin.id

    rejected = job_service.reject_job("job-4", admin, reason="Spam")
    assert rejected["approved"] is False
    assert rejected["status"] == "closed"


def test_moderation_requires_admin(job_service, employer):
    with pytest.raises(PermissionError):
        job_service.approve_job("job-4", employer)
    with pytest.raises(PermissionError):
        job_service.list_jobs_for_moderation(employer)


def test_moderation_listing_filters_pending(job_service, admin):
    result = job_service.list_jobs_for_moderation(admin, approved=False)
    assert [job["id"] for job in result["jobs"]] == ["job-4"]
