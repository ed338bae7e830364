"""Tests for ApplicationService: submission, visibility and lifecycle writes."""

import copy
from datetime import datetime, timedelta, timezone

import pytest

from jobportal.api.schemas.application_schemas import (
    CommunicationRequest,
    EvaluateRequest,
    MakeOfferRequest,
    SubmitApplicationRequest,
)
from jobportal.services.application_service import ApplicationService


def _submit(service, user, job_id="job-1"):
    request = SubmitApplicationRequest(job_id=job_id, cover_letter="Please consider me.")
    return service.submit_application(user, request)


def _offer_request():
    now = datetime.now(timezone.utc)
    return MakeOfferRequest(
        salary={"amount": 110000},
        start_date=now + timedelta(days=30),
        deadline=now + timedelta(days=7),
    )


def test_submit_application_snapshots_profile(application_service, job_repository, candidate):
    application = _submit(application_service, candidate)

    assert application.id
    assert application.status == "applied"
    assert application.employer == "employer-1"
    assert application.skills == ["JavaScript", "React"]
    assert application.experience == ["Frontend Developer", "Web Developer", "Intern"]
    assert application.education == ["BSc Computer Science"]
    assert application.match_score == 40
    assert [entry.action for entry in application.timeline] == ["applied"]
    assert job_repository.records["job-1"]["applicationCount"] == 1


def test_second_submission_is_refused(application_service, application_repository, job_repository, candidate):
    _submit(application_service, candidate)

    with pytest.raises(ValueError, match="You have already applied to this job"):
        _submit(application_service, candidate)

    assert application_repository.count() == 1
    assert job_repository.records["job-1"]["applicationCount"] == 1


def test_duplicate_caught_by_unique_index(application_service, application_repository, candidate):
    _submit(application_service, candidate)
    application_repository.hide_existing = True

    with pytest.raises(ValueError, match="You have already applied to this job"):
        _submit(application_service, candidate)

    assert application_repository.count() == 1


@pytest.mark.parametrize("job_id", ["job-3", "job-4"])
def test_closed_or_unapproved_job_refuses_applications(application_service, candidate, job_id):
    with pytest.raises(ValueError, match="not accepting applications"):
        _submit(application_service, candidate, job_id=job_id)


def test_missing_job(application_service, candidate):
    with pytest.raises(ValueError, match="not found"):
        _submit(application_service, candidate, job_id="missing")


def test_only_candidates_can_apply(application_service, employer):
    with pytest.raises(PermissionError):
        _submit(application_service, employer)


def test_list_applications_is_scoped_by_role(
    application_service, candidate, other_candidate, employer, other_employer, admin
):
    _submit(application_service, candidate)
    _submit(application_service, other_candidate)

    assert application_service.list_applications(candidate)["total"] == 1
    assert application_service.list_applications(employer)["total"] == 2
    assert application_service.list_applications(other_employer)["total"] == 0
    assert application_service.list_applications(admin)["total"] == 2


def test_get_application_checks_ownership(application_service, candidate, other_candidate, other_employer):
    application = _submit(application_service, candidate)

    assert application_service.get_application(application.id, candidate).id == application.id
    with pytest.raises(PermissionError):
        application_service.get_application(application.id, other_candidate)
    with pytest.raises(PermissionError):
        application_service.get_application(application.id, other_employer)


def test_update_status_persists_status_and_timeline(
    application_service, application_repository, candidate, employer
):
    application = _submit(application_service, candidate)

    updated = application_service.update_status(application.id, employer, "shortlisted", "Good fit")

    stored = application_repository.records[application.id]
    assert updated.status == "shortlisted"
    assert stored["status"] == "shortlisted"
    assert [entry["action"] for entry in stored["timeline"]] == ["applied", "shortlisted"]
    assert stored["timeline"][-1]["performedBy"] == employer.id


def test_concurrent_status_updates_keep_both_timeline_entries(
    application_service, application_repository, candidate, employer, monkeypatch
):
    application = _submit(application_service, candidate)
    snapshot = application_repository.get_by_id(application.id)
    # Both writers read the application before either one saves
    monkeypatch.setattr(application_repository, "get_by_id", lambda record_id: copy.deepcopy(snapshot))

    application_service.update_status(application.id, employer, "reviewing")
    application_service.update_status(application.id, employer, "shortlisted")

    stored = application_repository.records[application.id]
    assert [entry["action"] for entry in stored["timeline"]] == ["applied", "reviewing", "shortlisted"]


def test_update_status_requires_the_jobs_employer(application_service, candidate, other_employer):
    application = _submit(application_service, candidate)

    with pytest.raises(PermissionError, match="Not authorized"):
        application_service.update_status(application.id, other_employer, "rejected")


def test_enforced_transitions(application_repository, job_repository, candidate, employer):
    service = ApplicationService(application_repository, job_repository, enforce_transitions=True)
    application = _submit(service, candidate)

    with pytest.raises(ValueError, match="Cannot change status"):
        service.update_status(application.id, employer, "hired")


def test_evaluate_keeps_status(application_service, candidate, employer):
    application = _submit(application_service, candidate)

    updated = application_service.evaluate(
        application.id, employer, EvaluateRequest(technical_skills=5, recommended=True)
    )

    assert updated.evaluation.technical_skills == 5
    assert updated.evaluation.recommended is True
    assert updated.status == "applied"
    assert len(updated.timeline) == 1


def test_offer_then_accept(application_service, application_repository, candidate, employer):
    application = _submit(application_service, candidate)
    application_service.make_offer(application.id, employer, _offer_request())

    hired = application_service.accept_offer(application.id, candidate)

    stored = application_repository.records[application.id]
    assert hired.status == "hired"
    assert stored["offer"]["accepted"] is True
    assert stored["offer"]["acceptedAt"] is not None
    assert [entry["action"] for entry in stored["timeline"]] == ["applied", "offered", "hired"]


def test_accept_offer_before_any_offer(application_service, candidate):
    application = _submit(application_service, candidate)

    with pytest.raises(ValueError, match="No offer to accept"):
        application_service.accept_offer(application.id, candidate)


def test_accept_offer_after_status_set_to_offered(
    application_service, application_repository, candidate, employer
):
    application = _submit(application_service, candidate)
    application_service.update_status(application.id, employer, "offered")

    hired = application_service.accept_offer(application.id, candidate)

    stored = application_repository.records[application.id]
    assert hired.status == "hired"
    assert stored["offer"]["accepted"] is True
    assert [entry["action"] for entry in stored["timeline"]] == ["applied", "offered", "hired"]


def test_only_the_applicant_accepts_or_withdraws(application_service, candidate, other_candidate, employer):
    application = _submit(application_service, candidate)
    application_service.make_offer(application.id, employer, _offer_request())

    with pytest.raises(PermissionError):
        application_service.accept_offer(application.id, other_candidate)
    with pytest.raises(PermissionError):
        application_service.withdraw(application.id, employer)


def test_withdraw_after_hire_leaves_record_unchanged(
    application_service, application_repository, candidate, employer
):
    application = _submit(application_service, candidate)
    application_service.update_status(application.id, employer, "hired")
    timeline_before = list(application_repository.records[application.id]["timeline"])

    with pytest.raises(ValueError, match="Cannot withdraw"):
        application_service.withdraw(application.id, candidate)

    stored = application_repository.records[application.id]
    assert stored["status"] == "hired"
    assert stored["timeline"] == timeline_before


def test_add_communication_defaults_recipient(application_service, candidate, employer):
    application = _submit(application_service, candidate)

    updated = application_service.add_communication(
        application.id, candidate, CommunicationRequest(message="Any update?")
    )
    updated = application_service.add_communication(
        application.id, employer, CommunicationRequest(message="Soon!", type="email")
    )

    assert [(c.from_user, c.to_user) for c in updated.communications] == [
        (candidate.id, employer.id),
        (employer.id, candidate.id),
    ]


def test_add_communication_refuses_outsiders(application_service, candidate, other_candidate):
    application = _submit(application_service, candidate)

    with pytest.raises(PermissionError):
        application_service.add_communication(
            application.id, other_candidate, CommunicationRequest(message="Hello")
        )


def test_stats_count_by_status(application_service, candidate, other_candidate, employer):
    first = _submit(application_service, candidate)
    _submit(application_service, other_candidate)
    application_service.update_status(first.id, employer, "rejected")

    stats = application_service.get_stats(employer)

    assert stats["stats"] == {"applied": 1, "rejected": 1}
    assert stats["total_applications"] == 2
    assert len(stats["recent_applications"]) == 2
