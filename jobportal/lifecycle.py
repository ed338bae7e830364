"""Application lifecycle tracking.

Functions here mutate an `Application` model in memory: they validate the
requested change, update status and sub-records, and append timeline
entries. Persisting the result is the caller's job (see
`ApplicationService`), which writes status, timeline and sub-record in a
single update.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional, Set

from jobportal.models import (
    Application,
    ApplicationStatus,
    Communication,
    Evaluation,
    InterviewDetails,
    Offer,
    TimelineEntry,
)

TERMINAL_STATUSES = {ApplicationStatus.HIRED.value, ApplicationStatus.WITHDRAWN.value}

# Forward path plus rejected/withdrawn side exits. Only enforced when
# transition enforcement is switched on.
ALLOWED_TRANSITIONS: Dict[str, Set[str]] = {
    "applied": {"reviewing", "shortlisted", "interview-scheduled", "rejected", "withdrawn"},
    "reviewing": {"shortlisted", "interview-scheduled", "rejected", "withdrawn"},
    "shortlisted": {"interview-scheduled", "rejected", "withdrawn"},
    "interview-scheduled": {"interview-scheduled", "interviewed", "rejected", "withdrawn"},
    "interviewed": {"interview-scheduled", "offered", "rejected", "withdrawn"},
    "offered": {"offered", "hired", "rejected", "withdrawn"},
    "hired": set(),
    "rejected": set(),
    "withdrawn": set(),
}

INTERVIEW_SCHEDULED_NOTE = "Interview scheduled"
OFFER_MADE_NOTE = "Job offer made"
OFFER_ACCEPTED_NOTE = "Offer accepted"
WITHDRAWN_NOTE = "Application withdrawn by candidate"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _as_aware(value: datetime) -> datetime:
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


def parse_status(status: Any) -> ApplicationStatus:
    """Validate a status value against the application status enum.

    Raises:
        ValueError: If the value is not one of the nine statuses.
    """
    try:
        return ApplicationStatus(status)
    except ValueError:
        allowed = ", ".join(s.value for s in ApplicationStatus)
        raise ValueError(f"Invalid status '{status}'. Must be one of: {allowed}")


def check_transition(current: str, new: str) -> None:
    """Raise ValueError if `current` -> `new` is not in ALLOWED_TRANSITIONS."""
    if new not in ALLOWED_TRANSITIONS.get(current, set()):
        raise ValueError(f"Cannot change status from '{current}' to '{new}'")


def next_timeline_date(application: Application, now: Optional[datetime] = None) -> datetime:
    """Timestamp for a new timeline entry, strictly after the previous one."""
    candidate = _as_aware(now or _utcnow())
    if application.timeline:
        last = _as_aware(application.timeline[-1].date)
        if candidate <= last:
            candidate = last + timedelta(microseconds=1)
    return candidate


def record_status(
    application: Application,
    status: Any,
    performed_by: Optional[str],
    notes: Optional[str] = None,
    now: Optional[datetime] = None,
    enforce_transitions: bool = False
) -> TimelineEntry:
    """Set a new status and append exactly one timeline entry.

    Args:
        application: Application to mutate.
        status: New status value (string or ApplicationStatus).
        performed_by: ID of the acting user.
        notes: Optional free-text note stored on the timeline entry.
        now: Clock override.
        enforce_transitions: If True, reject moves not in ALLOWED_TRANSITIONS.

    Returns:
        The appended timeline entry.

    Raises:
        ValueError: If the status is unknown or the transition is refused.
    """
    new_status = parse_status(status).value

    if enforce_transitions:
        check_transition(application.status, new_status)

    entry = TimelineEntry(
        action=new_status,
        date=next_timeline_date(application, now),
        performed_by=performed_by,
        notes=notes or None,
    )
    application.status = new_status
    application.timeline.append(entry)
    return entry


def schedule_interview(
    application: Application,
    details: InterviewDetails,
    performed_by: str,
    now: Optional[datetime] = None,
    enforce_transitions: bool = False
) -> Application:
    """Attach interview details and move to interview-scheduled."""
    application.interview = details.model_copy(update={"scheduled": True})
    record_status(
        application,
        ApplicationStatus.INTERVIEW_SCHEDULED,
        performed_by,
        INTERVIEW_SCHEDULED_NOTE,
        now=now,
        enforce_transitions=enforce_transitions,
    )
    return application


def evaluate(application: Application, fields: Dict[str, Any]) -> Application:
    """Merge the provided evaluation fields into the existing evaluation.

    Only keys present in `fields` change; status and timeline are untouched.

    Raises:
        ValueError: If a merged rating falls outside 1-5 (pydantic
            ValidationError is a ValueError subclass).
    """
    current = application.evaluation.model_dump() if application.evaluation else {}
    current.update(fields)
    application.evaluation = Evaluation.model_validate(current)
    return application


def make_offer(
    application: Application,
    offer: Offer,
    performed_by: str,
    now: Optional[datetime] = None,
    enforce_transitions: bool = False
) -> Application:
    """Attach an offer (not yet accepted) and move to offered."""
    application.offer = offer.model_copy(update={"accepted": False, "accepted_at": None})
    record_status(
        application,
        ApplicationStatus.OFFERED,
        performed_by,
        OFFER_MADE_NOTE,
        now=now,
        enforce_transitions=enforce_transitions,
    )
    return application


def accept_offer(
    application: Application,
    performed_by: str,
    now: Optional[datetime] = None
) -> Application:
    """Accept the outstanding offer and move to hired.

    An application moved to offered by a plain status update has no offer
    record yet; an empty one is created to carry the acceptance.

    Raises:
        ValueError: If the application is not in the offered status.
    """
    if application.status != ApplicationStatus.OFFERED.value:
        raise ValueError("No offer to accept")

    entry = record_status(application, ApplicationStatus.HIRED, performed_by, OFFER_ACCEPTED_NOTE, now=now)
    if application.offer is None:
        application.offer = Offer()
    application.offer.accepted = True
    application.offer.accepted_at = entry.date
    return application


def withdraw(
    application: Application,
    performed_by: str,
    now: Optional[datetime] = None
) -> Application:
    """Withdraw the application.

    Raises:
        ValueError: If the application is already hired or withdrawn.
    """
    if application.status in TERMINAL_STATUSES:
        raise ValueError("Cannot withdraw application in current status")

    record_status(application, ApplicationStatus.WITHDRAWN, performed_by, WITHDRAWN_NOTE, now=now)
    return application


def add_communication(
    application: Application,
    communication: Communication,
    now: Optional[datetime] = None
) -> Application:
    """Append a message to the communications log."""
    if communication.sent_at is None:
        communication = communication.model_copy(update={"sent_at": now or _utcnow()})
    application.communications.append(communication)
    return application
