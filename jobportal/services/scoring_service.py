"""Service for annotating and ranking jobs by candidate match score."""

import logging
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from jobportal.models import Job, User
from jobportal.scoring import score_job_match

logger = logging.getLogger(__name__)


class ScoringService:
    """Applies the job-listing match score to job records.

    Scores are only computed for candidate callers; for everyone else job
    records are returned without a `matchScore` key.
    """

    def score_job(self, job_record: Dict[str, Any], user: Optional[User]) -> Optional[int]:
        """Score a single job record for a user.

        Args:
            job_record: Job record as stored in the database.
            user: The caller, or None when anonymous.

        Returns:
            Integer score 0-100 for candidates, None otherwise. A record
            that cannot be parsed scores 0.
        """
        if user is None or not user.is_candidate:
            return None

        try:
            job = Job.model_validate(job_record)
        except ValidationError as error:
            logger.warning(f"Could not score job {job_record.get('id')}: {error}")
            return 0

        return score_job_match(job, user)

    def annotate_jobs(self, job_records: List[Dict[str, Any]], user: Optional[User]) -> List[Dict[str, Any]]:
        """Add `matchScore` to each job record when the caller is a candidate.

        Records are modified in place and also returned.
        """
        if user is None or not user.is_candidate:
            return job_records

        for job_record in job_records:
            job_record["matchScore"] = self.score_job(job_record, user)

        return job_records

    def rank_jobs(self, job_records: List[Dict[str, Any]], user: User) -> List[Dict[str, Any]]:
        """Annotate and sort job records by match score, best first."""
        annotated = self.annotate_jobs(job_records, user)
        return sorted(annotated, key=lambda job: job.get("matchScore") or 0, reverse=True)
