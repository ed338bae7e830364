"""Match scoring between jobs and candidates.

Two independent formulas live here:

- `score_job_match`: the job-listing compatibility score shown to candidates
  browsing jobs (skills, location, job type, experience level).
- `score_application`: the coarser score stored on an application at
  submission time, based only on the size of the candidate's snapshot.

They intentionally produce different numbers for the same candidate and
must not be merged.
"""

import math
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from jobportal.constants import (
    SKILL_MATCH_MAX_POINTS,
    REMOTE_LOCATION_POINTS,
    CITY_MATCH_POINTS,
    STATE_MATCH_POINTS,
    COUNTRY_MATCH_POINTS,
    JOB_TYPE_MATCH_POINTS,
    EXPERIENCE_LEVEL_MATCH_POINTS,
    MAX_MATCH_SCORE,
    EXPERIENCE_BANDS,
    APPLICATION_SKILL_POINTS,
    APPLICATION_EXPERIENCE_POINTS,
    APPLICATION_EDUCATION_POINTS,
)
from jobportal.models import Job, User, UserLocation, JobLocation


@dataclass
class ScoringResult:
    """Result of scoring a candidate against a job.

    Attributes:
        score: Final integer score in [0, 100].
        breakdown: Points contributed by each component before rounding.
    """
    score: int
    breakdown: Dict[str, float] = field(default_factory=dict)

    def to_dict(self) -> Dict:
        """Convert to dictionary format for API responses."""
        return {
            "score": self.score,
            "breakdown": self.breakdown
        }


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _normalize(value: Optional[str]) -> str:
    return value.strip().lower() if value else ""


def score_skills(candidate_skills: Sequence[str], job_skills: Sequence[str]) -> float:
    """Score skill overlap, up to SKILL_MATCH_MAX_POINTS.

    A candidate skill matches when it contains, or is contained in, any job
    skill (case-insensitive). The number of matching candidate skills is
    divided by the larger of the two list sizes.

    Args:
        candidate_skills: Skills listed on the candidate profile.
        job_skills: Skills required by the job.

    Returns:
        Points as a float; 0 when either list is empty.

    Example:
        >>> score_skills(["JavaScript", "React"], ["React", "Node.js", "MongoDB"])
        16.666666666666664
    """
    candidate = [_normalize(skill) for skill in candidate_skills if _normalize(skill)]
    required = [_normalize(skill) for skill in job_skills if _normalize(skill)]

    if not candidate or not required:
        return 0.0

    matching = [
        skill for skill in candidate
        if any(job_skill in skill or skill in job_skill for job_skill in required)
    ]

    return len(matching) / max(len(candidate), len(required)) * SKILL_MATCH_MAX_POINTS


def score_location(job_location: Optional[JobLocation], candidate_location: Optional[UserLocation]) -> float:
    """Score location fit, up to 20 points.

    Remote jobs always earn full points, even without a candidate location.
    Otherwise the first matching tier wins: city, then state, then country.
    """
    if job_location is None:
        return 0.0

    if job_location.remote:
        return float(REMOTE_LOCATION_POINTS)

    if candidate_location is None:
        return 0.0

    tiers = (
        (candidate_location.city, job_location.city, CITY_MATCH_POINTS),
        (candidate_location.state, job_location.state, STATE_MATCH_POINTS),
        (candidate_location.country, job_location.country, COUNTRY_MATCH_POINTS),
    )
    for candidate_value, job_value, points in tiers:
        if _normalize(candidate_value) and _normalize(candidate_value) == _normalize(job_value):
            return float(points)

    return 0.0


def score_job_type(job_type: Optional[str], preferred_job_types: Sequence[str]) -> float:
    if job_type and job_type in preferred_job_types:
        return float(JOB_TYPE_MATCH_POINTS)
    return 0.0


def score_experience_level(level: Optional[str], experience_count: int) -> float:
    """Score whether the number of experience entries fits the job level."""
    band = EXPERIENCE_BANDS.get(level or "")
    if band is None:
        return 0.0

    lower, upper = band
    if lower is not None and experience_count < lower:
        return 0.0
    if upper is not None and experience_count > upper:
        return 0.0
    return float(EXPERIENCE_LEVEL_MATCH_POINTS)


def score_job_match_breakdown(job: Job, user: User) -> ScoringResult:
    """Score a job against a candidate and keep per-component points.

    Args:
        job: The job posting.
        user: The candidate. Missing profile data contributes 0 points.

    Returns:
        ScoringResult with the rounded, capped score and its breakdown.
    """
    profile = user.candidate_profile
    candidate_skills: List[str] = profile.skills if profile else []
    preferred_job_types: List[str] = profile.preferred_job_types if profile else []
    experience_count = len(profile.experience) if profile else 0
    job_skills = job.requirements.skills if job.requirements else []

    breakdown = {
        "skills": score_skills(candidate_skills, job_skills),
        "location": score_location(job.location, user.profile.location if user.profile else None),
        "job_type": score_job_type(job.job_type, preferred_job_types),
        "experience_level": score_experience_level(job.level, experience_count),
    }

    total = _round_half_up(sum(breakdown.values()))
    return ScoringResult(score=max(0, min(total, MAX_MATCH_SCORE)), breakdown=breakdown)


def score_job_match(job: Job, user: Optional[User]) -> Optional[int]:
    """Compute the 0-100 job-listing match score for a candidate.

    Returns None for anonymous callers and non-candidates; the score is
    never computed for them.
    """
    if user is None or not user.is_candidate:
        return None

    return score_job_match_breakdown(job, user).score


def score_application(
    skills: Sequence[str],
    experience: Sequence[str],
    education: Sequence[str]
) -> int:
    """Compute the submission-time match score stored on an application.

    Each snapshot list earns a fixed number of points per entry up to a cap:
    skills 10 each (max 50), experience 5 each (max 30), education 5 each
    (max 20). The total is capped at 100.
    """
    score = 0
    for entries, (points_per_entry, cap) in (
        (skills, APPLICATION_SKILL_POINTS),
        (experience, APPLICATION_EXPERIENCE_POINTS),
        (education, APPLICATION_EDUCATION_POINTS),
    ):
        score += min(len(entries) * points_per_entry, cap)

    return min(score, MAX_MATCH_SCORE)
