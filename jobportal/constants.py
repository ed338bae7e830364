"""Application-wide constants and scoring weights."""

# Job-listing match score weights
SKILL_MATCH_MAX_POINTS = 50
REMOTE_LOCATION_POINTS = 20
CITY_MATCH_POINTS = 20
STATE_MATCH_POINTS = 15
COUNTRY_MATCH_POINTS = 10
JOB_TYPE_MATCH_POINTS = 15
EXPERIENCE_LEVEL_MATCH_POINTS = 15
MAX_MATCH_SCORE = 100

# Experience-entry count bands per job level: (min, max), None = unbounded
EXPERIENCE_BANDS = {
    "entry": (None, 1),
    "junior": (None, 3),
    "mid": (2, 7),
    "senior": (5, None),
    "lead": (7, None),
    "executive": (10, None),
}

# Application submission score: (points per entry, cap)
APPLICATION_SKILL_POINTS = (10, 50)
APPLICATION_EXPERIENCE_POINTS = (5, 30)
APPLICATION_EDUCATION_POINTS = (5, 20)

# Table names
USERS_TABLE = "users"
JOBS_TABLE = "jobs"
APPLICATIONS_TABLE = "applications"

# Database functions for atomic job counter increments and application changes
INCREMENT_JOB_COUNTER_RPC = "increment_job_counter"
APPLY_APPLICATION_CHANGE_RPC = "apply_application_change"

# Page size when reading whole tables for analytics
FETCH_BATCH_SIZE = 1000

# Admin analytics
TOP_INDUSTRIES_LIMIT = 10

# PostgreSQL error code for unique constraint violations
UNIQUE_VIOLATION_CODE = "23505"
