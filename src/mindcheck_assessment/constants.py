"""Assessment constants shared across the SDK.

These values are referenced by the question bank, classifier, state machine
and progress tracking.  They mirror conventions encoded in
``data/question_bank.yaml``.
"""

# Identifier of the single root question every assessment starts on.
ROOT_QID = "initial-1"

# Follow-up questions asked for each branch.
BRANCH_LENGTH = 3

# 1 root + 3 branch questions.  Progress is computed against this fixed total.
TOTAL_QUESTIONS = 1 + BRANCH_LENGTH

# Canonical primary-concern labels (root option text) -> category.
CONCERN_CATEGORIES: dict[str, str] = {
    "Mood and Emotions": "mood",
    "Anxiety and Stress": "anxiety",
    "Sleep and Energy": "sleep",
    "Social Relationships": "social",
    "Work or Academic Performance": "work",
}

# Severity levels ordered from least to most severe.
SEVERITY_ORDER: list[str] = ["minor", "mild", "major"]

# Mean option index at or below which a category counts as minor / mild.
MINOR_MAX_MEAN = 1.0
MILD_MAX_MEAN = 2.0

# Numeric score = round(max category mean * SCORE_MULTIPLIER), range 0-20.
SCORE_MULTIPLIER = 5
MAX_SCORE = 20

# Human-readable state names for API responses and logging.
STATE_NAMES: dict[str, str] = {
    "awaiting_root": "Initial Screening",
    "awaiting_branch": "Follow-up Questions",
    "complete": "Assessment Complete",
}

# Progress tracking: mood score bounds and default activities per severity.
MIN_MOOD_SCORE = 1
MAX_MOOD_SCORE = 10
SEVERITY_ACTIVITIES: dict[str, list[str]] = {
    "minor": ["meditation"],
    "mild": ["meditation", "journaling"],
    "major": ["meditation", "journaling", "exercise"],
}

# Mood distribution buckets: (minimum assessment score, label), checked in order.
MOOD_BUCKETS: list[tuple[int, str]] = [
    (9, "Very Happy"),
    (7, "Happy"),
    (5, "Neutral"),
    (3, "Sad"),
    (0, "Very Sad"),
]

# Change-notification table names.
ASSESSMENTS_TABLE = "assessments"
PROGRESS_TABLE = "progress_tracking"

# Users whose progress is held in the ProgressFeed cache at once.
DEFAULT_PROGRESS_CACHE_USERS = 500
