# fair_assignment/config.py

# Persistence
STORAGE_KEY = "fair_assignment.components.main"
DEFAULT_STATE_PATH = "fair_assignment_state.json"

# Logging
LOGGER_NAME = "fair_assignment"
LOG_LEVEL = "INFO"
LOG_FORMAT = "[%(levelname)s] %(name)s - %(message)s"

# Matching modes
SINGLE_MODE = "single"
MULTI_MODE = "multi"

# Edit targets
CATEGORY_KIND = "category"
STUDENT_KIND = "student"

# MILP engine scoring
# Rank r (0-based) scores (number_of_categories - r) * RANK_WEIGHT.
RANK_WEIGHT = 10.0
# Placement in a non-preferred, non-excluded category.
FALLBACK_SCORE = 1.0
# Upper bound of the random tie-break perturbation added to every score.
TIE_BREAK_NOISE = 0.01

# Toy data knobs
NUM_CATEGORIES_DEFAULT = 5
NUM_STUDENTS_DEFAULT = 20
MAX_PLACEMENTS_RANGE = (2, 6)
PREFERENCES_PER_STUDENT = 3
EXCLUDE_PROBABILITY = 0.15

DEFAULT_CATEGORY_NAMES = [
    "Chess", "Art", "Football", "Drama", "Robotics",
    "Choir", "Cooking", "Photography", "Swimming", "Coding",
]

# Random seed for reproducible toy workspaces
DEFAULT_SEED = 42
