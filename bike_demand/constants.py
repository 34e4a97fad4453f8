from pathlib import Path

# -----------------------
# Files
# -----------------------
DATA_DIR = Path("data")
TRAIN_PATH = DATA_DIR / "train.csv"
TEST_PATH = DATA_DIR / "test.csv"
SUBMISSION_PATH = Path("submission.csv")

DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S"

# -----------------------
# Columns
# -----------------------
KEY_COLUMN = "datetime"
TIMESTAMP_COLUMN = "timestamp"
COUNT_COLUMN = "count"

HOUR_COLUMN = "hour"
ELAPSED_COLUMN = "hours_elapsed"
LOG_COUNT_COLUMN = "log_count"

RAW_COLUMNS = [
    "datetime", "season", "holiday", "workingday", "weather",
    "temp", "atemp", "humidity", "windspeed",
]
# casual + registered sum to count, never used as predictors
LEAK_COLUMNS = ["casual", "registered"]

# Declared levels of every categorical column (after weather 4 -> 3)
CATEGORY_LEVELS = {
    "hour": list(range(24)),
    "season": [1, 2, 3, 4],
    "holiday": [0, 1],
    "workingday": [0, 1],
    "weather": [1, 2, 3],
}
RARE_WEATHER = 4
MERGED_WEATHER = 3

# -----------------------
# Modelling
# -----------------------
DEFAULT_PREDICTORS = ["hour", "workingday", "weather", "temp", "windspeed", "hours_elapsed"]
DEFAULT_OUTCOME = LOG_COUNT_COLUMN

DEFAULT_SEED = 42
FIT_FRACTION = 0.7
OUTCOME_GROUPS = 5
CV_FOLDS = 5

# Classic regression-forest feature subset (a third of the columns per split)
FOREST_MAX_FEATURES = 1 / 3
