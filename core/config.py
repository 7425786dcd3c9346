# core/config.py

"""
Program-wide settings for the student records manager.

Grading thresholds are the defaults handed to a new `Registry`; a caller may
override them per registry. Path settings are used by the CLI to locate the
records file and the log file.
"""

import os

# === grading ===

# minimum average for an overall pass
PASSING_GRADE: float = 75.0

# any single recorded grade below this fails the student outright
MIN_FAIL_GRADE: float = 30.0

MIN_GRADE: float = 0.0
MAX_GRADE: float = 100.0

DEFAULT_TOP_N: int = 3

# === identifiers ===

STUDENT_ID_PATTERN: str = r"^S[0-9]{3}$"
STUDENT_ID_PREFIX: str = "S"
STUDENT_ID_DIGITS: int = 3

# === files ===

DATA_FILENAME: str = "students.json"
LOG_FILENAME: str = "student_records.log"
DEFAULT_DATA_DIR: str = os.path.join(
    os.path.expanduser("~"), "Documents", "StudentRecords"
)

LOG_FORMAT: str = "%(asctime)s %(levelname)s %(name)s: %(message)s"
