# core/utils.py

"""
Repository for program-wide validation predicates and name helpers.
"""

import math
import re

from core.config import MAX_GRADE, MIN_GRADE, STUDENT_ID_PATTERN


def normalize(name: str) -> str:
    return name.strip().lower()


def is_valid_student_id(student_id: str) -> bool:
    return isinstance(student_id, str) and bool(
        re.fullmatch(STUDENT_ID_PATTERN, student_id)
    )


def is_valid_name(name: str | None) -> bool:
    return isinstance(name, str) and name.strip() != ""


def is_valid_grade(score: object) -> bool:
    # bool is an int subclass and is never a score
    if isinstance(score, bool) or not isinstance(score, (int, float)):
        return False

    if math.isnan(score):
        return False

    return MIN_GRADE <= score <= MAX_GRADE


def find_name(names: list[str], name: str) -> str | None:
    """
    Returns the entry in `names` matching `name` case-insensitively, or None.
    """
    target = normalize(name)
    return next((n for n in names if normalize(n) == target), None)
