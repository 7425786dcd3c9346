# core/stats.py

"""
Aggregate statistics derived from a collection of students.

Every function here is read-only and computes its result on demand; nothing
is cached between calls. Averages and pass rates are returned as floats and
left unrounded so display formatting stays a presentation concern.
"""

from collections.abc import Collection
from typing import Any

from core.config import MIN_FAIL_GRADE, PASSING_GRADE
from core.utils import normalize
from models.student import GradeStatus, Student


def count_passed(
    students: Collection[Student],
    passing_grade: float = PASSING_GRADE,
    min_fail_grade: float = MIN_FAIL_GRADE,
) -> int:
    return sum(
        1
        for s in students
        if s.get_status(passing_grade=passing_grade, min_fail_grade=min_fail_grade)
        == GradeStatus.PASSED
    )


def school_statistics(
    students: Collection[Student],
    total_classes: int,
    passing_grade: float = PASSING_GRADE,
    min_fail_grade: float = MIN_FAIL_GRADE,
) -> dict[str, Any]:
    """
    Summarizes every student in the school.

    Args:
        students (Collection[Student]): All students in the registry.
        total_classes (int): The size of the class registry, including classes without students.
        passing_grade (float): Minimum average for a pass.
        min_fail_grade (float): Hard-fail threshold for any recorded grade.

    Returns:
        A dictionary with the keys "total_students", "total_classes", "school_average",
        "passed_students", "failed_students", and "pass_rate" (percent).
        Every value is zero when there are no students.
    """
    total_students = len(students)

    if total_students == 0:
        return {
            "total_students": 0,
            "total_classes": 0,
            "school_average": 0.0,
            "passed_students": 0,
            "failed_students": 0,
            "pass_rate": 0.0,
        }

    averages = [s.get_average() for s in students]
    passed = count_passed(students, passing_grade, min_fail_grade)

    return {
        "total_students": total_students,
        "total_classes": total_classes,
        "school_average": sum(averages) / total_students,
        "passed_students": passed,
        "failed_students": total_students - passed,
        "pass_rate": passed / total_students * 100,
    }


def class_statistics(
    class_name: str,
    students: Collection[Student],
    passing_grade: float = PASSING_GRADE,
    min_fail_grade: float = MIN_FAIL_GRADE,
) -> dict[str, Any] | None:
    """
    Summarizes the students of a single class.

    Args:
        class_name (str): The class to summarize, matched case-insensitively.
        students (Collection[Student]): The students to draw from; non-members are ignored.
        passing_grade (float): Minimum average for a pass.
        min_fail_grade (float): Hard-fail threshold for any recorded grade.

    Returns:
        None if the class has no students. Otherwise a dictionary with the keys "class_name",
        "total_students", "class_average", "passed_students", "failed_students", "pass_rate",
        "highest_average", and "lowest_average".
    """
    target = normalize(class_name)
    members = [s for s in students if normalize(s.class_name) == target]

    if not members:
        return None

    averages = [s.get_average() for s in members]
    passed = count_passed(members, passing_grade, min_fail_grade)

    return {
        "class_name": members[0].class_name,
        "total_students": len(members),
        "class_average": sum(averages) / len(members),
        "passed_students": passed,
        "failed_students": len(members) - passed,
        "pass_rate": passed / len(members) * 100,
        "highest_average": max(averages),
        "lowest_average": min(averages),
    }


def rank_by_average(
    students: Collection[Student],
    n: int,
    passing_grade: float = PASSING_GRADE,
    min_fail_grade: float = MIN_FAIL_GRADE,
) -> list[Student]:
    """
    Returns up to `n` passing students ordered by descending average.

    Ties keep their original relative order, since `sorted()` is stable.
    """
    passing = [
        s
        for s in students
        if s.get_status(passing_grade=passing_grade, min_fail_grade=min_fail_grade)
        == GradeStatus.PASSED
    ]

    ranked = sorted(passing, key=lambda s: s.get_average(), reverse=True)

    return ranked[: max(n, 0)]
