# cli/model_formatters.py

# anything that renders domain objects or performs Registry read-only operations
from textwrap import dedent
from typing import Any

import core.formatters as formatters
from models.registry import Registry
from models.student import GradeStatus, Student

# === student formatters ===


def format_status(status: GradeStatus) -> str:
    return "[PASSED]" if status == GradeStatus.PASSED else "[FAILED]"


def format_student_oneline(student: Student, registry: Registry) -> str:
    average = formatters.format_score(student.get_average())
    status = format_status(registry.status_of(student))

    return f"{student.id:<5} | {student.name:<20} | {student.class_name:<8} | Avg: {average:>6} {status}"


def format_grades(student: Student, registry: Registry) -> str:
    if not registry.subject_names:
        return "... (no subjects registered)"

    lines = []
    for subject in registry.subject_names:
        score = student.grade_for(subject)
        shown = "-" if score is None else formatters.format_grade_value(score)
        lines.append(f"... {subject:<20} {shown:>6}")

    return "\n".join(lines)


def format_student_multiline(student: Student, registry: Registry) -> str:
    header = dedent(
        f"""\
        Student {student.id}:
        ... Name: {student.name}
        ... Class: {student.class_name}
        ... Average: {formatters.format_score(student.get_average())}
        ... Status: {registry.status_of(student).value}
        Grades:"""
    )

    return f"{header}\n{format_grades(student, registry)}"


# === statistics formatters ===


def format_school_statistics(stats: dict[str, Any]) -> str:
    return dedent(
        f"""\
        ... Total Students   : {stats["total_students"]}
        ... Total Classes    : {stats["total_classes"]}
        ... School Average   : {formatters.format_score(stats["school_average"])}
        ... Passed           : {stats["passed_students"]}
        ... Failed           : {stats["failed_students"]}
        ... Pass Rate        : {formatters.format_percentage(stats["pass_rate"])}"""
    )


def format_class_statistics(stats: dict[str, Any]) -> str:
    return dedent(
        f"""\
        Class {stats["class_name"]}:
        ... Total Students   : {stats["total_students"]}
        ... Class Average    : {formatters.format_score(stats["class_average"])}
        ... Passed           : {stats["passed_students"]}
        ... Failed           : {stats["failed_students"]}
        ... Pass Rate        : {formatters.format_percentage(stats["pass_rate"])}
        ... Highest Average  : {formatters.format_score(stats["highest_average"])}
        ... Lowest Average   : {formatters.format_score(stats["lowest_average"])}"""
    )


def format_ranking_line(rank: int, student: Student) -> str:
    average = formatters.format_score(student.get_average())
    return f"#{rank:<2} {student.name:<20} ({student.id}, {student.class_name}) - Avg: {average}"
