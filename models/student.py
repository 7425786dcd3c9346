# models/student.py

"""
Represents a student held in the Registry.

Stores core identifying information such as the student ID, name, and class,
along with a mapping of subject names to recorded scores.

Includes functionality for:
- Recording and overwriting grades per subject
- Migrating a grade when a subject is renamed
- Computing an average and a pass/fail status against the subject view
- Serializing to and from JSON-compatible dictionaries

The subject view is a copy of the Registry's subject list. Averages are taken
over every subject in the view, so a subject with no recorded grade counts as
a score of 0. The Registry is responsible for keeping the view in sync.
"""

from __future__ import annotations

from enum import Enum

from core.config import MIN_FAIL_GRADE, PASSING_GRADE
from core.utils import is_valid_grade, is_valid_name, is_valid_student_id, normalize


class GradeStatus(str, Enum):
    PASSED = "Passed"
    FAILED = "Failed"


class Student:

    def __init__(
        self,
        id: str,
        name: str,
        class_name: str,
        grades: dict[str, float] | None = None,
    ):
        self._id: str = id
        self._name: str = name
        self._class_name: str = class_name
        self._grades: dict[str, float] = dict(grades) if grades else {}
        self._subject_names: list[str] = []

    # === properties ===

    @property
    def id(self) -> str:
        return self._id

    @property
    def name(self) -> str:
        return self._name

    @name.setter
    def name(self, name: str) -> None:
        self._name = Student.validate_name_input(name)

    @property
    def class_name(self) -> str:
        return self._class_name

    def _assign_class(self, class_name: str) -> None:
        # Registry only; callers go through Registry.update_student()
        self._class_name = Student.validate_name_input(class_name, "Class")

    @property
    def grades(self) -> dict[str, float]:
        return self._grades.copy()

    @property
    def subject_names(self) -> list[str]:
        return self._subject_names.copy()

    def sync_subject_names(self, subject_names: list[str]) -> None:
        self._subject_names = list(subject_names)

    # === persistence and import ===

    def to_dict(self) -> dict:
        return {
            "id": self._id,
            "name": self._name,
            "class": self._class_name,
            "grades": self._grades.copy(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> Student:
        grades_raw = data.get("grades", {})

        if not isinstance(grades_raw, dict):
            raise TypeError(f"Expected grades to be a mapping, got {grades_raw!r}.")

        for subject, score in grades_raw.items():
            Student.validate_name_input(subject, "Subject")
            Student.validate_grade_input(score, subject)

        return cls(
            id=data["id"],
            name=data["name"],
            class_name=data["class"],
            grades=grades_raw,
        )

    # === dunder methods ===

    def __repr__(self) -> str:
        return f"Student({self._id}, {self._name}, {self._class_name}, {self._grades})"

    def __str__(self) -> str:
        return f"STUDENT: name: {self._name}, class: {self._class_name}, id: {self._id}"

    # === data accessors ===

    def grade_for(self, subject: str) -> float | None:
        key = self._find_grade_key(subject)
        return None if key is None else self._grades[key]

    def has_grade_for(self, subject: str) -> bool:
        return self._find_grade_key(subject) is not None

    def get_average(self, subject_names: list[str] | None = None) -> float:
        """
        Computes the average score over every registered subject.

        Args:
            subject_names (list[str] | None): Subjects to average over. Defaults to the synced subject view.

        Returns:
            The sum of recorded-or-zero scores divided by the number of subjects, or 0.0 if there are none.
        """
        subjects = self._subject_names if subject_names is None else subject_names

        if not subjects:
            return 0.0

        total = sum(self.grade_for(subject) or 0 for subject in subjects)

        return total / len(subjects)

    def get_status(
        self,
        subject_names: list[str] | None = None,
        passing_grade: float = PASSING_GRADE,
        min_fail_grade: float = MIN_FAIL_GRADE,
    ) -> GradeStatus:
        """
        Determines the pass/fail status of the student.

        Args:
            subject_names (list[str] | None): Subjects to evaluate. Defaults to the synced subject view.
            passing_grade (float): Minimum average for a pass.
            min_fail_grade (float): Any recorded grade below this value fails the student.

        Returns:
            GradeStatus.PASSED or GradeStatus.FAILED.

        Notes:
            - With no subjects the student passes, since no requirement is violated.
            - Only recorded grades are checked against `min_fail_grade`; missing grades only lower the average.
        """
        subjects = self._subject_names if subject_names is None else subject_names

        if not subjects:
            return GradeStatus.PASSED

        for subject in subjects:
            score = self.grade_for(subject)
            if score is not None and score < min_fail_grade:
                return GradeStatus.FAILED

        if self.get_average(subjects) >= passing_grade:
            return GradeStatus.PASSED

        return GradeStatus.FAILED

    # === data manipulators ===

    def add_or_update_grade(self, subject: str, score: float) -> None:
        score = Student.validate_grade_input(score, subject)

        # overwrite an existing key spelled with a different case
        key = self._find_grade_key(subject) or subject
        self._grades[key] = score

    def rename_subject_key(self, old_name: str, new_name: str) -> bool:
        """
        Moves a recorded grade from `old_name` to `new_name`.

        Returns:
            True if a grade was moved. False if there was nothing recorded under
            `old_name`, or if a grade already exists under `new_name`, in which case
            the existing grade is kept and nothing changes.
        """
        old_key = self._find_grade_key(old_name)

        if old_key is None:
            return False

        new_key = self._find_grade_key(new_name)

        if new_key is not None and new_key != old_key:
            return False

        self._grades[new_name] = self._grades.pop(old_key)
        return True

    # === data validators ===

    @staticmethod
    def validate_id_input(student_id: str) -> str:
        if not is_valid_student_id(student_id):
            raise ValueError(
                f"Invalid student ID '{student_id}'. IDs must be 'S' followed by 3 digits (e.g. S001)."
            )
        return student_id

    @staticmethod
    def validate_name_input(name: str, field: str = "Name") -> str:
        if not is_valid_name(name):
            raise ValueError(f"{field} cannot be empty.")
        return name.strip()

    @staticmethod
    def validate_grade_input(score: float, subject: str = "") -> float:
        """
        Validates a grade value.

        Args:
            score (float): The score to validate.
            subject (str): Optional subject name used in the error message.

        Returns:
            The score unchanged if valid.

        Raises:
            ValueError: If the score is not a number between 0 and 100 inclusive (NaN and booleans are rejected).
        """
        if not is_valid_grade(score):
            label = f" for {subject}" if subject else ""
            raise ValueError(
                f"Invalid grade{label}: {score!r}. Grades must be numbers between 0 and 100."
            )
        return score

    # === helper methods ===

    def _find_grade_key(self, subject: str) -> str | None:
        if subject in self._grades:
            return subject

        target = normalize(subject)
        return next((k for k in self._grades if normalize(k) == target), None)
