# models/registry.py

"""
The Registry is the central data object of the program and represents the "source of truth" for all student records.

Students are kept in insertion order alongside two name registries: the class registry and the subject registry.
Both registries are unique under case-insensitive comparison and kept sorted. Class names stay registered after
their last student leaves; subjects are never removed.

Provides methods for adding, removing, finding, and updating students, managing the class and subject registries,
recording grades, and deriving rankings and statistics. Also provides the snapshot codec used by the record store
to persist the whole registry as a single JSON document.

Mutating methods return a `Response` and either apply completely or leave the registry unchanged.
Read-only lookups return plain values.
"""

from __future__ import annotations

import logging
from typing import Any

from core import stats
from core.config import (
    DEFAULT_TOP_N,
    MIN_FAIL_GRADE,
    PASSING_GRADE,
    STUDENT_ID_DIGITS,
    STUDENT_ID_PREFIX,
)
from core.response import ErrorCode, Response
from core.utils import find_name, is_valid_student_id, normalize
from models.student import GradeStatus, Student

logger = logging.getLogger(__name__)


class Registry:

    def __init__(
        self,
        passing_grade: float = PASSING_GRADE,
        min_fail_grade: float = MIN_FAIL_GRADE,
    ):
        self._students: list[Student] = []
        self._class_names: list[str] = []
        self._subject_names: list[str] = []
        self._passing_grade: float = passing_grade
        self._min_fail_grade: float = min_fail_grade
        self._unsaved_changes: bool = False

    # === properties ===

    # --- core data structures ---

    @property
    def students(self) -> list[Student]:
        return self._students.copy()

    @property
    def class_names(self) -> list[str]:
        return self._class_names.copy()

    @property
    def subject_names(self) -> list[str]:
        return self._subject_names.copy()

    @property
    def student_count(self) -> int:
        return len(self._students)

    # --- grading thresholds ---

    @property
    def passing_grade(self) -> float:
        return self._passing_grade

    @property
    def min_fail_grade(self) -> float:
        return self._min_fail_grade

    # --- status markers ---

    @property
    def has_unsaved_changes(self) -> bool:
        return self._unsaved_changes

    def mark_saved(self) -> None:
        self._unsaved_changes = False

    # === persistence and import ===

    def to_snapshot(self) -> dict[str, Any]:
        return {
            "students": [s.to_dict() for s in self._students],
            "classNames": self.class_names,
            "subjectNames": self.subject_names,
        }

    @classmethod
    def from_snapshot(
        cls,
        data: Any,
        passing_grade: float = PASSING_GRADE,
        min_fail_grade: float = MIN_FAIL_GRADE,
    ) -> Response:
        """
        Rebuilds a `Registry` from a snapshot produced by `to_snapshot()`.

        Args:
            data (Any): The deserialized snapshot. Either a dictionary with "students", "classNames", and
                "subjectNames" lists, or a bare list of student dictionaries (the legacy file format).
            passing_grade (float): Minimum average for a pass in the rebuilt registry.
            min_fail_grade (float): Hard-fail threshold in the rebuilt registry.

        Returns:
            Response: A structured response with the following contract:
                - success (bool):
                    - True if every record was imported.
                    - False if the snapshot is malformed or any student fails validation.
                - detail (str | None):
                    - On failure, a human-readable description of the error.
                    - On success, a summary of what was loaded.
                - error (ErrorCode | None):
                    - `ErrorCode.INVALID_INPUT` if the snapshot structure is wrong.
                    - `ErrorCode.MISSING_REQUIRED_FIELD` if a student record lacks a key.
                    - `ErrorCode.VALIDATION_FAILED` if a student record holds an invalid value.
                    - `ErrorCode.DUPLICATE_ID` if two student records share an id.
                - status_code (int | None):
                    - 200 on success
                    - 400 or 409 on failure
                - data (dict): Payload with the following keys:
                    - On success:
                        - "registry" (Registry): The rebuilt `Registry`.
                    - On failure:
                        - None

        Notes:
            - Students are imported first, then the class registry, then the subject registry. Setting the
              subject registry last re-syncs every student's subject view, which must happen before any
              average or status is evaluated.
            - The class registry is the union of the snapshot's class names and the classes of its students.
              Students whose class differs only in case from an earlier spelling take that earlier spelling.
            - The subject registry is the union of the snapshot's subject names and every recorded grade key.
            - For the legacy list format, subjects are derived from the recorded grade keys.
            - This method never raises; the import fails fast on the first bad record.
        """
        if isinstance(data, list):
            student_data = data
            class_data: Any = []
            subject_data: Any = [
                subject
                for record in data
                if isinstance(record, dict) and isinstance(record.get("grades"), dict)
                for subject in record["grades"]
            ]

        elif isinstance(data, dict):
            student_data = data.get("students", [])
            class_data = data.get("classNames", [])
            subject_data = data.get("subjectNames", [])

        else:
            return Response.fail(
                detail=f"Expected a snapshot object or list, got {type(data).__name__}.",
                error=ErrorCode.INVALID_INPUT,
            )

        for label, value in (
            ("students", student_data),
            ("classNames", class_data),
            ("subjectNames", subject_data),
        ):
            if not isinstance(value, list):
                return Response.fail(
                    detail=f"Expected '{label}' to contain a list.",
                    error=ErrorCode.INVALID_INPUT,
                )

        for label, names in (("classNames", class_data), ("subjectNames", subject_data)):
            if not all(isinstance(n, str) and n.strip() for n in names):
                return Response.fail(
                    detail=f"Every entry in '{label}' must be a non-empty string.",
                    error=ErrorCode.INVALID_INPUT,
                )

        registry = cls(passing_grade, min_fail_grade)

        for record in student_data:
            if not isinstance(record, dict):
                return Response.fail(
                    detail=f"Expected a student object, got {record!r}.",
                    error=ErrorCode.INVALID_INPUT,
                )

            try:
                student = Student.from_dict(record)

            except KeyError as e:
                return Response.fail(
                    detail=f"Failed to deserialize student: {record} - missing {e}",
                    error=ErrorCode.MISSING_REQUIRED_FIELD,
                )

            except (TypeError, ValueError) as e:
                return Response.fail(
                    detail=f"Failed to deserialize student: {record} - {e}",
                    error=ErrorCode.VALIDATION_FAILED,
                )

            add_response = registry.add_student(student)

            if not add_response.success:
                return Response.fail(
                    detail=f"Failed to import student: {record} - {add_response.detail}",
                    error=add_response.error or ErrorCode.INTERNAL_ERROR,
                    status_code=add_response.status_code,
                )

        for class_name in class_data:
            registry._insert_name(registry._class_names, class_name)

        subject_names: list[str] = []
        for subject in subject_data:
            registry._insert_name(subject_names, subject)

        # grade keys missing from subjectNames still count toward average and status
        for student in registry._students:
            for subject in student.grades:
                if find_name(subject_names, subject) is None:
                    logger.info("Registering subject %s found in grades of student %s", subject, student.id)
                    registry._insert_name(subject_names, subject)

        registry._set_subject_names(subject_names)

        registry._unsaved_changes = False

        return Response.succeed(
            detail=(
                f"Loaded {registry.student_count} students, {len(registry._class_names)} classes, "
                f"and {len(registry._subject_names)} subjects."
            ),
            data={
                "registry": registry,
            },
        )

    # === data accessors ===

    # --- find students ---

    def find_by_id(self, student_id: str) -> Student | None:
        return next((s for s in self._students if s.id == student_id), None)

    def find_by_id_or_name(self, query: str) -> list[Student]:
        """
        Searches students by ID or name.

        Args:
            query (str): The search key.

        Returns:
            - `[student]` if `query` is exactly a student ID.
            - Otherwise every student whose ID or name contains `query`, compared case-insensitively, in
              insertion order. May be empty.
            - An empty list if `query` is blank.
        """
        if not isinstance(query, str) or not query.strip():
            return []

        exact = self.find_by_id(query)
        if exact is not None:
            return [exact]

        needle = query.lower()

        return [
            s
            for s in self._students
            if needle in s.name.lower() or needle in s.id.lower()
        ]

    def list_students_by_class(self, class_name: str) -> list[Student]:
        target = normalize(class_name)
        return [s for s in self._students if normalize(s.class_name) == target]

    # --- identifiers ---

    def generate_next_id(self) -> str | None:
        """
        Returns the ID following the highest well-formed ID in use.

        Gaps left by removed students are never reused, and IDs that do not match the `S###` format are
        ignored. Returns None when `S999` is already taken and no well-formed ID remains.
        """
        max_number = max(
            (int(s.id[1:]) for s in self._students if is_valid_student_id(s.id)),
            default=0,
        )
        next_number = max_number + 1

        if next_number >= 10**STUDENT_ID_DIGITS:
            return None

        return f"{STUDENT_ID_PREFIX}{next_number:0{STUDENT_ID_DIGITS}d}"

    # --- rankings and statistics ---

    def top_students(self, n: int = DEFAULT_TOP_N) -> list[Student]:
        return stats.rank_by_average(
            self._students, n, self._passing_grade, self._min_fail_grade
        )

    def school_statistics(self) -> dict[str, Any]:
        return stats.school_statistics(
            self._students,
            len(self._class_names),
            self._passing_grade,
            self._min_fail_grade,
        )

    def class_statistics(self, class_name: str) -> dict[str, Any] | None:
        return stats.class_statistics(
            class_name, self._students, self._passing_grade, self._min_fail_grade
        )

    def status_of(self, student: Student) -> GradeStatus:
        return student.get_status(
            passing_grade=self._passing_grade, min_fail_grade=self._min_fail_grade
        )

    # === data manipulators ===

    def _mark_dirty(self) -> None:
        self._unsaved_changes = True

    # --- student manipulation ---

    def add_student(self, student: Student) -> Response:
        """
        Adds a `Student` to the registry.

        Args:
            student (Student): The `Student` object to be added.

        Returns:
            Response: A structured response with the following contract:
                - success (bool):
                    - True if the `Student` object was added.
                    - False if the id is malformed or taken, or the name or class is empty.
                - detail (str | None):
                    - On failure, a human-readable description of the error.
                    - On success, a simple confirmation message.
                - error (ErrorCode | None):
                    - `ErrorCode.VALIDATION_FAILED` for a malformed id, an empty name, or an empty class.
                    - `ErrorCode.DUPLICATE_ID` if another student already has the id.
                - status_code (int | None):
                    - 200 on success
                    - 400 or 409 on failure
                - data (dict): Payload with the following keys:
                    - On success:
                        - "record" (Student): The added `Student` object.
                    - On failure:
                        - None

        Notes:
            - The student's class is registered if it is new. If it matches an existing class
              case-insensitively, the student takes the registered spelling.
            - The student's subject view is synced to the subject registry before insertion.
        """
        try:
            Student.validate_id_input(student.id)

        except ValueError as e:
            return self._reject(f"Input validation failed: {e}", ErrorCode.VALIDATION_FAILED)

        if self.find_by_id(student.id) is not None:
            return self._reject(
                f"A student with the ID '{student.id}' already exists.",
                ErrorCode.DUPLICATE_ID,
            )

        try:
            name = Student.validate_name_input(student.name)
            class_name = Student.validate_name_input(student.class_name, "Class")

        except ValueError as e:
            return self._reject(f"Input validation failed: {e}", ErrorCode.VALIDATION_FAILED)

        registered_class = self._register_class(class_name)

        if registered_class != class_name:
            logger.info(
                "Student %s class %s stored as registered class %s",
                student.id,
                class_name,
                registered_class,
            )

        student.name = name
        student._assign_class(registered_class)
        student.sync_subject_names(self._subject_names)

        self._students.append(student)
        self._mark_dirty()

        logger.info("Added student %s (%s) to class %s", student.id, student.name, student.class_name)

        return Response.succeed(
            detail=f"Student {student.name} ({student.id}) successfully added.",
            data={
                "record": student,
            },
        )

    def remove_student(self, student_id: str) -> Response:
        """
        Removes the student with the given ID. The class and subject registries are left untouched.
        """
        student = self.find_by_id(student_id)

        if student is None:
            return self._reject(
                f"No student found with the ID '{student_id}'.", ErrorCode.NOT_FOUND
            )

        self._students.remove(student)
        self._mark_dirty()

        logger.info("Removed student %s (%s)", student.id, student.name)

        return Response.succeed(
            detail=f"Student {student.name} ({student.id}) successfully removed.",
            data={
                "record": student,
            },
        )

    def update_student(
        self,
        student_id: str,
        name: str | None = None,
        class_name: str | None = None,
    ) -> Response:
        """
        Updates the name and/or class of a student.

        Args:
            student_id (str): The ID of the student to update.
            name (str | None): A new name, or None to leave the name unchanged.
            class_name (str | None): A new class, or None to leave the class unchanged.

        Returns:
            Response: A structured response with the following contract:
                - success (bool):
                    - True if the student was updated, or no fields were provided.
                    - False if the student does not exist or a provided field is empty.
                - error (ErrorCode | None):
                    - `ErrorCode.NOT_FOUND` if no student has the ID.
                    - `ErrorCode.VALIDATION_FAILED` if a provided field is empty.
                - data (dict): Payload with the following keys:
                    - On success:
                        - "record" (Student): The updated `Student` object.

        Notes:
            - Both fields are validated before either is applied.
            - A class that is not yet registered is added to the class registry.
        """
        student = self.find_by_id(student_id)

        if student is None:
            return self._reject(
                f"No student found with the ID '{student_id}'.", ErrorCode.NOT_FOUND
            )

        try:
            new_name = None if name is None else Student.validate_name_input(name)
            new_class = (
                None
                if class_name is None
                else Student.validate_name_input(class_name, "Class")
            )

        except ValueError as e:
            return self._reject(f"Input validation failed: {e}", ErrorCode.VALIDATION_FAILED)

        if new_name is None and new_class is None:
            return Response.succeed(
                detail="No changes provided. Student was not modified.",
                data={
                    "record": student,
                },
            )

        if new_name is not None:
            student.name = new_name

        if new_class is not None:
            student._assign_class(self._register_class(new_class))

        self._mark_dirty()

        logger.info("Updated student %s: name=%s, class=%s", student.id, student.name, student.class_name)

        return Response.succeed(
            detail=f"Student {student.id} successfully updated.",
            data={
                "record": student,
            },
        )

    def add_grade(self, student_id: str, subject: str, score: float) -> Response:
        """
        Records or overwrites a grade for a student in a registered subject.

        Returns:
            Response: Fails with `ErrorCode.NOT_FOUND` if the student or subject is unknown, and with
            `ErrorCode.VALIDATION_FAILED` if the score is outside 0-100. On success, "record" holds the
            `Student`, and "average" and "status" hold the recomputed values.

        Notes:
            - The grade is stored under the registry's spelling of the subject.
        """
        student = self.find_by_id(student_id)

        if student is None:
            return self._reject(
                f"No student found with the ID '{student_id}'.", ErrorCode.NOT_FOUND
            )

        registered = find_name(self._subject_names, subject) if subject else None

        if registered is None:
            return self._reject(
                f"Subject '{subject}' is not registered.", ErrorCode.NOT_FOUND
            )

        try:
            student.add_or_update_grade(registered, score)

        except ValueError as e:
            return self._reject(f"Input validation failed: {e}", ErrorCode.VALIDATION_FAILED)

        self._mark_dirty()

        logger.info("Recorded grade %s=%s for student %s", registered, score, student.id)

        return Response.succeed(
            detail=f"Grade for {registered} ({score}) successfully recorded for {student.name}.",
            data={
                "record": student,
                "average": student.get_average(),
                "status": self.status_of(student),
            },
        )

    # --- class manipulation ---

    def add_class_name(self, class_name: str) -> Response:
        return self._add_name(self._class_names, class_name, "Class")

    def rename_class_name(self, old_name: str, new_name: str) -> Response:
        """
        Renames a registered class and moves every student in it to the new name.

        Returns:
            Response: Fails with `ErrorCode.NOT_FOUND` if `old_name` is not registered,
            `ErrorCode.VALIDATION_FAILED` if `new_name` is empty, and `ErrorCode.CONFLICT` if `new_name`
            matches a different registered class. On success, "count" holds the number of students moved.
        """
        check = self._check_rename(self._class_names, old_name, new_name, "Class")

        if not check.success:
            return check

        index = check.data["index"]
        new_name = check.data["new_name"]
        target = normalize(self._class_names[index])

        self._class_names[index] = new_name
        self._class_names.sort()

        count = 0
        for student in self._students:
            if normalize(student.class_name) == target:
                student._assign_class(new_name)
                count += 1

        self._mark_dirty()

        logger.info("Renamed class %s to %s (%d students)", old_name, new_name, count)

        return Response.succeed(
            detail=f"Class '{old_name}' successfully renamed to '{new_name}'.",
            data={
                "count": count,
            },
        )

    # --- subject manipulation ---

    def add_subject_name(self, subject_name: str) -> Response:
        response = self._add_name(self._subject_names, subject_name, "Subject")

        if response.success:
            self._set_subject_names(self._subject_names)

        return response

    def rename_subject_name(self, old_name: str, new_name: str) -> Response:
        """
        Renames a registered subject and migrates every student's grade to the new name.

        Returns:
            Response: Fails with `ErrorCode.NOT_FOUND` if `old_name` is not registered,
            `ErrorCode.VALIDATION_FAILED` if `new_name` is empty, and `ErrorCode.CONFLICT` if `new_name`
            matches a different registered subject. On success, "count" holds the number of students whose
            grade was migrated.

        Notes:
            - Every check runs before the registry is touched, so a failed rename changes nothing.
            - A student that already holds a grade under `new_name` keeps it and is skipped.
        """
        check = self._check_rename(self._subject_names, old_name, new_name, "Subject")

        if not check.success:
            return check

        index = check.data["index"]
        new_name = check.data["new_name"]
        registered_old = self._subject_names[index]

        renamed = self._subject_names.copy()
        renamed[index] = new_name
        self._set_subject_names(sorted(renamed))

        count = 0
        for student in self._students:
            if student.rename_subject_key(registered_old, new_name):
                count += 1
            elif student.has_grade_for(registered_old):
                logger.warning(
                    "Kept existing %s grade for student %s; %s grade not migrated",
                    new_name,
                    student.id,
                    registered_old,
                )

        self._mark_dirty()

        logger.info("Renamed subject %s to %s (%d grades migrated)", registered_old, new_name, count)

        return Response.succeed(
            detail=f"Subject '{registered_old}' successfully renamed to '{new_name}'.",
            data={
                "count": count,
            },
        )

    # === helper methods ===

    def _reject(self, detail: str, error: ErrorCode) -> Response:
        logger.warning(detail)
        return Response.fail(detail=detail, error=error)

    def _insert_name(self, names: list[str], name: str) -> str:
        """
        Inserts `name` into a sorted name registry unless a case-insensitive match exists.

        Returns:
            The registered spelling, either the existing entry or the newly inserted name.
        """
        name = name.strip()
        existing = find_name(names, name)

        if existing is not None:
            return existing

        names.append(name)
        names.sort()
        return name

    def _register_class(self, class_name: str) -> str:
        return self._insert_name(self._class_names, class_name)

    def _set_subject_names(self, subject_names: list[str]) -> None:
        self._subject_names = sorted(subject_names)

        for student in self._students:
            student.sync_subject_names(self._subject_names)

    def _add_name(self, names: list[str], name: str, label: str) -> Response:
        try:
            name = Student.validate_name_input(name, f"{label} name")

        except ValueError as e:
            return self._reject(f"Input validation failed: {e}", ErrorCode.VALIDATION_FAILED)

        if find_name(names, name) is not None:
            return Response.fail(
                detail=f"{label} '{name}' already exists.",
                error=ErrorCode.CONFLICT,
            )

        self._insert_name(names, name)
        self._mark_dirty()

        logger.info("Registered %s %s", label.lower(), name)

        return Response.succeed(detail=f"{label} '{name}' successfully added.")

    def _check_rename(
        self, names: list[str], old_name: str, new_name: str, label: str
    ) -> Response:
        """
        Validates a rename without touching the registry.

        Returns:
            Response: On success, "index" holds the position of `old_name` in `names` and "new_name" holds
            the stripped replacement.
        """
        try:
            new_name = Student.validate_name_input(new_name, f"New {label.lower()} name")

        except ValueError as e:
            return self._reject(f"Input validation failed: {e}", ErrorCode.VALIDATION_FAILED)

        target = normalize(old_name)
        index = next(
            (i for i, n in enumerate(names) if normalize(n) == target), None
        )

        if index is None:
            return self._reject(
                f"{label} '{old_name}' is not registered.", ErrorCode.NOT_FOUND
            )

        new_target = normalize(new_name)
        if any(i != index and normalize(n) == new_target for i, n in enumerate(names)):
            return self._reject(
                f"{label} '{new_name}' already exists.", ErrorCode.CONFLICT
            )

        return Response.succeed(
            data={
                "index": index,
                "new_name": new_name,
            }
        )

    # === dunder methods ===

    def __len__(self) -> int:
        return len(self._students)

    def __repr__(self) -> str:
        return (
            f"Registry({len(self._students)} students, "
            f"{len(self._class_names)} classes, {len(self._subject_names)} subjects)"
        )
