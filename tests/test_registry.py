# tests/test_registry.py

import logging

import pytest

from core.response import ErrorCode
from models.registry import Registry
from models.student import GradeStatus, Student


def test_new_registry_is_empty(empty_registry):
    assert empty_registry.students == []
    assert empty_registry.class_names == []
    assert empty_registry.subject_names == []
    assert len(empty_registry) == 0
    assert not empty_registry.has_unsaved_changes


# === data manipulators ===

# --- registry methods ---


def test_mutation_marks_dirty(empty_registry):
    assert not empty_registry.has_unsaved_changes

    empty_registry.add_student(Student("S001", "Ana", "10A"))
    assert empty_registry.has_unsaved_changes

    empty_registry.mark_saved()
    assert not empty_registry.has_unsaved_changes


def test_failed_mutation_does_not_mark_dirty(empty_registry):
    empty_registry.add_student(Student("S1", "Ana", "10A"))
    empty_registry.remove_student("S404")

    assert not empty_registry.has_unsaved_changes


# --- student methods ---


def test_add_student(empty_registry, sample_student):
    response = empty_registry.add_student(sample_student)

    assert response.success
    assert response.data["record"] is sample_student
    assert empty_registry.students == [sample_student]
    assert empty_registry.class_names == ["10A"]


def test_add_student_duplicate_id(empty_registry):
    empty_registry.add_student(Student("S001", "Ana", "10A"))
    response = empty_registry.add_student(Student("S001", "Budi", "10B"))

    assert not response.success
    assert response.error == ErrorCode.DUPLICATE_ID
    assert response.status_code == 409
    assert empty_registry.student_count == 1
    assert empty_registry.class_names == ["10A"]


def test_ids_stay_unique(empty_registry):
    for student_id in ["S001", "S002", "S001", "S003", "S002"]:
        empty_registry.add_student(Student(student_id, "Name", "10A"))

    ids = [s.id for s in empty_registry.students]
    assert ids == ["S001", "S002", "S003"]


@pytest.mark.parametrize("student_id", ["S１２３", "S٩٩٩"])
def test_add_student_rejects_non_ascii_digits(empty_registry, student_id):
    empty_registry.add_student(Student("S123", "Ana", "10A"))

    response = empty_registry.add_student(Student(student_id, "Budi", "10A"))

    assert not response.success
    assert response.error == ErrorCode.VALIDATION_FAILED
    assert [s.id for s in empty_registry.students] == ["S123"]
    assert empty_registry.generate_next_id() == "S124"


def test_add_student_invalid_id_leaves_registry_unchanged(empty_registry):
    response = empty_registry.add_student(Student("S1", "Ana", "10A"))

    assert not response.success
    assert response.error == ErrorCode.VALIDATION_FAILED
    assert response.status_code == 400
    assert empty_registry.students == []
    assert empty_registry.class_names == []


@pytest.mark.parametrize("name, class_name", [("", "10A"), ("Ana", "   ")])
def test_add_student_empty_fields(empty_registry, name, class_name):
    response = empty_registry.add_student(Student("S001", name, class_name))

    assert not response.success
    assert response.error == ErrorCode.VALIDATION_FAILED
    assert empty_registry.students == []


def test_add_student_uses_registered_class_spelling(empty_registry):
    empty_registry.add_class_name("10A")
    student = Student("S001", " Ana ", "10a")

    response = empty_registry.add_student(student)

    assert response.success
    assert student.name == "Ana"
    assert student.class_name == "10A"
    assert empty_registry.class_names == ["10A"]


def test_add_student_syncs_subject_view(empty_registry, sample_student):
    empty_registry.add_subject_name("Math")
    empty_registry.add_student(sample_student)

    assert sample_student.subject_names == ["Math"]


def test_remove_student(sample_registry):
    response = sample_registry.remove_student("S002")

    assert response.success
    assert sample_registry.find_by_id("S002") is None
    assert sample_registry.student_count == 3


def test_remove_student_keeps_class(empty_registry, sample_student):
    empty_registry.add_student(sample_student)
    empty_registry.remove_student("S001")

    assert empty_registry.students == []
    assert empty_registry.class_names == ["10A"]


def test_remove_student_not_found(sample_registry):
    response = sample_registry.remove_student("S404")

    assert not response.success
    assert response.error == ErrorCode.NOT_FOUND
    assert response.status_code == 404
    assert sample_registry.student_count == 4


def test_update_student(sample_registry):
    response = sample_registry.update_student("S001", name="Ana Maria", class_name="11C")

    assert response.success

    student = sample_registry.find_by_id("S001")
    assert student.name == "Ana Maria"
    assert student.class_name == "11C"
    assert "11C" in sample_registry.class_names


def test_update_student_without_changes(sample_registry):
    sample_registry.mark_saved()
    response = sample_registry.update_student("S001")

    assert response.success
    assert not sample_registry.has_unsaved_changes


def test_update_student_not_found(sample_registry):
    response = sample_registry.update_student("S404", name="Nobody")

    assert not response.success
    assert response.error == ErrorCode.NOT_FOUND


def test_update_student_validates_before_applying(sample_registry):
    response = sample_registry.update_student("S001", name="   ", class_name="11C")

    assert not response.success
    assert response.error == ErrorCode.VALIDATION_FAILED

    student = sample_registry.find_by_id("S001")
    assert student.name == "Ana"
    assert student.class_name == "10A"
    assert "11C" not in sample_registry.class_names


# --- grade methods ---


def test_add_grade(empty_registry, sample_student):
    empty_registry.add_subject_name("Math")
    empty_registry.add_student(sample_student)

    response = empty_registry.add_grade("S001", "Math", 80)

    assert response.success
    assert response.data["average"] == 80.0
    assert response.data["status"] == GradeStatus.PASSED


def test_add_grade_uses_registered_subject_spelling(empty_registry, sample_student):
    empty_registry.add_subject_name("Math")
    empty_registry.add_student(sample_student)

    empty_registry.add_grade("S001", "MATH", 80)

    assert sample_student.grades == {"Math": 80}


def test_add_grade_overwrites(sample_registry):
    sample_registry.add_grade("S002", "Math", 100)

    assert sample_registry.find_by_id("S002").grade_for("Math") == 100


def test_add_grade_unknown_student(sample_registry):
    response = sample_registry.add_grade("S404", "Math", 80)

    assert not response.success
    assert response.error == ErrorCode.NOT_FOUND


def test_add_grade_unknown_subject(sample_registry):
    response = sample_registry.add_grade("S001", "History", 80)

    assert not response.success
    assert response.error == ErrorCode.NOT_FOUND
    assert not sample_registry.find_by_id("S001").has_grade_for("History")


@pytest.mark.parametrize("score", [-0.5, 100.01, float("nan")])
def test_add_grade_out_of_range(sample_registry, score):
    response = sample_registry.add_grade("S001", "Math", score)

    assert not response.success
    assert response.error == ErrorCode.VALIDATION_FAILED
    assert sample_registry.find_by_id("S001").grade_for("Math") == 90


# --- class methods ---


def test_add_class_name(empty_registry):
    assert empty_registry.add_class_name("10B").success
    assert empty_registry.add_class_name("10A").success

    assert empty_registry.class_names == ["10A", "10B"]


def test_add_class_name_duplicate_is_case_insensitive(empty_registry):
    empty_registry.add_class_name("10A")
    response = empty_registry.add_class_name("10a")

    assert not response.success
    assert response.error == ErrorCode.CONFLICT
    assert empty_registry.class_names == ["10A"]


def test_add_class_name_blank(empty_registry):
    response = empty_registry.add_class_name("  ")

    assert not response.success
    assert response.error == ErrorCode.VALIDATION_FAILED


def test_rename_class_name(sample_registry):
    response = sample_registry.rename_class_name("10a", "Grade 10A")

    assert response.success
    assert response.data["count"] == 2
    assert sample_registry.class_names == ["10B", "Grade 10A"]
    assert [s.name for s in sample_registry.list_students_by_class("Grade 10A")] == [
        "Ana",
        "Budi",
    ]
    assert sample_registry.list_students_by_class("10A") == []


def test_rename_class_name_not_found(sample_registry):
    response = sample_registry.rename_class_name("12Z", "13Z")

    assert not response.success
    assert response.error == ErrorCode.NOT_FOUND


def test_rename_class_name_collision(sample_registry):
    response = sample_registry.rename_class_name("10A", "10b")

    assert not response.success
    assert response.error == ErrorCode.CONFLICT
    assert sample_registry.class_names == ["10A", "10B"]
    assert sample_registry.find_by_id("S001").class_name == "10A"


# --- subject methods ---


def test_add_subject_name_syncs_students(sample_registry):
    response = sample_registry.add_subject_name("Art")

    assert response.success
    assert sample_registry.subject_names == ["Art", "Math", "Science"]

    # unrecorded Art counts as 0: (0 + 90 + 90) / 3
    ana = sample_registry.find_by_id("S001")
    assert ana.get_average() == 60.0
    assert sample_registry.status_of(ana) == GradeStatus.FAILED


def test_add_subject_name_duplicate(sample_registry):
    response = sample_registry.add_subject_name("math")

    assert not response.success
    assert response.error == ErrorCode.CONFLICT
    assert sample_registry.subject_names == ["Math", "Science"]


def test_rename_subject_name_migrates_grades(sample_registry):
    averages = {s.id: s.get_average() for s in sample_registry.students}

    response = sample_registry.rename_subject_name("Math", "Mathematics")

    assert response.success
    assert response.data["count"] == 4
    assert sample_registry.subject_names == ["Mathematics", "Science"]

    for student in sample_registry.students:
        assert not student.has_grade_for("Math")
        assert student.has_grade_for("Mathematics")
        assert student.get_average() == averages[student.id]


def test_rename_subject_name_keeps_existing_target_grade(empty_registry):
    empty_registry.add_subject_name("Math")
    empty_registry.add_student(Student("S001", "Ana", "10A", {"Math": 80, "Maths": 60}))

    response = empty_registry.rename_subject_name("Math", "Maths")

    assert response.success
    assert response.data["count"] == 0
    assert empty_registry.find_by_id("S001").grades == {"Math": 80, "Maths": 60}


def test_rename_subject_name_collision_changes_nothing(sample_registry):
    before = sample_registry.to_snapshot()

    response = sample_registry.rename_subject_name("Math", "science")

    assert not response.success
    assert response.error == ErrorCode.CONFLICT
    assert sample_registry.to_snapshot() == before


def test_rename_subject_name_not_found(sample_registry):
    response = sample_registry.rename_subject_name("History", "World History")

    assert not response.success
    assert response.error == ErrorCode.NOT_FOUND


def test_rename_subject_name_blank(sample_registry):
    response = sample_registry.rename_subject_name("Math", " ")

    assert not response.success
    assert response.error == ErrorCode.VALIDATION_FAILED
    assert sample_registry.subject_names == ["Math", "Science"]


def test_rename_subject_name_case_only(sample_registry):
    response = sample_registry.rename_subject_name("Math", "MATH")

    assert response.success
    assert sample_registry.subject_names == ["MATH", "Science"]
    assert sample_registry.find_by_id("S001").grades == {"MATH": 90, "Science": 90}


# === data accessors ===


def test_find_by_id(sample_registry):
    assert sample_registry.find_by_id("S003").name == "Citra"
    assert sample_registry.find_by_id("S404") is None


def test_find_by_id_or_name_exact_id(sample_registry):
    results = sample_registry.find_by_id_or_name("S002")

    assert [s.id for s in results] == ["S002"]


def test_find_by_id_or_name_partial_name(sample_registry):
    results = sample_registry.find_by_id_or_name("A")

    assert [s.id for s in results] == ["S001", "S003"]


def test_find_by_id_or_name_partial_id(sample_registry):
    results = sample_registry.find_by_id_or_name("s00")

    assert [s.id for s in results] == ["S001", "S002", "S003", "S004"]


@pytest.mark.parametrize("query", ["", "   ", "zzz"])
def test_find_by_id_or_name_no_match(sample_registry, query):
    assert sample_registry.find_by_id_or_name(query) == []


def test_list_students_by_class(sample_registry):
    students = sample_registry.list_students_by_class("10b")

    assert [s.id for s in students] == ["S003", "S004"]


def test_generate_next_id_empty(empty_registry):
    assert empty_registry.generate_next_id() == "S001"


def test_generate_next_id_skips_gaps(empty_registry):
    empty_registry.add_student(Student("S001", "Ana", "10A"))
    empty_registry.add_student(Student("S005", "Budi", "10A"))

    assert empty_registry.generate_next_id() == "S006"

    empty_registry.remove_student("S001")
    assert empty_registry.generate_next_id() == "S006"


def test_generate_next_id_increases(empty_registry):
    previous = ""
    for name in ["Ana", "Budi", "Citra"]:
        next_id = empty_registry.generate_next_id()
        assert next_id > previous

        assert empty_registry.add_student(Student(next_id, name, "10A")).success
        previous = next_id


def test_generate_next_id_exhausted(empty_registry):
    empty_registry.add_student(Student("S999", "Ana", "10A"))

    assert empty_registry.generate_next_id() is None


# --- rankings and statistics ---


def test_top_students(sample_registry):
    top = sample_registry.top_students(3)

    assert [s.id for s in top] == ["S001", "S004"]


def test_top_students_only_passing(empty_registry):
    empty_registry.add_subject_name("Math")
    empty_registry.add_student(Student("S001", "Ana", "10A"))
    empty_registry.add_student(Student("S002", "Budi", "10A"))
    empty_registry.add_grade("S001", "Math", 90)
    empty_registry.add_grade("S002", "Math", 60)

    top = empty_registry.top_students(1)

    assert [s.id for s in top] == ["S001"]
    assert empty_registry.top_students(5) == top


def test_top_students_ties_keep_insertion_order(empty_registry):
    empty_registry.add_subject_name("Math")
    for student_id, name in [("S001", "Ana"), ("S002", "Budi"), ("S003", "Citra")]:
        empty_registry.add_student(Student(student_id, name, "10A"))
        empty_registry.add_grade(student_id, "Math", 80)

    top = empty_registry.top_students(2)

    assert [s.id for s in top] == ["S001", "S002"]


def test_top_students_non_positive_n(sample_registry):
    assert sample_registry.top_students(0) == []
    assert sample_registry.top_students(-1) == []


def test_school_statistics(sample_registry):
    stats = sample_registry.school_statistics()

    assert stats["total_students"] == 4
    assert stats["total_classes"] == 2
    assert stats["school_average"] == pytest.approx(69.5)
    assert stats["passed_students"] == 2
    assert stats["failed_students"] == 2
    assert stats["pass_rate"] == pytest.approx(50.0)


def test_class_statistics(sample_registry):
    stats = sample_registry.class_statistics("10B")

    assert stats["class_name"] == "10B"
    assert stats["total_students"] == 2
    assert stats["class_average"] == pytest.approx(64.0)
    assert stats["highest_average"] == pytest.approx(78.0)
    assert stats["lowest_average"] == pytest.approx(50.0)


def test_class_statistics_without_students(sample_registry):
    sample_registry.add_class_name("12Z")

    assert sample_registry.class_statistics("12Z") is None


# === snapshot codec ===


def test_snapshot_round_trip(sample_registry):
    sample_registry.add_class_name("12Z")
    snapshot = sample_registry.to_snapshot()

    response = Registry.from_snapshot(snapshot)

    assert response.success

    loaded = response.data["registry"]
    assert loaded.to_snapshot() == snapshot
    assert not loaded.has_unsaved_changes
    assert [s.get_average() for s in loaded.students] == [
        s.get_average() for s in sample_registry.students
    ]
    assert [loaded.status_of(s) for s in loaded.students] == [
        sample_registry.status_of(s) for s in sample_registry.students
    ]


def test_snapshot_shape(sample_registry):
    snapshot = sample_registry.to_snapshot()

    assert set(snapshot) == {"students", "classNames", "subjectNames"}
    assert snapshot["students"][0] == {
        "id": "S001",
        "name": "Ana",
        "class": "10A",
        "grades": {"Math": 90, "Science": 90},
    }


def test_from_snapshot_legacy_list():
    response = Registry.from_snapshot(
        [
            {"id": "S001", "name": "Ana", "class": "10A", "grades": {"Math": 80}},
            {"id": "S002", "name": "Budi", "class": "10B", "grades": {"Science": 70}},
        ]
    )

    assert response.success

    registry = response.data["registry"]
    assert registry.class_names == ["10A", "10B"]
    assert registry.subject_names == ["Math", "Science"]
    assert registry.find_by_id("S001").get_average() == 40.0


def test_from_snapshot_adds_student_classes():
    response = Registry.from_snapshot(
        {
            "students": [{"id": "S001", "name": "Ana", "class": "10A", "grades": {}}],
            "classNames": ["9C"],
            "subjectNames": [],
        }
    )

    assert response.success
    assert response.data["registry"].class_names == ["10A", "9C"]


def test_from_snapshot_registers_subjects_from_grades():
    response = Registry.from_snapshot(
        {
            "students": [
                {"id": "S001", "name": "Ana", "class": "10A", "grades": {"Math": 90, "Art": 10}}
            ],
            "classNames": ["10A"],
            "subjectNames": ["Math"],
        }
    )

    assert response.success

    registry = response.data["registry"]
    ana = registry.find_by_id("S001")
    assert registry.subject_names == ["Art", "Math"]
    assert ana.get_average() == 50.0
    assert registry.status_of(ana) == GradeStatus.FAILED


def test_from_snapshot_grade_key_in_other_case_is_not_duplicated():
    response = Registry.from_snapshot(
        {
            "students": [{"id": "S001", "name": "Ana", "class": "10A", "grades": {"math": 80}}],
            "subjectNames": ["Math"],
        }
    )

    registry = response.data["registry"]
    assert registry.subject_names == ["Math"]
    assert registry.find_by_id("S001").get_average() == 80.0


def test_from_snapshot_merges_class_spellings(caplog):
    with caplog.at_level(logging.INFO, logger="models.registry"):
        response = Registry.from_snapshot(
            [
                {"id": "S001", "name": "Ana", "class": "10A"},
                {"id": "S002", "name": "Budi", "class": "10a"},
            ]
        )

    registry = response.data["registry"]
    assert registry.class_names == ["10A"]
    assert [s.class_name for s in registry.students] == ["10A", "10A"]
    assert "S002 class 10a stored as registered class 10A" in caplog.text


@pytest.mark.parametrize(
    "data, error",
    [
        ("not a snapshot", ErrorCode.INVALID_INPUT),
        ({"students": {}}, ErrorCode.INVALID_INPUT),
        ({"students": [], "subjectNames": [""]}, ErrorCode.INVALID_INPUT),
        ({"students": ["S001"]}, ErrorCode.INVALID_INPUT),
        ({"students": [{"id": "S001", "name": "Ana"}]}, ErrorCode.MISSING_REQUIRED_FIELD),
        (
            {"students": [{"id": "S001", "name": "Ana", "class": "10A", "grades": {"Math": 120}}]},
            ErrorCode.VALIDATION_FAILED,
        ),
        (
            {"students": [{"id": "1", "name": "Ana", "class": "10A"}]},
            ErrorCode.VALIDATION_FAILED,
        ),
        (
            {
                "students": [
                    {"id": "S001", "name": "Ana", "class": "10A"},
                    {"id": "S001", "name": "Budi", "class": "10A"},
                ]
            },
            ErrorCode.DUPLICATE_ID,
        ),
    ],
)
def test_from_snapshot_rejects_malformed_data(data, error):
    response = Registry.from_snapshot(data)

    assert not response.success
    assert response.error == error


# === end-to-end scenarios ===


def test_grade_then_add_subject_scenario(empty_registry):
    empty_registry.add_subject_name("Math")
    empty_registry.add_student(Student("S001", "Ana", "10A"))

    response = empty_registry.add_grade("S001", "Math", 80)

    assert response.data["average"] == 80.0
    assert response.data["status"] == GradeStatus.PASSED

    empty_registry.add_subject_name("Science")
    ana = empty_registry.find_by_id("S001")

    assert ana.get_average() == 40.0
    assert empty_registry.status_of(ana) == GradeStatus.FAILED
