# tests/conftest.py

import os

import pytest

from models.registry import Registry
from models.storage import RecordStore
from models.student import Student


@pytest.fixture
def sample_student():
    return Student("S001", "Ana", "10A")


@pytest.fixture
def empty_registry():
    return Registry()


@pytest.fixture
def sample_registry():
    """
    Two subjects and four students:
        S001 Ana   10A  Math 90  Science 90  -> avg 90.0, passed
        S002 Budi  10A  Math 60  Science 60  -> avg 60.0, failed (average)
        S003 Citra 10B  Math 80  Science 20  -> avg 50.0, failed (hard fail)
        S004 Dewi  10B  Math 80  Science 76  -> avg 78.0, passed
    """
    registry = Registry()
    registry.add_subject_name("Math")
    registry.add_subject_name("Science")

    for student_id, name, class_name, math, science in [
        ("S001", "Ana", "10A", 90, 90),
        ("S002", "Budi", "10A", 60, 60),
        ("S003", "Citra", "10B", 80, 20),
        ("S004", "Dewi", "10B", 80, 76),
    ]:
        registry.add_student(Student(student_id, name, class_name))
        registry.add_grade(student_id, "Math", math)
        registry.add_grade(student_id, "Science", science)

    return registry


@pytest.fixture
def data_file(tmp_path):
    return os.path.join(tmp_path, "records", "students.json")


@pytest.fixture
def record_store(data_file):
    return RecordStore(data_file)
