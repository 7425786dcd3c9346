# cli/menus/students_menu.py

"""
Manage Students menu for the student records CLI.

Every action on an individual student record lives here:
- Adding new students
- Editing student attributes (name, class)
- Recording grades
- Removing students
- Viewing student records (individual, search, or all)

All operations are routed through the `Registry` API for consistency and validation.
Every successful change is written to disk immediately through the `RecordStore`.
"""

from collections.abc import Callable
from typing import cast

import cli.menu_helpers as helpers
import cli.model_formatters as model_formatters
import core.formatters as formatters
from cli.menu_helpers import MenuSignal
from models.registry import Registry
from models.storage import RecordStore
from models.student import Student


def run(registry: Registry, store: RecordStore) -> None:
    """
    Dispatch loop for the Manage Students menu.

    Args:
        registry (Registry): The active `Registry`.
        store (RecordStore): The store the registry is saved to after each change.
    """
    title = formatters.format_banner_text("Manage Students")
    options = [
        ("Add Student", add_student),
        ("View All Students", view_all_students),
        ("Find Student", view_individual_student),
        ("Edit Student", find_and_edit_student),
        ("Remove Student", find_and_remove_student),
        ("Record Grade", find_and_record_grade),
    ]
    zero_option = "Return to Main menu"

    helpers.run_menu(title, options, zero_option, registry, store)

    helpers.returning_to("Main menu")


# === add student ===


def add_student(registry: Registry, store: RecordStore) -> None:
    """
    Loops a prompt to create a new `Student` object and add it to the registry.

    Notes:
        - The suggested ID is the next unused `S###` ID; blank input accepts it.
        - The registry is saved after each successful addition.
    """
    while True:
        new_student = prompt_new_student(registry)

        if new_student is not None:
            registry_response = registry.add_student(new_student)
            helpers.report_and_save(
                registry_response,
                registry,
                store,
                f"{new_student.name} was not added.",
            )

        if not helpers.confirm_action(
            "Would you like to continue adding new students?"
        ):
            break

    helpers.returning_to("Manage Students menu")


def prompt_new_student(registry: Registry) -> Student | None:
    """
    Creates a new `Student` object from user input.

    Returns:
        A new `Student` object, or None if the user cancels.
    """
    student_id = prompt_id_input_or_cancel(registry)

    if student_id is MenuSignal.CANCEL:
        return None
    student_id = cast(str, student_id)

    name = prompt_name_input_or_cancel("name")

    if name is MenuSignal.CANCEL:
        return None
    name = cast(str, name)

    class_name = prompt_name_input_or_cancel("class")

    if class_name is MenuSignal.CANCEL:
        return None
    class_name = cast(str, class_name)

    return Student(id=student_id, name=name, class_name=class_name)


# === data input helpers ===


def prompt_id_input_or_cancel(registry: Registry) -> str | MenuSignal:
    """
    Solicits a student ID, validating format and uniqueness.

    Returns:
        The validated ID, or `MenuSignal.CANCEL` if the user cancels input.

    Notes:
        - Blank input accepts the suggested ID when one is available, and cancels otherwise.
        - If the input is malformed or already taken, the user is prompted again.
    """
    suggested = registry.generate_next_id()

    while True:
        if suggested is None:
            id_input = helpers.prompt_user_input_or_cancel(
                "Enter student ID (format S001, leave blank to cancel):"
            )
            if id_input is MenuSignal.CANCEL:
                return MenuSignal.CANCEL

        else:
            id_input = helpers.prompt_user_input_or_default(
                f"Enter student ID (format S001, leave blank to use {suggested}):"
            )
            if id_input is MenuSignal.DEFAULT:
                return suggested

        try:
            student_id = Student.validate_id_input(cast(str, id_input))

            if registry.find_by_id(student_id) is not None:
                raise ValueError(f"The ID {student_id} is already in use.")

            return student_id

        except ValueError as e:
            print(f"\n[ERROR] {e}")
            print("Please try again.")


def prompt_name_input_or_cancel(field: str) -> str | MenuSignal:
    while True:
        name_input = helpers.prompt_user_input_or_cancel(
            f"Enter {field} (leave blank to cancel):"
        )

        if isinstance(name_input, MenuSignal):
            return name_input

        try:
            return Student.validate_name_input(name_input, field.capitalize())

        except ValueError as e:
            print(f"\n[ERROR] {e}")
            print("Please try again.")


# === edit student ===


def get_editable_fields() -> list[tuple[str, Callable[[Student, Registry, RecordStore], None]]]:
    return [
        ("Name", edit_name_and_confirm),
        ("Class", edit_class_and_confirm),
    ]


def find_and_edit_student(registry: Registry, store: RecordStore) -> None:
    student = helpers.find_student_by_search(registry)

    if student is MenuSignal.CANCEL:
        return
    student = cast(Student, student)

    edit_student(student, registry, store)


def edit_student(student: Student, registry: Registry, store: RecordStore) -> None:
    """
    Edits the name or class of `student` until the user finishes.

    Notes:
        - All edit operations are dispatched through `Registry.update_student()`.
    """
    print(f"\n{formatters.format_section_header('Editing')}")
    print(model_formatters.format_student_multiline(student, registry))

    title = formatters.format_banner_text("Editable Fields")
    options = get_editable_fields()
    zero_option = "Finish editing and return"

    while True:
        menu_response = helpers.display_menu(title, options, zero_option)

        if menu_response is MenuSignal.EXIT:
            break
        elif callable(menu_response):
            menu_response(student, registry, store)
        else:
            raise RuntimeError(f"Unexpected MenuResponse received: {menu_response}")

        if not helpers.confirm_action(
            "Would you like to continue editing this student?"
        ):
            break

    helpers.returning_to("Manage Students menu")


def edit_name_and_confirm(student: Student, registry: Registry, store: RecordStore) -> None:
    new_name = prompt_name_input_or_cancel("new name")

    if new_name is MenuSignal.CANCEL:
        helpers.returning_without_changes()
        return
    new_name = cast(str, new_name)

    print(f"\nCurrent name: {student.name} -> New name: {new_name}")

    if not helpers.confirm_make_change():
        helpers.returning_without_changes()
        return

    registry_response = registry.update_student(student.id, name=new_name)
    helpers.report_and_save(
        registry_response, registry, store, "Student name was not updated."
    )


def edit_class_and_confirm(student: Student, registry: Registry, store: RecordStore) -> None:
    """
    Prompts for a new class and updates the `Student` record via `Registry`.

    Notes:
        - A class that is not yet registered is registered automatically.
    """
    new_class = prompt_name_input_or_cancel("new class")

    if new_class is MenuSignal.CANCEL:
        helpers.returning_without_changes()
        return
    new_class = cast(str, new_class)

    print(f"\nCurrent class: {student.class_name} -> New class: {new_class}")

    if not helpers.confirm_make_change():
        helpers.returning_without_changes()
        return

    registry_response = registry.update_student(student.id, class_name=new_class)
    helpers.report_and_save(
        registry_response, registry, store, "Student class was not updated."
    )


# === remove student ===


def find_and_remove_student(registry: Registry, store: RecordStore) -> None:
    student_input = helpers.find_student_by_search(registry)

    if student_input is MenuSignal.CANCEL:
        return

    student = cast(Student, student_input)

    confirm_and_remove(student, registry, store)


def confirm_and_remove(student: Student, registry: Registry, store: RecordStore) -> None:
    """
    Deletes the `Student` record from the `Registry` after preview and user confirmation.

    Notes:
        - The student's class stays registered even if no other student remains in it.
    """
    helpers.caution_banner()
    print("This student record and its grades will be deleted:")
    print(model_formatters.format_student_multiline(student, registry))

    confirm_deletion = helpers.confirm_action(
        f"Delete {student.name} ({student.id}) and all recorded grades? This cannot be undone."
    )

    if not confirm_deletion:
        helpers.returning_without_changes()
        return

    registry_response = registry.remove_student(student.id)
    helpers.report_and_save(
        registry_response, registry, store, "Student was not removed."
    )


# === record grade ===


def find_and_record_grade(registry: Registry, store: RecordStore) -> None:
    student_input = helpers.find_student_by_search(registry)

    if student_input is MenuSignal.CANCEL:
        return

    student = cast(Student, student_input)

    record_grade(student, registry, store)


def record_grade(student: Student, registry: Registry, store: RecordStore) -> None:
    """
    Prompts for a subject and score, then records the grade via `Registry.add_grade()`.

    Notes:
        - The subject is selected from the subject registry.
        - An existing grade for the subject is overwritten.
        - The recomputed average and status are displayed on success.
    """
    if not registry.subject_names:
        print("\nNo subjects are registered yet. Add a subject from the Manage Subjects menu first.")
        return

    print(f"\nRecording a grade for {student.name} ({student.id}), class {student.class_name}.")

    subject = helpers.select_subject_name(registry)

    if subject is MenuSignal.CANCEL:
        helpers.returning_without_changes()
        return
    subject = cast(str, subject)

    current = student.grade_for(subject)
    if current is not None:
        print(f"\nCurrent {subject} grade: {formatters.format_grade_value(current)} (will be overwritten)")

    score = helpers.prompt_score_or_cancel(
        "Enter score between 0 and 100 (leave blank to cancel):"
    )

    if score is MenuSignal.CANCEL:
        helpers.returning_without_changes()
        return
    score = cast(float, score)

    registry_response = registry.add_grade(student.id, subject, score)

    if helpers.report_and_save(
        registry_response, registry, store, "Grade was not recorded."
    ):
        average = registry_response.data["average"]
        status = registry_response.data["status"]
        print(f"... Average: {formatters.format_score(average)}")
        print(f"... Status: {status.value}")


# === view student ===


def view_individual_student(registry: Registry, store: RecordStore) -> None:
    student_input = helpers.find_student_by_search(registry)

    if student_input is MenuSignal.CANCEL:
        return

    student = cast(Student, student_input)

    print(f"\n{formatters.format_section_header('Student Record')}")
    print(model_formatters.format_student_multiline(student, registry))


def view_all_students(registry: Registry, store: RecordStore) -> None:
    banner = formatters.format_banner_text("All Students")
    print(f"\n{banner}")

    all_students = registry.students

    if not all_students:
        print("There are no students yet.")
        return

    helpers.display_students(all_students, registry)
    print(f"\n{len(all_students)} students in total.")
