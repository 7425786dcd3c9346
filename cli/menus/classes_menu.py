# cli/menus/classes_menu.py

"""
Manage Classes menu for the student records CLI.

Lists, adds, and renames entries of the class registry, and lists the students
enrolled in a class. Renaming a class moves every student in it to the new name.
"""

from typing import cast

import cli.menu_helpers as helpers
import core.formatters as formatters
from cli.menu_helpers import MenuSignal
from models.registry import Registry
from models.storage import RecordStore


def run(registry: Registry, store: RecordStore) -> None:
    title = formatters.format_banner_text("Manage Classes")
    options = [
        ("View Classes", view_classes),
        ("Add Class", add_class),
        ("Rename Class", rename_class),
        ("View Students in Class", view_students_in_class),
    ]
    zero_option = "Return to Main menu"

    helpers.run_menu(title, options, zero_option, registry, store)

    helpers.returning_to("Main menu")


def view_classes(registry: Registry, store: RecordStore) -> None:
    banner = formatters.format_banner_text("Classes")
    print(f"\n{banner}")

    if not registry.class_names:
        print("There are no classes yet.")
        return

    helpers.display_results(
        registry.class_names,
        formatter=lambda c: f"{c:<12} | {len(registry.list_students_by_class(c))} students",
    )


def add_class(registry: Registry, store: RecordStore) -> None:
    class_name = helpers.prompt_user_input_or_cancel(
        "Enter the new class name (leave blank to cancel):"
    )

    if class_name is MenuSignal.CANCEL:
        helpers.returning_without_changes()
        return

    registry_response = registry.add_class_name(cast(str, class_name))
    helpers.report_and_save(registry_response, registry, store, "Class was not added.")


def rename_class(registry: Registry, store: RecordStore) -> None:
    """
    Prompts for a registered class and a new name, then renames it via `Registry.rename_class_name()`.
    """
    old_name = helpers.select_class_name(registry)

    if old_name is MenuSignal.CANCEL:
        helpers.returning_without_changes()
        return
    old_name = cast(str, old_name)

    new_name = helpers.prompt_user_input_or_cancel(
        f"Enter the new name for class {old_name} (leave blank to cancel):"
    )

    if new_name is MenuSignal.CANCEL:
        helpers.returning_without_changes()
        return
    new_name = cast(str, new_name)

    affected = len(registry.list_students_by_class(old_name))
    print(f"\nClass {old_name} -> {new_name} ({affected} students will be moved)")

    if not helpers.confirm_make_change():
        helpers.returning_without_changes()
        return

    registry_response = registry.rename_class_name(old_name, new_name)

    if helpers.report_and_save(registry_response, registry, store, "Class was not renamed."):
        print(f"... {registry_response.data['count']} students updated.")


def view_students_in_class(registry: Registry, store: RecordStore) -> None:
    class_name = helpers.select_class_name(registry)

    if class_name is MenuSignal.CANCEL:
        return
    class_name = cast(str, class_name)

    banner = formatters.format_banner_text(f"Class {class_name}")
    print(f"\n{banner}")

    students = registry.list_students_by_class(class_name)

    if not students:
        print(f"There are no students in class {class_name}.")
        return

    helpers.display_students(students, registry, show_index=True)
