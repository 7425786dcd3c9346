# cli/menus/subjects_menu.py

"""
Manage Subjects menu for the student records CLI.

Adding or renaming a subject changes the average and status of every student,
since averages are taken over all registered subjects.
"""

from typing import cast

import cli.menu_helpers as helpers
import core.formatters as formatters
from cli.menu_helpers import MenuSignal
from models.registry import Registry
from models.storage import RecordStore


def run(registry: Registry, store: RecordStore) -> None:
    title = formatters.format_banner_text("Manage Subjects")
    options = [
        ("View Subjects", view_subjects),
        ("Add Subject", add_subject),
        ("Rename Subject", rename_subject),
    ]
    zero_option = "Return to Main menu"

    helpers.run_menu(title, options, zero_option, registry, store)

    helpers.returning_to("Main menu")


def view_subjects(registry: Registry, store: RecordStore) -> None:
    banner = formatters.format_banner_text("Subjects")
    print(f"\n{banner}")

    if not registry.subject_names:
        print("There are no subjects yet.")
        return

    print(formatters.format_list_with_and(registry.subject_names))


def add_subject(registry: Registry, store: RecordStore) -> None:
    subject = helpers.prompt_user_input_or_cancel(
        "Enter the new subject name (leave blank to cancel):"
    )

    if subject is MenuSignal.CANCEL:
        helpers.returning_without_changes()
        return

    if registry.student_count:
        print(
            "\nNote: students without a grade in the new subject will count it as 0 in their average."
        )

    registry_response = registry.add_subject_name(cast(str, subject))
    helpers.report_and_save(registry_response, registry, store, "Subject was not added.")


def rename_subject(registry: Registry, store: RecordStore) -> None:
    """
    Prompts for a registered subject and a new name, then renames it via `Registry.rename_subject_name()`.

    Notes:
        - Recorded grades move to the new name. A student who already holds a grade under the new name keeps it.
    """
    old_name = helpers.select_subject_name(registry)

    if old_name is MenuSignal.CANCEL:
        helpers.returning_without_changes()
        return
    old_name = cast(str, old_name)

    new_name = helpers.prompt_user_input_or_cancel(
        f"Enter the new name for {old_name} (leave blank to cancel):"
    )

    if new_name is MenuSignal.CANCEL:
        helpers.returning_without_changes()
        return
    new_name = cast(str, new_name)

    print(f"\nSubject {old_name} -> {new_name}")

    if not helpers.confirm_make_change():
        helpers.returning_without_changes()
        return

    registry_response = registry.rename_subject_name(old_name, new_name)

    if helpers.report_and_save(registry_response, registry, store, "Subject was not renamed."):
        print(f"... {registry_response.data['count']} grades migrated.")
