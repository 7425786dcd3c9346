# cli/menus/records_menu.py

"""
Main menu for the student records CLI.

Provides calls to the menus for managing Students, Classes, and Subjects, as well
as the Reports menu and an option to save the records file.
"""

import cli.menu_helpers as helpers
import core.formatters as formatters
from cli.menus import classes_menu, reports_menu, students_menu, subjects_menu
from models.registry import Registry
from models.storage import RecordStore


def run(registry: Registry, store: RecordStore) -> None:
    """
    Top-level loop with dispatch for the Main menu.

    Args:
        registry (Registry): The active `Registry`.
        store (RecordStore): The store the registry is loaded from and saved to.

    Notes:
        - The finally block guarantees any unsaved change is written before returning.
    """
    title = formatters.format_banner_text("STUDENT RECORDS MANAGER")
    options = [
        ("Manage Students", students_menu.run),
        ("Manage Classes", classes_menu.run),
        ("Manage Subjects", subjects_menu.run),
        ("Reports", reports_menu.run),
        ("Save Records", save_records),
    ]
    zero_option = "Exit Program"

    try:
        helpers.run_menu(title, options, zero_option, registry, store)

    finally:
        helpers.save_if_dirty(registry, store)


def save_records(registry: Registry, store: RecordStore) -> None:
    store_response = store.save(registry)

    if not store_response.success:
        helpers.display_response_failure(store_response)
        return

    print(f"\n{store_response.detail} ({store.path})")
