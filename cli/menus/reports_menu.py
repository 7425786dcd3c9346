# cli/menus/reports_menu.py

"""
Reports menu for the student records CLI.

Read-only views over the registry: top students, per-class statistics, and
school-wide statistics. Nothing here mutates or saves the registry.
"""

from typing import cast

import cli.menu_helpers as helpers
import cli.model_formatters as model_formatters
import core.formatters as formatters
from cli.menu_helpers import MenuSignal
from core.config import DEFAULT_TOP_N
from models.registry import Registry
from models.storage import RecordStore


def run(registry: Registry, store: RecordStore) -> None:
    title = formatters.format_banner_text("Reports")
    options = [
        (f"Top {DEFAULT_TOP_N} Students", view_top_students),
        ("Class Statistics", view_class_statistics),
        ("School Statistics", view_school_statistics),
    ]
    zero_option = "Return to Main menu"

    helpers.run_menu(title, options, zero_option, registry, store)

    helpers.returning_to("Main menu")


def view_top_students(registry: Registry, store: RecordStore) -> None:
    """
    Displays the highest-averaging students who currently pass.

    Notes:
        - Failing students are never ranked, even if fewer than three students pass.
    """
    banner = formatters.format_banner_text(f"Top {DEFAULT_TOP_N} Students")
    print(f"\n{banner}")

    top_students = registry.top_students(DEFAULT_TOP_N)

    if not top_students:
        print("No students are currently passing.")
        return

    for rank, student in enumerate(top_students, 1):
        print(model_formatters.format_ranking_line(rank, student))


def view_class_statistics(registry: Registry, store: RecordStore) -> None:
    class_name = helpers.select_class_name(registry)

    if class_name is MenuSignal.CANCEL:
        return
    class_name = cast(str, class_name)

    stats = registry.class_statistics(class_name)

    if stats is None:
        print(f"\nThere are no students in class {class_name}.")
        return

    banner = formatters.format_banner_text(f"Class Statistics - {class_name}")
    print(f"\n{banner}")
    print(model_formatters.format_class_statistics(stats))

    print(f"\n{formatters.format_section_header('Students')}")
    helpers.display_students(
        registry.list_students_by_class(class_name), registry, show_index=True
    )


def view_school_statistics(registry: Registry, store: RecordStore) -> None:
    banner = formatters.format_banner_text("School Statistics")
    print(f"\n{banner}")

    if registry.student_count == 0:
        print("There are no students yet.")

    print(model_formatters.format_school_statistics(registry.school_statistics()))
