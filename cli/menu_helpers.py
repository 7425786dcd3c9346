# cli/menu_helpers.py

"""
Shared building blocks for the student records menus.

Covers numbered menu dispatch, blank-aware prompts, list selection and student
search, plus the save-after-change step every mutating menu action ends with.
Error output for failed `Response` objects is rendered here so every menu
reports failures the same way.
"""

from enum import Enum
from typing import Any, Callable, Iterable

import cli.model_formatters as model_formatters
import core.formatters as formatters
from core.response import Response
from models.registry import Registry
from models.storage import RecordStore
from models.student import Student


class MenuSignal(Enum):
    CANCEL = "CANCEL"
    DEFAULT = "DEFAULT"
    EXIT = "EXIT"


# === display methods ===


def display_menu(
    title: str,
    options: list[tuple[str, Callable[..., Any]]],
    zero_option: str = "Return",
) -> MenuSignal | Callable[..., Any]:
    """
    Shows `options` numbered from 1, with `zero_option` as entry 0, and asks until a listed number is entered.

    Returns:
        `MenuSignal.EXIT` for 0, otherwise the action paired with the chosen label.
    """
    while True:
        print(f"\n{title}")
        display_results([label for label, _ in options], show_index=True)
        print(f" 0. {zero_option}")

        choice = prompt_user_input("Select an option: ")

        if choice == "0":
            return MenuSignal.EXIT

        index = _parse_index(choice, len(options))

        if index is None:
            print("That is not one of the listed options.")
            continue

        return options[index][1]


def run_menu(
    title: str,
    options: list[tuple[str, Callable[..., Any]]],
    zero_option: str,
    *args: Any,
) -> None:
    """
    Loops a menu, calling the selected action with `args` until the zero option is chosen.

    Raises:
        RuntimeError: If the menu response is unrecognized.
    """
    while True:
        menu_response = display_menu(title, options, zero_option)

        if menu_response is MenuSignal.EXIT:
            break

        elif callable(menu_response):
            menu_response(*args)

        else:
            raise RuntimeError(f"Unexpected MenuResponse received: {menu_response}")


def display_results(
    results: Iterable[Any],
    show_index: bool = False,
    formatter: Callable[[Any], str] = lambda x: str(x),
) -> None:
    for i, result in enumerate(results, 1):
        prefix = f"{i:>2}. " if show_index else ""
        print(f"{prefix}{formatter(result)}")


def display_students(
    students: Iterable[Student],
    registry: Registry,
    show_index: bool = False,
) -> None:
    display_results(
        students,
        show_index,
        lambda s: model_formatters.format_student_oneline(s, registry),
    )


# === prompt user input methods ===


# Blank input is the universal escape hatch. Each `prompt_user_input_or_*`
# variant maps "" to its own signal (CANCEL, DEFAULT, or None); anything else
# is returned stripped. Yes/no prompts repeat until answered.

_YES = ("y", "yes")
_NO = ("n", "no")


def confirm_action(prompt: str) -> bool:
    while True:
        choice = prompt_user_input(f"{prompt} (y/n): ").lower()

        if choice in _YES:
            return True

        if choice in _NO:
            return False

        print("Please answer 'y' or 'n'.")


def confirm_make_change() -> bool:
    return confirm_action("Apply this change?")


def prompt_user_input(prompt: str) -> str:
    return input(f"\n{prompt}\n  >> ").strip()


def prompt_user_input_or_cancel(prompt: str) -> str | MenuSignal:
    response = prompt_user_input(prompt)
    return MenuSignal.CANCEL if response == "" else response


def prompt_user_input_or_default(prompt: str) -> str | MenuSignal:
    response = prompt_user_input(prompt)
    return MenuSignal.DEFAULT if response == "" else response


def prompt_user_input_or_none(prompt: str) -> str | None:
    response = prompt_user_input(prompt)
    return None if response == "" else response


def prompt_score_or_cancel(prompt: str) -> float | MenuSignal:
    while True:
        score_input = prompt_user_input_or_cancel(prompt)

        if score_input is MenuSignal.CANCEL:
            return MenuSignal.CANCEL

        score = formatters.parse_score(str(score_input))

        try:
            if score is None:
                raise ValueError(f"'{score_input}' is not a number.")
            return Student.validate_grade_input(score)

        except ValueError as e:
            print(f"\n[ERROR] {e}")
            print("Please try again.")


# === finder, search, and select methods ===


def prompt_selection_from_list(
    list_data: list[Any],
    list_description: str,
    formatter: Callable[[Any], str] = lambda x: str(x),
) -> Any | None:
    """
    Lists `list_data` under a `list_description` banner and returns the picked item.

    Returns None for an empty list or when the user enters 0.
    """
    if not list_data:
        print(f"\nNothing to choose from: no {list_description.lower()} yet.")
        return None

    while True:
        print(f"\n{formatters.format_banner_text(list_description)}")
        display_results(list_data, True, formatter)

        choice = prompt_user_input("Select an option (0 to cancel):")

        if choice == "0":
            return None

        index = _parse_index(choice, len(list_data))

        if index is None:
            print("\nThat is not one of the listed options.")
            continue

        return list_data[index]


def _parse_index(choice: str, length: int) -> int | None:
    # 1-based menu number to 0-based list index
    if not choice.isdigit():
        return None

    index = int(choice) - 1
    return index if 0 <= index < length else None


def find_student_by_search(registry: Registry) -> Student | MenuSignal:
    """
    Prompts the user to search for and select a `Student` by ID or partial name.

    Returns:
        - The selected `Student` if search and selection succeed.
        - `MenuSignal.CANCEL` if no match is found or the user cancels.

    Notes:
        - An exact ID match is returned without a selection prompt.
    """
    query = prompt_user_input_or_cancel(
        "Search for a student by ID or name (leave blank to cancel):"
    )

    if query is MenuSignal.CANCEL:
        return MenuSignal.CANCEL

    results = registry.find_by_id_or_name(str(query))

    if not results:
        print("\nYour search returned no results.")
        return MenuSignal.CANCEL

    if len(results) == 1:
        return results[0]

    print(f"\nYour search returned {len(results)} students:")

    student = prompt_selection_from_list(
        results,
        "Search Results",
        lambda s: model_formatters.format_student_oneline(s, registry),
    )

    return MenuSignal.CANCEL if student is None else student


def select_class_name(registry: Registry) -> str | MenuSignal:
    class_name = prompt_selection_from_list(registry.class_names, "Classes")
    return MenuSignal.CANCEL if class_name is None else class_name


def select_subject_name(registry: Registry) -> str | MenuSignal:
    subject = prompt_selection_from_list(registry.subject_names, "Subjects")
    return MenuSignal.CANCEL if subject is None else subject


# === persistence ===


def save_if_dirty(registry: Registry, store: RecordStore) -> None:
    """
    Writes the registry to disk if it holds unsaved changes, reporting any failure.
    """
    if not registry.has_unsaved_changes:
        return

    store_response = store.save(registry)

    if not store_response.success:
        display_response_failure(store_response)
        print("\nChanges are kept in memory but were NOT saved to disk.")


def report_and_save(
    response: Response, registry: Registry, store: RecordStore, failure_note: str
) -> bool:
    """
    Displays the outcome of a registry operation and saves the registry on success.

    Returns:
        True if the operation succeeded.
    """
    if not response.success:
        display_response_failure(response)
        print(f"\n{failure_note}")
        return False

    print(f"\n{response.detail}")
    save_if_dirty(registry, store)
    return True


# === often used messages ===


def returning_without_changes() -> None:
    print("\nReturning without changes.")


def returning_to(destination: str) -> None:
    print(f"\nReturning to {destination}.")


def caution_banner() -> None:
    caution_banner = formatters.format_banner_text("CAUTION!")
    print(f"\n{caution_banner}")


def display_response_failure(response: Response) -> None:
    """Prints the error code and detail of a failed `Response`; successful responses print nothing."""
    if response.success:
        return

    error_label = response.error.name if response.error else "UNKNOWN"

    print(f"\n[ERROR: {error_label}] {response.detail}")
