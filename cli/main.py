# cli/main.py

"""
Start-up for the student records CLI.

Resolves the records file, configures logging beside it, loads the registry,
and hands control to the Main menu.
"""

import logging

import cli.menu_helpers as helpers
import core.formatters as formatters
from cli.menus import records_menu
from cli.path_utils import get_log_file, resolve_data_file
from core.config import LOG_FORMAT
from models.registry import Registry
from models.storage import RecordStore

logger = logging.getLogger(__name__)


def run_cli() -> None:
    """
    Entry point for the student records CLI.

    Notes:
        - A load failure never starts the menus; the user may pick another file or exit.
        - Ctrl-C or end of input exits cleanly after any unsaved change is written.
    """
    title = formatters.format_banner_text("STUDENT RECORDS MANAGER")
    print(f"\n{title}")

    try:
        loaded = load_records()

        if loaded is None:
            exit_program()

        registry, store = loaded
        records_menu.run(registry, store)

    except (KeyboardInterrupt, EOFError):
        print()
        logger.info("Session interrupted")

    exit_program()


def configure_logging(data_file: str) -> None:
    logging.basicConfig(
        filename=get_log_file(data_file),
        level=logging.INFO,
        format=LOG_FORMAT,
        force=True,
    )


def load_records() -> tuple[Registry, RecordStore] | None:
    """
    Prompts for a records file and loads it into a `Registry`.

    Returns:
        tuple[Registry, RecordStore]: The loaded registry and the store it came from.
        None: If the user cancels after a failed load.

    Notes:
        - A blank path uses `~/Documents/StudentRecords/students.json`.
        - A missing file is created with an empty snapshot.
        - A malformed file is reported and left untouched on disk.
    """
    while True:
        path_input = helpers.prompt_user_input_or_none(
            "Enter path to the records file (leave blank to use default):"
        )

        data_file = resolve_data_file(path_input)
        configure_logging(data_file)

        store = RecordStore(data_file)

        print("\nLoading records ...")

        store_response = store.load()

        if not store_response.success:
            helpers.display_response_failure(store_response)

            if helpers.confirm_action("Would you like to try another file?"):
                continue

            return None

        print(f"... {store_response.detail}")

        return store_response.data["registry"], store


def exit_program():
    """
    Prints the closing banner and ends the session.

    Raises:
        SystemExit: Always.
    """
    exit_banner = formatters.format_banner_text("Exiting Program")
    print(f"\n{exit_banner}\n")

    raise SystemExit


if __name__ == "__main__":
    run_cli()
