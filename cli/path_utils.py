# cli/path_utils.py

import os

from core.config import DATA_FILENAME, DEFAULT_DATA_DIR, LOG_FILENAME


def get_data_file(user_input: str | None) -> str:
    """
    Resolves the records file path based on user input or the default location.

    Args:
        user_input (str | None): An optional user-specified path. If None or blank, the default path is used.

    Returns:
        An absolute path string. A path naming an existing directory, or ending in a path separator,
        resolves to `students.json` inside that directory.
        Otherwise, defaults to: `~/Documents/StudentRecords/students.json`.
    """
    if user_input is None or not user_input.strip():
        return os.path.join(DEFAULT_DATA_DIR, DATA_FILENAME)

    raw = user_input.strip().strip('"').strip("'")
    path = os.path.abspath(os.path.expanduser(raw))

    if os.path.isdir(path) or raw.endswith(("/", os.sep)):
        return os.path.join(path, DATA_FILENAME)

    return path


def resolve_data_file(user_input: str | None) -> str:
    """
    Produces a records file path and ensures its parent directory exists.

    Args:
        user_input (str | None): An optional path string. If None, the default path is used.

    Returns:
        A fully resolved path for the records file. The file itself is not created.
    """
    data_file = get_data_file(user_input)

    os.makedirs(os.path.dirname(data_file), exist_ok=True)

    return data_file


def get_log_file(data_file: str) -> str:
    return os.path.join(os.path.dirname(os.path.abspath(data_file)), LOG_FILENAME)
