# core/formatters.py

# all pure text utilities
# must never import from models!

import math
from typing import Any

# === generic text formatters ===


def format_banner_text(title: str, width: int = 40) -> str:
    line = "=" * width
    centered_title = f"{title:^{width}}"

    return f"{line}\n{centered_title}\n{line}"


def format_section_header(title: str, width: int = 20) -> str:
    line = "-" * width
    return f"{line}\n{title}\n{line}"


def format_list_with_and(items: list[Any]) -> str:
    items = [str(item) for item in items]

    if not items:
        return ""

    if len(items) == 1:
        return items[0]

    if len(items) == 2:
        return " and ".join(items)

    return ", ".join(items[:-1]) + ", and " + items[-1]


# === number formatters ===


def format_score(value: float) -> str:
    return f"{value:.2f}"


def format_percentage(value: float) -> str:
    return f"{value:.2f}%"


def format_grade_value(value: float) -> str:
    # whole-number grades display without a decimal part
    return f"{value:g}"


def parse_score(text: str) -> float | None:
    """
    Parses user input as a grade, returning None if it is not a finite number.
    """
    try:
        value = float(text)
    except ValueError:
        return None

    if not math.isfinite(value):
        return None

    return value
