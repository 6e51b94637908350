"""Terminal output helpers for listings, previews and confirmations."""

from __future__ import annotations

import os
import sys
from typing import TextIO

DRY_RUN_BANNER = "############# DRY RUN MODE #############"


class Colors:
    """ANSI color codes for terminal output."""

    RESET = "\033[0m"
    BOLD = "\033[1m"
    DIM = "\033[2m"

    RED = "\033[31m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    CYAN = "\033[36m"


def _supports_color(stream: TextIO | None = None) -> bool:
    """Check if terminal supports color output."""
    stream = stream or sys.stdout
    if os.environ.get("NO_COLOR"):
        return False
    if not hasattr(stream, "isatty") or not stream.isatty():
        return False
    if os.environ.get("TERM") == "dumb":
        return False
    return True


def colorize(text: str, color: str, bold: bool = False, stream: TextIO | None = None) -> str:
    """Apply color to text if terminal supports it."""
    if not _supports_color(stream):
        return text
    prefix = (Colors.BOLD if bold else "") + color
    return f"{prefix}{text}{Colors.RESET}"


def print_banner(stream: TextIO | None = None, *, leading_blank: bool = True) -> None:
    stream = stream or sys.stdout
    if leading_blank:
        print(file=stream)
    print(colorize(DRY_RUN_BANNER, Colors.YELLOW, bold=True, stream=stream), file=stream)


def print_success(message: str, stream: TextIO | None = None) -> None:
    """Print success message in green."""
    stream = stream or sys.stdout
    print(colorize(message, Colors.GREEN, stream=stream), file=stream)


def print_error(message: str, stream: TextIO | None = None) -> None:
    """Print error message in red."""
    stream = stream or sys.stderr
    print(colorize(message, Colors.RED, bold=True, stream=stream), file=stream)


def format_labels(labels: list[str], stream: TextIO | None = None) -> str:
    return ", ".join(colorize(lbl, Colors.CYAN, stream=stream) for lbl in labels)


__all__ = [
    "Colors",
    "DRY_RUN_BANNER",
    "colorize",
    "format_labels",
    "print_banner",
    "print_error",
    "print_success",
]
