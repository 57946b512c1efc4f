# -*- coding: utf-8 -*-
"""
Utility functions for treedump: error types, logging and error descriptions.
"""

import sys
from pathlib import Path
from datetime import datetime
from typing import Optional, Union

from .treedump_styling import Colors

# --- Errors ---

class TreeDumpError(Exception):
    """Base class for errors raised by treedump."""


class SetupError(TreeDumpError):
    """Raised before scanning starts, e.g. when the ignore file cannot be read."""


class TraversalError(TreeDumpError):
    """Raised when a directory cannot be listed. Fatal to the render that hit it."""

    def __init__(self, path: Union[str, Path], cause: Exception):
        self.path = str(path)
        self.cause = cause
        super().__init__(f"error reading directory '{self.path}': {cause}")


# --- Logging ---
def log_message(message: str, level: str = "info", verbose: bool = False, colorize: bool = False):
    """Logs a message to stderr. info/debug messages are only shown when verbose."""
    if not verbose and level in ("info", "debug"):
        return

    color_map = {
        "error": Colors.RED, "warning": Colors.YELLOW, "success": Colors.GREEN,
        "info": Colors.CYAN, "debug": Colors.GRAY
    }
    color = color_map.get(level.lower(), Colors.RESET) if colorize else ""
    reset = Colors.RESET if colorize else ""
    timestamp = datetime.now().strftime("%H:%M:%S.%f")[:-3] # Milliseconds

    message_str = str(message)
    log_prefix = f"[{timestamp}] {color}[{level.upper():<7}] {reset}"

    lines = message_str.splitlines()
    if not lines: return

    print(f"{log_prefix}{lines[0]}", file=sys.stderr)
    # Align continuation lines under the first one
    indent = " " * (len(log_prefix) - len(color) - len(reset))
    for line in lines[1:]:
        print(f"{indent}{line}", file=sys.stderr)


# --- Error Reporting ---
def describe_error(path: Union[str, Path], error: Exception, phase: str = "processing") -> str:
    """
    Builds a one-line diagnostic for a filesystem error, with a hint for common causes.
    """
    message = f"Error {phase} '{path}': {error.__class__.__name__}: {error}"
    guidance: Optional[str] = None
    if isinstance(error, PermissionError):
        guidance = "This is a permission error. Check the file mode or run with sufficient privileges."
    elif isinstance(error, FileNotFoundError):
        guidance = "The file or directory may have been moved or deleted during execution."
    elif isinstance(error, OSError) and getattr(error, 'winerror', None) == 32:
        guidance = "The file might be locked or in use by another process."
    if guidance:
        message = f"{message}\n{guidance}"
    return message
