# -*- coding: utf-8 -*-
"""
Styling definitions (colors, tree connector styles) for treedump.
"""

from typing import Dict

# --- Styling ---

class Colors:
    """ANSI color codes for diagnostic output."""
    RESET = "\033[0m"
    RED = "\033[31m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    CYAN = "\033[36m"
    GRAY = "\033[90m"

class TreeStyle:
    """Connector sets used by the tree renderer."""
    UNICODE: Dict[str, str] = {"branch": "│   ", "tee": "├── ", "last_tee": "└── ", "empty": "    "}
    ASCII: Dict[str, str] = {"branch": "|   ", "tee": "|-- ", "last_tee": "`-- ", "empty": "    "}

    AVAILABLE: Dict[str, Dict[str, str]] = {
        "unicode": UNICODE,
        "ascii": ASCII,
    }

    @staticmethod
    def get_style(style_name: str) -> Dict[str, str]:
        """Gets the style config, defaulting to unicode."""
        return TreeStyle.AVAILABLE.get(style_name.lower(), TreeStyle.UNICODE)
