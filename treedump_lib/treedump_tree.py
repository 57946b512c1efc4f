# -*- coding: utf-8 -*-
"""
Directory tree rendering for treedump.
Produces the ASCII-art listing shown at the top of every dump.
"""

import os
from typing import Callable, Iterable, List, Optional, Sequence

from .treedump_filters import is_excluded, matches_file_types
from .treedump_fs import DirEntry, FileSystem
from .treedump_styling import TreeStyle
from .treedump_utils import TraversalError

ROOT_MARKER = "/ "


def sort_tree_entries(entries: Iterable[DirEntry]) -> List[DirEntry]:
    """Directories first, then case-insensitive by name."""
    return sorted(entries, key=lambda e: (not e.is_dir, e.name.lower(), e.name))


def render_tree(
    root_dir: str,
    patterns: Iterable[str],
    file_types: Sequence[str],
    fs: FileSystem,
    show_hidden: bool = False,
    recursive: bool = True,
    style: str = "unicode",
    log_func: Optional[Callable] = None
) -> str:
    """
    Renders the directory tree below ``root_dir``.

    Args:
        root_dir: Directory to render.
        patterns: Exclusion pattern set; excluded directories are never visited.
        file_types: Suffixes to keep; empty keeps every file. Directories are never
            filtered by suffix so the tree keeps its shape.
        fs: File system to read from.
        show_hidden: Keep entries whose path has a segment starting with '.'.
        recursive: If False, only the root's own entries are listed.
        style: Connector style name (see TreeStyle).
        log_func: Optional logging function.

    Returns:
        The tree text, starting with the root marker line and ending in a newline.

    Raises:
        TraversalError: A directory could not be listed. No partial tree is returned.
    """
    pointers = TreeStyle.get_style(style)
    patterns = frozenset(patterns)
    lines: List[str] = [ROOT_MARKER]

    def _build_tree_recursive(dir_path: str, rel_dir: str, prefix: str) -> None:
        try:
            entries = fs.list_dir(dir_path)
        except OSError as e:
            raise TraversalError(dir_path, e) from e

        visible = []
        for entry in sort_tree_entries(entries):
            rel_path = os.path.join(rel_dir, entry.name)
            if is_excluded(rel_path, patterns, show_hidden, log_func):
                continue
            if not entry.is_dir and not matches_file_types(entry.name, file_types):
                continue
            visible.append((entry, rel_path))

        for i, (entry, rel_path) in enumerate(visible):
            is_last = (i == len(visible) - 1)
            pointer = pointers["last_tee"] if is_last else pointers["tee"]
            if entry.is_dir:
                lines.append(f"{prefix}{pointer}{entry.name}/")
                if recursive:
                    next_prefix = prefix + (pointers["empty"] if is_last else pointers["branch"])
                    _build_tree_recursive(os.path.join(dir_path, entry.name), rel_path, next_prefix)
            else:
                lines.append(f"{prefix}{pointer}{entry.name}")

    _build_tree_recursive(root_dir, "", "")
    return "\n".join(lines) + "\n"
