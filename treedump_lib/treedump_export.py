# -*- coding: utf-8 -*-
"""
Document export for treedump.
Writes the directory tree followed by one block per selected file to a binary sink.
"""

import os
from collections import Counter
from dataclasses import dataclass, field
from typing import BinaryIO, Callable, Iterable, List, Optional

from .treedump_config import ScanConfig
from .treedump_content import Classification, FileKind, classify, read_file_content
from .treedump_filters import is_excluded, matches_file_types
from .treedump_fs import FileSystem
from .treedump_tokens import TokenCounter
from .treedump_tree import render_tree
from .treedump_utils import describe_error

SEPARATOR = "-" * 50


@dataclass
class FileError:
    """A per-file failure. The file got an annotated block; the scan went on."""
    path: str
    message: str


@dataclass
class ScanReport:
    """Summary of one emit() call."""
    files_emitted: int = 0
    skipped: Counter = field(default_factory=Counter)
    errors: List[FileError] = field(default_factory=list)
    total_tokens: Optional[int] = None


def _write(sink: BinaryIO, text: str) -> None:
    # surrogateescape round-trips undecodable bytes in file names
    sink.write(text.encode("utf-8", "surrogateescape"))


def write_header(sink: BinaryIO, tree_text: str) -> None:
    _write(sink, "Directory Structure:\n")
    _write(sink, "-------------------\n")
    _write(sink, tree_text)
    _write(sink, "\n\nFile Contents:\n")
    _write(sink, "--------------\n")


def write_skipped_block(sink: BinaryIO, rel_path: str, kind: FileKind) -> None:
    """Block for a file whose content is withheld (binary, secret or symlink)."""
    if kind is FileKind.SYMLINK:
        file_note, content_note = "(Symlink - skipped content)", "(Skipped - Symlink)"
    else:
        file_note, content_note = "(Binary - skipped content)", "(Skipped - Binary File)"
    _write(sink, f"File: {rel_path} {file_note}\n")
    _write(sink, f"{SEPARATOR}\n")
    _write(sink, f"Content of {rel_path}: {content_note}\n\n\n")


def write_error_block(sink: BinaryIO, rel_path: str, message: str) -> None:
    _write(sink, f"File: {rel_path}\n")
    _write(sink, f"{SEPARATOR}\n")
    _write(sink, f"Error reading file: {message}. Content skipped.\n\n\n")


def write_content_block(sink: BinaryIO, rel_path: str, content: bytes) -> None:
    _write(sink, f"File: {rel_path}\n")
    _write(sink, f"{SEPARATOR}\n")
    _write(sink, f"Content of {rel_path}:\n")
    sink.write(content)
    _write(sink, "\n\n")


def emit(
    root_dir: str,
    config: ScanConfig,
    patterns: Iterable[str],
    sink: BinaryIO,
    fs: FileSystem,
    token_counter: Optional[TokenCounter] = None,
    log_func: Optional[Callable] = None
) -> ScanReport:
    """
    Writes the full document for ``root_dir`` to ``sink``.

    Args:
        root_dir: Directory to scan.
        config: Scan settings (file types, recursion, hidden files, verbosity).
        patterns: Exclusion pattern set shared by the tree and the content walk.
        sink: Binary output stream. Only document text is written here;
            diagnostics go through ``log_func``.
        fs: File system to read from.
        token_counter: If given, the tree and every emitted file are counted.
        log_func: Logging function for diagnostics.

    Returns:
        A ScanReport. Per-file read errors are listed in ``errors``.

    Raises:
        TraversalError: The tree could not be rendered.
        OSError: Writing to ``sink`` failed.
    """
    def _log(msg, level="info"):
        if log_func:
            log_func(msg, level)

    patterns = frozenset(patterns)
    report = ScanReport()
    if token_counter is not None:
        report.total_tokens = 0

    tree_text = render_tree(
        root_dir, patterns, config.file_types, fs,
        show_hidden=config.show_hidden, recursive=config.recursive,
        style=config.style, log_func=log_func
    )
    if token_counter is not None:
        report.total_tokens += token_counter.count(tree_text)
    write_header(sink, tree_text)

    def _process_file(full_path: str, rel_path: str) -> None:
        classification = classify(full_path, fs)
        if classification.kind is FileKind.SYMLINK:
            _log(f"Skipping symlink: {rel_path}", "warning")
            write_skipped_block(sink, rel_path, FileKind.SYMLINK)
            report.skipped["symlink"] += 1
            return
        if classification.kind in (FileKind.BINARY, FileKind.SECRET):
            _log(f"Skipping forbidden ({classification.kind.value!r}) file: {rel_path}", "warning")
            write_skipped_block(sink, rel_path, classification.kind)
            report.skipped[classification.kind.value] += 1
            return
        if classification.kind is FileKind.UNREADABLE:
            _record_error(rel_path, classification)
            return

        try:
            content = read_file_content(full_path, fs)
        except OSError as e:
            _record_error(rel_path, Classification(FileKind.UNREADABLE, f"error(read): {e}"))
            return

        line_count = content.count(b"\n")
        if token_counter is not None:
            file_tokens = token_counter.count(content.decode("utf-8", "replace"))
            report.total_tokens += file_tokens
            _log(f"Processing: {rel_path} ({file_tokens} tokens, {line_count} lines)", "info")
        else:
            _log(f"Processing: {rel_path} ({line_count} lines)", "info")

        write_content_block(sink, rel_path, content)
        report.files_emitted += 1

    def _record_error(rel_path: str, classification: Classification) -> None:
        message = classification.detail or "unknown error"
        _log(f"Error processing file {rel_path}: {message}", "error")
        write_error_block(sink, rel_path, message)
        report.errors.append(FileError(rel_path, message))

    def _walk(dir_path: str, rel_dir: str) -> None:
        try:
            entries = sorted(fs.list_dir(dir_path), key=lambda e: e.name)
        except OSError as e:
            _log(describe_error(dir_path, e, phase="accessing path"), "error")
            report.errors.append(FileError(rel_dir or ".", str(e)))
            return

        for entry in entries:
            rel_path = os.path.join(rel_dir, entry.name)
            full_path = os.path.join(dir_path, entry.name)
            if entry.is_dir:
                if not config.recursive:
                    continue
                if is_excluded(rel_path, patterns, config.show_hidden, log_func):
                    continue
                _walk(full_path, rel_path)
                continue

            if is_excluded(rel_path, patterns, config.show_hidden, log_func):
                continue
            if not matches_file_types(entry.name, config.file_types):
                continue
            _process_file(full_path, rel_path)

    _walk(root_dir, "")

    _log(
        f"Scan finished: {report.files_emitted} files emitted, "
        f"{sum(report.skipped.values())} skipped, {len(report.errors)} errors",
        "info"
    )
    return report
