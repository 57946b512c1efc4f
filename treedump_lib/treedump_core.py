# -*- coding: utf-8 -*-
"""
Core logic for treedump: the main class that ties configuration, filtering,
tree rendering and the content export together for one run.
"""

import stat
import sys
from typing import BinaryIO, FrozenSet, Optional

from .treedump_config import ScanConfig, build_pattern_set
from .treedump_export import ScanReport, emit
from .treedump_fs import FileSystem, OSFileSystem
from .treedump_tokens import TokenCounter
from .treedump_tree import render_tree
from .treedump_utils import log_message


class TreeDump:
    """
    Dumps a directory as a tree plus file contents.
    Orchestrates the process using functions and data from other modules.
    """

    def __init__(
            self,
            config: ScanConfig,
            fs: Optional[FileSystem] = None,
            patterns: Optional[FrozenSet[str]] = None,
            token_counter: Optional[TokenCounter] = None
    ):
        self.config = config
        self.fs = fs if fs is not None else OSFileSystem()
        self.root_dir = config.root_dir

        try:
            info = self.fs.stat(self.root_dir)
        except FileNotFoundError:
            raise FileNotFoundError(f"Starting directory not found: '{self.root_dir}'")
        except OSError as e:
            raise ValueError(f"Error accessing starting directory '{self.root_dir}': {e}")
        if not stat.S_ISDIR(info.st_mode):
            raise NotADirectoryError(f"Path is not a directory: '{self.root_dir}'")

        # The CLI resolves auto-detection; here colorize is taken as given
        self.colorize = config.colorize
        self.verbose = config.verbose
        self._log = lambda msg, level="info": log_message(msg, level, self.verbose, self.colorize)

        self._log(f"Initialized treedump for: {self.root_dir}", "info")
        if self.verbose:
            if config.file_types:
                self._log(f"  Scanning for file types: {list(config.file_types)}", "debug")
            else:
                self._log("  No file types specified. Scanning all files.", "debug")
            self._log(f"  Recursive: {config.recursive}", "debug")
            self._log(f"  Show Hidden: {config.show_hidden}", "debug")
            self._log(f"  Exclude Tests: {config.exclude_tests}", "debug")
            self._log(f"  Default Excludes: {config.use_default_excludes}", "debug")

        # Setup errors (unreadable ignore file, unknown model) surface from here
        self.patterns = patterns if patterns is not None else build_pattern_set(config, self.fs, self._log)
        if token_counter is None and config.count_tokens:
            token_counter = TokenCounter(config.model)
        self.token_counter = token_counter

        if self.verbose:
            self._log(f"  Exclusion Patterns: {sorted(self.patterns)}", "debug")

    def render_tree(self) -> str:
        """Renders only the directory tree."""
        return render_tree(
            self.root_dir, self.patterns, self.config.file_types, self.fs,
            show_hidden=self.config.show_hidden, recursive=self.config.recursive,
            style=self.config.style, log_func=self._log
        )

    def run(self, sink: BinaryIO) -> ScanReport:
        """Writes the tree and file contents to ``sink`` and returns the scan report."""
        self._log("Starting scan...", "info")
        report = emit(
            self.root_dir, self.config, self.patterns, sink, self.fs,
            token_counter=self.token_counter, log_func=self._log
        )
        if report.total_tokens is not None:
            print(f"Total tokens: {report.total_tokens}", file=sys.stderr)
        if report.errors:
            self._log(f"{len(report.errors)} file(s) could not be read", "warning")
        self._log("Scan complete.", "info")
        return report
