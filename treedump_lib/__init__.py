# -*- coding: utf-8 -*-
"""
treedump - Dump a directory tree and file contents as context for Large Language Models

This package provides tools for:
- Rendering a directory structure as an ASCII tree
- Excluding paths with glob-like patterns, ignore files and known test-file globs
- Emitting the contents of text files while skipping binaries, private keys and symlinks
- Counting the tokens of the resulting document

Usage:
    from treedump_lib import TreeDump, ScanConfig
    dumper = TreeDump(ScanConfig(root_dir="path/to/directory"))
    dumper.run(sys.stdout.buffer)
"""

# Package version
__version__ = "1.0.0"

# Import public classes and functions for direct access
from .treedump_core import TreeDump
from .treedump_config import ScanConfig, DEFAULT_EXCLUDE_PATTERNS, KNOWN_TEST_PATTERNS
from .treedump_content import FileKind, classify
from .treedump_export import emit
from .treedump_filters import is_excluded
from .treedump_tree import render_tree
from .treedump_cli import main

# Define what gets imported with 'from treedump_lib import *'
__all__ = [
    'TreeDump', 'ScanConfig', 'DEFAULT_EXCLUDE_PATTERNS', 'KNOWN_TEST_PATTERNS',
    'FileKind', 'classify', 'emit', 'is_excluded', 'render_tree', 'main'
]
