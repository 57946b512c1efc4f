# -*- coding: utf-8 -*-
"""
Configuration settings, constants, and exclusion pattern loading for treedump.
"""

import errno
import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, FrozenSet, Iterable, Optional, Set, Tuple

from .treedump_fs import FileSystem
from .treedump_utils import SetupError

# --- Constants ---

IGNORE_FILE_NAME = ".llmignore"
USER_CONFIG_FILE = Path.home() / ".treedump_config.json"
DEFAULT_MODEL = "cl100k_base"

# Patterns applied to every scan unless --no-default-excludes is given.
DEFAULT_EXCLUDE_PATTERNS: FrozenSet[str] = frozenset({
    # Version control
    ".git", ".svn", ".hg",
    # IDE and editor files
    ".idea", ".vscode",
    # Lock/checksum files with no value as context
    "go.sum",
    # Dependency and cache directories
    "node_modules", "__pycache__",
})

TEST_PATTERNS_FILE = Path(__file__).with_name("test_patterns.txt")


def parse_test_patterns(text: str) -> FrozenSet[str]:
    """Parses the bundled test-pattern list. Anything after '#' is a comment."""
    patterns: Set[str] = set()
    for line in text.splitlines():
        line = line.split("#", 1)[0].strip()
        if line:
            patterns.add(line)
    return frozenset(patterns)


# Loaded once at import; never re-read during a scan.
KNOWN_TEST_PATTERNS: FrozenSet[str] = parse_test_patterns(
    TEST_PATTERNS_FILE.read_text(encoding="utf-8")
)


# --- Ignore File ---

def parse_ignore_lines(lines: Iterable[str]) -> Set[str]:
    """One pattern per line; blank lines and lines starting with '#' are skipped."""
    patterns: Set[str] = set()
    for line in lines:
        line = line.strip()
        if line and not line.startswith("#"):
            patterns.add(line)
    return patterns


def load_ignore_file(fs: FileSystem, path: str) -> Set[str]:
    """
    Reads exclusion patterns from an ignore file.

    A missing file is not an error and yields no patterns. Any other failure
    (permissions, a directory in the way, undecodable bytes) raises SetupError.
    """
    try:
        data = fs.read_file(path)
    except FileNotFoundError:
        return set()
    except OSError as e:
        if e.errno == errno.ENOENT:
            return set()
        raise SetupError(f"error opening exclusion file '{path}': {e}") from e
    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise SetupError(f"error reading exclusion file '{path}': {e}") from e
    return parse_ignore_lines(text.splitlines())


# --- Scan Configuration ---

@dataclass(frozen=True)
class ScanConfig:
    """Settings for a single run. Immutable once built."""
    root_dir: str = "."
    file_types: Tuple[str, ...] = ()
    recursive: bool = True
    verbose: bool = False
    show_hidden: bool = False
    exclude_tests: bool = False
    exclude_patterns: Tuple[str, ...] = ()
    use_default_excludes: bool = True
    ignore_file_name: Optional[str] = IGNORE_FILE_NAME
    count_tokens: bool = False
    model: str = DEFAULT_MODEL
    colorize: bool = False
    style: str = "unicode"


def build_pattern_set(
    config: ScanConfig,
    fs: FileSystem,
    log_func: Optional[Callable] = None
) -> FrozenSet[str]:
    """
    Assembles the exclusion pattern set from defaults, the ignore file,
    caller-supplied patterns and (optionally) the known test-file globs.
    """
    def _log(msg, level="debug"):
        if log_func:
            log_func(msg, level)

    patterns: Set[str] = set(DEFAULT_EXCLUDE_PATTERNS) if config.use_default_excludes else set()

    if config.ignore_file_name:
        ignore_path = os.path.join(config.root_dir, config.ignore_file_name)
        from_file = load_ignore_file(fs, ignore_path)
        if from_file:
            _log(f"Loaded {len(from_file)} patterns from '{ignore_path}'", "info")
        patterns.update(from_file)

    if config.exclude_patterns:
        patterns.update(config.exclude_patterns)
        _log(f"Added {len(config.exclude_patterns)} custom exclusion patterns", "info")

    if config.exclude_tests:
        patterns.update(KNOWN_TEST_PATTERNS)
        _log(f"Excluded {len(KNOWN_TEST_PATTERNS)} test patterns", "info")

    return frozenset(patterns)


# --- User Defaults ---

# Keys of ~/.treedump_config.json that may seed command-line defaults, with their JSON types.
USER_CONFIG_TYPES: Dict[str, type] = {
    'verbose': bool,
    'show_hidden': bool,
    'use_default_excludes': bool,
    'model': str,
    'style': str,
    'exclude_patterns': list,
}
USER_CONFIG_KEYS = set(USER_CONFIG_TYPES)


def _valid_saved_value(key: str, value: Any) -> bool:
    if not isinstance(value, USER_CONFIG_TYPES[key]):
        return False
    if key == 'exclude_patterns':
        return all(isinstance(item, str) for item in value)
    return True


def get_saved_config(
    config_file: Optional[Path] = None,
    log_func: Optional[Callable] = None
) -> Dict[str, Any]:
    """
    Reads saved default options.

    A missing file yields {}; an unreadable or non-object file is ignored with
    a warning. Unknown keys are dropped silently, and values of the wrong type
    are dropped with a warning so they never reach the argument parser.
    """
    def _log(msg, level="warning"):
        if log_func:
            log_func(msg, level)

    config_file = config_file or USER_CONFIG_FILE
    if not config_file.exists():
        return {}
    try:
        saved = json.loads(config_file.read_text(encoding='utf-8'))
    except (OSError, ValueError) as e:
        _log(f"Ignoring unreadable config file '{config_file}': {e}")
        return {}
    if not isinstance(saved, dict):
        _log(f"Ignoring config file '{config_file}': expected a JSON object")
        return {}

    config: Dict[str, Any] = {}
    for key, value in saved.items():
        if key not in USER_CONFIG_TYPES:
            continue
        if not _valid_saved_value(key, value):
            expected = "a list of strings" if key == 'exclude_patterns' else USER_CONFIG_TYPES[key].__name__
            _log(f"Ignoring '{key}' in config file '{config_file}': expected {expected}, got {value!r}")
            continue
        config[key] = value
    return config
