# tests/conftest.py
import errno
import io
import os
import stat
import pytest
from pathlib import Path
from typing import Any, Dict, List, Optional

from treedump_lib import treedump_config
from treedump_lib.treedump_config import ScanConfig
from treedump_lib.treedump_core import TreeDump
from treedump_lib.treedump_fs import DirEntry, FileSystem


def create_test_structure(base_path: Path, structure: Dict[str, Any]):
    """Recursively creates a directory structure from a dictionary."""
    base_path.mkdir(parents=True, exist_ok=True)

    for name, content in structure.items():
        path = base_path / name
        if isinstance(content, dict):
            path.mkdir(parents=True, exist_ok=True)
            create_test_structure(path, content)
        elif isinstance(content, str): # Text file content
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding='utf-8')
        elif isinstance(content, bytes): # Raw file content
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(content)
        elif content is None: # Empty file
            path.parent.mkdir(parents=True, exist_ok=True)
            path.touch()
        else:
            raise TypeError(f"Unsupported structure type for {name}: {type(content)}")


def _stat_result(mode: int, size: int = 0) -> os.stat_result:
    return os.stat_result((mode, 0, 0, 1, 0, 0, size, 0, 0, 0))


class TrickleFile(io.BytesIO):
    """File object that hands out at most ``step`` bytes per read() call."""

    def __init__(self, data: bytes, step: int = 7):
        super().__init__(data)
        self.step = step

    def read(self, size=-1):
        if size is None or size < 0 or size > self.step:
            size = self.step
        return super().read(size)


class MemoryFileSystem(FileSystem):
    """
    In-memory FileSystem for tests.

    ``structure`` maps names to nested dicts (directories), bytes/str (files),
    or ``Symlink(target)`` entries. Paths are joined with os.sep under ``root``.
    """

    def __init__(self, root: str, structure: Dict[str, Any]):
        self.root = root
        self.files: Dict[str, bytes] = {}
        self.dirs: Dict[str, List[DirEntry]] = {}
        self.links: Dict[str, str] = {}
        self.open_errors: Dict[str, OSError] = {}
        self.read_errors: Dict[str, OSError] = {}
        self.list_errors: Dict[str, OSError] = {}
        self.trickle = False
        self.opened: List[str] = []
        self._add_dir(root, structure)

    def _add_dir(self, path: str, structure: Dict[str, Any]):
        entries = []
        for name, content in structure.items():
            child = os.path.join(path, name)
            if isinstance(content, dict):
                entries.append(DirEntry(name, True))
                self._add_dir(child, content)
            elif isinstance(content, Symlink):
                entries.append(DirEntry(name, False))
                self.links[child] = content.target
            else:
                entries.append(DirEntry(name, False))
                self.files[child] = content.encode("utf-8") if isinstance(content, str) else content
        self.dirs[path] = entries

    def _missing(self, path: str) -> OSError:
        return FileNotFoundError(errno.ENOENT, "no such file or directory", path)

    def open(self, path):
        self.opened.append(path)
        if path in self.open_errors:
            raise self.open_errors[path]
        if path not in self.files:
            raise self._missing(path)
        data = self.files[path]
        return TrickleFile(data) if self.trickle else io.BytesIO(data)

    def list_dir(self, path):
        if path in self.list_errors:
            raise self.list_errors[path]
        if path not in self.dirs:
            raise self._missing(path)
        return list(self.dirs[path])

    def read_file(self, path):
        if path in self.read_errors:
            raise self.read_errors[path]
        if path not in self.files:
            raise self._missing(path)
        return self.files[path]

    def stat(self, path):
        if path in self.dirs:
            return _stat_result(stat.S_IFDIR | 0o755)
        if path in self.files:
            return _stat_result(stat.S_IFREG | 0o644, len(self.files[path]))
        raise self._missing(path)

    def lstat(self, path):
        if path in self.links:
            return _stat_result(stat.S_IFLNK | 0o777)
        return self.stat(path)


class Symlink:
    """Marker for a symlink entry in a MemoryFileSystem structure."""

    def __init__(self, target: str):
        self.target = target


@pytest.fixture(autouse=True)
def isolated_user_config(tmp_path, monkeypatch):
    """Keeps the real ~/.treedump_config.json out of every test."""
    config_file = tmp_path / "user_home" / ".treedump_config.json"
    monkeypatch.setattr(treedump_config, "USER_CONFIG_FILE", config_file)
    return config_file


@pytest.fixture
def base_test_structure(tmp_path):
    """Provides a standard project layout on disk."""
    structure = {
        "main.go": "package main\n\nfunc main() {}\n",
        "main_test.go": "package main\n\nimport \"testing\"\n",
        "README.md": "# Test Project\n",
        "config.json": "{\"name\": \"test\"}\n",
        "src": {
            "utils.go": "package main\n\nfunc helper() string { return \"helper\" }\n",
            "utils_test.go": "package main\n",
        },
        "vendor": {
            "lib.go": "package vendor\n",
        },
        "data.log": "2023-01-01 INFO: Starting application\n",
        ".env": "SECRET_KEY=supersecret123\n",
        ".gitignore": "*.log\n",
        "assets": {
            "logo.png": b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR",
        },
    }
    root = tmp_path / "test_proj"
    create_test_structure(root, structure)
    return root


@pytest.fixture
def run_treedump_and_capture(capsys):
    """Runs TreeDump over a real directory and returns (document, stderr, report)."""
    def _run(root_dir, **overrides):
        config = ScanConfig(root_dir=str(root_dir), **overrides)
        sink = io.BytesIO()
        report = TreeDump(config).run(sink)
        captured = capsys.readouterr()
        return sink.getvalue().decode("utf-8", "replace"), captured.err, report

    return _run
