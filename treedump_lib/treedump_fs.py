# -*- coding: utf-8 -*-
"""
File system access for treedump.

Every component that touches the disk receives a ``FileSystem`` instance
explicitly, so tests can swap in an in-memory implementation.
"""

import os
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import BinaryIO, List


@dataclass(frozen=True)
class DirEntry:
    """A single directory entry. ``is_dir`` never follows symlinks."""
    name: str
    is_dir: bool


class FileSystem(ABC):
    """Capabilities treedump needs from a file system."""

    @abstractmethod
    def open(self, path: str) -> BinaryIO:
        """Open ``path`` for binary reading."""

    @abstractmethod
    def list_dir(self, path: str) -> List[DirEntry]:
        """List the entries of directory ``path`` (unsorted)."""

    @abstractmethod
    def read_file(self, path: str) -> bytes:
        """Return the whole content of ``path``."""

    @abstractmethod
    def stat(self, path: str) -> os.stat_result:
        """Stat ``path``, following symlinks."""

    @abstractmethod
    def lstat(self, path: str) -> os.stat_result:
        """Stat ``path`` itself, without following symlinks."""


class OSFileSystem(FileSystem):
    """``FileSystem`` backed by the real operating system."""

    def open(self, path: str) -> BinaryIO:
        return open(path, "rb")

    def list_dir(self, path: str) -> List[DirEntry]:
        with os.scandir(path) as it:
            return [DirEntry(entry.name, entry.is_dir(follow_symlinks=False)) for entry in it]

    def read_file(self, path: str) -> bytes:
        with open(path, "rb") as f:
            return f.read()

    def stat(self, path: str) -> os.stat_result:
        return os.stat(path)

    def lstat(self, path: str) -> os.stat_result:
        return os.lstat(path)
