# -*- coding: utf-8 -*-
"""
Content classification for treedump.
Decides, from a file's metadata and leading bytes, whether its content may be emitted.
"""

import stat
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .treedump_fs import FileSystem

CHUNK_SIZE = 16 * 1024
SECRET_KEY_MARKER = b"PRIVATE KEY"


class FileKind(Enum):
    PLAIN = "plain"
    BINARY = "binary"
    SECRET = "private key"
    SYMLINK = "symlink"
    UNREADABLE = "unreadable"


@dataclass(frozen=True)
class Classification:
    """Result of ``classify``. ``detail`` carries the error text for UNREADABLE."""
    kind: FileKind
    detail: Optional[str] = None

    @property
    def emits_content(self) -> bool:
        return self.kind is FileKind.PLAIN


def classify_chunk(data: bytes) -> FileKind:
    """Classify a leading chunk of file content."""
    if b"\x00" in data:
        return FileKind.BINARY
    if SECRET_KEY_MARKER in data:
        return FileKind.SECRET
    return FileKind.PLAIN


def _read_chunk(f, size: int) -> bytes:
    """Read up to ``size`` bytes, tolerating short reads. EOF simply ends the chunk."""
    chunks = []
    remaining = size
    while remaining > 0:
        data = f.read(remaining)
        if not data:
            break
        chunks.append(data)
        remaining -= len(data)
    return b"".join(chunks)


def classify(path: str, fs: FileSystem, chunk_size: int = CHUNK_SIZE) -> Classification:
    """
    Classify a file as plain, binary, secret, symlink or unreadable.

    Checks run in order and stop at the first hit:
    the file's own metadata (symlinks are never opened), then a zero byte
    in the first ``chunk_size`` bytes, then the 'PRIVATE KEY' marker.
    Any lstat, open or read failure yields UNREADABLE with the error text.
    """
    try:
        info = fs.lstat(path)
    except OSError as e:
        return Classification(FileKind.UNREADABLE, f"error(lstat): {e}")
    if stat.S_ISLNK(info.st_mode):
        return Classification(FileKind.SYMLINK)

    try:
        f = fs.open(path)
    except OSError as e:
        return Classification(FileKind.UNREADABLE, f"error(open): {e}")
    with f:
        try:
            chunk = _read_chunk(f, chunk_size)
        except OSError as e:
            return Classification(FileKind.UNREADABLE, f"error(read): {e}")

    return Classification(classify_chunk(chunk))


def read_file_content(path: str, fs: FileSystem) -> bytes:
    """
    Reads a whole PLAIN file for emission, byte for byte. No decoding or
    newline translation is applied.

    Raises:
        OSError: The file could not be opened or read.
    """
    return fs.read_file(path)
