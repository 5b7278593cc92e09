"""File-system abstraction consumed by the directory readers.

Paths are forward-slash joined and relative to the root of one
configuration tree.
"""

import posixpath
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol


@dataclass(frozen=True)
class DirEntry:
    name: str
    is_dir: bool


class FileSystem(Protocol):
    """Protocol for the storage holding a configuration tree."""

    def exists(self, path: str) -> bool:
        """Return whether a file or directory exists at path."""
        ...

    def read_dir(self, path: str) -> list[DirEntry]:
        """List the direct entries of a directory.

        Raises:
            OSError: If the directory can not be listed
        """
        ...

    def read_file(self, path: str) -> bytes:
        """Return the full content of a file.

        Raises:
            OSError: If the file can not be read
        """
        ...


class LocalFileSystem:
    """Configuration tree stored on the local disk below ``root``."""

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root)

    def _resolve(self, path: str) -> Path:
        return self.root / path.lstrip("/")

    def exists(self, path: str) -> bool:
        return self._resolve(path).exists()

    def read_dir(self, path: str) -> list[DirEntry]:
        directory = self._resolve(path)
        if not directory.exists():
            raise FileNotFoundError(f"no such directory: {path}")
        if not directory.is_dir():
            raise NotADirectoryError(f"not a directory: {path}")
        return sorted(
            (DirEntry(name=p.name, is_dir=p.is_dir()) for p in directory.iterdir()),
            key=lambda e: e.name,
        )

    def read_file(self, path: str) -> bytes:
        return self._resolve(path).read_bytes()


class MemoryFileSystem:
    """Configuration tree held in memory.

    Directories are implied by the file paths, e.g. ``{"teams/a/repo.yaml": ...}``
    contains the directories ``teams`` and ``teams/a``.
    """

    def __init__(self, files: Mapping[str, bytes | str] | None = None) -> None:
        self._files: dict[str, bytes] = {}
        for path, content in (files or {}).items():
            self.write_file(path, content)

    @staticmethod
    def _normalize(path: str) -> str:
        path = posixpath.normpath(path.strip("/"))
        return "" if path == "." else path

    def write_file(self, path: str, content: bytes | str) -> None:
        if isinstance(content, str):
            content = content.encode("utf-8")
        self._files[self._normalize(path)] = content

    def _is_dir(self, path: str) -> bool:
        if not path:
            return True
        prefix = path + "/"
        return any(f.startswith(prefix) for f in self._files)

    def exists(self, path: str) -> bool:
        path = self._normalize(path)
        return path in self._files or self._is_dir(path)

    def read_dir(self, path: str) -> list[DirEntry]:
        path = self._normalize(path)
        if not self._is_dir(path):
            raise FileNotFoundError(f"no such directory: {path}")
        prefix = path + "/" if path else ""
        entries: dict[str, bool] = {}
        for f in self._files:
            if not f.startswith(prefix):
                continue
            head, sep, _ = f[len(prefix) :].partition("/")
            entries[head] = entries.get(head, False) or bool(sep)
        return [DirEntry(name=n, is_dir=d) for n, d in sorted(entries.items())]

    def read_file(self, path: str) -> bytes:
        path = self._normalize(path)
        if path not in self._files:
            raise FileNotFoundError(f"no such file: {path}")
        return self._files[path]
