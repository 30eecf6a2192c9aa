"""Read access to repository content used by scanners and contributors.

Parsing and file I/O belong to the caller; the engines only pass projects
through. Two adapters are provided: ``LocalProject`` over a directory on
disk, and ``InMemoryProject`` for tests and synthetic projects.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Optional, Protocol, runtime_checkable


@runtime_checkable
class Project(Protocol):
    """Read-only accessor to repository content."""

    id: str

    @property
    def base_dir(self) -> Optional[Path]: ...

    async def has_file(self, path: str) -> bool: ...

    async def read_file(self, path: str) -> Optional[str]: ...

    async def file_paths(self) -> list[str]: ...


class InMemoryProject:
    """Project backed by a dict of path -> content."""

    def __init__(self, files: Optional[dict[str, str]] = None, id: str = "in-memory"):
        self.id = id
        self._files = dict(files or {})

    @classmethod
    def of(cls, *entries: tuple[str, str], id: str = "in-memory") -> "InMemoryProject":
        return cls(dict(entries), id=id)

    @property
    def base_dir(self) -> Optional[Path]:
        return None

    async def has_file(self, path: str) -> bool:
        return path in self._files

    async def read_file(self, path: str) -> Optional[str]:
        return self._files.get(path)

    async def file_paths(self) -> list[str]:
        return sorted(self._files)


class LocalProject:
    """Project rooted at a directory on the local filesystem."""

    def __init__(self, root: Path, id: Optional[str] = None):
        self.root = Path(root).resolve()
        self.id = id or self.root.name

    @property
    def base_dir(self) -> Optional[Path]:
        return self.root

    def _resolve(self, path: str) -> Optional[Path]:
        candidate = (self.root / path).resolve()
        # Never escape the project root
        if self.root != candidate and self.root not in candidate.parents:
            return None
        return candidate

    async def has_file(self, path: str) -> bool:
        resolved = self._resolve(path)
        return resolved is not None and await asyncio.to_thread(resolved.is_file)

    async def read_file(self, path: str) -> Optional[str]:
        resolved = self._resolve(path)
        if resolved is None or not await asyncio.to_thread(resolved.is_file):
            return None
        return await asyncio.to_thread(resolved.read_text, encoding="utf-8", errors="replace")

    async def file_paths(self) -> list[str]:
        def _walk() -> list[str]:
            return sorted(
                p.relative_to(self.root).as_posix()
                for p in self.root.rglob("*")
                if p.is_file() and ".git" not in p.relative_to(self.root).parts
            )

        return await asyncio.to_thread(_walk)
