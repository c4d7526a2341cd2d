"""
Sources of TypeScript text.

A source gives access to its contents either directly, as a (name, contents)
pair, or as a file on disk. In-memory sources are materialized into a private
temporary directory, so the process working directory is never changed.
"""

from __future__ import annotations

import tempfile
from collections.abc import Callable, Iterator
from contextlib import AbstractContextManager, contextmanager
from pathlib import Path
from typing import Protocol, TypeVar

T = TypeVar("T")


class Source(Protocol):
    """Capability object providing source text."""

    name: str

    def with_file(self) -> AbstractContextManager[Path]:
        """Context manager yielding a file path holding the contents."""
        ...

    def with_contents(self, fn: Callable[[str, str], T]) -> T:
        """Call ``fn(name, contents)`` and return its result."""
        ...


class FileSource:
    """Source backed by a file on disk."""

    def __init__(self, path: str | Path):
        self.path = Path(path)
        self.name = str(path)

    @contextmanager
    def with_file(self) -> Iterator[Path]:
        yield self.path

    def with_contents(self, fn: Callable[[str, str], T]) -> T:
        contents = self.path.read_text(encoding="utf-8")
        return fn(self.name, contents)


class LiteralSource:
    """Source backed by an in-memory string.

    Args:
        source: The source text
        filename_hint: Name used in diagnostics and for the materialized file
    """

    def __init__(self, source: str, filename_hint: str = "index.ts"):
        self.source = source
        self.name = filename_hint

    @contextmanager
    def with_file(self) -> Iterator[Path]:
        with tempfile.TemporaryDirectory(prefix="typescript_to_code") as tmp_dir:
            path = Path(tmp_dir) / Path(self.name).name
            path.write_text(self.source, encoding="utf-8")
            yield path

    def with_contents(self, fn: Callable[[str, str], T]) -> T:
        return fn(self.name, self.source)
