"""
Atomic file writer for translated output.

A write never leaves the target file half written: content goes to a
temporary file in the same directory, which then replaces the target.
"""

from __future__ import annotations

import ast
import tempfile
from collections.abc import Callable
from pathlib import Path

from .errors import TranslationError


class AtomicWriter:
    """Writes files atomically, optionally validating Python output first.

    Args:
        validate_python: Validation function for Python code, raising
            TranslationError on invalid input. Defaults to ``ast.parse``.
    """

    def __init__(self, validate_python: Callable[[str], None] | None = None):
        self._validate_python = validate_python or self._default_validate_python

    def write(self, path: Path, content: str, language: str = "", validate: bool = True) -> None:
        """Write content to a file atomically.

        Args:
            path: Target file path
            content: Content to write
            language: Language of the content; only "python" is validated
            validate: Whether to validate before replacing the target

        Raises:
            TranslationError: If validation fails
            OSError: If file operations fail
        """
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        temp_fd, temp_path_str = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp", text=True)
        temp_path = Path(temp_path_str)

        try:
            with open(temp_fd, "w", encoding="utf-8") as f:
                f.write(content)

            if validate and language == "python":
                self._validate_python(content)

            temp_path.replace(path)
        except Exception:
            temp_path.unlink(missing_ok=True)
            raise

    def _default_validate_python(self, content: str) -> None:
        try:
            ast.parse(content)
        except SyntaxError as e:
            raise TranslationError(f"Translated Python code is not valid: {e}") from e
