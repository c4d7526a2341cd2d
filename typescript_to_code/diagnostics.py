"""
Diagnostics collected during translation.

Diagnostics never interrupt traversal. They are returned next to the output
and formatted for the user once rendering is complete.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

import click
import jinja2

TEMPLATE_DIR = Path(__file__).parent / "templates"

_SEVERITY_COLORS = {
    "error": "red",
    "warning": "yellow",
}


class Severity(str, Enum):
    """Diagnostic severities."""

    ERROR = "error"
    WARNING = "warning"


@dataclass(frozen=True)
class Diagnostic:
    """A translation problem anchored to a source range.

    Attributes:
        severity: Error or warning
        message: Human-readable description
        source_name: Name of the translated unit (file or snippet name)
        start: Byte offset where the offending node starts
        end: Byte offset where the offending node ends
        line: 1-based line of ``start``
        column: 1-based column of ``start``
        source_line: Text of the line containing ``start``, for context
    """

    severity: Severity
    message: str
    source_name: str = ""
    start: int = 0
    end: int = 0
    line: int = 1
    column: int = 1
    source_line: str | None = None

    @property
    def location(self) -> str:
        return f"{self.source_name}:{self.line}:{self.column}"

    @property
    def width(self) -> int:
        """Number of characters to underline on the source line."""
        if self.source_line is None:
            return 1
        available = len(self.source_line) - self.column + 1
        return max(1, min(self.end - self.start, available))

    @property
    def is_error(self) -> bool:
        return self.severity == Severity.ERROR


def is_error_diagnostic(diagnostic: Diagnostic) -> bool:
    return diagnostic.is_error


def has_errors(diagnostics: Iterable[Diagnostic]) -> bool:
    """Return True if any diagnostic is an error, the signal for a failed run."""
    return any(d.is_error for d in diagnostics)


def _severity_label(severity: Severity, color: bool) -> str:
    if not color:
        return severity.value
    return click.style(severity.value, fg=_SEVERITY_COLORS[severity.value], bold=True)


def _make_environment() -> jinja2.Environment:
    env = jinja2.Environment(
        loader=jinja2.FileSystemLoader(str(TEMPLATE_DIR)),
        lstrip_blocks=True,
        trim_blocks=True,
        keep_trailing_newline=True,
    )
    env.filters["severity"] = _severity_label
    return env


_ENV = _make_environment()


def format_diagnostics(diagnostics: Iterable[Diagnostic], color: bool = False) -> str:
    """
    Format diagnostics for display.

    Each diagnostic gets a ``name:line:col - severity: message`` header,
    followed by the offending source line with the node underlined.

    Args:
        diagnostics: Diagnostics to format
        color: Whether to color severities with ANSI escapes

    Returns:
        Formatted text, empty if there are no diagnostics
    """
    template = _ENV.get_template("diagnostics.txt.jinja2")
    return template.render(diagnostics=list(diagnostics), color=color)
