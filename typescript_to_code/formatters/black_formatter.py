"""
Black formatter for translated Python code.

Translated samples are not guaranteed to be valid Python (unsupported syntax
is rendered as a visible placeholder), so code black rejects is returned as-is.
"""

from __future__ import annotations

import logging

from ..config import FormatterConfig
from .base import Formatter

logger = logging.getLogger(__name__)


class BlackFormatter(Formatter):
    """Formatter using black for Python code."""

    def __init__(self):
        self._black = None
        self._available = None

    def is_available(self) -> bool:
        """Check if black is installed."""
        if self._available is None:
            try:
                import black

                self._black = black
                self._available = True
            except ImportError:
                self._available = False
        return self._available

    def format(self, code: str, config: FormatterConfig) -> str:
        if not self.is_available():
            logger.debug("black is not installed, leaving code unformatted")
            return code

        black = self._black

        target_versions = set()
        target = config.target_version.upper() if config.target_version else ""
        if hasattr(black.TargetVersion, target):
            target_versions.add(getattr(black.TargetVersion, target))

        mode = black.Mode(
            target_versions=target_versions,
            line_length=config.line_length,
            string_normalization=config.string_normalization,
            magic_trailing_comma=config.magic_trailing_comma,
        )

        try:
            return black.format_str(code, mode=mode)
        except black.InvalidInput as e:
            logger.debug("black rejected the translated code: %s", e)
            return code


def format_with_black(code: str, line_length: int = 100, target_version: str = "py312") -> str:
    """Format Python code with black using default settings otherwise."""
    config = FormatterConfig(enabled=True, line_length=line_length, target_version=target_version)
    return BlackFormatter().format(code, config)
