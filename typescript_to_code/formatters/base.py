"""
Base class for code formatters.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from ..config import FormatterConfig


class Formatter(ABC):
    """Abstract base class for formatters applied to translated code."""

    @abstractmethod
    def format(self, code: str, config: FormatterConfig) -> str:
        """
        Format translated code.

        Args:
            code: The translated code
            config: Formatter configuration

        Returns:
            Formatted code, or the input unchanged if it cannot be formatted
        """

    @abstractmethod
    def is_available(self) -> bool:
        """Check if the formatter's dependencies are installed."""
