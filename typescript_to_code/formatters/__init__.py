"""
Post-processing formatters for translated code.
"""

from __future__ import annotations

from .base import Formatter
from .black_formatter import BlackFormatter, format_with_black

__all__ = [
    "BlackFormatter",
    "Formatter",
    "format_with_black",
]
