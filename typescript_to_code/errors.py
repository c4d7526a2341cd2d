"""
Exceptions raised by the translator.

Recoverable problems (unsupported syntax) are reported as diagnostics and never
raised; the exceptions below abort the translation unit they occur in.
"""

from __future__ import annotations


class TranslationError(Exception):
    """Base class for errors that abort a translation."""

    pass


class IrrepresentableSyntaxError(TranslationError):
    """Raised by a visitor when a source construct has no possible
    representation in the target language.

    Continuing would silently produce invalid output, so the current
    translation unit is aborted. In a Markdown document only the offending
    code block is affected.

    Attributes:
        start: Byte offset where the construct starts
        end: Byte offset where the construct ends
    """

    def __init__(self, message: str, start: int = 0, end: int = 0):
        super().__init__(message)
        self.start = start
        self.end = end


class SourceParseError(TranslationError):
    """Raised when the front-end cannot produce a usable syntax tree.

    This can happen when:
    - The parser returns no tree at all
    - The root of the tree is itself an error node
    """

    pass


class UnknownTargetError(TranslationError, ValueError):
    """Raised when an unknown target language is requested."""

    pass
