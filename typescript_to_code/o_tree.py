"""
Output tree.

Visitors do not produce text directly. They build a tree of OTree nodes that
declare where text, line breaks, indentation and separators go, and the
OTreeSink turns that tree into indented text. Nodes are immutable and may be
shared as prefix elements of several other nodes.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from typing import Union

_TRAILING_WHITESPACE = re.compile(r"[ \t]+$", re.MULTILINE)

Fragment = Union[str, "OTree"]


class OTree:
    """A deferred-rendering unit of output.

    Rendering writes the prefix, adjusts the indentation, optionally starts a
    new line, writes the children separated by ``separator``, restores the
    indentation and finally writes ``suffix`` at the outer indentation level.

    Args:
        prefix: Literal text fragments and nested trees written first
        children: Child trees written after the prefix
        newline: Add a line break after the prefix (subject to the new indentation)
        indent: Indentation adjustment applied around the children
        separator: Text written between consecutive children
        suffix: Text written after the children, once the indentation is reverted
    """

    __slots__ = ("prefix", "children", "newline", "indent", "separator", "suffix")

    def __init__(
        self,
        prefix: Sequence[Fragment],
        children: Sequence[OTree] = (),
        *,
        newline: bool = False,
        indent: int = 0,
        separator: str = "",
        suffix: str = "",
    ):
        self.prefix = tuple(prefix)
        self.children = tuple(children)
        self.newline = newline
        self.indent = indent
        self.separator = separator
        self.suffix = suffix

    def write(self, sink: OTreeSink) -> None:
        for fragment in self.prefix:
            sink.write(fragment)

        sink.adjust_indent(self.indent)
        if self.newline:
            sink.newline()

        for i, child in enumerate(self.children):
            if i > 0 and self.separator:
                sink.write(self.separator)
            child.write(sink)

        sink.adjust_indent(-self.indent)

        if self.suffix:
            sink.write(self.suffix)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(prefix={list(self.prefix)!r}, children={len(self.children)})"


class UnknownSyntax(OTree):
    """Placeholder for syntax that could not be translated."""

    __slots__ = ()


class Verbatim(OTree):
    """Text written exactly as given: no indentation, no whitespace cleanup."""

    __slots__ = ("text",)

    def __init__(self, text: str):
        super().__init__([])
        self.text = text

    def write(self, sink: OTreeSink) -> None:
        sink.write_verbatim(self.text)


EMPTY_NODE = OTree([])


class OTreeSink:
    """Stateful serializer for OTree graphs.

    Every line break written while the indentation is raised is followed by
    the matching number of spaces, which keeps multi-line fragments nested
    correctly inside already indented output.
    """

    def __init__(self):
        self._indent = 0
        # (text, verbatim) pairs
        self._fragments: list[tuple[str, bool]] = []

    @property
    def indent(self) -> int:
        return self._indent

    def write(self, text: Fragment) -> None:
        if isinstance(text, OTree):
            text.write(self)
        else:
            self._fragments.append((text.replace("\n", "\n" + " " * self._indent), False))

    def write_verbatim(self, text: str) -> None:
        self._fragments.append((text, True))

    def newline(self) -> None:
        self.write("\n")

    def adjust_indent(self, amount: int) -> None:
        self._indent += amount

    def __str__(self) -> str:
        # Strip trailing whitespace from every line, except in verbatim text
        parts: list[str] = []
        pending: list[str] = []
        for text, verbatim in self._fragments:
            if verbatim:
                parts.append(_TRAILING_WHITESPACE.sub("", "".join(pending)))
                parts.append(text)
                pending = []
            else:
                pending.append(text)
        parts.append(_TRAILING_WHITESPACE.sub("", "".join(pending)))
        return "".join(parts)
