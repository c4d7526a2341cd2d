"""
TypeScript front-end.

Uses tree-sitter and tree-sitter-typescript to parse source text into a tree
of SyntaxNode objects. Comments are not kept as structural children: like
the TypeScript compiler, we treat them as trivia and locate them by scanning
the raw text around node offsets.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum

import tree_sitter_typescript as ts_typescript
from tree_sitter import Language, Parser, TreeCursor

from .errors import SourceParseError

logger = logging.getLogger(__name__)

TYPESCRIPT = Language(ts_typescript.language_typescript())

# tree-sitter node types that are trivia rather than syntax
COMMENT_KINDS = frozenset({"comment", "html_comment"})

_LINE_BREAKS = b"\n\r"
_WHITESPACE = b" \t\v\f"


class CommentKind(str, Enum):
    """Comment trivia kinds."""

    LINE = "line"
    BLOCK = "block"


@dataclass(frozen=True)
class CommentRange:
    """A comment found in the trivia around a node.

    Attributes:
        kind: Line (``//``) or block (``/* */``) comment
        pos: Byte offset of the first character of the comment
        end: Byte offset just past the comment
        has_trailing_newline: Whether a line break (or the end of the text)
            follows the comment
        trailing: Whether the comment was found after a node, on the same line
        closing: Whether the comment sits before the closing token of its
            parent, after the last child
    """

    kind: CommentKind
    pos: int
    end: int
    has_trailing_newline: bool
    trailing: bool = False
    closing: bool = False


@dataclass(eq=False)
class SyntaxNode:
    """Read-only view of a tree-sitter node.

    ``full_start`` is the trivia-inclusive start: the end of the previous
    non-comment sibling, or the parent's full start for a first child.
    Several nodes may share the same full start. ``after_token`` is set when
    the previous sibling is an anonymous token such as ``,`` or ``{``.
    """

    kind: str
    start: int
    end: int
    full_start: int
    is_named: bool
    is_missing: bool = False
    after_token: bool = False
    children: list[SyntaxNode] = field(default_factory=list)
    fields: dict[str, list[SyntaxNode]] = field(default_factory=dict)

    @property
    def named_children(self) -> list[SyntaxNode]:
        return [child for child in self.children if child.is_named]

    def child_by_field(self, name: str) -> SyntaxNode | None:
        """Return the first child stored under the given field name."""
        nodes = self.fields.get(name)
        return nodes[0] if nodes else None

    def first_named(self, *kinds: str) -> SyntaxNode | None:
        """Return the first named child, optionally restricted to some kinds."""
        for child in self.children:
            if child.is_named and (not kinds or child.kind in kinds):
                return child
        return None

    def walk(self):
        """Yield this node and all its descendants in pre-order."""
        yield self
        for child in self.children:
            yield from child.walk()

    def __repr__(self) -> str:
        return f"SyntaxNode({self.kind!r}, {self.start}, {self.end})"


class SourceFile:
    """Parsed source: the syntax tree plus the text it was parsed from.

    All offsets are byte offsets into the UTF-8 encoded text, as produced by
    tree-sitter. ``comments`` lists the (start, end) offsets of every comment
    the parser found.
    """

    def __init__(self, name: str, text: str, root: SyntaxNode, comments: list[tuple[int, int]] | None = None):
        self.name = name
        self.text = text
        self.data = text.encode("utf-8")
        self.root = root
        self.comments = comments or []

    def text_at(self, pos: int, end: int) -> str:
        return self.data[pos:end].decode("utf-8", errors="replace")

    def text_of(self, node: SyntaxNode) -> str:
        return self.text_at(node.start, node.end)

    def line_and_column(self, offset: int) -> tuple[int, int]:
        """Return the 1-based line and column of a byte offset."""
        line_start = self.data.rfind(b"\n", 0, offset) + 1
        return self.data.count(b"\n", 0, offset) + 1, offset - line_start + 1

    def line_at(self, offset: int) -> str:
        """Return the full text of the line containing a byte offset."""
        line_start = self.data.rfind(b"\n", 0, offset) + 1
        line_end = self.data.find(b"\n", offset)
        if line_end < 0:
            line_end = len(self.data)
        return self.data[line_start:line_end].decode("utf-8", errors="replace").rstrip("\r")

    def leading_comments(self, pos: int, same_line: bool = False) -> list[CommentRange]:
        return scan_comment_ranges(self.data, pos, trailing=False, include_same_line=same_line)

    def trailing_comments(self, pos: int) -> list[CommentRange]:
        return scan_comment_ranges(self.data, pos, trailing=True)


def scan_comment_ranges(data: bytes, pos: int, trailing: bool, include_same_line: bool = False) -> list[CommentRange]:
    """Collect the comments in the trivia starting at ``pos``.

    A trailing scan collects comments up to the first line break. A leading
    scan only collects comments after the first line break, since comments on
    the same line belong to the preceding token, except at the very start of
    the file where everything is collected. ``include_same_line`` makes a
    leading scan collect from ``pos`` on, for trivia that follows a token
    which cannot own a trailing comment.
    """
    comments: list[CommentRange] = []
    pending: dict | None = None
    collecting = trailing or include_same_line

    if pos == 0:
        collecting = True
        if data.startswith(b"#!"):
            newline = data.find(b"\n")
            pos = len(data) if newline < 0 else newline

    while 0 <= pos < len(data):
        ch = data[pos : pos + 1]
        if ch in _LINE_BREAKS:
            if ch == b"\r" and data[pos + 1 : pos + 2] == b"\n":
                pos += 1
            pos += 1
            if pending is not None:
                pending["has_trailing_newline"] = True
            if trailing:
                break
            collecting = True
            continue
        if ch in _WHITESPACE:
            pos += 1
            continue
        if ch == b"/" and data[pos + 1 : pos + 2] in (b"/", b"*"):
            start = pos
            has_trailing_newline = False
            if data[pos + 1 : pos + 2] == b"/":
                kind = CommentKind.LINE
                pos += 2
                while pos < len(data):
                    if data[pos] in _LINE_BREAKS:
                        has_trailing_newline = True
                        break
                    pos += 1
            else:
                kind = CommentKind.BLOCK
                close = data.find(b"*/", pos + 2)
                pos = len(data) if close < 0 else close + 2

            if collecting:
                if pending is not None:
                    comments.append(CommentRange(**pending))
                pending = {
                    "kind": kind,
                    "pos": start,
                    "end": pos,
                    "has_trailing_newline": has_trailing_newline,
                    "trailing": trailing,
                }
            continue
        break

    if pending is not None:
        if pos >= len(data):
            pending["has_trailing_newline"] = True
        comments.append(CommentRange(**pending))
    return comments


class TypeScriptParser:
    """Parses TypeScript source text into a SourceFile.

    A parser instance must not be shared between threads; create one per
    thread instead.
    """

    def __init__(self):
        self._parser = Parser(TYPESCRIPT)

    def parse(self, name: str, contents: str) -> SourceFile:
        """Parse TypeScript source code.

        Args:
            name: File name used in diagnostics
            contents: TypeScript source code

        Returns:
            The parsed source file

        Raises:
            SourceParseError: If no usable tree could be produced
        """
        tree = self._parser.parse(contents.encode("utf-8"))
        if tree is None:
            raise SourceParseError(f"Failed to parse {name}")
        if tree.root_node.type == "ERROR":
            raise SourceParseError(f"Failed to parse {name}: the file is not valid TypeScript")

        logger.debug("Parsed %s (%d bytes, errors: %s)", name, tree.root_node.end_byte, tree.root_node.has_error)
        comments: list[tuple[int, int]] = []
        root = _build_node(tree.walk(), 0, False, comments)
        return SourceFile(name, contents, root, comments)


def _build_node(cursor: TreeCursor, full_start: int, after_token: bool, comments: list) -> SyntaxNode:
    ts_node = cursor.node
    node = SyntaxNode(
        kind=ts_node.type,
        start=ts_node.start_byte,
        end=ts_node.end_byte,
        full_start=full_start,
        is_named=ts_node.is_named,
        is_missing=ts_node.is_missing,
        after_token=after_token,
    )

    if cursor.goto_first_child():
        previous_end = full_start
        previous_is_token = False
        while True:
            if cursor.node.type in COMMENT_KINDS:
                comments.append((cursor.node.start_byte, cursor.node.end_byte))
            else:
                field_name = cursor.field_name
                child = _build_node(cursor, previous_end, previous_is_token, comments)
                node.children.append(child)
                if field_name:
                    node.fields.setdefault(field_name, []).append(child)
                previous_end = child.end
                previous_is_token = not child.is_named
            if not cursor.goto_next_sibling():
                break
        cursor.goto_parent()

    return node
