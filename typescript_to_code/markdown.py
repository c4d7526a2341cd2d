"""
Fenced code blocks in Markdown documents.

Uses markdown-it-py to locate fenced blocks. Blocks returned changed by the
transform are re-fenced in place; every other line of the document is kept
byte for byte.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, replace

from markdown_it import MarkdownIt


@dataclass(frozen=True)
class FencedBlock:
    """A fenced code block.

    Attributes:
        index: Position of the block among all fenced blocks of the document
        language: First word of the info string, empty if there is none
        source: Block contents
        info: Full info string
    """

    index: int
    language: str
    source: str
    info: str = ""

    def with_source(self, source: str, language: str = "") -> FencedBlock:
        """Return a copy holding new contents under a new language tag."""
        return replace(self, source=source, language=language, info=language)


@dataclass(frozen=True)
class _Fence:
    block: FencedBlock
    start_line: int
    end_line: int
    markup: str


def _parse_fences(text: str) -> list[_Fence]:
    md = MarkdownIt("commonmark")
    fences: list[_Fence] = []
    for token in md.parse(text):
        if token.type != "fence" or token.map is None:
            continue
        info = token.info.strip()
        block = FencedBlock(
            index=len(fences),
            language=info.split()[0] if info else "",
            source=token.content,
            info=info,
        )
        fences.append(_Fence(block, token.map[0], token.map[1], token.markup))
    return fences


def fenced_blocks(text: str) -> list[FencedBlock]:
    """Return every fenced code block of a Markdown document, in document order."""
    return [fence.block for fence in _parse_fences(text)]


def transform_markdown(text: str, transform: Callable[[FencedBlock], FencedBlock]) -> str:
    """
    Rewrite the fenced code blocks of a Markdown document.

    Args:
        text: Markdown document
        transform: Called with every fenced block, in document order. Returning
            the block unchanged leaves it untouched in the output.

    Returns:
        The reassembled document
    """
    lines = text.splitlines(keepends=True)
    output: list[str] = []
    cursor = 0

    for fence in _parse_fences(text):
        new_block = transform(fence.block)
        if new_block == fence.block:
            continue
        output.extend(lines[cursor : fence.start_line])
        output.append(_render_fence(lines[fence.start_line], fence.markup, new_block))
        cursor = fence.end_line

    output.extend(lines[cursor:])
    return "".join(output)


def _render_fence(opening_line: str, markup: str, block: FencedBlock) -> str:
    # Keep whatever precedes the fence marker (indentation, "> " of a block quote)
    prefix = opening_line[: opening_line.find(markup)] if markup in opening_line else ""

    parts = [f"{prefix}{markup}{block.info}\n"]
    for line in block.source.splitlines():
        parts.append(f"{prefix}{line}\n" if line else f"{prefix.rstrip()}\n")
    parts.append(f"{prefix}{markup}\n")
    return "".join(parts)
