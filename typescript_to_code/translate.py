"""
Translation entry points.

Translates a standalone TypeScript unit, or every qualifying fenced code block
of a Markdown document, and renders output trees to text.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor

from .config import TranslatorConfig
from .diagnostics import Diagnostic, Severity
from .errors import IrrepresentableSyntaxError, TranslationError
from .frontend import SourceFile, TypeScriptParser
from .markdown import FencedBlock, fenced_blocks, transform_markdown
from .o_tree import OTree, OTreeSink, Verbatim
from .sources import LiteralSource, Source
from .visitor import AstVisitor, TranslateResult, VisualizeAstVisitor, make_diagnostic, visit_tree

logger = logging.getLogger(__name__)


def translate_typescript(source: Source, visitor: AstVisitor) -> TranslateResult:
    """
    Translate one TypeScript unit.

    Args:
        source: The TypeScript source
        visitor: Visitor selecting the target language

    Returns:
        Output tree and diagnostics

    Raises:
        SourceParseError: If the source cannot be parsed at all
        IrrepresentableSyntaxError: If the source uses a construct the target cannot express
    """
    return translate_snippet(source, TypeScriptParser(), visitor)


def translate_snippet(source: Source, parser: TypeScriptParser, visitor: AstVisitor) -> TranslateResult:
    source_file: SourceFile = source.with_contents(parser.parse)
    return visit_tree(source_file, source_file.root, visitor)


def translate_markdown(source: Source, visitor: AstVisitor, config: TranslatorConfig | None = None) -> TranslateResult:
    """
    Translate the TypeScript code blocks of a Markdown document.

    Every fenced block whose language is neither empty nor already the
    target language is translated on its own, under a synthetic name made of
    the document name and the block number. A block that fails to translate
    is left as-is and reported; the other blocks are still translated.

    Args:
        source: The Markdown document
        visitor: Visitor selecting the target language
        config: Translator configuration (block selection, parallelism)

    Returns:
        The reassembled document as a verbatim tree, and the diagnostics
        of every block in document order
    """
    config = config or TranslatorConfig()

    def translate_document(filename: str, contents: str) -> TranslateResult:
        snippets: dict[int, LiteralSource] = {}
        for block in fenced_blocks(contents):
            if _should_translate(block, visitor, config):
                snippets[block.index] = LiteralSource(block.source, f"{filename}-snippet{len(snippets) + 1}.ts")

        logger.debug("Translating %d of the code blocks in %s", len(snippets), filename)

        if config.jobs > 1 and len(snippets) > 1:
            with ThreadPoolExecutor(max_workers=config.jobs) as executor:
                outcomes = list(executor.map(lambda snippet: _translate_block(snippet, visitor), snippets.values()))
        else:
            parser = TypeScriptParser()
            outcomes = [_translate_block(snippet, visitor, parser) for snippet in snippets.values()]

        translated: dict[int, str] = {}
        diagnostics: list[Diagnostic] = []
        for index, (text, block_diagnostics) in zip(snippets, outcomes):
            diagnostics.extend(block_diagnostics)
            if text is not None:
                translated[index] = text

        def replace_block(block: FencedBlock) -> FencedBlock:
            if block.index not in translated:
                return block
            return block.with_source(translated[block.index])

        return TranslateResult(tree=Verbatim(transform_markdown(contents, replace_block)), diagnostics=diagnostics)

    return source.with_contents(translate_document)


def _should_translate(block: FencedBlock, visitor: AstVisitor, config: TranslatorConfig) -> bool:
    if not block.language or block.language == visitor.language:
        return False
    if config.source_languages:
        return block.language in config.source_languages
    return True


def _translate_block(
    snippet: LiteralSource,
    visitor: AstVisitor,
    parser: TypeScriptParser | None = None,
) -> tuple[str | None, list[Diagnostic]]:
    """Translate one code block; failures only affect this block."""
    parser = parser or TypeScriptParser()
    try:
        result = translate_snippet(snippet, parser, visitor)
    except IrrepresentableSyntaxError as e:
        source_file = snippet.with_contents(parser.parse)
        return None, [make_diagnostic(source_file, e.start, e.end, str(e))]
    except TranslationError as e:
        return None, [Diagnostic(severity=Severity.ERROR, message=str(e), source_name=snippet.name)]
    return render_tree(result.tree), result.diagnostics


def render_tree(tree: OTree) -> str:
    """Render an output tree to text, always terminated by a newline."""
    sink = OTreeSink()
    tree.write(sink)
    text = str(sink)
    return text if text.endswith("\n") else text + "\n"


def visualize_typescript_ast(source: Source) -> str:
    """Render the shape of a TypeScript syntax tree, for debugging."""
    result = translate_typescript(source, VisualizeAstVisitor())
    return render_tree(result.tree)

