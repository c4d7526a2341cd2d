"""TypeScript to Code

Translates TypeScript code samples, standalone or embedded in Markdown
documents, into other languages. A visitor per target language turns the
TypeScript syntax tree into an output tree, which is rendered to text.
"""

__version__ = "1.0.0"
__author__ = "François Lagunas"

from .config import FormatterConfig, TranslatorConfig
from .diagnostics import Diagnostic, Severity, format_diagnostics, has_errors, is_error_diagnostic
from .errors import IrrepresentableSyntaxError, SourceParseError, TranslationError, UnknownTargetError
from .languages import PythonVisitor, build_visitor
from .o_tree import OTree, OTreeSink
from .sources import FileSource, LiteralSource
from .translate import render_tree, translate_markdown, translate_typescript, visualize_typescript_ast
from .visitor import DefaultVisitor, TranslateResult, VisualizeAstVisitor
from .writer import AtomicWriter

__all__ = [
    "translate_typescript",
    "translate_markdown",
    "render_tree",
    "visualize_typescript_ast",
    "build_visitor",
    "TranslateResult",
    "PythonVisitor",
    "DefaultVisitor",
    "VisualizeAstVisitor",
    "OTree",
    "OTreeSink",
    "Diagnostic",
    "Severity",
    "format_diagnostics",
    "is_error_diagnostic",
    "has_errors",
    "TranslatorConfig",
    "FormatterConfig",
    "FileSource",
    "LiteralSource",
    "AtomicWriter",
    "TranslationError",
    "IrrepresentableSyntaxError",
    "SourceParseError",
    "UnknownTargetError",
]
