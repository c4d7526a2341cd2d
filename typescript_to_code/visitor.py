"""
Syntax-directed translation.

The walker descends the syntax tree and hands every node to the method of an
AstVisitor matching the node kind. Visitors return OTree fragments; the
walker takes care of structural nodes, comment trivia and the fallback for
syntax no visitor knows about, so no source text is ever silently dropped.
"""

from __future__ import annotations

import json
import logging
import string
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field, replace
from typing import Protocol

from .diagnostics import Diagnostic, Severity
from .frontend import CommentRange, SourceFile, SyntaxNode
from .o_tree import EMPTY_NODE, OTree, UnknownSyntax

logger = logging.getLogger(__name__)

# Kinds rendered by the walker itself unless the visitor defines a `structural` method.
STRUCTURAL_KINDS = frozenset({"program", "arguments", "formal_parameters"})

# Named leaf kinds that are dispatched like anonymous tokens
TOKEN_KINDS = frozenset({"this", "super", "true", "false", "null", "undefined", "number"})

# Node kind -> visitor method
DISPATCH: dict[str, str] = {
    "import_statement": "import_statement",
    "string": "string_literal",
    "function_declaration": "function_declaration",
    "identifier": "identifier",
    "property_identifier": "identifier",
    "type_identifier": "identifier",
    "statement_block": "block",
    "required_parameter": "parameter_declaration",
    "optional_parameter": "parameter_declaration",
    "return_statement": "return_statement",
    "binary_expression": "binary_expression",
    "assignment_expression": "binary_expression",
    "augmented_assignment_expression": "binary_expression",
    "unary_expression": "unary_expression",
    "parenthesized_expression": "parenthesized_expression",
    "if_statement": "if_statement",
    "member_expression": "property_access_expression",
    "call_expression": "call_expression",
    "expression_statement": "expression_statement",
    "object": "object_literal_expression",
    "new_expression": "new_expression",
    "pair": "property_assignment",
    "lexical_declaration": "variable_statement",
    "variable_declaration": "variable_statement",
    "variable_declarator": "variable_declaration",
    "array": "array_literal_expression",
    "shorthand_property_identifier": "shorthand_property_assignment",
}


class AstContext:
    """Per-translation state handed to every visitor method.

    Owns the diagnostics list, the sets of offsets already scanned for
    comments and the positions of the comments rendered so far. A context
    serves exactly one traversal and is discarded afterwards.
    """

    def __init__(self, source_file: SourceFile, visitor: AstVisitor):
        self.source_file = source_file
        self.visitor = visitor
        self.diagnostics: list[Diagnostic] = []
        self._scanned_leading: set[int] = set()
        self._scanned_trailing: set[int] = set()
        self._rendered_comments: set[int] = set()

    def children(self, node: SyntaxNode) -> list[OTree]:
        """Translate every child of a node, tokens included."""
        return [self.convert(child) for child in node.children]

    def convert(self, node: SyntaxNode | None) -> OTree:
        if node is None:
            return EMPTY_NODE
        return self._recurse(node)

    def convert_all(self, nodes: Iterable[SyntaxNode]) -> list[OTree]:
        return [self._recurse(node) for node in nodes]

    def convert_with(self, node: SyntaxNode, transform: Callable[[SyntaxNode, AstContext], OTree]) -> OTree:
        """Render a node with a custom transform, keeping the comments around it."""
        leading = self._leading_comments(node)
        trailing = self._trailing_comments(node)

        transformed = transform(node, self)

        if not leading and not trailing:
            return transformed

        return OTree(
            [
                *(self._render_comment(c) for c in leading),
                transformed,
                *(self._render_comment(c) for c in trailing),
            ]
        )

    def closing_comments(self, node: SyntaxNode) -> list[OTree]:
        """Render the comments between the last child of a node and its end.

        These are the comments before a closing ``}`` or ``]``, or at the end
        of the file. Visitors that do not translate the closing token call
        this to keep them.
        """
        if not node.children:
            return []
        last = node.children[-1]
        if not last.is_named:
            pos, same_line = last.full_start, last.after_token
        elif node is self.source_file.root:
            pos, same_line = last.end, False
        else:
            return []

        comments = self._scan_leading(pos, same_line)
        return [self._render_comment(replace(c, closing=True)) for c in comments]

    def text_of(self, node: SyntaxNode) -> str:
        return self.source_file.text_of(node)

    def text_at(self, pos: int, end: int) -> str:
        return self.source_file.text_at(pos, end)

    def report(self, node: SyntaxNode, message: str, severity: Severity = Severity.ERROR) -> None:
        self.diagnostics.append(make_diagnostic(self.source_file, node.start, node.end, message, severity))

    def report_untranslated_comments(self, root: SyntaxNode) -> None:
        """Warn about comments inside ``root`` that no visitor rendered."""
        whole_file = root is self.source_file.root
        for start, end in self.source_file.comments:
            if start in self._rendered_comments:
                continue
            if not whole_file and not root.start <= start < root.end:
                continue
            message = f"comment dropped: '{_abbreviate(self.text_at(start, end))}'"
            self.diagnostics.append(make_diagnostic(self.source_file, start, end, message, Severity.WARNING))

    def _render_comment(self, comment: CommentRange) -> OTree:
        self._rendered_comments.add(comment.pos)
        return self.visitor.comment_range(comment, self)

    def _leading_comments(self, node: SyntaxNode) -> list[CommentRange]:
        return self._scan_leading(node.full_start, node.after_token)

    def _scan_leading(self, pos: int, same_line: bool) -> list[CommentRange]:
        # Nested nodes often share a full start; only the first one visited gets the comments
        if pos in self._scanned_leading:
            return []
        self._scanned_leading.add(pos)
        # Tokens such as "," or "{" have no trailing scan, so the same-line comments after them lead the next node
        if same_line and pos not in self._scanned_trailing:
            self._scanned_trailing.add(pos)
            return self.source_file.leading_comments(pos, same_line=True)
        return self.source_file.leading_comments(pos)

    def _trailing_comments(self, node: SyntaxNode) -> list[CommentRange]:
        if node.end in self._scanned_trailing:
            return []
        self._scanned_trailing.add(node.end)
        return self.source_file.trailing_comments(node.end)

    def _recurse(self, node: SyntaxNode) -> OTree:
        return self.convert_with(node, lambda n, context: context._transform(n))

    def _transform(self, node: SyntaxNode) -> OTree:
        if node.is_missing:
            self.report(node, f"missing '{node.kind}' inserted by the parser", Severity.WARNING)

        if node.kind in STRUCTURAL_KINDS:
            structural = getattr(self.visitor, "structural", None)
            if structural is not None:
                return structural(node, self)
            return self._structural(node)

        if not node.is_named or node.kind in TOKEN_KINDS:
            method = getattr(self.visitor, "token", None)
        else:
            method_name = DISPATCH.get(node.kind)
            method = getattr(self.visitor, method_name, None) if method_name else None

        if method is not None:
            return method(node, self)
        return self._unsupported(node)

    def _structural(self, node: SyntaxNode) -> OTree:
        if node.kind == "program":
            return OTree([], [*self.convert_all(node.named_children), *self.closing_comments(node)], separator="\n")
        return OTree(["(", OTree([], self.convert_all(node.named_children), separator=", "), ")"])

    def _unsupported(self, node: SyntaxNode) -> OTree:
        if node.kind == "ERROR":
            self.report(node, f"syntax error: could not parse '{_abbreviate(self.text_of(node))}'")
        else:
            logger.debug("Unsupported node kind %s at offset %d", node.kind, node.start)
            self.report(node, f"unsupported language feature: {node.kind}")

        return UnknownSyntax(
            [f"<{node.kind} {self.text_of(node)}>"],
            self.children(node),
            newline=bool(node.children),
            indent=2,
            separator="\n",
        )


class AstVisitor(Protocol):
    """One rendering method per recognized syntax kind.

    A target language is selected by selecting a visitor. Concrete visitors
    usually extend DefaultVisitor and override the methods where their
    target differs. A visitor may also define
    ``structural(node, context)`` to render the STRUCTURAL_KINDS itself.
    """

    language: str

    def comment_range(self, comment: CommentRange, context: AstContext) -> OTree: ...
    def import_statement(self, node: SyntaxNode, context: AstContext) -> OTree: ...
    def string_literal(self, node: SyntaxNode, context: AstContext) -> OTree: ...
    def function_declaration(self, node: SyntaxNode, context: AstContext) -> OTree: ...
    def identifier(self, node: SyntaxNode, context: AstContext) -> OTree: ...
    def block(self, node: SyntaxNode, context: AstContext) -> OTree: ...
    def parameter_declaration(self, node: SyntaxNode, context: AstContext) -> OTree: ...
    def return_statement(self, node: SyntaxNode, context: AstContext) -> OTree: ...
    def binary_expression(self, node: SyntaxNode, context: AstContext) -> OTree: ...
    def unary_expression(self, node: SyntaxNode, context: AstContext) -> OTree: ...
    def parenthesized_expression(self, node: SyntaxNode, context: AstContext) -> OTree: ...
    def if_statement(self, node: SyntaxNode, context: AstContext) -> OTree: ...
    def property_access_expression(self, node: SyntaxNode, context: AstContext) -> OTree: ...
    def call_expression(self, node: SyntaxNode, context: AstContext) -> OTree: ...
    def expression_statement(self, node: SyntaxNode, context: AstContext) -> OTree: ...
    def token(self, node: SyntaxNode, context: AstContext) -> OTree: ...
    def object_literal_expression(self, node: SyntaxNode, context: AstContext) -> OTree: ...
    def new_expression(self, node: SyntaxNode, context: AstContext) -> OTree: ...
    def property_assignment(self, node: SyntaxNode, context: AstContext) -> OTree: ...
    def variable_statement(self, node: SyntaxNode, context: AstContext) -> OTree: ...
    def variable_declaration(self, node: SyntaxNode, context: AstContext) -> OTree: ...
    def array_literal_expression(self, node: SyntaxNode, context: AstContext) -> OTree: ...
    def shorthand_property_assignment(self, node: SyntaxNode, context: AstContext) -> OTree: ...


class VisualizeAstVisitor:
    """Renders every node as a bracketed placeholder showing its kind and text.

    Used to inspect the shape of the syntax tree, never for real translation.
    """

    language = "visualize"

    def comment_range(self, comment: CommentRange, context: AstContext) -> OTree:
        return OTree(["(Comment ", context.text_at(comment.pos, comment.end)], suffix=")")

    def structural(self, node, context):
        return visualize(node, context)

    def import_statement(self, node, context):
        return visualize(node, context)

    def string_literal(self, node, context):
        return visualize(node, context)

    def function_declaration(self, node, context):
        return visualize(node, context)

    def identifier(self, node, context):
        return visualize(node, context)

    def block(self, node, context):
        return visualize(node, context)

    def parameter_declaration(self, node, context):
        return visualize(node, context)

    def return_statement(self, node, context):
        return visualize(node, context)

    def binary_expression(self, node, context):
        return visualize(node, context)

    def unary_expression(self, node, context):
        return visualize(node, context)

    def parenthesized_expression(self, node, context):
        return visualize(node, context)

    def if_statement(self, node, context):
        return visualize(node, context)

    def property_access_expression(self, node, context):
        return visualize(node, context)

    def call_expression(self, node, context):
        return visualize(node, context)

    def expression_statement(self, node, context):
        return visualize(node, context)

    def token(self, node, context):
        return visualize(node, context)

    def object_literal_expression(self, node, context):
        return visualize(node, context)

    def new_expression(self, node, context):
        return visualize(node, context)

    def property_assignment(self, node, context):
        return visualize(node, context)

    def variable_statement(self, node, context):
        return visualize(node, context)

    def variable_declaration(self, node, context):
        return visualize(node, context)

    def array_literal_expression(self, node, context):
        return visualize(node, context)

    def shorthand_property_assignment(self, node, context):
        return visualize(node, context)


class DefaultVisitor:
    """A basic visitor that applies to most curly-brace languages.

    Target visitors extend it and override the methods where their syntax
    differs.
    """

    language = ""

    # Indentation of block contents
    indent = 4

    def comment_range(self, comment: CommentRange, context: AstContext) -> OTree:
        text = context.text_at(comment.pos, comment.end)
        if comment.closing:
            return OTree([text])
        if comment.trailing:
            return OTree([" ", text])
        return OTree([text, "\n" if comment.has_trailing_newline else " "])

    def import_statement(self, node: SyntaxNode, context: AstContext) -> OTree:
        return not_implemented(node, context)

    def string_literal(self, node: SyntaxNode, context: AstContext) -> OTree:
        return OTree([json.dumps(string_value(context.text_of(node)), ensure_ascii=False)])

    def function_declaration(self, node: SyntaxNode, context: AstContext) -> OTree:
        return not_implemented(node, context)

    def identifier(self, node: SyntaxNode, context: AstContext) -> OTree:
        return OTree([context.text_of(node)])

    def block(self, node: SyntaxNode, context: AstContext) -> OTree:
        return OTree(
            ["{"],
            [*context.convert_all(node.named_children), *context.closing_comments(node)],
            newline=True,
            indent=self.indent,
            separator="\n",
            suffix="\n}",
        )

    def parameter_declaration(self, node: SyntaxNode, context: AstContext) -> OTree:
        return not_implemented(node, context)

    def return_statement(self, node: SyntaxNode, context: AstContext) -> OTree:
        expression = node.first_named()
        if expression is None:
            return OTree(["return"])
        return OTree(["return ", context.convert(expression)])

    def binary_expression(self, node: SyntaxNode, context: AstContext) -> OTree:
        return OTree(
            [
                context.convert(node.child_by_field("left")),
                " ",
                context.convert(operator_of(node)),
                " ",
                context.convert(node.child_by_field("right")),
            ]
        )

    def unary_expression(self, node: SyntaxNode, context: AstContext) -> OTree:
        operator = node.child_by_field("operator")
        # Keyword operators (typeof, void, delete) need a space before their argument
        spacing = " " if operator is not None and context.text_of(operator).isalpha() else ""
        return OTree([context.convert(operator), spacing, context.convert(node.child_by_field("argument"))])

    def parenthesized_expression(self, node: SyntaxNode, context: AstContext) -> OTree:
        return OTree(["(", context.convert(node.first_named()), ")"])

    def if_statement(self, node: SyntaxNode, context: AstContext) -> OTree:
        return not_implemented(node, context)

    def property_access_expression(self, node: SyntaxNode, context: AstContext) -> OTree:
        return OTree(
            [
                context.convert(node.child_by_field("object")),
                ".",
                context.convert(node.child_by_field("property")),
            ]
        )

    def call_expression(self, node: SyntaxNode, context: AstContext) -> OTree:
        return OTree(
            [
                context.convert(node.child_by_field("function")),
                "(",
                OTree([], context.convert_all(call_arguments(node)), separator=", "),
                ")",
            ]
        )

    def expression_statement(self, node: SyntaxNode, context: AstContext) -> OTree:
        return context.convert(node.first_named())

    def token(self, node: SyntaxNode, context: AstContext) -> OTree:
        return OTree([context.text_of(node)])

    def object_literal_expression(self, node: SyntaxNode, context: AstContext) -> OTree:
        return not_implemented(node, context)

    def new_expression(self, node: SyntaxNode, context: AstContext) -> OTree:
        return OTree(
            [
                "new ",
                context.convert(node.child_by_field("constructor")),
                "(",
                OTree([], context.convert_all(call_arguments(node)), separator=", "),
                ")",
            ]
        )

    def property_assignment(self, node: SyntaxNode, context: AstContext) -> OTree:
        return not_implemented(node, context)

    def variable_statement(self, node: SyntaxNode, context: AstContext) -> OTree:
        return OTree([], context.convert_all(n for n in node.named_children if n.kind == "variable_declarator"), separator="\n")

    def variable_declaration(self, node: SyntaxNode, context: AstContext) -> OTree:
        return not_implemented(node, context)

    def array_literal_expression(self, node: SyntaxNode, context: AstContext) -> OTree:
        return OTree(["["], context.convert_all(node.named_children), separator=", ", suffix="]")

    def shorthand_property_assignment(self, node: SyntaxNode, context: AstContext) -> OTree:
        return not_implemented(node, context)


def visualize(node: SyntaxNode, context: AstContext) -> OTree:
    """Placeholder showing a node's kind and verbatim text, with its children nested beneath."""
    children = context.children(node) + context.closing_comments(node)
    return UnknownSyntax(
        [f"([{node.kind} {context.text_of(node)}]"],
        children,
        newline=bool(children),
        indent=2,
        separator="\n",
        suffix=")",
    )


def not_implemented(node: SyntaxNode, context: AstContext) -> OTree:
    """Fallback for visitor methods with no translation: keep the source visible and warn."""
    context.report(node, f"no translation for {node.kind}", Severity.WARNING)
    return visualize(node, context)


def operator_of(node: SyntaxNode) -> SyntaxNode | None:
    """Return the operator token of a binary or assignment expression."""
    operator = node.child_by_field("operator")
    if operator is not None:
        return operator
    return next((child for child in node.children if not child.is_named), None)


def call_arguments(node: SyntaxNode) -> list[SyntaxNode]:
    """Return the argument expressions of a call or new expression."""
    arguments = node.child_by_field("arguments")
    if arguments is None or arguments.kind != "arguments":
        return []
    return arguments.named_children


def string_value(literal: str) -> str:
    """Return the value of a quoted string literal, escape sequences decoded."""
    return _decode_escapes(literal[1:-1])


def _decode_escapes(body: str) -> str:
    result: list[str] = []
    i = 0
    while i < len(body):
        ch = body[i]
        if ch == "\\" and i + 1 < len(body):
            nxt = body[i + 1]
            width = _HEX_ESCAPES.get(nxt, 0)
            digits = body[i + 2 : i + 2 + width]
            if width and len(digits) == width and all(c in string.hexdigits for c in digits):
                result.append(chr(int(digits, 16)))
                i += 2 + width
                continue
            result.append(_SIMPLE_ESCAPES.get(nxt, nxt))
            i += 2
            continue
        result.append(ch)
        i += 1
    return "".join(result)


_SIMPLE_ESCAPES = {"n": "\n", "t": "\t", "r": "\r", "b": "\b", "f": "\f", "v": "\v", "0": "\0"}
_HEX_ESCAPES = {"x": 2, "u": 4}


@dataclass
class TranslateResult:
    """Output tree and the diagnostics produced while building it."""

    tree: OTree
    diagnostics: list[Diagnostic] = field(default_factory=list)


def visit_tree(source_file: SourceFile, root: SyntaxNode, visitor: AstVisitor) -> TranslateResult:
    """Translate a syntax tree into an output tree using the given visitor."""
    context = AstContext(source_file, visitor)
    tree = context.convert(root)
    context.report_untranslated_comments(root)
    return TranslateResult(tree=tree, diagnostics=context.diagnostics)


def make_diagnostic(
    source_file: SourceFile,
    start: int,
    end: int,
    message: str,
    severity: Severity = Severity.ERROR,
) -> Diagnostic:
    line, column = source_file.line_and_column(start)
    return Diagnostic(
        severity=severity,
        message=message,
        source_name=source_file.name,
        start=start,
        end=end,
        line=line,
        column=column,
        source_line=source_file.line_at(start),
    )


def _abbreviate(text: str, limit: int = 40) -> str:
    text = " ".join(text.split())
    return text if len(text) <= limit else text[: limit - 3] + "..."

