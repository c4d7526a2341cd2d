"""
Python target.

Renders TypeScript samples as Python: snake_case identifiers, ``self`` for
``this``, indentation instead of braces, and a trailing object literal in a
call exploded into keyword arguments.
"""

from __future__ import annotations

import keyword

from ..errors import IrrepresentableSyntaxError
from ..frontend import CommentKind, CommentRange, SyntaxNode
from ..o_tree import OTree
from ..utils import camel_to_snake_case, convert_module_reference, starts_with_uppercase, strip_comment_markers
from ..visitor import AstContext, DefaultVisitor, call_arguments, string_value

# Fully-qualified call targets with a Python equivalent
BUILTIN_FUNCTIONS: dict[str, str] = {
    "console.log": "print",
    "console.error": "sys.stderr.write",
    "Math.random": "random.random",
}

SELF_KEYWORD = "self"

# Source tokens with a different spelling in Python
KEYWORDS: dict[str, str] = {
    "this": SELF_KEYWORD,
    "true": "True",
    "false": "False",
    "null": "None",
    "undefined": "None",
    "===": "==",
    "!==": "!=",
    "&&": "and",
    "||": "or",
    "!": "not ",
}


def mangle_identifier(original: str) -> str:
    """Convert a TypeScript identifier to its Python spelling.

    Identifiers starting with an uppercase letter are probably classes and are
    left as-is; everything else is turned into snake_case.
    """
    if original == "this":
        return SELF_KEYWORD
    if starts_with_uppercase(original):
        return original
    return camel_to_snake_case(original)


class PythonVisitor(DefaultVisitor):
    """Translates TypeScript syntax to Python."""

    language = "python"

    def __init__(self, builtin_functions: dict[str, str] | None = None):
        self.builtin_functions = {**BUILTIN_FUNCTIONS, **(builtin_functions or {})}

    def comment_range(self, comment: CommentRange, context: AstContext) -> OTree:
        multiline = comment.kind == CommentKind.BLOCK
        lines = strip_comment_markers(context.text_at(comment.pos, comment.end), multiline).split("\n")

        if comment.closing:
            return OTree(["\n".join(f"# {line}".rstrip() for line in lines)])

        if not comment.has_trailing_newline and multiline:
            raise IrrepresentableSyntaxError("Cannot convert inline style comment to Python!", comment.pos, comment.end)

        if comment.trailing:
            return OTree(["  # ", " ".join(line.strip() for line in lines)])

        return OTree([f"# {line}".rstrip() + "\n" for line in lines])

    def import_statement(self, node: SyntaxNode, context: AstContext) -> OTree:
        source = node.child_by_field("source")
        require_clause = node.first_named("import_require_clause")
        if require_clause is not None:
            source = require_clause.child_by_field("source")
        if source is None:
            return super().import_statement(node, context)

        module_name = convert_module_reference(string_value(context.text_of(source)))

        if require_clause is not None:
            alias = require_clause.first_named("identifier")
            return OTree([f"import {module_name} as {mangle_identifier(context.text_of(alias))}"])

        clause = node.first_named("import_clause")
        if clause is None:
            return OTree([f"import {module_name}"])

        statements: list[OTree] = []
        for part in clause.named_children:
            if part.kind == "identifier":
                statements.append(OTree([f"import {module_name} as {mangle_identifier(context.text_of(part))}"]))
            elif part.kind == "namespace_import":
                alias = part.first_named("identifier")
                statements.append(OTree([f"import {module_name} as {mangle_identifier(context.text_of(alias))}"]))
            elif part.kind == "named_imports":
                names = [self._import_specifier(spec, context) for spec in part.named_children if spec.kind == "import_specifier"]
                statements.append(OTree([f"from {module_name} import {', '.join(names)}"]))

        return OTree([], statements, separator="\n")

    def _import_specifier(self, spec: SyntaxNode, context: AstContext) -> str:
        name = mangle_identifier(context.text_of(spec.child_by_field("name")))
        alias = spec.child_by_field("alias")
        if alias is None:
            return name
        return f"{name} as {mangle_identifier(context.text_of(alias))}"

    def token(self, node: SyntaxNode, context: AstContext) -> OTree:
        text = context.text_of(node)
        if text in KEYWORDS:
            return OTree([KEYWORDS[text]])
        return super().token(node, context)

    def identifier(self, node: SyntaxNode, context: AstContext) -> OTree:
        return OTree([mangle_identifier(context.text_of(node))])

    def function_declaration(self, node: SyntaxNode, context: AstContext) -> OTree:
        parameters = node.child_by_field("parameters")
        return OTree(
            [
                "def ",
                context.convert(node.child_by_field("name")),
                "(",
                OTree([], context.convert_all(parameters.named_children if parameters else []), separator=", "),
                "):",
            ],
            [context.convert(node.child_by_field("body"))],
            suffix="\n\n",
        )

    def block(self, node: SyntaxNode, context: AstContext) -> OTree:
        statements = node.named_children
        children = [*context.convert_all(statements), *context.closing_comments(node)]
        if not statements:
            children.append(OTree(["pass"]))

        return OTree([], children, newline=True, indent=self.indent, separator="\n")

    def call_expression(self, node: SyntaxNode, context: AstContext) -> OTree:
        return OTree(
            [
                context.convert(node.child_by_field("function")),
                "(",
                convert_function_call_arguments(call_arguments(node), context),
                ")",
            ]
        )

    def property_access_expression(self, node: SyntaxNode, context: AstContext) -> OTree:
        full_text = context.text_of(node)
        if full_text in self.builtin_functions:
            return OTree([self.builtin_functions[full_text]])
        return super().property_access_expression(node, context)

    def parameter_declaration(self, node: SyntaxNode, context: AstContext) -> OTree:
        name = context.convert(node.child_by_field("pattern"))
        default = node.child_by_field("value")
        if default is not None:
            return OTree([name, "=", context.convert(default)])
        if node.kind == "optional_parameter":
            return OTree([name, "=None"])
        return OTree([name])

    def if_statement(self, node: SyntaxNode, context: AstContext) -> OTree:
        if_stmt = OTree(
            ["if ", context.convert(unparenthesize(node.child_by_field("condition"))), ": "],
            [context.convert(node.child_by_field("consequence"))],
        )

        alternative = node.child_by_field("alternative")
        if alternative is None:
            return if_stmt

        else_body = alternative.first_named()
        if else_body is not None and else_body.kind == "if_statement":
            # "else if" chains become "elif"
            else_stmt = OTree(["el", context.convert(else_body)])
        else:
            else_stmt = OTree(["else: "], [context.convert(else_body)])

        return OTree([], [if_stmt, else_stmt], separator="\n")

    def object_literal_expression(self, node: SyntaxNode, context: AstContext) -> OTree:
        return OTree(
            ["{"],
            [*context.convert_all(node.named_children), *context.closing_comments(node)],
            newline=True,
            separator=",\n",
            indent=self.indent,
            suffix="\n}",
        )

    def property_assignment(self, node: SyntaxNode, context: AstContext) -> OTree:
        key = node.child_by_field("key")
        if key is not None and key.kind == "computed_property_name":
            return OTree([context.convert(key.first_named()), ": ", context.convert(node.child_by_field("value"))])
        return OTree(['"', property_name(node.child_by_field("key"), context), '": ', context.convert(node.child_by_field("value"))])

    def shorthand_property_assignment(self, node: SyntaxNode, context: AstContext) -> OTree:
        return OTree(['"', context.text_of(node), '": ', mangle_identifier(context.text_of(node))])

    def new_expression(self, node: SyntaxNode, context: AstContext) -> OTree:
        return OTree(
            [
                context.convert(node.child_by_field("constructor")),
                "(",
                convert_function_call_arguments(call_arguments(node), context),
                ")",
            ]
        )

    def variable_declaration(self, node: SyntaxNode, context: AstContext) -> OTree:
        value = node.child_by_field("value")
        return OTree(
            [
                mangle_identifier(context.text_of(node.child_by_field("name"))),
                " = ",
                context.convert(value) if value is not None else "None",
            ]
        )


def unparenthesize(node: SyntaxNode | None) -> SyntaxNode | None:
    """Return the expression inside a parenthesized expression."""
    if node is not None and node.kind == "parenthesized_expression":
        return node.first_named()
    return node


def property_name(key: SyntaxNode | None, context: AstContext) -> str:
    """Return the bare name of an object literal key."""
    if key is None:
        return ""
    text = context.text_of(key)
    if key.kind == "string":
        return string_value(text)
    return text


def convert_function_call_arguments(args: list[SyntaxNode], context: AstContext) -> OTree:
    """
    Convert call arguments.

    If the last argument is an object literal whose members are all
    ``key: value`` pairs or shorthands with keys that are valid Python
    parameter names, it is exploded into keyword arguments. Only the last
    argument is exploded, and only one level deep: object literals nested in
    its values stay dictionaries.
    """
    if not args:
        return OTree([])

    last = args[-1]
    if not is_keyword_argument_literal(last, context):
        return OTree([], context.convert_all(args), separator=", ")

    converted = context.convert_all(args[:-1])
    if last.named_children:
        converted.append(context.convert_with(last, _convert_keyword_arguments))
    return OTree([], converted, separator=", ")


def is_keyword_argument_literal(node: SyntaxNode, context: AstContext) -> bool:
    if node.kind != "object":
        return False
    for prop in node.named_children:
        if prop.kind == "shorthand_property_identifier":
            continue
        if prop.kind != "pair":
            return False
        key = prop.child_by_field("key")
        if key is None or key.kind not in ("property_identifier", "string"):
            return False
        name = mangle_identifier(property_name(key, context))
        if not name.isidentifier() or keyword.iskeyword(name):
            return False
    return True


def _convert_keyword_arguments(node: SyntaxNode, context: AstContext) -> OTree:
    keywords = [context.convert_with(prop, _convert_keyword_argument) for prop in node.named_children]
    # A comment before the closing brace must end its line before the closing parenthesis
    keywords.extend(OTree([comment, "\n"]) for comment in context.closing_comments(node))
    return OTree([], keywords, separator=", ")


def _convert_keyword_argument(prop: SyntaxNode, context: AstContext) -> OTree:
    if prop.kind == "pair":
        name = mangle_identifier(property_name(prop.child_by_field("key"), context))
        return OTree([name, "=", context.convert(prop.child_by_field("value"))])
    name = mangle_identifier(context.text_of(prop))
    return OTree([name, "=", name])
