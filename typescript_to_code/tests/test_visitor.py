"""
Tests for the tree walker, the default visitor and the visualize visitor.
"""

from __future__ import annotations

from unittest import TestCase

from typescript_to_code import (
    DefaultVisitor,
    LiteralSource,
    PythonVisitor,
    Severity,
    VisualizeAstVisitor,
    render_tree,
    translate_typescript,
    visualize_typescript_ast,
)
from typescript_to_code.frontend import TypeScriptParser
from typescript_to_code.o_tree import OTree
from typescript_to_code.visitor import STRUCTURAL_KINDS, string_value


def translate(source: str, visitor):
    return translate_typescript(LiteralSource(source, "test.ts"), visitor)


class CountingVisitor(PythonVisitor):
    """Python visitor recording every comment it renders."""

    def __init__(self):
        super().__init__()
        self.comments = []

    def comment_range(self, comment, context):
        self.comments.append(context.text_at(comment.pos, comment.end))
        return super().comment_range(comment, context)


class RecordingVisualizer(VisualizeAstVisitor):
    def __init__(self):
        self.comments = []

    def comment_range(self, comment, context):
        self.comments.append(context.text_at(comment.pos, comment.end))
        return super().comment_range(comment, context)


class OpaqueCallVisitor(PythonVisitor):
    """Python visitor that renders calls without looking at their arguments."""

    def call_expression(self, node, context):
        return OTree(["call()"])


class TestCommentAttachment(TestCase):
    def test_leading_comment_rendered_once_for_nested_nodes(self):
        visitor = CountingVisitor()
        translate("// note\nfoo(bar(baz(1)));", visitor)
        self.assertEqual(visitor.comments, ["// note"])

    def test_trailing_comment_rendered_once(self):
        visitor = CountingVisitor()
        translate("foo(bar); // t\nnext();", visitor)
        self.assertEqual(visitor.comments, ["// t"])

    def test_each_comment_attached_to_its_statement(self):
        visitor = CountingVisitor()
        result = translate("// first\na();\n// second\nb();", visitor)
        self.assertEqual(visitor.comments, ["// first", "// second"])
        self.assertEqual(render_tree(result.tree), "# first\na()\n# second\nb()\n")

    def test_fresh_state_per_translation(self):
        visitor = CountingVisitor()
        translate("// note\nfoo();", visitor)
        translate("// note\nfoo();", visitor)
        self.assertEqual(visitor.comments, ["// note", "// note"])

    def test_comment_at_end_of_file(self):
        visitor = CountingVisitor()
        result = translate("foo();\n// closing remark\n", visitor)
        self.assertEqual(visitor.comments, ["// closing remark"])
        self.assertEqual(render_tree(result.tree), "foo()\n# closing remark\n")

    def test_comment_before_closing_brace(self):
        result = translate("if (x) {\n  foo();\n  // todo later\n}\n", PythonVisitor())
        self.assertEqual(render_tree(result.tree), "if x:\n    foo()\n    # todo later\n")
        self.assertEqual(result.diagnostics, [])

    def test_same_line_comment_after_opening_brace(self):
        result = translate("function f() { // body\n  foo();\n}", PythonVisitor())
        self.assertIn("    # body\n    foo()", render_tree(result.tree))

    def test_default_visitor_keeps_comment_before_closing_brace(self):
        result = translate("if (x) {\n  y();\n  // done\n}", DefaultVisitor())
        self.assertIn("// done", render_tree(result.tree))

    def test_every_comment_rendered_once(self):
        source = "// a\nconst x = { // b\n  a: 1, // c\n  /* d */\n};\nfoo(1, // e\n  2);\n// f\n"
        for visitor in (CountingVisitor(), RecordingVisualizer()):
            with self.subTest(visitor=visitor.language):
                result = translate(source, visitor)
                self.assertEqual(visitor.comments, ["// a", "// b", "// c", "/* d */", "// e", "// f"])
                self.assertEqual(result.diagnostics, [])

    def test_comment_no_visitor_renders_is_reported(self):
        result = translate("foo(\n  // note\n  1\n);", OpaqueCallVisitor())
        self.assertEqual(render_tree(result.tree), "call()\n")
        self.assertEqual([d.message for d in result.diagnostics], ["comment dropped: '// note'"])
        self.assertEqual(result.diagnostics[0].severity, Severity.WARNING)
        self.assertEqual(result.diagnostics[0].line, 2)


class TestUnsupportedSyntax(TestCase):
    def test_unsupported_statement_reported(self):
        result = translate("class Foo {}\nfoo();", PythonVisitor())
        errors = [d for d in result.diagnostics if d.severity == Severity.ERROR]
        self.assertTrue(any(d.message == "unsupported language feature: class_declaration" for d in errors))

        first = next(d for d in errors if "class_declaration" in d.message)
        self.assertEqual(first.source_name, "test.ts")
        self.assertEqual((first.line, first.column), (1, 1))

    def test_surrounding_code_still_translated(self):
        output = render_tree(translate("class Foo {}\nfooBar();", PythonVisitor()).tree)
        self.assertIn("<class_declaration class Foo {}>", output)
        self.assertIn("foo_bar()", output)

    def test_unsupported_expression_inside_call(self):
        result = translate("foo(() => 1);", PythonVisitor())
        output = render_tree(result.tree)
        self.assertTrue(output.startswith("foo(<arrow_function () => 1>"))
        self.assertIn("unsupported language feature: arrow_function", [d.message for d in result.diagnostics])

    def test_not_implemented_method_warns(self):
        result = translate("if (x) {\n  y();\n}", DefaultVisitor())
        self.assertEqual(len(result.diagnostics), 1)
        self.assertEqual(result.diagnostics[0].severity, Severity.WARNING)
        self.assertEqual(result.diagnostics[0].message, "no translation for if_statement")
        self.assertIn("[if_statement", render_tree(result.tree))

    def test_supported_code_has_no_diagnostics(self):
        result = translate("foo(1, 'a');\nx = y + 1;", PythonVisitor())
        self.assertEqual(result.diagnostics, [])


class TestDefaultVisitor(TestCase):
    def test_call(self):
        result = translate("someCall(a, 'b');", DefaultVisitor())
        self.assertEqual(render_tree(result.tree), 'someCall(a, "b")\n')

    def test_binary_and_assignment(self):
        result = translate("x = y + 1;", DefaultVisitor())
        self.assertEqual(render_tree(result.tree), "x = y + 1\n")

    def test_new_expression(self):
        result = translate("new Thing(1);", DefaultVisitor())
        self.assertEqual(render_tree(result.tree), "new Thing(1)\n")

    def test_array(self):
        result = translate("f([1, 2]);", DefaultVisitor())
        self.assertEqual(render_tree(result.tree), "f([1, 2])\n")

    def test_keyword_unary_operator(self):
        result = translate("typeof x;", DefaultVisitor())
        self.assertEqual(render_tree(result.tree), "typeof x\n")


class TestVisualize(TestCase):
    def test_kinds_and_text_present(self):
        result = translate("foo(1);", VisualizeAstVisitor())
        output = render_tree(result.tree)
        self.assertIn("([expression_statement foo(1);]", output)
        self.assertIn("([call_expression foo(1)]", output)
        self.assertIn("([identifier foo])", output)
        self.assertIn("([number 1])", output)
        self.assertEqual(result.diagnostics, [])

    def test_children_nested(self):
        output = visualize_typescript_ast(LiteralSource("foo(1);"))
        lines = output.splitlines()
        call_line = next(line for line in lines if "[call_expression" in line)
        identifier_line = next(line for line in lines if "[identifier foo]" in line)
        indent = len(call_line) - len(call_line.lstrip())
        self.assertGreater(len(identifier_line) - len(identifier_line.lstrip()), indent)

    def test_comments_visualized(self):
        output = visualize_typescript_ast(LiteralSource("// hi\nfoo();"))
        self.assertIn("(Comment // hi)", output)

    def test_structural_nodes_visualized(self):
        source = "foo(1, 2); function f(a, b) {}"
        output = visualize_typescript_ast(LiteralSource(source))
        source_file = TypeScriptParser().parse("test.ts", source)
        structural = [node for node in source_file.root.walk() if node.kind in STRUCTURAL_KINDS]
        self.assertEqual({node.kind for node in structural}, set(STRUCTURAL_KINDS))
        for node in structural:
            self.assertIn(f"([{node.kind} {source_file.text_of(node)}]", output)


class TestStringValue(TestCase):
    def test_quotes_removed(self):
        self.assertEqual(string_value("'abc'"), "abc")
        self.assertEqual(string_value('"abc"'), "abc")

    def test_escapes(self):
        self.assertEqual(string_value(r"'a\nb'"), "a\nb")
        self.assertEqual(string_value(r"'it\'s'"), "it's")
        self.assertEqual(string_value(r"'\x41B'"), "AB")

    def test_unknown_escape_keeps_character(self):
        self.assertEqual(string_value(r"'\q'"), "q")
