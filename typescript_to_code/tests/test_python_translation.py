"""
Tests for the TypeScript to Python translation.

Expected outputs live in test_data/python_translation_tests.json; behavior
that does not fit the source/expected pattern is tested below.
"""

from __future__ import annotations

import ast
import json
from pathlib import Path
from unittest import TestCase

import pytest

from typescript_to_code import (
    IrrepresentableSyntaxError,
    LiteralSource,
    PythonVisitor,
    render_tree,
    translate_typescript,
)
from typescript_to_code.languages.python import mangle_identifier


def ts2python(source: str, visitor: PythonVisitor | None = None) -> str:
    result = translate_typescript(LiteralSource(source, "test.ts"), visitor or PythonVisitor())
    return render_tree(result.tree)


def strip_empty_lines(text: str) -> str:
    """Drop leading and trailing blank lines."""
    lines = text.split("\n")
    while lines and not lines[0].strip():
        lines.pop(0)
    while lines and not lines[-1].strip():
        lines.pop()
    return "\n".join(lines)


def load_test_cases():
    test_data = Path(__file__).parent / "test_data" / "python_translation_tests.json"
    with open(test_data) as f:
        return json.load(f)


@pytest.mark.parametrize("test_case", load_test_cases(), ids=lambda tc: tc["name"])
def test_python_translation(test_case):
    """Translate each sample and compare with the expected Python code."""
    output = ts2python(test_case["source"])
    assert strip_empty_lines(output) == test_case["expected"], test_case["description"]


class TestPythonVisitor(TestCase):
    def test_output_ends_with_newline(self):
        self.assertEqual(ts2python("foo();"), "foo()\n")

    def test_statements_on_separate_lines(self):
        self.assertEqual(strip_empty_lines(ts2python("a();\nb();\nc();")), "a()\nb()\nc()")

    def test_custom_builtin_functions(self):
        visitor = PythonVisitor(builtin_functions={"console.warn": "warnings.warn"})
        self.assertEqual(strip_empty_lines(ts2python("console.warn('careful');", visitor)), 'warnings.warn("careful")')

    def test_default_builtin_functions_kept_with_custom_ones(self):
        visitor = PythonVisitor(builtin_functions={"console.warn": "warnings.warn"})
        self.assertEqual(strip_empty_lines(ts2python("console.log(1);", visitor)), "print(1)")

    def test_this_in_nested_access(self):
        self.assertEqual(strip_empty_lines(ts2python("this.node.addChild(x);")), "self.node.add_child(x)")

    def test_leading_inline_block_comment_is_irrepresentable(self):
        with self.assertRaises(IrrepresentableSyntaxError) as cm:
            ts2python("/* inline */ foo();")
        self.assertIn("inline style comment", str(cm.exception))
        self.assertEqual(cm.exception.start, 0)
        self.assertEqual(cm.exception.end, len("/* inline */"))

    def test_inline_block_comment_after_line_break_is_irrepresentable(self):
        with self.assertRaises(IrrepresentableSyntaxError):
            ts2python("foo();\n/* note */ bar();")

    def test_trailing_block_comment_is_representable(self):
        self.assertEqual(strip_empty_lines(ts2python("foo(); /* note */\nbar();")), "foo()  # note\nbar()")

    def test_block_comment_followed_by_code_is_irrepresentable(self):
        with self.assertRaises(IrrepresentableSyntaxError):
            ts2python("foo(a /* first */, b);")

    def test_comments_on_keyword_arguments_stay_valid_python(self):
        output = ts2python("foo(1, {\n  // the size\n  size: 3,\n  // nothing else\n});")
        self.assertIn("# the size", output)
        self.assertIn("# nothing else", output)
        ast.parse(output)

    def test_python_keyword_key_stays_dict(self):
        output = ts2python("foo({ \"lambda\": 1 });")
        self.assertEqual(strip_empty_lines(output), 'foo({\n    "lambda": 1\n})')

    def test_empty_trailing_object_dropped(self):
        self.assertEqual(strip_empty_lines(ts2python("foo(1, {});")), "foo(1)")

    def test_multiline_block_comment(self):
        source = "/**\n * First line\n * Second line\n */\nfoo();"
        self.assertEqual(strip_empty_lines(ts2python(source)), "# First line\n# Second line\nfoo()")

    def test_comment_emitted_once(self):
        output = ts2python("// only once\nfoo(bar(1));")
        self.assertEqual(output.count("only once"), 1)


class TestMangleIdentifier(TestCase):
    def test_this(self):
        self.assertEqual(mangle_identifier("this"), "self")

    def test_camel_case(self):
        self.assertEqual(mangle_identifier("someObject"), "some_object")

    def test_class_names_unchanged(self):
        self.assertEqual(mangle_identifier("BucketProps"), "BucketProps")

    def test_idempotent(self):
        once = mangle_identifier("parseHTTPResponse")
        self.assertEqual(mangle_identifier(once), once)
