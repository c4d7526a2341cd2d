"""
Tests for the typescript_to_code command.
"""

from __future__ import annotations

import json

import pytest
from click.testing import CliRunner

from typescript_to_code import __version__
from typescript_to_code.typescript_to_code import typescript_to_code

MARKDOWN = """# Sample

```ts
callSomeFunction(1);
```

```ts
class Foo {}
```
"""


@pytest.fixture
def runner():
    return CliRunner()


class TestCli:
    def test_python_from_stdin(self, runner):
        result = runner.invoke(typescript_to_code, ["--python"], input="callSomeFunction(1, 2, 3);")
        assert result.exit_code == 0
        assert result.stdout == "call_some_function(1, 2, 3)\n"

    def test_python_from_file(self, runner, tmp_path):
        path = tmp_path / "sample.ts"
        path.write_text("this.doIt();")
        result = runner.invoke(typescript_to_code, ["-p", str(path)])
        assert result.exit_code == 0
        assert result.stdout == "self.do_it()\n"

    def test_visualize_by_default(self, runner):
        result = runner.invoke(typescript_to_code, [], input="foo(1);")
        assert result.exit_code == 0
        assert "([call_expression foo(1)]" in result.stdout

    def test_error_diagnostics_exit_status(self, runner):
        result = runner.invoke(typescript_to_code, ["-p"], input="class Foo {}\n")
        assert result.exit_code == 1
        assert "stdin.ts:1:1 - error: unsupported language feature: class_declaration" in result.stderr

    def test_irrepresentable_syntax(self, runner):
        result = runner.invoke(typescript_to_code, ["-p"], input="/* inline */ foo();")
        assert result.exit_code == 1
        assert "Cannot convert inline style comment to Python!" in result.stderr

    def test_markdown(self, runner):
        result = runner.invoke(typescript_to_code, ["-p", "-m"], input=MARKDOWN)
        assert result.exit_code == 1
        assert "```\ncall_some_function(1)\n```" in result.stdout
        assert "stdin.md-snippet2.ts:1:1 - error" in result.stderr

    def test_output_file(self, runner, tmp_path):
        output = tmp_path / "out.py"
        result = runner.invoke(typescript_to_code, ["-p", "-o", str(output)], input="fooBar(1);")
        assert result.exit_code == 0
        assert result.stdout == ""
        assert output.read_text() == "foo_bar(1)\n"

    def test_config_file(self, runner, tmp_path):
        config = tmp_path / "config.json"
        config.write_text(json.dumps({"target": "python", "builtin_functions": {"console.warn": "warnings.warn"}}))
        result = runner.invoke(typescript_to_code, ["-c", str(config)], input="console.warn('x');")
        assert result.exit_code == 0
        assert result.stdout == 'warnings.warn("x")\n'

    def test_unknown_target_in_config(self, runner, tmp_path):
        config = tmp_path / "config.json"
        config.write_text(json.dumps({"target": "cobol"}))
        result = runner.invoke(typescript_to_code, ["-c", str(config)], input="foo();")
        assert result.exit_code == 1
        assert "Unsupported target 'cobol'" in result.stderr

    def test_format(self, runner):
        pytest.importorskip("black")
        result = runner.invoke(typescript_to_code, ["-p", "--format"], input="x = { a: 1 };")
        assert result.exit_code == 0
        assert result.stdout == 'x = {"a": 1}\n'

    def test_version(self, runner):
        result = runner.invoke(typescript_to_code, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.stdout


if __name__ == "__main__":
    pytest.main([__file__])
