import json
import logging
import sys
from pathlib import Path

import click

from . import __version__
from .config import TranslatorConfig
from .diagnostics import format_diagnostics, has_errors
from .errors import TranslationError
from .formatters import BlackFormatter
from .languages import build_visitor
from .sources import FileSource, LiteralSource, Source
from .translate import render_tree, translate_markdown, translate_typescript
from .writer import AtomicWriter


def read_source(path: str | None, markdown: bool) -> Source:
    """Source for a path, or for standard input when no path is given."""
    if path is not None:
        return FileSource(path)
    return LiteralSource(sys.stdin.read(), "stdin.md" if markdown else "stdin.ts")


@click.command()
@click.version_option(__version__, prog_name="typescript_to_code")
@click.option("--python", "-p", "python", is_flag=True, default=False, help="Translate to Python (default: visualize the syntax tree)")
@click.option("--markdown", "-m", is_flag=True, default=False, help="Translate the code blocks of a Markdown document")
@click.option("--output", "-o", default=None, type=click.Path(resolve_path=True), help="Write the result to a file instead of stdout")
@click.option("--config", "-c", default=None, type=click.Path(exists=True, resolve_path=True))
@click.option("--format", "format_output", is_flag=True, default=False, help="Format Python output with black")
@click.option("--verbose", is_flag=True, default=False)
@click.argument("path", required=False, default=None, type=click.Path(exists=True, resolve_path=True))
def typescript_to_code(python, markdown, output, config, format_output, verbose, path):
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING, format="%(levelname)s %(name)s: %(message)s")

    if config is not None:
        with open(config) as f:
            config = TranslatorConfig.from_dict(json.load(f))
    else:
        config = TranslatorConfig()

    # Command line flags override the config file
    if python:
        config.target = "python"
    if markdown:
        config.markdown = True
    if format_output:
        config.formatter.enabled = True

    try:
        visitor = build_visitor(config.target, config)
        source = read_source(path, config.markdown)
        if config.markdown:
            result = translate_markdown(source, visitor, config)
        else:
            result = translate_typescript(source, visitor)
    except TranslationError as e:
        raise click.ClickException(str(e)) from e

    out = render_tree(result.tree)
    is_python = config.target == "python" and not config.markdown
    if config.formatter.enabled and is_python:
        out = BlackFormatter().format(out, config.formatter)

    if output is not None:
        try:
            # Unsupported syntax is rendered as a placeholder, so only clean output is validated
            AtomicWriter().write(Path(output), out, "python" if is_python else "", validate=not result.diagnostics)
        except TranslationError as e:
            raise click.ClickException(str(e)) from e
    else:
        click.echo(out, nl=False)

    if result.diagnostics:
        click.echo(format_diagnostics(result.diagnostics, color=sys.stderr.isatty()), err=True, nl=False)

    if has_errors(result.diagnostics):
        sys.exit(1)


if __name__ == "__main__":
    typescript_to_code()
