"""
Renders remarkup documents with header anchors and a table of contents, and
exposes the UTF-8 text utilities on the command line.
"""

from __future__ import annotations

import logging
from pathlib import Path

import click

from .config import ConfigError, RemarkupConfig, build_config
from .exceptions import RemarkupError
from .filesystem import get_max_file_size, read_document, resolve_document_path
from .renderer import RemarkupEngine
from .text import console_width, hard_wrap, hard_wrap_html, shorten
from .utf8 import utf8ize

__all__ = ["cli"]


def _resolve_document(filepath: str) -> Path:
    base_dir = Path.cwd().resolve()
    try:
        return resolve_document_path(filepath, base_dir)
    except ValueError as error:
        raise click.BadParameter(str(error)) from error


def _load_config(search_path: Path, **overrides: object) -> RemarkupConfig:
    try:
        return build_config(search_path, **overrides)
    except ConfigError as error:
        raise click.BadParameter(str(error)) from error


def _read_text(filepath: Path, config: RemarkupConfig) -> str:
    try:
        max_file_size = get_max_file_size(default=config.max_file_size)
        raw = read_document(filepath, max_file_size)
    except (OSError, ValueError) as error:
        raise click.ClickException(str(error)) from error
    return utf8ize(raw).decode("utf-8", "surrogateescape")


@click.group()
@click.version_option(package_name="remarkup-toc")
@click.option("-v", "--verbose", is_flag=True, help="Log debug messages to stderr")
def cli(verbose: bool = False):
    """Render remarkup headers and measure, shorten or wrap UTF-8 text."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")


@cli.command()
@click.option("--text", "text_mode", is_flag=True, help="Render plain text instead of HTML")
@click.option("--no-toc", is_flag=True, help="Do not generate anchors or a table of contents")
@click.option("--toc-only", is_flag=True, help="Print only the table of contents")
@click.argument("filepath", type=click.Path(exists=True, dir_okay=False))
def render(filepath: str, text_mode: bool = False, no_toc: bool = False, toc_only: bool = False):
    """
    Render a remarkup document.

    Args:
        filepath: Path to the document to render.
        text_mode: Render plain text instead of HTML.
        no_toc: Disable anchors and the table of contents.
        toc_only: Print the table of contents without the document body.

    Raises:
        click.BadParameter: If the path or configuration is invalid.
        click.ClickException: If the file cannot be read or exceeds the size limit.

    Examples:
        remarkup-toc render guide.remarkup --toc-only
    """
    path = _resolve_document(filepath)
    config = _load_config(
        path.parent,
        text_mode=True if text_mode else None,
        generate_toc=False if no_toc else None,
    )
    content = _read_text(path, config)

    result = RemarkupEngine(config).render(content)

    if toc_only:
        if result.toc is not None:
            click.echo(result.toc)
        return

    if result.toc is not None:
        click.echo(result.toc)
        click.echo()
    click.echo(result.output)


@cli.command()
@click.argument("text")
def width(text: str):
    """Print the console display width of TEXT."""
    try:
        click.echo(console_width(text))
    except RemarkupError as error:
        raise click.ClickException(str(error)) from error


@cli.command(name="shorten")
@click.option("-l", "--length", type=click.IntRange(min=0), required=True, help="Maximum length")
@click.option("--terminal", help="Text appended when TEXT is cut")
@click.argument("text")
def shorten_command(text: str, length: int, terminal: str | None = None):
    """Shorten TEXT to at most LENGTH characters at a word boundary."""
    config = _load_config(Path.cwd())
    try:
        click.echo(shorten(text, length, config.terminal if terminal is None else terminal))
    except RemarkupError as error:
        raise click.ClickException(str(error)) from error


@cli.command()
@click.option("-w", "--width", "wrap_width", type=click.IntRange(min=1), help="Line width")
@click.option("--html", "is_html", is_flag=True, help="Treat the input as HTML")
@click.argument("filepath", type=click.Path(exists=True, dir_okay=False))
def wrap(filepath: str, wrap_width: int | None = None, is_html: bool = False):
    """Hard-wrap the contents of FILEPATH."""
    path = _resolve_document(filepath)
    config = _load_config(path.parent, wrap_width=wrap_width)
    content = _read_text(path, config)

    wrapper = hard_wrap_html if is_html else hard_wrap
    for line in wrapper(content, config.wrap_width):
        click.echo(line)


if __name__ == "__main__":
    cli()
