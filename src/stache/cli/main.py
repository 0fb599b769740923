"""Stache CLI Main Entry Point

Renders a mustache template against a YAML or JSON context.

Usage:
    stache page.mustache data.yaml             # render to stdout
    stache page.mustache data.json -o out.html # render to file
    cat data.yaml | stache page.mustache -     # context from stdin
    stache page.mustache data.yaml -t partials # partials from a directory
    stache --version                           # show version
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

import typer

from stache._version import __version__
from stache.cli.utils import load_context, load_project_config, setup_logging
from stache.exceptions import ConfigError, ParseError, TemplateLoadError
from stache.library import Library
from stache.template import Template

log = logging.getLogger(__name__)

typer_app = typer.Typer()


def fail(message: str) -> None:
    typer.secho(f"Error: {message}", err=True, fg=typer.colors.RED)
    raise typer.Exit(code=1)


@typer_app.command()
def cli(
    template: Optional[Path] = typer.Argument(None, help="Template file to render."),
    context: Optional[str] = typer.Argument(
        None, help="YAML or JSON context file, '-' for stdin."
    ),
    templates: Optional[Path] = typer.Option(
        None,
        "-t",
        "--templates",
        help="Directory of templates available as partials.",
    ),
    extension: Optional[str] = typer.Option(
        None, "-e", "--extension", help="Template file extension (default: mustache)."
    ),
    strict: Optional[bool] = typer.Option(
        None,
        "--strict/--no-strict",
        help="Fail when a template in the partial directory does not parse.",
    ),
    output: Optional[Path] = typer.Option(
        None, "-o", "--output", help="Write the result to a file instead of stdout."
    ),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Show info logs."),
    version: bool = typer.Option(False, "--version", help="Show version and exit."),
) -> None:
    """Render a mustache template.

    Options not given on the command line are taken from stache.yaml in the
    current directory or its parents.
    """
    if version:
        typer.echo(f"stache {__version__}")
        raise typer.Exit()

    setup_logging(verbose)

    if template is None:
        fail("Missing template file.")

    try:
        config = load_project_config()
    except ConfigError as exc:
        fail(str(exc))

    templates = templates or config.templates
    extension = extension or config.extension
    strict = config.strict if strict is None else strict

    try:
        if templates is not None:
            library = Library.load(templates, extension=extension, strict=strict)
        else:
            library = Library()
        main = Template.from_file(template, content_types=library.content_types)
    except TemplateLoadError as exc:
        fail(str(exc))
    except ParseError as exc:
        fail(f"{template}: {exc}")
    except UnicodeDecodeError as exc:
        fail(f"{template}: {exc}")
    except OSError as exc:
        fail(str(exc))

    try:
        value = load_context(context)
    except ConfigError as exc:
        fail(str(exc))

    log.info("Rendering %s", template)
    result = main.render(value, library=library)

    if output is not None:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(result, encoding="utf-8")
        log.info("Wrote %s", output)
    else:
        typer.echo(result, nl=False)


def app(argv: Optional[List[str]] = None) -> None:
    """Entry point for the CLI."""
    typer_app(args=argv)


if __name__ == "__main__":
    app()
