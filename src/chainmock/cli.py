from __future__ import annotations

from typing import List

import typer

from chainmock import __version__
from chainmock.exceptions import MalformedPathError
from chainmock.operators import OPERATOR_METHODS
from chainmock.paths import parse

app = typer.Typer(add_completion=False, help="Inspect chained method paths.")


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(__version__)
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show the chainmock version and exit.",
    ),
) -> None:
    """Inspect chained method paths."""


@app.command()
def check(
    paths: List[str] = typer.Argument(..., help="Dotted method paths to validate."),
) -> None:
    """Validate method paths and show how each segment is read.

    Paths that start with an operator such as ``-@`` go after ``--``.
    """
    failures = 0
    for text in paths:
        try:
            chain = parse(text)
        except MalformedPathError as error:
            typer.echo(str(error), err=True)
            failures += 1
            continue
        typer.echo(text)
        for segment in chain.segments:
            typer.echo(f"  {segment.text}\t{segment.kind.value}\t{segment.method_name}")
    raise typer.Exit(code=1 if failures else 0)


@app.command()
def operators() -> None:
    """List the operator segments a path may contain."""
    for symbol, method_name in OPERATOR_METHODS.items():
        typer.echo(f"{symbol}\t{method_name}")
