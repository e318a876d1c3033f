"""Typer application for the ``smtpmail`` command."""

from __future__ import annotations

import typer

from smtpmail import meta
from smtpmail.cli.commands.send import build, send
from smtpmail.cli.common import console

app = typer.Typer(
    name=meta.__app_name__,
    help=meta.__description__,
    no_args_is_help=True,
    add_completion=False,
)


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"{meta.__app_name__} {meta.__version__}")
        raise typer.Exit()


@app.callback()
def _root(
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show the version and exit.",
    ),
) -> None:
    """Build MIME messages and send them over SMTP."""


app.command("send")(send)
app.command("build")(build)


def main() -> None:
    """Console script entry point."""
    app()


if __name__ == "__main__":  # pragma: no cover
    main()
