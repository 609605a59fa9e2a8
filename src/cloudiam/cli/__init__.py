from __future__ import annotations

import logging

import typer

from . import commands

app = typer.Typer(help="IAM token CLI", no_args_is_help=True)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING)


app.command("token")(commands.token)
app.command("inspect")(commands.inspect)


__all__ = ["app"]
