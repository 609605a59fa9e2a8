"""Token commands: print or inspect the current IAM access token."""

from __future__ import annotations

from datetime import datetime, timezone

import typer
from rich.table import Table

from .common import build_manager, console, handle_cli_errors, mask_token

ApiKeyOption = typer.Option(
    None, "--api-key", help="IAM API key (defaults to CLOUDIAM_API_KEY)", show_default=False
)
TokenUrlOption = typer.Option(
    None, "--token-url", help="Token endpoint URL (defaults to CLOUDIAM_TOKEN_URL)"
)


def _format_timestamp(value: float) -> str:
    if not value:
        return "-"
    stamp = datetime.fromtimestamp(value, tz=timezone.utc)
    return stamp.strftime("%Y-%m-%d %H:%M:%S UTC")


@handle_cli_errors
def token(
    api_key: str | None = ApiKeyOption,
    token_url: str | None = TokenUrlOption,
    header: bool = typer.Option(
        False, "--header", help="Print as an Authorization header instead of the bare token"
    ),
) -> None:
    """Print a valid access token."""

    manager = build_manager(api_key=api_key, token_url=token_url)
    try:
        access_token = manager.get_token()
    finally:
        manager.close()
    if header:
        typer.echo(f"Authorization: Bearer {access_token}")
    else:
        typer.echo(access_token)


@handle_cli_errors
def inspect(
    api_key: str | None = ApiKeyOption,
    token_url: str | None = TokenUrlOption,
) -> None:
    """Acquire a token and show its lifetime details."""

    manager = build_manager(api_key=api_key, token_url=token_url)
    try:
        access_token = manager.get_token()
    finally:
        manager.close()

    info = manager.token_info
    settings = manager.settings
    table = Table(title="IAM token")
    table.add_column("Field")
    table.add_column("Value")
    table.add_row("access_token", mask_token(access_token))
    if not info.access_token:
        table.add_row("source", "static token (never refreshed)")
        console.print(table)
        return
    table.add_row("token_type", info.token_type or "-")
    table.add_row("expires_in", str(info.expires_in))
    table.add_row("expiration", _format_timestamp(info.expiration))
    table.add_row("refresh_at", _format_timestamp(info.refresh_at(settings.refresh_buffer)))
    table.add_row(
        "refresh_token",
        "present" if info.refresh_token else "absent",
    )
    table.add_row(
        "refresh_token_expires_at",
        _format_timestamp(info.refresh_token_expires_at(settings.refresh_token_lifetime)),
    )
    console.print(table)
