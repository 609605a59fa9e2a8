from __future__ import annotations

import json
import os
from collections.abc import Callable
from functools import wraps
from typing import ParamSpec, TypeVar

import typer
from rich.console import Console

from ..auth.token_manager import TokenManager
from ..config import IamSettings
from ..errors import AuthError, CloudIamError, ConfigError, HttpError

console = Console()


def _render_http_error(exc: HttpError) -> None:
    console.print(f"[red]Error:[/red] {exc}")
    details = getattr(exc, "details", None)
    if details:
        snippet = details
        if isinstance(details, dict):
            snippet = json.dumps(details, indent=2)
        console.print(str(snippet))


CommandParams = ParamSpec("CommandParams")
CommandReturn = TypeVar("CommandReturn")


def handle_cli_errors(
    func: Callable[CommandParams, CommandReturn],
) -> Callable[CommandParams, CommandReturn]:
    @wraps(func)
    def wrapper(*args: CommandParams.args, **kwargs: CommandParams.kwargs) -> CommandReturn:
        try:
            return func(*args, **kwargs)
        except typer.Exit:
            raise
        except HttpError as exc:
            _render_http_error(exc)
            raise typer.Exit(1) from None
        except ConfigError as exc:
            console.print(f"[red]Error:[/red] Invalid configuration: {exc}")
            raise typer.Exit(1) from None
        except AuthError as exc:
            console.print(f"[red]Error:[/red] Authentication failed: {exc}")
            console.print(
                "Export CLOUDIAM_API_KEY or pass --api-key; set CLOUDIAM_ACCESS_TOKEN to use a fixed token."
            )
            raise typer.Exit(1) from None
        except CloudIamError as exc:
            console.print(f"[red]Error:[/red] {exc}")
            raise typer.Exit(1) from None
        except Exception as exc:
            if os.getenv("CLOUDIAM_DEBUG"):
                raise
            console.print(f"[red]Error:[/red] Unexpected failure: {exc}")
            console.print("Set CLOUDIAM_DEBUG=1 for a stack trace.")
            raise typer.Exit(1) from exc

    return wrapper


def build_manager(api_key: str | None = None, token_url: str | None = None) -> TokenManager:
    """Create a :class:`TokenManager` from the environment with CLI overrides."""

    settings = IamSettings.from_env()
    if token_url:
        settings.token_url = token_url
    if api_key:
        settings.api_key = api_key
    return TokenManager(settings)


def mask_token(token: str, visible: int = 6) -> str:
    if len(token) <= visible * 2:
        return "*" * len(token)
    return f"{token[:visible]}...{token[-visible:]}"


__all__ = ["console", "handle_cli_errors", "build_manager", "mask_token"]
