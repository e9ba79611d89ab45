"""Command line interface for whatsapp-web-tool."""

from __future__ import annotations

import logging
import sys
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as get_version
from pathlib import Path
from typing import Annotated, Any, Optional

import typer
from rich.console import Console

from .config import WhatsappToolConfig, load_config
from .factory import build_client
from .server import serve as run_server

app = typer.Typer(help="WhatsApp Web automation tool server")


def _load(
    config_path: Optional[Path],
    env_file: Optional[Path],
    profile_path: Optional[Path],
    **extra: Any,
) -> WhatsappToolConfig:
    overrides: dict[str, Any] = dict(extra)
    if profile_path is not None:
        overrides.setdefault("browser", {})["profile_path"] = str(profile_path)
    return load_config(config_path, env_file=env_file, **overrides)


ConfigOption = Annotated[
    Optional[Path],
    typer.Option("--config", "-c", help="Path to YAML configuration."),
]
EnvFileOption = Annotated[
    Optional[Path],
    typer.Option("--env-file", help="Path to an .env file with default configuration values."),
]
ProfileOption = Annotated[
    Optional[Path],
    typer.Option("--profile-path", help="Browser user data directory holding the WhatsApp login."),
]


@app.callback()
def main(
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable debug logging"),
    ] = False,
) -> None:
    """Send logs to stderr; stdout belongs to the stdio tool transport."""

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@app.command()
def version() -> None:
    """Print the installed whatsapp-web-tool version."""

    try:
        installed = get_version("whatsapp-web-tool")
    except PackageNotFoundError:  # pragma: no cover - source checkout without install
        installed = "0.0.0"
    typer.echo(installed)


@app.command()
def serve(
    config_path: ConfigOption = None,
    env_file: EnvFileOption = None,
    profile_path: ProfileOption = None,
    transport: Annotated[
        Optional[str],
        typer.Option("--transport", help="MCP transport (stdio, http, sse)."),
    ] = None,
) -> None:
    """Run the MCP tool server."""

    extra: dict[str, Any] = {}
    if transport is not None:
        extra["server"] = {"transport": transport}
    config = _load(config_path, env_file, profile_path, **extra)
    client = build_client(config)
    run_server(client, name=config.server.name, transport=config.server.transport)


@app.command()
def login(
    config_path: ConfigOption = None,
    env_file: EnvFileOption = None,
    profile_path: ProfileOption = None,
) -> None:
    """Open a visible browser so the WhatsApp QR code can be scanned."""

    config = _load(config_path, env_file, profile_path)
    console = Console()
    client = build_client(config)
    try:
        descriptor = client.connect(headless=False)
        console.print(descriptor.status, style="cyan")
        typer.prompt(
            "Scan the QR code if asked, then press Enter once your chats are visible",
            default="",
            show_default=False,
        )
    except Exception as exc:
        console.print(f"Login failed: {exc}", style="red")
        raise typer.Exit(code=1) from exc
    finally:
        client.close()
    console.print(f"Session saved to {config.browser.profile_path}", style="green")


if __name__ == "__main__":
    app()
