"""CLI entrypoint for the IPFS upload relay."""

from typing import Optional

import typer

from ipfs_relay.config import ConfigError, Settings
from ipfs_relay.main import create_app
from ipfs_relay.observability import configure_logging
from ipfs_relay.server import RelayServer, serve_forever
from ipfs_relay.uploader import run_uploader

USAGE = "Unknown argument. Use 'server' or 'cli'"

app = typer.Typer(add_completion=False, help="Relay file uploads to IPFS through Pinata.")


def _load_settings(env_file: str, require_secrets: bool) -> Settings:
    try:
        return Settings.from_env(env_file=env_file, require_secrets=require_secrets)
    except ConfigError as exc:
        typer.echo(f"Config invalid: {exc}", err=True)
        raise typer.Exit(code=1) from exc


@app.command()
def main(
    mode: Optional[str] = typer.Argument(
        None,
        help="'server' runs only the relay, 'cli' only the uploader; omit to run both",
    ),
    env_file: str = typer.Option(".env", "--env-file", help="Dotenv file with the Pinata credentials"),
) -> None:
    """Run the relay, the interactive uploader, or both."""
    if mode == "server":
        settings = _load_settings(env_file, require_secrets=True)
        configure_logging(settings)
        typer.echo(f"Server started at http://{settings.relay_host}:{settings.relay_port}")
        serve_forever(create_app(settings), settings.relay_host, settings.relay_port)
        return

    if mode == "cli":
        settings = _load_settings(env_file, require_secrets=False)
        configure_logging(settings)
        run_uploader(settings.relay_url, timeout_s=settings.upload_timeout_s)
        return

    if mode is not None:
        typer.echo(USAGE)
        return

    settings = _load_settings(env_file, require_secrets=True)
    configure_logging(settings)
    server = RelayServer(
        create_app(settings),
        settings.relay_host,
        settings.relay_port,
        startup_timeout_s=settings.startup_timeout_s,
    )
    try:
        server.start()
    except (RuntimeError, TimeoutError) as exc:
        typer.echo(f"Relay failed to start: {exc}", err=True)
        raise typer.Exit(code=1) from exc
    typer.echo(f"Server started at http://{settings.relay_host}:{settings.relay_port}")
    try:
        run_uploader(settings.relay_url, timeout_s=settings.upload_timeout_s)
    finally:
        server.stop()
