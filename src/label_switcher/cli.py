"""CLI entry point for label-switcher."""

import click
import uvicorn
from rich.console import Console
from rich.panel import Panel

from . import __version__
from .config import Config
from .github.app import GitHubApp
from .github.webhook import create_app
from .logs import configure_logging

console = Console()


@click.group()
@click.version_option(__version__, prog_name="label-switcher")
def cli():
    """label-switcher: keep PR labels and [WIP] titles in sync."""
    pass


@cli.command()
@click.option("--host", default=None, help="Interface to bind. Default: HOST or 0.0.0.0")
@click.option("--port", default=None, type=int, help="Port to listen on. Default: PORT or 3000")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default=None,
    help="Log level. Default: LOG_LEVEL or INFO",
)
def serve(host, port, log_level):
    """Run the webhook receiver."""
    config = Config()
    if host:
        config.host = host
    if port:
        config.port = port
    if log_level:
        config.log_level = log_level.upper()

    issues = config.validate()
    if issues:
        console.print("[bold red]Configuration issues found:\n")
        for issue in issues:
            console.print(f"  [red]✗ {issue}")
        raise SystemExit(1)

    configure_logging(config.log_level)
    console.print(
        Panel(
            f"[bold cyan]label-switcher {__version__}[/bold cyan]\n"
            f"App {config.app_id} listening on {config.host}:{config.port}",
            border_style="cyan",
        )
    )

    app = create_app(GitHubApp.from_config(config))
    uvicorn.run(app, host=config.host, port=config.port, log_level=config.log_level.lower())


@cli.command()
def check():
    """Verify configuration and that the app key can sign a JWT."""
    config = Config()
    issues = config.validate()

    if issues:
        console.print("[bold red]Configuration issues found:\n")
        for issue in issues:
            console.print(f"  [red]✗ {issue}")
        console.print("\n[yellow]Set the variables in your environment or in .env.")
        return

    console.print("[bold green]✓ Configuration looks good!")
    console.print(f"  App ID: {config.app_id}")
    console.print(f"  API: {config.api_url}")
    console.print(f"  Listen: {config.host}:{config.port}")

    try:
        GitHubApp.from_config(config).generate_jwt()
        console.print("  [green]✓ Private key can sign app JWTs")
    except (OSError, ValueError) as e:
        console.print(f"  [red]✗ JWT signing failed: {e}")


if __name__ == "__main__":
    cli()
