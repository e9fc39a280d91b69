"""
Command line interface for the Repo Access Relay.
"""

import os
import sys

import typer
import uvicorn
from rich import print
from rich.console import Console
from rich.table import Table

from . import __version__
from .config import check_settings, get_settings
from .utils.exceptions import ConfigurationException

app = typer.Typer(
    name="access-relay",
    help="Repo Access Relay - emails access requests and grants GitHub collaborator access",
    add_completion=False,
)

console = Console()


def _mask(value: str) -> str:
    if not value:
        return "[red]unset[/red]"
    return "*" * 8


@app.command()
def serve(
    host: str = typer.Option(None, help="Host to bind to"),
    port: int = typer.Option(None, help="Port to bind to"),
    reload: bool = typer.Option(False, help="Enable auto-reload"),
    debug: bool = typer.Option(False, help="Enable debug mode"),
) -> None:
    """Start the access relay server."""
    settings = get_settings()

    # Override settings with CLI arguments
    host = host or settings.host
    port = port or settings.port
    reload = reload or settings.reload
    debug = debug or settings.debug

    # create_app() re-reads settings from the environment
    os.environ["DEBUG"] = str(debug).lower()
    os.environ["RELOAD"] = str(reload).lower()
    get_settings.cache_clear()

    print(f"🚀 Starting Repo Access Relay on http://{host}:{port}")
    if debug:
        print(f"📚 API Documentation: http://{host}:{port}/docs")

    uvicorn.run(
        "access_relay.main:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
        log_level="debug" if debug else "info",
    )


@app.command()
def config() -> None:
    """Show current configuration."""
    settings = get_settings()

    table = Table(title="Repo Access Relay Configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")

    # Server settings
    table.add_row("Host", settings.host)
    table.add_row("Port", str(settings.port))
    table.add_row("Debug", str(settings.debug))
    table.add_row("Backend URL", settings.backend_url)
    table.add_row("CORS Origins", ", ".join(settings.cors_origins))
    table.add_row("Rate Limit", f"{settings.rate_limit_max} per {settings.rate_limit_window_seconds}s")

    # Mail settings
    table.add_row("SMTP Server", f"{settings.smtp_host}:{settings.smtp_port}")
    table.add_row("Mail User", settings.email_user or "[red]unset[/red]")
    table.add_row("Mail Password", _mask(settings.email_pass))
    table.add_row("Recipient", settings.to_email or "[red]unset[/red]")

    # GitHub settings
    table.add_row("Owner", settings.owner or "[red]unset[/red]")
    table.add_row("GitHub API", settings.github_api_url)
    table.add_row("GitHub Token", _mask(settings.github_token))

    table.add_row("Log Level", settings.log_level)

    console.print(table)


@app.command()
def check() -> None:
    """Check that required configuration is present."""
    settings = get_settings()
    issues = []

    print("🔍 Checking configuration...")

    required = {
        "EMAIL_USER": settings.email_user,
        "EMAIL_PASS": settings.email_pass,
        "TO_EMAIL": settings.to_email,
        "BACKEND_URL": settings.backend_url,
        "OWNER": settings.owner,
        "GITHUB_TOKEN": settings.github_token,
    }
    for name, value in required.items():
        if value:
            print(f"✅ {name} is set")
        else:
            issues.append(f"❌ {name} is not set")

    try:
        check_settings(settings)
    except ConfigurationException as e:
        issues.extend(f"❌ {problem}" for problem in e.details["problems"])

    # Summary
    if issues:
        print("\n🚨 Issues found:")
        for issue in issues:
            print(f"  {issue}")
        sys.exit(1)
    else:
        print("\n✅ All checks passed!")


@app.command()
def version() -> None:
    """Show version information."""
    print(f"Repo Access Relay v{__version__}")


def main() -> None:
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
