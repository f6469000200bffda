"""
Maid cafe CLI.

Command-line interface for running and checking the API server.
"""

import sys
from pathlib import Path

# Add backend to path for imports
sys.path.insert(0, str(Path(__file__).parent))

import typer
from rich.console import Console
from rich.table import Table

app = typer.Typer(
    name="maid-cafe",
    help="Maid cafe backend CLI",
    add_completion=False,
)
console = Console()


# =============================================================================
# Server Commands
# =============================================================================

@app.command()
def serve(
    host: str = typer.Option("0.0.0.0", help="Bind address"),
    port: int = typer.Option(None, help="Port (defaults to REST_API_PORT)"),
    reload: bool = typer.Option(False, "--reload", help="Reload on code changes"),
):
    """Run the REST API with uvicorn."""
    import uvicorn

    from cafe_shared.config.settings import get_settings

    port = port or get_settings().rest_api_port
    console.print(f"[blue]Starting REST API on {host}:{port}[/blue]")
    uvicorn.run("cafe_api.main:app", host=host, port=port, reload=reload)


# =============================================================================
# Database Commands
# =============================================================================

@app.command()
def init_db():
    """Create every table that does not exist yet."""
    from cafe_api.models import Base
    from cafe_shared.config.logging import mask_secret
    from cafe_shared.config.settings import get_settings
    from cafe_shared.infrastructure.db import engine

    url = get_settings().database_url
    console.print(f"[blue]Creating tables on: {mask_secret(url)}[/blue]")

    try:
        Base.metadata.create_all(bind=engine)
    except Exception as e:
        console.print(f"[red]✗ Table creation failed: {e}[/red]")
        raise typer.Exit(1)

    table = Table(title="Tables")
    table.add_column("Name", style="cyan")
    for name in sorted(Base.metadata.tables):
        table.add_row(name)
    console.print(table)
    console.print("[green]✓ Database ready[/green]")


# =============================================================================
# Configuration Commands
# =============================================================================

@app.command()
def check_config():
    """Show effective settings and any production configuration problems."""
    from cafe_shared.config.logging import mask_secret
    from cafe_shared.config.settings import Settings

    settings = Settings()

    table = Table(title="Settings")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("environment", settings.environment)
    table.add_row("debug", str(settings.debug))
    table.add_row("database_url", mask_secret(settings.database_url))
    table.add_row("id_scheme", settings.id_scheme)
    table.add_row("maid_list_default_active", str(settings.maid_list_default_active))
    table.add_row("storage_backend", settings.storage_backend)
    table.add_row("storage_root", settings.storage_root)
    table.add_row("storage_endpoint", settings.storage_endpoint or "-")
    table.add_row("public_base_url", settings.public_base_url or "-")
    table.add_row("admin_api_password", mask_secret(settings.admin_api_password))
    table.add_row("maid_api_password", mask_secret(settings.maid_api_password))
    console.print(table)

    errors = settings.validate_production_secrets()
    if not errors:
        console.print("[green]✓ No configuration problems[/green]")
        return

    problems = Table(title="Configuration problems")
    problems.add_column("Problem", style="red")
    for error in errors:
        problems.add_row(error)
    console.print(problems)
    raise typer.Exit(1)


# =============================================================================
# Health Commands
# =============================================================================

@app.command()
def health(
    url: str = typer.Option("http://localhost:8000", help="Base URL of the REST API"),
):
    """Check the REST API health endpoint."""
    import time

    import httpx

    target = f"{url.rstrip('/')}/api/health"
    table = Table(title="Service Health")
    table.add_column("Service", style="cyan")
    table.add_column("Status", style="green")
    table.add_column("Response Time", style="yellow")

    healthy = False
    try:
        start = time.time()
        response = httpx.get(target, timeout=5.0)
        elapsed = (time.time() - start) * 1000
        healthy = response.status_code == 200
        status = "✓ Healthy" if healthy else f"✗ Status {response.status_code}"
        table.add_row("REST API", status, f"{elapsed:.0f}ms")
    except httpx.HTTPError as e:
        table.add_row("REST API", f"✗ {type(e).__name__}", "-")

    console.print(table)
    if not healthy:
        raise typer.Exit(1)


@app.command()
def version():
    """Show version information."""
    table = Table(title="Maid Cafe Version")
    table.add_column("Component", style="cyan")
    table.add_column("Version", style="green")

    table.add_row("API", "0.1.0")
    table.add_row("Python", sys.version.split()[0])

    console.print(table)


if __name__ == "__main__":
    app()
