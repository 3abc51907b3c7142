"""CLI interface using typer + rich."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

import typer
import yaml
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel

from resume_delivery.config import load_config
from resume_delivery.exceptions import RenderError
from resume_delivery.export.renderer import DocumentRenderer, page_options_from_config
from resume_delivery.models.page import PageSize
from resume_delivery.models.profile import ProfileData
from resume_delivery.pipeline.orchestrator import build_file_name
from resume_delivery.templates.compositor import compose
from resume_delivery.templates.html import AVAILABLE_THEMES, render_html, save_html

app = typer.Typer(
    name="resume-delivery",
    help="Render resumes to PDF and serve them for a short download window.",
    no_args_is_help=True,
)
console = Console()


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=verbose)],
        force=True,
    )


def _load_profile(path: Path) -> ProfileData:
    if not path.exists():
        console.print(f"[red]Profile file not found: {path}[/red]")
        raise typer.Exit(1)
    raw = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    # accept a saved request body as well as a bare profile
    if "profileData" in raw:
        raw = raw["profileData"]
    try:
        return ProfileData(**raw)
    except ValidationError as exc:
        console.print(f"[red]Invalid profile: {exc}[/red]")
        raise typer.Exit(1)


@app.command()
def serve(
    host: str = typer.Option(None, "--host", help="Bind address (default from config)"),
    port: int = typer.Option(None, "--port", "-p", help="Port (default from config)"),
    config_path: Path = typer.Option(None, "--config", "-c", help="config.yaml path"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """Start the HTTP API."""
    import uvicorn

    from resume_delivery.api.app import create_app

    _setup_logging(verbose)
    config = load_config(config_path)
    host = host or config.server.host
    port = port or config.server.port
    console.print(
        Panel(
            f"Engine: {config.renderer.engine} (max {config.renderer.max_sessions} sessions)\n"
            f"Artifact TTL: {config.store.ttl_seconds}s\n"
            f"Storage: {config.store.resolved_base_dir or 'memory'}\n"
            f"Health check: http://{host}:{port}/api/health",
            title="resume-delivery",
        )
    )
    uvicorn.run(create_app(config), host=host, port=port, log_config=None)


@app.command()
def render(
    profile: Path = typer.Argument(help="Profile file (YAML or JSON)"),
    output: Path = typer.Option(None, "--output", "-o", help="Output PDF path"),
    page_size: PageSize = typer.Option(None, "--page-size", help="Page size (default from config)"),
    theme: str = typer.Option(None, "--theme", "-t", help="CSS theme"),
    config_path: Path = typer.Option(None, "--config", "-c", help="config.yaml path"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """Render a profile straight to a PDF file."""
    _setup_logging(verbose)
    config = load_config(config_path)
    data = _load_profile(profile)

    missing = data.missing_required_fields()
    if missing:
        console.print(f"[yellow]Missing fields rendered as placeholders: {', '.join(missing)}[/yellow]")

    renderer = DocumentRenderer.from_config(config.renderer)
    if theme:
        renderer.theme = theme
    options = page_options_from_config(config.renderer)
    if page_size is not None:
        options = options.model_copy(update={"page_size": page_size})

    with console.status("Rendering PDF..."):
        try:
            pdf = asyncio.run(renderer.render(compose(data), options))
        except RenderError as exc:
            console.print(f"[red]Rendering failed: {exc}[/red]")
            raise typer.Exit(1)

    output = output or Path("./output") / build_file_name(data)
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_bytes(pdf)
    console.print(f"[green]PDF saved: {output} ({len(pdf):,} bytes)[/green]")


@app.command()
def preview(
    profile: Path = typer.Argument(help="Profile file (YAML or JSON)"),
    output: Path = typer.Option(None, "--output", "-o", help="Output HTML path"),
    theme: str = typer.Option("professional", "--theme", "-t", help="CSS theme"),
) -> None:
    """Write the HTML the renderer would print, without starting an engine."""
    data = _load_profile(profile)
    output = output or (Path("./output") / build_file_name(data)).with_suffix(".html")
    save_html(render_html(compose(data), theme), output)
    console.print(f"[green]HTML saved: {output}[/green]")


@app.command()
def themes() -> None:
    """List available CSS themes."""
    for name in AVAILABLE_THEMES:
        console.print(f"  [bold]{name}[/bold]")


if __name__ == "__main__":
    app()
