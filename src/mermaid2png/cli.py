"""Click CLI: run the service, render files and manage the cache."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from mermaid2png.config.schema import ServiceSettings, load_settings
from mermaid2png.errors.exceptions import InvalidConfigurationError, RenderError

console = Console()
error_console = Console(stderr=True)


def _setup_logging(verbosity: int, default_level: str = "WARNING") -> None:
    """Configure logging based on verbosity level."""
    level = logging.getLevelName(default_level.upper())
    if not isinstance(level, int):
        level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG

    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=error_console, show_time=False, show_path=False)],
    )


def _settings(**overrides: object) -> ServiceSettings:
    try:
        return load_settings(**overrides)
    except InvalidConfigurationError as e:
        error_console.print(f"[red]Configuration error:[/red] {e.message}")
        sys.exit(2)


@click.group()
@click.version_option(package_name="mermaid2png")
def cli() -> None:
    """mermaid2png: Mermaid diagram to PNG conversion service."""


@cli.command()
@click.option("--host", type=str, default=None, help="Interface to bind.")
@click.option("--port", type=int, default=None, help="Port to listen on.")
@click.option("--cache-dir", type=click.Path(), default=None, help="Directory for cached PNGs.")
@click.option("-v", "--verbose", count=True, help="Increase verbosity (-v info, -vv debug).")
def serve(host: str | None, port: int | None, cache_dir: str | None, verbose: int) -> None:
    """Run the HTTP conversion service."""
    import uvicorn

    from mermaid2png.server.app import create_app

    settings = _settings(host=host, port=port, cache_dir=cache_dir)
    _setup_logging(verbose, settings.log_level)

    app = create_app(settings)
    console.print(f"[green]Server is running on {settings.host}:{settings.port}[/green]")
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)


@cli.command()
@click.argument("input_path", type=click.Path(exists=True, dir_okay=False))
@click.option("-o", "--output", type=click.Path(), help="Output PNG path.")
@click.option("--width", type=click.IntRange(100, 10000), default=None, help="Requested width.")
@click.option("--height", type=click.IntRange(100, 10000), default=None, help="Requested height.")
@click.option("--scale", type=float, default=None, help="Override the scale factor.")
@click.option("--no-cache", is_flag=True, default=False, help="Bypass the render cache.")
@click.option("-v", "--verbose", count=True, help="Increase verbosity (-v info, -vv debug).")
def render(
    input_path: str,
    output: str | None,
    width: int | None,
    height: int | None,
    scale: float | None,
    no_cache: bool,
    verbose: int,
) -> None:
    """Render a Mermaid file to PNG."""
    from mermaid2png.core import Mermaid2Png

    _setup_logging(verbose)
    settings = _settings()
    converter = Mermaid2Png(settings, no_cache=no_cache)

    source = Path(input_path)
    out_path = Path(output) if output else source.with_suffix(".png")

    try:
        result = converter.convert(
            source.read_text(encoding="utf-8"), width=width, height=height, scale_factor=scale
        )
    except RenderError as e:
        error_console.print(f"[red]Error:[/red] {e.message}")
        sys.exit(1)

    out_path.write_bytes(result.image)
    source_label = "cache" if result.cached else result.renderer
    console.print(f"[green]Written to {out_path}[/green] ({result.size_bytes:,} bytes, {source_label})")


@cli.command()
@click.argument("input_path", type=click.Path(exists=True, dir_okay=False))
@click.option("--width", type=int, default=None, help="Requested width.")
@click.option("--height", type=int, default=None, help="Requested height.")
@click.option("--scale", type=float, default=None, help="Requested scale factor.")
def plan(input_path: str, width: int | None, height: int | None, scale: float | None) -> None:
    """Show the dimensions a diagram would be rendered at."""
    from mermaid2png.planning.dimensions import DimensionPlanner

    settings = _settings()
    planner = DimensionPlanner(settings.planner_limits())
    result = planner.plan(
        Path(input_path).read_text(encoding="utf-8"), width, height, scale
    )

    table = Table(title="Dimension Plan", show_header=True)
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    table.add_row("Diagram type", result.diagram_type.value)
    table.add_row("Width", str(result.width))
    table.add_row("Height", str(result.height))
    table.add_row("Scale factor", f"{result.scale_factor:g}")
    table.add_row("Rule", result.rule or "-")
    console.print(table)


@cli.group()
def cache() -> None:
    """Cache management commands."""


def _cache_manager():
    from mermaid2png.cache.manager import ConversionCache
    from mermaid2png.cache.storage import DirectoryStorage
    from mermaid2png.cache.store import EvictionStore

    settings = _settings()
    store = EvictionStore(
        storage=DirectoryStorage(settings.cache_dir),
        max_entries=settings.cache_max_entries,
        ttl_seconds=settings.cache_ttl_seconds,
    )
    return ConversionCache(store)


@cache.command("stats")
def cache_stats() -> None:
    """Show cache statistics."""
    mgr = _cache_manager()
    mgr.initialize()

    table = Table(title="Cache Statistics", show_header=True)
    table.add_column("Metric", style="cyan")
    table.add_column("Value")

    stats = mgr.stats()
    table.add_row("Directory", str(mgr.store_backend.storage.directory))
    table.add_row("Entries", f"{stats.entries} / {mgr.store_backend.max_entries}")
    table.add_row("Size (MB)", f"{stats.size_mb:.1f}")
    table.add_row("TTL (hours)", f"{mgr.store_backend.ttl_seconds / 3600:g}")
    table.add_row("Evicted at load", str(stats.evictions))

    console.print(table)


@cache.command("clear")
@click.confirmation_option(prompt="Are you sure you want to clear the cache?")
def cache_clear() -> None:
    """Delete all cached PNGs."""
    mgr = _cache_manager()
    deleted = mgr.clear()
    console.print(f"[green]Successfully cleared {deleted} cached files.[/green]")


def main() -> None:
    """Entry point for the CLI."""
    cli()
