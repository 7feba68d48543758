"""cityreg CLI -- the main entry point for the city registry."""

import logging

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from cityreg import __version__

console = Console()

SHARE_BAR_WIDTH = 20


def _setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.WARNING),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _registry(ctx: click.Context):
    from cityreg.registry.store import build_registry

    if "registry" not in ctx.obj:
        ctx.obj["registry"] = build_registry(ctx.obj["config"])
    return ctx.obj["registry"]


@click.group()
@click.version_option(version=__version__)
@click.option("--config", "config_path", default=None, help="Path to a YAML config file")
@click.option("--verbose", "-v", is_flag=True, help="Log at INFO level and above")
@click.pass_context
def main(ctx: click.Context, config_path: str | None, verbose: bool):
    """cityreg -- a shared city registry on a get/set key-value substrate.

    Cities are stored one per key, enumerated through a shared index, and
    scored for satisfaction when they are created.
    """
    from cityreg.config import load_config

    ctx.ensure_object(dict)
    try:
        config = load_config(config_path)
    except (OSError, ValueError) as e:
        raise click.ClickException(f"Invalid configuration: {e}")

    _setup_logging("INFO" if verbose else config.log_level)
    ctx.obj["config"] = config


# ── List ─────────────────────────────────────────────────────────────


@main.command(name="list")
@click.option("--page", "-p", "page_number", default=1, type=int, help="Page number (1-based)")
@click.option("--page-size", "-n", default=None, type=click.IntRange(min=1), help="Cities per page")
@click.option("--owner", default=None, help="Only show cities owned by this address")
@click.pass_context
def list_cities(ctx: click.Context, page_number: int, page_size: int | None, owner: str | None):
    """List cities, newest first."""
    from cityreg.registry.projection import owned_by, paginate, population_shares

    reg = _registry(ctx)
    if not reg.is_available():
        console.print("[red]Substrate is not available.[/]")
        ctx.exit(1)

    cities = _guarded(reg.list_all)
    if owner:
        cities = owned_by(cities, owner)

    if not cities:
        console.print("[yellow]Registry is empty.[/]")
        return

    result = paginate(cities, page_number, page_size or ctx.obj["config"].page_size)
    if not result.items:
        console.print(f"[yellow]Page {page_number} is out of range (1-{result.total_pages}).[/]")
        return

    table = Table(title=f"Cities ({result.total_count} registered)")
    table.add_column("ID", style="dim")
    table.add_column("Name", style="cyan")
    table.add_column("Population", justify="right")
    table.add_column("Buildings", justify="right")
    table.add_column("Satisfaction", justify="right", style="green")
    table.add_column("Population share", style="blue")
    table.add_column("Owner")

    for city, share in population_shares(result.items, cities):
        table.add_row(
            city.id,
            city.name,
            f"{city.population:,}",
            str(city.building_count),
            f"{city.satisfaction}%",
            _share_bar(share),
            city.short_owner,
        )

    console.print(table)
    if result.total_pages > 1:
        console.print(f"  Page {result.page} of {result.total_pages}")


# ── Show ─────────────────────────────────────────────────────────────


@main.command()
@click.argument("city_id")
@click.option("--as", "viewer", default=None, help="Viewer address, to flag ownership")
@click.pass_context
def show(ctx: click.Context, city_id: str, viewer: str | None):
    """Show the details of one city."""
    from datetime import datetime, timezone

    city = _guarded(_registry(ctx).get, city_id)

    created = datetime.fromtimestamp(city.created_at, tz=timezone.utc).isoformat()
    lines = [
        f"[bold]{city.name}[/]  ({city.id})",
        f"Population:     {city.population:,}",
        f"Buildings:      {city.building_count}",
        f"Satisfaction:   {city.satisfaction}%",
        f"Created:        {created}",
        f"Owner:          {city.owner_address}",
        f"Encrypted data: {city.payload_preview}",
    ]
    if viewer and city.is_owned_by(viewer):
        lines.append("[green]You own this city.[/]")

    console.print(Panel("\n".join(lines), title="City"))


# ── Create ───────────────────────────────────────────────────────────


@main.command()
@click.argument("name")
@click.option("--population", default=1000, type=int, show_default=True, help="Number of residents")
@click.option("--buildings", default=5, type=int, show_default=True, help="Number of buildings")
@click.option("--owner", required=True, help="Owner account address (0x + 40 hex chars)")
@click.pass_context
def create(ctx: click.Context, name: str, population: int, buildings: int, owner: str):
    """Register a new city."""
    from cityreg.registry.models import CityDraft

    console.print(f"\n[bold blue]cityreg[/] -- Encrypting and storing: {name}\n")

    draft = CityDraft(name=name, population=population, building_count=buildings)
    city = _guarded(_registry(ctx).create, draft, owner)

    console.print(f"  [green]Created[/] {city.id} (satisfaction {city.satisfaction}%)")


# ── Stats ────────────────────────────────────────────────────────────


@main.command()
@click.pass_context
def stats(ctx: click.Context):
    """Show aggregate statistics for the registry."""
    from cityreg.registry.projection import aggregate

    reg = _registry(ctx)
    if not reg.is_available():
        console.print("[red]Substrate is not available.[/]")
        ctx.exit(1)

    result = aggregate(_guarded(reg.list_all))

    table = Table(title="Registry Statistics", show_header=False)
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")
    table.add_row("Cities", str(result.count))
    table.add_row("Total population", f"{result.total_population:,}")
    table.add_row("Total buildings", f"{result.total_buildings:,}")
    table.add_row("Average satisfaction", f"{result.average_satisfaction:.1f}%")
    console.print(table)


# ── Score ────────────────────────────────────────────────────────────


@main.command(name="score")
@click.argument("population", type=int)
@click.argument("buildings", type=int)
def score_preview(population: int, buildings: int):
    """Preview the satisfaction score for a prospective city."""
    from cityreg.registry.scorer import score

    console.print(f"Satisfaction: [green]{_guarded(score, population, buildings)}%[/]")


# ── Check ────────────────────────────────────────────────────────────


@main.command()
@click.pass_context
def check(ctx: click.Context):
    """Check whether the substrate is reachable."""
    if _registry(ctx).is_available():
        console.print("  [green]v[/] Substrate is available")
    else:
        console.print("  [red]x[/] Substrate is not available")
        ctx.exit(1)


def _share_bar(share: float, width: int = SHARE_BAR_WIDTH) -> str:
    filled = round(share * width)
    return f"{'#' * filled}{'.' * (width - filled)} {share:.0%}"


def _guarded(fn, *args):
    from cityreg.registry.errors import RegistryError

    try:
        return fn(*args)
    except RegistryError as e:
        console.print(f"[red]Error:[/] {e}")
        raise SystemExit(1)


if __name__ == "__main__":
    main()
