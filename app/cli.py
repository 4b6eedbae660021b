from __future__ import annotations

from pathlib import Path
from typing import Any

import typer
from rich.console import Console
from rich.table import Table

from adapters.api.gallery_client import GalleryApiError
from adapters.filesystem.json_utils import load_json, load_json_object
from adapters.filesystem.sidebar_snapshot_repository import SidebarSnapshotRepository
from adapters.html.renderer import HtmlGalleryRenderer
from app.config import AppSettings, load_settings
from app.gallery_wiring import build_gallery_source
from domain.catalog import RenderOptions, load_categories
from domain.models import Case, load_cases
from domain.services.assemble_carousel import (
    CarouselOptions,
    assemble_carousel,
    placeholder_slides,
)
from domain.services.assemble_favorites import assemble_favorites
from domain.services.build_case_card import CaseCardBuilder
from domain.services.build_navigation_tree import build_navigation_tree
from domain.services.compile_case_detail import CaseDetailContext, compile_case_detail
from domain.services.procedure_names import normalize_procedure_name
from domain.services.sidebar_index import SidebarIndex

app = typer.Typer(no_args_is_help=True)
render_app = typer.Typer(no_args_is_help=True)
app.add_typer(render_app, name="render")
console = Console()
err_console = Console(stderr=True)

ConfigOption = typer.Option(None, "--config", help="YAML settings file.")
SidebarOption = typer.Option(None, "--sidebar", help="Sidebar JSON ({\"data\": [...]}).")
OutputOption = typer.Option(None, "--output", "-o", help="Write HTML here instead of stdout.")


@app.command("normalize")
def normalize(
    names: list[str] = typer.Argument(..., help="Raw procedure names."),
    canonical_terminology: bool = typer.Option(
        False, help="Apply the canonical terminology table first."
    ),
) -> None:
    table = Table("Raw", "Display name")
    for name in names:
        normalized = normalize_procedure_name(name, canonical_terminology=canonical_terminology)
        table.add_row(name, normalized or "[red](rejected)[/]")
    console.print(table)


@render_app.command("navigation")
def render_navigation(
    sidebar: Path = typer.Option(..., "--sidebar", help="Sidebar JSON file."),
    page_path: str = typer.Option("", help="Current page path used for filter links."),
    config: Path | None = ConfigOption,
    output: Path | None = OutputOption,
) -> None:
    options = _render_options(config, page_path)
    categories = load_categories(
        _read_json(sidebar), canonical_terminology=options.canonical_terminology
    )
    tree = build_navigation_tree(categories, options)
    _emit(HtmlGalleryRenderer(options).render_navigation(tree), output)


@render_app.command("carousel")
def render_carousel(
    cases: Path = typer.Option(..., "--cases", help="Case list JSON file."),
    sidebar: Path | None = SidebarOption,
    procedure_slug: str | None = typer.Option(None, help="Procedure slug override."),
    standalone: bool = typer.Option(False, help="Render without per-slide actions."),
    nudity: bool = typer.Option(False, help="Force the nudity warning on every slide."),
    config: Path | None = ConfigOption,
    output: Path | None = OutputOption,
) -> None:
    options = _render_options(config)
    slides = assemble_carousel(
        load_cases(_read_json(cases)),
        options,
        carousel=CarouselOptions(
            procedure_slug_override=procedure_slug,
            standalone=standalone,
            force_nudity=nudity,
        ),
        index=_load_index(sidebar, options),
    )
    _emit(HtmlGalleryRenderer(options).render_slides(slides), output)


@render_app.command("placeholders")
def render_placeholders(
    start: int = typer.Option(0, help="Index of the first placeholder."),
    count: int = typer.Option(3, help="Number of placeholders."),
    procedure_slug: str = typer.Option("", help="Procedure slug for the data attribute."),
    config: Path | None = ConfigOption,
    output: Path | None = OutputOption,
) -> None:
    options = _render_options(config)
    placeholders = placeholder_slides(start, count, procedure_slug)
    _emit(HtmlGalleryRenderer(options).render_placeholders(placeholders), output)


@render_app.command("case")
def render_case(
    case: Path = typer.Option(..., "--case", help="Case detail JSON file."),
    sidebar: Path | None = SidebarOption,
    procedure_slug: str | None = typer.Option(None, help="Current procedure slug."),
    procedure_name: str | None = typer.Option(None, help="Display name override."),
    request_path: str = typer.Option("", help="Request path used to pick the procedure."),
    config: Path | None = ConfigOption,
    output: Path | None = OutputOption,
) -> None:
    options = _render_options(config)
    view = compile_case_detail(
        _load_case(_read_json(case)),
        options,
        context=CaseDetailContext(
            procedure_slug=procedure_slug,
            procedure_name=procedure_name,
            request_path=request_path,
        ),
        index=_load_index(sidebar, options),
    )
    rendered = HtmlGalleryRenderer(options).render_case_detail(view)
    err_console.print(f"[bold]SEO title:[/] {rendered.seo.title}")
    err_console.print(f"[bold]SEO description:[/] {rendered.seo.description}")
    _emit(rendered.html, output)


@render_app.command("favorites")
def render_favorites(
    cases: Path = typer.Option(..., "--cases", help="Favorite case list JSON file."),
    sidebar: Path | None = SidebarOption,
    config: Path | None = ConfigOption,
    output: Path | None = OutputOption,
) -> None:
    options = _render_options(config)
    view = assemble_favorites(
        load_cases(_read_json(cases)),
        options,
        index=_load_index(sidebar, options),
        card_renderer=CaseCardBuilder(options),
    )
    _emit(HtmlGalleryRenderer(options).render_favorites(view), output)


@app.command("snapshot-sidebar")
def snapshot_sidebar(
    output: Path | None = typer.Option(None, "--output", "-o", help="Snapshot destination."),
    config: Path | None = ConfigOption,
) -> None:
    settings = _settings(config)
    target = output or settings.gallery.sidebar_snapshot_path
    try:
        source = build_gallery_source(settings)
        payload = source.fetch_sidebar(settings.gallery.api.primary_token)
    except (GalleryApiError, ValueError) as exc:
        console.print(f"[red]Sidebar fetch failed:[/] {exc}")
        raise typer.Exit(code=1) from exc
    SidebarSnapshotRepository().save(payload, target)
    categories = load_categories(payload) or []
    console.print(f"[green]Wrote[/] {target}")
    console.print(f"Categories: {len(categories)}")


def _settings(config: Path | None) -> AppSettings:
    try:
        return load_settings(config)
    except FileNotFoundError as exc:
        console.print(f"[red]{exc}[/]")
        raise typer.Exit(code=1) from exc


def _render_options(config: Path | None, page_path: str = "") -> RenderOptions:
    return _settings(config).gallery.to_render_options(page_path)


def _read_json(path: Path) -> Any:
    if not path.exists():
        console.print(f"[red]File not found:[/] {path}")
        raise typer.Exit(code=1)
    return load_json(path)


def _load_case(payload: Any) -> Case:
    if isinstance(payload, dict) and "data" not in payload:
        return Case.from_dict(payload)
    records = load_cases(payload)
    if not records:
        console.print("[red]No case record found in the input file.[/]")
        raise typer.Exit(code=1)
    return records[0]


def _load_index(sidebar: Path | None, options: RenderOptions) -> SidebarIndex:
    if sidebar is None:
        return SidebarIndex.empty()
    if not sidebar.exists():
        console.print(f"[red]File not found:[/] {sidebar}")
        raise typer.Exit(code=1)
    return SidebarIndex.from_sidebar_data(
        load_json_object(sidebar), canonical_terminology=options.canonical_terminology
    )


def _emit(html: str, output: Path | None) -> None:
    if output is None:
        typer.echo(html)
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(html, encoding="utf-8")
    console.print(f"[green]Wrote[/] {output}")


if __name__ == "__main__":
    app()
