from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from routelist.domain.models import QuerySpec, SortKey
from routelist.errors import EmptyRegistryError, MalformedRouteError, RegistryLoadError
from routelist.orchestrator.pipeline import run_route_list
from routelist.registry.loader import load_registry
from routelist.render import build_table, render_json


app = typer.Typer(no_args_is_help=True, add_completion=False)

console = Console()
err_console = Console(stderr=True)


@app.callback()
def main_options(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=err_console, show_path=False)],
        )


@app.command("list")
def list_routes(
    target: str = typer.Argument(
        ...,
        envvar="ROUTELIST_APP",
        help="Application as module:attribute, or a .json route dump",
    ),
    method: Optional[str] = typer.Option(None, "--method", help="Filter the routes by method."),
    name: Optional[str] = typer.Option(None, "--name", help="Filter the routes by name."),
    path: Optional[str] = typer.Option(None, "--path", help="Filter the routes by path."),
    reverse: bool = typer.Option(
        False, "--reverse", "-r", help="Reverse the ordering of the routes."
    ),
    sort: SortKey = typer.Option(
        SortKey.URI,
        "--sort",
        case_sensitive=False,
        help="The column (method, uri, name, action, middleware) to sort by.",
    ),
    format: str = typer.Option("table", help="Output format: table|json"),
    app_dir: Path = typer.Option(
        Path("."), "--app-dir", help="Directory added to the import path before loading"
    ),
) -> None:
    fmt = format.lower().strip()
    if fmt not in ("table", "json"):
        raise typer.BadParameter("format must be one of: table, json")

    try:
        spec = QuerySpec(
            method_filter=method,
            name_filter=name,
            path_filter=path,
            sort_key=sort,
            reverse=reverse,
        )
    except ValidationError as exc:
        raise typer.BadParameter(str(exc)) from exc

    try:
        routes = load_registry(target, app_dir=app_dir)
    except RegistryLoadError as exc:
        raise typer.BadParameter(str(exc)) from exc

    try:
        result = run_route_list(routes, spec)
    except EmptyRegistryError as exc:
        err_console.print(f"[bold red]{escape(str(exc))}[/bold red]")
        raise typer.Exit(code=1)
    except MalformedRouteError as exc:
        err_console.print(f"[bold red]Malformed route:[/bold red] {escape(str(exc))}")
        raise typer.Exit(code=1)

    if fmt == "json":
        console.print(render_json(result.records), markup=False, highlight=False, emoji=False, soft_wrap=True)
        return

    console.print(build_table(result.records))
    console.print(f"[bold]Routes:[/bold] {len(result.records)} of {result.total}")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
