"""``py-category-sync`` command line.

Thin controller layer over the SDK context: every command builds the context
with ``init_app``, awaits one operation and closes it. Human output uses rich;
``--json`` prints structured output for scripting. Error classification is
centralised in ``cli()``: exceptions pass through ``map_exception`` (exit codes:
user/domain errors 2, unexpected 1).
"""
from __future__ import annotations

import json
import sys
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

import typer
from rich.console import Console
from rich.table import Table

from py_category_sync import __version__
from py_category_sync.application.use_cases_async.bootstrap import BootstrapState
from py_category_sync.domain.catalog import all_definitions, definitions_by_kind
from py_category_sync.domain.categories import CategoryKind, UserCategory
from py_category_sync.infrastructure.config.settings import get_settings
from py_category_sync.infrastructure.logging.config import configure_logging
from py_category_sync.infrastructure.utils.asyncio_utils import run_sync
from py_category_sync.sdk.bootstrap import AppContext, init_app
from py_category_sync.sdk.errors import UnexpectedError, map_exception
from py_category_sync.sdk.use_cases import delete_category, get_category, update_category

from .formatters import dataclass_to_dict, humanize_since

T = TypeVar("T")

app = typer.Typer(
    name="py-category-sync",
    help="Bootstrap and reconcile default spending/income categories against the remote store.",
    add_completion=False,
    pretty_exceptions_enable=False,
)
console = Console()


def _build_context() -> AppContext:
    return init_app(get_settings())


def _run(fn: Callable[[AppContext], Awaitable[T]]) -> T:
    """Build a context, await ``fn(ctx)`` and always release the context."""

    async def _driver() -> T:
        ctx = _build_context()
        try:
            return await fn(ctx)
        finally:
            await ctx.aclose()

    return run_sync(_driver())


def _print_json(payload: Any) -> None:
    print(json.dumps(dataclass_to_dict(payload), ensure_ascii=False))


def _parse_kind(kind: str | None) -> CategoryKind | None:
    return CategoryKind.parse(kind) if kind is not None else None


# === Commands ===
@app.command("version")
def version_cmd() -> None:
    """Print package version."""
    print(__version__)


@app.command("catalog")
def catalog_cmd(
    kind: str | None = typer.Option(None, "--kind", help="income|expense (receita|despesa)."),
    json_output: bool = typer.Option(False, "--json", help="Output JSON."),
) -> None:
    """Show the built-in default categories."""
    wanted = _parse_kind(kind)
    definitions = all_definitions() if wanted is None else definitions_by_kind(wanted)
    if json_output:
        _print_json(list(definitions))
        return
    table = Table(title="Default categories")
    table.add_column("Kind", style="cyan")
    table.add_column("#", justify="right")
    table.add_column("Name")
    table.add_column("Icon")
    table.add_column("Color")
    table.add_column("Subcategories")
    for d in definitions:
        table.add_row(
            d.kind.value,
            str(d.order),
            d.name,
            d.icon,
            d.color,
            ", ".join(s.name for s in d.subcategories),
        )
    console.print(table)


@app.command("list")
def list_cmd(
    kind: str | None = typer.Option(None, "--kind", help="income|expense (receita|despesa)."),
    json_output: bool = typer.Option(False, "--json", help="Output JSON."),
) -> None:
    """List the user's categories (falls back to the catalog when the store is unreachable)."""
    wanted = _parse_kind(kind)
    result = _run(lambda ctx: ctx.list_categories(wanted))
    if json_output:
        _print_json(result)
        return
    if result.fallback_used:
        console.print(f"[yellow]Store unavailable ({result.error}); showing default categories[/yellow]")
    table = Table(title=f"Categories ({len(result.categories)})")
    table.add_column("Id", style="dim")
    table.add_column("Kind", style="cyan")
    table.add_column("#", justify="right")
    table.add_column("Name")
    table.add_column("Active")
    table.add_column("Default")
    for c in result.categories:
        table.add_row(c.id, c.kind.value, str(c.order), c.name, "yes" if c.active else "no", "yes" if c.is_default else "no")
    console.print(table)


def _print_category(category: UserCategory) -> None:
    console.print(f"{category.id} ({category.kind.value}) #{category.order} {category.name}")
    console.print(f"icon={category.icon} color={category.color} active={'yes' if category.active else 'no'}")
    if category.subcategories:
        console.print("subcategories: " + ", ".join(s.name for s in category.subcategories))


@app.command("show")
def show_cmd(
    category_id: str = typer.Argument(..., help="Category id."),
    json_output: bool = typer.Option(False, "--json", help="Output JSON."),
) -> None:
    """Show one of the user's categories."""
    category = _run(lambda ctx: get_category(ctx, category_id))
    if json_output:
        _print_json(category)
        return
    _print_category(category)


@app.command("update")
def update_cmd(
    category_id: str = typer.Argument(..., help="Category id."),
    name: str | None = typer.Option(None, "--name"),
    icon: str | None = typer.Option(None, "--icon"),
    color: str | None = typer.Option(None, "--color", help="#RRGGBB"),
    order: int | None = typer.Option(None, "--order"),
    active: bool | None = typer.Option(None, "--active/--inactive"),
    json_output: bool = typer.Option(False, "--json", help="Output JSON."),
) -> None:
    """Rename, recolor, reorder or (de)activate a category."""
    fields = {"name": name, "icon": icon, "color": color, "order": order, "active": active}
    changes = {k: v for k, v in fields.items() if v is not None}
    category = _run(lambda ctx: update_category(ctx, category_id, changes))
    if json_output:
        _print_json(category)
        return
    _print_category(category)


@app.command("delete")
def delete_cmd(category_id: str = typer.Argument(..., help="Category id.")) -> None:
    """Delete a user-created category (defaults are refused by the store)."""
    _run(lambda ctx: delete_category(ctx, category_id))
    console.print(f"Category {category_id} deleted")


@app.command("status")
def status_cmd(json_output: bool = typer.Option(False, "--json", help="Output JSON.")) -> None:
    """Show the persisted bootstrap flag and the last sync time."""

    async def _logic(ctx: AppContext) -> dict[str, Any]:
        sync_status = await ctx.sync.status()
        return {
            "bootstrap_completed": await ctx.state_store.is_bootstrap_completed(),
            "last_sync_date": sync_status.last_sync_date,
            "last_sync": humanize_since(sync_status.last_sync_date, ctx.clock.now()),
            "sync_due": sync_status.sync_due,
            "sync_ttl_hours": ctx.settings.sync_ttl_hours,
        }

    payload = _run(_logic)
    if json_output:
        _print_json(payload)
        return
    console.print(f"Bootstrap completed: {'yes' if payload['bootstrap_completed'] else 'no'}")
    console.print(f"Last sync: {payload['last_sync']}")
    console.print(f"Sync due: {'yes' if payload['sync_due'] else 'no'} (TTL {payload['sync_ttl_hours']}h)")


@app.command("bootstrap")
def bootstrap_cmd(
    force: bool = typer.Option(False, "--force", help="Clear the completion flag first."),
    json_output: bool = typer.Option(False, "--json", help="Output JSON."),
) -> None:
    """Ensure the user has categories, creating the defaults once if the store is empty."""

    async def _logic(ctx: AppContext) -> tuple[bool, Any, Any]:
        if force:
            ok = await ctx.bootstrap.force_initialization()
        else:
            ok = await ctx.bootstrap.check_and_initialize()
        return ok, ctx.bootstrap.status(), ctx.bootstrap.last_report

    ok, status, report = _run(_logic)
    if json_output:
        _print_json({"ok": ok, "status": status, "report": report})
    elif ok:
        console.print(f"[green]Categories ready: {status.total_categories}[/green]")
        if report is not None:
            console.print(
                f"created={report.created_count} existing={len(report.already_existed)} failed={report.failed_count}"
            )
    elif status.state == BootstrapState.CHECKING.value:
        console.print(f"[red]Bootstrap check failed: {status.last_error}[/red]")
    else:
        console.print(f"[yellow]Bootstrap not completed (state={status.state})[/yellow]")
    if not ok:
        raise typer.Exit(code=1)


@app.command("sync")
def sync_cmd(
    force: bool = typer.Option(False, "--force", help="Ignore the sync TTL."),
    json_output: bool = typer.Option(False, "--json", help="Output JSON."),
) -> None:
    """Create default categories missing from the user's set (additive only)."""

    async def _logic(ctx: AppContext) -> tuple[bool, Any, Any]:
        ok = await ctx.sync.sync_categories(force=force)
        return ok, ctx.sync.last_report, ctx.sync.last_sync_date

    ok, report, last_sync = _run(_logic)
    if json_output:
        _print_json({"ok": ok, "report": report, "last_sync_date": last_sync})
    elif not ok:
        console.print("[red]Sync failed; see logs[/red]")
    elif report is None:
        console.print("Sync not needed yet")
    else:
        console.print(
            f"[green]Sync completed[/green]: created={report.created_count} "
            f"existing={len(report.already_existed)} failed={report.failed_count}"
        )
    if not ok:
        raise typer.Exit(code=1)


@app.command("reset")
def reset_cmd() -> None:
    """Clear the bootstrap completion flag (remote categories are untouched)."""
    _run(lambda ctx: ctx.bootstrap.reset_initialization())
    console.print("Bootstrap flag cleared")


@app.command("clear-sync")
def clear_sync_cmd() -> None:
    """Forget the last sync time so the next sync runs."""
    _run(lambda ctx: ctx.sync.force_clear_sync())
    console.print("Sync timestamp cleared")


def cli(argv: list[str] | None = None) -> int:
    """Run the Typer application with top-level error handling.

    Logging goes to stderr so ``--json`` output stays parseable. Accepts optional
    argv for programmatic testing and returns a process-style exit code.
    """
    try:
        configure_logging(stream=sys.stderr)
        app(args=argv if argv is not None else sys.argv[1:], prog_name="py-category-sync")
        return 0
    except SystemExit as se:
        return int(se.code) if isinstance(se.code, int) else 0
    except Exception as exc:
        mapped = map_exception(exc)
        if isinstance(mapped, UnexpectedError):
            print(f"[ERROR] unexpected: {mapped}", file=sys.stderr)
            return 1
        print(f"[ERROR] {mapped}", file=sys.stderr)
        return 2


def main() -> None:  # pragma: no cover
    sys.exit(cli())


if __name__ == "__main__":  # pragma: no cover
    main()
