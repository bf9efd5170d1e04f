"""CLI interface for tasklist."""

from __future__ import annotations

import logging
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from tasklist import __version__
from tasklist.config import CONFIG_FILE, TASKLIST_DIR, TasklistConfig
from tasklist.models import DEFAULT_TASK_TYPE, FILTERS, TASK_TYPES, Task, TaskSummary
from tasklist.storage import JsonFileSlot, TaskPersistence
from tasklist.store import StoreChange, TaskStore

console = Console()

SHORT_ID_LENGTH = 8

_log_handler: logging.Handler | None = None


def _setup_logging(verbose: bool) -> None:
    """Send tasklist log records to stderr; user-facing output stays on the console."""
    global _log_handler

    pkg_logger = logging.getLogger("tasklist")
    if _log_handler is not None:
        pkg_logger.removeHandler(_log_handler)

    _log_handler = RichHandler(console=Console(stderr=True), show_time=False, show_path=False)
    pkg_logger.addHandler(_log_handler)
    pkg_logger.setLevel(logging.DEBUG if verbose else logging.INFO)


def _echo_change(change: StoreChange) -> None:
    """Report store changes as they happen."""
    task = change.task
    if task is None:
        return

    label = f"{escape(task.name)} [dim]({_short_id(task)})[/dim]"
    if change.kind == "added":
        console.print(f"[green]Task added:[/green] {label}")
    elif change.kind == "toggled":
        console.print(f"[green]Marked {task.status_label.lower()}:[/green] {label}")
    elif change.kind == "deleted":
        console.print(f"[yellow]Task deleted:[/yellow] {label}")


def _get_store(ctx: click.Context) -> TaskStore:
    """Build the store from config once per invocation."""
    if "store" not in ctx.obj:
        config: TasklistConfig = ctx.obj["config"]
        persistence = TaskPersistence(JsonFileSlot(config.storage.path), key=config.storage.key)
        store = TaskStore(persistence)
        store.subscribe(_echo_change)
        ctx.obj["store"] = store
    return ctx.obj["store"]


def _short_id(task: Task) -> str:
    return task.id[:SHORT_ID_LENGTH]


def _resolve_id(store: TaskStore, ref: str) -> str | None:
    """Resolve a full id or a unique id prefix.

    Returns None and prints a message when a prefix is ambiguous.
    """
    if not ref or store.get_task(ref) is not None:
        return ref

    candidates = [task.id for task in store.tasks if task.id.startswith(ref)]
    if len(candidates) > 1:
        console.print(f"[red]Ambiguous task id:[/red] {escape(ref)} matches {len(candidates)} tasks")
        return None
    return candidates[0] if candidates else ref


def _summary_line(summary: TaskSummary) -> str:
    return (
        f"Total: [cyan]{summary.total}[/cyan]  "
        f"Pending: [yellow]{summary.pending}[/yellow]  "
        f"Completed: [green]{summary.completed}[/green]"
    )


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="tasklist")
@click.option(
    "--data",
    "data_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Task storage file (overrides config)",
)
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging")
@click.pass_context
def main(ctx: click.Context, data_path: Path | None, verbose: bool) -> None:
    """tasklist - a small persistent task list.

    \b
    Examples:
      tasklist add "Buy milk" "2%" --type shopping
      tasklist list --filter pending
      tasklist toggle 3f2a9c1e
    """
    _setup_logging(verbose)

    ctx.ensure_object(dict)
    config = TasklistConfig.load()
    if data_path is not None:
        config.storage.path = str(data_path)
    ctx.obj["config"] = config

    # If no subcommand, show help
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


@main.command()
@click.option("--force", "-f", is_flag=True, help="Overwrite existing config")
@click.pass_context
def init(ctx: click.Context, force: bool) -> None:
    """Write a default configuration to .tasklist/config.json."""
    if CONFIG_FILE.exists() and not force:
        console.print(
            "[yellow]tasklist already initialized.[/yellow] Use --force to reset the config."
        )
        return

    config = TasklistConfig()
    TASKLIST_DIR.mkdir(parents=True, exist_ok=True)
    config.save()

    console.print(
        Panel.fit(
            "[green]Configuration saved![/green]\n\n"
            f"Config: [cyan]{CONFIG_FILE}[/cyan]\n"
            f"Tasks:  [cyan]{config.storage.path}[/cyan]",
            title="tasklist",
        )
    )


@main.command()
@click.argument("name")
@click.argument("description")
@click.option(
    "--type",
    "-t",
    "task_type",
    default=DEFAULT_TASK_TYPE,
    show_default=True,
    help=f"Task category (e.g. {', '.join(TASK_TYPES)})",
)
@click.pass_context
def add(ctx: click.Context, name: str, description: str, task_type: str) -> None:
    """Add a new task.

    Example:

        tasklist add "Buy milk" "2%" --type shopping
    """
    store = _get_store(ctx)

    if store.add_task(name, description, task_type) is None:
        console.print("[red]Task not added:[/red] name and description are required.")


@main.command("list")
@click.option(
    "--filter",
    "-f",
    "task_filter",
    type=click.Choice(FILTERS),
    help="Which tasks to show (default from config)",
)
@click.pass_context
def list_command(ctx: click.Context, task_filter: str | None) -> None:
    """List tasks, pending first."""
    config: TasklistConfig = ctx.obj["config"]
    store = _get_store(ctx)

    active = store.set_filter(task_filter or config.view.default_filter)
    tasks = store.get_tasks()

    if not tasks:
        console.print("[dim]No tasks in this list.[/dim]")
    else:
        table = Table(title=f"Tasks ({active})", show_header=True)
        table.add_column("ID", style="cyan")
        table.add_column("Name", style="white")
        table.add_column("Type", style="magenta")
        table.add_column("Status", style="white")

        for task in tasks:
            status = "[green]✓ Completed[/green]" if task.completed else "[yellow]Pending[/yellow]"
            table.add_row(_short_id(task), escape(task.name), escape(task.type), status)

        console.print(table)

    console.print(_summary_line(store.get_summary()))


@main.command()
@click.argument("task_id")
@click.pass_context
def show(ctx: click.Context, task_id: str) -> None:
    """Show the details of a task."""
    store = _get_store(ctx)
    resolved = _resolve_id(store, task_id)
    if resolved is None:
        return

    task = store.get_task(resolved)
    if task is None:
        console.print(f"[red]Task not found:[/red] {escape(task_id)}")
        return

    status_style = "green" if task.completed else "yellow"
    console.print(
        Panel.fit(
            f"[{status_style}]{task.status_label}[/{status_style}]  "
            f"[magenta]{escape(task.type)}[/magenta]\n\n"
            f"{escape(task.description)}\n\n"
            f"[dim]ID: {task.id}[/dim]\n"
            f"[dim]Created: {task.created_at.isoformat(timespec='seconds')}[/dim]",
            title=escape(task.name),
        )
    )


@main.command()
@click.argument("task_id")
@click.pass_context
def toggle(ctx: click.Context, task_id: str) -> None:
    """Mark a task completed, or pending again if already completed."""
    store = _get_store(ctx)
    resolved = _resolve_id(store, task_id)
    if resolved is None:
        return

    if store.toggle_task_status(resolved) is None:
        console.print(f"[red]Task not found:[/red] {escape(task_id)}")


@main.command()
@click.argument("task_id")
@click.option("--yes", "-y", is_flag=True, help="Skip confirmation")
@click.pass_context
def delete(ctx: click.Context, task_id: str, yes: bool) -> None:
    """Delete a task permanently."""
    config: TasklistConfig = ctx.obj["config"]
    store = _get_store(ctx)
    resolved = _resolve_id(store, task_id)
    if resolved is None:
        return

    task = store.get_task(resolved)
    if task is None:
        console.print(f"[red]Task not found:[/red] {escape(task_id)}")
        return

    if config.view.confirm_delete and not yes:
        if not click.confirm(f"Delete '{task.name}'?", default=False):
            console.print("[dim]Cancelled.[/dim]")
            return

    store.delete_task(task.id)


@main.command()
@click.pass_context
def summary(ctx: click.Context) -> None:
    """Show task counts."""
    store = _get_store(ctx)
    console.print(_summary_line(store.get_summary()))
