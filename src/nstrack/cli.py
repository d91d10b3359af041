"""CLI for nstrack."""

import logging
from datetime import datetime
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from .context import ProjectContext
from .errors import TrackerError
from .platforms import Platform
from .scanner import ScanOptions, scan_dirs
from .snapshot import Snapshot
from .state import load_snapshot, save_snapshot, state_lock
from .track import clear_queues


app = typer.Typer(help="""\
Track which Clojure namespace sources changed since the last scan, and
which namespaces need to be unloaded and reloaded as a result.""")

console = Console()
err_console = Console(stderr=True)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_time=False, show_path=False)],
        force=True,
    )


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug output"),
):
    _configure_logging(verbose)


def _state_path(ctx: ProjectContext, state: Optional[Path]) -> Path:
    return state if state is not None else ctx.state_path


def _format_time(ts: Optional[float]) -> str:
    if ts is None:
        return "never"
    return datetime.fromtimestamp(ts).strftime("%Y-%m-%d %H:%M:%S")


def _print_queues(snapshot: Snapshot) -> None:
    if not snapshot.has_pending:
        console.print("[green]✓[/green] No namespaces to reload")
        return

    table = Table(title="Pending reload")
    table.add_column("Step", style="cyan")
    table.add_column("Namespace")
    for ns in snapshot.unload:
        table.add_row("unload", ns)
    for ns in snapshot.load:
        table.add_row("load", ns)
    console.print(table)


@app.command()
def init(
    path: Optional[Path] = typer.Argument(None, help="Project directory (default: current directory)"),
    platform: str = typer.Option("clj", "--platform", "-p", help="Default platform: clj, cljs or any"),
    source_dir: List[str] = typer.Option(["src"], "--source-dir", "-s", help="Source directory (repeatable)"),
):
    """Create .nstrack/config.yaml for a project."""
    from .config import TrackerConfig

    target = (path or Path.cwd()).resolve()
    try:
        Platform.parse(platform)
    except TrackerError as e:
        console.print(f"[red]✗[/red] {e}")
        raise typer.Exit(1)

    ctx = ProjectContext.init(target)
    if ctx.config_path.exists():
        console.print(f"[yellow]⚠[/yellow] Already initialized: {ctx.config_path}")
        raise typer.Exit(0)

    config = TrackerConfig(source_dirs=list(source_dir), platform=platform)
    ctx.config_path.write_text(config.to_yaml())
    console.print(f"[green]✓[/green] Initialized nstrack in {ctx.root}")


@app.command()
def scan(
    dirs: Optional[List[Path]] = typer.Argument(None, help="Directories to scan (default: configured source dirs)"),
    platform: Optional[str] = typer.Option(None, "--platform", "-p", help="clj, cljs or any"),
    add_all: bool = typer.Option(False, "--all", help="Treat every file as modified"),
    state: Optional[Path] = typer.Option(None, "--state", help="State file (default: .nstrack/state.json)"),
    keep_queue: bool = typer.Option(False, "--keep-queue", help="Do not clear the reload queue after printing it"),
):
    """Scan source directories and report namespaces to reload.

    Examples:
        nstrack scan                   # Scan configured source dirs
        nstrack scan src test          # Scan specific directories
        nstrack scan --platform cljs   # Scan ClojureScript sources
        nstrack scan --all             # Full rescan regardless of timestamps
    """
    ctx = ProjectContext()
    state_path = _state_path(ctx, state)

    try:
        options = ScanOptions(
            platform=Platform.parse(platform) if platform else ctx.config.platform_enum(),
            add_all=add_all,
            ignore=tuple(ctx.config.ignore),
        )
        scan_targets = list(dirs or ()) or [d for d in ctx.source_dirs() if d.is_dir()]

        with state_lock(ctx.lock_path):
            previous = load_snapshot(state_path)
            snapshot = scan_dirs(previous, scan_targets, options)
            _print_queues(snapshot)
            if not keep_queue:
                snapshot = clear_queues(snapshot)
            if snapshot is not previous:
                save_snapshot(snapshot, state_path)
    except TrackerError as e:
        console.print(f"[red]✗[/red] {e}")
        raise typer.Exit(1)

    console.print(f"Tracking {len(snapshot.files)} files in {len(snapshot.namespaces)} namespaces")
    for d in sorted(snapshot.mismatch_dirs):
        console.print(f"[yellow]⚠[/yellow] Ignoring directory {d}")


@app.command()
def status(
    state: Optional[Path] = typer.Option(None, "--state", help="State file (default: .nstrack/state.json)"),
):
    """Show what the last scan recorded."""
    ctx = ProjectContext()
    try:
        snapshot = load_snapshot(_state_path(ctx, state))
    except TrackerError as e:
        console.print(f"[red]✗[/red] {e}")
        raise typer.Exit(1)

    table = Table(title="nstrack status", show_header=False)
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    table.add_row("Last scan", _format_time(snapshot.time))
    table.add_row("Tracked files", str(len(snapshot.files)))
    table.add_row("Namespaces", str(len(snapshot.namespaces)))
    table.add_row("Ignored directories", "\n".join(str(d) for d in sorted(snapshot.mismatch_dirs)) or "-")
    console.print(table)
    _print_queues(snapshot)


@app.command()
def reset(
    state: Optional[Path] = typer.Option(None, "--state", help="State file (default: .nstrack/state.json)"),
):
    """Forget all tracked files; the next scan starts from scratch."""
    ctx = ProjectContext()
    state_path = _state_path(ctx, state)
    with state_lock(ctx.lock_path):
        if state_path.exists():
            state_path.unlink()
            console.print(f"[green]✓[/green] Removed {state_path}")
        else:
            console.print("No scan state to remove")


if __name__ == "__main__":
    app()
