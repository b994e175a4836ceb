"""
Rich-based terminal dashboard for speedcheck runs.

All formatting helpers live in ``engine.stats`` -- this module only does
presentation via the ``rich`` library.  Nothing here writes to a
``TestSession``; the dashboard is driven by the controller's ``on_update``
snapshots.
"""
from __future__ import annotations

from typing import Optional

from rich.console import Console
from rich.panel import Panel
from rich.progress import (
    BarColumn,
    Progress,
    SpinnerColumn,
    TextColumn,
    TimeElapsedColumn,
)
from rich.table import Table

from engine.session import NetworkInfo, Phase, TestSession
from engine.stats import format_latency, format_speed

console = Console()

_PHASE_LABELS = {
    Phase.PING: "Testing ping",
    Phase.DOWNLOAD: "Testing download",
    Phase.UPLOAD: "Testing upload",
}


# ---------------------------------------------------------------------------
# Print helpers
# ---------------------------------------------------------------------------

def print_header() -> None:
    console.print()
    console.print(
        Panel.fit(
            "[bold cyan]Internet Speed Test[/bold cyan]\n"
            "[dim]Latency, jitter, download and upload[/dim]",
            border_style="cyan",
        )
    )
    console.print()


def print_network_info(info: Optional[NetworkInfo]) -> None:
    if info is None:
        return
    table = Table(show_header=False, box=None, padding=(0, 1))
    table.add_column(style="dim")
    table.add_column(style="bold")
    table.add_row("ISP:", info.isp)
    table.add_row("IP:", info.ip)
    console.print(Panel(table, title="[bold]Network[/bold]", border_style="blue"))


def print_final_results(session: TestSession) -> None:
    jitter = (
        f"[dim](jitter: {format_latency(session.jitter_ms)})[/dim]"
        if session.jitter_ms is not None else ""
    )
    body = (
        f"[bold white]   Ping:[/bold white]  "
        f"[bold yellow]{format_latency(session.ping_ms)}[/bold yellow]  {jitter}\n"
        f"[bold white]   Download:[/bold white]  "
        f"[bold green]{format_speed(session.download_mbps)}[/bold green]\n"
        f"[bold white]   Upload:[/bold white]  "
        f"[bold blue]{format_speed(session.upload_mbps)}[/bold blue]"
    )
    if session.phase is Phase.CANCELLED:
        body += "\n\n[yellow]Test cancelled[/yellow]"
    if session.error:
        body += f"\n\n[red]{session.error}[/red]"

    console.print()
    console.print(Panel.fit(body, title="[bold]Results[/bold]", border_style="cyan"))
    console.print()


# ---------------------------------------------------------------------------
# Progress display
# ---------------------------------------------------------------------------

class ProgressDisplay:
    """Manages a ``rich`` progress bar that follows a session's phases."""

    def __init__(self) -> None:
        self.progress = Progress(
            SpinnerColumn(),
            TextColumn("[bold]{task.description}"),
            BarColumn(bar_width=40),
            TextColumn("[progress.percentage]{task.percentage:>3.0f}%"),
            TimeElapsedColumn(),
            console=console,
        )
        self._task_id = None
        self._phase: Optional[Phase] = None
        self._last_prog = -1.0

    def __call__(self, session: TestSession) -> None:
        """Observer entry point; safe to register as ``controller.on_update``."""
        if session.phase is not self._phase:
            self._switch(session.phase)
        if session.phase in (Phase.DOWNLOAD, Phase.UPLOAD):
            self.update(session.progress)

    def _switch(self, phase: Phase) -> None:
        self.stop()
        self._phase = phase
        label = _PHASE_LABELS.get(phase)
        if label is None:
            return
        self.progress.start()
        # Ping has no meaningful progress; show an indeterminate bar.
        total = None if phase is Phase.PING else 100
        self._task_id = self.progress.add_task(label, total=total)
        self._last_prog = -1.0

    def update(self, progress: float) -> None:
        if self._task_id is None:
            return
        # Debounce: only redraw on visible change
        if abs(progress - self._last_prog) < 0.5:
            return
        self.progress.update(self._task_id, completed=progress)
        self._last_prog = progress

    def stop(self) -> None:
        if self._task_id is not None:
            self.progress.stop()
            self.progress.remove_task(self._task_id)
            self._task_id = None
