"""Bundle progress display using rich."""

from typing import Optional

from rich.console import Console
from rich.progress import (
    BarColumn,
    Progress,
    SpinnerColumn,
    TaskID,
    TextColumn,
    TimeElapsedColumn,
)


class ProgressDisplay:
    """Percentage progress bar for ``Bundler.bundle``."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()
        self._progress: Optional[Progress] = None
        self._task: Optional[TaskID] = None
        self._name: Optional[str] = None
        self._total = 0
        self._percent = 0

    def start(self, name: str, total: int) -> None:
        self._name = name
        self._total = total
        self._percent = 0
        self._progress = Progress(
            SpinnerColumn(),
            TextColumn("[bold blue]Building {task.description}"),
            BarColumn(),
            TextColumn("{task.percentage:>3.0f}%"),
            TimeElapsedColumn(),
            console=self.console,
            refresh_per_second=10,
            transient=True,
        )
        self._progress.start()
        self._task = self._progress.add_task(name, total=100)

    def update(self, percent: int) -> None:
        self._percent = percent
        if self._progress and self._task is not None:
            self._progress.update(self._task, completed=percent)

    def finish(self) -> None:
        if self._progress:
            self._progress.stop()
            if self._percent >= 100 or self._total == 0:
                self.console.print(f"[green]Building {self._name} ✓[/green]")
            self._progress = None
            self._task = None
