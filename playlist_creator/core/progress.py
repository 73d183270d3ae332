"""
Progress bar for the catalog search phase, using the Rich library.

Catalog search is the only slow phase of the workflow (one rate-limited
HTTP request per query strategy per song), so it is the only phase with
a progress bar.

Usage:
    from playlist_creator.core.progress import SearchProgressBar

    with SearchProgressBar(total=len(songs)) as progress:
        for song in songs:
            ...
            progress.update(matched=True, auto_selected=True)
"""

from typing import Optional

from rich import get_console
from rich.progress import BarColumn, Progress, TaskID, TaskProgressColumn, TextColumn
from rich.theme import Theme


# =============================================================================
# Theme
# =============================================================================

SEARCH_THEME = Theme({
    "bar.back": "grey23",
    "bar.complete": "rgb(250,45,72)",
    "bar.finished": "rgb(114,156,31)",
    "bar.pulse": "rgb(250,45,72)",
    "progress.percentage": "white",
})

DESCRIPTION_WIDTH = 12
STATUS_WIDTH = 24


class SearchProgressBar:
    """
    Progress bar for catalog search.

    Displays:
    - Description (e.g., "Searching")
    - Status: ✓ auto-selected, ? needs review, ✗ unmatched
    - Progress bar and percentage

    Example:
        Searching    ✓ 12  ? 4  ✗ 1          ━━━━━━━━━━━━━━━━━  68%

    Attributes:
        total: Number of songs to search.
        completed: Songs searched so far.
        auto_selected, needs_review, unmatched: Outcome counters.
    """

    def __init__(self, total: int, description: str = "Searching") -> None:
        self.total = total
        self.description = description
        self.completed = 0
        self.auto_selected = 0
        self.needs_review = 0
        self.unmatched = 0

        self.console = get_console()
        self.progress = Progress(
            TextColumn(f"[white]{{task.description:<{DESCRIPTION_WIDTH}}}"),
            TextColumn("{task.fields[status]}"),
            BarColumn(bar_width=40, finished_style="green"),
            TaskProgressColumn(),
            console=self.console,
            transient=False,
            refresh_per_second=10,
        )
        self.task_id: Optional[TaskID] = None

    def __enter__(self) -> "SearchProgressBar":
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.stop()

    @property
    def is_running(self) -> bool:
        return self.task_id is not None

    def start(self) -> None:
        """Show the bar. Calling it again while running does nothing."""
        if self.is_running:
            return
        self.console.push_theme(SEARCH_THEME)
        self.progress.start()
        self.task_id = self.progress.add_task(
            self.description,
            total=self.total,
            status=self._status_text(),
        )

    def stop(self) -> None:
        """Hide the bar and restore the console theme."""
        if not self.is_running:
            return
        self.progress.stop()
        self.console.pop_theme()
        self.task_id = None

    def log(self, message: str) -> None:
        """Print a message above the bar."""
        self.progress.console.print(message, highlight=False)

    def update(self, matched: bool, auto_selected: bool = False) -> None:
        """
        Record a searched song.

        Args:
            matched: Whether the catalog returned a candidate for the song.
            auto_selected: Whether the top candidate cleared the
                           auto-select threshold. Ignored when not matched.
        """
        self.completed += 1
        if not matched:
            self.unmatched += 1
        elif auto_selected:
            self.auto_selected += 1
        else:
            self.needs_review += 1

        if self.task_id is not None:
            self.progress.update(self.task_id, completed=self.completed, status=self._status_text())

    def _status_text(self) -> str:
        status = f"✓ {self.auto_selected}  ? {self.needs_review}  ✗ {self.unmatched}"
        padding = " " * max(STATUS_WIDTH - len(status), 0)
        return (
            f"[green]✓ {self.auto_selected}[/green]  "
            f"[yellow]? {self.needs_review}[/yellow]  "
            f"[red]✗ {self.unmatched}[/red]{padding}"
        )
