"""
Progress Tracker Module

Wraps rich library for the generation progress bar. The coordinator owns the
(simulated) progress value; this tracker only draws it.

Example Usage:
    from pathfinder.utils.progress_tracker import ProgressTracker

    tracker = ProgressTracker()
    tracker.start("Analyzing market trends for your role...")
    tracker.update(completed=42, description="Mapping NSQF levels to your skills...")
    tracker.complete()
"""

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


class ProgressTracker:
    """Manages a single percentage progress bar using rich library."""

    def __init__(self, console: Optional[Console] = None) -> None:
        self.console = console or Console()
        self.progress: Optional[Progress] = None
        self.task_id: Optional[TaskID] = None
        self.completed: int = 0

    def start(self, description: str, total: int = 100) -> None:
        """
        Start displaying a progress bar.

        Args:
            description: Initial status text
            total: Value representing completion (default: 100)
        """
        if self.is_active():
            self.stop()

        self.completed = 0
        self.progress = Progress(
            SpinnerColumn(),
            TextColumn("[bold]{task.description}"),
            BarColumn(),
            TextColumn("[progress.percentage]{task.percentage:>3.0f}%"),
            TimeElapsedColumn(),
            console=self.console,
            transient=True,
        )
        self.progress.start()
        self.task_id = self.progress.add_task(description=description, total=total)

    def update(self, completed: int, description: Optional[str] = None) -> None:
        """
        Set the absolute progress value and optionally the status text.

        Args:
            completed: Absolute progress value
            description: New status text, unchanged when None
        """
        if self.progress is None or self.task_id is None:
            return

        self.completed = completed
        if description is None:
            self.progress.update(self.task_id, completed=completed)
        else:
            self.progress.update(
                self.task_id, completed=completed, description=description
            )

    def complete(self) -> None:
        """Fill the bar and stop the display."""
        if self.progress is None or self.task_id is None:
            return
        task = self.progress.tasks[0]
        self.progress.update(self.task_id, completed=task.total)
        self.stop()

    def stop(self) -> None:
        if self.progress is not None:
            self.progress.stop()
        self.progress = None
        self.task_id = None
        self.completed = 0

    def is_active(self) -> bool:
        """
        Check if progress tracker is currently active.

        Returns:
            True if progress tracking is active, False otherwise
        """
        return self.progress is not None and self.task_id is not None
