"""Progress reporting for synchronization runs, kept apart from the sync logic."""

from typing import Protocol

import typer


class ProgressReporter(Protocol):
    """Receives human-readable progress updates for the stages of a sync run."""

    def start(self, message: str) -> None:
        """A stage has started."""
        ...

    def succeed(self, message: str) -> None:
        """The current stage finished successfully."""
        ...

    def fail(self, message: str) -> None:
        """The current stage failed."""
        ...


class NullProgressReporter:
    """Discards all progress updates."""

    def start(self, message: str) -> None:
        """Ignore the start of a stage."""

    def succeed(self, message: str) -> None:
        """Ignore a finished stage."""

    def fail(self, message: str) -> None:
        """Ignore a failed stage."""


class ConsoleProgressReporter:
    """Writes progress updates to the terminal with Typer."""

    def start(self, message: str) -> None:
        """Print the stage in cyan."""
        typer.secho(f"… {message}", fg=typer.colors.CYAN)

    def succeed(self, message: str) -> None:
        """Print a success line in green."""
        typer.secho(f"✔ {message}", fg=typer.colors.GREEN)

    def fail(self, message: str) -> None:
        """Print a failure line in red to stderr."""
        typer.secho(f"✖ {message}", fg=typer.colors.RED, err=True)
