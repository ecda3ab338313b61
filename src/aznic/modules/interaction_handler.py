"""User interaction abstraction for the CLI, unattended runs and tests.

The sample stops twice before destructive steps and waits for the user to
press Enter. Those pauses go through an InteractionHandler so the workflow
can run under click, without a terminal (``--yes``) or in tests.

Example:
    >>> handler = CLIInteractionHandler()
    >>> handler.pause("Press enter to delete NIC 'nic2'...")

    Testing example:
    >>> test_handler = MockInteractionHandler()
    >>> test_handler.pause("Press enter...")
    >>> test_handler.pauses
    ['Press enter...']
"""

from typing import Protocol, runtime_checkable

import click


@runtime_checkable
class InteractionHandler(Protocol):
    """Protocol for user interaction."""

    def pause(self, message: str) -> None:
        """Block until the user acknowledges the message.

        Raises:
            click.Abort: If the user cancels (CLI implementation)
        """
        ...

    def show_warning(self, message: str) -> None:
        """Display a warning message."""
        ...

    def show_info(self, message: str) -> None:
        """Display an informational message."""
        ...


class CLIInteractionHandler:
    """Click-based CLI interaction handler.

    pause() reads one line from standard input; whatever was typed is
    discarded.
    """

    def pause(self, message: str) -> None:
        """Wait for a line of input.

        Args:
            message: Prompt to display

        Raises:
            click.Abort: If the user cancels (Ctrl+C / EOF)
        """
        click.prompt(
            click.style(message, fg="yellow"),
            default="",
            show_default=False,
            prompt_suffix=" ",
        )

    def show_warning(self, message: str) -> None:
        click.secho(f"Warning: {message}", fg="yellow", err=True)

    def show_info(self, message: str) -> None:
        click.secho(message, fg="green")


class NonInteractiveHandler:
    """Handler for unattended runs: prints the prompt and continues."""

    def pause(self, message: str) -> None:
        click.echo(f"{message} (skipped, --yes)")

    def show_warning(self, message: str) -> None:
        click.secho(f"Warning: {message}", fg="yellow", err=True)

    def show_info(self, message: str) -> None:
        click.echo(message)


class MockInteractionHandler:
    """Mock interaction handler for testing.

    Records every pause and message. ``abort_on_pause`` makes the n-th pause
    (1-based) raise click.Abort, as a user pressing Ctrl+C would.

    Example:
        >>> handler = MockInteractionHandler(abort_on_pause=2)
        >>> handler.pause("first")
        >>> handler.pause("second")
        Traceback (most recent call last):
        ...
        click.exceptions.Abort
    """

    def __init__(self, abort_on_pause: int | None = None):
        self.abort_on_pause = abort_on_pause
        self.pauses: list[str] = []
        self.infos: list[str] = []
        self.warnings: list[str] = []

    def pause(self, message: str) -> None:
        self.pauses.append(message)
        if self.abort_on_pause is not None and len(self.pauses) == self.abort_on_pause:
            raise click.Abort()

    def show_warning(self, message: str) -> None:
        self.warnings.append(message)

    def show_info(self, message: str) -> None:
        self.infos.append(message)
