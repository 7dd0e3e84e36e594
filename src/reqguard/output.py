"""Output formatting system with strict stdout/stderr discipline.

Follows `clig.dev <https://clig.dev/>`_ conventions:

* **stdout** -- primary data only (call results as JSON or text). This is
  what downstream tools pipe and parse.
* **stderr** -- all diagnostics (status, warnings, toasts, the loading
  spinner). Never contaminates the data stream.
* **TTY detection** -- Rich formatting when stdout is an interactive
  terminal, plain text when piped to another process.
* **Colour control** -- respects ``NO_COLOR``, ``TERM=dumb``, and the
  ``--no-color`` CLI flag.

The module exposes two layers:

1. :class:`OutputManager` -- a stateful object holding format preferences,
   Rich consoles, the loading spinner, and quiet/verbose flags. Created
   once in :func:`~reqguard.app.main_callback` and installed via
   :func:`set_output`.
2. Module-level convenience functions (:func:`info`, :func:`error`,
   :func:`debug`, etc.) that delegate to the global ``OutputManager``.
"""

from __future__ import annotations

import json
import os
import sys
from enum import Enum
from typing import Any, Optional

from rich.console import Console
from rich.status import Status
from rich.syntax import Syntax


class OutputFormat(str, Enum):
    """Enumeration of supported output formats.

    ``AUTO`` resolves to ``RICH`` when stdout is an interactive TTY and colour
    is not disabled, or to ``PLAIN`` otherwise.
    """

    AUTO = "auto"
    JSON = "json"
    PLAIN = "plain"
    RICH = "rich"


class OutputManager:
    """Central manager for all CLI output with stdout/stderr discipline.

    Args:
        format: Desired output format. ``AUTO`` resolves based on TTY
            detection.
        no_color: Disable all colour and Rich markup.
        quiet: Suppress non-essential informational messages on stderr.
        verbose: Enable debug-level messages on stderr.
    """

    def __init__(
        self,
        format: OutputFormat = OutputFormat.AUTO,
        no_color: bool = False,
        quiet: bool = False,
        verbose: bool = False,
    ) -> None:
        self._no_color = no_color or _should_disable_color()
        self._quiet = quiet
        self._verbose = verbose
        self._status: Optional[Status] = None

        if format == OutputFormat.AUTO:
            self._format = (
                OutputFormat.RICH if _is_tty() and not self._no_color else OutputFormat.PLAIN
            )
        else:
            self._format = format

        self._stdout = Console(
            file=sys.stdout,
            no_color=self._no_color,
            force_terminal=(self._format == OutputFormat.RICH),
        )
        self._stderr = Console(
            file=sys.stderr,
            no_color=self._no_color,
            stderr=True,
        )

    @property
    def format(self) -> OutputFormat:
        """The resolved output format."""
        return self._format

    @property
    def is_loading(self) -> bool:
        """Whether the loading spinner is currently shown."""
        return self._status is not None

    # ------------------------------------------------------------------ #
    # Call results (stdout)
    # ------------------------------------------------------------------ #

    def format_response(self, data: Any) -> None:
        """Write a call result to stdout in the active format.

        Mappings and lists are rendered as JSON (highlighted in RICH mode);
        anything else is printed as text, ``None`` as an empty line.
        """
        structured = isinstance(data, (dict, list))
        if self._format == OutputFormat.JSON or (structured and self._format == OutputFormat.PLAIN):
            print(json.dumps(data, indent=2, ensure_ascii=False, default=str), flush=True)
        elif structured:
            text = json.dumps(data, indent=2, ensure_ascii=False, default=str)
            self._stdout.print(Syntax(text, "json", theme="monokai", word_wrap=True))
        elif self._format == OutputFormat.PLAIN:
            print("" if data is None else str(data), flush=True)
        else:
            self._stdout.print("" if data is None else str(data))

    # ------------------------------------------------------------------ #
    # Diagnostics (stderr)
    # ------------------------------------------------------------------ #

    def _emit(self, plain: str, markup: str) -> None:
        if self._no_color:
            print(plain, file=sys.stderr, flush=True)
        else:
            self._stderr.print(markup)

    def info(self, message: str) -> None:
        """Informational message. Suppressed by ``--quiet``."""
        if not self._quiet:
            self._emit(message, message)

    def success(self, message: str) -> None:
        """Green success message. Suppressed by ``--quiet``."""
        if not self._quiet:
            self._emit(message, f"[green]{message}[/green]")

    def warning(self, message: str) -> None:
        """Yellow warning. NOT suppressed by ``--quiet``."""
        self._emit(f"Warning: {message}", f"[yellow]Warning:[/yellow] {message}")

    def error(self, message: str) -> None:
        """Bold-red error. Never suppressed."""
        self._emit(f"Error: {message}", f"[bold red]Error:[/bold red] {message}")

    def suggest(self, message: str) -> None:
        """Dimmed next-step hint, e.g. how to log in. Suppressed by ``--quiet``."""
        if not self._quiet:
            self._emit(f"→ {message}", f"[dim]→ {message}[/dim]")

    def debug(self, message: str) -> None:
        """Debug message, only shown with ``--verbose``."""
        if self._verbose:
            self._emit(f"[debug] {message}", f"[dim]\\[debug] {message}[/dim]")

    def toast(self, message: str) -> None:
        """Short, transient notice to the user. Never suppressed.

        Used by the network guard to surface the raw network status.
        """
        self._emit(f"! {message}", f"[bold yellow]![/bold yellow] {message}")

    # ------------------------------------------------------------------ #
    # Loading indicator
    # ------------------------------------------------------------------ #

    def start_loading(self, message: str = "Loading...") -> None:
        """Show the loading spinner on stderr.

        Only animated when stderr is an interactive terminal and output is
        neither quiet nor colourless; otherwise the state is still tracked
        so :meth:`stop_loading` stays balanced. Calling it twice keeps a
        single spinner.
        """
        if self._status is not None:
            return
        self._status = self._stderr.status(message, spinner="dots")
        if not self._quiet and not self._no_color and self._stderr.is_terminal:
            self._status.start()

    def stop_loading(self) -> None:
        """Hide the loading spinner. A no-op when it is not shown."""
        if self._status is None:
            return
        self._status.stop()
        self._status = None


# ------------------------------------------------------------------ #
# Helpers
# ------------------------------------------------------------------ #


def _is_tty() -> bool:
    """Check if stdout is a TTY."""
    return hasattr(sys.stdout, "isatty") and sys.stdout.isatty()


def _should_disable_color() -> bool:
    """Check if color should be disabled per clig.dev.

    Returns True when NO_COLOR env var is set (any value) or TERM=dumb.
    """
    if os.environ.get("NO_COLOR") is not None:
        return True
    if os.environ.get("TERM") == "dumb":
        return True
    return False


# ------------------------------------------------------------------ #
# Global output instance (set during app startup)
# ------------------------------------------------------------------ #

_output: Optional[OutputManager] = None


def get_output() -> OutputManager:
    """Return the global :class:`OutputManager`, creating a default one lazily."""
    global _output
    if _output is None:
        _output = OutputManager()
    return _output


def set_output(output: OutputManager) -> None:
    """Install *output* as the global :class:`OutputManager` instance."""
    global _output
    _output = output


def reset_output() -> None:
    """Reset the global :class:`OutputManager` to ``None``.

    Primarily useful in test suites to ensure a clean state between tests.
    """
    global _output
    _output = None


# ------------------------------------------------------------------ #
# Convenience functions that use the global instance
# ------------------------------------------------------------------ #


def format_response(data: Any) -> None:
    """Write a call result to stdout via the global :class:`OutputManager`."""
    get_output().format_response(data)


def info(message: str) -> None:
    """Print an info message to stderr via the global :class:`OutputManager`."""
    get_output().info(message)


def error(message: str) -> None:
    """Print an error message to stderr via the global :class:`OutputManager`."""
    get_output().error(message)


def success(message: str) -> None:
    """Print a success message to stderr via the global :class:`OutputManager`."""
    get_output().success(message)


def warning(message: str) -> None:
    """Print a warning to stderr via the global :class:`OutputManager`."""
    get_output().warning(message)


def suggest(message: str) -> None:
    """Print a next-step suggestion to stderr via the global :class:`OutputManager`."""
    get_output().suggest(message)


def debug(message: str) -> None:
    """Print a debug message to stderr via the global :class:`OutputManager`."""
    get_output().debug(message)
