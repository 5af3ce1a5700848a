"""Diagnostic reporting.

The compile task hands compiler diagnostics to a DiagnosticReporter. There
are exactly two entry points, one for files that compiled with warnings and
one for files that failed. Payloads are forwarded unmodified; rendering is
the reporter's business.
"""

from pathlib import Path
from typing import Optional, Protocol, Sequence, runtime_checkable

from rich.console import Console
from rich.text import Text

from .results import Diagnostic


@runtime_checkable
class DiagnosticReporter(Protocol):
    """Protocol for receiving per-file compiler diagnostics."""

    def report_ok_with_warnings(self, source: Path, warnings: Sequence[Diagnostic]) -> None:
        """Called when a file compiled but produced warnings."""
        ...

    def report_error(self, source: Path, errors: Sequence[Diagnostic], warnings: Sequence[Diagnostic]) -> None:
        """Called when a file failed to compile."""
        ...


class ConsoleReporter:
    """Renders diagnostics to the terminal with rich.

    Warnings are yellow, errors bold red. Each diagnostic is printed on its
    own line as ``file:line: message``.
    """

    def __init__(self, console: Optional[Console] = None):
        """Initialize the reporter.

        Args:
            console: Rich console to print to (defaults to stderr)
        """
        self.console = console if console is not None else Console(stderr=True, highlight=False)
        self.warning_count = 0
        self.error_count = 0

    def report_ok_with_warnings(self, source: Path, warnings: Sequence[Diagnostic]) -> None:
        for warning in warnings:
            self.console.print(Text(warning.format(), style="yellow"))
        self.warning_count += len(warnings)

    def report_error(self, source: Path, errors: Sequence[Diagnostic], warnings: Sequence[Diagnostic]) -> None:
        header = Text("Compiling ", style="bold red")
        header.append(str(source), style="bold")
        header.append(" failed", style="bold red")
        self.console.print(header)
        for error in errors:
            self.console.print(Text(error.format(), style="red"))
        for warning in warnings:
            self.console.print(Text(warning.format(), style="yellow"))
        self.error_count += len(errors)
        self.warning_count += len(warnings)


class NullReporter:
    """Discards all diagnostics. Useful for non-interactive callers."""

    def report_ok_with_warnings(self, source: Path, warnings: Sequence[Diagnostic]) -> None:
        pass

    def report_error(self, source: Path, errors: Sequence[Diagnostic], warnings: Sequence[Diagnostic]) -> None:
        pass
