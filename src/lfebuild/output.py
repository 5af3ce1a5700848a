"""
Centralized user-facing output for lfebuild.

All output is prefixed with the elapsed time since program launch in
MM:SS.cc format (minutes:seconds.centiseconds), which makes it easy to see
where time goes during a compile run.

Example output:
    00:00.02 lfebuild v0.3.0
    00:00.03 Compiling app: my_app
    00:00.41      Compiled 12 files
    00:00.41 Compile time: 0.39s

Debug traces do not belong here; use ``logging.getLogger(__name__)``.

Usage:
    from lfebuild.output import log, log_detail, log_error

    log("Compiling app: my_app")
    log_detail("Output: _build/ebin")
"""

import sys
import time
from typing import Optional, TextIO

_start_time: Optional[float] = None
_output_stream: TextIO = sys.stdout
_verbose: bool = False


def init_timer(output_stream: Optional[TextIO] = None) -> None:
    """
    Initialize the program timer.

    Args:
        output_stream: Optional output stream (defaults to sys.stdout)
    """
    global _start_time, _output_stream
    _start_time = time.time()
    if output_stream is not None:
        _output_stream = output_stream


def set_verbose(verbose: bool) -> None:
    """
    Set verbose mode.

    Args:
        verbose: If True, verbose-only messages are printed too.
    """
    global _verbose
    _verbose = verbose


def get_elapsed() -> float:
    """Seconds since the timer was initialized."""
    if _start_time is None:
        init_timer()
    return time.time() - _start_time  # type: ignore


def format_timestamp() -> str:
    """
    Format the current elapsed time as MM:SS.cc.

    Returns:
        Formatted timestamp string
    """
    elapsed = get_elapsed()
    minutes = int(elapsed // 60)
    seconds = elapsed % 60
    return f"{minutes:02d}:{seconds:05.2f}"


def _print(message: str) -> None:
    _output_stream.write(f"{format_timestamp()} {message}\n")
    _output_stream.flush()


def log(message: str, verbose_only: bool = False) -> None:
    """
    Log a message with timestamp.

    Args:
        message: Message to log
        verbose_only: If True, only print if verbose mode is enabled
    """
    if verbose_only and not _verbose:
        return
    _print(message)


def log_detail(message: str, indent: int = 6, verbose_only: bool = False) -> None:
    """
    Log an indented detail message.

    Args:
        message: Detail message
        indent: Number of spaces to indent (default 6)
        verbose_only: If True, only print if verbose mode is enabled
    """
    if verbose_only and not _verbose:
        return
    _print(f"{' ' * indent}{message}")


def log_header(title: str, version: str) -> None:
    """Log the program header line followed by a blank line."""
    _print(f"{title} v{version}")
    _print("")


def log_error(message: str) -> None:
    _print(f"ERROR: {message}")


def log_compile_complete(file_count: int, elapsed: float) -> None:
    """
    Log the end-of-run summary.

    Args:
        file_count: Number of files submitted to the compiler
        elapsed: Wall-clock seconds spent compiling
    """
    log_detail(f"Compiled {file_count} files")
    _print(f"Compile time: {elapsed:.2f}s")
