"""Data models for per-file compile results.

Defines:
- Severity: Enum for a single diagnostic's severity
- Diagnostic: One warning or error line reported by the compiler
- CompileStatus: Enum of the three possible outcomes of compiling a file
- CompileResult: Outcome of compiling one file, with its diagnostics
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Optional, Sequence


class Severity(Enum):
    """Severity of a compiler diagnostic."""

    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class Diagnostic:
    """A single compiler diagnostic.

    The payload is forwarded verbatim to the reporter; lfebuild never
    interprets the message text.

    Attributes:
        file: Source file the diagnostic refers to
        line: 1-based line number, or None when the compiler gave none
        message: Diagnostic text as reported by the compiler
        severity: Warning or error
    """

    file: Path
    line: Optional[int]
    message: str
    severity: Severity = Severity.ERROR

    def format(self) -> str:
        """Format as ``file:line: message`` (line omitted if unknown)."""
        location = f"{self.file}:{self.line}" if self.line is not None else f"{self.file}"
        prefix = "Warning: " if self.severity == Severity.WARNING else ""
        return f"{location}: {prefix}{self.message}"

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "file": str(self.file),
            "line": self.line,
            "message": self.message,
            "severity": self.severity.value,
        }


class CompileStatus(Enum):
    """Outcome of compiling one source file."""

    OK = "ok"
    OK_WITH_WARNINGS = "ok_with_warnings"
    ERROR = "error"


@dataclass(frozen=True)
class CompileResult:
    """Result of compiling a single source file.

    Build instances with the ``ok``, ``ok_with_warnings`` and ``error``
    constructors rather than directly.
    """

    status: CompileStatus
    errors: tuple[Diagnostic, ...] = field(default_factory=tuple)
    warnings: tuple[Diagnostic, ...] = field(default_factory=tuple)

    @classmethod
    def ok(cls) -> "CompileResult":
        return cls(CompileStatus.OK)

    @classmethod
    def ok_with_warnings(cls, warnings: Sequence[Diagnostic]) -> "CompileResult":
        if not warnings:
            return cls.ok()
        return cls(CompileStatus.OK_WITH_WARNINGS, warnings=tuple(warnings))

    @classmethod
    def error(cls, errors: Sequence[Diagnostic], warnings: Sequence[Diagnostic] = ()) -> "CompileResult":
        return cls(CompileStatus.ERROR, errors=tuple(errors), warnings=tuple(warnings))

    @property
    def success(self) -> bool:
        """True unless the compiler reported failure."""
        return self.status != CompileStatus.ERROR
