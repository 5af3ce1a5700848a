"""LFE compiler wrapper.

This module wraps the external ``lfec`` command behind the SourceCompiler
protocol so the compile task never depends on how a file is actually
compiled.

Invocation:
    lfec -o <out_dir> [-I <dir>]... [-pa <dir>]... [flags]... <source>

Output parsing:
    lfec prints one diagnostic per line in the form
        path/to/file.lfe:12: message
        path/to/file.lfe:3: Warning: message
    Lines that do not match are kept as context for the preceding
    diagnostic's message. A non-zero exit code means the file failed.
    On a clean exit, output before the first diagnostic (progress lines)
    is only traced at debug level.
"""

import logging
import re
import subprocess
import sys
from pathlib import Path
from typing import Any, Optional, Protocol, runtime_checkable

from ..errors import CompilerNotFoundError
from .options import CompileOptions
from .results import CompileResult, Diagnostic, Severity

logger = logging.getLogger(__name__)

DEFAULT_LFEC = "lfec"

_DIAGNOSTIC_RE = re.compile(r"^(?P<file>[^:\s][^:]*):(?:(?P<line>\d+):)?\s*(?P<warning>Warning:\s*)?(?P<message>.*)$")


@runtime_checkable
class SourceCompiler(Protocol):
    """Protocol for the wrapped compiler: one source file in, one result out."""

    def compile(self, source: Path, options: CompileOptions) -> CompileResult:
        """Compile a single file.

        Args:
            source: Source file to compile
            options: Merged options for this invocation

        Returns:
            CompileResult describing success, warnings or failure
        """
        ...


def _platform_subprocess_kwargs() -> dict[str, Any]:
    """Return platform-specific kwargs for subprocess calls.

    On Windows, adds CREATE_NO_WINDOW to prevent console flashing.
    """
    if sys.platform == "win32":
        return {"creationflags": subprocess.CREATE_NO_WINDOW}
    return {}


def _split_output(output: str) -> tuple[list[Diagnostic], list[Diagnostic], list[str]]:
    """Split lfec output into parsed errors, parsed warnings and unparsed lines.

    Unparsed lines are those that come before any ``file:line:`` diagnostic;
    later non-matching lines are folded into the preceding diagnostic.
    """
    errors: list[Diagnostic] = []
    warnings: list[Diagnostic] = []
    unparsed: list[str] = []
    last: Optional[Diagnostic] = None

    for raw_line in output.splitlines():
        line = raw_line.rstrip()
        if not line.strip():
            continue

        match = _DIAGNOSTIC_RE.match(line)
        if match and (match.group("line") or match.group("file").endswith(".lfe")):
            severity = Severity.WARNING if match.group("warning") else Severity.ERROR
            line_no = int(match.group("line")) if match.group("line") else None
            diagnostic = Diagnostic(
                file=Path(match.group("file")),
                line=line_no,
                message=match.group("message").strip(),
                severity=severity,
            )
            (warnings if severity == Severity.WARNING else errors).append(diagnostic)
            last = diagnostic
        elif last is not None:
            # Continuation line: fold into the previous diagnostic.
            merged = Diagnostic(last.file, last.line, f"{last.message}\n{line}", last.severity)
            bucket = warnings if last.severity == Severity.WARNING else errors
            bucket[-1] = merged
            last = merged
        else:
            unparsed.append(line.strip())

    return errors, warnings, unparsed


def parse_diagnostics(output: str, source: Path) -> tuple[list[Diagnostic], list[Diagnostic]]:
    """Parse lfec output into error and warning diagnostics.

    Lines that name no file are reported as errors against the source.

    Args:
        output: Combined stdout/stderr of one lfec run
        source: File being compiled, used when a line names no file

    Returns:
        Tuple of (errors, warnings) in output order
    """
    errors, warnings, unparsed = _split_output(output)
    return [Diagnostic(file=source, line=None, message=line) for line in unparsed] + errors, warnings


class LfecCompiler:
    """Compiles LFE files by running the external ``lfec`` command."""

    def __init__(self, executable: str = DEFAULT_LFEC, env: Optional[dict[str, str]] = None):
        """Initialize the compiler wrapper.

        Args:
            executable: Name or path of the lfec command
            env: Environment for the child process (defaults to inherited)
        """
        self.executable = executable
        self.env = env

    def build_command(self, source: Path, options: CompileOptions) -> list[str]:
        """Build the lfec command line for one file."""
        cmd = [self.executable, "-o", str(options.out_dir)]
        for include_dir in options.include_dirs:
            cmd.extend(["-I", str(include_dir)])
        for code_path in options.code_paths:
            cmd.extend(["-pa", str(code_path)])
        cmd.extend(options.flags)
        cmd.append(str(source))
        return cmd

    def compile(self, source: Path, options: CompileOptions) -> CompileResult:
        cmd = self.build_command(source, options)
        logger.debug(f"Running: {' '.join(cmd)}")

        try:
            result = subprocess.run(
                cmd,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                env=self.env,
                check=False,
                **_platform_subprocess_kwargs(),
            )
        except FileNotFoundError as e:
            raise CompilerNotFoundError(self.executable) from e

        output = result.stdout or ""
        if not options.return_diagnostics and output:
            sys.stdout.write(output)

        if result.returncode != 0:
            errors, warnings = parse_diagnostics(output, source)
            if not errors:
                message = f"{self.executable} exited with code {result.returncode}"
                errors = [Diagnostic(file=source, line=None, message=message)]
            return CompileResult.error(errors, warnings)

        # lfec exited cleanly: only file:line diagnostics are advisory.
        errors, warnings, unparsed = _split_output(output)
        for line in unparsed:
            logger.debug(f"lfec: {line}")
        advisory = warnings + [Diagnostic(d.file, d.line, d.message, Severity.WARNING) for d in errors]
        return CompileResult.ok_with_warnings(advisory)
