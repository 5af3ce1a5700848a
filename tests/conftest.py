"""Pytest configuration and shared fixtures for lfebuild tests.

Provides fakes for the three collaborators of the compile task (compiler,
diagnostic reporter, runtime code path) and a helper that lays out an LFE
application on disk.
"""

import sys
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence, Tuple

import pytest

from lfebuild import output
from lfebuild.compile.options import CompileOptions
from lfebuild.compile.results import CompileResult, Diagnostic, Severity


class FakeCompiler:
    """Records every compile call and writes a .beam on success.

    Results are looked up by source base name; unknown files compile cleanly.
    """

    def __init__(self, results: Optional[Dict[str, CompileResult]] = None):
        self.results = dict(results or {})
        self.calls: List[Tuple[Path, CompileOptions]] = []

    @property
    def compiled_names(self) -> List[str]:
        return [source.name for source, _ in self.calls]

    def compile(self, source: Path, options: CompileOptions) -> CompileResult:
        self.calls.append((Path(source), options))
        result = self.results.get(Path(source).name, CompileResult.ok())
        if result.success:
            (options.out_dir / (Path(source).stem + ".beam")).write_bytes(b"FOR1")
        return result


class RecordingReporter:
    """Keeps every reported diagnostic for later assertions."""

    def __init__(self) -> None:
        self.ok_with_warnings: List[Tuple[Path, Tuple[Diagnostic, ...]]] = []
        self.errors: List[Tuple[Path, Tuple[Diagnostic, ...], Tuple[Diagnostic, ...]]] = []

    def report_ok_with_warnings(self, source: Path, warnings: Sequence[Diagnostic]) -> None:
        self.ok_with_warnings.append((Path(source), tuple(warnings)))

    def report_error(self, source: Path, errors: Sequence[Diagnostic], warnings: Sequence[Diagnostic]) -> None:
        self.errors.append((Path(source), tuple(errors), tuple(warnings)))


class RecordingRuntime:
    """Runtime environment that only records registrations."""

    def __init__(self) -> None:
        self.registered: List[Path] = []

    def add_path_front(self, path: Path) -> None:
        self.registered.append(Path(path))

    def paths(self) -> tuple:
        return tuple(reversed(self.registered))


@pytest.fixture
def fake_compiler() -> FakeCompiler:
    return FakeCompiler()


@pytest.fixture
def reporter() -> RecordingReporter:
    return RecordingReporter()


@pytest.fixture
def runtime() -> RecordingRuntime:
    return RecordingRuntime()


@pytest.fixture
def warning_for() -> Callable[[str, str], Diagnostic]:
    """Build a warning diagnostic for a file name."""

    def _make(name: str, message: str = "unused variable X") -> Diagnostic:
        return Diagnostic(file=Path("src") / name, line=3, message=message, severity=Severity.WARNING)

    return _make


@pytest.fixture
def error_for() -> Callable[[str, str], Diagnostic]:
    """Build an error diagnostic for a file name."""

    def _make(name: str, message: str = "unbound symbol foo") -> Diagnostic:
        return Diagnostic(file=Path("src") / name, line=7, message=message, severity=Severity.ERROR)

    return _make


@pytest.fixture
def make_app(tmp_path: Path) -> Callable[..., Path]:
    """Create an LFE application directory.

    Usage:
        app_dir = make_app("my_app", sources=["a.lfe", "b.lfe"])
    """

    def _make(
        name: str = "my_app",
        sources: Sequence[str] = (),
        ini: str = "",
        root: Optional[Path] = None,
    ) -> Path:
        app_dir = root if root is not None else tmp_path / name
        src = app_dir / "src"
        src.mkdir(parents=True, exist_ok=True)
        (src / f"{name}.app.src").write_text(f"{{application, {name}, []}}.\n")
        for source in sources:
            path = src / source
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(f"(defmodule {Path(source).stem})\n")
        if ini:
            (app_dir / "lfebuild.ini").write_text(ini)
        return app_dir

    return _make


@pytest.fixture(autouse=True)
def _restore_stdio():  # noqa: PT004
    """Ensure stdout/stderr and the output module stream survive each test."""
    yield

    if sys.stdout.closed:
        sys.stdout = sys.__stdout__
    if sys.stderr.closed:
        sys.stderr = sys.__stderr__
    output._output_stream = sys.stdout
    output.set_verbose(False)
