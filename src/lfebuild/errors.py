"""Exception hierarchy for lfebuild.

Every error raised on purpose by lfebuild derives from LfeBuildError, so the
CLI can turn any of them into a non-zero exit code with a readable message.
"""

from pathlib import Path
from typing import TYPE_CHECKING, Sequence, Union

if TYPE_CHECKING:
    from lfebuild.compile.results import Diagnostic


class LfeBuildError(Exception):
    """Base class for all lfebuild errors."""

    pass


class ConfigError(LfeBuildError):
    """Raised when lfebuild.ini cannot be parsed."""

    pass


class ProviderError(LfeBuildError):
    """Raised on duplicate or unknown provider lookups."""

    pass


class NoProjectFoundError(LfeBuildError):
    """Raised when no application can be located for the current project."""

    def __init__(self, directory: Union[str, Path], app_name: str = ""):
        self.directory = Path(directory)
        self.app_name = app_name
        if app_name:
            message = f"No application named '{app_name}' found in {self.directory}"
        else:
            message = f"No main application found in {self.directory}"
        super().__init__(message)


class MissingFirstFileError(LfeBuildError):
    """Raised when a declared first file does not exist.

    This aborts the whole build before anything is compiled.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        super().__init__(f"File '{path}' is missing, aborting")


class CompilerNotFoundError(LfeBuildError):
    """Raised when the lfec executable cannot be started."""

    def __init__(self, executable: str):
        self.executable = executable
        super().__init__(f"LFE compiler '{executable}' not found on PATH")


class CompileFailedError(LfeBuildError):
    """Raised when the wrapped compiler reports failure for a source file.

    Attributes:
        source: File that failed to compile
        errors: Error diagnostics reported by the compiler
        warnings: Warning diagnostics reported alongside the errors
    """

    def __init__(
        self,
        source: Path,
        errors: Sequence["Diagnostic"] = (),
        warnings: Sequence["Diagnostic"] = (),
    ):
        self.source = Path(source)
        self.errors = tuple(errors)
        self.warnings = tuple(warnings)
        super().__init__(f"Failed to compile {self.source} ({len(self.errors)} errors, {len(self.warnings)} warnings)")
