"""Runtime code path registration.

Compiled artifacts of earlier files must be loadable while later files are
compiled. Directories holding such artifacts are registered on a code path,
and every compiler invocation passes that path to the runtime (``-pa``).

The code path is process-wide state owned by the host, so it is modelled as
an injectable collaborator: tests pass their own RuntimeEnvironment and
inspect what was registered.
"""

import logging
from pathlib import Path
from typing import Protocol, runtime_checkable

logger = logging.getLogger(__name__)


@runtime_checkable
class RuntimeEnvironment(Protocol):
    """Protocol for the runtime's module search path."""

    def add_path_front(self, path: Path) -> None:
        """Register a directory ahead of all existing entries."""
        ...

    def paths(self) -> tuple[Path, ...]:
        """Registered directories, highest priority first."""
        ...


class CodePath:
    """In-process code path.

    Adding a directory that is already registered moves it to the front
    instead of duplicating it, so registration is idempotent.
    """

    def __init__(self) -> None:
        self._paths: list[Path] = []

    def add_path_front(self, path: Path) -> None:
        path = Path(path).absolute()
        if path in self._paths:
            self._paths.remove(path)
        self._paths.insert(0, path)
        logger.debug(f"Code path now starts with {path}")

    def paths(self) -> tuple[Path, ...]:
        return tuple(self._paths)

    def __len__(self) -> int:
        return len(self._paths)
