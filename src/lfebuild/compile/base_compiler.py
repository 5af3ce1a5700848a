"""
Staged compile driver.

Compiles a list of "first files" in the given order, then every remaining
source. A file that appears in both lists is compiled once, in its first
file position. There is no dependency analysis: list order is the only way
to make sure a module's artifact exists before modules that use it are
compiled. The first failing file stops the run.
"""

import logging
from pathlib import Path
from typing import Callable, List, Sequence

from ..errors import CompileFailedError
from .reporter import DiagnosticReporter
from .results import CompileResult, CompileStatus

logger = logging.getLogger(__name__)

CompileFn = Callable[[Path], CompileResult]


def _key(path: Path) -> Path:
    return Path(path).resolve()


def ordered_sources(first_files: Sequence[Path], rest_files: Sequence[Path]) -> List[Path]:
    """Combine first files and remaining files into one compile order.

    First files keep their listed order; remaining files keep discovery
    order, minus anything already listed.
    """
    ordered: List[Path] = []
    seen: set[Path] = set()
    for source in list(first_files) + list(rest_files):
        key = _key(source)
        if key in seen:
            continue
        seen.add(key)
        ordered.append(Path(source))
    return ordered


def run(
    first_files: Sequence[Path],
    rest_files: Sequence[Path],
    compile_fn: CompileFn,
    reporter: DiagnosticReporter,
) -> List[Path]:
    """Compile first files, then the rest, stopping at the first failure.

    Args:
        first_files: Files to compile first, in this order
        rest_files: All other sources, in discovery order
        compile_fn: Compiles one file and returns its result
        reporter: Receives warnings and errors

    Returns:
        The files that were compiled, in order

    Raises:
        CompileFailedError: If any file fails; later files are not compiled
    """
    sources = ordered_sources(first_files, rest_files)
    logger.debug(f"Files to compile first: {[str(f) for f in first_files]}")

    compiled: List[Path] = []
    for source in sources:
        result = compile_fn(source)
        if result.status == CompileStatus.OK_WITH_WARNINGS:
            reporter.report_ok_with_warnings(source, result.warnings)
        elif result.status == CompileStatus.ERROR:
            reporter.report_error(source, result.errors, result.warnings)
            raise CompileFailedError(source, result.errors, result.warnings)
        compiled.append(source)

    return compiled
