"""
Command-line interface for lfebuild.

This module provides the `lfebuild` CLI tool for compiling LFE applications.
"""

import argparse
import logging
import sys
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence

from lfebuild import __version__
from lfebuild.compile.task import DESC, NAMESPACE, PROVIDER, LfeCompileTask, info
from lfebuild.errors import (
    CompileFailedError,
    CompilerNotFoundError,
    ConfigError,
    LfeBuildError,
    MissingFirstFileError,
    NoProjectFoundError,
)
from lfebuild.output import init_timer, log, log_compile_complete, log_detail, log_error, log_header, set_verbose
from lfebuild.state import BuildState


@dataclass
class CompileArgs:
    """Arguments for the compile command."""

    project_dir: Path
    verbose: bool = False


def compile_command(args: CompileArgs, task: Optional[LfeCompileTask] = None) -> int:
    """Compile the LFE sources of the project's main application.

    Examples:
        lfebuild lfe compile                # Compile project in cwd
        lfebuild lfe compile path/to/app    # Compile a specific project
        lfebuild -v lfe compile             # List compiled files, debug traces

    Returns:
        Process exit code
    """
    log_header("lfebuild", __version__)
    set_verbose(args.verbose)
    task = task if task is not None else LfeCompileTask()

    try:
        state = task.init(BuildState.load(args.project_dir))
        provider = state.providers.get(NAMESPACE, PROVIDER)
        log(f"Compiling project: {state.dir}")
        log_detail(f"erl_opts: {' '.join(state.erl_opts()) or '(none)'}", verbose_only=True)

        start_time = time.time()
        provider.run(state)
        for source in task.last_compiled:
            log_detail(str(source), verbose_only=True)
        log_compile_complete(len(task.last_compiled), time.time() - start_time)
        return 0

    except NoProjectFoundError as e:
        log_error(str(e))
        log("Make sure the directory contains an LFE application (src/<app>.app.src).")
        return 1

    except (MissingFirstFileError, CompileFailedError, CompilerNotFoundError, ConfigError) as e:
        log_error(str(e))
        return 1

    except LfeBuildError as e:
        log_error(f"{type(e).__name__}: {e}")
        return 1

    except PermissionError as e:
        log_error(f"Permission denied: {e}")
        return 1

    except OSError as e:
        log_error(f"{type(e).__name__}: {e}")
        return 1

    except KeyboardInterrupt:
        log_error("Compile interrupted")
        return 130  # Standard exit code for SIGINT

    except Exception as e:
        log_error(f"Unexpected error: {type(e).__name__}: {e}")
        if args.verbose:
            import traceback

            for line in traceback.format_exc().rstrip().splitlines():
                log_detail(line, indent=2)
        return 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lfebuild",
        description="Build tool integration for LFE (Lisp Flavoured Erlang) applications",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Show debug output")

    namespaces = parser.add_subparsers(dest="namespace", metavar="NAMESPACE")
    namespaces.required = True
    lfe_parser = namespaces.add_parser(NAMESPACE, help="LFE commands")

    commands = lfe_parser.add_subparsers(dest="command", metavar="COMMAND")
    commands.required = True
    compile_parser = commands.add_parser(
        PROVIDER,
        help=DESC,
        description=info(DESC),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    compile_parser.add_argument(
        "project_dir",
        nargs="?",
        type=Path,
        default=Path.cwd(),
        help="Project directory (default: current directory)",
    )
    return parser


def main(argv: Optional[Sequence[str]] = None) -> None:
    """Entry point for the lfebuild command."""
    parser = build_parser()
    parsed = parser.parse_args(argv)

    init_timer()
    logging.basicConfig(
        level=logging.DEBUG if parsed.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    args = CompileArgs(project_dir=parsed.project_dir, verbose=parsed.verbose)
    sys.exit(compile_command(args))


if __name__ == "__main__":
    main()
