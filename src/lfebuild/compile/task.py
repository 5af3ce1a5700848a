"""LFE compile task.

Registers the ``lfe compile`` provider and implements it:

    validate first files -> prepare output dir -> discover sources
        -> compile first files (in order) -> compile remaining files

Every stage runs sequentially in the calling thread. A missing first file
aborts before anything is compiled; a file that fails to compile stops the
run, so files after it never reach the compiler.

Example:
    task = LfeCompileTask()
    state = task.init(BuildState.load(Path(".")))
    task.do(state)
"""

import logging
from functools import partial
from pathlib import Path
from typing import Any, Iterable, List, Optional

from ..app_discovery import find_app
from ..errors import NoProjectFoundError
from ..providers import Provider
from ..state import AppInfo, BuildState, find_app_by_name
from . import base_compiler
from .code_path import CodePath, RuntimeEnvironment
from .compiler import LfecCompiler, SourceCompiler
from .options import CompileOptions, ErlOpts
from .reporter import ConsoleReporter, DiagnosticReporter
from .results import CompileResult
from .source_scanner import SOURCE_EXT, SourceScanner, check_files

logger = logging.getLogger(__name__)

PROVIDER = "compile"
NAMESPACE = "lfe"
DESC = "The LFE compiler plugin"
DEPS = (("default", "compile"), ("default", "app_discovery"))
ARTIFACT_EXT = ".beam"
OUT_SUBDIR = "ebin"
INCLUDE_SUBDIR = "include"


def info(description: str) -> str:
    """Long help text for the provider."""
    return (
        f"\n{description}\n"
        "\n"
        "No additional configuration options are required to compile\n"
        "LFE (*.lfe) files. The 'erl_opts' setting in lfebuild.ini is\n"
        "reused by LFE, and 'lfe_first_files' lists files that must be\n"
        "compiled before all others.\n"
    )


def format_error(reason: Any) -> str:
    """Render a provider error reason as text."""
    if isinstance(reason, tuple) and len(reason) == 2 and reason[0] == "missing_artifact":
        return f"Missing artifact {reason[1]}"
    return repr(reason)


def target_base(out_dir: Path, source: Path) -> Path:
    """Artifact path without extension: ``out_dir/<basename minus .lfe>``."""
    name = Path(source).name
    if name.endswith(SOURCE_EXT):
        name = name[: -len(SOURCE_EXT)]
    return Path(out_dir) / name


class LfeCompileTask:
    """Compiles the LFE sources of one application.

    Collaborators are injectable so callers and tests control how files
    are compiled, where diagnostics go and which code path is mutated.
    """

    def __init__(
        self,
        compiler: Optional[SourceCompiler] = None,
        reporter: Optional[DiagnosticReporter] = None,
        runtime: Optional[RuntimeEnvironment] = None,
    ):
        """Initialize the compile task.

        Args:
            compiler: Wrapped compiler (default: lfec from configuration)
            reporter: Diagnostic reporter (default: rich console)
            runtime: Code path to register the output dir on
        """
        self.compiler = compiler
        self.reporter: DiagnosticReporter = reporter if reporter is not None else ConsoleReporter()
        self.runtime: RuntimeEnvironment = runtime if runtime is not None else CodePath()
        self.last_compiled: List[Path] = []

    def init(self, state: BuildState) -> BuildState:
        """Register the ``lfe compile`` provider on state."""
        logger.debug("Initializing {lfe, compile} ...")
        provider = Provider(
            name=PROVIDER,
            namespace=NAMESPACE,
            run=self.do,
            deps=DEPS,
            bare=True,
            example="lfebuild lfe compile",
            short_desc=DESC,
            desc=info(DESC),
        )
        state.providers.add_provider(provider)
        logger.debug("Initialized {lfe, compile} ...")
        return state

    def do(self, state: BuildState) -> BuildState:
        """Select the application to compile and compile it.

        Uses ``escript_main_app`` when configured. Otherwise the application
        at the project directory is discovered, and an already-known
        application with the same name is preferred over the fresh one.

        Raises:
            NoProjectFoundError: If no application can be selected
        """
        logger.debug("Starting do/1 for {lfe, compile} ...")
        all_apps = state.all_apps()
        main_app = state.get("escript_main_app")

        if main_app is None:
            discovered = find_app(state.dir)
            if discovered is None:
                raise NoProjectFoundError(state.dir)
            existing = find_app_by_name(discovered.name, all_apps)
            app = existing if existing is not None else discovered
        else:
            app = find_app_by_name(main_app, all_apps)
            if app is None:
                raise NoProjectFoundError(state.dir, main_app)

        self.compile(state, app)
        return state

    def compile(self, state: BuildState, app: AppInfo) -> List[Path]:
        """Compile one application into its ebin directory."""
        out_dir = app.dir / OUT_SUBDIR
        logger.debug(f"Calculated outdir: {out_dir}")
        return self.lfe_compile(state, app.dir, out_dir)

    def lfe_compile(
        self,
        state: BuildState,
        app_dir: Path,
        out_dir: Path,
        more_sources: Iterable[Path] = (),
    ) -> List[Path]:
        """Compile every LFE source of the application at app_dir.

        Args:
            state: Build state supplying configuration
            app_dir: Application root directory
            out_dir: Directory for compiled artifacts
            more_sources: Extra sources compiled after the discovered ones

        Returns:
            Source files that were compiled, in compile order

        Raises:
            MissingFirstFileError: If a first file is missing (nothing compiled)
            CompileFailedError: If a file fails to compile
        """
        self.last_compiled = []
        app_dir = Path(app_dir)
        out_dir = Path(out_dir)
        first_files = check_files(state.get("lfe_first_files", []), base_dir=state.dir)

        erl_opts = ErlOpts.parse(state.erl_opts(), base_dir=app_dir)
        logger.debug(f"erl_opts {erl_opts}")

        # ebin/ must exist and be on the code path before anything compiles.
        out_dir.mkdir(parents=True, exist_ok=True)
        self.runtime.add_path_front(out_dir.absolute())

        scanner = SourceScanner(app_dir, state.all_src_dirs(["src"]))
        sources = scanner.scan(more_sources)

        target_dir = erl_opts.outdir if erl_opts.outdir is not None else out_dir
        compiler = self.compiler if self.compiler is not None else LfecCompiler(state.get("lfec", "lfec"))
        compile_fn = partial(self._compile_file, compiler, app_dir, target_dir, erl_opts)

        self.last_compiled = base_compiler.run(first_files, sources, compile_fn, self.reporter)
        return self.last_compiled

    def _compile_file(
        self,
        compiler: SourceCompiler,
        app_dir: Path,
        out_dir: Path,
        erl_opts: ErlOpts,
        source: Path,
    ) -> CompileResult:
        base = target_base(out_dir, source)
        target = base.parent / f"{base.name}{ARTIFACT_EXT}"
        logger.debug(f"Compiling {source} to {target} ...")
        target.parent.mkdir(parents=True, exist_ok=True)
        options = CompileOptions.merge(
            target_dir=target.parent,
            erl_opts=erl_opts,
            injected_include=app_dir / INCLUDE_SUBDIR,
            code_paths=self.runtime.paths(),
        )
        return compiler.compile(source, options)
