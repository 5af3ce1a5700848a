"""
Compile options with an explicit precedence order.

The caller's ``erl_opts`` (from lfebuild.ini) are merged with the options
the compile task itself needs. The merge never mutates the caller's list;
it produces a new frozen CompileOptions for every file.

Precedence (highest first):
    1. out_dir: the per-file target directory derived by the task.
    2. Caller erl_opts: ``-I`` include dirs are searched before the task's
       own include dir, all other flags are passed to the compiler verbatim.
       A ``-o`` entry only moves where targets are derived from.
    3. Task-injected include dir (``<app-dir>/include``), searched last.
    4. return_diagnostics is always True so the compiler hands diagnostics
       back instead of only printing them.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Optional, Sequence

from ..errors import ConfigError


@dataclass(frozen=True)
class ErlOpts:
    """Caller-supplied compiler options split into named parts.

    Attributes:
        outdir: Output directory override (``-o DIR``), if any
        include_dirs: Include directories (``-I DIR``) in declared order
        flags: Every other token, in declared order
    """

    outdir: Optional[Path] = None
    include_dirs: tuple[Path, ...] = ()
    flags: tuple[str, ...] = ()

    @classmethod
    def parse(cls, tokens: Sequence[str], base_dir: Optional[Path] = None) -> "ErlOpts":
        """Split raw erl_opts tokens.

        ``-I`` and ``-o`` take their directory as the next token; any other
        token, including joined forms such as ``-Iinclude``, is a flag.
        Relative directories are resolved against base_dir when given.
        The first ``-o`` wins, matching a property-list lookup.

        Args:
            tokens: erl_opts as listed in the configuration
            base_dir: Directory relative paths are resolved against

        Returns:
            Parsed ErlOpts

        Raises:
            ConfigError: If ``-I`` or ``-o`` is the last token
        """
        outdir: Optional[Path] = None
        include_dirs: list[Path] = []
        flags: list[str] = []

        def resolve(value: str) -> Path:
            path = Path(value)
            if base_dir is not None and not path.is_absolute():
                return base_dir / path
            return path

        index = 0
        while index < len(tokens):
            token = tokens[index]
            if token not in ("-I", "-o"):
                flags.append(token)
                index += 1
                continue

            if index + 1 >= len(tokens):
                raise ConfigError(f"erl_opts: '{token}' needs a directory argument")
            value = resolve(tokens[index + 1])
            index += 2

            if token == "-I":
                include_dirs.append(value)
            elif outdir is None:
                outdir = value

        return cls(outdir=outdir, include_dirs=tuple(include_dirs), flags=tuple(flags))


@dataclass(frozen=True)
class CompileOptions:
    """Fully merged options for one compiler invocation.

    Attributes:
        out_dir: Directory the artifact is written to
        include_dirs: Include search path, highest priority first
        flags: Extra flags passed verbatim to the compiler
        code_paths: Directories with already-compiled artifacts to load from
        return_diagnostics: Return diagnostics instead of only printing them
    """

    out_dir: Path
    include_dirs: tuple[Path, ...] = ()
    flags: tuple[str, ...] = ()
    code_paths: tuple[Path, ...] = field(default_factory=tuple)
    return_diagnostics: bool = True

    @classmethod
    def merge(
        cls,
        target_dir: Path,
        erl_opts: ErlOpts,
        injected_include: Path,
        code_paths: Iterable[Path] = (),
    ) -> "CompileOptions":
        """Layer caller options over the task's required options.

        Args:
            target_dir: Per-file target directory (always wins)
            erl_opts: Parsed caller options
            injected_include: The task's own include directory
            code_paths: Registered code path entries

        Returns:
            New CompileOptions; erl_opts is left untouched
        """
        include_dirs = list(erl_opts.include_dirs)
        if injected_include not in include_dirs:
            include_dirs.append(injected_include)
        return cls(
            out_dir=target_dir,
            include_dirs=tuple(include_dirs),
            flags=erl_opts.flags,
            code_paths=tuple(code_paths),
            return_diagnostics=True,
        )
