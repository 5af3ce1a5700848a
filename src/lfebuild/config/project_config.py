"""lfebuild.ini parser.

Project configuration lives in ``lfebuild.ini`` at the project root:

    [app]
    name = my_app

    [lfe]
    erl_opts = +debug_info -I deps/common/include
    lfe_first_files =
        src/my-macros.lfe
        src/my-behaviour.lfe
    src_dirs = src
    extra_src_dirs = test
    escript_main_app = my_app
    lfec = /opt/lfe/bin/lfec

List values are whitespace separated (one per line works too). A missing
file means every setting takes its default.

Environment overrides:
    LFEBUILD_LFEC      replaces the lfec setting
    LFEBUILD_ERL_OPTS  is appended to erl_opts
"""

import configparser
import os
import shlex
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List, Optional

from ..errors import ConfigError

CONFIG_FILENAME = "lfebuild.ini"


def _split_list(value: str) -> List[str]:
    try:
        return shlex.split(value)
    except ValueError as e:
        raise ConfigError(f"Invalid list value {value!r}: {e}") from e


@dataclass(frozen=True)
class ProjectConfig:
    """Parsed project configuration.

    Attributes:
        app_name: Explicit application name ([app] name), if any
        erl_opts: Compiler options shared with the rest of the build
        lfe_first_files: Files compiled before all others, in this order
        src_dirs: Source directories relative to the app dir
        extra_src_dirs: Additional source directories, scanned after src_dirs
        escript_main_app: Application to compile when set
        lfec: lfec executable name or path
    """

    app_name: Optional[str] = None
    erl_opts: List[str] = field(default_factory=list)
    lfe_first_files: List[str] = field(default_factory=list)
    src_dirs: List[str] = field(default_factory=lambda: ["src"])
    extra_src_dirs: List[str] = field(default_factory=list)
    escript_main_app: Optional[str] = None
    lfec: str = "lfec"

    @classmethod
    def load(cls, project_dir: Path) -> "ProjectConfig":
        """Load configuration for a project directory.

        Args:
            project_dir: Directory that may contain lfebuild.ini

        Returns:
            ProjectConfig with environment overrides applied

        Raises:
            ConfigError: If the file exists but cannot be read or parsed
        """
        ini_path = Path(project_dir) / CONFIG_FILENAME
        parser = configparser.ConfigParser(interpolation=None)
        if ini_path.exists():
            try:
                parser.read(ini_path, encoding="utf-8")
            except (configparser.Error, UnicodeDecodeError, OSError) as e:
                raise ConfigError(f"Failed to parse {ini_path}: {e}") from e

        lfe = parser["lfe"] if parser.has_section("lfe") else {}
        app = parser["app"] if parser.has_section("app") else {}

        src_dirs = _split_list(lfe.get("src_dirs", "")) or ["src"]
        erl_opts = _split_list(lfe.get("erl_opts", ""))
        env_opts = os.environ.get("LFEBUILD_ERL_OPTS")
        if env_opts:
            erl_opts.extend(_split_list(env_opts))

        return cls(
            app_name=app.get("name") or None,
            erl_opts=erl_opts,
            lfe_first_files=_split_list(lfe.get("lfe_first_files", "")),
            src_dirs=src_dirs,
            extra_src_dirs=_split_list(lfe.get("extra_src_dirs", "")),
            escript_main_app=lfe.get("escript_main_app") or None,
            lfec=os.environ.get("LFEBUILD_LFEC") or lfe.get("lfec", "lfec"),
        )

    def get(self, key: str, default: Any = None) -> Any:
        """Look up a setting by name, returning default when unset."""
        value = getattr(self, key, None)
        if value is None or value == []:
            return default
        return value
