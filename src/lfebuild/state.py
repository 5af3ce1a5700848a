"""Build state - the context one build invocation runs in.

Defines:
- AppInfo: An application (name and root directory)
- BuildState: Project directory, configuration, known applications and
  registered providers for one invocation

A BuildState is created per invocation and thrown away afterwards. Nothing
in it is cached between runs.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List, Optional, Sequence

from .config import ProjectConfig
from .providers import ProviderRegistry


@dataclass(frozen=True)
class AppInfo:
    """An application in the project or its dependencies.

    Attributes:
        name: Application name
        dir: Application root directory
    """

    name: str
    dir: Path

    @property
    def out_dir(self) -> Path:
        """Directory compiled artifacts are written to."""
        return self.dir / "ebin"


def find_app_by_name(name: str, apps: Sequence[AppInfo]) -> Optional[AppInfo]:
    """Return the first application called name, or None."""
    for app in apps:
        if app.name == name:
            return app
    return None


@dataclass
class BuildState:
    """Context for one build invocation.

    Attributes:
        dir: Project root directory
        config: Parsed project configuration
        project_apps: Applications that belong to the project
        deps: Dependency applications
        providers: Registered providers
    """

    dir: Path
    config: ProjectConfig = field(default_factory=ProjectConfig)
    project_apps: List[AppInfo] = field(default_factory=list)
    deps: List[AppInfo] = field(default_factory=list)
    providers: ProviderRegistry = field(default_factory=ProviderRegistry)

    @classmethod
    def load(cls, project_dir: Path) -> "BuildState":
        """Read configuration and discover applications for project_dir."""
        from .app_discovery import discover_deps, discover_project_apps

        project_dir = Path(project_dir).absolute()
        return cls(
            dir=project_dir,
            config=ProjectConfig.load(project_dir),
            project_apps=discover_project_apps(project_dir),
            deps=discover_deps(project_dir),
        )

    def get(self, key: str, default: Any = None) -> Any:
        """Configuration value for key, or default when unset."""
        return self.config.get(key, default)

    def all_apps(self) -> List[AppInfo]:
        """Project applications followed by dependencies."""
        return list(self.project_apps) + list(self.deps)

    def erl_opts(self) -> List[str]:
        """A copy of the configured compiler options."""
        return list(self.config.erl_opts)

    def all_src_dirs(self, default: Optional[Sequence[str]] = None) -> List[str]:
        """Source directories followed by extra source directories."""
        src_dirs = self.get("src_dirs", list(default) if default else ["src"])
        extra = self.get("extra_src_dirs", [])
        return list(src_dirs) + [d for d in extra if d not in src_dirs]
