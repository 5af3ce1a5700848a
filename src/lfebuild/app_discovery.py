"""Application discovery.

An application is a directory that carries one of:
    - an explicit name in lfebuild.ini ([app] name)
    - src/<name>.app.src
    - ebin/<name>.app

Project apps are the root application plus any ``apps/*`` applications
(umbrella layout). Dependencies are the applications under ``deps/``.
"""

import logging
from pathlib import Path
from typing import List, Optional

from .config import ProjectConfig
from .state import AppInfo

logger = logging.getLogger(__name__)

APPS_DIR = "apps"
DEPS_DIR = "deps"


def _name_from_resource(directory: Path, subdir: str, suffix: str) -> Optional[str]:
    resource_dir = directory / subdir
    if not resource_dir.is_dir():
        return None
    for entry in sorted(resource_dir.iterdir()):
        if entry.is_file() and entry.name.endswith(suffix):
            return entry.name[: -len(suffix)]
    return None


def find_app(directory: Path) -> Optional[AppInfo]:
    """Return the application rooted at directory, or None.

    Args:
        directory: Candidate application directory

    Returns:
        AppInfo if directory is an application
    """
    directory = Path(directory)
    if not directory.is_dir():
        return None

    name = ProjectConfig.load(directory).app_name
    if name is None:
        name = _name_from_resource(directory, "src", ".app.src")
    if name is None:
        name = _name_from_resource(directory, "ebin", ".app")
    if name is None:
        logger.debug(f"No application found in {directory}")
        return None

    logger.debug(f"Found application {name} in {directory}")
    return AppInfo(name=name, dir=directory)


def find_apps(parent: Path) -> List[AppInfo]:
    """Find every application directly below parent, sorted by directory name."""
    parent = Path(parent)
    if not parent.is_dir():
        return []
    apps: List[AppInfo] = []
    for child in sorted(parent.iterdir()):
        if child.is_dir():
            app = find_app(child)
            if app is not None:
                apps.append(app)
    return apps


def discover_project_apps(project_dir: Path) -> List[AppInfo]:
    """Root application (if any) followed by umbrella applications."""
    apps: List[AppInfo] = []
    root_app = find_app(project_dir)
    if root_app is not None:
        apps.append(root_app)
    apps.extend(find_apps(Path(project_dir) / APPS_DIR))
    return apps


def discover_deps(project_dir: Path) -> List[AppInfo]:
    """Applications checked out under deps/."""
    return find_apps(Path(project_dir) / DEPS_DIR)
