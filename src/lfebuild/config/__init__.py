"""Configuration parsing for lfebuild."""

from .project_config import CONFIG_FILENAME, ProjectConfig

__all__ = ["CONFIG_FILENAME", "ProjectConfig"]
