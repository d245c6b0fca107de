"""
Project type detection and default exclusion configs.

A project type is guessed from the marker files present at the top of a
directory. Each type maps to a canned set of exclusions that `codex init`
persists as codex.yml.
"""

import logging
from enum import Enum
from pathlib import Path
from typing import Dict, List, Tuple, Union

from ..utils.config_loader import ExclusionConfig

logger = logging.getLogger(__name__)


class ProjectType(str, Enum):
    """Supported project types."""

    NODEJS = "nodejs"
    PYTHON = "python"
    GO = "go"
    JAVA = "java"
    DEFAULT = "default"


# Checked in order, first match wins
MARKER_FILES: List[Tuple[str, ProjectType]] = [
    ("package.json", ProjectType.NODEJS),
    ("requirements.txt", ProjectType.PYTHON),
    ("go.mod", ProjectType.GO),
    ("pom.xml", ProjectType.JAVA),
]

# (exclude_folders, exclude_files) per project type.
# Glob-looking entries are matched as plain substrings.
DEFAULT_EXCLUSIONS: Dict[ProjectType, Tuple[Tuple[str, ...], Tuple[str, ...]]] = {
    ProjectType.NODEJS: (
        ("node_modules", "dist", "build"),
        ("package-lock.json", "yarn.lock"),
    ),
    ProjectType.PYTHON: (
        ("__pycache__", ".venv"),
        ("requirements.txt", "Pipfile.lock"),
    ),
    ProjectType.GO: (
        ("vendor",),
        ("go.sum",),
    ),
    ProjectType.JAVA: (
        ("target", ".gradle"),
        ("*.jar", "*.war"),
    ),
    ProjectType.DEFAULT: (
        (".git", "bin", "obj"),
        ("*.log", "*.tmp"),
    ),
}


def detect_project_type(directory: Union[str, Path]) -> ProjectType:
    """Guess the project type from marker files in a directory.

    Only the top level of the directory is inspected. A directory that does
    not exist has no markers and is detected as DEFAULT.

    Args:
        directory: Project root to inspect.

    Returns:
        The first ProjectType whose marker file exists, else DEFAULT.
    """
    root = Path(directory)
    for marker, project_type in MARKER_FILES:
        if (root / marker).exists():
            logger.debug(f"Found {marker} in {root}, detected {project_type.value}")
            return project_type

    return ProjectType.DEFAULT


def generate_default_config(project_type: ProjectType) -> ExclusionConfig:
    """Build the canned exclusion config for a project type.

    Args:
        project_type: Detected project type.

    Returns:
        A new ExclusionConfig; callers may not mutate the shared table
        through it.
    """
    folders, files = DEFAULT_EXCLUSIONS.get(
        project_type, DEFAULT_EXCLUSIONS[ProjectType.DEFAULT]
    )
    return ExclusionConfig(exclude_folders=list(folders), exclude_files=list(files))
