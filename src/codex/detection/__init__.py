"""
Project type detection module.
"""

from .project_detector import (
    DEFAULT_EXCLUSIONS,
    MARKER_FILES,
    ProjectType,
    detect_project_type,
    generate_default_config,
)

__all__ = [
    "DEFAULT_EXCLUSIONS",
    "MARKER_FILES",
    "ProjectType",
    "detect_project_type",
    "generate_default_config",
]
