"""
codex

Concatenate a project's source files into a single text file, skipping
folders and files listed in a per-project codex.yml.
"""

__version__ = "1.0.0"

# Core exports
from .aggregation import Aggregator, AggregationResult
from .detection import ProjectType, detect_project_type, generate_default_config
from .utils import ConfigCodec, ExclusionConfig

__all__ = [
    "Aggregator",
    "AggregationResult",
    "ProjectType",
    "detect_project_type",
    "generate_default_config",
    "ConfigCodec",
    "ExclusionConfig",
    "__version__",
]
