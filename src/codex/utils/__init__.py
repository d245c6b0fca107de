"""Utility functions for codex."""

from .config_loader import CONFIG_FILENAME, ConfigCodec, ExclusionConfig
from .error_handlers import (
    CodexError,
    ConfigReadError,
    ConfigWriteError,
    OutputCreateError,
    TraversalError,
    UsageError,
)
from .file_utils import should_exclude

__all__ = [
    "CONFIG_FILENAME",
    "ConfigCodec",
    "ExclusionConfig",
    "CodexError",
    "ConfigReadError",
    "ConfigWriteError",
    "OutputCreateError",
    "TraversalError",
    "UsageError",
    "should_exclude",
]
