"""Loading and saving of the per-project codex.yml exclusion config.

This module holds the in-memory exclusion config and the YAML codec that
persists it. The file on disk is human-editable and carries two lists:

    ExcludeFolders:
    - vendor
    ExcludeFiles:
    - go.sum

Typical usage example:
    config = ConfigCodec.read("proj/codex.yml")
    ConfigCodec.write("proj/codex.yml", config)
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Union

import yaml

from .error_handlers import ConfigReadError, ConfigWriteError

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "codex.yml"

EXCLUDE_FOLDERS_KEY = "ExcludeFolders"
EXCLUDE_FILES_KEY = "ExcludeFiles"


@dataclass
class ExclusionConfig:
    """Container for the two exclusion lists.

    Entries are plain substrings. Order is kept exactly as loaded and
    duplicates are allowed.

    Attributes:
        exclude_folders: Substrings matched against full directory paths.
        exclude_files: Substrings matched against file base names.
    """

    exclude_folders: List[str] = field(default_factory=list)
    exclude_files: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, List[str]]:
        """Convert to the mapping persisted in codex.yml."""
        return {
            EXCLUDE_FOLDERS_KEY: list(self.exclude_folders),
            EXCLUDE_FILES_KEY: list(self.exclude_files),
        }

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> "ExclusionConfig":
        """Build a config from a parsed codex.yml mapping.

        Absent keys and null values yield empty lists. Unknown keys are
        ignored.

        Args:
            config_dict: Mapping loaded from YAML.

        Returns:
            ExclusionConfig with both lists populated.

        Raises:
            ValueError: If a list value is not a sequence of strings.
        """
        return cls(
            exclude_folders=_string_list(config_dict, EXCLUDE_FOLDERS_KEY),
            exclude_files=_string_list(config_dict, EXCLUDE_FILES_KEY),
        )


def _string_list(config_dict: Dict[str, Any], key: str) -> List[str]:
    value = config_dict.get(key)
    if value is None:
        return []

    if not isinstance(value, list):
        raise ValueError(f"{key} must be a list, got {type(value).__name__}")

    for item in value:
        if not isinstance(item, str):
            raise ValueError(
                f"{key} entries must be strings, got {type(item).__name__}: {item!r}"
            )

    return list(value)


class ConfigCodec:
    """Static utility class for reading and writing codex.yml files."""

    @staticmethod
    def dumps(config: ExclusionConfig) -> str:
        """Serialize a config to YAML text.

        The output is deterministic: ExcludeFolders first, then ExcludeFiles,
        both in block style.
        """
        return yaml.safe_dump(
            config.to_dict(),
            default_flow_style=False,
            sort_keys=False,
            allow_unicode=True,
        )

    @staticmethod
    def write(config_path: Union[str, Path], config: ExclusionConfig) -> None:
        """Write a config to disk, truncating any existing file.

        Args:
            config_path: Destination file path.
            config: Config to serialize.

        Raises:
            ConfigWriteError: If the destination cannot be written.
        """
        content = ConfigCodec.dumps(config)

        try:
            with open(config_path, "w", encoding="utf-8") as f:
                f.write(content)
        except OSError as e:
            raise ConfigWriteError(
                f"Failed to write {CONFIG_FILENAME}: {e}",
                path=str(config_path),
                original_error=e,
            ) from e

        logger.debug(f"Wrote config to {config_path}")

    @staticmethod
    def read(config_path: Union[str, Path]) -> ExclusionConfig:
        """Load a config from disk.

        Args:
            config_path: Path to the codex.yml file.

        Returns:
            ExclusionConfig parsed from the file.

        Raises:
            ConfigReadError: If the file does not exist, cannot be read, is
                not valid YAML, or does not match the two-list schema.
        """
        try:
            with open(config_path, "r", encoding="utf-8") as f:
                config_dict = yaml.safe_load(f)
        except OSError as e:
            raise ConfigReadError(
                f"Failed to read config file: {e}",
                path=str(config_path),
                original_error=e,
            ) from e
        except yaml.YAMLError as e:
            raise ConfigReadError(
                f"Failed to parse config file: {config_path}",
                path=str(config_path),
                original_error=e,
            ) from e

        # An empty document loads as None
        if config_dict is None:
            config_dict = {}

        if not isinstance(config_dict, dict):
            raise ConfigReadError(
                f"Config file must contain a YAML mapping: {config_path}",
                path=str(config_path),
            )

        try:
            config = ExclusionConfig.from_dict(config_dict)
        except ValueError as e:
            raise ConfigReadError(
                f"Invalid config file {config_path}: {e}",
                path=str(config_path),
                original_error=e,
            ) from e

        logger.debug(
            f"Loaded {len(config.exclude_folders)} folder and "
            f"{len(config.exclude_files)} file exclusions from {config_path}"
        )
        return config
