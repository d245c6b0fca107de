"""
Aggregator Module

Walks a source tree depth-first and appends every non-excluded file to a
single output artifact. Each file becomes one record:

    ##### <path> #####
    <blank line>
    <raw file bytes>
    <blank line>

Directories whose full path matches an ExcludeFolders entry are pruned with
their whole subtree. Files whose base name matches an ExcludeFiles entry are
skipped. Any filesystem error aborts the walk.
"""

import logging
import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import BinaryIO, List, Optional, Union

from ..utils.config_loader import ExclusionConfig
from ..utils.error_handlers import OutputCreateError, TraversalError
from ..utils.file_utils import should_exclude

logger = logging.getLogger(__name__)

HEADER_PREFIX = b"##### "
HEADER_SUFFIX = b" #####\n\n"
RECORD_TERMINATOR = b"\n\n"


class VisitAction(Enum):
    """What the walk does with a visited entry."""

    DESCEND = "descend"
    PROCESS = "process"
    SKIP_FILE = "skip_file"
    SKIP_SUBTREE = "skip_subtree"


@dataclass
class AggregationResult:
    """Summary of one aggregation pass.

    Attributes:
        files_processed: Number of records written.
        files_skipped: Files matched by ExcludeFiles.
        folders_skipped: Subtrees pruned by ExcludeFolders.
        bytes_written: Total bytes written to the output, headers included.
        output_path: Destination file, when written through aggregate().
    """

    files_processed: int = 0
    files_skipped: int = 0
    folders_skipped: int = 0
    bytes_written: int = 0
    output_path: Optional[str] = None


def format_header(path: str) -> bytes:
    """Build the record header for a file path."""
    return HEADER_PREFIX + os.fsencode(path) + HEADER_SUFFIX


class Aggregator:
    """Concatenates a source tree into one artifact.

    Example:
        aggregator = Aggregator(config)
        result = aggregator.aggregate("proj", "code.txt")
    """

    def __init__(self, config: ExclusionConfig):
        """Initialize the aggregator.

        Args:
            config: Exclusion lists consulted for every visited entry.
        """
        self.config = config

    def classify(self, path: str, is_dir: bool) -> VisitAction:
        """Decide what to do with one entry.

        Args:
            path: Full path of the entry as built during the walk.
            is_dir: Whether the entry is a directory.

        Returns:
            SKIP_SUBTREE or DESCEND for directories, SKIP_FILE or PROCESS
            for everything else.
        """
        if is_dir:
            if should_exclude(path, self.config.exclude_folders):
                return VisitAction.SKIP_SUBTREE
            return VisitAction.DESCEND

        if should_exclude(os.path.basename(path), self.config.exclude_files):
            return VisitAction.SKIP_FILE
        return VisitAction.PROCESS

    def aggregate(
        self, root: Union[str, Path], output_path: Union[str, Path]
    ) -> AggregationResult:
        """Walk root and write all records to output_path.

        The output file is created (or truncated) before the walk starts. If
        the walk fails the file is left holding the records written so far.

        Args:
            root: Directory (or single file) to aggregate.
            output_path: Destination file.

        Returns:
            AggregationResult for the pass.

        Raises:
            OutputCreateError: If the output file cannot be created.
            TraversalError: If any entry cannot be accessed.
        """
        try:
            output = open(output_path, "wb")
        except OSError as e:
            raise OutputCreateError(
                f"Failed to create output file: {e}",
                path=str(output_path),
                original_error=e,
            ) from e

        with output:
            result = self.walk(root, output)

        result.output_path = str(output_path)
        return result

    def walk(self, root: Union[str, Path], stream: BinaryIO) -> AggregationResult:
        """Walk root depth-first, writing records to stream.

        The root itself is visited first, so a root directory matching an
        ExcludeFolders entry produces no records.

        Args:
            root: Directory (or single file) to aggregate.
            stream: Binary stream receiving the records.

        Returns:
            AggregationResult for the pass.

        Raises:
            TraversalError: If any entry cannot be accessed.
        """
        root = os.fspath(root)
        result = AggregationResult()

        if not os.path.lexists(root):
            error = FileNotFoundError(f"No such file or directory: '{root}'")
            raise self._traversal_error(root, "stat", error)

        # The root is followed if it is a symlink, its children are not
        self._visit(root, os.path.isdir(root), stream, result)
        return result

    def _visit(
        self, path: str, is_dir: bool, stream: BinaryIO, result: AggregationResult
    ) -> None:
        action = self.classify(path, is_dir)

        if action is VisitAction.SKIP_SUBTREE:
            logger.info(f"Skipping folder: {path}")
            result.folders_skipped += 1
            return

        if action is VisitAction.SKIP_FILE:
            logger.info(f"Skipping file: {path}")
            result.files_skipped += 1
            return

        if action is VisitAction.PROCESS:
            self._process_file(path, stream, result)
            return

        for entry in self._list_entries(path):
            entry_path = os.path.join(path, entry.name)
            try:
                # Symlinked directories are not descended into
                entry_is_dir = entry.is_dir(follow_symlinks=False)
            except OSError as e:
                raise self._traversal_error(entry_path, "stat", e) from e
            self._visit(entry_path, entry_is_dir, stream, result)

    def _list_entries(self, directory: str) -> List[os.DirEntry]:
        try:
            with os.scandir(directory) as it:
                return sorted(it, key=lambda entry: entry.name)
        except OSError as e:
            raise self._traversal_error(directory, "list", e) from e

    def _process_file(
        self, path: str, stream: BinaryIO, result: AggregationResult
    ) -> None:
        logger.info(f"Processing file: {path}")

        try:
            with open(path, "rb") as f:
                content = f.read()
        except OSError as e:
            raise self._traversal_error(path, "read", e) from e

        header = format_header(path)
        stream.write(header)
        stream.write(content)
        stream.write(RECORD_TERMINATOR)

        result.files_processed += 1
        result.bytes_written += len(header) + len(content) + len(RECORD_TERMINATOR)

    @staticmethod
    def _traversal_error(path: str, operation: str, error: Exception) -> TraversalError:
        return TraversalError(
            f"Error accessing path {path}: {error}",
            path=path,
            operation=operation,
            original_error=error,
        )
