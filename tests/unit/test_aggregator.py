"""
Unit tests for the aggregator module.
"""

import io
import logging
import os

import pytest

from codex.aggregation.aggregator import (
    AggregationResult,
    Aggregator,
    VisitAction,
    format_header,
)
from codex.utils.config_loader import ExclusionConfig
from codex.utils.error_handlers import OutputCreateError, TraversalError


def walk_to_bytes(config, root):
    stream = io.BytesIO()
    result = Aggregator(config).walk(root, stream)
    return stream.getvalue(), result


class TestClassify:
    """Tests for Aggregator.classify."""

    def setup_method(self):
        self.aggregator = Aggregator(ExclusionConfig(["vendor"], ["go.sum"]))

    def test_excluded_directory_skips_subtree(self):
        assert (
            self.aggregator.classify("proj/vendor", is_dir=True)
            is VisitAction.SKIP_SUBTREE
        )

    def test_directory_matches_on_full_path(self):
        """Test that any ancestor in the path triggers the prune."""
        assert (
            self.aggregator.classify("proj/vendor/pkg/sub", is_dir=True)
            is VisitAction.SKIP_SUBTREE
        )

    def test_other_directory_descends(self):
        assert self.aggregator.classify("proj/cmd", is_dir=True) is VisitAction.DESCEND

    def test_excluded_file_is_skipped(self):
        assert self.aggregator.classify("proj/go.sum", is_dir=False) is VisitAction.SKIP_FILE

    def test_file_matches_on_base_name_only(self):
        """Test that a folder entry in the path does not exclude a file."""
        aggregator = Aggregator(ExclusionConfig([], ["vendor"]))

        assert aggregator.classify("vendor/main.go", is_dir=False) is VisitAction.PROCESS

    def test_other_file_is_processed(self):
        assert self.aggregator.classify("proj/main.go", is_dir=False) is VisitAction.PROCESS


class TestFormatHeader:
    """Tests for format_header function."""

    def test_header_layout(self):
        assert format_header("proj/main.go") == b"##### proj/main.go #####\n\n"


class TestWalk:
    """Tests for Aggregator.walk."""

    def test_record_layout(self, make_tree):
        """Test header, blank line, raw bytes, two newlines."""
        make_tree({"proj/main.go": b"package m\n"})

        data, result = walk_to_bytes(ExclusionConfig(), "proj")

        assert data == b"##### proj/main.go #####\n\npackage m\n\n\n"
        assert result.files_processed == 1
        assert result.bytes_written == len(data)

    def test_raw_bytes_are_verbatim(self, make_tree):
        """Test that binary and non-UTF-8 content is copied unchanged."""
        payload = b"\x00\xff\xfe latin-1 \xe9\r\n"
        make_tree({"proj/blob.bin": payload})

        data, _ = walk_to_bytes(ExclusionConfig(), "proj")

        assert data == format_header("proj/blob.bin") + payload + b"\n\n"

    def test_empty_file_still_gets_a_record(self, make_tree):
        make_tree({"proj/empty.txt": b""})

        data, _ = walk_to_bytes(ExclusionConfig(), "proj")

        assert data == b"##### proj/empty.txt #####\n\n\n\n"

    def test_depth_first_name_order(self, make_tree, record_headers):
        """Test that entries are visited depth-first in name order."""
        make_tree(
            {
                "proj/b.txt": "b",
                "proj/a/z.txt": "z",
                "proj/a/deep/y.txt": "y",
                "proj/c/x.txt": "x",
            }
        )

        data, _ = walk_to_bytes(ExclusionConfig(), "proj")

        assert record_headers(data) == [
            os.path.join("proj", "a", "deep", "y.txt"),
            os.path.join("proj", "a", "z.txt"),
            os.path.join("proj", "b.txt"),
            os.path.join("proj", "c", "x.txt"),
        ]

    def test_excluded_folder_prunes_subtree(self, make_tree, record_headers):
        make_tree(
            {
                "proj/main.go": "package m\n",
                "proj/vendor/lib.go": "package lib\n",
                "proj/vendor/nested/more.go": "package nested\n",
            }
        )

        data, result = walk_to_bytes(ExclusionConfig(["vendor"], []), "proj")

        assert record_headers(data) == [os.path.join("proj", "main.go")]
        assert result.folders_skipped == 1

    def test_excluded_file_is_skipped_and_walk_continues(
        self, make_tree, record_headers
    ):
        make_tree({"proj/a.go": "a", "proj/go.sum": "sum", "proj/z.go": "z"})

        data, result = walk_to_bytes(ExclusionConfig([], ["go.sum"]), "proj")

        assert record_headers(data) == [
            os.path.join("proj", "a.go"),
            os.path.join("proj", "z.go"),
        ]
        assert result.files_skipped == 1

    def test_folder_substring_over_matches(self, make_tree, record_headers):
        """Test that `.git` also prunes `.gitbackup` but not `gitbackup`."""
        make_tree(
            {
                "proj/.git/HEAD": "ref",
                "proj/.gitbackup/old.txt": "old",
                "proj/gitbackup/kept.txt": "kept",
            }
        )

        data, result = walk_to_bytes(ExclusionConfig([".git"], []), "proj")

        assert record_headers(data) == [os.path.join("proj", "gitbackup", "kept.txt")]
        assert result.folders_skipped == 2

    def test_file_substring_over_matches(self, make_tree, record_headers):
        """Test that `dist` as a file entry also skips `distiller.py`."""
        make_tree({"proj/distiller.py": "x", "proj/app.py": "y"})

        data, _ = walk_to_bytes(ExclusionConfig([], ["dist"]), "proj")

        assert record_headers(data) == [os.path.join("proj", "app.py")]

    def test_glob_entries_do_not_glob(self, make_tree, record_headers):
        """Test that `*.log` does not exclude app.log."""
        make_tree({"proj/app.log": "line\n"})

        data, _ = walk_to_bytes(ExclusionConfig([], ["*.log"]), "proj")

        assert record_headers(data) == [os.path.join("proj", "app.log")]

    def test_root_matching_folder_exclusion_yields_nothing(self, make_tree):
        """Test that the root is checked like any other folder."""
        make_tree({"build-tools/main.js": "x"})

        data, result = walk_to_bytes(ExclusionConfig(["build"], []), "build-tools")

        assert data == b""
        assert result.folders_skipped == 1

    def test_root_file_is_aggregated(self, make_tree):
        """Test that a file root produces a single record."""
        make_tree({"single.txt": "hello"})

        data, _ = walk_to_bytes(ExclusionConfig(), "single.txt")

        assert data == b"##### single.txt #####\n\nhello\n\n"

    def test_missing_root_raises(self, workdir):
        with pytest.raises(TraversalError) as exc_info:
            walk_to_bytes(ExclusionConfig(), "missingdir")

        assert exc_info.value.path == "missingdir"

    def test_broken_symlink_aborts_walk(self, make_tree):
        """Test that an unreadable entry aborts the whole walk."""
        make_tree({"proj/a.txt": "a", "proj/z.txt": "z"})
        os.symlink("does-not-exist", os.path.join("proj", "m.txt"))
        stream = io.BytesIO()

        with pytest.raises(TraversalError) as exc_info:
            Aggregator(ExclusionConfig()).walk("proj", stream)

        assert exc_info.value.operation == "read"
        assert exc_info.value.path == os.path.join("proj", "m.txt")
        # Records before the failure were written, later ones were not
        assert b"a.txt" in stream.getvalue()
        assert b"z.txt" not in stream.getvalue()

    def test_symlinked_directory_is_not_descended(self, make_tree):
        """Test that a link to a directory is read as a file and fails."""
        make_tree({"outside/secret.txt": "s", "proj/a.txt": "a"})
        os.symlink(os.path.abspath("outside"), os.path.join("proj", "linked"))

        with pytest.raises(TraversalError):
            walk_to_bytes(ExclusionConfig(), "proj")

    def test_logs_each_decision(self, make_tree, caplog):
        caplog.set_level(logging.INFO, logger="codex")
        make_tree({"proj/main.go": "m", "proj/go.sum": "s", "proj/vendor/l.go": "l"})

        walk_to_bytes(ExclusionConfig(["vendor"], ["go.sum"]), "proj")

        messages = [record.getMessage() for record in caplog.records]
        assert f"Skipping file: {os.path.join('proj', 'go.sum')}" in messages
        assert f"Processing file: {os.path.join('proj', 'main.go')}" in messages
        assert f"Skipping folder: {os.path.join('proj', 'vendor')}" in messages


class TestAggregate:
    """Tests for Aggregator.aggregate."""

    def test_writes_output_file(self, make_tree):
        make_tree({"proj/main.go": b"package m\n"})

        result = Aggregator(ExclusionConfig()).aggregate("proj", "code.txt")

        assert isinstance(result, AggregationResult)
        assert result.output_path == "code.txt"
        with open("code.txt", "rb") as f:
            assert f.read() == b"##### proj/main.go #####\n\npackage m\n\n\n"

    def test_truncates_existing_output(self, make_tree):
        make_tree({"proj/a.txt": "a", "code.txt": "x" * 1000})

        Aggregator(ExclusionConfig()).aggregate("proj", "code.txt")

        with open("code.txt", "rb") as f:
            assert f.read() == b"##### proj/a.txt #####\n\na\n\n"

    def test_uncreatable_output_raises(self, make_tree):
        make_tree({"proj/a.txt": "a"})

        with pytest.raises(OutputCreateError):
            Aggregator(ExclusionConfig()).aggregate(
                "proj", os.path.join("no-such-dir", "code.txt")
            )

    def test_output_created_before_traversal_fails(self, workdir):
        """Test that the output exists even when the walk aborts."""
        with pytest.raises(TraversalError):
            Aggregator(ExclusionConfig()).aggregate("missingdir", "code.txt")

        assert os.path.exists("code.txt")
