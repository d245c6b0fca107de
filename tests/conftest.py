"""
Pytest configuration and fixtures.
"""

import logging
import re
from pathlib import Path

import pytest

HEADER_PATTERN = re.compile(rb"^##### (.+) #####$", re.MULTILINE)


def pytest_configure(config):
    config.addinivalue_line("markers", "integration: end-to-end CLI tests")


@pytest.fixture(autouse=True)
def reset_codex_logger():
    """Drop handlers installed by setup_logging between tests."""
    yield
    package_logger = logging.getLogger("codex")
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
    package_logger.setLevel(logging.NOTSET)


@pytest.fixture(scope="function")
def workdir(tmp_path, monkeypatch):
    """Run the test from inside tmp_path so walked paths stay relative.

    Folder exclusions match against the full path, so an absolute tmp_path
    (which embeds the test name) could trip them.
    """
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture(scope="function")
def make_tree(workdir):
    """Create files under the working directory from a {path: content} map."""

    def _make_tree(files):
        for rel_path, content in files.items():
            path = workdir / rel_path
            path.parent.mkdir(parents=True, exist_ok=True)
            if isinstance(content, bytes):
                path.write_bytes(content)
            else:
                path.write_text(content, encoding="utf-8")
        return workdir

    return _make_tree


@pytest.fixture(scope="function")
def go_project(make_tree):
    """Create proj/ with go.mod, a 10-byte main.go and vendor/lib.go."""
    make_tree(
        {
            "proj/go.mod": "module example.com/proj\n",
            "proj/main.go": b"package m\n",
            "proj/vendor/lib.go": "package lib\n",
        }
    )
    return Path("proj")


@pytest.fixture
def record_headers():
    """Return a function listing the record header paths in an artifact."""

    def _record_headers(data: bytes):
        return [match.decode("utf-8") for match in HEADER_PATTERN.findall(data)]

    return _record_headers
