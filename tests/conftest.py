"""Pytest configuration for test environment setup.

- Forces ``DISABLE_FILE_LOGS=1`` to avoid writing log files during tests.
- Ensures the project root is available on ``sys.path`` for imports.
- Provides in-memory standard streams for runs and CLI invocations.
"""

import io
import os
import sys

os.environ.setdefault("DISABLE_FILE_LOGS", "1")  # Avoid creating log files during tests
from pathlib import Path

import pytest

# Ensure project root is on sys.path
ROOT = Path(__file__).resolve().parents[1]
root_str = str(ROOT)
if root_str not in sys.path:
    sys.path.insert(0, root_str)

from csvplate.console import ConsoleReporter  # noqa: E402
from csvplate.pipeline.rendering.runner import StandardStreams  # noqa: E402


def _make_streams(stdin: bytes = b"") -> StandardStreams:
    return StandardStreams(io.BytesIO(stdin), io.StringIO(), io.StringIO())


@pytest.fixture
def make_streams():
    """Factory building in-memory streams, optionally with stdin content."""
    return _make_streams


@pytest.fixture
def streams() -> StandardStreams:
    """Empty in-memory standard streams."""
    return _make_streams()


@pytest.fixture
def reporter(streams: StandardStreams) -> ConsoleReporter:
    """Console reporter bound to the ``streams`` fixture."""
    return ConsoleReporter(streams.stdout, streams.stderr)
