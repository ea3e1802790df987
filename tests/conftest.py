import io
import logging
import sys

import pytest

SCENARIO_MATRIX = b"kmerA 0 0 0 50 60\nkmerB 10 10 10 10 10\n"


@pytest.fixture
def scenario_matrix():
    return SCENARIO_MATRIX


@pytest.fixture
def matrix_file(tmp_path):
    """Write bytes to a matrix file and return its path."""
    def _write(content, name="counts.mat"):
        path = tmp_path / name
        path.write_bytes(content)
        return path
    return _write


@pytest.fixture
def stdin_bytes(monkeypatch):
    """Replace standard input with the given bytes."""
    def _set(content):
        stream = io.TextIOWrapper(io.BytesIO(content))
        monkeypatch.setattr(sys, "stdin", stream)
        return stream
    return _set


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Drop handlers installed by setup_logger so they never outlive a test."""
    yield
    logger = logging.getLogger("km_tools")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
