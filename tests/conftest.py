#!/usr/bin/env python3
"""Shared pytest fixtures for galaxy-lite test suite."""

import pytest
import io
import pathlib
import sys
from typing import Any, Dict, List
from unittest.mock import MagicMock

# Add parent directory to path for imports
sys.path.insert(0, str(pathlib.Path(__file__).parent.parent))

from tests.fixtures.generate_test_data import (
    SOL,
    generate_galaxy_dump,
    generate_system,
    gzip_json,
)
from shared.diagnostics import Diagnostics


# ============================================================================
# File Fixtures
# ============================================================================

@pytest.fixture
def sol_gz_file(tmp_path) -> pathlib.Path:
    """A dump holding only Sol."""
    path = tmp_path / "sol.json.gz"
    path.write_bytes(gzip_json([SOL]))
    return path


@pytest.fixture
def small_galaxy_file(tmp_path) -> pathlib.Path:
    """A dump with 100 systems, two stars and three planets each."""
    path = tmp_path / "small.json.gz"
    generate_galaxy_dump(100, str(path), stars=2, planets=3)
    return path


@pytest.fixture
def large_galaxy_file(tmp_path) -> pathlib.Path:
    """A dump with 20000 systems."""
    path = tmp_path / "large.json.gz"
    generate_galaxy_dump(20000, str(path))
    return path


@pytest.fixture
def plain_json_file(tmp_path) -> pathlib.Path:
    """Valid JSON that was never compressed."""
    path = tmp_path / "plain.json"
    path.write_text('[{"id64": 1}]')
    return path


# ============================================================================
# Mock Fixtures
# ============================================================================

@pytest.fixture
def mock_logger():
    return MagicMock()


@pytest.fixture
def diagnostics(mock_logger) -> Diagnostics:
    """Diagnostics sink that records calls on a mock logger."""
    return Diagnostics(mock_logger)


@pytest.fixture
def output_sink() -> io.BytesIO:
    return io.BytesIO()


@pytest.fixture
def clean_environment(monkeypatch):
    """Ensure a clean environment for tests."""
    for var in ['GALAXY_BYTE_CEILING', 'IN_CONTAINER']:
        monkeypatch.delenv(var, raising=False)
    yield


# ============================================================================
# Test Data Fixtures
# ============================================================================

@pytest.fixture
def sol_record() -> Dict[str, Any]:
    return dict(SOL)


@pytest.fixture
def sample_systems() -> List[Dict[str, Any]]:
    return [generate_system(i, stars=2, planets=2) for i in range(10)]


# ============================================================================
# Test Markers
# ============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "slow: marks tests as slow")
    config.addinivalue_line("markers", "integration: marks integration tests")
    config.addinivalue_line("markers", "benchmark: marks benchmark tests")
