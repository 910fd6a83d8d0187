"""
🧪 Pytest Configuration for TableView

This conftest.py sets up shared fixtures for the test suite:
- Runtime CONFIG overrides restored after each test
- Small reference datasets
"""

import pytest

from config import CONFIG


# ============================================================================
# 🔧 Fixtures
# ============================================================================

@pytest.fixture
def set_config():
    """Override CONFIG values for one test; originals are restored afterwards."""
    originals = {}

    def _set(key, value):
        if key not in originals:
            originals[key] = CONFIG.get(key)
        CONFIG.update(key, value)

    yield _set

    for key, value in originals.items():
        CONFIG.update(key, value)


@pytest.fixture
def xy_data():
    """Two labeled entries of two cells each."""
    return {"x": [1, 2], "y": [3, 4]}


@pytest.fixture
def wide_data():
    """Three labeled entries of four cells each."""
    return {
        "a": [1, 2, 3, 4],
        "b": [5, 6, 7, 8],
        "c": [9, 10, 11, 12],
    }


# ============================================================================
# 🎨 Pytest Configuration & Markers
# ============================================================================

def pytest_configure(config):
    config.addinivalue_line("markers", "unit: marks tests as unit tests")
    config.addinivalue_line("markers", "integration: marks tests as integration tests")
