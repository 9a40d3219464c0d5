"""Pytest configuration and fixtures."""

import sys
from pathlib import Path

import pytest

# Add project root to sys.path for imports
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))


@pytest.fixture(autouse=True)
def reset_bootstrap():
    """Every test starts without a process-wide generation service."""
    from infra import InfraBootstrap

    InfraBootstrap.reset()
    yield
    InfraBootstrap.reset()
