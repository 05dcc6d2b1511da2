"""
Shared pytest fixtures for sgf_service tests.

Sample records are plain strings (see tests/helpers.py); every test builds its
own trees from them so no parsed state is shared between tests.
"""

from pathlib import Path
import sys

import pytest


# =============================================================================
# PROMETHEUS REGISTRY FIX
# =============================================================================
# sgf_service/metrics.py registers collectors at import time. Re-importing it
# through a different path during collection would otherwise fail with
# "Duplicated timeseries in CollectorRegistry".


def _patch_prometheus_registry():
    """Make re-registration of identical collectors a no-op."""
    from prometheus_client.registry import CollectorRegistry

    _original_register = CollectorRegistry.register

    def _safe_register(self, collector):
        """Register collector, ignoring duplicates."""
        try:
            return _original_register(self, collector)
        except ValueError as e:
            if "Duplicated timeseries" not in str(e):
                raise

    # Only patch once
    if not getattr(CollectorRegistry, '_patched_for_tests', False):
        CollectorRegistry.register = _safe_register
        CollectorRegistry._patched_for_tests = True


# Apply patch immediately at conftest load time (before test collection)
_patch_prometheus_registry()

# Ensure the repository root is on sys.path so `import sgf_service` and
# `import tests.helpers` work without an editable install.
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from sgf_service.config import ServiceSettings  # noqa: E402
from tests.helpers import (  # noqa: E402
    BRANCHED_GAME,
    FULL_HEADER_GAME,
    SIMPLE_GAME,
    RecordingRenderer,
)


@pytest.fixture
def settings() -> ServiceSettings:
    """Default settings, independent of the test environment."""
    return ServiceSettings()


@pytest.fixture
def recording_renderer() -> RecordingRenderer:
    return RecordingRenderer()


@pytest.fixture
def simple_game() -> str:
    return SIMPLE_GAME


@pytest.fixture
def branched_game() -> str:
    return BRANCHED_GAME


@pytest.fixture
def full_header_game() -> str:
    return FULL_HEADER_GAME
