"""Global test fixtures for our-mls-core test suite."""

from __future__ import annotations

import os
from typing import Any

import pytest


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests (no external dependencies)")
    config.addinivalue_line("markers", "vectors: Known-answer tests against fixed vectors")


# ============================================================================
# Environment Fixtures
# ============================================================================


@pytest.fixture(autouse=True)
def reset_config() -> Any:
    """Start every test from default settings."""
    from our_mls.config import clear_config_cache

    clear_config_cache()
    yield
    clear_config_cache()


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> Any:
    """Remove all OUR_MLS_ environment variables."""
    for key in list(os.environ.keys()):
        if key.startswith("OUR_MLS_"):
            monkeypatch.delenv(key, raising=False)
    yield


# ============================================================================
# Key Fixtures
# ============================================================================


@pytest.fixture
def identity() -> Any:
    """A fresh random signing identity."""
    from our_mls.keys import Identity

    with Identity.random() as ident:
        yield ident


@pytest.fixture
def recipient() -> Any:
    """A fresh X25519 recipient keypair."""
    from our_mls.keys import X25519KeyPair

    with X25519KeyPair.generate_random() as key_pair:
        yield key_pair
