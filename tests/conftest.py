"""
Shared fixtures.

Every test starts from default settings: LUXURY_HUNTER_* variables are
removed and the working directory holds no .env file.
"""
import os

import pytest

from luxury_hunter.core.config import reset_settings


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch, tmp_path):
    """Isolate each test from the process environment and cached settings."""
    for key in list(os.environ):
        if key.upper().startswith("LUXURY_HUNTER_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def brands():
    """Three-brand registry used by the fusion scenarios."""
    from luxury_hunter.evaluation.categories import CandidateRegistry
    return CandidateRegistry("brands", ["Louis Vuitton", "Gucci", "Chanel"])
