"""Shared fixtures."""

import pytest


@pytest.fixture(autouse=True)
def _no_request_delay(monkeypatch):
    """Keep request pacing and stray NCBI settings out of tests."""
    monkeypatch.setenv("ENTREZ_REQUEST_DELAY", "0")
    monkeypatch.delenv("NCBI_API_KEY", raising=False)
    monkeypatch.delenv("NCBI_EMAIL", raising=False)
    monkeypatch.delenv("NCBI_TOOL", raising=False)
    monkeypatch.delenv("ENTREZ_BASE_URL", raising=False)
    monkeypatch.delenv("ENTREZ_TIMEOUT", raising=False)
