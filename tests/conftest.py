"""Shared fixtures keeping the process-wide environment isolated per test."""

from __future__ import annotations

import pytest

from canonbuf import environment


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch: pytest.MonkeyPatch):
    for name in (
        "CANONBUF_DEBUG",
        "CANONBUF_DEFAULT_ENCODING",
        "CANONBUF_SPARSE_WARNING_THRESHOLD",
    ):
        monkeypatch.delenv(name, raising=False)
    environment.reset_environment()
    yield
    environment.reset_environment()
