"""Workspace-level pytest configuration and fixtures."""

import pytest


@pytest.fixture(autouse=True, scope="function")
def isolate_working_directory(tmp_path, monkeypatch):
    """Run every test from its own temporary working directory.

    Template caches are created relative to the working directory, so tests
    must not share (or pollute) the checkout.
    """
    monkeypatch.chdir(tmp_path)
    yield
