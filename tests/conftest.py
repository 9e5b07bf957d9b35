"""Pytest configuration file with fixtures shared across the JacobiKit tests."""

import pytest

import jacobikit.config as cfg

__all__ = ["reset_default_method"]


@pytest.fixture(autouse=True)
def reset_default_method(monkeypatch):
    """Keep module-wide method defaults from leaking between tests."""
    monkeypatch.setattr(cfg, "_DEFAULT_METHOD", None, raising=True)
    token = cfg._method_var.set(None)
    yield
    cfg._method_var.reset(token)
