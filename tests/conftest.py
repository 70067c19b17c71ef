"""Root test configuration: isolate tests from the caller's FMFIX_* environment"""

import os

import pytest


@pytest.fixture(autouse=True)
def clean_fmfix_env(monkeypatch):
    """Drop FMFIX_* env vars so settings only come from what each test sets."""
    for name in list(os.environ):
        if name.startswith("FMFIX_"):
            monkeypatch.delenv(name)
