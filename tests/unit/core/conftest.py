"""Shared fixtures for core unit tests"""

import io

import pytest

from fmfix.core.engine import ScriptEngine


@pytest.fixture(name="out")
def out_fixture():
    return io.StringIO()


@pytest.fixture(name="make_engine")
def make_engine_fixture(out):
    """Build a ScriptEngine writing to in-memory streams; stdin defaults to empty."""
    def _make(script=None, stdin="", **kwargs):
        return ScriptEngine(
            script,
            stdin=io.StringIO(stdin),
            stdout=out,
            stderr=kwargs.pop("stderr", io.StringIO()),
            **kwargs,
        )
    return _make
