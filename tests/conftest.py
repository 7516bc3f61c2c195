import asyncio
import os

import pytest

from hivelang.runtime.config import RuntimeConfig
from hivelang.runtime.interpreter import Interpreter
from hivelang.tools.observability import clear_tool_interceptors


@pytest.fixture(autouse=True)
def _isolated_environment(monkeypatch):
    """Keep HIVE_* settings from the developer shell out of the tests."""
    for name in list(os.environ):
        if name.startswith("HIVE_"):
            monkeypatch.delenv(name, raising=False)
    clear_tool_interceptors()
    yield
    clear_tool_interceptors()


@pytest.fixture
def interpreter():
    return Interpreter(config=RuntimeConfig(tool_timeout_seconds=1.0))


@pytest.fixture
def run(interpreter):
    """Run a script on the shared interpreter and return its ExecutionResult."""

    def _run(source, input_value="", variables=None):
        return asyncio.run(interpreter.run(source, input_value, variables))

    return _run
