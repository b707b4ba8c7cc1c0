"""pytest integration.

Enable with ``pytest_plugins = ["chainmock.pytest_plugin"]`` in the root
``conftest.py``. The ``doubles`` fixture yields a :class:`DoubleContainer`
that is also the current container for ``chainmock.double()``; its
expectations are verified after a passing test and partial doubles are
restored either way.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterator

import pytest

from chainmock.config import ChainMockConfig, load_chainmock_config
from chainmock.container import (
    DoubleContainer,
    reset_current_container,
    set_current_container,
)

_REPORTS_KEY = pytest.StashKey[dict[str, pytest.TestReport]]()


def pytest_addoption(parser: pytest.Parser) -> None:
    parser.addini(
        "chainmock_config",
        "Path of the chainmock TOML file, relative to rootdir.",
        default="",
    )


@pytest.hookimpl(hookwrapper=True, tryfirst=True)
def pytest_runtest_makereport(item: pytest.Item, call: pytest.CallInfo[None]):
    outcome = yield
    report = outcome.get_result()
    item.stash.setdefault(_REPORTS_KEY, {})[report.when] = report


def _session_config(config: pytest.Config) -> ChainMockConfig:
    raw_path = str(config.getini("chainmock_config") or "").strip()
    config_path = Path(config.rootpath, raw_path) if raw_path else None
    return load_chainmock_config(root=config.rootpath, config_path=config_path)


@pytest.fixture
def doubles(request: pytest.FixtureRequest) -> Iterator[DoubleContainer]:
    config = _session_config(request.config)
    container = DoubleContainer(config)
    token = set_current_container(container)
    try:
        yield container
        call_report = request.node.stash.get(_REPORTS_KEY, {}).get("call")
        if config.verify_on_teardown and (call_report is None or call_report.passed):
            container.verify()
    finally:
        reset_current_container(token)
        container.teardown()
