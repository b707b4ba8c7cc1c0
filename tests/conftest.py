from __future__ import annotations

import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT / "src") not in sys.path:
    sys.path.insert(0, str(ROOT / "src"))


import pytest

from chainmock.container import DoubleContainer

pytest_plugins = ("chainmock.pytest_plugin", "pytester")


@pytest.fixture
def container():
    container = DoubleContainer()
    try:
        yield container
    finally:
        container.teardown()


class Engine:
    def __init__(self, cylinders: int = 4):
        self.cylinders = cylinders

    def start(self) -> str:
        return "vroom"

    def displacement(self, per_cylinder: float) -> float:
        return per_cylinder * self.cylinders


@pytest.fixture
def engine() -> Engine:
    return Engine()
