import importlib
from typing import Any

import pytest


def import_required(module_name: str):
    """
    Import a project module with a clearer failure message than ModuleNotFoundError.
    """
    try:
        return importlib.import_module(module_name)
    except ModuleNotFoundError as e:
        pytest.fail(
            f"Required module '{module_name}.py' not found. "
            f"Original error: {e}"
        )


@pytest.fixture
def maze_module():
    return import_required("maze")


@pytest.fixture
def main_module():
    return import_required("main")


class OrderedRandom:
    """
    Scripted random source: shuffle keeps the given order, sample takes the first k.
    Makes generation fully predictable by hand.
    """

    def shuffle(self, x: list[Any]) -> None:
        return None

    def sample(self, population, k: int) -> list[Any]:
        return list(population)[:k]


@pytest.fixture
def ordered_rng():
    return OrderedRandom()

