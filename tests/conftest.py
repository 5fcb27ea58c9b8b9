from __future__ import annotations

import sys
from pathlib import Path

import pytest

NODES = ("A", "B", "C", "D")
# A->B, B->C, B->D
PATH_EDGES = [("A", "B"), ("B", "C"), ("B", "D")]


def pytest_configure() -> None:
    src_root = Path(__file__).resolve().parents[1] / "src"
    src_path = str(src_root)
    if src_path not in sys.path:
        sys.path.insert(0, src_path)


@pytest.fixture
def path_edges() -> list[tuple[str, str]]:
    return list(PATH_EDGES)


@pytest.fixture
def directed_path_matrix() -> list[list[int]]:
    return [
        [0, 1, 0, 0],
        [0, 0, 1, 1],
        [0, 0, 0, 0],
        [0, 0, 0, 0],
    ]
