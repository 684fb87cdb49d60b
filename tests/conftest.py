"""Shared fixtures for the Caesar codec tests."""

from __future__ import annotations

import io
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import caesar  # noqa: E402
from tests.texts import PROSE  # noqa: E402


@pytest.fixture
def prose() -> str:
    return PROSE


@pytest.fixture
def prose_cipher() -> bytes:
    return caesar.encode_text(PROSE, 7).encode("utf-8")


class Lines(list):
    """Collects progress lines; usable as a reporter callable."""

    def __call__(self, line: str) -> None:
        self.append(line)

    def keys_tried(self) -> list[int]:
        return [int(line.split()[1]) for line in self if line.startswith("ключ ")]


@pytest.fixture
def lines() -> Lines:
    return Lines()


@pytest.fixture
def sink() -> io.BytesIO:
    return io.BytesIO()
