"""Pytest configuration to make the local package importable without installation."""
import sys
from pathlib import Path
from typing import List

import pytest

# Ensure repository root is on sys.path for module resolution
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from orderflow.core.models import RawImportRow
from orderflow.storage.memory import MemoryStore


@pytest.fixture(autouse=True)
def disable_ai(monkeypatch: pytest.MonkeyPatch) -> None:
    """Disable remote LLM calls during tests to avoid token usage."""

    monkeypatch.setenv("AI_STRUCTURING_DISABLED", "1")
    monkeypatch.setenv("ORDERFLOW_ENV_FILE", "does-not-exist.env")


@pytest.fixture
def memory_store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def sample_rows() -> List[RawImportRow]:
    """Two customers ordering rice and fish, one with an explicit sheet price."""

    return [
        RawImportRow(
            customer_name="Nguyễn Văn An",
            address="12 Lê Lợi, Quận 1",
            phone="0912 345 678",
            items_raw="nan2.375 cá trác2",
            unit_price=120,
        ),
        RawImportRow(
            customer_name="Trần Thị Bình",
            address="45 Hai Bà Trưng",
            phone=None,
            items_raw="gạo",
            unit_price=0,
        ),
    ]
