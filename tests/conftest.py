"""Shared fixtures for the receipt OCR test suite."""

from typing import Iterator

import pytest

from config import CONFIG_ENV_VAR, ConfigurationManager


SAMPLE_RECEIPT = (
    "QUICK MART\n"
    "04/12/2025\n"
    "Milk 3.99\n"
    "Bread 2.49\n"
    "Subtotal: $6.48\n"
    "Tax: $0.52\n"
    "Total: $7.00"
)


@pytest.fixture(autouse=True)
def fresh_config(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Give every test its own configuration singleton, read from config/settings.yaml."""
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
    ConfigurationManager.reset()
    yield
    ConfigurationManager.reset()


@pytest.fixture
def sample_receipt_text() -> str:
    """OCR text of a small grocery receipt."""
    return SAMPLE_RECEIPT
