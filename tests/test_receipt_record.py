"""Tests for ReceiptRecord and LineItem."""

import dataclasses
import json

import pytest

from receipt_ocr.extraction import LineItem, ReceiptRecord


@pytest.fixture
def record() -> ReceiptRecord:
    """Create a record with some fields absent."""
    return ReceiptRecord(
        raw_text="QUICK MART\nMilk 3.99\nBread 2.49\nTotal: $7.00",
        merchant="QUICK MART",
        total=7.0,
        items=[LineItem("Milk", 3.99), LineItem("Bread", 2.49)],
    )


class TestLineItem:
    """Tests for LineItem."""

    def test_to_dict(self) -> None:
        """Test dictionary conversion."""
        assert LineItem("Milk", 3.99).to_dict() == {"name": "Milk", "price": 3.99}

    def test_name_only(self) -> None:
        """Test an item without a price."""
        item = LineItem.from_dict({"name": "Bag"})

        assert item.price is None
        assert item.to_dict() == {"name": "Bag", "price": None}

    def test_frozen(self) -> None:
        """Test items cannot be modified."""
        with pytest.raises(dataclasses.FrozenInstanceError):
            LineItem("Milk", 3.99).price = 1.0


class TestReceiptRecord:
    """Tests for ReceiptRecord."""

    def test_items_stored_as_tuple(self, record: ReceiptRecord) -> None:
        """Test a list of items becomes a tuple."""
        assert isinstance(record.items, tuple)
        assert record.item_count == 2

    def test_frozen(self, record: ReceiptRecord) -> None:
        """Test records cannot be modified."""
        with pytest.raises(dataclasses.FrozenInstanceError):
            record.total = 1.0

    def test_extracted_and_missing_fields(self, record: ReceiptRecord) -> None:
        """Test field presence helpers."""
        assert record.extracted_fields == {"merchant": "QUICK MART", "total": 7.0}
        assert record.missing_fields == ["date", "tax", "subtotal"]

    def test_items_total(self, record: ReceiptRecord) -> None:
        """Test the informational item sum."""
        assert record.items_total == 6.48

    def test_items_total_skips_missing_prices(self) -> None:
        """Test name-only items do not count."""
        record = ReceiptRecord(raw_text="", items=[LineItem("Bag"), LineItem("Milk", 1.5)])

        assert record.items_total == 1.5

    def test_to_dict_omits_absent_fields(self, record: ReceiptRecord) -> None:
        """Test absent fields are omitted rather than null."""
        data = record.to_dict()

        assert "date" not in data
        assert "tax" not in data
        assert "subtotal" not in data
        assert data["items"] == [{"name": "Milk", "price": 3.99}, {"name": "Bread", "price": 2.49}]
        assert data["raw_text"] == record.raw_text

    def test_zero_is_not_absent(self) -> None:
        """Test a zero amount is serialized."""
        data = ReceiptRecord(raw_text="Tax: 0.00", tax=0.0).to_dict()

        assert data["tax"] == 0.0

    def test_to_json(self, record: ReceiptRecord) -> None:
        """Test JSON serialization."""
        data = json.loads(record.to_json())

        assert data["merchant"] == "QUICK MART"
        assert data["total"] == 7.0
        assert len(data["items"]) == 2

    def test_to_json_keeps_unicode(self) -> None:
        """Test non-ASCII text is not escaped."""
        text = ReceiptRecord(raw_text="CAFÉ", merchant="CAFÉ").to_json()

        assert "CAFÉ" in text

    def test_from_dict_restores_record(self, record: ReceiptRecord) -> None:
        """Test a stored dictionary gives back an equal record."""
        assert ReceiptRecord.from_dict(record.to_dict()) == record

    def test_from_dict_tolerates_missing_keys(self) -> None:
        """Test a sparse dictionary."""
        restored = ReceiptRecord.from_dict({"total": "12.5"})

        assert restored.raw_text == ""
        assert restored.total == 12.5
        assert restored.items == ()
