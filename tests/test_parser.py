"""Tests for the receipt parser (result assembler)."""

import time
from unittest.mock import MagicMock

import pytest

from receipt_ocr.extraction import LineItem, ReceiptParser, ReceiptRecord, parse_receipt_text


@pytest.fixture
def parser() -> ReceiptParser:
    """Create a parser with default extractors."""
    return ReceiptParser()


class TestEndToEnd:
    """Tests for a complete receipt."""

    def test_grocery_receipt(self, parser: ReceiptParser, sample_receipt_text: str) -> None:
        """Test every field of a small grocery receipt."""
        record = parser.parse(sample_receipt_text)

        assert record.merchant == "QUICK MART"
        assert record.date == "04/12/2025"
        assert record.subtotal == 6.48
        assert record.tax == 0.52
        assert record.total == 7.00
        assert record.items == (LineItem("Milk", 3.99), LineItem("Bread", 2.49))
        assert record.raw_text == sample_receipt_text

    def test_serialized_shape(self, parser: ReceiptParser, sample_receipt_text: str) -> None:
        """Test the JSON-compatible output shape."""
        data = parser.parse(sample_receipt_text).to_dict()

        assert data == {
            "merchant": "QUICK MART",
            "date": "04/12/2025",
            "total": 7.0,
            "tax": 0.52,
            "subtotal": 6.48,
            "items": [{"name": "Milk", "price": 3.99}, {"name": "Bread", "price": 2.49}],
            "raw_text": sample_receipt_text,
        }

    def test_items_and_total(self, parser: ReceiptParser) -> None:
        """Test items are collected and the total line is not an item."""
        record = parser.parse("Widget A  $12.99\nWidget B 7.50\nTOTAL: $20.49")

        assert [(i.name, i.price) for i in record.items] == [("Widget A", 12.99), ("Widget B", 7.5)]
        assert record.total == 20.49


class TestSubtotalSpellings:
    """Tests for subtotal lines written with a space or hyphen."""

    @pytest.mark.parametrize("label", ["Sub Total", "Sub-Total", "SUB TOTAL"])
    def test_total_not_taken_from_subtotal_line(self, parser: ReceiptParser, label: str) -> None:
        """Test the subtotal line feeds only the subtotal field."""
        record = parser.parse(f"QUICK MART\n{label}: $6.48\nTax: $0.52\nTotal: $7.00")

        assert record.subtotal == 6.48
        assert record.tax == 0.52
        assert record.total == 7.00


class TestTotality:
    """Tests that parsing never raises."""

    @pytest.mark.parametrize(
        "text",
        [
            "",
            "   ",
            "\n\n\n",
            "no data here at all",
            "Total: ,,,\nTax: ,\nSubtotal: ,",
            "\x00\x01\x02",
            "€€€ ¥¥¥ 12/34/5678 Total: 999999999999999999999999.99",
            "a" * 10000,
        ],
    )
    def test_never_raises(self, parser: ReceiptParser, text: str) -> None:
        """Test odd inputs still produce a record."""
        record = parser.parse(text)

        assert isinstance(record, ReceiptRecord)
        assert isinstance(record.items, tuple)
        assert record.raw_text == text

    def test_empty_record(self, parser: ReceiptParser) -> None:
        """Test empty input yields a record with every field absent."""
        record = parser.parse("")

        assert record.missing_fields == ["merchant", "date", "total", "tax", "subtotal"]
        assert record.items == ()
        assert record.to_dict() == {"items": [], "raw_text": ""}

    def test_none_input(self, parser: ReceiptParser) -> None:
        """Test None is treated as empty text."""
        record = parser.parse(None)

        assert record.raw_text == ""
        assert record.extracted_fields == {}

    def test_bytes_input(self, parser: ReceiptParser) -> None:
        """Test bytes are decoded as UTF-8."""
        record = parser.parse("CAFÉ ROUGE\nTotal: €4.50".encode("utf-8"))

        assert record.merchant == "CAFÉ ROUGE"
        assert record.total == 4.5

    def test_invalid_utf8_bytes(self, parser: ReceiptParser) -> None:
        """Test undecodable bytes are replaced rather than raising."""
        record = parser.parse(b"\xff\xfeSHOP NAME\nTotal: 1.00")

        assert record.total == 1.0

    def test_other_objects_use_str(self, parser: ReceiptParser) -> None:
        """Test a non-text object is parsed through its string form."""
        record = parser.parse(42)

        assert record.raw_text == "42"
        assert record.items == ()

    def test_unprintable_object(self, parser: ReceiptParser) -> None:
        """Test an object whose str() raises gives the empty record."""

        class Unprintable:
            def __str__(self) -> str:
                raise RuntimeError("no text")

        record = parser.parse(Unprintable())

        assert record.raw_text == ""
        assert record.merchant is None
        assert record.items == ()


class TestLongLines:
    """Tests that parsing time stays linear in line length."""

    @pytest.mark.parametrize(
        "text",
        [
            "total" + " " * 50000 + "x",
            "a" + " " * 50000 + "111",
            "Tax:" + " :" * 25000 + "$",
            "Milk" + " " * 50000 + "$3.9",
        ],
    )
    def test_long_whitespace_runs(self, parser: ReceiptParser, text: str) -> None:
        """Test a single line with a long whitespace run parses quickly."""
        started = time.perf_counter()
        record = parser.parse(text)
        elapsed = time.perf_counter() - started

        assert elapsed < 2.0
        assert record.total is None
        assert record.tax is None
        assert record.items == ()

    def test_long_gap_before_item_price(self, parser: ReceiptParser) -> None:
        """Test an item separated from its price by a long run of spaces."""
        record = parser.parse("Milk" + " " * 50000 + "3.99")

        assert record.items == (LineItem("Milk", 3.99),)


class TestRawTextFidelity:
    """Tests that raw_text is the input verbatim."""

    @pytest.mark.parametrize(
        "text",
        ["  QUICK MART  \r\n\r\nTotal: 1.00\n\n", "\tTabbed\tText\t", "line\rline"],
    )
    def test_raw_text_unchanged(self, parser: ReceiptParser, text: str) -> None:
        """Test whitespace and line breaks are kept exactly."""
        assert parser.parse(text).raw_text == text


class TestFieldIndependence:
    """Tests that fields do not affect each other."""

    def test_total_without_tax_or_subtotal(self, parser: ReceiptParser) -> None:
        """Test absent tax and subtotal do not affect total."""
        record = parser.parse("CORNER SHOP\nTotal: $9.99")

        assert record.total == 9.99
        assert record.tax is None
        assert record.subtotal is None

    def test_no_cross_field_reconciliation(self, parser: ReceiptParser) -> None:
        """Test inconsistent amounts are kept as printed."""
        record = parser.parse("Subtotal: 10.00\nTax: 1.00\nTotal: 50.00")

        assert (record.subtotal, record.tax, record.total) == (10.0, 1.0, 50.0)

    def test_line_shared_by_two_fields(self, parser: ReceiptParser) -> None:
        """Test one line can feed more than one field."""
        record = parser.parse("Total Tax: 2.00")

        assert record.tax == 2.0
        assert record.total is None

    def test_first_match_per_field(self, parser: ReceiptParser) -> None:
        """Test each field keeps its topmost value."""
        record = parser.parse("Tax: 1.00\nTotal: 5.00\nTax: 2.00\nTotal: 6.00\n01/02/2024\n03/04/2025")

        assert record.tax == 1.0
        assert record.total == 5.0
        assert record.date == "01/02/2024"


class TestInjection:
    """Tests for custom extractors."""

    def test_custom_extractors_are_used(self) -> None:
        """Test injected extractors receive the normalized lines."""
        merchant = MagicMock()
        merchant.extract.return_value = "INJECTED"

        record = ReceiptParser(merchant_extractor=merchant).parse("  a \n\n b ")

        merchant.extract.assert_called_once_with(("a", "b"))
        assert record.merchant == "INJECTED"


class TestParseReceiptText:
    """Tests for the module-level convenience function."""

    def test_matches_parser(self, sample_receipt_text: str) -> None:
        """Test the shared parser gives the same record."""
        assert parse_receipt_text(sample_receipt_text) == ReceiptParser().parse(sample_receipt_text)

    def test_repeated_calls_are_independent(self) -> None:
        """Test no state is kept across calls."""
        first = parse_receipt_text("SHOP ONE\nTotal: 1.00")
        second = parse_receipt_text("no amounts")

        assert first.total == 1.0
        assert second.total is None
        assert second.merchant is None
