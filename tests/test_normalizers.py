"""Tests for date normalization."""

import pytest

from receipt_ocr.postprocessor import DateNormalizer


class TestDateNormalizer:
    """Tests for DateNormalizer."""

    def test_default_is_month_first(self) -> None:
        """Test the configured default locale."""
        normalizer = DateNormalizer()

        assert normalizer.dayfirst is False
        assert normalizer.normalize("03/04/2025") == "2025-03-04"

    def test_day_first(self) -> None:
        """Test the explicit day-first assumption."""
        assert DateNormalizer(dayfirst=True).normalize("03/04/2025") == "2025-04-03"

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("2025-04-12", "2025-04-12"),
            ("Apr 12, 2025", "2025-04-12"),
            ("December 3 24", "2024-12-03"),
            ("4-12-25", "2025-04-12"),
        ],
    )
    def test_shapes(self, text: str, expected: str) -> None:
        """Test every captured date shape parses."""
        assert DateNormalizer(dayfirst=False).normalize(text) == expected

    def test_year_first_ignores_dayfirst(self) -> None:
        """Test a leading four-digit year is always read year-month-day."""
        assert DateNormalizer(dayfirst=True).normalize("2025-04-12") == "2025-04-12"

    @pytest.mark.parametrize("text", [None, "", "   ", "12/34/5678", "not a date"])
    def test_unparsable(self, text) -> None:
        """Test invalid dates give None."""
        normalizer = DateNormalizer()

        assert normalizer.normalize(text) is None
        assert not normalizer.is_valid_date(text)

    def test_output_format(self) -> None:
        """Test a custom output format."""
        assert DateNormalizer(dayfirst=False, output_format="%d.%m.%Y").normalize("04/12/2025") == "12.04.2025"
