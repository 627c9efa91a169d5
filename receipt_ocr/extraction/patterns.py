"""
Receipt Pattern Tables.

Ordered heuristic tables used by the field extractors. Each table is
plain data: a tuple of FieldPattern entries sorted by priority, so the
order in which candidates are tried can be inspected and tested on its
own instead of being buried in conditionals.

Tables:
    DATE_PATTERNS: date shapes, tried in order on every line
    AMOUNT_PATTERNS: label patterns for the total, tax and subtotal fields
    ITEM_PATTERN: the single "name ... price" line-item shape
"""

import re
from dataclasses import dataclass
from typing import Dict, Match, Optional, Pattern, Tuple

from receipt_ocr.utils.exceptions import UnknownFieldError


# Currency symbols tolerated in front of an amount
CURRENCY_SYMBOLS = "$€£¥₹"
_CURRENCY = f"[{re.escape(CURRENCY_SYMBOLS)}]"

# Amount following a label: thousands separators and 0-2 decimal digits
_LABELLED_AMOUNT = rf"[:\s]*(?:{_CURRENCY}\s*)?([\d,]+\.?\d{{0,2}})"

# Merchant line length bounds (both exclusive)
MERCHANT_MIN_LENGTH = 3
MERCHANT_MAX_LENGTH = 50

# Line-item price bounds (both exclusive)
ITEM_MIN_PRICE = 0.0
ITEM_MAX_PRICE = 10000.0

# Substrings that mark a summary line rather than a purchased item
ITEM_EXCLUDED_KEYWORDS = ('total', 'tax', 'subtotal', 'amount', 'balance')


@dataclass(frozen=True)
class FieldPattern:
    """
    One entry of an ordered pattern table.
    
    Attributes:
        name: Short identifier, used in logs and tests
        regex: Compiled regular expression
        priority: Position in the table (lower is tried first)
    """
    name: str
    regex: Pattern
    priority: int
    
    def search(self, line: str) -> Optional[Match]:
        """Search a single line for this pattern."""
        return self.regex.search(line)


def _table(*entries: Tuple[str, str], flags: int = re.IGNORECASE) -> Tuple[FieldPattern, ...]:
    """Build a priority-ordered table from (name, regex) pairs."""
    return tuple(
        FieldPattern(name=name, regex=re.compile(pattern, flags), priority=index)
        for index, (name, pattern) in enumerate(entries)
    )


DATE_PATTERNS = _table(
    # 04/12/2025, 4-12-25
    ('day_first_numeric', r'(?<!\d)\d{1,2}[-/]\d{1,2}[-/](?:\d{4}|\d{2})'),
    # 2025-04-12, 25/4/12
    ('year_first_numeric', r'(?<!\d)(?:\d{4}|\d{2})[-/]\d{1,2}[-/]\d{1,2}'),
    # Apr 12, 2025 / December 3 24
    ('month_name',
     r'\b(?:jan|feb|mar|apr|may|jun|jul|aug|sep|oct|nov|dec)[a-z]*'
     r'\s+\d{1,2}[,\s]+(?:\d{4}|\d{2})'),
)

AMOUNT_PATTERNS: Dict[str, Tuple[FieldPattern, ...]] = {
    'total': _table(
        ('total', rf'(?<!sub[\s-])\btotal{_LABELLED_AMOUNT}'),
        ('amount', rf'\bamount{_LABELLED_AMOUNT}'),
        ('balance', rf'\bbalance{_LABELLED_AMOUNT}'),
    ),
    'tax': _table(
        ('tax', rf'\btax{_LABELLED_AMOUNT}'),
        ('gst', rf'\bgst{_LABELLED_AMOUNT}'),
        ('vat', rf'\bvat{_LABELLED_AMOUNT}'),
    ),
    'subtotal': _table(
        ('sub_total', rf'\bsub[\s-]?total{_LABELLED_AMOUNT}'),
        ('subtotal', rf'\bsubtotal{_LABELLED_AMOUNT}'),
    ),
}

# Free text, whitespace, optional currency symbol, price with two decimals
ITEM_PATTERN = re.compile(rf'^(.*?\S)\s+{_CURRENCY}?([\d,]+\.\d{{2}})$')


def patterns_for(field: str) -> Tuple[FieldPattern, ...]:
    """
    Return the ordered label table for an amount field.
    
    Args:
        field: One of 'total', 'tax', 'subtotal'.
        
    Returns:
        Tuple of FieldPattern in priority order.
        
    Raises:
        UnknownFieldError: If the field has no table.
    """
    try:
        return AMOUNT_PATTERNS[field]
    except KeyError:
        raise UnknownFieldError(field, AMOUNT_PATTERNS.keys()) from None


__all__ = [
    'CURRENCY_SYMBOLS',
    'MERCHANT_MIN_LENGTH',
    'MERCHANT_MAX_LENGTH',
    'ITEM_MIN_PRICE',
    'ITEM_MAX_PRICE',
    'ITEM_EXCLUDED_KEYWORDS',
    'FieldPattern',
    'DATE_PATTERNS',
    'AMOUNT_PATTERNS',
    'ITEM_PATTERN',
    'patterns_for',
]
