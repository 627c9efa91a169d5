"""
Extraction Module for the Receipt OCR System.

Turns raw OCR text into a structured ReceiptRecord:
    - Line normalization
    - Ordered pattern tables for dates and labelled amounts
    - Merchant, date, amount and line-item extractors
    - Result assembly

Pure and synchronous: no I/O, no shared mutable state.
"""

from .lines import normalize_lines
from .patterns import FieldPattern, DATE_PATTERNS, AMOUNT_PATTERNS, ITEM_PATTERN, patterns_for
from .receipt_record import LineItem, ReceiptRecord
from .extractors import (
    parse_amount,
    MerchantExtractor,
    DateExtractor,
    AmountExtractor,
    LineItemExtractor,
)
from .parser import ReceiptParser, parse_receipt_text

__all__ = [
    'normalize_lines',
    'FieldPattern',
    'DATE_PATTERNS',
    'AMOUNT_PATTERNS',
    'ITEM_PATTERN',
    'patterns_for',
    'LineItem',
    'ReceiptRecord',
    'parse_amount',
    'MerchantExtractor',
    'DateExtractor',
    'AmountExtractor',
    'LineItemExtractor',
    'ReceiptParser',
    'parse_receipt_text',
]
