"""
Receipt Parser Module.

This module provides the ReceiptParser class that turns raw OCR text
into a ReceiptRecord. It is the result assembler: the text is split into
lines once, every field extractor runs independently over the same
lines, and their outputs are merged.

Parsing is total. Every string, including the empty string, produces a
valid ReceiptRecord; missing data shows up as absent fields, never as
an exception. No cross-field arithmetic (subtotal + tax == total) is
checked.

Usage:
    from receipt_ocr.extraction import parse_receipt_text
    
    record = parse_receipt_text(ocr_text)
    print(record.merchant, record.total)
    print(record.to_json())

Author: ML Engineering Team
"""

from typing import Any, Dict, Optional

from receipt_ocr.utils.logger import get_logger
from .extractors import (
    AmountExtractor,
    DateExtractor,
    LineItemExtractor,
    MerchantExtractor,
)
from .lines import normalize_lines
from .patterns import AMOUNT_PATTERNS
from .receipt_record import ReceiptRecord

# Initialize module logger
logger = get_logger(__name__)


class ReceiptParser:
    """
    Assembles a ReceiptRecord from the field extractors.
    
    The parser holds only its (stateless) extractors, so one instance can
    be shared across threads and calls.
    
    Attributes:
        merchant_extractor: MerchantExtractor instance
        date_extractor: DateExtractor instance
        amount_extractors: Mapping of amount field name to AmountExtractor
        item_extractor: LineItemExtractor instance
        
    Example:
        >>> parser = ReceiptParser()
        >>> record = parser.parse("QUICK MART\\n04/12/2025\\nMilk 3.99\\nTotal: $3.99")
        >>> record.date
        '04/12/2025'
        >>> [item.name for item in record.items]
        ['Milk']
    """
    
    def __init__(
        self,
        merchant_extractor: Optional[MerchantExtractor] = None,
        date_extractor: Optional[DateExtractor] = None,
        amount_extractors: Optional[Dict[str, AmountExtractor]] = None,
        item_extractor: Optional[LineItemExtractor] = None
    ) -> None:
        """
        Initialize the parser. Any extractor left as None uses its defaults.
        """
        self.merchant_extractor = merchant_extractor or MerchantExtractor()
        self.date_extractor = date_extractor or DateExtractor()
        self.amount_extractors = amount_extractors or {
            field: AmountExtractor(field) for field in AMOUNT_PATTERNS
        }
        self.item_extractor = item_extractor or LineItemExtractor()
    
    def parse(self, raw_text: Any) -> ReceiptRecord:
        """
        Extract structured receipt data from raw OCR text.
        
        Args:
            raw_text: Full OCR text for one document. Bytes are decoded
                     as UTF-8 and None is treated as empty text.
            
        Returns:
            ReceiptRecord whose raw_text equals the (string) input.
        """
        raw_text = self._coerce_text(raw_text)
        lines = normalize_lines(raw_text)
        
        amounts = {
            field: extractor.extract(lines)
            for field, extractor in self.amount_extractors.items()
        }
        
        record = ReceiptRecord(
            raw_text=raw_text,
            merchant=self.merchant_extractor.extract(lines),
            date=self.date_extractor.extract(lines),
            total=amounts.get('total'),
            tax=amounts.get('tax'),
            subtotal=amounts.get('subtotal'),
            items=self.item_extractor.extract(lines)
        )
        
        logger.debug(
            f"Parsed {len(lines)} lines: "
            f"found={sorted(record.extracted_fields)}, "
            f"missing={record.missing_fields}, items={record.item_count}"
        )
        return record
    
    @staticmethod
    def _coerce_text(raw_text: Any) -> str:
        """Bring non-string input to a string without raising."""
        if raw_text is None:
            return ''
        if isinstance(raw_text, str):
            return raw_text
        if isinstance(raw_text, (bytes, bytearray)):
            return bytes(raw_text).decode('utf-8', errors='replace')
        try:
            return str(raw_text)
        except Exception as e:
            logger.debug(f"Unprintable {type(raw_text).__name__} input treated as empty text: {e}")
            return ''


# Shared parser for the convenience function
_default_parser: Optional[ReceiptParser] = None


def parse_receipt_text(raw_text: Any) -> ReceiptRecord:
    """
    Convenience function to parse receipt text with the default parser.
    
    Args:
        raw_text: Full OCR text for one document.
        
    Returns:
        ReceiptRecord with all fields that could be found.
    """
    global _default_parser
    if _default_parser is None:
        _default_parser = ReceiptParser()
    return _default_parser.parse(raw_text)
