"""
Field Extractors.

Four independent passes over the normalized lines of a receipt:

    MerchantExtractor: first short, alphabetic, capitalised line
    DateExtractor: first line matching any date shape, verbatim
    AmountExtractor: first labelled amount for total, tax or subtotal
    LineItemExtractor: every "name ... price" line that is not a summary

Each extractor is stateless and never raises for text input; "nothing
found" is reported as None (or an empty tuple for items).

Author: ML Engineering Team
"""

import math
import re
from typing import Optional, Pattern, Sequence, Tuple

from receipt_ocr.utils.logger import get_logger
from .patterns import (
    DATE_PATTERNS,
    ITEM_EXCLUDED_KEYWORDS,
    ITEM_MAX_PRICE,
    ITEM_MIN_PRICE,
    ITEM_PATTERN,
    MERCHANT_MAX_LENGTH,
    MERCHANT_MIN_LENGTH,
    FieldPattern,
    patterns_for,
)
from .receipt_record import LineItem

# Initialize module logger
logger = get_logger(__name__)

_LEADING_DIGIT = re.compile(r'[0-9]')
_UPPERCASE_LATIN = re.compile(r'[A-Z]')


def parse_amount(text: str) -> Optional[float]:
    """
    Parse a captured amount, dropping thousands separators.
    
    Args:
        text: Numeric text such as "1,234.56".
        
    Returns:
        Float value, or None if the text is not a finite number.
        
    Example:
        >>> parse_amount("1,234.56")
        1234.56
        >>> parse_amount(",,") is None
        True
    """
    try:
        value = float(text.replace(',', ''))
    except (AttributeError, ValueError):
        return None
    
    return value if math.isfinite(value) else None


class MerchantExtractor:
    """
    Picks the merchant name from the top of the receipt.
    
    The first line that is moderately short, does not start with a digit
    and contains an uppercase Latin letter wins. No scoring is done
    among candidates.
    """
    
    def __init__(
        self,
        min_length: int = MERCHANT_MIN_LENGTH,
        max_length: int = MERCHANT_MAX_LENGTH
    ) -> None:
        self.min_length = min_length
        self.max_length = max_length
    
    def is_candidate(self, line: str) -> bool:
        """Check a single line against the merchant rules."""
        return (
            self.min_length < len(line) < self.max_length
            and not _LEADING_DIGIT.match(line)
            and _UPPERCASE_LATIN.search(line) is not None
        )
    
    def extract(self, lines: Sequence[str]) -> Optional[str]:
        for line in lines:
            if self.is_candidate(line):
                return line
        return None


class DateExtractor:
    """
    Finds the first date-looking substring in the receipt.
    
    Lines are scanned top to bottom; on each line the date patterns are
    tried in priority order. The matched text is returned verbatim so no
    day/month ordering is assumed here.
    """
    
    def __init__(self, patterns: Sequence[FieldPattern] = DATE_PATTERNS) -> None:
        self.patterns = tuple(sorted(patterns, key=lambda p: p.priority))
    
    def extract(self, lines: Sequence[str]) -> Optional[str]:
        for line in lines:
            for pattern in self.patterns:
                match = pattern.search(line)
                if match:
                    logger.debug(f"date matched by '{pattern.name}': {match.group(0)!r}")
                    return match.group(0)
        return None


class AmountExtractor:
    """
    Finds a labelled amount for one field (total, tax or subtotal).
    
    Lines are scanned top to bottom and the field's label patterns are
    tried in priority order on each line. A match whose captured digits
    do not parse is skipped and the scan continues, so a garbled line
    never poisons the field.
    
    Attributes:
        field: Field name this extractor fills
        patterns: Ordered label patterns for the field
        
    Example:
        >>> AmountExtractor('tax').extract(["Tax: $0.52"])
        0.52
    """
    
    def __init__(
        self,
        field: str,
        patterns: Optional[Sequence[FieldPattern]] = None
    ) -> None:
        """
        Initialize the extractor.
        
        Args:
            field: Field name ('total', 'tax' or 'subtotal').
            patterns: Custom pattern table. Defaults to the field's table.
            
        Raises:
            UnknownFieldError: If no patterns are given and the field is unknown.
        """
        self.field = field
        if patterns is None:
            patterns = patterns_for(field)
        self.patterns = tuple(sorted(patterns, key=lambda p: p.priority))
    
    def extract(self, lines: Sequence[str]) -> Optional[float]:
        for line in lines:
            for pattern in self.patterns:
                match = pattern.search(line)
                if not match:
                    continue
                
                value = parse_amount(match.group(1))
                if value is None:
                    logger.debug(
                        f"{self.field}: unparsable amount {match.group(1)!r} "
                        f"in line {line!r}, continuing"
                    )
                    continue
                
                logger.debug(f"{self.field} matched by '{pattern.name}': {value}")
                return value
        return None


class LineItemExtractor:
    """
    Collects every line that looks like a purchased item.
    
    Unlike the single-valued extractors this pass is exhaustive: all
    qualifying lines become items, in document order. A candidate is
    dropped when its price is outside the (exclusive) sanity bounds or
    when its name mentions a summary keyword such as "total" or "tax".
    """
    
    def __init__(
        self,
        pattern: Pattern = ITEM_PATTERN,
        excluded_keywords: Sequence[str] = ITEM_EXCLUDED_KEYWORDS,
        min_price: float = ITEM_MIN_PRICE,
        max_price: float = ITEM_MAX_PRICE
    ) -> None:
        self.pattern = pattern
        self.excluded_keywords = tuple(k.lower() for k in excluded_keywords)
        self.min_price = min_price
        self.max_price = max_price
    
    def is_summary_line(self, name: str) -> bool:
        """Whether a name restates a total, tax or similar summary."""
        lowered = name.lower()
        return any(keyword in lowered for keyword in self.excluded_keywords)
    
    def parse_line(self, line: str) -> Optional[LineItem]:
        """
        Turn one line into a LineItem, or None if it does not qualify.
        
        Args:
            line: A normalized receipt line.
            
        Returns:
            LineItem or None.
        """
        match = self.pattern.match(line)
        if not match:
            return None
        
        name = match.group(1).strip()
        price = parse_amount(match.group(2))
        
        if price is None or not (self.min_price < price < self.max_price):
            logger.debug(f"item rejected (price out of bounds): {line!r}")
            return None
        
        if self.is_summary_line(name):
            logger.debug(f"item rejected (summary keyword): {line!r}")
            return None
        
        return LineItem(name=name, price=price)
    
    def extract(self, lines: Sequence[str]) -> Tuple[LineItem, ...]:
        items = (self.parse_line(line) for line in lines)
        return tuple(item for item in items if item is not None)


__all__ = [
    'parse_amount',
    'MerchantExtractor',
    'DateExtractor',
    'AmountExtractor',
    'LineItemExtractor',
]
