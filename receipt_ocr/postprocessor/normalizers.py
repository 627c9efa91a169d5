"""
Data Normalizers Module.

The extractor keeps dates exactly as printed, because a receipt date
such as 03/04/2025 is ambiguous. DateNormalizer re-parses such a value
for consumers that need a calendar date, under an explicit and
configurable day/month ordering.

Author: ML Engineering Team
"""

import re
from datetime import datetime
from typing import Optional

from dateutil import parser as date_parser

from config import get_config
from receipt_ocr.utils.logger import get_logger

# Initialize module logger
logger = get_logger(__name__)


class DateNormalizer:
    """
    Normalizes verbatim receipt dates to a standard format.
    
    Attributes:
        dayfirst: Whether ambiguous numeric dates are read day-first
        yearfirst: Whether a leading number is read as the year
        output_format: Target strftime format
        
    Example:
        >>> DateNormalizer(dayfirst=False).normalize("03/04/2025")
        "2025-03-04"
        >>> DateNormalizer(dayfirst=True).normalize("03/04/2025")
        "2025-04-03"
        >>> DateNormalizer().normalize("Apr 12, 2025")
        "2025-04-12"
    """
    
    # Leading 4-digit year: 2025-04-12
    _YEAR_FIRST = re.compile(r'^\d{4}[-/]')
    
    def __init__(self, dayfirst: Optional[bool] = None, output_format: Optional[str] = None) -> None:
        """
        Initialize the date normalizer.
        
        Args:
            dayfirst: Locale assumption for ambiguous dates. If None,
                     uses configuration (default month-first).
            output_format: strftime format. If None, uses configuration.
        """
        if dayfirst is None:
            dayfirst = get_config("postprocessing.date.dayfirst", False)
        self.dayfirst = bool(dayfirst)
        self.output_format = output_format or get_config(
            "postprocessing.date.output_format",
            "%Y-%m-%d"
        )
        
        logger.debug(
            f"DateNormalizer initialized (dayfirst={self.dayfirst}, output: {self.output_format})"
        )
    
    def parse(self, date_str: Optional[str]) -> Optional[datetime]:
        """
        Parse a date string into a datetime.
        
        Returns:
            Parsed datetime, or None if the string is not a date.
        """
        if not date_str or not date_str.strip():
            return None
        
        date_str = ' '.join(date_str.split())
        yearfirst = bool(self._YEAR_FIRST.match(date_str))
        
        try:
            # Year-first receipt dates are always year-month-day
            return date_parser.parse(
                date_str,
                dayfirst=self.dayfirst and not yearfirst,
                yearfirst=yearfirst
            )
        except (ValueError, OverflowError) as e:
            logger.debug(f"Could not parse date {date_str!r}: {e}")
            return None
    
    def normalize(self, date_str: Optional[str]) -> Optional[str]:
        """
        Normalize a date string to the configured output format.
        
        Args:
            date_str: Verbatim date as captured from the receipt.
            
        Returns:
            Normalized date string, or None if parsing fails.
        """
        parsed = self.parse(date_str)
        if parsed is None:
            return None
        return parsed.strftime(self.output_format)
    
    def is_valid_date(self, date_str: Optional[str]) -> bool:
        """Check if a string represents a valid date."""
        return self.parse(date_str) is not None
