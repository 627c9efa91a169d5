"""
Line Normalizer.

Splits raw OCR text into the ordered, trimmed, non-empty lines that
every field extractor reads. Order is preserved: "first matching line"
means topmost line in the document.
"""

import re
from typing import Tuple

# \r\n, lone \r (old Mac exports) and \n all end a line
_LINE_BREAK = re.compile(r'\r\n|\r|\n')


def normalize_lines(raw_text: str) -> Tuple[str, ...]:
    """
    Split raw text into trimmed, non-empty lines.
    
    Args:
        raw_text: Full OCR output for one document.
        
    Returns:
        Tuple of lines in document order. Empty for empty or
        whitespace-only input.
        
    Example:
        >>> normalize_lines("  QUICK MART \\n\\n Milk 3.99\\n")
        ('QUICK MART', 'Milk 3.99')
    """
    if not raw_text:
        return ()
    
    stripped = (line.strip() for line in _LINE_BREAK.split(raw_text))
    return tuple(line for line in stripped if line)
