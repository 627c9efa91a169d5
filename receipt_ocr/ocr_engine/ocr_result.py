"""
OCR Result Data Class.

Standardized container for the text blob an OCR backend returns for one
page image.

Author: ML Engineering Team
"""

from dataclasses import dataclass, field
from typing import Any, Dict


@dataclass
class OCRResult:
    """
    Raw OCR output for a single image/page.
    
    Attributes:
        text: Recognized text, verbatim as returned by the engine
        page_number: 1-based page index within the source document
        engine: OCR engine name
        language: OCR language used
        processing_time: Time taken for OCR in seconds
        metadata: Additional backend metadata
        
    Example:
        >>> result = engine.extract(image)
        >>> record = parse_receipt_text(result.text)
    """
    text: str = ""
    page_number: int = 1
    engine: str = "unknown"
    language: str = "eng"
    processing_time: float = 0.0
    metadata: Dict[str, Any] = field(default_factory=dict)
    
    @property
    def line_count(self) -> int:
        """Number of non-blank lines in the text."""
        return sum(1 for line in self.text.splitlines() if line.strip())
    
    def is_empty(self) -> bool:
        """Check if the engine produced no usable text."""
        return not self.text.strip()
    
    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary format for serialization."""
        return {
            'text': self.text,
            'page_number': self.page_number,
            'engine': self.engine,
            'language': self.language,
            'processing_time': self.processing_time,
            'line_count': self.line_count,
            'metadata': self.metadata
        }
    
    def __repr__(self) -> str:
        return (
            f"OCRResult(page={self.page_number}, engine={self.engine}, "
            f"lines={self.line_count}, time={self.processing_time:.2f}s)"
        )
