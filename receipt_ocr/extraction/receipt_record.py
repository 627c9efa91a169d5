"""
Receipt Record Data Classes.

Structured output of the extraction core. Records are immutable once
built and carry the full raw text for audit and fallback display.

Classes:
    LineItem: One purchased item (name and price)
    ReceiptRecord: Complete structured result for one document

Author: ML Engineering Team
"""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple


@dataclass(frozen=True)
class LineItem:
    """
    A single purchased item read from a receipt line.
    
    Attributes:
        name: Item description as printed (trimmed)
        price: Item price, or None for name-only rows
        
    Example:
        >>> LineItem(name="Milk", price=3.99).to_dict()
        {'name': 'Milk', 'price': 3.99}
    """
    name: str
    price: Optional[float] = None
    
    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary format."""
        return {'name': self.name, 'price': self.price}
    
    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'LineItem':
        """Create a LineItem from dictionary data."""
        price = data.get('price')
        return cls(
            name=str(data.get('name', '')),
            price=float(price) if price is not None else None
        )


@dataclass(frozen=True)
class ReceiptRecord:
    """
    Structured data extracted from one receipt's OCR text.
    
    Every optional field is independent: absence of one never implies
    absence of another. Absence (None) means "no confident value found"
    and is distinct from zero or an empty string.
    
    Attributes:
        raw_text: The OCR input, verbatim
        merchant: First plausible merchant line
        date: Matched date substring, verbatim (not parsed)
        total: Total amount
        tax: Tax amount
        subtotal: Subtotal amount
        items: Purchased items in document order
        
    Example:
        >>> record = parse_receipt_text("QUICK MART\\nTotal: $7.00")
        >>> record.merchant, record.total
        ('QUICK MART', 7.0)
    """
    raw_text: str
    merchant: Optional[str] = None
    date: Optional[str] = None
    total: Optional[float] = None
    tax: Optional[float] = None
    subtotal: Optional[float] = None
    items: Tuple[LineItem, ...] = field(default_factory=tuple)
    
    # Optional fields in serialization order
    OPTIONAL_FIELDS = ('merchant', 'date', 'total', 'tax', 'subtotal')
    
    def __post_init__(self):
        # Accept any iterable of items but store an immutable tuple
        if not isinstance(self.items, tuple):
            object.__setattr__(self, 'items', tuple(self.items))
    
    @property
    def fields(self) -> Dict[str, Any]:
        """All optional fields, present or not."""
        return {name: getattr(self, name) for name in self.OPTIONAL_FIELDS}
    
    @property
    def extracted_fields(self) -> Dict[str, Any]:
        """Only the optional fields that were found."""
        return {k: v for k, v in self.fields.items() if v is not None}
    
    @property
    def missing_fields(self) -> List[str]:
        """Names of optional fields that were not found."""
        return [k for k, v in self.fields.items() if v is None]
    
    @property
    def item_count(self) -> int:
        return len(self.items)
    
    @property
    def items_total(self) -> float:
        """
        Sum of item prices.
        
        Informational only: it is never compared against subtotal or total.
        """
        return round(sum(item.price for item in self.items if item.price is not None), 2)
    
    def to_dict(self) -> Dict[str, Any]:
        """
        Convert to a JSON-compatible dictionary.
        
        Absent optional fields are omitted; 'items' and 'raw_text' are
        always present.
        """
        data: Dict[str, Any] = dict(self.extracted_fields)
        data['items'] = [item.to_dict() for item in self.items]
        data['raw_text'] = self.raw_text
        return data
    
    def to_json(self, indent: int = 2) -> str:
        """Convert to JSON string."""
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)
    
    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ReceiptRecord':
        """
        Create a ReceiptRecord from dictionary data (e.g. a stored record).
        
        Args:
            data: Dictionary as produced by to_dict().
            
        Returns:
            ReceiptRecord instance.
        """
        def _number(key: str) -> Optional[float]:
            value = data.get(key)
            return float(value) if value is not None else None
        
        return cls(
            raw_text=data.get('raw_text') or '',
            merchant=data.get('merchant'),
            date=data.get('date'),
            total=_number('total'),
            tax=_number('tax'),
            subtotal=_number('subtotal'),
            items=tuple(LineItem.from_dict(item) for item in data.get('items') or [])
        )
    
    def __repr__(self) -> str:
        return (
            f"ReceiptRecord(merchant={self.merchant!r}, date={self.date!r}, "
            f"total={self.total}, items={self.item_count})"
        )
