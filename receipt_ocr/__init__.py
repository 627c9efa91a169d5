"""
Receipt OCR System - Source Package.

Turns scanned or photographed receipts into structured records
(merchant, date, subtotal, tax, total, line items). Each module has a
single responsibility.

Modules:
    - extraction: OCR text to ReceiptRecord (pure, no I/O)
    - input_handler: Image and PDF loading
    - ocr_engine: Scoped OCR engine (Tesseract)
    - postprocessor: Optional date normalization
    - output_handler: SQLite storage of results
    - pipeline: File-to-result orchestration
    - utils: Logging, exceptions, helpers

Architecture:
    Input → OCR → Extraction → Post-Processing → Output
"""

__version__ = "1.0.0"
__author__ = "ML Engineering Team"

__all__ = [
    'extraction',
    'input_handler',
    'ocr_engine',
    'postprocessor',
    'output_handler',
    'pipeline',
    'utils'
]
