"""
Custom Exceptions Module.

Errors of the collaborators around the extraction core: input files,
the OCR engine, storage, and configuration mistakes. Parsing receipt
text never raises any of these.

Exception Hierarchy:
    ReceiptOCRError (base)
    ├── InputError
    │   ├── UnsupportedFileTypeError
    │   ├── FileNotFoundError
    │   └── CorruptedFileError
    ├── OCRError
    │   ├── OCREngineNotAvailableError
    │   └── OCRProcessingError
    ├── ExtractionError
    │   └── UnknownFieldError
    └── OutputError
        └── DatabaseError
"""

from typing import Any, Dict, Iterable, Optional


class ReceiptOCRError(Exception):
    """
    Base exception for all receipt OCR errors.

    The string form is what ends up in ocr_error for failed receipts,
    so it carries the details inline.

    Attributes:
        message: Human-readable error message.
        details: Structured context (paths, engine names, reasons).

    Example:
        >>> str(ReceiptOCRError("OCR failed", {"page": 2}))
        'OCR failed (page=2)'
    """

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        context = ", ".join(
            f"{key}={value}" for key, value in self.details.items() if value is not None
        )
        return f"{self.message} ({context})" if context else self.message


# =============================================================================
# INPUT ERRORS
# =============================================================================

class InputError(ReceiptOCRError):
    """A receipt file could not be turned into page images."""


class UnsupportedFileTypeError(InputError):
    """The file extension is not a supported receipt format."""

    def __init__(self, file_type: str, supported_types: Iterable[str]):
        self.file_type = file_type
        self.supported_types = sorted(supported_types)
        super().__init__(
            f"Unsupported file type: '{file_type}'",
            {"supported": " ".join(self.supported_types)}
        )


class FileNotFoundError(InputError):
    """The receipt path does not exist."""

    def __init__(self, filepath: str):
        self.filepath = filepath
        super().__init__(f"File not found: {filepath}")


class CorruptedFileError(InputError):
    """The file exists but is empty or cannot be decoded."""

    def __init__(self, filepath: str, reason: Optional[str] = None):
        self.filepath = filepath
        self.reason = reason
        super().__init__(f"Corrupted or unreadable file: {filepath}", {"reason": reason})


# =============================================================================
# OCR ERRORS
# =============================================================================

class OCRError(ReceiptOCRError):
    """Failure at the OCR engine boundary."""


class OCREngineNotAvailableError(OCRError):
    """The engine is unknown, not installed, or used outside its scope."""

    def __init__(self, engine_name: str, reason: Optional[str] = None):
        self.engine_name = engine_name
        self.reason = reason
        super().__init__(f"OCR engine not available: {engine_name}", {"reason": reason})


class OCRProcessingError(OCRError):
    """The engine ran but failed or timed out on an image."""

    def __init__(self, source: str, reason: Optional[str] = None):
        self.source = source
        self.reason = reason
        super().__init__(f"OCR processing failed for: {source}", {"reason": reason})


# =============================================================================
# EXTRACTION ERRORS
# =============================================================================

class ExtractionError(ReceiptOCRError):
    """Misconfigured extraction (never raised for receipt text)."""


class UnknownFieldError(ExtractionError, ValueError):
    """An amount extractor was requested for a field without a pattern table."""

    def __init__(self, field: str, known_fields: Iterable[str]):
        self.field = field
        self.known_fields = list(known_fields)
        super().__init__(
            f"Unknown receipt field: '{field}'",
            {"known": ", ".join(self.known_fields)}
        )


# =============================================================================
# OUTPUT ERRORS
# =============================================================================

class OutputError(ReceiptOCRError):
    """Processing results could not be persisted."""


class DatabaseError(OutputError):
    """A SQLite operation of the receipt store failed."""

    def __init__(self, operation: str, reason: Optional[str] = None):
        self.operation = operation
        self.reason = reason
        super().__init__(f"Database operation failed: {operation}", {"reason": reason})


__all__ = [
    'ReceiptOCRError',
    'InputError',
    'UnsupportedFileTypeError',
    'FileNotFoundError',
    'CorruptedFileError',
    'OCRError',
    'OCREngineNotAvailableError',
    'OCRProcessingError',
    'ExtractionError',
    'UnknownFieldError',
    'OutputError',
    'DatabaseError',
]
