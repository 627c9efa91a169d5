"""
OCR Engine Module for the Receipt OCR System.

Wraps the OCR collaborator that turns a page image into one raw text
blob. The engine is used as a scoped resource (acquire per document,
release on completion or error).

Author: ML Engineering Team
"""

from .engine import OCREngine
from .tesseract_backend import TesseractBackend
from .ocr_result import OCRResult

__all__ = ['OCREngine', 'TesseractBackend', 'OCRResult']
