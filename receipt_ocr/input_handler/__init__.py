"""
Input Handler Module for the Receipt OCR System.

Loads receipt images and PDFs as page images ready for OCR.
"""

from .handler import InputHandler, InputResult
from .image_processor import ImageProcessor
from .pdf_processor import PDFProcessor

__all__ = ['InputHandler', 'InputResult', 'ImageProcessor', 'PDFProcessor']
