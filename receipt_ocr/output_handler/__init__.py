"""
Output Handler Module for the Receipt OCR System.

Persists receipt processing outcomes (record or failure reason).
"""

from .database_handler import ReceiptStore

__all__ = ['ReceiptStore']
