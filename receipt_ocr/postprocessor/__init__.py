"""
Post-Processing Module for the Receipt OCR System.

Optional normalization of extracted values for downstream consumers.
Records themselves are never modified.
"""

from .normalizers import DateNormalizer

__all__ = ['DateNormalizer']
