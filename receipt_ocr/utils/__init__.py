"""
Utility Module for the Receipt OCR System.

This module provides common utilities used across all other modules:
    - Logging configuration
    - Exception hierarchy
    - File helpers
"""

from .logger import setup_logger, set_log_level, get_logger
from .helpers import ensure_directory, get_file_extension, generate_timestamp, collect_files

__all__ = [
    'setup_logger',
    'set_log_level',
    'get_logger',
    'ensure_directory',
    'get_file_extension',
    'generate_timestamp',
    'collect_files'
]
