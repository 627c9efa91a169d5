"""
Main OCR Engine Module.

This module provides the OCREngine class, the unified interface to the
OCR backend. The engine is an explicit scoped resource: it is acquired
for one document and released when that document is done, whether
processing succeeded or failed.

Usage:
    from receipt_ocr.ocr_engine import OCREngine
    
    with OCREngine() as engine:
        result = engine.extract(image)
        print(result.text)

Author: ML Engineering Team
"""

from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from PIL import Image

from config import get_config
from receipt_ocr.utils.logger import get_logger
from receipt_ocr.utils.exceptions import OCREngineNotAvailableError, OCRProcessingError
from .ocr_result import OCRResult
from .tesseract_backend import TesseractBackend

# Initialize module logger
logger = get_logger(__name__)


class OCREngine:
    """
    OCR engine providing a scoped interface for text extraction.
    
    The backend is created and checked on open() (or when entering the
    context manager) and released on close(). Calling extract() outside
    that window raises OCREngineNotAvailableError.
    
    Supported Backends:
        - tesseract: Tesseract OCR via pytesseract
    
    Attributes:
        backend_name: Name of the configured OCR backend
        backend: Active backend instance, or None while closed
        
    Example:
        >>> with OCREngine() as engine:
        ...     for page, image in enumerate(images, 1):
        ...         text = engine.extract(image, page_number=page).text
    """
    
    SUPPORTED_BACKENDS = {'tesseract': TesseractBackend}
    
    def __init__(self, backend: Optional[str] = None, backend_instance: Any = None) -> None:
        """
        Initialize the OCR engine (nothing is acquired yet).
        
        Args:
            backend: OCR backend name. If None, uses configuration.
            backend_instance: Ready-made backend object (used by tests or
                             custom integrations). Must provide recognize()
                             and close().
        """
        self.backend_name = backend or get_config("ocr.engine", "tesseract")
        
        # Accept the pytesseract package name as an alias
        if self.backend_name == "pytesseract":
            self.backend_name = "tesseract"
        
        self._backend_instance = backend_instance
        self.backend = None
    
    @property
    def is_open(self) -> bool:
        return self.backend is not None
    
    def open(self) -> 'OCREngine':
        """
        Acquire the OCR backend.
        
        Returns:
            The engine itself.
            
        Raises:
            OCREngineNotAvailableError: If the backend is unknown or missing.
        """
        if self.is_open:
            return self
        
        if self._backend_instance is not None:
            self.backend = self._backend_instance
        else:
            backend_cls = self.SUPPORTED_BACKENDS.get(self.backend_name)
            if backend_cls is None:
                raise OCREngineNotAvailableError(
                    self.backend_name,
                    f"supported backends: {sorted(self.SUPPORTED_BACKENDS)}"
                )
            backend = backend_cls()
            backend.check_available()
            self.backend = backend
        
        logger.debug(f"OCR engine opened with backend: {self.backend_name}")
        return self
    
    def close(self) -> None:
        """Release the OCR backend. Safe to call more than once."""
        if not self.is_open:
            return
        
        try:
            self.backend.close()
        finally:
            self.backend = None
            logger.debug(f"OCR engine closed ({self.backend_name})")
    
    def __enter__(self) -> 'OCREngine':
        return self.open()
    
    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()
    
    def extract(
        self,
        image: Union[Image.Image, str, Path],
        page_number: int = 1
    ) -> OCRResult:
        """
        Extract the text blob from an image.
        
        Args:
            image: PIL Image or path to image file.
            page_number: 1-based page index within the source document.
            
        Returns:
            OCRResult containing the verbatim recognized text.
            
        Raises:
            OCREngineNotAvailableError: If the engine is not open.
            OCRProcessingError: If the image cannot be read or OCR fails.
        """
        if not self.is_open:
            raise OCREngineNotAvailableError(self.backend_name, "engine is not open")
        
        if isinstance(image, (str, Path)):
            image_path = str(image)
            logger.debug(f"Loading image from: {image_path}")
            try:
                image = Image.open(image_path)
                image.load()
            except OSError as e:
                raise OCRProcessingError(image_path, f"Failed to load image: {e}")
        
        if not isinstance(image, Image.Image):
            raise OCRProcessingError("unknown", "Invalid image input")
        
        return self.backend.recognize(image, page_number=page_number)
    
    def extract_pages(self, images: List[Image.Image]) -> List[OCRResult]:
        """
        Extract text from every page of one document.
        
        Any page failure propagates: the document is treated as failed
        as a whole and partial results are discarded by the caller.
        """
        results = []
        for page_number, image in enumerate(images, 1):
            logger.debug(f"Processing page {page_number}/{len(images)}")
            results.append(self.extract(image, page_number=page_number))
        return results
    
    def get_backend_info(self) -> Dict[str, Any]:
        """Get information about the configured OCR backend."""
        info = {'backend': self.backend_name, 'open': self.is_open}
        
        if self.is_open:
            info['language'] = getattr(self.backend, 'language', None)
            version = getattr(self.backend, 'version', None)
            info['version'] = str(version) if version else None
        
        return info
