"""
Tesseract OCR Backend.

Runs Tesseract (through pytesseract) over a page image and returns the
recognized text blob.

Requirements:
    - Tesseract OCR installed on the system
    - pytesseract Python package

Author: ML Engineering Team
"""

import time

import pytesseract
from PIL import Image

from config import get_config
from receipt_ocr.utils.logger import get_logger
from receipt_ocr.utils.exceptions import OCREngineNotAvailableError, OCRProcessingError
from .ocr_result import OCRResult

# Initialize module logger
logger = get_logger(__name__)


class TesseractBackend:
    """
    Tesseract OCR backend implementation.
    
    Attributes:
        language: Tesseract language code (e.g., "eng")
        psm: Page Segmentation Mode (0-13)
        oem: OCR Engine Mode (0-3)
        extra_config: Additional Tesseract command-line options
        timeout: Seconds before a recognition call is abandoned (0 = none)
        
    Example:
        >>> backend = TesseractBackend()
        >>> backend.check_available()
        >>> text = backend.recognize(image)
    """
    
    name = "tesseract"
    
    def __init__(self) -> None:
        """Initialize the Tesseract backend with configuration."""
        self.language = get_config("ocr.tesseract.lang", "eng")
        self.psm = get_config("ocr.tesseract.psm", 6)
        self.oem = get_config("ocr.tesseract.oem", 3)
        self.extra_config = get_config("ocr.tesseract.config", "")
        self.timeout = get_config("ocr.timeout_seconds", 0) or 0
        self.version = None
        
        logger.debug(
            f"TesseractBackend configured (lang={self.language}, "
            f"psm={self.psm}, oem={self.oem}, timeout={self.timeout})"
        )
    
    def check_available(self) -> None:
        """
        Check that the Tesseract binary can be run.
        
        Raises:
            OCREngineNotAvailableError: If Tesseract is not installed.
        """
        try:
            self.version = pytesseract.get_tesseract_version()
        except pytesseract.TesseractNotFoundError as e:
            raise OCREngineNotAvailableError(self.name, f"not installed or not in PATH: {e}")
        except (OSError, RuntimeError) as e:
            raise OCREngineNotAvailableError(self.name, str(e))
        
        logger.info(f"Tesseract version: {self.version}")
    
    def _build_config(self) -> str:
        """Build the Tesseract configuration string."""
        config_parts = [
            f"--psm {self.psm}",
            f"--oem {self.oem}"
        ]
        
        if self.extra_config:
            config_parts.append(self.extra_config)
        
        return ' '.join(config_parts)
    
    def recognize(self, image: Image.Image, page_number: int = 1) -> OCRResult:
        """
        Extract the text blob from an image.
        
        Args:
            image: PIL Image to process.
            page_number: 1-based page index, recorded on the result.
            
        Returns:
            OCRResult with the verbatim engine text.
            
        Raises:
            OCRProcessingError: If Tesseract fails or times out.
        """
        start_time = time.time()
        config = self._build_config()
        
        if image.mode != 'RGB':
            image = image.convert('RGB')
        
        logger.debug(f"Running Tesseract OCR on page {page_number} (config: {config})")
        
        try:
            text = pytesseract.image_to_string(
                image,
                lang=self.language,
                config=config,
                timeout=self.timeout
            )
        except (pytesseract.TesseractError, pytesseract.TesseractNotFoundError, OSError) as e:
            raise OCRProcessingError(f"page {page_number}", str(e))
        except RuntimeError as e:
            # pytesseract signals its own timeout with a bare RuntimeError
            raise OCRProcessingError(f"page {page_number}", f"timed out: {e}")
        
        processing_time = time.time() - start_time
        
        result = OCRResult(
            text=text,
            page_number=page_number,
            engine=self.name,
            language=self.language,
            processing_time=processing_time,
            metadata={
                'psm': self.psm,
                'oem': self.oem,
                'tesseract_version': str(self.version) if self.version else None
            }
        )
        
        logger.info(
            f"OCR completed for page {page_number}: "
            f"{result.line_count} lines ({processing_time:.2f}s)"
        )
        return result
    
    def close(self) -> None:
        """Tesseract runs as a subprocess per call; nothing to release."""
        self.version = None
