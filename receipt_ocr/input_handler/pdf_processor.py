"""
PDF Processor Module.

Rasterizes PDF receipts into page images for OCR using pdf2image
(Poppler-based). Each page becomes a separate image; pages are never
merged into one document.

Author: ML Engineering Team
"""

from pathlib import Path
from typing import Any, Dict, List, Tuple, Union

from PIL import Image
from pdf2image import convert_from_path
from pdf2image.exceptions import (
    PDFInfoNotInstalledError,
    PDFPageCountError,
    PDFPopplerTimeoutError,
    PDFSyntaxError,
)

from config import get_config
from receipt_ocr.utils.logger import get_logger
from receipt_ocr.utils.exceptions import CorruptedFileError, InputError

# Initialize module logger
logger = get_logger(__name__)


class PDFProcessor:
    """
    Processor for PDF files.
    
    Attributes:
        dpi: Resolution for PDF to image conversion
        max_pages: Maximum number of pages to rasterize
        
    Example:
        >>> processor = PDFProcessor()
        >>> images, metadata = processor.process("receipt.pdf")
        >>> print(f"Extracted {len(images)} pages")
    """
    
    def __init__(self) -> None:
        """Initialize the PDF processor with configuration."""
        self.dpi = get_config("input.pdf.dpi", 300)
        self.max_pages = get_config("input.pdf.max_pages", 10)
        
        logger.debug(f"PDFProcessor initialized (DPI={self.dpi}, max_pages={self.max_pages})")
    
    def process(self, filepath: Union[str, Path]) -> Tuple[List[Image.Image], Dict[str, Any]]:
        """
        Convert a PDF file into page images.
        
        Args:
            filepath: Path to the PDF file.
            
        Returns:
            Tuple of (list of PIL Images, metadata dictionary).
            
        Raises:
            CorruptedFileError: If the PDF cannot be read.
            InputError: If Poppler is not installed.
        """
        filepath = Path(filepath)
        logger.info(f"Processing PDF: {filepath.name}")
        
        try:
            images = convert_from_path(
                filepath,
                dpi=self.dpi,
                first_page=1,
                last_page=self.max_pages,
                fmt='png'
            )
        except PDFInfoNotInstalledError as e:
            raise InputError(
                "Poppler is not installed; PDF receipts cannot be rasterized",
                {"filepath": str(filepath), "reason": str(e)}
            )
        except (PDFPageCountError, PDFSyntaxError, PDFPopplerTimeoutError) as e:
            logger.error(f"pdf2image conversion failed: {e}")
            raise CorruptedFileError(str(filepath), str(e))
        
        images = [img.convert('RGB') if img.mode != 'RGB' else img for img in images]
        
        if not images:
            raise CorruptedFileError(str(filepath), "PDF contains no pages")
        
        metadata = {
            'original_filename': filepath.name,
            'file_size_bytes': filepath.stat().st_size,
            'file_type': 'pdf',
            'source_dpi': self.dpi,
            'page_count': len(images)
        }
        
        logger.info(f"Converted PDF to {len(images)} image(s)")
        return images, metadata
