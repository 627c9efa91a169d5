"""
Main Input Handler Module.

This module provides the InputHandler class, the entry point for loading
receipt files. It validates the file, detects its type and delegates to
the image or PDF processor.

Usage:
    from receipt_ocr.input_handler import InputHandler
    
    handler = InputHandler()
    document = handler.load("receipt.jpg")
    for image in document.images:
        ...
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from PIL import Image

from config import get_config
from receipt_ocr.utils.logger import get_logger
from receipt_ocr.utils.helpers import collect_files, get_file_extension
from receipt_ocr.utils.exceptions import (
    InputError,
    UnsupportedFileTypeError,
    FileNotFoundError,
    CorruptedFileError
)
from .image_processor import ImageProcessor
from .pdf_processor import PDFProcessor

# Initialize module logger
logger = get_logger(__name__)


@dataclass
class InputResult:
    """
    A loaded receipt document.
    
    Attributes:
        filepath: Original file path
        filename: Original filename
        file_type: Detected file type ('pdf' or 'image')
        images: Processed PIL Images, one per page
        metadata: Additional file metadata
    """
    filepath: str
    filename: str
    file_type: str
    images: List[Image.Image] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)
    
    @property
    def page_count(self) -> int:
        return len(self.images)
    
    def __repr__(self) -> str:
        return (
            f"InputResult(filename='{self.filename}', "
            f"type='{self.file_type}', pages={self.page_count})"
        )


class InputHandler:
    """
    Main input handler for receipt files.
    
    Attributes:
        supported_extensions: Set of supported file extensions
        pdf_processor: PDFProcessor instance
        image_processor: ImageProcessor instance
        
    Example:
        >>> handler = InputHandler()
        >>> document = handler.load("receipt.pdf")
        >>> print(f"Loaded {document.page_count} pages")
    """
    
    PDF_EXTENSIONS = {'.pdf'}
    IMAGE_EXTENSIONS = {'.jpg', '.jpeg', '.png', '.tiff', '.tif', '.bmp', '.webp'}
    
    def __init__(
        self,
        image_processor: Optional[ImageProcessor] = None,
        pdf_processor: Optional[PDFProcessor] = None
    ) -> None:
        """
        Initialize the InputHandler.
        
        Args:
            image_processor: Custom image processor (defaults to ImageProcessor()).
            pdf_processor: Custom PDF processor (defaults to PDFProcessor()).
        """
        configured = get_config(
            "input.supported_extensions",
            sorted(self.PDF_EXTENSIONS | self.IMAGE_EXTENSIONS)
        )
        self.supported_extensions = {ext.lower() for ext in configured}
        
        self.image_processor = image_processor or ImageProcessor()
        self.pdf_processor = pdf_processor or PDFProcessor()
        
        logger.debug(f"InputHandler initialized with extensions: {sorted(self.supported_extensions)}")
    
    def detect_file_type(self, filepath: Union[str, Path]) -> str:
        """
        Detect the type of input file.
        
        Returns:
            File type string: 'pdf' or 'image'.
            
        Raises:
            UnsupportedFileTypeError: If file type is not supported.
        """
        extension = get_file_extension(filepath)
        
        if extension in self.PDF_EXTENSIONS and extension in self.supported_extensions:
            return 'pdf'
        if extension in self.IMAGE_EXTENSIONS and extension in self.supported_extensions:
            return 'image'
        raise UnsupportedFileTypeError(extension, list(self.supported_extensions))
    
    def validate_file(self, filepath: Union[str, Path]) -> Path:
        """
        Validate that a file exists, is supported and is not empty.
        
        Returns:
            Path object pointing to the validated file.
            
        Raises:
            FileNotFoundError: If file doesn't exist.
            InputError: If the path is not a regular file.
            UnsupportedFileTypeError: If file type is not supported.
            CorruptedFileError: If the file is empty.
        """
        path = Path(filepath)
        
        if not path.exists():
            raise FileNotFoundError(str(filepath))
        
        if not path.is_file():
            raise InputError(f"Path is not a file: {filepath}")
        
        self.detect_file_type(path)
        
        if path.stat().st_size == 0:
            raise CorruptedFileError(str(filepath), "File is empty")
        
        return path
    
    def load(self, filepath: Union[str, Path]) -> InputResult:
        """
        Load a receipt file as page images.
        
        Args:
            filepath: Path to the receipt file.
            
        Returns:
            InputResult containing one image per page.
            
        Raises:
            InputError: If the file is missing, unsupported or unreadable.
        """
        logger.info(f"Loading file: {filepath}")
        
        path = self.validate_file(filepath)
        file_type = self.detect_file_type(path)
        
        if file_type == 'pdf':
            images, metadata = self.pdf_processor.process(path)
        else:
            images, metadata = self.image_processor.process(path)
        
        result = InputResult(
            filepath=str(filepath),
            filename=path.name,
            file_type=file_type,
            images=images,
            metadata=metadata
        )
        
        logger.info(f"Successfully loaded: {path.name} ({result.page_count} page(s))")
        return result
    
    def find_files(self, directory: Union[str, Path], recursive: bool = False) -> List[Path]:
        """
        List all supported receipt files in a directory.
        
        Raises:
            FileNotFoundError: If the directory doesn't exist.
            InputError: If the path is not a directory.
        """
        directory = Path(directory)
        
        if not directory.exists():
            raise FileNotFoundError(str(directory))
        
        if not directory.is_dir():
            raise InputError(f"Path is not a directory: {directory}")
        
        files = collect_files(directory, self.supported_extensions, recursive=recursive)
        logger.info(f"Found {len(files)} files to process in {directory}")
        return files
