"""
Image Processor Module.

Loads receipt photos and scans and normalizes them for OCR:
    - EXIF orientation correction (phone photos)
    - RGB conversion (transparent images over white)
    - Downscaling of oversized images
"""

from pathlib import Path
from typing import Any, Dict, List, Tuple, Union

from PIL import Image, ImageOps, UnidentifiedImageError

from config import get_config
from receipt_ocr.utils.logger import get_logger
from receipt_ocr.utils.exceptions import CorruptedFileError

# Initialize module logger
logger = get_logger(__name__)


class ImageProcessor:
    """
    Processor for image files (JPG, PNG, TIFF, BMP, WEBP).
    
    Attributes:
        max_width: Maximum image width in pixels
        max_height: Maximum image height in pixels
        auto_orient: Whether to apply EXIF orientation
        
    Example:
        >>> processor = ImageProcessor()
        >>> images, metadata = processor.process("receipt.jpg")
        >>> image = images[0]
    """
    
    def __init__(self) -> None:
        """Initialize the image processor with configuration."""
        self.max_width = get_config("input.image.max_width", 2480)
        self.max_height = get_config("input.image.max_height", 3508)
        self.auto_orient = get_config("input.image.auto_orient", True)
        
        logger.debug(
            f"ImageProcessor initialized (max_size={self.max_width}x{self.max_height})"
        )
    
    def process(self, filepath: Union[str, Path]) -> Tuple[List[Image.Image], Dict[str, Any]]:
        """
        Load and normalize an image file.
        
        Args:
            filepath: Path to the image file.
            
        Returns:
            Tuple of (list containing one PIL Image, metadata dictionary).
            
        Raises:
            CorruptedFileError: If the image cannot be read.
        """
        filepath = Path(filepath)
        logger.info(f"Processing image: {filepath.name}")
        
        try:
            with Image.open(filepath) as source:
                source.load()
                metadata = self._extract_metadata(filepath, source)
                image = self.prepare(source)
                # Detach from the file handle closed by the with block
                if image is source:
                    image = source.copy()
        except (UnidentifiedImageError, OSError) as e:
            logger.error(f"Failed to process image {filepath}: {e}")
            raise CorruptedFileError(str(filepath), str(e))
        
        metadata['processed_width'] = image.width
        metadata['processed_height'] = image.height
        
        return [image], metadata
    
    def prepare(self, image: Image.Image) -> Image.Image:
        """
        Apply the normalization steps to an already loaded image.
        
        Steps:
            1. Fix orientation from EXIF
            2. Convert to RGB
            3. Downscale if too large
        """
        if self.auto_orient:
            image = ImageOps.exif_transpose(image)
        
        image = self._convert_to_rgb(image)
        return self._resize_if_needed(image)
    
    def _convert_to_rgb(self, image: Image.Image) -> Image.Image:
        """Convert to RGB, flattening transparency onto white."""
        if image.mode == 'RGB':
            return image
        
        original_mode = image.mode
        
        if image.mode in ('RGBA', 'LA') or (image.mode == 'P' and 'transparency' in image.info):
            rgba = image.convert('RGBA')
            background = Image.new('RGB', rgba.size, (255, 255, 255))
            background.paste(rgba, mask=rgba.split()[3])
            image = background
        else:
            image = image.convert('RGB')
        
        logger.debug(f"Converted image from {original_mode} to RGB")
        return image
    
    def _resize_if_needed(self, image: Image.Image) -> Image.Image:
        """Downscale to fit the configured maximum, keeping aspect ratio."""
        width, height = image.size
        
        if width <= self.max_width and height <= self.max_height:
            return image
        
        ratio = min(self.max_width / width, self.max_height / height)
        new_size = (int(width * ratio), int(height * ratio))
        
        image = image.resize(new_size, Image.LANCZOS)
        
        logger.debug(f"Resized image from {width}x{height} to {new_size[0]}x{new_size[1]}")
        return image
    
    def _extract_metadata(self, filepath: Path, image: Image.Image) -> Dict[str, Any]:
        return {
            'original_filename': filepath.name,
            'file_size_bytes': filepath.stat().st_size,
            'file_type': 'image',
            'original_width': image.width,
            'original_height': image.height,
            'original_mode': image.mode,
            'format': image.format,
            'page_count': 1
        }
