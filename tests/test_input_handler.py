"""Tests for receipt file loading."""

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from PIL import Image
from pdf2image.exceptions import PDFInfoNotInstalledError, PDFPageCountError

from receipt_ocr.input_handler import ImageProcessor, InputHandler, PDFProcessor
from receipt_ocr.utils.exceptions import (
    CorruptedFileError,
    FileNotFoundError,
    InputError,
    UnsupportedFileTypeError,
)


@pytest.fixture
def receipt_png(tmp_path: Path) -> Path:
    """Write a small receipt-sized PNG."""
    path = tmp_path / "receipt.png"
    Image.new("RGB", (120, 300), "white").save(path)
    return path


class TestInputHandler:
    """Tests for InputHandler."""

    def test_load_image(self, receipt_png: Path) -> None:
        """Test an image loads as one page."""
        document = InputHandler().load(receipt_png)

        assert document.file_type == "image"
        assert document.filename == "receipt.png"
        assert document.page_count == 1
        assert document.images[0].mode == "RGB"

    def test_missing_file(self, tmp_path: Path) -> None:
        """Test a missing path raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            InputHandler().load(tmp_path / "nope.png")

    def test_unsupported_extension(self, tmp_path: Path) -> None:
        """Test unsupported types are rejected."""
        path = tmp_path / "receipt.docx"
        path.write_bytes(b"data")

        with pytest.raises(UnsupportedFileTypeError):
            InputHandler().load(path)

    def test_empty_file(self, tmp_path: Path) -> None:
        """Test an empty file is corrupted."""
        path = tmp_path / "empty.jpg"
        path.touch()

        with pytest.raises(CorruptedFileError):
            InputHandler().load(path)

    def test_directory_is_not_a_file(self, tmp_path: Path) -> None:
        """Test a directory path is rejected."""
        with pytest.raises(InputError):
            InputHandler().validate_file(tmp_path)

    def test_unreadable_image(self, tmp_path: Path) -> None:
        """Test garbage bytes with an image extension."""
        path = tmp_path / "broken.jpg"
        path.write_bytes(b"definitely not a jpeg")

        with pytest.raises(CorruptedFileError):
            InputHandler().load(path)

    def test_detect_file_type_case_insensitive(self) -> None:
        """Test extension detection ignores case."""
        handler = InputHandler()

        assert handler.detect_file_type("scan.PDF") == "pdf"
        assert handler.detect_file_type("photo.JPeG") == "image"

    def test_pdf_delegates_to_pdf_processor(self, tmp_path: Path) -> None:
        """Test PDFs go through the PDF processor."""
        path = tmp_path / "receipt.pdf"
        path.write_bytes(b"%PDF-1.4")
        pages = [Image.new("RGB", (10, 10)), Image.new("RGB", (10, 10))]
        pdf_processor = MagicMock()
        pdf_processor.process.return_value = (pages, {"page_count": 2})

        document = InputHandler(pdf_processor=pdf_processor).load(path)

        assert document.file_type == "pdf"
        assert document.page_count == 2

    def test_find_files(self, tmp_path: Path, receipt_png: Path) -> None:
        """Test directory listing keeps supported files only."""
        (tmp_path / "b.JPG").write_bytes(b"x")
        (tmp_path / "notes.txt").write_text("x")

        files = InputHandler().find_files(tmp_path)

        assert [f.name for f in files] == ["b.JPG", "receipt.png"]

    def test_find_files_missing_directory(self, tmp_path: Path) -> None:
        """Test a missing directory raises."""
        with pytest.raises(FileNotFoundError):
            InputHandler().find_files(tmp_path / "missing")


class TestImageProcessor:
    """Tests for ImageProcessor."""

    def test_transparent_image_flattened_on_white(self, tmp_path: Path) -> None:
        """Test RGBA images become RGB over a white background."""
        path = tmp_path / "clear.png"
        Image.new("RGBA", (10, 10), (0, 0, 0, 0)).save(path)

        images, metadata = ImageProcessor().process(path)

        assert images[0].mode == "RGB"
        assert images[0].getpixel((0, 0)) == (255, 255, 255)
        assert metadata["original_mode"] == "RGBA"

    def test_oversized_image_downscaled(self) -> None:
        """Test images beyond the maximum size keep their aspect ratio."""
        processor = ImageProcessor()
        processor.max_width, processor.max_height = 100, 100

        image = processor.prepare(Image.new("RGB", (400, 200)))

        assert image.size == (100, 50)

    def test_small_image_untouched(self) -> None:
        """Test images within bounds keep their size."""
        image = ImageProcessor().prepare(Image.new("RGB", (50, 80)))

        assert image.size == (50, 80)


class TestPDFProcessor:
    """Tests for PDFProcessor with pdf2image mocked."""

    def test_rasterizes_pages(self, tmp_path: Path) -> None:
        """Test each page becomes an RGB image."""
        path = tmp_path / "receipt.pdf"
        path.write_bytes(b"%PDF-1.4")
        pages = [Image.new("L", (10, 10)), Image.new("RGB", (10, 10))]

        with patch("receipt_ocr.input_handler.pdf_processor.convert_from_path", return_value=pages) as convert:
            images, metadata = PDFProcessor().process(path)

        assert [img.mode for img in images] == ["RGB", "RGB"]
        assert metadata["page_count"] == 2
        assert convert.call_args[1]["dpi"] == 300
        assert convert.call_args[1]["last_page"] == 10

    def test_broken_pdf(self, tmp_path: Path) -> None:
        """Test unreadable PDFs raise CorruptedFileError."""
        path = tmp_path / "broken.pdf"
        path.write_bytes(b"garbage")

        with patch(
            "receipt_ocr.input_handler.pdf_processor.convert_from_path",
            side_effect=PDFPageCountError("Unable to get page count."),
        ):
            with pytest.raises(CorruptedFileError):
                PDFProcessor().process(path)

    def test_poppler_missing(self, tmp_path: Path) -> None:
        """Test a missing Poppler install is an input error."""
        path = tmp_path / "receipt.pdf"
        path.write_bytes(b"%PDF-1.4")

        with patch(
            "receipt_ocr.input_handler.pdf_processor.convert_from_path",
            side_effect=PDFInfoNotInstalledError("pdfinfo not found"),
        ):
            with pytest.raises(InputError):
                PDFProcessor().process(path)
