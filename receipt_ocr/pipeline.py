"""
Receipt Processing Pipeline.

Ties the layers together for one receipt file:

    Input (image/PDF pages) → OCR engine (scoped per document)
        → extraction core → optional date normalization → optional store

Failures of the collaborators (unreadable file, OCR engine missing or
failing) are not raised to the caller. They are reported as a failed
ReceiptProcessingResult with the reason kept in ocr_error, and any
partial output for that document is discarded. A result the store
cannot save is also marked failed, keeping its extracted record.

Usage:
    from receipt_ocr.pipeline import ReceiptProcessor
    
    processor = ReceiptProcessor()
    for result in processor.process_file("receipt.jpg"):
        print(result.success, result.ocr_data)
"""

import time
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Optional, Union

from receipt_ocr.utils.logger import get_logger
from receipt_ocr.utils.exceptions import DatabaseError, ReceiptOCRError
from receipt_ocr.extraction import ReceiptParser, ReceiptRecord
from receipt_ocr.input_handler import InputHandler
from receipt_ocr.ocr_engine import OCREngine
from receipt_ocr.postprocessor import DateNormalizer

# Initialize module logger
logger = get_logger(__name__)


@dataclass
class ReceiptProcessingResult:
    """
    Outcome of processing one receipt page.
    
    Attributes:
        source_file: Receipt file (None for text-only processing)
        page_number: 1-based page within the source document
        ocr_processed: Whether processing was attempted
        ocr_data: Extracted record, None on failure
        ocr_error: Failure reason, None on success
        normalized_date: Record date re-parsed under the configured locale
        processing_time: Seconds spent on this page (OCR + extraction)
        processed_at: ISO timestamp of completion
    """
    source_file: Optional[str] = None
    page_number: int = 1
    ocr_processed: bool = True
    ocr_data: Optional[ReceiptRecord] = None
    ocr_error: Optional[str] = None
    normalized_date: Optional[str] = None
    processing_time: float = 0.0
    processed_at: str = field(default_factory=lambda: datetime.now().isoformat())
    
    @property
    def success(self) -> bool:
        return self.ocr_error is None
    
    @classmethod
    def failed(cls, source_file: Optional[str], error: str, processing_time: float = 0.0) -> 'ReceiptProcessingResult':
        """Build the failure result for a document."""
        return cls(
            source_file=source_file,
            ocr_data=None,
            ocr_error=error,
            processing_time=processing_time
        )
    
    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary format for serialization."""
        return {
            'source_file': self.source_file,
            'page_number': self.page_number,
            'ocr_processed': self.ocr_processed,
            'ocr_data': self.ocr_data.to_dict() if self.ocr_data else None,
            'ocr_error': self.ocr_error,
            'normalized_date': self.normalized_date,
            'processing_time': self.processing_time,
            'processed_at': self.processed_at,
            'success': self.success
        }


class ReceiptProcessor:
    """
    Runs receipts through OCR and extraction.
    
    Attributes:
        parser: ReceiptParser used for every page
        input_handler: InputHandler used to load files
        engine_factory: Callable returning a fresh (unopened) OCREngine
        date_normalizer: DateNormalizer for normalized_date
        store: Optional ReceiptStore receiving every result
        
    Example:
        >>> processor = ReceiptProcessor(store=ReceiptStore("receipts.db"))
        >>> results = processor.process_batch(["a.jpg", "b.pdf"])
        >>> failed = [r for r in results if not r.success]
    """
    
    def __init__(
        self,
        parser: Optional[ReceiptParser] = None,
        input_handler: Optional[InputHandler] = None,
        engine_factory: Optional[Callable[[], OCREngine]] = None,
        date_normalizer: Optional[DateNormalizer] = None,
        store: Any = None
    ) -> None:
        self.parser = parser or ReceiptParser()
        self._input_handler = input_handler
        self.engine_factory = engine_factory or OCREngine
        self.date_normalizer = date_normalizer or DateNormalizer()
        self.store = store
    
    @property
    def input_handler(self) -> InputHandler:
        """Input handler, created on first file access."""
        if self._input_handler is None:
            self._input_handler = InputHandler()
        return self._input_handler
    
    def _build_result(
        self,
        raw_text: str,
        source_file: Optional[str],
        page_number: int,
        started: float
    ) -> ReceiptProcessingResult:
        record = self.parser.parse(raw_text)
        return ReceiptProcessingResult(
            source_file=source_file,
            page_number=page_number,
            ocr_data=record,
            normalized_date=self.date_normalizer.normalize(record.date),
            processing_time=time.time() - started
        )
    
    def _save(self, results: List[ReceiptProcessingResult]) -> None:
        """
        Hand every result to the store, if one is configured.
        
        A storage failure marks that result as failed with the reason in
        ocr_error; the extracted record is kept on the result.
        """
        if self.store is None:
            return
        for result in results:
            try:
                self.store.save(result)
            except DatabaseError as e:
                logger.error(f"Could not store result for {result.source_file}: {e}")
                result.ocr_error = str(e)
    
    def process_text(self, raw_text: str, source_file: Optional[str] = None) -> ReceiptProcessingResult:
        """
        Run only the extraction core over text that was OCR'd elsewhere.
        
        Args:
            raw_text: OCR text for one document.
            source_file: Optional label recorded on the result.
            
        Returns:
            A ReceiptProcessingResult, failed only when the store rejects it.
        """
        result = self._build_result(raw_text, source_file, 1, time.time())
        self._save([result])
        return result
    
    def process_file(self, filepath: Union[str, Path]) -> List[ReceiptProcessingResult]:
        """
        Process one receipt file.
        
        One OCR engine scope is opened for the document and closed when
        all its pages are done or when a page fails.
        
        Args:
            filepath: Image or PDF receipt.
            
        Returns:
            One result per page on success, or a single failed result.
        """
        source_file = str(filepath)
        started = time.time()
        logger.info(f"Processing receipt: {source_file}")
        
        try:
            document = self.input_handler.load(filepath)
            
            with self.engine_factory() as engine:
                ocr_results = engine.extract_pages(document.images)
            
            results = []
            for ocr_result in ocr_results:
                if ocr_result.is_empty():
                    logger.warning(
                        f"OCR produced no text for {document.filename} page {ocr_result.page_number}"
                    )
                results.append(
                    self._build_result(
                        ocr_result.text, source_file, ocr_result.page_number, time.time()
                    )
                )
            
        except ReceiptOCRError as e:
            logger.error(f"Receipt processing failed for {source_file}: {e}")
            results = [
                ReceiptProcessingResult.failed(source_file, str(e), time.time() - started)
            ]
        
        else:
            for result in results:
                record = result.ocr_data
                logger.info(
                    f"  Extracted page {result.page_number}: merchant={record.merchant!r}, "
                    f"total={record.total}, items={record.item_count}"
                )
        
        self._save(results)
        return results
    
    def process_batch(self, filepaths: Iterable[Union[str, Path]]) -> List[ReceiptProcessingResult]:
        """
        Process several receipt files sequentially.
        
        Each document is independent: a failure in one does not stop
        the others.
        """
        results: List[ReceiptProcessingResult] = []
        for filepath in filepaths:
            results.extend(self.process_file(filepath))
        
        failed = sum(1 for r in results if not r.success)
        logger.info(f"Batch complete: {len(results) - failed} succeeded, {failed} failed")
        return results
