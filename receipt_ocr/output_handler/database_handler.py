"""
Database Handler Module.

SQLite storage for receipt processing outcomes. Each row keeps either
the extracted record (as JSON) or the failure reason, mirroring the
ocr_processed / ocr_data / ocr_error columns of the receipts table.

Author: ML Engineering Team
"""

import json
import sqlite3
from contextlib import closing
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from config import get_config
from receipt_ocr.utils.logger import get_logger
from receipt_ocr.utils.helpers import ensure_directory
from receipt_ocr.utils.exceptions import DatabaseError
from receipt_ocr.extraction import ReceiptRecord

# Initialize module logger
logger = get_logger(__name__)


class ReceiptStore:
    """
    Stores ReceiptProcessingResult rows in a SQLite database.
    
    Attributes:
        db_path: Path to the SQLite database file
        table_name: Name of the receipts table
        
    Example:
        >>> store = ReceiptStore("outputs/receipts.db")
        >>> row_id = store.save(result)
        >>> store.get(row_id)['ocr_data'].total
        7.0
    """
    
    def __init__(self, db_path: Optional[Union[str, Path]] = None) -> None:
        """
        Initialize the store and create the table if needed.
        
        Args:
            db_path: Path to database file. If None, uses configuration.
        """
        if db_path:
            self.db_path = Path(db_path)
        else:
            output_dir = Path(get_config("paths.output_dir", "outputs"))
            self.db_path = output_dir / get_config("output.database.name", "receipts.db")
        
        self.table_name = get_config("output.database.table_name", "receipts")
        
        ensure_directory(self.db_path.parent)
        self._create_tables()
        
        logger.info(f"ReceiptStore initialized (db: {self.db_path})")
    
    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn
    
    def _execute(self, operation: str, sql: str, params: tuple = ()) -> List[sqlite3.Row]:
        """
        Run one statement in its own connection and transaction.
        
        Raises:
            DatabaseError: On any SQLite failure.
        """
        try:
            with closing(self._connect()) as conn:
                with conn:
                    cursor = conn.execute(sql, params)
                    rows = cursor.fetchall()
                    self._last_rowid = cursor.lastrowid
                    self._last_rowcount = cursor.rowcount
                return rows
        except sqlite3.Error as e:
            raise DatabaseError(operation, str(e))
    
    def _create_tables(self) -> None:
        """Create the receipts table and its index."""
        self._execute("create tables", f"""
        CREATE TABLE IF NOT EXISTS {self.table_name} (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            filename TEXT,
            page_number INTEGER DEFAULT 1,
            ocr_processed INTEGER DEFAULT 0,
            ocr_data TEXT,
            ocr_error TEXT,
            normalized_date TEXT,
            processing_time REAL,
            processed_at TEXT,
            created_at TEXT DEFAULT CURRENT_TIMESTAMP
        )
        """)
        self._execute("create index", f"""
            CREATE INDEX IF NOT EXISTS idx_{self.table_name}_filename
            ON {self.table_name} (filename)
        """)
        logger.debug("Database tables created/verified")
    
    def save(self, result) -> int:
        """
        Insert one processing result.
        
        Args:
            result: ReceiptProcessingResult to store.
            
        Returns:
            Row id of the inserted record.
        """
        ocr_data = result.ocr_data.to_json(indent=None) if result.ocr_data else None
        
        self._execute("insert", f"""
        INSERT INTO {self.table_name} (
            filename, page_number, ocr_processed, ocr_data, ocr_error,
            normalized_date, processing_time, processed_at
        ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
        """, (
            result.source_file,
            result.page_number,
            1 if result.ocr_processed else 0,
            ocr_data,
            result.ocr_error,
            result.normalized_date,
            result.processing_time,
            result.processed_at,
        ))
        
        logger.debug(f"Inserted receipt row {self._last_rowid} ({result.source_file})")
        return self._last_rowid
    
    def _decode(self, row: sqlite3.Row) -> Dict[str, Any]:
        """Turn a row into a dict with ocr_data decoded to a ReceiptRecord."""
        record = dict(row)
        record['ocr_processed'] = bool(record['ocr_processed'])
        if record['ocr_data']:
            record['ocr_data'] = ReceiptRecord.from_dict(json.loads(record['ocr_data']))
        return record
    
    def get(self, receipt_id: int) -> Optional[Dict[str, Any]]:
        """Retrieve one receipt row by id, or None if not found."""
        rows = self._execute(
            "get",
            f"SELECT * FROM {self.table_name} WHERE id = ?",
            (receipt_id,)
        )
        return self._decode(rows[0]) if rows else None
    
    def get_all(self, limit: Optional[int] = None) -> List[Dict[str, Any]]:
        """Retrieve receipt rows, newest first."""
        query = f"SELECT * FROM {self.table_name} ORDER BY id DESC"
        params: tuple = ()
        if limit:
            query += " LIMIT ?"
            params = (int(limit),)
        
        return [self._decode(row) for row in self._execute("get_all", query, params)]
    
    def get_failed(self) -> List[Dict[str, Any]]:
        """Retrieve rows whose processing failed."""
        rows = self._execute(
            "get_failed",
            f"SELECT * FROM {self.table_name} WHERE ocr_error IS NOT NULL ORDER BY id DESC"
        )
        return [self._decode(row) for row in rows]
    
    def get_count(self) -> int:
        """Get the total number of stored rows."""
        rows = self._execute("get_count", f"SELECT COUNT(*) FROM {self.table_name}")
        return rows[0][0]
    
    def delete(self, receipt_id: int) -> bool:
        """
        Delete a row by id.
        
        Returns:
            True if deleted, False if not found.
        """
        self._execute(
            "delete",
            f"DELETE FROM {self.table_name} WHERE id = ?",
            (receipt_id,)
        )
        deleted = self._last_rowcount > 0
        
        if deleted:
            logger.debug(f"Deleted receipt row: {receipt_id}")
        
        return deleted
