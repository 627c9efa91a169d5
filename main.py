#!/usr/bin/env python3
"""
Receipt OCR System - Main Entry Point.

This is the main entry point for the receipt OCR system. It provides
both a command-line interface and programmatic access to the
extraction pipeline.

Usage:
    Command Line:
        python main.py --input receipt.jpg
        python main.py --input ./receipts/ --output results.json --database
        python main.py --input ocr_dump.txt --text

    Python:
        from main import run_extraction
        results = run_extraction("receipt.jpg")

Author: ML Engineering Team
Version: 1.0.0
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Optional, List, Dict, Any

# Add project root to path for imports
PROJECT_ROOT = Path(__file__).parent
sys.path.insert(0, str(PROJECT_ROOT))

# Import project modules
from config import ConfigurationManager, get_config
from receipt_ocr.utils.logger import set_log_level, setup_logger_from_config, get_logger
from receipt_ocr.utils.helpers import collect_files, ensure_directory, generate_timestamp


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parse command-line arguments.

    Returns:
        Parsed argument namespace.
    """
    parser = argparse.ArgumentParser(
        description="Receipt OCR System: extract merchant, date, amounts and items",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    Process single receipt:
        python main.py --input receipt.jpg

    Process directory and keep results:
        python main.py --input ./receipts/ --output results.json --database

    Parse text that was OCR'd elsewhere:
        python main.py --input ocr_dump.txt --text
        """
    )

    # Input/Output arguments
    parser.add_argument(
        "--input", "-i",
        type=str,
        required=True,
        help="Input file or directory containing receipts"
    )

    parser.add_argument(
        "--output", "-o",
        type=str,
        default=None,
        help="JSON output file or directory (default: print to stdout)"
    )

    # Processing options
    parser.add_argument(
        "--text", "-t",
        action="store_true",
        help="Treat input as plain-text OCR output and skip the OCR step"
    )

    parser.add_argument(
        "--database",
        action="store_true",
        help="Save every result to the SQLite database"
    )

    parser.add_argument(
        "--config", "-c",
        type=str,
        default=None,
        help="Path to custom configuration file"
    )

    # Logging options
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging"
    )

    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Only log errors"
    )

    return parser.parse_args(argv)


def initialize_system(args: argparse.Namespace) -> ConfigurationManager:
    """
    Initialize the system with configuration and logging.

    Args:
        args: Parsed command-line arguments.

    Returns:
        Initialized configuration manager.
    """
    # Load configuration
    config = ConfigurationManager(args.config)

    # Setup logging
    logger = setup_logger_from_config()

    if args.debug:
        set_log_level("DEBUG")
    elif args.quiet:
        set_log_level("ERROR")

    logger.info("=" * 60)
    logger.info("RECEIPT OCR SYSTEM")
    logger.info("=" * 60)
    logger.info(f"Version: {config.get('project.version', '1.0.0')}")
    logger.info(f"Input: {args.input}")
    logger.info(f"Mode: {'text' if args.text else 'ocr'}")

    return config


def validate_inputs(input_path: str, text_mode: bool = False) -> List[Path]:
    """
    Validate the input file/directory and return the files to process.

    Args:
        input_path: File or directory given on the command line.
        text_mode: Whether inputs are plain-text OCR dumps.

    Returns:
        List of input file paths.

    Raises:
        FileNotFoundError: If input path doesn't exist.
        ValueError: If the file type is not supported.
    """
    logger = get_logger(__name__)
    path = Path(input_path)

    if not path.exists():
        raise FileNotFoundError(f"Input path not found: {path}")

    if text_mode:
        extensions = get_config("input.text_extensions", [".txt"])
    else:
        extensions = get_config(
            "input.supported_extensions",
            [".pdf", ".jpg", ".jpeg", ".png", ".tiff", ".tif", ".bmp", ".webp"]
        )
    extensions = {ext.lower() for ext in extensions}

    if path.is_file():
        # Text mode accepts any file: OCR dumps are not always .txt
        if text_mode or path.suffix.lower() in extensions:
            return [path]
        raise ValueError(f"Unsupported file type: {path.suffix}")

    if path.is_dir():
        files = collect_files(path, extensions)

        if not files:
            logger.warning(f"No supported files found in: {path}")
        else:
            logger.info(f"Found {len(files)} files to process")

        return files

    raise ValueError(f"Invalid input path: {path}")


def write_results(results: List[Dict[str, Any]], output_path: Optional[str]) -> Optional[Path]:
    """
    Write results as JSON to a file, or to stdout when no path is given.

    A directory (or a path without suffix) receives a timestamped file.

    Returns:
        Path of the written file, or None for stdout.
    """
    payload = json.dumps(results, indent=2, ensure_ascii=False)

    if output_path is None:
        print(payload)
        return None

    path = Path(output_path)
    if path.suffix:
        ensure_directory(path.parent)
    else:
        path = ensure_directory(path) / f"receipts_{generate_timestamp()}.json"

    path.write_text(payload + "\n", encoding='utf-8')
    return path


def run_extraction(
    input_path: str,
    output_path: Optional[str] = None,
    config_path: Optional[str] = None,
    text_mode: bool = False,
    enable_database: bool = False,
    input_files: Optional[List[Path]] = None
) -> List[Dict[str, Any]]:
    """
    Run the receipt extraction pipeline.

    This is the main programmatic entry point. Failed documents do not
    stop the run; they appear in the results with 'success' False and
    the reason in 'ocr_error'.

    Args:
        input_path: Path to input file or directory.
        output_path: Optional JSON output file or directory. Results are
                    only returned (not printed) when None.
        config_path: Optional custom configuration file path.
        text_mode: Treat inputs as plain-text OCR output.
        enable_database: Whether to save results to the database.
        input_files: Files already validated from input_path; they are
                    collected again when None.

    Returns:
        List of processing result dictionaries.

    Example:
        >>> results = run_extraction("receipts/")
        >>> for r in results:
        ...     print(r['ocr_data']['total'] if r['success'] else r['ocr_error'])
    """
    logger = get_logger(__name__)

    # Initialize configuration
    ConfigurationManager(config_path)

    # Import pipeline components
    from receipt_ocr.pipeline import ReceiptProcessor
    from receipt_ocr.output_handler import ReceiptStore

    if input_files is None:
        input_files = validate_inputs(input_path, text_mode=text_mode)

    store = ReceiptStore() if enable_database else None
    processor = ReceiptProcessor(store=store)

    logger.info(f"Processing {len(input_files)} files...")

    if text_mode:
        processing_results = []
        for file_path in input_files:
            logger.info(f"Parsing text: {file_path.name}")
            raw_text = file_path.read_text(encoding='utf-8', errors='replace')
            processing_results.append(processor.process_text(raw_text, source_file=str(file_path)))
    else:
        processing_results = processor.process_batch(input_files)

    results = [r.to_dict() for r in processing_results]

    if output_path is not None:
        written = write_results(results, output_path)
        logger.info(f"JSON output: {written}")

    if store is not None:
        logger.info(f"Database: {store.db_path} ({store.get_count()} records)")

    return results


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main function - entry point for command-line execution.

    Returns:
        Exit code (0 for success, 1 for errors or failed documents,
        130 when interrupted).
    """
    try:
        # Parse command-line arguments
        args = parse_arguments(argv)
    except SystemExit as e:
        return 0 if e.code == 0 else 1

    try:
        # Initialize system
        initialize_system(args)
        logger = get_logger(__name__)

        # Validate inputs
        input_files = validate_inputs(args.input, text_mode=args.text)

        if not input_files:
            logger.error("No files to process")
            return 1

        # Run extraction
        results = run_extraction(
            input_path=args.input,
            output_path=args.output,
            config_path=args.config,
            text_mode=args.text,
            enable_database=args.database,
            input_files=input_files
        )

        if args.output is None:
            write_results(results, None)

        failed = [r for r in results if not r['success']]

        logger.info("=" * 60)
        logger.info(
            f"Extraction complete. Processed {len(input_files)} files, "
            f"{len(failed)} failed."
        )
        logger.info("=" * 60)

        return 1 if failed else 0

    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    except KeyboardInterrupt:
        print("\nOperation cancelled by user", file=sys.stderr)
        return 130

    except Exception as e:
        print(f"Unexpected error: {e}", file=sys.stderr)
        if args.debug:
            import traceback
            traceback.print_exc()
        return 1


if __name__ == "__main__":
    sys.exit(main())
