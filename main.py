#!/usr/bin/env python3
"""
Job Sheet Extraction System - Main Entry Point.

Reads photographed (or already OCR'd) workshop job sheets and recovers
customer, bike, work and cost fields from them.

Usage:
    Command Line:
        python main.py --input job_sheet.jpg
        python main.py --input ./scans/ --output results.json --save
        python main.py --input ocr_dump.txt --strict

    Python:
        from main import run_extraction
        results = run_extraction("job_sheet.jpg")

Author: Workshop Tools Team
Version: 1.0.0
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

PROJECT_ROOT = Path(__file__).parent
sys.path.insert(0, str(PROJECT_ROOT))

from config import ConfigurationManager
from src.utils.logger import setup_logger_from_config, get_logger, APP_LOGGER_NAME
from src.utils.helpers import ensure_directory
from src.utils.exceptions import JobSheetExtractionError

IMAGE_EXTENSIONS = {'.jpg', '.jpeg', '.png', '.tiff', '.tif', '.bmp', '.webp'}
TEXT_EXTENSIONS = {'.txt'}


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parse command-line arguments.

    Returns:
        Parsed argument namespace.
    """
    parser = argparse.ArgumentParser(
        description="Job Sheet Extraction System",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    Scan one photo:
        python main.py --input job_sheet.jpg

    Extract from OCR text already on disk:
        python main.py --input ocr_dump.txt

    Process a directory and store the drafts:
        python main.py --input ./scans/ --output results.json --save
        """
    )

    parser.add_argument(
        "--input", "-i",
        type=str,
        required=True,
        help="Image/text file, or directory of them"
    )

    parser.add_argument(
        "--output", "-o",
        type=str,
        default=None,
        help="Write JSON results to this file instead of stdout"
    )

    parser.add_argument(
        "--config", "-c",
        type=str,
        default=None,
        help="Path to custom configuration file"
    )

    parser.add_argument(
        "--save",
        action="store_true",
        help="Store complete drafts in the job database"
    )

    parser.add_argument(
        "--db",
        type=str,
        default=None,
        help="Path to the job database (default from configuration)"
    )

    parser.add_argument(
        "--strict",
        action="store_true",
        help="Treat a missing customer name, phone or bike model as an error"
    )

    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging"
    )

    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Only log warnings and errors"
    )

    return parser.parse_args(argv)


def initialize_system(args: argparse.Namespace) -> ConfigurationManager:
    """
    Initialize configuration and logging.

    Args:
        args: Parsed command-line arguments.

    Returns:
        Initialized configuration manager.
    """
    config = ConfigurationManager(args.config)

    logger = setup_logger_from_config()

    if args.debug:
        logging.getLogger(APP_LOGGER_NAME).setLevel(logging.DEBUG)
        for handler in logging.getLogger(APP_LOGGER_NAME).handlers:
            handler.setLevel(logging.DEBUG)
    elif args.quiet:
        logging.getLogger(APP_LOGGER_NAME).setLevel(logging.WARNING)

    logger.info("=" * 60)
    logger.info("JOB SHEET EXTRACTION SYSTEM")
    logger.info("=" * 60)
    logger.info(f"Version: {config.get('project.version', '1.0.0')}")
    logger.info(f"Input: {args.input}")

    return config


def collect_inputs(input_path: str) -> List[Path]:
    """
    Resolve the input argument to a sorted list of files to process.

    Raises:
        FileNotFoundError: If input path doesn't exist.
        ValueError: If a single file has an unsupported type.
    """
    logger = get_logger(__name__)
    path = Path(input_path)
    supported = IMAGE_EXTENSIONS | TEXT_EXTENSIONS

    if not path.exists():
        raise FileNotFoundError(f"Input path not found: {path}")

    if path.is_file():
        if path.suffix.lower() not in supported:
            raise ValueError(f"Unsupported file type: {path.suffix}")
        return [path]

    files = sorted(p for p in path.iterdir() if p.is_file() and p.suffix.lower() in supported)
    if not files:
        logger.warning(f"No supported files found in: {path}")
    else:
        logger.info(f"Found {len(files)} files to process")
    return files


def run_extraction(
    input_path: str,
    save: bool = False,
    db_path: Optional[str] = None,
    strict: bool = False
) -> List[Dict[str, Any]]:
    """
    Run the job sheet pipeline over a file or directory.

    Text files go straight to the extraction core; images go through the
    async scan workflow first. A failing file is logged and reported in
    the results without stopping the batch.

    Args:
        input_path: Path to input file or directory.
        save: Store drafts in the job database. In strict mode only
              complete drafts are stored.
        db_path: Job database path override.
        strict: Report incomplete drafts as errors.

    Returns:
        One dictionary per file: the outcome fields, or ``source`` and
        ``error``.
    """
    logger = get_logger(__name__)

    from src.extraction import JobDraftAssembler
    from src.output_handler import JobStore

    files = collect_inputs(input_path)
    assembler = JobDraftAssembler()
    store = JobStore(db_path) if save else None

    outcomes: Dict[Path, Any] = {}

    for path in (p for p in files if p.suffix.lower() in TEXT_EXTENSIONS):
        text = path.read_text(encoding='utf-8', errors='replace')
        outcomes[path] = assembler.extract(text, source=str(path))

    images = [p for p in files if p.suffix.lower() in IMAGE_EXTENSIONS]
    if images:
        from src.workflow import JobSheetScanner

        scanner = JobSheetScanner(assembler=assembler, require_complete=False)
        scanned = asyncio.run(scanner.scan_many(images))
        outcomes.update(zip(images, scanned))

    results = []
    for path in files:
        outcome = outcomes[path]

        if isinstance(outcome, Exception):
            logger.error(f"Error processing {path.name}: {outcome}")
            results.append({'source': str(path), 'error': str(outcome)})
            continue

        entry = outcome.to_dict()
        if strict and not outcome.is_complete:
            logger.error(
                f"{path.name}: enter details manually, missing "
                f"{', '.join(outcome.missing_required)}"
            )
            entry['error'] = 'incomplete'
        elif store is not None:
            entry['job_id'] = store.save(outcome.draft)

        results.append(entry)

    return results


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main function - entry point for command-line execution.

    Returns:
        Exit code (0 for success, non-zero for errors).
    """
    try:
        args = parse_arguments(argv)
        initialize_system(args)
        logger = get_logger(__name__)

        results = run_extraction(
            input_path=args.input,
            save=args.save,
            db_path=args.db,
            strict=args.strict
        )

        if not results:
            logger.error("No files to process")
            return 1

        payload = json.dumps(results, indent=2)
        if args.output:
            output_path = Path(args.output)
            ensure_directory(output_path.parent)
            output_path.write_text(payload, encoding='utf-8')
            logger.info(f"Results written to: {output_path}")
        else:
            print(payload)

        failed = sum(1 for r in results if 'error' in r)
        logger.info("=" * 60)
        logger.info(f"Extraction complete. {len(results) - failed}/{len(results)} succeeded.")
        logger.info("=" * 60)

        return 1 if failed else 0

    except (FileNotFoundError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    except JobSheetExtractionError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    except KeyboardInterrupt:
        print("\nOperation cancelled by user")
        return 130


if __name__ == "__main__":
    sys.exit(main())
