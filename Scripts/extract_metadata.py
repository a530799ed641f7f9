#!/usr/bin/env python3
"""
PNG Parameters Extraction Script
Crawls an image directory, extracts generation parameters from PNG files and
stores them in the images.files table.
"""

import argparse
import sqlite3
import sys
import time
from typing import List, Optional

from create_db import create_database
from db_config import ConfigurationError, load_config
from scan_images import ParameterScanner
from store_images import ImageStore

DEFAULT_ROOT = "images"
EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_INTERRUPTED = 130


def elapsed_ms(start: float) -> float:
    return (time.perf_counter() - start) * 1000


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description='Extract PNG generation parameters into the image database')
    parser.add_argument('--root', default=DEFAULT_ROOT, help=f'Directory to crawl for PNG files (default: {DEFAULT_ROOT})')
    parser.add_argument('--max-depth', type=int, default=None, help='Maximum subdirectory depth to descend into')
    parser.add_argument('--dry-run', action='store_true', help='Scan and report without writing to the database')
    parser.add_argument('--quiet', action='store_true', help='Only print the summary')

    args = parser.parse_args(argv)

    try:
        config = load_config()
    except ConfigurationError as e:
        print(f"❌ Configuration error: {e}")
        return EXIT_FAILURE

    print(f"Crawling: {args.root}")
    start = time.perf_counter()
    scanner = ParameterScanner(max_depth=args.max_depth, verbose=not args.quiet)
    result = scanner.scan(args.root)
    print(f"Time taken: {elapsed_ms(start):.2f} ms")

    if result.interrupted:
        print(f"Discarding {len(result.records)} collected images")
        return EXIT_INTERRUPTED

    print(f"\nScan complete:")
    print(f"  Images with parameters: {len(result.records)}")
    print(f"  Skipped: {len(result.skipped)}")

    if args.dry_run:
        print("Dry run: nothing written")
        return EXIT_OK

    try:
        create_database(config)
    except sqlite3.Error as e:
        print(f"✗ Could not prepare database: {e}")
        return EXIT_FAILURE

    store = ImageStore(config)
    start = time.perf_counter()
    stored = store.persist(result.records)
    print(f"Time taken to insert: {elapsed_ms(start):.2f} ms")

    if not stored.success:
        print(f"✗ Insert failed: {stored.error}")
        return EXIT_FAILURE

    print(f"✓ Added: {stored.inserted}")
    print(f"  Already present: {stored.ignored}")
    print(f"  Total in database: {store.count()}")
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
