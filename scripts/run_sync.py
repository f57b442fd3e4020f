#!/usr/bin/env python3
"""
CLI script for syncing the property feed into the content store.

This script reads the JSON feed and the coded-value dictionary, maps every
selected record and reconciles it into the MongoDB content store (or an
in-memory store with --dry-run), then prints a summary of the run.

Usage:
    python run_sync.py --count 10
    python run_sync.py --range 0 49 --skip-duplicates
    python run_sync.py --count 0 --dry-run -v

Author: Leonardo Pacciani-Mori
License: MIT
"""

import sys
from pathlib import Path

# Allow running without package installation
_script_dir = Path(__file__).parent
_project_root = _script_dir.parent
_src_dir = _project_root / "src"
if _src_dir.exists() and str(_src_dir) not in sys.path:
    sys.path.insert(0, str(_src_dir))

import argparse
import logging
from typing import List, Optional


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parse command-line arguments.

    Args:
        argv: Argument list; defaults to sys.argv[1:].

    Returns:
        argparse.Namespace: The parsed arguments.
    """
    parser = argparse.ArgumentParser(
        description="Sync property listings from the JSON feed into the content store",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    # Sync the first 10 records of the feed
    python run_sync.py --count 10

    # Sync records 0 to 49 (inclusive), dropping titles that already exist
    python run_sync.py --range 0 49 --skip-duplicates

    # Map and reconcile every record without touching MongoDB
    python run_sync.py --count 0 --dry-run
        """
    )

    parser.add_argument(
        "--feed",
        type=str,
        default=None,
        help="Path to the JSON feed file (default: FEED_DATA_FILE)"
    )
    parser.add_argument(
        "--dictionary",
        type=str,
        default=None,
        help="Path to the dictionary file (default: DICTIONARY_FILE)"
    )

    # Record selection (count or range)
    selection = parser.add_mutually_exclusive_group()
    selection.add_argument(
        "--count",
        type=int,
        default=None,
        help="Number of records to sync from the start of the feed (0 for all)"
    )
    selection.add_argument(
        "--range",
        type=int,
        nargs=2,
        metavar=("START", "END"),
        help="Sync records START to END, both inclusive"
    )

    parser.add_argument(
        "--skip-duplicates",
        action="store_true",
        help="Drop records whose title already exists in the store"
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Use an in-memory store instead of MongoDB"
    )
    parser.add_argument(
        "--no-default-thumbnail",
        action="store_true",
        help="Do not fall back to the placeholder when a featured image fails"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose output"
    )

    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the sync CLI.

    Returns:
        int: Exit code (0 for success, non-zero for failure).
    """
    args = parse_arguments(argv)

    # Set up logging
    from property_feed_sync.config.logging_config import get_logger, set_log_level, setup_logging

    setup_logging(level=logging.INFO)
    if args.verbose:
        set_log_level(logging.DEBUG, "property_feed_sync")

    logger = get_logger(__name__)

    from property_feed_sync.config import settings
    from property_feed_sync.dictionary import DictionaryResolver, load_dictionary
    from property_feed_sync.exceptions import FeedReadError, StoreError, ValidationError
    from property_feed_sync.mapping import PropertyMapper
    from property_feed_sync.sync import BatchSyncDriver, FeedReader, ImageReconciler, SyncParameters
    from property_feed_sync.utils.reporting import print_report

    try:
        if args.range:
            parameters = SyncParameters.range(*args.range, skip_duplicates=args.skip_duplicates)
        else:
            parameters = SyncParameters.count(args.count, skip_duplicates=args.skip_duplicates)
    except ValidationError as e:
        logger.error(f"Invalid parameters: {e}")
        return 2

    reader = FeedReader(args.feed or settings.FEED_DATA_FILE)
    try:
        items = reader.read(parameters)
    except FeedReadError as e:
        logger.error(str(e))
        logger.debug(f"Feed file info: {reader.describe()}")
        return 1

    resolver = DictionaryResolver(load_dictionary(args.dictionary or settings.DICTIONARY_FILE))
    logger.info(f"Loaded dictionary with {len(resolver)} categories")
    mapper = PropertyMapper(resolver)

    def sync_with(store) -> int:
        driver = BatchSyncDriver(
            mapper,
            store,
            image_reconciler=ImageReconciler(
                store, use_default_thumbnail=not args.no_default_thumbnail
            ),
        )
        results = driver.run(items, parameters)
        print_report(results)
        return 0

    try:
        if args.dry_run:
            from property_feed_sync.store import InMemoryContentStore

            logger.info("Dry run: syncing into an in-memory store")
            return sync_with(InMemoryContentStore())

        from property_feed_sync.core.connections import mongodb_connection
        from property_feed_sync.store.mongo import MongoContentStore

        with mongodb_connection() as client:
            store = MongoContentStore.from_client(client)
            store.ensure_indexes()
            return sync_with(store)

    except KeyboardInterrupt:
        logger.warning("Sync interrupted by user")
        return 130

    except StoreError as e:
        logger.error(f"Sync failed with store error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
