"""
CLI utility for the browscap cache.

Usage:
    browscap-cache --status --properties Browser,Version
    browscap-cache --update --source data/browscap.jsonl --data-dir /var/cache
"""

import argparse
import logging
import sys
from datetime import datetime
from typing import Optional

from browscap_cache import (
    BrowscapCacheError,
    Coordinator,
    JsonLinesSource,
    NoneFilter,
    PropertyFilter,
)
from browscap_cache.config import Settings


def format_time(ts: int) -> str:
    """Format unix timestamp as human-readable string."""
    if ts == 0:
        return "never"
    return datetime.fromtimestamp(ts).strftime("%Y-%m-%d %H:%M:%S")


def show_status(coordinator: Coordinator) -> int:
    """Print directory, hash and dataset state."""
    reader = coordinator.reader()

    print(f"📁 Data directory:    {coordinator.data_directory()}")
    print(f"🔑 Data version hash: {coordinator.data_version_hash()}")
    print(f"🗄️  Current dataset:   {reader.current_database() or 'none'}")

    if reader.is_update_required():
        print("⚠️  Update required")
        return 0

    print(f"   Version:      {reader.get_version()}")
    print(f"   Released:     {format_time(reader.get_release_time())}")
    print(f"   Records:      {reader.count():,}")
    print("✅ Dataset is current")
    return 0


def run_update(coordinator: Coordinator) -> int:
    """Generate a new dataset from the configured source."""
    print(f"🔧 Generating dataset in {coordinator.data_directory()}...")
    db_path = coordinator.writer().generate()
    count = coordinator.reader(force_new=True).count()
    print(f"   ✓ {db_path.name} ({count:,} records)")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Manage the browscap capability cache (status, update)"
    )
    parser.add_argument("--status", action="store_true", help="Show cache status")
    parser.add_argument("--update", action="store_true", help="Generate a new dataset")
    parser.add_argument(
        "--data-dir",
        type=str,
        default=None,
        help="Base directory (default: BROWSCAP_DATA_DIR or the temp dir)",
    )
    parser.add_argument(
        "--source",
        type=str,
        default=None,
        help="JSONL capability source (default: BROWSCAP_SOURCE)",
    )
    parser.add_argument(
        "--properties",
        type=str,
        default="",
        help="Comma-separated properties to keep (default: all)",
    )
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """CLI entrypoint."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.status and not args.update:
        parser.print_help()
        print("\n❌ Error: Must specify --status or --update")
        return 1

    settings = Settings.from_env()
    if args.data_dir:
        settings.data_dir = args.data_dir
    if args.source:
        settings.source_path = args.source

    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    properties = [p.strip() for p in args.properties.split(",") if p.strip()]
    property_filter = PropertyFilter(properties) if properties else NoneFilter()

    try:
        coordinator = Coordinator(settings.data_dir)
        if settings.source_path:
            coordinator.set_source(JsonLinesSource(settings.source_path))
        coordinator.set_property_filter(property_filter)

        if args.update:
            run_update(coordinator)
        if args.status:
            show_status(coordinator)
    except BrowscapCacheError as e:
        print(f"❌ {e}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
