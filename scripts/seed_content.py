#!/usr/bin/env python3
"""Seed the SQLite database with bundled lesson content.

Usage:
    python scripts/seed_content.py [--force] [--content PATH] [--db PATH]

Options:
    --force     Replace content that is already seeded
"""

import argparse
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from storage.connection import DEFAULT_DB_PATH
from storage.seed import DEFAULT_CONTENT_PATH, ContentBundle, seed_content


def main():
    parser = argparse.ArgumentParser(description="Seed lesson content into SQLite")
    parser.add_argument(
        "--force",
        action="store_true",
        help="Replace existing content (learner progress is kept)",
    )
    parser.add_argument(
        "--content",
        type=Path,
        default=DEFAULT_CONTENT_PATH,
        help="Content JSON file (default: data/content.json)",
    )
    parser.add_argument(
        "--db",
        type=Path,
        default=DEFAULT_DB_PATH,
        help="Database path (default: data/tutor.db)",
    )
    args = parser.parse_args()

    if not args.content.exists():
        print(f"Content file not found: {args.content}")
        sys.exit(1)

    print(f"Loading content from {args.content}")
    bundle = ContentBundle.from_file(args.content)

    try:
        counts = seed_content(bundle, args.db, force=args.force)
    except FileExistsError:
        print(f"Content already exists in {args.db}")
        print("Use --force to replace it")
        sys.exit(1)

    for table, count in counts.items():
        print(f"  Seeded {count} records into {table}")
    print()
    print(f"Seeding complete: {args.db}")


if __name__ == "__main__":
    main()
