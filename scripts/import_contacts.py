#!/usr/bin/env python3
"""
Bulk upsert partner contacts from a JSON file.

The file holds either a list of contacts or {"contacts": [...]}, each with
location_id, first_name, last_name, email and phone_number.

Usage:
    python scripts/import_contacts.py --json data/contacts.json
    python scripts/import_contacts.py --json data/contacts.json --db data/partner_contacts.db
"""

import argparse
from dataclasses import replace
from pathlib import Path
import sys

from partnercontacts.env import load_settings
from partnercontacts.importer import import_contacts, load_contacts
from partnercontacts.repositories import build_repository


def main():
    parser = argparse.ArgumentParser(description="Import partner contacts from JSON")
    parser.add_argument("--json", type=Path, default=Path("data/contacts.json"),
                       help="Path to JSON contacts file")
    parser.add_argument("--db", default=None,
                       help="Database URL or SQLite path (default: from environment)")
    parser.add_argument("--dry-run", action="store_true",
                       help="Validate contacts without writing")

    args = parser.parse_args()

    if not args.json.exists():
        print(f"❌ JSON file not found: {args.json}")
        sys.exit(1)

    settings = load_settings()
    if args.db:
        settings = replace(settings, database_url=args.db)

    contacts = load_contacts(args.json)
    print(f"Found {len(contacts)} contacts in {args.json}")

    repository = build_repository(settings, create_tables=True)
    counts = import_contacts(contacts, repository, dry_run=args.dry_run)

    if args.dry_run:
        print(f"\n[DRY RUN] {counts['valid']} valid, {counts['skipped']} invalid")
        return

    print("\n✅ Import complete!")
    print(f"   Inserted: {counts['inserted']}")
    print(f"   Updated:  {counts['updated']}")
    print(f"   Skipped:  {counts['skipped']}")
    print(f"   Failed:   {counts['failed']}")
    repository.logger.log_metrics_summary()

    if counts["failed"]:
        sys.exit(1)


if __name__ == "__main__":
    main()
