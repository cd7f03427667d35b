#!/usr/bin/env python3
"""
Check that every live and archived partner contact decrypts with the configured key.

Usage:
    python scripts/verify_archive.py
    python scripts/verify_archive.py --db data/partner_contacts.db
"""

import argparse
import sys

from partnercontacts.audit import audit_store
from partnercontacts.database import SessionContextFactory
from partnercontacts.encryption import EncryptionService
from partnercontacts.env import load_settings


def main():
    parser = argparse.ArgumentParser(description="Verify partner contact storage")
    parser.add_argument("--db", default=None,
                       help="Database URL or SQLite path (default: from environment)")
    args = parser.parse_args()

    settings = load_settings()
    factory = SessionContextFactory(args.db or settings.database_url)
    encryption_service = EncryptionService.from_hex(settings.encryption_key)

    print("Auditing partner contacts...")
    report = audit_store(factory, encryption_service)
    factory.dispose()

    print(f"  Live:    {report.live_total} contacts")
    print(f"  Archive: {report.archive_total} contacts")

    if report.unreadable_live:
        print(f"\n❌ {len(report.unreadable_live)} live contacts cannot be decrypted:")
        for location_id in report.unreadable_live[:10]:
            print(f"    - {location_id}")
        if len(report.unreadable_live) > 10:
            print(f"    ... and {len(report.unreadable_live) - 10} more")

    if report.unreadable_archive:
        print(f"\n❌ {len(report.unreadable_archive)} archived contacts cannot be decrypted")

    if not report.ok:
        sys.exit(1)

    print("\n✅ All contacts decrypt with the configured key")


if __name__ == "__main__":
    main()
