"""
Consistency checks over the live and archive tables.

Reads ciphertext straight from the tables and reports rows that the
configured key cannot decrypt. Plaintext is discarded as soon as it is
checked.
"""

from dataclasses import dataclass, field
from typing import List

from .database import DataContextFactory, PartnerContact, PartnerContactArchive
from .encryption import EncryptionService, encrypted_fields
from .errors import DecryptionError


@dataclass
class AuditReport:
    live_total: int = 0
    archive_total: int = 0
    unreadable_live: List[str] = field(default_factory=list)
    unreadable_archive: List[int] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.unreadable_live and not self.unreadable_archive


def _readable(encryption_service: EncryptionService, row) -> bool:
    try:
        for name in encrypted_fields(row):
            encryption_service.decrypt_value(getattr(row, name))
    except DecryptionError:
        return False
    return True


def audit_store(
    context_factory: DataContextFactory,
    encryption_service: EncryptionService,
) -> AuditReport:
    """
    Count live/archived contacts and find rows the key cannot decrypt.

    Args:
        context_factory: Source of database sessions
        encryption_service: Service holding the key to check against

    Returns:
        AuditReport
    """
    report = AuditReport()

    with context_factory.create_data_context() as session:
        for row in session.query(PartnerContact).order_by(PartnerContact.location_id):
            report.live_total += 1
            if not _readable(encryption_service, row):
                report.unreadable_live.append(row.location_id)

        for row in session.query(PartnerContactArchive).order_by(PartnerContactArchive.id):
            report.archive_total += 1
            if not _readable(encryption_service, row):
                report.unreadable_archive.append(row.id)

    return report
