"""
Partner Contacts Repository.

Responsibilities:
- CRUD operations for the PartnerContacts table.
- Encrypt-on-write, decrypt-on-read of contact PII.
- Soft delete into PartnerContactsArchive.

Non-Responsibilities:
- No key management.
- No schema migrations.
- No retries.

Invariant:
Rows handed back to callers are always decrypted view models; ORM
entities holding plaintext never stay attached to a session.
"""

from typing import List, Optional

from sqlalchemy.orm import Session

from ..database import (
    DataContextFactory,
    PartnerContact,
    PartnerContactArchive,
    SessionContextFactory,
)
from ..encryption import EncryptionService, EntityEncryptor
from ..env import Settings, load_settings
from ..errors import PartnerContactValidationError
from ..logger import StructuredLogger, get_logger
from ..models import DeleteOutcome, PartnerContactModel, normalize_location_id
from ..schema import validate_contact


class PartnerContactRepository:
    """Data access for partner contacts with field-level encryption."""

    def __init__(
        self,
        context_factory: DataContextFactory,
        encryption_service: EntityEncryptor,
        logger: Optional[StructuredLogger] = None,
    ):
        self._context_factory = context_factory
        self._encryption_service = encryption_service
        self.logger = logger or get_logger()

    def get_by_location_id(self, location_id: str) -> Optional[PartnerContactModel]:
        """Return the decrypted contact for a location, or None."""
        location_id = normalize_location_id(location_id)
        with self._context_factory.create_data_context() as session:
            entity = session.query(PartnerContact).filter_by(location_id=location_id).first()
            return self._to_model(session, entity)

    def get_by_email(self, email: Optional[str]) -> Optional[PartnerContactModel]:
        """Return the decrypted contact whose email matches, or None."""
        if not email:
            return None
        encrypted_email = self._encryption_service.encrypt_value(email)

        with self._context_factory.create_data_context() as session:
            entity = session.query(PartnerContact).filter_by(email=encrypted_email).first()
            return self._to_model(session, entity)

    def get_by_phone(self, phone: Optional[str]) -> Optional[PartnerContactModel]:
        """Return the decrypted contact whose phone number matches, or None."""
        if not phone:
            return None
        encrypted_phone = self._encryption_service.encrypt_value(phone)

        with self._context_factory.create_data_context() as session:
            entity = session.query(PartnerContact).filter_by(phone_number=encrypted_phone).first()
            return self._to_model(session, entity)

    def get_paginated(self, skip: int, take: int) -> List[PartnerContactModel]:
        """
        Return one page of decrypted contacts ordered by location_id.

        Args:
            skip: Number of rows to skip
            take: Maximum number of rows to return

        Raises:
            ValueError: If skip or take is negative
        """
        if skip < 0 or take < 0:
            raise ValueError("skip and take must be non-negative")

        with self._context_factory.create_data_context() as session:
            entities = (
                session.query(PartnerContact)
                .order_by(PartnerContact.location_id)
                .offset(skip)
                .limit(take)
                .all()
            )
            session.expunge_all()
            self.logger.record_read()
            return [
                PartnerContactModel.from_entity(self._encryption_service.decrypt(entity))
                for entity in entities
            ]

    def get_total(self) -> int:
        """Count live contacts."""
        with self._context_factory.create_data_context() as session:
            return session.query(PartnerContact).count()

    def create_or_update(self, partner_contact: PartnerContactModel) -> bool:
        """
        Insert a contact, or overwrite the one stored for its location_id.

        Args:
            partner_contact: Plaintext contact

        Returns:
            True if a new row was inserted, False if an existing row was updated

        Raises:
            PartnerContactValidationError: If the contact is invalid
            sqlalchemy.exc.IntegrityError: If email or phone belongs to another location
        """
        partner_contact = partner_contact.normalized()
        errors = validate_contact(partner_contact.to_dict())
        if errors:
            raise PartnerContactValidationError(errors, location_id=partner_contact.location_id)

        with self._context_factory.create_data_context() as session:
            existing = (
                session.query(PartnerContact)
                .filter_by(location_id=partner_contact.location_id)
                .first()
            )

            if existing is not None:
                existing = self._encryption_service.decrypt(existing)

                existing.first_name = partner_contact.first_name
                existing.last_name = partner_contact.last_name
                existing.phone_number = partner_contact.phone_number
                existing.email = partner_contact.email

                self._encryption_service.encrypt(existing)
                inserted = False
            else:
                entity = PartnerContact(
                    location_id=partner_contact.location_id,
                    first_name=partner_contact.first_name,
                    last_name=partner_contact.last_name,
                    email=partner_contact.email,
                    phone_number=partner_contact.phone_number,
                )
                session.add(self._encryption_service.encrypt(entity))
                inserted = True

            session.commit()

        self.logger.record_write(inserted)
        self.logger.debug(
            "Partner contact saved",
            location_id=partner_contact.location_id,
            status="inserted" if inserted else "updated",
        )
        return inserted

    def delete_if_exists(self, location_id: str) -> DeleteOutcome:
        """
        Move a contact to the archive table in a single transaction.

        Failures are logged and rolled back, never raised. A rollback or
        session close that fails in turn is reported the same way.

        Returns:
            DeleteOutcome.DELETED, NOT_FOUND or FAILED
        """
        location_id = normalize_location_id(location_id)
        try:
            with self._context_factory.create_data_context() as session:
                try:
                    entity = session.query(PartnerContact).filter_by(location_id=location_id).first()

                    if entity is None:
                        return DeleteOutcome.NOT_FOUND

                    session.add(PartnerContactArchive.from_contact(entity))
                    session.delete(entity)
                    session.commit()
                except Exception:
                    session.rollback()
                    raise
        except Exception as e:
            self.logger.record_delete_failure(type(e).__name__)
            self.logger.error(
                "Error occurred while deleting partner contact",
                exc_info=True,
                location_id=location_id,
                error_type=type(e).__name__,
            )
            return DeleteOutcome.FAILED

        self.logger.record_delete()
        self.logger.info("Partner contact archived", location_id=location_id)
        return DeleteOutcome.DELETED

    def _to_model(
        self, session: Session, entity: Optional[PartnerContact]
    ) -> Optional[PartnerContactModel]:
        self.logger.record_read()
        if entity is None:
            return None
        session.expunge(entity)
        return PartnerContactModel.from_entity(self._encryption_service.decrypt(entity))


def build_repository(
    settings: Optional[Settings] = None,
    create_tables: bool = False,
    logger: Optional[StructuredLogger] = None,
) -> PartnerContactRepository:
    """
    Wire a repository from settings.

    Args:
        settings: Settings to use (default: read from the environment)
        create_tables: Create missing tables on the configured database
        logger: Logger to use. Without one the process-wide logger from
            get_logger() is used; it is configured by whichever call creates
            it first, so log_level and log_dir only take effect on that call.

    Raises:
        EncryptionConfigError: If the encryption key is missing or invalid
    """
    settings = settings or load_settings()
    if logger is None:
        logger = get_logger(level=settings.log_level, log_dir=settings.log_dir)
    return PartnerContactRepository(
        SessionContextFactory(settings.database_url, create_tables=create_tables),
        EncryptionService.from_hex(settings.encryption_key),
        logger=logger,
    )
