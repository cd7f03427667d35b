"""
Bulk import of partner contacts.

Contacts are validated, then upserted one by one through the repository.
Transient database errors (locks, dropped connections) are retried with
exponential backoff. Constraint clashes, exhausted retries and stored rows
the configured key cannot decrypt count the contact as failed and the
import moves on.
"""

import json
from pathlib import Path
from typing import Any, Dict, List

from sqlalchemy.exc import IntegrityError, OperationalError

from .errors import PartnerContactError
from .models import PartnerContactModel
from .repositories import PartnerContactRepository
from .retry import RetryError, exponential_backoff, is_transient_error
from .schema import validate_contact


def load_contacts(json_path: Path) -> List[Any]:
    """Read contacts from a JSON list or a {"contacts": [...]} object."""
    with json_path.open("r", encoding="utf-8") as f:
        data = json.load(f)
    if isinstance(data, dict):
        data = data.get("contacts", [])
    return data


def import_contacts(
    contacts: List[Any],
    repository: PartnerContactRepository,
    dry_run: bool = False,
    max_retries: int = 3,
    base_delay: float = 1.0,
) -> Dict[str, int]:
    """
    Upsert contacts through the repository.

    Args:
        contacts: Contact dicts
        repository: Target repository
        dry_run: If True, validate only
        max_retries: Retries per contact on transient database errors
        base_delay: Initial retry delay in seconds

    Returns:
        Counts of valid, inserted, updated, skipped and failed contacts
    """
    logger = repository.logger

    @exponential_backoff(
        max_retries=max_retries,
        base_delay=base_delay,
        exceptions=(OperationalError,),
        retry_if=is_transient_error,
        on_retry=lambda attempt, e, delay: logger.warning(
            "Transient database error, retrying",
            attempt=attempt,
            delay=delay,
            error_type=type(e).__name__,
        ),
    )
    def save(contact: PartnerContactModel) -> bool:
        return repository.create_or_update(contact)

    counts = {"valid": 0, "inserted": 0, "updated": 0, "skipped": 0, "failed": 0}

    for index, raw in enumerate(contacts):
        if not isinstance(raw, dict):
            logger.warning("Skipping contact: not an object", index=index)
            counts["skipped"] += 1
            continue

        errors = validate_contact(raw)
        if errors:
            logger.warning(
                "Skipping invalid contact",
                index=index,
                location_id=raw.get("location_id"),
                errors=errors,
            )
            counts["skipped"] += 1
            continue

        counts["valid"] += 1
        if dry_run:
            continue

        contact = PartnerContactModel.from_dict(raw)
        try:
            if save(contact):
                counts["inserted"] += 1
            else:
                counts["updated"] += 1
        except (IntegrityError, OperationalError, RetryError, PartnerContactError) as e:
            logger.error(
                "Failed to import contact",
                location_id=contact.location_id,
                error_type=type(e).__name__,
            )
            counts["failed"] += 1

    logger.info("Contact import finished", dry_run=dry_run, **counts)
    return counts
