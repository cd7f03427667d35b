"""
Plain models returned to callers of the repository.
"""

from dataclasses import dataclass, asdict
from enum import Enum
from typing import Any, Dict, Optional


@dataclass
class PartnerContactModel:
    """Decrypted view of a partner contact."""

    location_id: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    phone_number: Optional[str] = None

    @classmethod
    def from_entity(cls, entity: Any) -> "PartnerContactModel":
        """Map a decrypted entity onto the view model."""
        return cls(
            location_id=entity.location_id,
            first_name=entity.first_name,
            last_name=entity.last_name,
            email=entity.email,
            phone_number=entity.phone_number,
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PartnerContactModel":
        return cls(
            location_id=data.get("location_id"),
            first_name=data.get("first_name"),
            last_name=data.get("last_name"),
            email=data.get("email"),
            phone_number=data.get("phone_number"),
        )

    def normalized(self) -> "PartnerContactModel":
        """
        Copy with location_id stripped and blank optional fields set to None.

        Blank emails and phone numbers must reach the database as NULL so
        the unique constraints do not treat them as a shared value.
        """
        return PartnerContactModel(
            location_id=normalize_location_id(self.location_id),
            first_name=_blank_to_none(self.first_name),
            last_name=_blank_to_none(self.last_name),
            email=_blank_to_none(self.email),
            phone_number=_blank_to_none(self.phone_number),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def normalize_location_id(location_id: Any) -> Any:
    """Strip surrounding whitespace from a location id; non-strings pass through."""
    if isinstance(location_id, str):
        return location_id.strip()
    return location_id


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


class DeleteOutcome(str, Enum):
    """Result of a soft delete."""

    DELETED = "deleted"
    NOT_FOUND = "not_found"
    FAILED = "failed"
