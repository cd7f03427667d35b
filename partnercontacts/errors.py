"""
Exceptions raised by the partner contact store.
"""

from typing import List, Optional


class PartnerContactError(Exception):
    """Base class for partner contact errors."""
    pass


class PartnerContactValidationError(PartnerContactError):
    """Raised when a contact fails validation before being written."""

    def __init__(self, errors: List[str], location_id: Optional[str] = None):
        self.errors = errors
        self.location_id = location_id
        super().__init__("Invalid partner contact: " + "; ".join(errors))


class EncryptionConfigError(PartnerContactError):
    """Raised when the encryption key is missing or malformed."""
    pass


class DecryptionError(PartnerContactError):
    """Raised when a stored value cannot be decrypted with the configured key."""
    pass
