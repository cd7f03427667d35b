"""
Pytest configuration and shared fixtures.
"""

import pytest

from partnercontacts.database import SessionContextFactory
from partnercontacts.encryption import EncryptionService
from partnercontacts.logger import StructuredLogger, reset_logger
from partnercontacts.models import PartnerContactModel
from partnercontacts.repositories import PartnerContactRepository

TEST_KEY_HEX = bytes(range(64)).hex()


@pytest.fixture(autouse=True)
def fresh_global_logger():
    """Keep the process-wide logger from leaking between tests."""
    reset_logger()
    yield
    reset_logger()


@pytest.fixture
def encryption_service() -> EncryptionService:
    return EncryptionService.from_hex(TEST_KEY_HEX)


@pytest.fixture
def contact_logger(tmp_path) -> StructuredLogger:
    return StructuredLogger(
        name="partnercontacts.test",
        level="DEBUG",
        log_dir=tmp_path / "logs",
        enable_console=False,
    )


@pytest.fixture
def context_factory(tmp_path):
    """Session factory over a fresh SQLite database with tables created."""
    factory = SessionContextFactory(tmp_path / "contacts.db", create_tables=True)
    yield factory
    factory.dispose()


@pytest.fixture
def repository(context_factory, encryption_service, contact_logger) -> PartnerContactRepository:
    return PartnerContactRepository(context_factory, encryption_service, logger=contact_logger)


@pytest.fixture
def sample_contact() -> PartnerContactModel:
    return PartnerContactModel(
        location_id="L1",
        first_name="Ada",
        last_name="Lovelace",
        email="a@x.com",
        phone_number="+44 20 7946 0018",
    )


@pytest.fixture
def valid_contact_data():
    """Valid contact payload."""
    return {
        "location_id": "L2",
        "first_name": "Grace",
        "last_name": "Hopper",
        "email": "grace@navy.example",
        "phone_number": "+1 (555) 010-2030",
    }
