"""
Tests for database.py - schema and session management.
"""

import pytest
from datetime import datetime
from sqlalchemy.exc import IntegrityError

from partnercontacts.database import (
    PartnerContact,
    PartnerContactArchive,
    SessionContextFactory,
    database_url,
    init_database,
    get_session,
)


class TestDatabaseInit:
    """Test database initialization."""

    def test_init_creates_database_file(self, tmp_path):
        """Test that init_database creates the database file."""
        db_path = tmp_path / "test.db"
        assert not db_path.exists()

        init_database(db_path)

        assert db_path.exists()

    def test_init_creates_tables(self, tmp_path):
        """Test that init_database creates the live and archive tables."""
        db_path = tmp_path / "test.db"
        init_database(db_path)

        session = get_session(db_path)
        assert session.query(PartnerContact).count() == 0
        assert session.query(PartnerContactArchive).count() == 0
        session.close()

    def test_init_creates_parent_directories(self, tmp_path):
        """Test that init_database creates parent directories if missing."""
        db_path = tmp_path / "nested" / "dir" / "test.db"
        assert not db_path.parent.exists()

        init_database(db_path)

        assert db_path.exists()

    def test_init_accepts_sqlalchemy_url(self, tmp_path):
        """A full SQLAlchemy URL is used as-is."""
        db_path = tmp_path / "url.db"
        init_database(f"sqlite:///{db_path}")

        assert db_path.exists()

    def test_table_names(self):
        assert PartnerContact.__tablename__ == "PartnerContacts"
        assert PartnerContactArchive.__tablename__ == "PartnerContactsArchive"


class TestDatabaseUrl:
    """Test database target resolution."""

    def test_path_becomes_sqlite_url(self, tmp_path):
        assert database_url(tmp_path / "a.db") == f"sqlite:///{tmp_path / 'a.db'}"

    def test_plain_string_path_becomes_sqlite_url(self):
        assert database_url("data/a.db") == "sqlite:///data/a.db"

    def test_url_passes_through(self):
        url = "postgresql://user:pw@localhost/contacts"
        assert database_url(url) == url


class TestPartnerContactTable:
    """Test constraints on the live table."""

    @pytest.fixture
    def db_session(self, tmp_path):
        """Create a temporary database and return a session."""
        db_path = tmp_path / "test.db"
        init_database(db_path)
        session = get_session(db_path)
        yield session
        session.close()

    def test_duplicate_location_id_fails(self, db_session):
        db_session.add(PartnerContact(location_id="L1", email="e1"))
        db_session.commit()
        db_session.expunge_all()

        db_session.add(PartnerContact(location_id="L1", email="e2"))
        with pytest.raises(IntegrityError):
            db_session.commit()

    def test_duplicate_email_fails(self, db_session):
        db_session.add(PartnerContact(location_id="L1", email="same"))
        db_session.add(PartnerContact(location_id="L2", email="same"))

        with pytest.raises(IntegrityError):
            db_session.commit()

    def test_duplicate_phone_fails(self, db_session):
        db_session.add(PartnerContact(location_id="L1", phone_number="same"))
        db_session.add(PartnerContact(location_id="L2", phone_number="same"))

        with pytest.raises(IntegrityError):
            db_session.commit()

    def test_missing_email_and_phone_allowed_for_many_rows(self, db_session):
        db_session.add(PartnerContact(location_id="L1"))
        db_session.add(PartnerContact(location_id="L2"))
        db_session.commit()

        assert db_session.query(PartnerContact).count() == 2

    def test_timestamps_set_on_insert(self, db_session):
        before = datetime.now()
        db_session.add(PartnerContact(location_id="L1"))
        db_session.commit()
        after = datetime.now()

        saved = db_session.query(PartnerContact).filter_by(location_id="L1").first()
        assert before <= saved.created_at <= after
        assert saved.updated_at is not None


class TestPartnerContactArchive:
    """Test archive rows."""

    def test_from_contact_copies_ciphertext(self):
        created = datetime(2024, 1, 1)
        contact = PartnerContact(
            location_id="L1",
            first_name="c-first",
            last_name="c-last",
            email="c-email",
            phone_number="c-phone",
            created_at=created,
        )

        archived = PartnerContactArchive.from_contact(contact)

        assert archived.location_id == "L1"
        assert archived.first_name == "c-first"
        assert archived.last_name == "c-last"
        assert archived.email == "c-email"
        assert archived.phone_number == "c-phone"
        assert archived.created_at == created

    def test_location_can_be_archived_twice(self, tmp_path):
        db_path = tmp_path / "test.db"
        init_database(db_path)
        session = get_session(db_path)

        session.add(PartnerContactArchive(location_id="L1", email="x"))
        session.add(PartnerContactArchive(location_id="L1", email="x"))
        session.commit()

        assert session.query(PartnerContactArchive).filter_by(location_id="L1").count() == 2
        session.close()


class TestSessionContextFactory:
    """Test scoped sessions."""

    def test_context_yields_working_session(self, context_factory):
        with context_factory.create_data_context() as session:
            session.add(PartnerContact(location_id="L1"))
            session.commit()

        with context_factory.create_data_context() as session:
            assert session.query(PartnerContact).count() == 1

    def test_uncommitted_work_is_discarded(self, context_factory):
        with context_factory.create_data_context() as session:
            session.add(PartnerContact(location_id="L1"))
            session.flush()

        with context_factory.create_data_context() as session:
            assert session.query(PartnerContact).count() == 0

    def test_each_context_gets_a_new_session(self, context_factory):
        with context_factory.create_data_context() as first:
            pass
        with context_factory.create_data_context() as second:
            assert first is not second

    def test_create_tables_flag(self, tmp_path):
        factory = SessionContextFactory(tmp_path / "fresh.db", create_tables=True)
        with factory.create_data_context() as session:
            assert session.query(PartnerContactArchive).count() == 0
        factory.dispose()
