"""SQLite storage layer for cuekeeper.

The scoreboard persists into a single named slot of a key-value store.
The default backend keeps slots in a SQLite table through SQLAlchemy; an
in-memory backend is available for tests and throwaway sessions.
"""

from datetime import datetime
from pathlib import Path
from typing import Optional, Union

from sqlalchemy import Column, DateTime, String, Text, create_engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import NullPool

Base = declarative_base()


class PersistenceReadError(Exception):
    """Stored state could not be read or parsed."""

    pass


class PersistenceWriteError(Exception):
    """State could not be written to storage."""

    pass


# ============================================================================
# ORM Models
# ============================================================================


class SlotORM(Base):
    """Key-value slot table.

    Each row holds one serialized JSON document.
    """

    __tablename__ = "kv_slots"

    key = Column(String(100), primary_key=True)
    value = Column(Text, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


# ============================================================================
# Database Manager
# ============================================================================


class DatabaseManager:
    """Manages SQLite database connection and session."""

    def __init__(self, db_path: Union[str, Path] = ".cuekeeper/cuekeeper.sqlite"):
        """Initialize database manager.

        Args:
            db_path: Path to SQLite database file
        """
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

        # Use NullPool for SQLite to avoid connection pool issues
        self.engine = create_engine(
            f"sqlite:///{self.db_path}",
            echo=False,
            poolclass=NullPool,
            connect_args={"check_same_thread": False}
        )
        self.SessionLocal = sessionmaker(bind=self.engine)

    def create_tables(self):
        """Create all tables in the database."""
        Base.metadata.create_all(self.engine)

    def get_session(self):
        """Get a new database session."""
        return self.SessionLocal()


# ============================================================================
# Repository Pattern
# ============================================================================


class SlotRepository:
    """Repository for key-value slot operations."""

    def __init__(self, session):
        self.session = session

    def get(self, key: str) -> Optional[SlotORM]:
        """Get a slot by key.

        Returns:
            SlotORM if found, None otherwise
        """
        return self.session.query(SlotORM).filter(SlotORM.key == key).first()

    def put(self, key: str, value: str) -> SlotORM:
        """Insert or overwrite a slot."""
        slot = self.get(key)
        if slot:
            slot.value = value
        else:
            slot = SlotORM(key=key, value=value)
            self.session.add(slot)
        self.session.commit()
        return slot

    def delete(self, key: str) -> bool:
        """Delete a slot.

        Returns:
            True if deleted, False if not found
        """
        slot = self.get(key)
        if slot:
            self.session.delete(slot)
            self.session.commit()
            return True
        return False


# ============================================================================
# Slot stores
# ============================================================================


class SQLiteSlotStore:
    """Slot store backed by the kv_slots table.

    Every call opens and closes its own session. Tables are created on
    first use so an unreadable database file surfaces as a persistence
    error instead of failing at construction.
    """

    def __init__(self, db_manager: DatabaseManager):
        self.db_manager = db_manager
        self._tables_ready = False

    def _ensure_tables(self):
        if not self._tables_ready:
            self.db_manager.create_tables()
            self._tables_ready = True

    def read(self, key: str) -> Optional[str]:
        """Return the raw value of a slot, None when the slot is empty.

        Raises:
            PersistenceReadError: If the database cannot be queried
        """
        session = self.db_manager.get_session()
        try:
            self._ensure_tables()
            slot = SlotRepository(session).get(key)
            return slot.value if slot else None
        except SQLAlchemyError as e:
            raise PersistenceReadError(f"Could not read slot '{key}': {e}") from e
        finally:
            session.close()

    def write(self, key: str, value: str) -> None:
        """Overwrite a slot.

        Raises:
            PersistenceWriteError: If the database rejects the write
        """
        session = self.db_manager.get_session()
        try:
            self._ensure_tables()
            SlotRepository(session).put(key, value)
        except SQLAlchemyError as e:
            session.rollback()
            raise PersistenceWriteError(f"Could not write slot '{key}': {e}") from e
        finally:
            session.close()

    def remove(self, key: str) -> bool:
        """Delete a slot, True if something was removed."""
        session = self.db_manager.get_session()
        try:
            self._ensure_tables()
            return SlotRepository(session).delete(key)
        except SQLAlchemyError as e:
            session.rollback()
            raise PersistenceWriteError(f"Could not delete slot '{key}': {e}") from e
        finally:
            session.close()


class MemorySlotStore:
    """Slot store that lives only as long as the process."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self.slots: dict[str, str] = dict(initial or {})

    def read(self, key: str) -> Optional[str]:
        return self.slots.get(key)

    def write(self, key: str, value: str) -> None:
        self.slots[key] = value

    def remove(self, key: str) -> bool:
        return self.slots.pop(key, None) is not None


def open_slot_store(db_path: Optional[Union[str, Path]] = None) -> SQLiteSlotStore:
    """Open the SQLite slot store at db_path (default data dir)."""
    if db_path is None:
        from cuekeeper.paths import get_default_db_path

        db_path = get_default_db_path()
    return SQLiteSlotStore(DatabaseManager(db_path))
