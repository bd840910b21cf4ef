"""Local persistence of the current user and family.

Records are stored whole under fixed keys in a key-value byte store. Each
save overwrites the previous value; there is no versioning or migration.
"""

import logging
from datetime import datetime, timezone
from typing import Optional, Protocol, TypeVar

from pydantic import BaseModel, ValidationError
from sqlalchemy.engine import Engine
from sqlmodel import Session

from familyhome.models.family import Family
from familyhome.models.kv import KeyValueEntry
from familyhome.models.user import User

logger = logging.getLogger(__name__)

CURRENT_USER_KEY = "currentUser"
CURRENT_FAMILY_KEY = "currentFamily"

RecordT = TypeVar("RecordT", bound=BaseModel)


class KeyValueStore(Protocol):
    def set(self, key: str, value: bytes) -> None: ...

    def get(self, key: str) -> Optional[bytes]: ...

    def delete(self, key: str) -> None: ...


class MemoryKeyValueStore:
    """In-process store, used when no database is configured and in tests."""

    def __init__(self):
        self._data: dict[str, bytes] = {}

    def set(self, key: str, value: bytes) -> None:
        self._data[key] = value

    def get(self, key: str) -> Optional[bytes]:
        return self._data.get(key)

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def __contains__(self, key: str) -> bool:
        return key in self._data


class SQLiteKeyValueStore:
    """Key-value store backed by the `kv_store` table."""

    def __init__(self, engine: Engine):
        self._engine = engine

    def set(self, key: str, value: bytes) -> None:
        with Session(self._engine) as session:
            entry = session.get(KeyValueEntry, key)
            if entry:
                entry.value = value
                entry.updated_at = datetime.now(timezone.utc)
            else:
                entry = KeyValueEntry(key=key, value=value)
            session.add(entry)
            session.commit()

    def get(self, key: str) -> Optional[bytes]:
        with Session(self._engine) as session:
            entry = session.get(KeyValueEntry, key)
            return entry.value if entry else None

    def delete(self, key: str) -> None:
        with Session(self._engine) as session:
            entry = session.get(KeyValueEntry, key)
            if entry:
                session.delete(entry)
                session.commit()


class PersistenceAdapter:
    def __init__(self, store: KeyValueStore):
        self.store = store

    def save(self, key: str, record: BaseModel) -> None:
        """Encode a record as JSON and store it under key, replacing any previous value."""
        self.store.set(key, record.model_dump_json().encode("utf-8"))

    def load(self, key: str, model: type[RecordT]) -> Optional[RecordT]:
        """Load a record, or None if it is missing or cannot be decoded."""
        data = self.store.get(key)
        if data is None:
            return None
        try:
            return model.model_validate_json(data)
        except (ValidationError, ValueError) as e:
            logger.warning("Discarding unreadable saved %s: %s", key, e)
            return None

    def save_user(self, user: User) -> None:
        self.save(CURRENT_USER_KEY, user)

    def load_user(self) -> Optional[User]:
        return self.load(CURRENT_USER_KEY, User)

    def save_family(self, family: Family) -> None:
        self.save(CURRENT_FAMILY_KEY, family)

    def load_family(self) -> Optional[Family]:
        return self.load(CURRENT_FAMILY_KEY, Family)
