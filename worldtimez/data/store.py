"""Key/value backends the persistence adapter writes through."""
from __future__ import annotations

from typing import Optional, Protocol

from sqlalchemy import Engine
from sqlalchemy.exc import SQLAlchemyError

from worldtimez.core.errors import StorageReadFailure, StorageWriteFailure
from worldtimez.data import repositories
from worldtimez.data.database import init_db, make_session_factory, session_scope


class KeyValueStore(Protocol):
    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...

    def delete(self, key: str) -> None:
        ...


class SqlKeyValueStore:
    """Key/value store kept in a single SQLAlchemy table."""

    def __init__(self, engine: Engine, create_schema: bool = True) -> None:
        self.engine = engine
        self._sessions = make_session_factory(engine)
        if create_schema:
            init_db(engine)

    def get(self, key: str) -> Optional[str]:
        try:
            with session_scope(self._sessions) as session:
                return repositories.get_value(session, key)
        except SQLAlchemyError as exc:
            raise StorageReadFailure(f"Could not read {key!r}: {exc}") from exc

    def set(self, key: str, value: str) -> None:
        try:
            with session_scope(self._sessions) as session:
                repositories.put_value(session, key, value)
        except SQLAlchemyError as exc:
            raise StorageWriteFailure(f"Could not write {key!r}: {exc}") from exc

    def delete(self, key: str) -> None:
        try:
            with session_scope(self._sessions) as session:
                repositories.delete_value(session, key)
        except SQLAlchemyError as exc:
            raise StorageWriteFailure(f"Could not delete {key!r}: {exc}") from exc
