"""Query helpers for stored values."""
from __future__ import annotations

from typing import Optional

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from worldtimez.data.models import StoredValue


def get_value(session: Session, key: str) -> Optional[str]:
    result = session.execute(select(StoredValue.value).where(StoredValue.key == key))
    return result.scalar_one_or_none()


def put_value(session: Session, key: str, value: str) -> StoredValue:
    record = session.get(StoredValue, key)
    if record is None:
        record = StoredValue(key=key, value=value)
        session.add(record)
    else:
        record.value = value
    session.flush()
    return record


def delete_value(session: Session, key: str) -> bool:
    result = session.execute(delete(StoredValue).where(StoredValue.key == key))
    return bool(result.rowcount)
