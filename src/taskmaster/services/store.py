"""Generic record access over the named collections."""

from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence, Type

from sqlalchemy import select
from sqlalchemy.orm import Session

from ..core.database import Base
from ..models import Assignment, Student, User, Writer

COLLECTIONS: dict[str, Type[Base]] = {
    "students": Student,
    "writers": Writer,
    "assignments": Assignment,
    "users": User,
}

# Fields the store owns; callers never write them.
PROTECTED_FIELDS = frozenset({"id", "created_at", "updated_at"})


class UnknownCollection(KeyError):
    """Raised for a collection name outside COLLECTIONS."""


class RecordNotFound(LookupError):
    """Raised when an update or delete targets a missing record."""

    def __init__(self, collection: str, record_id: str) -> None:
        super().__init__(f"{collection} record {record_id} not found")
        self.collection = collection
        self.record_id = record_id


def _model(collection: str) -> Type[Base]:
    try:
        return COLLECTIONS[collection]
    except KeyError as exc:
        raise UnknownCollection(collection) from exc


def list_records(session: Session, collection: str) -> Sequence[Any]:
    """Return every record of the collection, newest first."""

    model = _model(collection)
    stmt = select(model).order_by(model.created_at.desc())
    return session.execute(stmt).scalars().all()


def get_record(session: Session, collection: str, record_id: str) -> Optional[Any]:
    return session.get(_model(collection), record_id)


def create_record(session: Session, collection: str, fields: Mapping[str, Any]) -> Any:
    """Insert a record; identity and timestamps are assigned here."""

    model = _model(collection)
    record = model(**{key: value for key, value in fields.items() if key not in PROTECTED_FIELDS})
    session.add(record)
    session.flush()
    session.refresh(record)
    return record


def _require(session: Session, collection: str, record_id: str) -> Any:
    record = get_record(session, collection, record_id)
    if record is None:
        raise RecordNotFound(collection, record_id)
    return record


def update_record(session: Session, collection: str, record_id: str, fields: Mapping[str, Any]) -> Any:
    """Apply all field changes to a record in one flush."""

    record = _require(session, collection, record_id)
    for key, value in fields.items():
        if key in PROTECTED_FIELDS:
            continue
        setattr(record, key, value)
    session.flush()
    session.refresh(record)
    return record


def delete_record(session: Session, collection: str, record_id: str) -> None:
    session.delete(_require(session, collection, record_id))
    session.flush()


def clear_collection(session: Session, collection: str) -> int:
    """Delete every record of a collection and return how many went."""

    records = list_records(session, collection)
    for record in records:
        session.delete(record)
    session.flush()
    return len(records)
