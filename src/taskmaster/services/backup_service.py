"""JSON backup export and restore."""

from __future__ import annotations

import json
import logging
from typing import Any, Mapping, Optional, Union

from pydantic import ValidationError
from sqlalchemy.orm import Session

from ..models import AssignmentType
from ..schemas.backup import BACKUP_VERSION, AssignmentBackup, BackupPayload, StudentBackup, WriterBackup
from ..utils.datetime import to_naive_utc, utcnow
from . import store

logger = logging.getLogger(__name__)

REQUIRED_KEYS = ("students", "writers", "assignments")


class BackupFormatError(Exception):
    """Raised when a backup cannot be parsed or would not restore cleanly."""

    def __init__(self, detail: str, status_code: int = 400) -> None:
        super().__init__(detail)
        self.detail = detail
        self.status_code = status_code


def export_backup(session: Session) -> dict:
    """Snapshot of all three collections in the backup file format."""

    def dump(schema, collection: str) -> list[dict]:
        return [
            schema.model_validate(record).model_dump(mode="json", by_alias=True)
            for record in store.list_records(session, collection)
        ]

    return {
        "students": dump(StudentBackup, "students"),
        "writers": dump(WriterBackup, "writers"),
        "assignments": dump(AssignmentBackup, "assignments"),
        "timestamp": utcnow().isoformat() + "Z",
        "version": BACKUP_VERSION,
    }


def parse_backup(raw: Union[str, bytes, Mapping[str, Any]]) -> BackupPayload:
    """Validate the whole document before anything is written."""

    if isinstance(raw, (str, bytes)):
        try:
            raw = json.loads(raw)
        except ValueError as exc:
            raise BackupFormatError("Backup is not valid JSON.") from exc
    if not isinstance(raw, Mapping):
        raise BackupFormatError("Backup must be a JSON object.")
    missing = [key for key in REQUIRED_KEYS if not isinstance(raw.get(key), list)]
    if missing:
        raise BackupFormatError(f"Backup is missing: {', '.join(missing)}.")
    try:
        return BackupPayload.model_validate(raw)
    except ValidationError as exc:
        raise BackupFormatError(f"Backup contains invalid records ({exc.error_count()} error(s)).") from exc


def _check_student_references(session: Session, payload: BackupPayload, replace: bool) -> None:
    known = {student.id for student in payload.students if student.id}
    for assignment in payload.assignments:
        if assignment.student_id in known:
            continue
        if not replace and store.get_record(session, "students", assignment.student_id) is not None:
            continue
        raise BackupFormatError(
            f"Assignment '{assignment.title}' refers to unknown student {assignment.student_id}."
        )


def _resolve(
    session: Session,
    collection: str,
    old_id: Optional[str],
    mapping: dict[str, str],
    replace: bool,
) -> Optional[str]:
    if not old_id:
        return None
    if old_id in mapping:
        return mapping[old_id]
    if not replace and store.get_record(session, collection, old_id) is not None:
        return old_id
    return None


def clear_all_data(session: Session) -> dict[str, int]:
    """Delete every assignment, student and writer."""

    return {
        "assignments": store.clear_collection(session, "assignments"),
        "students": store.clear_collection(session, "students"),
        "writers": store.clear_collection(session, "writers"),
    }


def restore_backup(session: Session, payload: BackupPayload, *, replace: bool = False) -> dict:
    """Re-create every record of the backup with fresh identities.

    Additive unless ``replace`` is set, in which case the existing
    collections are cleared first. References between restored records
    are remapped to the new identities.
    """

    _check_student_references(session, payload, replace)
    if replace:
        cleared = clear_all_data(session)
        logger.info("restore cleared existing data: %s", cleared)

    student_ids: dict[str, str] = {}
    created_students = []
    for student in payload.students:
        fields = student.model_dump(exclude={"id", "created_at", "referred_by"})
        record = store.create_record(session, "students", fields)
        if student.id:
            student_ids[student.id] = record.id
        created_students.append((record, student.referred_by))

    for record, referred_by in created_students:
        referrer = _resolve(session, "students", referred_by, student_ids, replace)
        if referrer and referrer != record.id:
            record.referred_by = referrer

    writer_ids: dict[str, str] = {}
    for writer in payload.writers:
        fields = writer.model_dump(exclude={"id", "created_at", "rating"})
        if writer.rating and writer.rating.count:
            fields.update(
                rating_quality=writer.rating.quality,
                rating_punctuality=writer.rating.punctuality,
                rating_count=writer.rating.count,
            )
        record = store.create_record(session, "writers", fields)
        if writer.id:
            writer_ids[writer.id] = record.id

    for assignment in payload.assignments:
        fields = assignment.model_dump(exclude={"id", "created_at"})
        fields["student_id"] = _resolve(session, "students", assignment.student_id, student_ids, replace)
        fields["writer_id"] = _resolve(session, "writers", assignment.writer_id, writer_ids, replace)
        fields["deadline"] = to_naive_utc(assignment.deadline)
        fields["is_dissertation"] = assignment.type is AssignmentType.DISSERTATION
        store.create_record(session, "assignments", fields)

    session.flush()
    summary = {
        "replaced": replace,
        "students": len(payload.students),
        "writers": len(payload.writers),
        "assignments": len(payload.assignments),
    }
    logger.info("restore completed: %s", summary)
    return summary
