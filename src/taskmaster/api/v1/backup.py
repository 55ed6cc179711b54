"""Backup, restore and reset endpoints."""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.orm import Session

from ...core.config import get_settings
from ...core.database import get_db
from ...schemas import RestoreReceipt
from ...services import backup_service
from ...services.backup_service import BackupFormatError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/backup", tags=["backup"])


@router.get("", summary="Export all records")
def export_backup(db: Session = Depends(get_db)) -> dict:
    """Return students, writers and assignments in the backup file format."""

    return backup_service.export_backup(db)


def _restore(db: Session, raw: bytes, replace: bool) -> dict:
    try:
        payload = backup_service.parse_backup(raw)
        summary = backup_service.restore_backup(db, payload, replace=replace)
        db.commit()
    except BackupFormatError as exc:
        db.rollback()
        logger.warning("restore rejected: %s", exc.detail)
        raise HTTPException(
            status_code=exc.status_code,
            detail={"restored": False, "reason": exc.detail},
        ) from exc
    return summary


@router.post(
    "/restore",
    response_model=RestoreReceipt,
    summary="Restore from a backup file",
    responses={400: {"description": "Malformed backup; nothing was written"}},
)
async def restore_backup(
    request: Request,
    replace: Optional[bool] = Query(None, description="Clear existing records first"),
    db: Session = Depends(get_db),
) -> RestoreReceipt:
    """Re-create every record of the uploaded backup.

    Additive unless ``replace=true`` (or the configured default) asks for
    the existing records to be cleared first.
    """

    raw = await request.body()
    replace_existing = get_settings().restore_replace_default if replace is None else replace
    summary = await run_in_threadpool(_restore, db, raw, replace_existing)
    return RestoreReceipt(restored=True, **summary)


@router.delete("", summary="Delete all records")
def clear_all_data(db: Session = Depends(get_db)) -> dict:
    counts = backup_service.clear_all_data(db)
    db.commit()
    logger.info("all data cleared: %s", counts)
    return counts
