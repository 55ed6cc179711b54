"""Writer endpoints."""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.orm import Session

from ...core.database import get_db
from ...schemas import RatingSubmit, WriterCreate, WriterRead, WriterSort, WriterSummary, WriterUpdate
from ...services import writer_service
from ...services.ledger import LedgerRuleViolation
from ...services.writer_service import WriterRuleViolation

router = APIRouter(prefix="/writers", tags=["writers"])


@router.post("", response_model=WriterRead, status_code=status.HTTP_201_CREATED, summary="Register a writer")
def create_writer(payload: WriterCreate, db: Session = Depends(get_db)) -> WriterRead:
    writer = writer_service.create_writer(db, payload.model_dump())
    db.commit()
    db.refresh(writer)
    return writer


@router.get("", response_model=List[WriterRead], summary="List writers")
def list_writers(
    search: Optional[str] = Query(None, description="Match on name, contact or specialty"),
    sort: WriterSort = Query("name", description="name, quality, punctuality, pending or active"),
    db: Session = Depends(get_db),
) -> List[WriterRead]:
    return writer_service.list_writers(db, search=search, sort=sort)


@router.get("/{writer_id}", response_model=WriterRead, summary="Get a writer")
def get_writer(writer_id: str, db: Session = Depends(get_db)) -> WriterRead:
    try:
        return writer_service.get_writer(db, writer_id)
    except WriterRuleViolation as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.detail) from exc


@router.patch("/{writer_id}", response_model=WriterRead, summary="Edit a writer")
def update_writer(writer_id: str, payload: WriterUpdate, db: Session = Depends(get_db)) -> WriterRead:
    try:
        writer = writer_service.update_writer(db, writer_id, payload.model_dump(exclude_unset=True))
        db.commit()
        db.refresh(writer)
        return writer
    except WriterRuleViolation as exc:
        db.rollback()
        raise HTTPException(status_code=exc.status_code, detail=exc.detail) from exc


@router.delete(
    "/{writer_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a writer",
    responses={409: {"description": "Writer is still assigned"}},
)
def delete_writer(writer_id: str, db: Session = Depends(get_db)) -> Response:
    try:
        writer_service.delete_writer(db, writer_id)
        db.commit()
    except WriterRuleViolation as exc:
        db.rollback()
        raise HTTPException(status_code=exc.status_code, detail=exc.detail) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/{writer_id}/ratings",
    response_model=WriterRead,
    summary="Rate a writer",
    responses={
        200: {
            "description": "Rating folded into the running average",
            "content": {
                "application/json": {
                    "example": {
                        "id": "9a1f3c0e-3d55-4a8e-a2a4-0c5d6f7e8a90",
                        "name": "Dr. Expert",
                        "contact": "919876543210",
                        "specialty": "Law",
                        "is_flagged": False,
                        "rating": {"quality": 4.8, "punctuality": 4.9, "count": 13},
                        "created_at": "2025-11-12T10:15:30",
                    }
                }
            },
        },
        404: {"description": "Writer not found"},
    },
)
def rate_writer(writer_id: str, payload: RatingSubmit, db: Session = Depends(get_db)) -> WriterRead:
    """Submit quality and punctuality scores (1-5) after a completed assignment.

    Example request body::

        {
            "quality": 5,
            "punctuality": 4
        }
    """

    try:
        writer = writer_service.rate_writer(
            db,
            writer_id,
            quality=payload.quality,
            punctuality=payload.punctuality,
        )
        db.commit()
        db.refresh(writer)
        return writer
    except (WriterRuleViolation, LedgerRuleViolation) as exc:
        db.rollback()
        raise HTTPException(status_code=exc.status_code, detail=exc.detail) from exc


@router.get("/{writer_id}/summary", response_model=WriterSummary, summary="Writer workload and payables")
def get_writer_summary(writer_id: str, db: Session = Depends(get_db)) -> WriterSummary:
    try:
        summary = writer_service.writer_summary(db, writer_id)
    except WriterRuleViolation as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.detail) from exc
    return WriterSummary.model_validate(summary, from_attributes=True)
