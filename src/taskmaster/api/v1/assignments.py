"""Assignment endpoints."""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.orm import Session

from ...core.config import get_settings
from ...core.database import get_db
from ...models import AssignmentPriority, AssignmentStatus
from ...schemas import (
    AssignmentCreate,
    AssignmentRead,
    AssignmentUpdate,
    BulkDeleteRequest,
    BulkDeleteResult,
    ChapterUpdate,
    DeadlineStateRead,
    StatusChange,
    StatusChangeResult,
    StatusMove,
)
from ...services import assignment_service, ledger
from ...services.assignment_service import AssignmentRuleViolation
from ...utils.datetime import utcnow

router = APIRouter(prefix="/assignments", tags=["assignments"])


def _status_result(assignment, prompt: Optional[str]) -> StatusChangeResult:
    return StatusChangeResult(assignment=AssignmentRead.model_validate(assignment), rating_prompt=prompt)


@router.post(
    "",
    response_model=AssignmentRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create an assignment",
    responses={
        201: {
            "description": "Assignment created with derived prices",
            "content": {
                "application/json": {
                    "example": {
                        "id": "e2f1c6de-44b8-4f0c-9d5a-1f2e3d4c5b6a",
                        "student_id": "5d0b9a53-2a3c-4f47-8d0e-4f1a3e7b2c11",
                        "writer_id": None,
                        "title": "International Law Essay",
                        "type": "Essay",
                        "subject": "Law",
                        "level": "Masters",
                        "priority": "High",
                        "status": "Pending",
                        "deadline": "2025-11-15T18:00:00",
                        "word_count": 2000,
                        "cost_per_word": 2.5,
                        "writer_cost_per_word": 1.5,
                        "price": 5000.0,
                        "paid_amount": 2000.0,
                        "writer_price": 3000.0,
                        "writer_paid_amount": 0.0,
                        "sunk_costs": 0.0,
                        "is_dissertation": False,
                        "due": 3000.0,
                        "writer_due": 3000.0,
                    }
                }
            },
        },
        400: {"description": "Student and title are required"},
        404: {"description": "Student or writer not found"},
    },
)
def create_assignment(payload: AssignmentCreate, db: Session = Depends(get_db)) -> AssignmentRead:
    """Create an assignment; price and writer price follow word count and rates when given.

    Example request body::

        {
            "student_id": "5d0b9a53-2a3c-4f47-8d0e-4f1a3e7b2c11",
            "title": "International Law Essay",
            "subject": "Law",
            "deadline": "2025-11-15T18:00:00Z",
            "word_count": 2000,
            "cost_per_word": 2.5,
            "paid_amount": 2000
        }
    """

    try:
        assignment = assignment_service.create_assignment(db, payload.model_dump())
        db.commit()
        db.refresh(assignment)
        return assignment
    except AssignmentRuleViolation as exc:
        db.rollback()
        raise HTTPException(status_code=exc.status_code, detail=exc.detail) from exc


@router.get("", response_model=List[AssignmentRead], summary="List assignments")
def list_assignments(
    *,
    status_filter: Optional[AssignmentStatus] = Query(None, alias="status", description="Only this status"),
    priority: Optional[AssignmentPriority] = Query(None, description="Only this priority"),
    search: Optional[str] = Query(None, description="Match on title, subject or student name"),
    overdue_only: bool = Query(False, description="Only assignments past their deadline"),
    db: Session = Depends(get_db),
) -> List[AssignmentRead]:
    return list(
        assignment_service.list_assignments(
            db,
            status=status_filter,
            priority=priority,
            search=search,
            overdue_only=overdue_only,
        )
    )


@router.post("/bulk-delete", response_model=BulkDeleteResult, summary="Delete several assignments")
def bulk_delete(payload: BulkDeleteRequest, db: Session = Depends(get_db)) -> BulkDeleteResult:
    """Each id is deleted on its own; the result reports how many went through."""

    return BulkDeleteResult(**assignment_service.bulk_delete(db, payload.ids))


@router.get("/{assignment_id}", response_model=AssignmentRead, summary="Get an assignment")
def get_assignment(assignment_id: str, db: Session = Depends(get_db)) -> AssignmentRead:
    try:
        return assignment_service.get_assignment(db, assignment_id)
    except AssignmentRuleViolation as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.detail) from exc


@router.patch("/{assignment_id}", response_model=StatusChangeResult, summary="Edit an assignment")
def update_assignment(
    assignment_id: str,
    payload: AssignmentUpdate,
    db: Session = Depends(get_db),
) -> StatusChangeResult:
    try:
        assignment, prompt = assignment_service.update_assignment(
            db, assignment_id, payload.model_dump(exclude_unset=True)
        )
        db.commit()
        db.refresh(assignment)
        return _status_result(assignment, prompt)
    except AssignmentRuleViolation as exc:
        db.rollback()
        raise HTTPException(status_code=exc.status_code, detail=exc.detail) from exc


@router.delete("/{assignment_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete an assignment")
def delete_assignment(assignment_id: str, db: Session = Depends(get_db)) -> Response:
    try:
        assignment_service.delete_assignment(db, assignment_id)
        db.commit()
    except AssignmentRuleViolation as exc:
        db.rollback()
        raise HTTPException(status_code=exc.status_code, detail=exc.detail) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/{assignment_id}/status",
    response_model=StatusChangeResult,
    summary="Change status",
    responses={
        200: {
            "description": "Status changed; rating_prompt names the writer to rate on first completion",
        },
        404: {"description": "Assignment not found"},
    },
)
def change_status(assignment_id: str, payload: StatusChange, db: Session = Depends(get_db)) -> StatusChangeResult:
    try:
        assignment, prompt = assignment_service.change_status(db, assignment_id, payload.status)
        db.commit()
        db.refresh(assignment)
        return _status_result(assignment, prompt)
    except AssignmentRuleViolation as exc:
        db.rollback()
        raise HTTPException(status_code=exc.status_code, detail=exc.detail) from exc


@router.post("/{assignment_id}/move", response_model=StatusChangeResult, summary="Move along the board")
def move_status(assignment_id: str, payload: StatusMove, db: Session = Depends(get_db)) -> StatusChangeResult:
    try:
        assignment, prompt = assignment_service.move_status(db, assignment_id, payload.direction)
        db.commit()
        db.refresh(assignment)
        return _status_result(assignment, prompt)
    except AssignmentRuleViolation as exc:
        db.rollback()
        raise HTTPException(status_code=exc.status_code, detail=exc.detail) from exc


@router.post(
    "/{assignment_id}/settle",
    response_model=AssignmentRead,
    summary="Quick settle",
    responses={400: {"description": "Nothing due"}},
)
def settle(assignment_id: str, db: Session = Depends(get_db)) -> AssignmentRead:
    """Record the remaining client balance as received."""

    try:
        assignment = assignment_service.settle_assignment(db, assignment_id)
        db.commit()
        db.refresh(assignment)
        return assignment
    except AssignmentRuleViolation as exc:
        db.rollback()
        raise HTTPException(status_code=exc.status_code, detail=exc.detail) from exc


@router.post(
    "/{assignment_id}/reassign",
    response_model=AssignmentRead,
    summary="Unassign the writer",
    responses={400: {"description": "No writer assigned"}},
)
def reassign(assignment_id: str, db: Session = Depends(get_db)) -> AssignmentRead:
    """Move the writer's payments to sunk costs and clear the writer side."""

    try:
        assignment = assignment_service.reassign_writer(db, assignment_id)
        db.commit()
        db.refresh(assignment)
        return assignment
    except AssignmentRuleViolation as exc:
        db.rollback()
        raise HTTPException(status_code=exc.status_code, detail=exc.detail) from exc


@router.patch(
    "/{assignment_id}/chapters/{chapter_number}",
    response_model=AssignmentRead,
    summary="Update dissertation chapter progress",
)
def update_chapter(
    assignment_id: str,
    chapter_number: int,
    payload: ChapterUpdate,
    db: Session = Depends(get_db),
) -> AssignmentRead:
    try:
        assignment = assignment_service.update_chapter(
            db, assignment_id, chapter_number, payload.model_dump(exclude_unset=True)
        )
        db.commit()
        db.refresh(assignment)
        return assignment
    except AssignmentRuleViolation as exc:
        db.rollback()
        raise HTTPException(status_code=exc.status_code, detail=exc.detail) from exc


@router.get("/{assignment_id}/deadline", response_model=DeadlineStateRead, summary="Deadline urgency")
def deadline_state(assignment_id: str, db: Session = Depends(get_db)) -> DeadlineStateRead:
    try:
        assignment = assignment_service.get_assignment(db, assignment_id)
    except AssignmentRuleViolation as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.detail) from exc
    return ledger.classify_deadline(
        assignment.deadline,
        assignment.status,
        utcnow(),
        urgent_hours=get_settings().urgent_window_hours,
    )
