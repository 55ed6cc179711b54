"""Student endpoints."""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.orm import Session

from ...core.database import get_db
from ...schemas import AssignmentRead, StudentCreate, StudentRead, StudentSummary, StudentUpdate
from ...services import student_service
from ...services.student_service import StudentRuleViolation

router = APIRouter(prefix="/students", tags=["students"])


@router.post(
    "",
    response_model=StudentRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create a student",
    responses={
        201: {
            "description": "Student created",
            "content": {
                "application/json": {
                    "example": {
                        "id": "5d0b9a53-2a3c-4f47-8d0e-4f1a3e7b2c11",
                        "name": "Alice Johnson",
                        "email": "alice@uni.edu",
                        "phone": "555-0101",
                        "university": "Oxford",
                        "remarks": None,
                        "is_flagged": False,
                        "referred_by": None,
                        "created_at": "2025-11-12T10:15:30",
                    }
                }
            },
        },
        400: {"description": "Self-referral or unknown referrer"},
    },
)
def create_student(payload: StudentCreate, db: Session = Depends(get_db)) -> StudentRead:
    """Register a new client.

    Example request body::

        {
            "name": "Alice Johnson",
            "email": "alice@uni.edu",
            "phone": "555-0101",
            "university": "Oxford"
        }
    """

    try:
        student = student_service.create_student(db, payload.model_dump())
        db.commit()
        db.refresh(student)
        return student
    except StudentRuleViolation as exc:
        db.rollback()
        raise HTTPException(status_code=exc.status_code, detail=exc.detail) from exc


@router.get("", response_model=List[StudentRead], summary="List students")
def list_students(
    search: Optional[str] = Query(None, description="Match on name, university or email"),
    db: Session = Depends(get_db),
) -> List[StudentRead]:
    return list(student_service.list_students(db, search=search))


@router.get("/{student_id}", response_model=StudentRead, summary="Get a student")
def get_student(student_id: str, db: Session = Depends(get_db)) -> StudentRead:
    try:
        return student_service.get_student(db, student_id)
    except StudentRuleViolation as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.detail) from exc


@router.patch("/{student_id}", response_model=StudentRead, summary="Edit a student")
def update_student(student_id: str, payload: StudentUpdate, db: Session = Depends(get_db)) -> StudentRead:
    try:
        student = student_service.update_student(db, student_id, payload.model_dump(exclude_unset=True))
        db.commit()
        db.refresh(student)
        return student
    except StudentRuleViolation as exc:
        db.rollback()
        raise HTTPException(status_code=exc.status_code, detail=exc.detail) from exc


@router.delete(
    "/{student_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a student",
    responses={409: {"description": "Student still has assignments"}},
)
def delete_student(student_id: str, db: Session = Depends(get_db)) -> Response:
    try:
        student_service.delete_student(db, student_id)
        db.commit()
    except StudentRuleViolation as exc:
        db.rollback()
        raise HTTPException(status_code=exc.status_code, detail=exc.detail) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{student_id}/summary", response_model=StudentSummary, summary="Student account overview")
def get_student_summary(student_id: str, db: Session = Depends(get_db)) -> StudentSummary:
    """Totals, VIP status and referral network of a student."""

    try:
        summary = student_service.student_summary(db, student_id)
    except StudentRuleViolation as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.detail) from exc
    return StudentSummary.model_validate(summary, from_attributes=True)


@router.get("/{student_id}/assignments", response_model=List[AssignmentRead], summary="Assignments of a student")
def list_student_assignments(student_id: str, db: Session = Depends(get_db)) -> List[AssignmentRead]:
    try:
        return list(student_service.list_student_assignments(db, student_id))
    except StudentRuleViolation as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.detail) from exc
