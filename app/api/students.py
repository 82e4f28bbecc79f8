from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.schemas.common import OkResponse
from app.schemas.students import (
    PointAdjustRequest,
    PointAdjustResponse,
    StudentCreateRequest,
    StudentOut,
    StudentUpdateRequest,
)
from app.services import ledger_store

router = APIRouter(prefix="/students", tags=["students"])


@router.get("", response_model=list[StudentOut])
def list_students(class_id: str | None = None, db: Session = Depends(get_db)):
    return ledger_store.list_students(db, class_id=class_id)


@router.post("", response_model=StudentOut)
def create_student(payload: StudentCreateRequest, db: Session = Depends(get_db)):
    return ledger_store.create_student(
        db,
        name=payload.name,
        student_number=payload.student_number,
        points=payload.points,
        class_id=payload.class_id,
    )


@router.get("/{student_id}", response_model=StudentOut)
def get_student(student_id: str, db: Session = Depends(get_db)):
    return ledger_store.get_student(db, student_id)


@router.patch("/{student_id}", response_model=StudentOut)
def update_student(student_id: str, payload: StudentUpdateRequest, db: Session = Depends(get_db)):
    return ledger_store.update_student(db, student_id, payload)


@router.post("/{student_id}/points", response_model=PointAdjustResponse)
def adjust_points(student_id: str, payload: PointAdjustRequest, db: Session = Depends(get_db)):
    student = ledger_store.adjust_student_points(db, student_id, payload.delta)
    return PointAdjustResponse(ok=True, points=student.points)


@router.delete("/{student_id}", response_model=OkResponse)
def delete_student(student_id: str, db: Session = Depends(get_db)):
    ledger_store.delete_student(db, student_id)
    return OkResponse()
