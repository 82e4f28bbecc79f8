from datetime import datetime

from pydantic import Field

from app.schemas.common import CamelModel, UpdateRequest


class StudentCreateRequest(CamelModel):
    name: str = Field(..., max_length=128)
    student_number: str = Field(default="", max_length=64)
    points: int = 0
    class_id: str


class StudentUpdateRequest(UpdateRequest):
    name: str | None = Field(default=None, max_length=128)
    student_number: str | None = Field(default=None, max_length=64)
    points: int | None = None
    class_id: str | None = None


class StudentOut(CamelModel):
    id: str
    name: str
    student_number: str
    points: int
    class_id: str
    class_name: str
    created_at: datetime


class PointAdjustRequest(CamelModel):
    delta: int = Field(..., ge=-100000, le=100000)


class PointAdjustResponse(CamelModel):
    ok: bool
    points: int
