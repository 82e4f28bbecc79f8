from datetime import datetime

from pydantic import Field

from app.schemas.common import CamelModel, UpdateRequest


class ClassCreateRequest(CamelModel):
    name: str = Field(..., max_length=128)
    description: str | None = Field(default=None, max_length=512)


class ClassUpdateRequest(UpdateRequest):
    name: str | None = Field(default=None, max_length=128)
    description: str | None = Field(default=None, max_length=512)


class ClassOut(CamelModel):
    id: str
    name: str
    description: str | None
    student_count: int
    created_at: datetime
