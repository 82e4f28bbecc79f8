from datetime import datetime

from pydantic import Field

from app.schemas.common import CamelModel, UpdateRequest


class ProductCreateRequest(CamelModel):
    name: str = Field(..., max_length=128)
    points: int
    stock: int = 0
    class_id: str


class ProductUpdateRequest(UpdateRequest):
    name: str | None = Field(default=None, max_length=128)
    points: int | None = None
    stock: int | None = None


class ProductOut(CamelModel):
    id: str
    name: str
    points: int
    stock: int
    class_id: str
    created_at: datetime
