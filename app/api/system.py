from fastapi import APIRouter, Depends
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from app.core.config import get_settings
from app.db.session import get_db
from app.models.class_model import SchoolClass
from app.models.purchase_record import PurchaseRecord

router = APIRouter(tags=["system"])


@router.get("/health")
def health():
    settings = get_settings()
    return {"status": "ok", "version": settings.app_version}


@router.get("/system/info")
def system_info(db: Session = Depends(get_db)):
    settings = get_settings()
    classes_count = db.scalar(select(func.count()).select_from(SchoolClass)) or 0
    records_count = db.scalar(select(func.count()).select_from(PurchaseRecord)) or 0
    return {
        "app_name": settings.app_name,
        "app_env": settings.app_env,
        "app_version": settings.app_version,
        "classes": classes_count,
        "purchase_records": records_count,
    }
