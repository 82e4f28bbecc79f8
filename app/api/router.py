from fastapi import APIRouter

from app.api import classes, products, purchases, students, system

api_router = APIRouter()
api_router.include_router(system.router)
api_router.include_router(classes.router)
api_router.include_router(students.router)
api_router.include_router(products.router)
api_router.include_router(purchases.router)
