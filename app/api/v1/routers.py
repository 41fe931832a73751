# app/api/v1/routers.py
from fastapi import APIRouter
from app.api.v1.endpoints import admin, clients

router = APIRouter()

router.include_router(admin.router)
router.include_router(clients.router)
