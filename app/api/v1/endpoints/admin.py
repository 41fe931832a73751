from fastapi import APIRouter, Depends

from app.schemas.auth_schema import AdminCredentialsIn, AdminLoginOut, AdminOut, MessageOut
from app.api.v1.deps import get_auth_service, get_current_admin
from app.services.auth_services import AuthService

router = APIRouter(tags=["admin"], prefix="/api/admin")


@router.post("/register", response_model=MessageOut)
async def register(body: AdminCredentialsIn, auth_svc: AuthService = Depends(get_auth_service)):
    await auth_svc.register_admin(body.username, body.password)
    return MessageOut(message="Admin registered successfully!")


@router.post("/login", response_model=AdminLoginOut)
async def login(body: AdminCredentialsIn, auth_svc: AuthService = Depends(get_auth_service)):
    return await auth_svc.login(body.username, body.password)


@router.get("/me", response_model=AdminOut)
async def read_current_admin(current_admin: dict = Depends(get_current_admin)):
    return current_admin
