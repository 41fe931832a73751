import logging
from datetime import timedelta
from typing import Optional
from fastapi.concurrency import run_in_threadpool
from app.repositories.admin_repo import AdminRepository
from app.core.security import hash_password, verify_password, dummy_verify, create_access_token
from app.core.config import Settings
from app.core.exceptions import AuthError, ConflictError, ValidationError

ROLE_ADMIN = "admin"
ROLE_CLIENT = "client"


def create_token_for_identity(settings: Settings, identity_id: int, role: str) -> str:
    access_token_expires = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    return create_access_token(
        subject=str(identity_id),
        secret_key=settings.SECRET_KEY,
        algorithm=settings.ALGORITHM,
        expires_delta=access_token_expires,
        role=role,
    )


class AuthService:
    """Admin registration and login."""

    def __init__(self, admin_repo: AdminRepository, settings: Settings):
        self.admin_repo = admin_repo
        self.settings = settings

    async def register_admin(self, username: Optional[str], password: Optional[str]) -> dict:
        if not username or not password:
            raise ValidationError("Username and password are required")

        existing = await self.admin_repo.get_by_username(username)
        if existing:
            raise ConflictError("Admin already exists")

        hashed_password = await run_in_threadpool(hash_password, password)
        admin = await self.admin_repo.create(username=username, hashed_password=hashed_password)
        logging.info(f"Admin {admin['id']} registered")
        return admin

    async def authenticate(self, username: Optional[str], password: Optional[str]) -> dict:
        admin = await self.admin_repo.get_by_username(username) if username else None
        if not admin:
            await run_in_threadpool(dummy_verify)
            raise AuthError("Invalid credentials")
        if not await run_in_threadpool(verify_password, password or "", admin.get('hashed_password', '')):
            raise AuthError("Invalid credentials")
        return admin

    async def login(self, username: Optional[str], password: Optional[str]) -> dict:
        admin = await self.authenticate(username, password)
        logging.info(f"Admin {admin['id']} logged in")
        return {
            "token": create_token_for_identity(self.settings, admin['id'], ROLE_ADMIN),
            "username": admin['username'],
        }
