from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from asyncpg import Connection

from app.core.config import Settings
from app.core.exceptions import TokenInvalidError
from app.core.security import decode_access_token
from app.db.session import get_db_connection
from app.repositories.admin_repo import AdminRepository
from app.repositories.client_repo import ClientRepository
from app.schemas.auth_schema import TokenPayload
from app.services.auth_services import AuthService, ROLE_ADMIN, ROLE_CLIENT
from app.services.client_service import ClientService
from app.services.storage_service import AttachmentUploader, ObjectStorage

bearer_scheme = HTTPBearer(auto_error=False)


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_storage(request: Request) -> ObjectStorage:
    return request.app.state.storage


def get_admin_repo(conn: Connection = Depends(get_db_connection)) -> AdminRepository:
    return AdminRepository(conn)


def get_client_repo(conn: Connection = Depends(get_db_connection)) -> ClientRepository:
    return ClientRepository(conn)


def get_uploader(
        storage: ObjectStorage = Depends(get_storage),
        settings: Settings = Depends(get_settings),
) -> AttachmentUploader:
    return AttachmentUploader(storage, settings.UPLOAD_DIR)


def get_auth_service(
        admin_repo: AdminRepository = Depends(get_admin_repo),
        settings: Settings = Depends(get_settings),
) -> AuthService:
    return AuthService(admin_repo, settings)


def get_client_service(
        client_repo: ClientRepository = Depends(get_client_repo),
        uploader: AttachmentUploader = Depends(get_uploader),
        settings: Settings = Depends(get_settings),
) -> ClientService:
    return ClientService(client_repo, uploader, settings)


def get_token_payload(
        credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
        settings: Settings = Depends(get_settings),
) -> TokenPayload:
    if credentials is None:
        raise TokenInvalidError()
    return decode_access_token(credentials.credentials, settings.SECRET_KEY, settings.ALGORITHM)


def _identity_id(payload: TokenPayload, role: str) -> int:
    if payload.role != role:
        raise TokenInvalidError()
    try:
        return int(payload.sub)
    except (TypeError, ValueError):
        raise TokenInvalidError()


async def get_current_admin(
        payload: TokenPayload = Depends(get_token_payload),
        admin_repo: AdminRepository = Depends(get_admin_repo),
) -> dict:
    admin = await admin_repo.get_by_id(_identity_id(payload, ROLE_ADMIN))
    if admin is None:
        raise TokenInvalidError()
    return admin


async def get_current_client(
        payload: TokenPayload = Depends(get_token_payload),
        client_repo: ClientRepository = Depends(get_client_repo),
) -> dict:
    client = await client_repo.get_by_id(_identity_id(payload, ROLE_CLIENT))
    if client is None:
        raise TokenInvalidError()
    return client
