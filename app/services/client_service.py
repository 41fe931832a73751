# app/services/client_service.py

import logging
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Optional

from fastapi import UploadFile
from fastapi.concurrency import run_in_threadpool

from app.core.config import Settings
from app.core.exceptions import AuthError, ConflictError, NotFoundError, ValidationError
from app.core.security import hash_password, verify_password, dummy_verify
from app.repositories.client_repo import ClientRepository
from app.schemas.client_schema import ClientFieldsIn
from app.services.auth_services import create_token_for_identity, ROLE_CLIENT
from app.services.storage_service import AttachmentCategory, AttachmentUploader

DATE_FIELDS = ("dob", "date_of_enrolment", "expiry_of_ll", "main_test_date")
DECIMAL_FIELDS = ("total_fee", "paid_fee", "fee_discount")
INTEGER_FIELDS = ("total_classes", "classes_attended")

# form file field -> record column and storage category
FILE_FIELDS = {
    "photo": AttachmentCategory.PHOTO,
    "license_file": AttachmentCategory.LICENSE,
}

INVALID_LOGIN = "Invalid mobile or password"
NOT_FOUND = "Client not found"


def wire_name(field: str) -> str:
    info = ClientFieldsIn.model_fields.get(field)
    return (info.alias if info and info.alias else field)


def parse_date(field: str, value: Any) -> Optional[date]:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    text = str(value).strip()
    if not text:
        return None
    try:
        return date.fromisoformat(text)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        raise ValidationError(f"Invalid date for {wire_name(field)}")


def parse_number(field: str, value: Any, integer: bool = False) -> Optional[Decimal | int]:
    if value is None:
        return None
    text = str(value).strip()
    if not text:
        return None
    try:
        if integer:
            return int(text)
        number = Decimal(text)
    except (ValueError, InvalidOperation):
        raise ValidationError(f"Invalid number for {wire_name(field)}")
    if not number.is_finite():
        raise ValidationError(f"Invalid number for {wire_name(field)}")
    return number


def normalize_fields(fields: Dict[str, Any]) -> Dict[str, Any]:
    """Convert the raw form values of typed fields; everything else is kept as sent."""
    normalized = dict(fields)
    for field in DATE_FIELDS:
        if field in normalized:
            normalized[field] = parse_date(field, normalized[field])
    for field in DECIMAL_FIELDS:
        if field in normalized:
            normalized[field] = parse_number(field, normalized[field])
    for field in INTEGER_FIELDS:
        if field in normalized:
            normalized[field] = parse_number(field, normalized[field], integer=True)
    return normalized


class ClientService:
    def __init__(self, client_repo: ClientRepository, uploader: AttachmentUploader, settings: Settings):
        self.client_repo = client_repo
        self.uploader = uploader
        self.settings = settings

    async def _ensure_mobile_free(self, mobile: str) -> None:
        # advisory; the unique index on clients.mobile is the real guarantee
        if await self.client_repo.get_by_mobile(mobile):
            raise ConflictError("Client already exists")

    async def _upload_files(self, files: Optional[Dict[str, UploadFile]]) -> Dict[str, str]:
        urls = {}
        for field, category in FILE_FIELDS.items():
            upload = (files or {}).get(field)
            if upload is not None:
                urls[field] = await self.uploader.upload(upload, category)
        return urls

    async def register(self, mobile: Optional[str], password: Optional[str]) -> dict:
        if not mobile or not password:
            raise ValidationError("Mobile and password are required")

        await self._ensure_mobile_free(mobile)
        client = await self.client_repo.create({
            "mobile": mobile,
            "hashed_password": await run_in_threadpool(hash_password, password),
        })
        logging.info(f"Client {client['id']} registered")
        return client

    async def create(self, fields: Dict[str, Any], password: Optional[str],
                     files: Optional[Dict[str, UploadFile]] = None) -> dict:
        if not fields.get("first_name") or not fields.get("mobile") or not password:
            raise ValidationError("Name, Mobile & Password required")

        data = normalize_fields(fields)
        await self._ensure_mobile_free(data["mobile"])
        data["hashed_password"] = await run_in_threadpool(hash_password, password)

        # uploads first: a failed upload leaves nothing behind in the database
        data.update({"photo": None, "license_file": None})
        data.update(await self._upload_files(files))

        client = await self.client_repo.create(data)
        logging.info(f"Client {client['id']} created")
        return client

    async def login(self, mobile: Optional[str], password: Optional[str]) -> dict:
        client = await self.client_repo.get_by_mobile(mobile) if mobile else None
        if not client:
            await run_in_threadpool(dummy_verify)
            raise AuthError(INVALID_LOGIN)
        if not await run_in_threadpool(verify_password, password or "", client.get('hashed_password', '')):
            raise AuthError(INVALID_LOGIN)

        logging.info(f"Client {client['id']} logged in")
        token = create_token_for_identity(self.settings, client['id'], ROLE_CLIENT)
        return {"token": token, "client": client}

    async def get(self, client_id: int) -> dict:
        client = await self.client_repo.get_by_id(client_id)
        if client is None:
            raise NotFoundError(NOT_FOUND)
        return client

    async def list(self) -> List[dict]:
        return await self.client_repo.list_all()

    async def update(self, client_id: int, fields: Dict[str, Any],
                     files: Optional[Dict[str, UploadFile]] = None) -> dict:
        """Shallow merge: only the fields present in ``fields`` (and uploaded files) change."""
        await self.get(client_id)

        # mobile is the login identity and may be changed but never cleared
        if "mobile" in fields and not (fields["mobile"] or "").strip():
            raise ValidationError("Mobile cannot be empty")

        data = normalize_fields(fields)
        data.update(await self._upload_files(files))

        updated = await self.client_repo.update(client_id, data)
        if updated is None:
            raise NotFoundError(NOT_FOUND)
        logging.info(f"Client {client_id} updated: {', '.join(sorted(data)) or 'no fields'}")
        return updated

    async def delete(self, client_id: int) -> None:
        if not await self.client_repo.delete(client_id):
            raise NotFoundError(NOT_FOUND)
        logging.info(f"Client {client_id} deleted")
