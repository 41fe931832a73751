from typing import Dict, List, Tuple

from fastapi import APIRouter, Depends, Request, status
from starlette.datastructures import UploadFile

from app.api.v1.deps import get_client_service, get_current_client
from app.core.exceptions import ValidationError
from app.schemas.auth_schema import MessageOut
from app.schemas.client_schema import (
    ClientCreateIn,
    ClientFieldsIn,
    ClientLoginIn,
    ClientLoginOut,
    ClientMessageOut,
    ClientOut,
    ClientRegisterIn,
    ClientUpdatedOut,
)
from app.services.client_service import ClientService

router = APIRouter(prefix="/api/client", tags=["clients"])

# multipart file field -> service file key
FILE_FORM_FIELDS = {"photo": "photo", "licenseFile": "license_file"}


async def read_client_form(request: Request) -> Tuple[Dict[str, str], Dict[str, UploadFile]]:
    """Split a multipart body into its text fields and its non-empty files.

    A JSON object body is also accepted for requests without attachments.
    """
    if request.headers.get("content-type", "").startswith("application/json"):
        try:
            payload = await request.json()
        except ValueError:
            raise ValidationError("Malformed JSON body")
        if not isinstance(payload, dict):
            raise ValidationError("Request body must be an object")
        return {k: v if v is None or isinstance(v, str) else str(v) for k, v in payload.items()}, {}

    form = await request.form()
    values, files = {}, {}
    for key, value in form.multi_items():
        if isinstance(value, UploadFile):
            if key in FILE_FORM_FIELDS and value.filename:
                files[FILE_FORM_FIELDS[key]] = value
        else:
            values[key] = value
    return values, files


@router.post("/register", response_model=ClientMessageOut, status_code=status.HTTP_201_CREATED)
async def register(body: ClientRegisterIn, client_svc: ClientService = Depends(get_client_service)):
    client = await client_svc.register(body.mobile, body.password)
    return {"message": "Client registered successfully", "client": client}


@router.post("/login", response_model=ClientLoginOut)
async def login(body: ClientLoginIn, client_svc: ClientService = Depends(get_client_service)):
    return await client_svc.login(body.mobile, body.password)


@router.post("/create", response_model=ClientMessageOut, status_code=status.HTTP_201_CREATED)
async def create_client(request: Request, client_svc: ClientService = Depends(get_client_service)):
    values, files = await read_client_form(request)
    body = ClientCreateIn.model_validate(values)
    fields = body.model_dump(exclude_unset=True, exclude={"password"})
    client = await client_svc.create(fields, body.password, files)
    return {"message": "Client created successfully", "client": client}


@router.get("/", response_model=List[ClientOut])
async def list_clients(client_svc: ClientService = Depends(get_client_service)):
    return await client_svc.list()


@router.get("/me", response_model=ClientOut)
async def read_current_client(current_client: dict = Depends(get_current_client)):
    return current_client


@router.get("/{client_id}", response_model=ClientOut)
async def get_client(client_id: int, client_svc: ClientService = Depends(get_client_service)):
    return await client_svc.get(client_id)


@router.put("/update/{client_id}", response_model=ClientUpdatedOut)
async def update_client(client_id: int, request: Request,
                        client_svc: ClientService = Depends(get_client_service)):
    values, files = await read_client_form(request)
    fields = ClientFieldsIn.model_validate(values).model_dump(exclude_unset=True)
    updated = await client_svc.update(client_id, fields, files)
    return {"message": "Client updated successfully", "updated_client": updated}


@router.delete("/{client_id}", response_model=MessageOut)
async def delete_client(client_id: int, client_svc: ClientService = Depends(get_client_service)):
    await client_svc.delete(client_id)
    return MessageOut(message="Client deleted successfully")
