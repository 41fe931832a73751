from datetime import datetime
from pydantic import BaseModel
from typing import Optional


class TokenPayload(BaseModel):
    sub: Optional[str] = None
    role: Optional[str] = None


class MessageOut(BaseModel):
    message: str


class AdminCredentialsIn(BaseModel):
    # presence is checked by the service so that a missing field is a 400, not a 422
    username: Optional[str] = None
    password: Optional[str] = None


class AdminLoginOut(BaseModel):
    token: str
    username: str


class AdminOut(BaseModel):
    id: int
    username: str
    created_at: Optional[datetime] = None

    model_config = {
        "from_attributes": True
    }
