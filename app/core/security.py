from passlib.context import CryptContext
from datetime import datetime, timedelta, timezone
from jose import jwt, ExpiredSignatureError, JWTError
from typing import Optional
from pydantic import ValidationError as PydanticValidationError

from app.core.exceptions import TokenExpiredError, TokenInvalidError
from app.schemas.auth_schema import TokenPayload
import hashlib

BCRYPT_ROUNDS = 10

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=BCRYPT_ROUNDS)


def _digest(password: str) -> str:
    # bcrypt only reads the first 72 bytes of a secret
    return hashlib.sha256(password.encode("utf-8")).hexdigest()


def hash_password(password: str) -> str:
    return pwd_context.hash(_digest(password))


def verify_password(plain_password: str, hashed_password: Optional[str]) -> bool:
    if not hashed_password:
        return False
    try:
        return pwd_context.verify(_digest(plain_password), hashed_password)
    except ValueError:
        # stored value is not a recognisable hash
        return False


def dummy_verify() -> None:
    """Spend the time of one verify so unknown identities are not distinguishable by timing."""
    pwd_context.dummy_verify()


def create_access_token(
        subject: str,
        secret_key: str,
        algorithm: str,
        expires_delta: timedelta,
        role: Optional[str] = None,
        now: Optional[datetime] = None,
) -> str:
    issued_at = now or datetime.now(timezone.utc)
    to_encode = {"sub": str(subject), "iat": issued_at, "exp": issued_at + expires_delta}
    if role:
        to_encode["role"] = role
    return jwt.encode(to_encode, secret_key, algorithm=algorithm)


def decode_access_token(token: str, secret_key: str, algorithm: str) -> TokenPayload:
    """Verify signature and expiry, returning the identity the token was issued for."""
    try:
        payload = jwt.decode(token, secret_key, algorithms=[algorithm])
    except ExpiredSignatureError:
        raise TokenExpiredError()
    except JWTError:
        raise TokenInvalidError()

    try:
        token_data = TokenPayload(**payload)
    except PydanticValidationError:
        raise TokenInvalidError()
    if not token_data.sub:
        raise TokenInvalidError()
    return token_data
