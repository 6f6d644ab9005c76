"""Security helpers for hashing and token generation."""

from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt
from passlib.context import CryptContext

from checkday.config import get_settings

_ALGORITHM = "HS256"

pwd_context = CryptContext(
    schemes=["pbkdf2_sha256"],
    deprecated="auto",
    pbkdf2_sha256__rounds=310_000,
)


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(data: dict, expires_delta: timedelta | None = None) -> str:
    settings = get_settings()
    expire = datetime.now(tz=timezone.utc) + (
        expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    )
    return jwt.encode({**data, "exp": expire}, settings.secret_key, algorithm=_ALGORITHM)


def create_user_token(user_id: int, expires_delta: timedelta | None = None) -> str:
    """Return an access token whose subject is ``user_id``."""

    return create_access_token({"sub": str(user_id)}, expires_delta)


def decode_access_token(token: str) -> dict:
    try:
        return jwt.decode(token, get_settings().secret_key, algorithms=[_ALGORITHM])
    except JWTError as exc:
        raise ValueError("Could not validate credentials") from exc


def user_id_from_token(token: str) -> int:
    """Return the user id carried by ``token`` or raise ``ValueError``."""

    subject = decode_access_token(token).get("sub")
    try:
        return int(subject)
    except (TypeError, ValueError) as exc:
        raise ValueError("Could not validate credentials") from exc
