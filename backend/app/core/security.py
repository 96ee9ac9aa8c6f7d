"""JWT session tokens and password / passcode hashing."""

import uuid
from datetime import datetime, timedelta, timezone
from uuid import UUID

from jose import jwt
from passlib.context import CryptContext

from app.core.config import settings

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

TOKEN_KIND_OWNER = "owner"
TOKEN_KIND_EMPLOYEE = "employee"


def hash_password(plain: str) -> str:
    return pwd_context.hash(plain)


def verify_password(plain: str, hashed: str) -> bool:
    return pwd_context.verify(plain, hashed)


# Employee passcodes are salted hashes too, never compared in plaintext
hash_passcode = hash_password
verify_passcode = verify_password

# Verified against when no account matches, so a miss costs as much as a wrong secret
DUMMY_HASH = pwd_context.hash("no-such-account")


def create_access_token(
    subject_id: UUID,
    kind: str,
    business_id: UUID | None,
    expires_delta: timedelta | None = None,
) -> str:
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    payload = {
        "sub": str(subject_id),
        "kind": kind,
        "business_id": str(business_id) if business_id else None,
        "jti": uuid.uuid4().hex,
        "exp": expire,
    }
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> dict:
    """Decode and validate JWT. Raises JWTError on failure."""
    return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
