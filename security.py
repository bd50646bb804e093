import logging
from datetime import datetime, timedelta, timezone
from typing import Optional
from jose import JWTError, jwt
from passlib.context import CryptContext
from fastapi import Depends, HTTPException, status
from fastapi.security import APIKeyHeader

from config import settings
from schemas import TokenClaims

logger = logging.getLogger(__name__)

# bcrypt password hashing
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.BCRYPT_ROUNDS,
)

# Clients send the raw token in the Authorization header
token_header = APIKeyHeader(name="Authorization", auto_error=False)


# ---------------- PASSWORD UTILS ---------------- #

def hash_password(password: str) -> str:
    """Hash password using bcrypt"""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify password using bcrypt"""
    return pwd_context.verify(plain_password, hashed_password)


# ---------------- TOKEN UTILS ---------------- #

def create_access_token(
    data: dict,
    expires_delta: Optional[timedelta] = None
) -> str:
    """Create a signed access token carrying ``data`` as claims"""

    to_encode = data.copy()

    now = datetime.now(timezone.utc)
    expire = now + (
        expires_delta
        if expires_delta is not None
        else timedelta(hours=settings.ACCESS_TOKEN_EXPIRE_HOURS)
    )

    to_encode.update({
        "iat": now,
        "exp": expire,
        "type": "access"
    })

    return jwt.encode(
        to_encode,
        settings.SECRET_KEY,
        algorithm=settings.ALGORITHM
    )


def verify_token(token: str, token_type: str = "access") -> dict:
    """Decode a token, raising 403 when it is expired, tampered with or malformed"""
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError as exc:
        logger.warning("Token verification failed: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Forbidden: Token invalid"
        ) from exc

    if (
        payload.get("type") != token_type
        or not isinstance(payload.get("userId"), int)
        or not isinstance(payload.get("username"), str)
    ):
        logger.warning("Token verification failed: unexpected claims")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Forbidden: Token invalid"
        )
    return payload


def extract_token(authorization: Optional[str]) -> Optional[str]:
    """Return the token from an Authorization header value, tolerating a Bearer prefix"""
    if not authorization:
        return None
    scheme, _, rest = authorization.partition(" ")
    if scheme.lower() == "bearer" and rest:
        return rest.strip() or None
    return authorization.strip() or None


def get_token_payload(authorization: Optional[str] = Depends(token_header)) -> dict:
    token = extract_token(authorization)
    if token is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication failed: Token missing"
        )
    return verify_token(token, "access")


async def get_current_user(payload: dict = Depends(get_token_payload)) -> TokenClaims:
    """Identity of the caller, taken from the verified token claims"""
    return TokenClaims(user_id=payload["userId"], username=payload["username"])
