import hashlib
import secrets
from datetime import datetime, timedelta
from typing import Optional
from jose import JWTError, jwt
from passlib.context import CryptContext
from coachdesk.core.config import settings

pwd_context = CryptContext(schemes=["argon2"], deprecated="auto")

class Security:
    @staticmethod
    def hash_password(password: str) -> str:
        return pwd_context.hash(password)

    @staticmethod
    def verify_password(plain_password: str, hashed_password: str) -> bool:
        return pwd_context.verify(plain_password, hashed_password)

    @staticmethod
    def create_access_token(data: dict, expires_delta: Optional[timedelta] = None):
        to_encode = data.copy()
        if expires_delta:
            expire = datetime.utcnow() + expires_delta
        else:
            expire = datetime.utcnow() + timedelta(hours=settings.ACCESS_TOKEN_EXPIRE_HOURS)

        to_encode.update({"exp": expire})

        encoded_jwt = jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)
        return encoded_jwt

    @staticmethod
    def decode_access_token(token: str) -> Optional[dict]:
        """Returns the token payload, or None when the token is invalid or expired."""
        try:
            return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
        except JWTError:
            return None

    @staticmethod
    def generate_link_token() -> str:
        """Capability secret embedded in a client's private link."""
        return secrets.token_urlsafe(32)

    @staticmethod
    def link_token_digest(token: str) -> str:
        """Lookup key for a link token; the raw token is never used in a WHERE clause."""
        return hashlib.sha256(token.encode("utf-8")).hexdigest()

    @staticmethod
    def tokens_match(supplied: str, stored: str) -> bool:
        return secrets.compare_digest(supplied.encode("utf-8"), stored.encode("utf-8"))

security = Security()
