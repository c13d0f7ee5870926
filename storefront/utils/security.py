# storefront/utils/security.py
import hashlib
import secrets

from passlib.context import CryptContext

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, hashed: str) -> bool:
    return pwd_context.verify(password, hashed)


def new_reset_token() -> tuple[str, str]:
    """Returns (token, sha256 digest); only the digest is stored."""
    token = secrets.token_urlsafe(32)
    return token, digest_token(token)


def digest_token(token: str) -> str:
    return hashlib.sha256(token.encode()).hexdigest()
