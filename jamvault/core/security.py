# ============================================================================
# FILE: jamvault/core/security.py
# ============================================================================
from datetime import datetime, timedelta
from typing import Optional
from fastapi import HTTPException, status
from jose import JWTError, jwt
from jamvault.config import settings
import hashlib
import hmac
import re
import secrets

SCRYPT_N = 16384
SCRYPT_R = 8
SCRYPT_P = 1
KEY_LENGTH = 64
SALT_BYTES = 16

PASSWORD_MIN_LENGTH = 8
PASSWORD_RULES = [
    (re.compile(r"[a-z]"), "Password must contain at least one lowercase letter"),
    (re.compile(r"[A-Z]"), "Password must contain at least one uppercase letter"),
    (re.compile(r"[0-9]"), "Password must contain at least one number"),
    (re.compile(r"[^A-Za-z0-9]"), "Password must contain at least one special character"),
]

def _derive_key(password: str, salt: str) -> bytes:
    return hashlib.scrypt(
        password.encode("utf-8"),
        salt=salt.encode("utf-8"),
        n=SCRYPT_N,
        r=SCRYPT_R,
        p=SCRYPT_P,
        dklen=KEY_LENGTH,
    )

def get_password_hash(password: str) -> str:
    """Hash a password as '<derived key hex>.<salt hex>'"""
    salt = secrets.token_hex(SALT_BYTES)
    return f"{_derive_key(password, salt).hex()}.{salt}"

def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Check a password against a stored hash in constant time"""
    if not hashed_password or "." not in hashed_password:
        return False
    stored_key, salt = hashed_password.rsplit(".", 1)
    try:
        stored = bytes.fromhex(stored_key)
    except ValueError:
        return False
    supplied = _derive_key(plain_password, salt)
    return hmac.compare_digest(stored, supplied)

def validate_password_strength(password: str) -> str:
    """
    Enforce the password policy.
    Raises ValueError describing the first rule that fails.
    """
    if len(password) < PASSWORD_MIN_LENGTH:
        raise ValueError(f"Password must be at least {PASSWORD_MIN_LENGTH} characters")
    for pattern, message in PASSWORD_RULES:
        if not pattern.search(password):
            raise ValueError(message)
    return password

def generate_reset_token() -> str:
    return secrets.token_hex(32)

def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create a signed JWT access token"""
    to_encode = data.copy()
    expire = datetime.utcnow() + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)

def decode_access_token(token: str) -> dict:
    """Decode a JWT access token, raising 401 when it is invalid or expired"""
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
