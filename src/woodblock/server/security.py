from __future__ import annotations

import time
from typing import Optional

import bcrypt
import jwt


ALGORITHM = "HS256"


def _password_bytes(password: str) -> bytes:
    # bcrypt only looks at the first 72 bytes
    return password.encode("utf-8")[:72]


def hash_password(password: str, rounds: int = 10) -> str:
    return bcrypt.hashpw(_password_bytes(password), bcrypt.gensalt(rounds=rounds)).decode("ascii")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(_password_bytes(password), password_hash.encode("ascii"))
    except ValueError:
        return False


def issue_token(user_id: str, secret: str, ttl_seconds: int) -> str:
    now = int(time.time())
    return jwt.encode({"id": user_id, "iat": now, "exp": now + ttl_seconds}, secret, algorithm=ALGORITHM)


def read_token(token: str, secret: str) -> Optional[str]:
    """User id carried by a valid token, None when invalid or expired."""
    try:
        payload = jwt.decode(token, secret, algorithms=[ALGORITHM])
    except jwt.PyJWTError:
        return None
    user_id = payload.get("id")
    return user_id if isinstance(user_id, str) else None
