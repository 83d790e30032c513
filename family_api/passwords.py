"""Password hashing (bcrypt via passlib)."""

from __future__ import annotations

from passlib.context import CryptContext

# Cost factor is fixed so hashes stay compatible with existing rows.
BCRYPT_ROUNDS = 10

_pwd_ctx = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=BCRYPT_ROUNDS)


def hash_password(plain: str) -> str:
    return _pwd_ctx.hash(plain)


def verify_password(plain: str, hashed: str) -> bool:
    return _pwd_ctx.verify(plain, hashed)
