"""User registration and listing (Project Harmony)."""

from __future__ import annotations

from typing import Any, Optional

from fastapi import APIRouter
from pydantic import BaseModel

from ...db import db_conn
from ...errors import InvalidInput, store_errors
from ...passwords import hash_password

router = APIRouter(prefix="/users", tags=["users"])

# Never select "Password_Hash" into a response.
_PUBLIC_USER_COLUMNS = '"UserID", "Name", "Email", "Role", "Status"'


class RegisterRequest(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    password: str


@router.post("/register")
def register_user(body: RegisterRequest) -> dict[str, Any]:
    """Hash the password and insert the user; Role and Status take their defaults."""
    try:
        pw_hash = hash_password(body.password)
    except ValueError as exc:
        # bcrypt refuses some inputs, e.g. passwords containing NUL bytes.
        raise InvalidInput("Failed to register user") from exc

    with store_errors("Failed to register user"), db_conn() as conn:
        row = conn.execute(
            f"""
            INSERT INTO "User" ("Name", "Email", "Password_Hash")
            VALUES (%s, %s, %s)
            RETURNING {_PUBLIC_USER_COLUMNS}
            """,
            (body.name, body.email, pw_hash),
        ).fetchone()

    return row


@router.get("")
def list_users() -> list[dict[str, Any]]:
    with store_errors("Failed to fetch users"), db_conn() as conn:
        rows = conn.execute(f'SELECT {_PUBLIC_USER_COLUMNS} FROM "User" ORDER BY "UserID"').fetchall()
    return rows
