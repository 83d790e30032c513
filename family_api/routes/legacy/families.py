"""Family tenants: create, join, list members (Family Legacy).

A family is identified by the human-chosen ``family_code``; every other
Legacy table hangs off it.
"""

from __future__ import annotations

from typing import Any, Optional

from fastapi import APIRouter
from pydantic import BaseModel, ConfigDict, Field

from ...db import db_conn
from ...errors import NotFound, store_errors

router = APIRouter(prefix="/families", tags=["families"])

ROLE_ADMIN = "admin"
ROLE_MEMBER = "member"


class FamilyRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    family_code: Optional[str] = Field(default=None, alias="familyCode")
    user_name: Optional[str] = Field(default=None, alias="userName")


@router.post("")
def create_family(body: FamilyRequest) -> dict[str, Any]:
    """Create the family and its admin member atomically."""
    with store_errors("Failed to create family"), db_conn() as conn:
        with conn.transaction():
            conn.execute(
                "INSERT INTO families (family_code) VALUES (%s)",
                (body.family_code,),
            )
            conn.execute(
                "INSERT INTO family_members (family_code, name, role) VALUES (%s, %s, %s)",
                (body.family_code, body.user_name, ROLE_ADMIN),
            )

    return {"success": True, "familyCode": body.family_code}


@router.post("/join")
def join_family(body: FamilyRequest) -> dict[str, Any]:
    """Add a member to an existing family.

    The existence check and the insert are one statement, so a family
    deleted concurrently cannot gain a member.
    """
    with store_errors("Failed to join family"), db_conn() as conn:
        row = conn.execute(
            """
            INSERT INTO family_members (family_code, name, role)
            SELECT f.family_code, %s, %s
            FROM families f
            WHERE f.family_code = %s
            RETURNING id
            """,
            (body.user_name, ROLE_MEMBER, body.family_code),
        ).fetchone()

    if row is None:
        raise NotFound("Family not found")
    return {"success": True}


@router.get("/{family_code}/members")
def list_members(family_code: str) -> list[dict[str, Any]]:
    with store_errors("Failed to fetch members"), db_conn() as conn:
        rows = conn.execute(
            "SELECT * FROM family_members WHERE family_code = %s ORDER BY joined_at DESC, id DESC",
            (family_code,),
        ).fetchall()
    return rows
