"""Family tree entries (Family Legacy)."""

from __future__ import annotations

from datetime import date
from typing import Any, Optional

from fastapi import APIRouter
from pydantic import BaseModel, ConfigDict, Field

from ...db import db_conn
from ...errors import NotFound, store_errors

router = APIRouter(prefix="/families/{family_code}/tree", tags=["tree"])


class TreeMemberUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: Optional[str] = None
    relationship: Optional[str] = None
    birth_date: Optional[date] = Field(default=None, alias="birthDate")
    bio: Optional[str] = None


class TreeMemberCreate(TreeMemberUpdate):
    created_by: Optional[str] = Field(default=None, alias="createdBy")


@router.get("")
def list_tree(family_code: str) -> list[dict[str, Any]]:
    with store_errors("Failed to fetch tree"), db_conn() as conn:
        rows = conn.execute(
            "SELECT * FROM tree_members WHERE family_code = %s ORDER BY created_at DESC, id DESC",
            (family_code,),
        ).fetchall()
    return rows


@router.post("")
def add_tree_member(family_code: str, body: TreeMemberCreate) -> dict[str, Any]:
    with store_errors("Failed to add tree member"), db_conn() as conn:
        row = conn.execute(
            """
            INSERT INTO tree_members (family_code, name, relationship, birth_date, bio, created_by)
            VALUES (%s, %s, %s, %s, %s, %s)
            RETURNING *
            """,
            (family_code, body.name, body.relationship, body.birth_date, body.bio, body.created_by),
        ).fetchone()
    return row


@router.put("/{member_id}")
def update_tree_member(family_code: str, member_id: int, body: TreeMemberUpdate) -> dict[str, Any]:
    with store_errors("Failed to update"), db_conn() as conn:
        row = conn.execute(
            """
            UPDATE tree_members
            SET name = %s, relationship = %s, birth_date = %s, bio = %s
            WHERE id = %s AND family_code = %s
            RETURNING *
            """,
            (body.name, body.relationship, body.birth_date, body.bio, member_id, family_code),
        ).fetchone()
    if row is None:
        raise NotFound("Tree member not found")
    return row


@router.delete("/{member_id}")
def delete_tree_member(family_code: str, member_id: int) -> dict[str, Any]:
    with store_errors("Failed to delete"), db_conn() as conn:
        cur = conn.execute(
            "DELETE FROM tree_members WHERE id = %s AND family_code = %s",
            (member_id, family_code),
        )
        deleted = cur.rowcount
    if not deleted:
        raise NotFound("Tree member not found")
    return {"success": True}
