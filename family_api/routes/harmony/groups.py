"""Groups and their membership join table (Project Harmony)."""

from __future__ import annotations

from typing import Any, Optional

from fastapi import APIRouter
from pydantic import BaseModel, ConfigDict, Field

from ...db import db_conn
from ...errors import store_errors

router = APIRouter(prefix="/groups", tags=["groups"])

DEFAULT_GROUP_TYPE = "Secret"


class GroupCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    group_name: Optional[str] = Field(default=None, alias="groupName")
    group_type: Optional[str] = Field(default=None, alias="groupType")
    created_by_user_id: Optional[int] = Field(default=None, alias="createdByUserId")


class GroupMemberAdd(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_id: Optional[int] = Field(default=None, alias="userId")


@router.get("")
def list_groups() -> list[dict[str, Any]]:
    with store_errors("Failed to fetch groups"), db_conn() as conn:
        rows = conn.execute('SELECT * FROM "Group" ORDER BY "GroupID"').fetchall()
    return rows


@router.post("")
def create_group(body: GroupCreate) -> dict[str, Any]:
    with store_errors("Failed to create group"), db_conn() as conn:
        row = conn.execute(
            """
            INSERT INTO "Group" ("GroupName", "GroupType", "CreatedBy_UserID")
            VALUES (%s, COALESCE(%s, %s), %s)
            RETURNING *
            """,
            (body.group_name, body.group_type, DEFAULT_GROUP_TYPE, body.created_by_user_id),
        ).fetchone()
    return row


@router.get("/{group_id}/members")
def list_group_members(group_id: int) -> list[dict[str, Any]]:
    with store_errors("Failed to fetch group members"), db_conn() as conn:
        rows = conn.execute(
            """
            SELECT u."UserID", u."Name", u."Email", u."Role", u."Status"
            FROM "Group_Member" gm
            JOIN "User" u ON u."UserID" = gm."UserID"
            WHERE gm."GroupID" = %s
            ORDER BY u."Name"
            """,
            (group_id,),
        ).fetchall()
    return rows


@router.post("/{group_id}/members")
def add_group_member(group_id: int, body: GroupMemberAdd) -> dict[str, Any]:
    """Add a user to a group. Adding the same user twice is a conflict."""
    with store_errors("Failed to add group member"), db_conn() as conn:
        row = conn.execute(
            """
            INSERT INTO "Group_Member" ("GroupID", "UserID")
            VALUES (%s, %s)
            RETURNING *
            """,
            (group_id, body.user_id),
        ).fetchone()
    return row
