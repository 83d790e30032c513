"""Invitations sent by existing users."""

from __future__ import annotations

from typing import Any, Optional

from fastapi import APIRouter
from pydantic import BaseModel, ConfigDict, Field

from ...db import db_conn
from ...errors import store_errors

router = APIRouter(prefix="/invites", tags=["invites"])

INVITE_PENDING = "Pending"


class InviteCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    invited_by_user_id: Optional[int] = Field(default=None, alias="invitedByUserId")
    invitee_email: Optional[str] = Field(default=None, alias="inviteeEmail")


@router.get("")
def list_invites() -> list[dict[str, Any]]:
    with store_errors("Failed to fetch invites"), db_conn() as conn:
        rows = conn.execute('SELECT * FROM "Invite" ORDER BY "Created_At" DESC').fetchall()
    return rows


@router.post("")
def create_invite(body: InviteCreate) -> dict[str, Any]:
    with store_errors("Failed to create invite"), db_conn() as conn:
        row = conn.execute(
            """
            INSERT INTO "Invite" ("InvitedBy_UserID", "Invitee_Email", "Status")
            VALUES (%s, %s, %s)
            RETURNING *
            """,
            (body.invited_by_user_id, body.invitee_email, INVITE_PENDING),
        ).fetchone()
    return row
