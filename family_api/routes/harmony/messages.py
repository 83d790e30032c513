"""Direct messages between users (Project Harmony)."""

from __future__ import annotations

from typing import Any, Optional

from fastapi import APIRouter
from pydantic import BaseModel, ConfigDict, Field

from ...db import db_conn
from ...errors import NotFound, store_errors
from ...moderation import MESSAGE_HIDDEN, MESSAGE_STATUSES, StatusUpdate, check_status

router = APIRouter(tags=["messages"])


class MessageCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    sender_user_id: Optional[int] = Field(default=None, alias="senderUserId")
    recipient_user_id: Optional[int] = Field(default=None, alias="recipientUserId")
    message_content: Optional[str] = Field(default=None, alias="messageContent")


@router.get("/users/{user_id}/messages")
def list_user_messages(user_id: int) -> list[dict[str, Any]]:
    """Messages the user sent or received, newest first. Hidden ones are left out."""
    with store_errors("Failed to fetch messages"), db_conn() as conn:
        rows = conn.execute(
            """
            SELECT * FROM "Direct_Message"
            WHERE ("Sender_UserID" = %s OR "Recipient_UserID" = %s)
              AND "Message_Status" <> %s
            ORDER BY "Timestamp" DESC
            """,
            (user_id, user_id, MESSAGE_HIDDEN),
        ).fetchall()
    return rows


@router.post("/messages")
def send_message(body: MessageCreate) -> dict[str, Any]:
    with store_errors("Failed to send message"), db_conn() as conn:
        row = conn.execute(
            """
            INSERT INTO "Direct_Message" ("Sender_UserID", "Recipient_UserID", "Message_Content")
            VALUES (%s, %s, %s)
            RETURNING *
            """,
            (body.sender_user_id, body.recipient_user_id, body.message_content),
        ).fetchone()
    return row


@router.put("/messages/{message_id}/status")
def set_message_status(message_id: int, body: StatusUpdate) -> dict[str, Any]:
    status = check_status(body.status, MESSAGE_STATUSES)
    with store_errors("Failed to update message status"), db_conn() as conn:
        row = conn.execute(
            'UPDATE "Direct_Message" SET "Message_Status" = %s WHERE "MessageID" = %s RETURNING *',
            (status, message_id),
        ).fetchone()
    if row is None:
        raise NotFound("Message not found")
    return row
