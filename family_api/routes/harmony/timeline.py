"""Timeline events (Project Harmony)."""

from __future__ import annotations

from datetime import date
from typing import Any, Optional

from fastapi import APIRouter
from pydantic import BaseModel, ConfigDict, Field

from ...db import db_conn
from ...errors import NotFound, store_errors
from ...moderation import POST_STATUSES, POST_VISIBLE, StatusUpdate, check_status

router = APIRouter(prefix="/timeline", tags=["timeline"])


class TimelineEventCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    event_date: Optional[date] = Field(default=None, alias="eventDate")
    title: Optional[str] = None
    story: Optional[str] = None
    created_by_user_id: Optional[int] = Field(default=None, alias="createdByUserId")


@router.get("")
def list_timeline() -> list[dict[str, Any]]:
    """Visible events, newest first."""
    with store_errors("Failed to fetch timeline"), db_conn() as conn:
        rows = conn.execute(
            'SELECT * FROM "Timeline_Event" WHERE "Post_Status" = %s ORDER BY "EventDate" DESC',
            (POST_VISIBLE,),
        ).fetchall()
    return rows


@router.post("")
def create_timeline_event(body: TimelineEventCreate) -> dict[str, Any]:
    with store_errors("Failed to add timeline event"), db_conn() as conn:
        row = conn.execute(
            """
            INSERT INTO "Timeline_Event" ("EventDate", "Title", "Story", "CreatedBy_UserID")
            VALUES (%s, %s, %s, %s)
            RETURNING *
            """,
            (body.event_date, body.title, body.story, body.created_by_user_id),
        ).fetchone()
    return row


@router.put("/{event_id}/status")
def set_timeline_event_status(event_id: int, body: StatusUpdate) -> dict[str, Any]:
    status = check_status(body.status, POST_STATUSES)
    with store_errors("Failed to update timeline event status"), db_conn() as conn:
        row = conn.execute(
            'UPDATE "Timeline_Event" SET "Post_Status" = %s WHERE "EventID" = %s RETURNING *',
            (status, event_id),
        ).fetchone()
    if row is None:
        raise NotFound("Timeline event not found")
    return row
