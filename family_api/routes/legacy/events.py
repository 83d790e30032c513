"""Family events, listed in calendar order (Family Legacy)."""

from __future__ import annotations

from datetime import date as Date
from typing import Any, Optional

from fastapi import APIRouter
from pydantic import BaseModel, ConfigDict, Field

from ...db import db_conn
from ...errors import NotFound, store_errors

router = APIRouter(prefix="/families/{family_code}/events", tags=["events"])


class EventUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: Optional[str] = None
    date: Optional[Date] = None
    location: Optional[str] = None
    description: Optional[str] = None


class EventCreate(EventUpdate):
    created_by: Optional[str] = Field(default=None, alias="createdBy")


@router.get("")
def list_events(family_code: str) -> list[dict[str, Any]]:
    with store_errors("Failed to fetch events"), db_conn() as conn:
        rows = conn.execute(
            "SELECT * FROM events WHERE family_code = %s ORDER BY date ASC, id ASC",
            (family_code,),
        ).fetchall()
    return rows


@router.post("")
def add_event(family_code: str, body: EventCreate) -> dict[str, Any]:
    with store_errors("Failed to add event"), db_conn() as conn:
        row = conn.execute(
            """
            INSERT INTO events (family_code, name, date, location, description, created_by)
            VALUES (%s, %s, %s, %s, %s, %s)
            RETURNING *
            """,
            (family_code, body.name, body.date, body.location, body.description, body.created_by),
        ).fetchone()
    return row


@router.put("/{event_id}")
def update_event(family_code: str, event_id: int, body: EventUpdate) -> dict[str, Any]:
    with store_errors("Failed to update event"), db_conn() as conn:
        row = conn.execute(
            """
            UPDATE events
            SET name = %s, date = %s, location = %s, description = %s
            WHERE id = %s AND family_code = %s
            RETURNING *
            """,
            (body.name, body.date, body.location, body.description, event_id, family_code),
        ).fetchone()
    if row is None:
        raise NotFound("Event not found")
    return row


@router.delete("/{event_id}")
def delete_event(family_code: str, event_id: int) -> dict[str, Any]:
    with store_errors("Failed to delete"), db_conn() as conn:
        cur = conn.execute(
            "DELETE FROM events WHERE id = %s AND family_code = %s",
            (event_id, family_code),
        )
        deleted = cur.rowcount
    if not deleted:
        raise NotFound("Event not found")
    return {"success": True}
