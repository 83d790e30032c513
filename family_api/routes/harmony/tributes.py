"""Memorial tributes posted on a person's page (Project Harmony)."""

from __future__ import annotations

from typing import Any, Optional

from fastapi import APIRouter
from pydantic import BaseModel, ConfigDict, Field

from ...db import db_conn
from ...errors import NotFound, store_errors
from ...moderation import POST_STATUSES, POST_VISIBLE, StatusUpdate, check_status

router = APIRouter(tags=["tributes"])


class TributeCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    posted_by_user_id: Optional[int] = Field(default=None, alias="postedByUserId")
    tribute_content: Optional[str] = Field(default=None, alias="tributeContent")


@router.get("/people/{person_id}/tributes")
def list_tributes(person_id: int) -> list[dict[str, Any]]:
    with store_errors("Failed to fetch tributes"), db_conn() as conn:
        rows = conn.execute(
            """
            SELECT * FROM "Memorial_Tribute"
            WHERE "Deceased_PersonID" = %s AND "Post_Status" = %s
            ORDER BY "Timestamp" DESC
            """,
            (person_id, POST_VISIBLE),
        ).fetchall()
    return rows


@router.post("/people/{person_id}/tributes")
def create_tribute(person_id: int, body: TributeCreate) -> dict[str, Any]:
    with store_errors("Failed to add tribute"), db_conn() as conn:
        row = conn.execute(
            """
            INSERT INTO "Memorial_Tribute" ("Deceased_PersonID", "PostedBy_UserID", "Tribute_Content")
            VALUES (%s, %s, %s)
            RETURNING *
            """,
            (person_id, body.posted_by_user_id, body.tribute_content),
        ).fetchone()
    return row


@router.put("/tributes/{tribute_id}/status")
def set_tribute_status(tribute_id: int, body: StatusUpdate) -> dict[str, Any]:
    status = check_status(body.status, POST_STATUSES)
    with store_errors("Failed to update tribute status"), db_conn() as conn:
        row = conn.execute(
            'UPDATE "Memorial_Tribute" SET "Post_Status" = %s WHERE "TributeID" = %s RETURNING *',
            (status, tribute_id),
        ).fetchone()
    if row is None:
        raise NotFound("Tribute not found")
    return row
