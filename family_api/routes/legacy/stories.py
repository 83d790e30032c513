"""Family stories (Family Legacy)."""

from __future__ import annotations

from typing import Any, Optional

from fastapi import APIRouter
from pydantic import BaseModel, ConfigDict, Field

from ...db import db_conn
from ...errors import NotFound, store_errors

router = APIRouter(prefix="/families/{family_code}/stories", tags=["stories"])


class StoryUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: Optional[str] = None
    author: Optional[str] = None
    content: Optional[str] = None
    tags: Optional[str] = None


class StoryCreate(StoryUpdate):
    created_by: Optional[str] = Field(default=None, alias="createdBy")


@router.get("")
def list_stories(family_code: str) -> list[dict[str, Any]]:
    with store_errors("Failed to fetch stories"), db_conn() as conn:
        rows = conn.execute(
            "SELECT * FROM stories WHERE family_code = %s ORDER BY created_at DESC, id DESC",
            (family_code,),
        ).fetchall()
    return rows


@router.post("")
def add_story(family_code: str, body: StoryCreate) -> dict[str, Any]:
    with store_errors("Failed to add story"), db_conn() as conn:
        row = conn.execute(
            """
            INSERT INTO stories (family_code, title, author, content, tags, created_by)
            VALUES (%s, %s, %s, %s, %s, %s)
            RETURNING *
            """,
            (family_code, body.title, body.author, body.content, body.tags, body.created_by),
        ).fetchone()
    return row


@router.put("/{story_id}")
def update_story(family_code: str, story_id: int, body: StoryUpdate) -> dict[str, Any]:
    with store_errors("Failed to update story"), db_conn() as conn:
        row = conn.execute(
            """
            UPDATE stories
            SET title = %s, author = %s, content = %s, tags = %s
            WHERE id = %s AND family_code = %s
            RETURNING *
            """,
            (body.title, body.author, body.content, body.tags, story_id, family_code),
        ).fetchone()
    if row is None:
        raise NotFound("Story not found")
    return row


@router.delete("/{story_id}")
def delete_story(family_code: str, story_id: int) -> dict[str, Any]:
    with store_errors("Failed to delete"), db_conn() as conn:
        cur = conn.execute(
            "DELETE FROM stories WHERE id = %s AND family_code = %s",
            (story_id, family_code),
        )
        deleted = cur.rowcount
    if not deleted:
        raise NotFound("Story not found")
    return {"success": True}
