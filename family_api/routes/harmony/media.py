"""Media albums and the items inside them (Project Harmony)."""

from __future__ import annotations

from datetime import date
from typing import Any, Optional

from fastapi import APIRouter
from pydantic import BaseModel, ConfigDict, Field

from ...db import db_conn
from ...errors import NotFound, store_errors
from ...moderation import POST_STATUSES, POST_VISIBLE, StatusUpdate, check_status

router = APIRouter(prefix="/albums", tags=["media"])


class AlbumCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    album_name: Optional[str] = Field(default=None, alias="albumName")
    description: Optional[str] = None
    created_by_user_id: Optional[int] = Field(default=None, alias="createdByUserId")


class MediaItemCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    uploaded_by_user_id: Optional[int] = Field(default=None, alias="uploadedByUserId")
    file_url: Optional[str] = Field(default=None, alias="fileUrl")
    description_caption: Optional[str] = Field(default=None, alias="descriptionCaption")
    date_taken: Optional[date] = Field(default=None, alias="dateTaken")


@router.get("")
def list_albums() -> list[dict[str, Any]]:
    with store_errors("Failed to fetch albums"), db_conn() as conn:
        rows = conn.execute('SELECT * FROM "Media_Album" ORDER BY "AlbumID"').fetchall()
    return rows


@router.post("")
def create_album(body: AlbumCreate) -> dict[str, Any]:
    with store_errors("Failed to create album"), db_conn() as conn:
        row = conn.execute(
            """
            INSERT INTO "Media_Album" ("AlbumName", "Description", "CreatedBy_UserID")
            VALUES (%s, %s, %s)
            RETURNING *
            """,
            (body.album_name, body.description, body.created_by_user_id),
        ).fetchone()
    return row


@router.get("/{album_id}/items")
def list_album_items(album_id: int) -> list[dict[str, Any]]:
    with store_errors("Failed to fetch media items"), db_conn() as conn:
        rows = conn.execute(
            """
            SELECT * FROM "Media_Item"
            WHERE "AlbumID" = %s AND "Post_Status" = %s
            ORDER BY "ItemID"
            """,
            (album_id, POST_VISIBLE),
        ).fetchall()
    return rows


@router.post("/{album_id}/items")
def create_album_item(album_id: int, body: MediaItemCreate) -> dict[str, Any]:
    with store_errors("Failed to add media item"), db_conn() as conn:
        row = conn.execute(
            """
            INSERT INTO "Media_Item" ("AlbumID", "UploadedBy_UserID", "File_URL", "Description_Caption", "Date_Taken")
            VALUES (%s, %s, %s, %s, %s)
            RETURNING *
            """,
            (album_id, body.uploaded_by_user_id, body.file_url, body.description_caption, body.date_taken),
        ).fetchone()
    return row


@router.put("/{album_id}/items/{item_id}/status")
def set_album_item_status(album_id: int, item_id: int, body: StatusUpdate) -> dict[str, Any]:
    status = check_status(body.status, POST_STATUSES)
    with store_errors("Failed to update media item status"), db_conn() as conn:
        row = conn.execute(
            """
            UPDATE "Media_Item" SET "Post_Status" = %s
            WHERE "ItemID" = %s AND "AlbumID" = %s
            RETURNING *
            """,
            (status, item_id, album_id),
        ).fetchone()
    if row is None:
        raise NotFound("Media item not found")
    return row
