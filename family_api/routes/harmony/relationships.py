"""Edges between people. Stored and listed only; nothing walks the graph."""

from __future__ import annotations

from typing import Any, Optional

from fastapi import APIRouter
from pydantic import BaseModel, ConfigDict, Field

from ...db import db_conn
from ...errors import store_errors

router = APIRouter(prefix="/relationships", tags=["relationships"])


class RelationshipCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    person1_id: Optional[int] = Field(default=None, alias="person1Id")
    person2_id: Optional[int] = Field(default=None, alias="person2Id")
    relationship_type: Optional[str] = Field(default=None, alias="relationshipType")


@router.get("")
def list_relationships() -> list[dict[str, Any]]:
    with store_errors("Failed to fetch relationships"), db_conn() as conn:
        rows = conn.execute('SELECT * FROM "Relationship" ORDER BY "RelationshipID"').fetchall()
    return rows


@router.post("")
def create_relationship(body: RelationshipCreate) -> dict[str, Any]:
    with store_errors("Failed to add relationship"), db_conn() as conn:
        row = conn.execute(
            """
            INSERT INTO "Relationship" ("Person1_ID", "Person2_ID", "RelationshipType")
            VALUES (%s, %s, %s)
            RETURNING *
            """,
            (body.person1_id, body.person2_id, body.relationship_type),
        ).fetchone()
    return row
