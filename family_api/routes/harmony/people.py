"""Family-tree people (Project Harmony)."""

from __future__ import annotations

from datetime import date
from typing import Any, Optional

from fastapi import APIRouter
from pydantic import BaseModel, ConfigDict, Field

from ...db import db_conn
from ...errors import store_errors

router = APIRouter(prefix="/people", tags=["people"])


class PersonCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: Optional[str] = None
    birth_date: Optional[date] = Field(default=None, alias="birthDate")
    death_date: Optional[date] = Field(default=None, alias="deathDate")
    biography: Optional[str] = None
    profile_user_id: Optional[int] = Field(default=None, alias="profileUserId")


class PersonUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: Optional[str] = None
    birth_date: Optional[date] = Field(default=None, alias="birthDate")
    death_date: Optional[date] = Field(default=None, alias="deathDate")
    biography: Optional[str] = None


@router.get("")
def list_people() -> list[dict[str, Any]]:
    with store_errors("Failed to fetch people"), db_conn() as conn:
        rows = conn.execute('SELECT * FROM "Person" ORDER BY "Name"').fetchall()
    return rows


@router.post("")
def create_person(body: PersonCreate) -> dict[str, Any]:
    with store_errors("Failed to add person"), db_conn() as conn:
        row = conn.execute(
            """
            INSERT INTO "Person" ("Name", "BirthDate", "DeathDate", "Biography", "Profile_UserID")
            VALUES (%s, %s, %s, %s, %s)
            RETURNING *
            """,
            (body.name, body.birth_date, body.death_date, body.biography, body.profile_user_id),
        ).fetchone()
    return row


@router.put("/{person_id}")
def update_person(person_id: int, body: PersonUpdate) -> Optional[dict[str, Any]]:
    """Replace a person's scalar fields.

    An unknown id is not an error here: the response is ``null`` with 200,
    which existing Harmony clients rely on.
    """
    with store_errors("Failed to update person"), db_conn() as conn:
        row = conn.execute(
            """
            UPDATE "Person"
            SET "Name" = %s, "BirthDate" = %s, "DeathDate" = %s, "Biography" = %s
            WHERE "PersonID" = %s
            RETURNING *
            """,
            (body.name, body.birth_date, body.death_date, body.biography, person_id),
        ).fetchone()
    return row
