"""Idempotent DDL for the two record services.

Identifiers follow the existing databases: Project Harmony uses quoted
CamelCase names, Family Legacy uses snake_case tables keyed by family code.
"""

from __future__ import annotations

import logging

import psycopg

from .config import VARIANT_HARMONY, VARIANT_LEGACY

log = logging.getLogger(__name__)

HARMONY_DDL: tuple[str, ...] = (
    """
    CREATE TABLE IF NOT EXISTS "User" (
        "UserID" SERIAL PRIMARY KEY,
        "Name" VARCHAR(255) NOT NULL,
        "Email" VARCHAR(255) UNIQUE NOT NULL,
        "Password_Hash" VARCHAR(255) NOT NULL,
        "Role" VARCHAR(50) NOT NULL DEFAULT 'Member',
        "Status" VARCHAR(50) NOT NULL DEFAULT 'Pending',
        "Moderator_Expiry_Date" TIMESTAMPTZ,
        "Legacy_Appointee_UserID" INT REFERENCES "User"("UserID")
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS "Invite" (
        "InviteID" SERIAL PRIMARY KEY,
        "InvitedBy_UserID" INT NOT NULL REFERENCES "User"("UserID"),
        "Invitee_Email" VARCHAR(255) NOT NULL,
        "Status" VARCHAR(50) NOT NULL,
        "Denial_Reason" TEXT,
        "Created_At" TIMESTAMPTZ DEFAULT CURRENT_TIMESTAMP
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS "Group" (
        "GroupID" SERIAL PRIMARY KEY,
        "GroupName" VARCHAR(255) NOT NULL,
        "GroupType" VARCHAR(50) NOT NULL DEFAULT 'Secret',
        "CreatedBy_UserID" INT NOT NULL REFERENCES "User"("UserID")
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS "Group_Member" (
        "GroupID" INT NOT NULL REFERENCES "Group"("GroupID") ON DELETE CASCADE,
        "UserID" INT NOT NULL REFERENCES "User"("UserID") ON DELETE CASCADE,
        PRIMARY KEY ("GroupID", "UserID")
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS "Person" (
        "PersonID" SERIAL PRIMARY KEY,
        "Name" VARCHAR(255) NOT NULL,
        "BirthDate" DATE,
        "DeathDate" DATE,
        "Biography" TEXT,
        "Profile_UserID" INT REFERENCES "User"("UserID")
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS "Relationship" (
        "RelationshipID" SERIAL PRIMARY KEY,
        "Person1_ID" INT NOT NULL REFERENCES "Person"("PersonID"),
        "Person2_ID" INT NOT NULL REFERENCES "Person"("PersonID"),
        "RelationshipType" VARCHAR(50) NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS "Media_Album" (
        "AlbumID" SERIAL PRIMARY KEY,
        "AlbumName" VARCHAR(255) NOT NULL,
        "Description" TEXT,
        "CreatedBy_UserID" INT NOT NULL REFERENCES "User"("UserID")
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS "Media_Item" (
        "ItemID" SERIAL PRIMARY KEY,
        "AlbumID" INT NOT NULL REFERENCES "Media_Album"("AlbumID") ON DELETE CASCADE,
        "UploadedBy_UserID" INT NOT NULL REFERENCES "User"("UserID"),
        "File_URL" VARCHAR(500) NOT NULL,
        "Description_Caption" TEXT,
        "Date_Taken" DATE,
        "Post_Status" VARCHAR(50) NOT NULL DEFAULT 'Visible'
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS "Timeline_Event" (
        "EventID" SERIAL PRIMARY KEY,
        "EventDate" DATE NOT NULL,
        "Title" VARCHAR(255) NOT NULL,
        "Story" TEXT,
        "CreatedBy_UserID" INT NOT NULL REFERENCES "User"("UserID"),
        "Post_Status" VARCHAR(50) NOT NULL DEFAULT 'Visible'
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS "Direct_Message" (
        "MessageID" SERIAL PRIMARY KEY,
        "Sender_UserID" INT NOT NULL REFERENCES "User"("UserID"),
        "Recipient_UserID" INT NOT NULL REFERENCES "User"("UserID"),
        "Message_Content" TEXT NOT NULL,
        "Timestamp" TIMESTAMPTZ DEFAULT CURRENT_TIMESTAMP,
        "Message_Status" VARCHAR(50) NOT NULL DEFAULT 'Sent'
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS "Memorial_Tribute" (
        "TributeID" SERIAL PRIMARY KEY,
        "Deceased_PersonID" INT NOT NULL REFERENCES "Person"("PersonID") ON DELETE CASCADE,
        "PostedBy_UserID" INT NOT NULL REFERENCES "User"("UserID"),
        "Tribute_Content" TEXT NOT NULL,
        "Timestamp" TIMESTAMPTZ DEFAULT CURRENT_TIMESTAMP,
        "Post_Status" VARCHAR(50) NOT NULL DEFAULT 'Visible'
    )
    """,
)

LEGACY_DDL: tuple[str, ...] = (
    """
    CREATE TABLE IF NOT EXISTS families (
        id SERIAL PRIMARY KEY,
        family_code VARCHAR(50) UNIQUE NOT NULL,
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS family_members (
        id SERIAL PRIMARY KEY,
        family_code VARCHAR(50) REFERENCES families(family_code) ON DELETE CASCADE,
        name VARCHAR(255) NOT NULL,
        role VARCHAR(50) NOT NULL,
        joined_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS tree_members (
        id SERIAL PRIMARY KEY,
        family_code VARCHAR(50) REFERENCES families(family_code) ON DELETE CASCADE,
        name VARCHAR(255) NOT NULL,
        relationship VARCHAR(255),
        birth_date DATE,
        bio TEXT,
        created_by VARCHAR(255),
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS stories (
        id SERIAL PRIMARY KEY,
        family_code VARCHAR(50) REFERENCES families(family_code) ON DELETE CASCADE,
        title VARCHAR(255) NOT NULL,
        author VARCHAR(255),
        content TEXT NOT NULL,
        tags TEXT,
        created_by VARCHAR(255),
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS events (
        id SERIAL PRIMARY KEY,
        family_code VARCHAR(50) REFERENCES families(family_code) ON DELETE CASCADE,
        name VARCHAR(255) NOT NULL,
        date DATE NOT NULL,
        location VARCHAR(255),
        description TEXT,
        created_by VARCHAR(255),
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_family_members_code ON family_members(family_code)",
    "CREATE INDEX IF NOT EXISTS idx_tree_members_code ON tree_members(family_code)",
    "CREATE INDEX IF NOT EXISTS idx_stories_code ON stories(family_code)",
    "CREATE INDEX IF NOT EXISTS idx_events_code ON events(family_code)",
)

_DDL_BY_VARIANT = {
    VARIANT_HARMONY: HARMONY_DDL,
    VARIANT_LEGACY: LEGACY_DDL,
}


def ddl_for(variant: str) -> tuple[str, ...]:
    try:
        return _DDL_BY_VARIANT[variant]
    except KeyError:
        raise ValueError(f"unknown variant: {variant!r}") from None


def ensure_schema(conn: psycopg.Connection, variant: str) -> None:
    """Create the variant's tables if missing, in one transaction."""
    statements = ddl_for(variant)
    with conn.transaction():
        for stmt in statements:
            conn.execute(stmt)
    log.info("%s schema ready (%d statements)", variant, len(statements))
