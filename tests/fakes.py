"""Fake pool, connection and store used in place of PostgreSQL."""

from __future__ import annotations

import copy
import itertools
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Callable

import psycopg


@dataclass
class _FakeResult:
    rows: list[dict[str, Any]] = field(default_factory=list)
    rowcount: int = 0

    def fetchone(self) -> dict[str, Any] | None:
        return dict(self.rows[0]) if self.rows else None

    def fetchall(self) -> list[dict[str, Any]]:
        return [dict(r) for r in self.rows]


# Legacy tenant tables: (insertable columns, NOT NULL columns).
_LEGACY_ITEMS: dict[str, tuple[tuple[str, ...], tuple[str, ...]]] = {
    "tree_members": (("name", "relationship", "birth_date", "bio", "created_by"), ("name",)),
    "stories": (("title", "author", "content", "tags", "created_by"), ("title", "content")),
    "events": (("name", "date", "location", "description", "created_by"), ("name", "date")),
}

_PUBLIC_USER_KEYS = ("UserID", "Name", "Email", "Role", "Status")


class FakeStore:
    """In-memory stand-in for the handful of statements the routes issue.

    Statements are matched on their whitespace-normalized prefix. Anything
    not recognised can be answered by ``script(prefix, result)``; otherwise
    the test fails loudly.
    """

    def __init__(self) -> None:
        self.tables: dict[str, list[dict[str, Any]]] = {
            "User": [],
            "Person": [],
            "Timeline_Event": [],
            "Media_Album": [],
            "Media_Item": [],
            "Memorial_Tribute": [],
            "Direct_Message": [],
            "families": [],
            "family_members": [],
            "tree_members": [],
            "stories": [],
            "events": [],
        }
        self.queries: list[tuple[str, tuple]] = []
        self._ids = itertools.count(1)
        self._clock = itertools.count(1)
        self._scripted: list[tuple[str, Callable[[tuple], _FakeResult]]] = []

    # -- helpers ---------------------------------------------------------

    def script(self, prefix: str, result: list[dict[str, Any]] | Exception) -> None:
        def _answer(params: tuple) -> _FakeResult:
            if isinstance(result, Exception):
                raise result
            return _FakeResult(rows=list(result), rowcount=len(result))

        self._scripted.append((prefix, _answer))

    def _now(self) -> datetime:
        return datetime(2024, 1, 1, 12, 0) + timedelta(seconds=next(self._clock))

    def _require(self, table: str, row: dict[str, Any], columns: tuple[str, ...]) -> None:
        for col in columns:
            if row.get(col) is None:
                raise psycopg.errors.NotNullViolation(f'null value in column "{col}" of relation "{table}"')

    def _require_ref(self, table: str, value: Any, ref_table: str, ref_key: str) -> None:
        if value is not None and not any(r[ref_key] == value for r in self.tables[ref_table]):
            raise psycopg.errors.ForeignKeyViolation(f'insert or update on table "{table}" violates foreign key')

    def _set_status(self, table: str, column: str, status: Any, match: dict[str, Any]) -> _FakeResult:
        rows = [r for r in self.tables[table] if all(r[k] == v for k, v in match.items())]
        for r in rows:
            r[column] = status
        return _FakeResult(rows=rows, rowcount=len(rows))

    def _family_exists(self, code: Any) -> bool:
        return any(f["family_code"] == code for f in self.tables["families"])

    def _require_family(self, table: str, code: Any) -> None:
        if code is not None and not self._family_exists(code):
            raise psycopg.errors.ForeignKeyViolation(f'insert or update on table "{table}" violates foreign key')

    # -- dispatch --------------------------------------------------------

    def execute(self, query: str, params: tuple | None = None) -> _FakeResult:
        q = " ".join(query.split())
        params = tuple(params or ())
        self.queries.append((q, params))

        for prefix, answer in self._scripted:
            if q.startswith(prefix):
                return answer(params)

        if q.startswith('INSERT INTO "User"'):
            return self._insert_user(params)
        if q.startswith('SELECT "UserID", "Name", "Email", "Role", "Status" FROM "User"'):
            rows = [{k: u[k] for k in _PUBLIC_USER_KEYS} for u in self.tables["User"]]
            return _FakeResult(rows=rows, rowcount=len(rows))
        if q.startswith('INSERT INTO "Person"'):
            return self._insert_person(params)
        if q.startswith('UPDATE "Person"'):
            return self._update_person(params)
        if q.startswith('SELECT * FROM "Person"'):
            rows = sorted(self.tables["Person"], key=lambda p: p["Name"])
            return _FakeResult(rows=rows, rowcount=len(rows))
        if q.startswith('INSERT INTO "Timeline_Event"'):
            return self._insert_event(params)
        if q.startswith('SELECT * FROM "Timeline_Event"'):
            (status,) = params
            rows = [e for e in self.tables["Timeline_Event"] if e["Post_Status"] == status]
            rows.sort(key=lambda e: e["EventDate"], reverse=True)
            return _FakeResult(rows=rows, rowcount=len(rows))
        if q.startswith('UPDATE "Timeline_Event" SET "Post_Status"'):
            status, event_id = params
            rows = [e for e in self.tables["Timeline_Event"] if e["EventID"] == event_id]
            for e in rows:
                e["Post_Status"] = status
            return _FakeResult(rows=rows, rowcount=len(rows))

        if q.startswith('INSERT INTO "Media_Album"'):
            return self._insert_album(params)
        if q.startswith('SELECT * FROM "Media_Album"'):
            rows = sorted(self.tables["Media_Album"], key=lambda a: a["AlbumID"])
            return _FakeResult(rows=rows, rowcount=len(rows))
        if q.startswith('INSERT INTO "Media_Item"'):
            return self._insert_media_item(params)
        if q.startswith('SELECT * FROM "Media_Item"'):
            album_id, status = params
            rows = [i for i in self.tables["Media_Item"] if i["AlbumID"] == album_id and i["Post_Status"] == status]
            rows.sort(key=lambda i: i["ItemID"])
            return _FakeResult(rows=rows, rowcount=len(rows))
        if q.startswith('UPDATE "Media_Item" SET "Post_Status"'):
            status, item_id, album_id = params
            return self._set_status("Media_Item", "Post_Status", status, {"ItemID": item_id, "AlbumID": album_id})
        if q.startswith('INSERT INTO "Memorial_Tribute"'):
            return self._insert_tribute(params)
        if q.startswith('SELECT * FROM "Memorial_Tribute"'):
            person_id, status = params
            rows = [
                t for t in self.tables["Memorial_Tribute"]
                if t["Deceased_PersonID"] == person_id and t["Post_Status"] == status
            ]
            rows.sort(key=lambda t: t["Timestamp"], reverse=True)
            return _FakeResult(rows=rows, rowcount=len(rows))
        if q.startswith('UPDATE "Memorial_Tribute" SET "Post_Status"'):
            status, tribute_id = params
            return self._set_status("Memorial_Tribute", "Post_Status", status, {"TributeID": tribute_id})
        if q.startswith('INSERT INTO "Direct_Message"'):
            return self._insert_message(params)
        if q.startswith('SELECT * FROM "Direct_Message"'):
            user_id, _, hidden = params
            rows = [
                m for m in self.tables["Direct_Message"]
                if user_id in (m["Sender_UserID"], m["Recipient_UserID"])
                and m["Message_Status"] != hidden
            ]
            rows.sort(key=lambda m: m["Timestamp"], reverse=True)
            return _FakeResult(rows=rows, rowcount=len(rows))
        if q.startswith('UPDATE "Direct_Message" SET "Message_Status"'):
            status, message_id = params
            return self._set_status("Direct_Message", "Message_Status", status, {"MessageID": message_id})

        if q.startswith("INSERT INTO families"):
            return self._insert_family(params)
        if q.startswith("INSERT INTO family_members (family_code, name, role) VALUES"):
            return self._insert_member(*params)
        if q.startswith("INSERT INTO family_members (family_code, name, role) SELECT"):
            name, role, code = params
            if not self._family_exists(code):
                return _FakeResult()
            return self._insert_member(code, name, role, returning=True)
        if q.startswith("SELECT * FROM family_members"):
            (code,) = params
            rows = [m for m in self.tables["family_members"] if m["family_code"] == code]
            rows.sort(key=lambda m: (m["joined_at"], m["id"]), reverse=True)
            return _FakeResult(rows=rows, rowcount=len(rows))

        for table in _LEGACY_ITEMS:
            if q.startswith(f"INSERT INTO {table}"):
                return self._insert_item(table, params)
            if q.startswith(f"SELECT * FROM {table}"):
                return self._list_items(table, params)
            if q.startswith(f"UPDATE {table}"):
                return self._update_item(table, params)
            if q.startswith(f"DELETE FROM {table}"):
                return self._delete_item(table, params)

        raise AssertionError(f"Unexpected query: {q}")

    # -- Harmony ---------------------------------------------------------

    def _insert_user(self, params: tuple) -> _FakeResult:
        name, email, pw_hash = params
        row = {"Name": name, "Email": email, "Password_Hash": pw_hash}
        self._require("User", row, ("Name", "Email", "Password_Hash"))
        if any(u["Email"] == email for u in self.tables["User"]):
            raise psycopg.errors.UniqueViolation('duplicate key value violates unique constraint "User_Email_key"')
        row.update({"UserID": next(self._ids), "Role": "Member", "Status": "Pending"})
        self.tables["User"].append(row)
        return _FakeResult(rows=[{k: row[k] for k in _PUBLIC_USER_KEYS}], rowcount=1)

    def _insert_person(self, params: tuple) -> _FakeResult:
        name, birth, death, bio, profile_user_id = params
        row = {
            "PersonID": next(self._ids),
            "Name": name,
            "BirthDate": birth,
            "DeathDate": death,
            "Biography": bio,
            "Profile_UserID": profile_user_id,
        }
        self._require("Person", row, ("Name",))
        self.tables["Person"].append(row)
        return _FakeResult(rows=[row], rowcount=1)

    def _update_person(self, params: tuple) -> _FakeResult:
        name, birth, death, bio, person_id = params
        rows = [p for p in self.tables["Person"] if p["PersonID"] == person_id]
        if rows:
            self._require("Person", {"Name": name}, ("Name",))
        for p in rows:
            p.update({"Name": name, "BirthDate": birth, "DeathDate": death, "Biography": bio})
        return _FakeResult(rows=rows, rowcount=len(rows))

    def _insert_event(self, params: tuple) -> _FakeResult:
        event_date, title, story, user_id = params
        row = {
            "EventID": next(self._ids),
            "EventDate": event_date,
            "Title": title,
            "Story": story,
            "CreatedBy_UserID": user_id,
            "Post_Status": "Visible",
        }
        self._require("Timeline_Event", row, ("EventDate", "Title", "CreatedBy_UserID"))
        self.tables["Timeline_Event"].append(row)
        return _FakeResult(rows=[row], rowcount=1)

    def _insert_album(self, params: tuple) -> _FakeResult:
        name, description, user_id = params
        row = {"AlbumID": next(self._ids), "AlbumName": name, "Description": description, "CreatedBy_UserID": user_id}
        self._require("Media_Album", row, ("AlbumName", "CreatedBy_UserID"))
        self._require_ref("Media_Album", user_id, "User", "UserID")
        self.tables["Media_Album"].append(row)
        return _FakeResult(rows=[row], rowcount=1)

    def _insert_media_item(self, params: tuple) -> _FakeResult:
        album_id, user_id, file_url, caption, date_taken = params
        row = {
            "ItemID": next(self._ids),
            "AlbumID": album_id,
            "UploadedBy_UserID": user_id,
            "File_URL": file_url,
            "Description_Caption": caption,
            "Date_Taken": date_taken,
            "Post_Status": "Visible",
        }
        self._require("Media_Item", row, ("AlbumID", "UploadedBy_UserID", "File_URL"))
        self._require_ref("Media_Item", album_id, "Media_Album", "AlbumID")
        self._require_ref("Media_Item", user_id, "User", "UserID")
        self.tables["Media_Item"].append(row)
        return _FakeResult(rows=[row], rowcount=1)

    def _insert_tribute(self, params: tuple) -> _FakeResult:
        person_id, user_id, content = params
        row = {
            "TributeID": next(self._ids),
            "Deceased_PersonID": person_id,
            "PostedBy_UserID": user_id,
            "Tribute_Content": content,
            "Timestamp": self._now(),
            "Post_Status": "Visible",
        }
        self._require("Memorial_Tribute", row, ("PostedBy_UserID", "Tribute_Content"))
        self._require_ref("Memorial_Tribute", person_id, "Person", "PersonID")
        self._require_ref("Memorial_Tribute", user_id, "User", "UserID")
        self.tables["Memorial_Tribute"].append(row)
        return _FakeResult(rows=[row], rowcount=1)

    def _insert_message(self, params: tuple) -> _FakeResult:
        sender, recipient, content = params
        row = {
            "MessageID": next(self._ids),
            "Sender_UserID": sender,
            "Recipient_UserID": recipient,
            "Message_Content": content,
            "Timestamp": self._now(),
            "Message_Status": "Sent",
        }
        self._require("Direct_Message", row, ("Sender_UserID", "Recipient_UserID", "Message_Content"))
        self._require_ref("Direct_Message", sender, "User", "UserID")
        self._require_ref("Direct_Message", recipient, "User", "UserID")
        self.tables["Direct_Message"].append(row)
        return _FakeResult(rows=[row], rowcount=1)

    # -- Legacy ----------------------------------------------------------

    def _insert_family(self, params: tuple) -> _FakeResult:
        (code,) = params
        self._require("families", {"family_code": code}, ("family_code",))
        if self._family_exists(code):
            raise psycopg.errors.UniqueViolation('duplicate key value violates unique constraint "families_family_code_key"')
        self.tables["families"].append({"id": next(self._ids), "family_code": code, "created_at": self._now()})
        return _FakeResult(rowcount=1)

    def _insert_member(self, code: Any, name: Any, role: Any, *, returning: bool = False) -> _FakeResult:
        row = {"id": next(self._ids), "family_code": code, "name": name, "role": role, "joined_at": self._now()}
        self._require("family_members", row, ("name", "role"))
        self._require_family("family_members", code)
        self.tables["family_members"].append(row)
        return _FakeResult(rows=[{"id": row["id"]}] if returning else [], rowcount=1)

    def _insert_item(self, table: str, params: tuple) -> _FakeResult:
        columns, not_null = _LEGACY_ITEMS[table]
        code, *values = params
        row = {"id": next(self._ids), "family_code": code, **dict(zip(columns, values)), "created_at": self._now()}
        self._require(table, row, not_null)
        self._require_family(table, code)
        self.tables[table].append(row)
        return _FakeResult(rows=[row], rowcount=1)

    def _list_items(self, table: str, params: tuple) -> _FakeResult:
        (code,) = params
        rows = [r for r in self.tables[table] if r["family_code"] == code]
        if table == "events":
            rows.sort(key=lambda r: (r["date"], r["id"]))
        else:
            rows.sort(key=lambda r: (r["created_at"], r["id"]), reverse=True)
        return _FakeResult(rows=rows, rowcount=len(rows))

    def _update_item(self, table: str, params: tuple) -> _FakeResult:
        columns, not_null = _LEGACY_ITEMS[table]
        update_cols = [c for c in columns if c != "created_by"]
        *values, item_id, code = params
        changes = dict(zip(update_cols, values))
        rows = [r for r in self.tables[table] if r["id"] == item_id and r["family_code"] == code]
        if rows:
            self._require(table, changes, tuple(c for c in not_null if c in changes))
        for r in rows:
            r.update(changes)
        return _FakeResult(rows=rows, rowcount=len(rows))

    def _delete_item(self, table: str, params: tuple) -> _FakeResult:
        item_id, code = params
        before = len(self.tables[table])
        self.tables[table] = [r for r in self.tables[table] if not (r["id"] == item_id and r["family_code"] == code)]
        return _FakeResult(rowcount=before - len(self.tables[table]))


class FakeConn:
    def __init__(self, store: FakeStore) -> None:
        self._store = store

    def execute(self, query: str, params: tuple | None = None) -> _FakeResult:
        return self._store.execute(query, params)

    @contextmanager
    def transaction(self):
        snapshot = copy.deepcopy(self._store.tables)
        try:
            yield
        except Exception:
            self._store.tables = snapshot
            raise


class FakePool:
    def __init__(self, store: FakeStore) -> None:
        self.store = store

    @contextmanager
    def connection(self):
        snapshot = copy.deepcopy(self.store.tables)
        try:
            yield FakeConn(self.store)
        except Exception:
            # Pool connections roll back the open transaction on error.
            self.store.tables = snapshot
            raise


