"""Visibility / delivery status values and the request body that changes them.

List endpoints only return rows whose ``Post_Status`` is ``Visible``; these
transitions are the only way a row leaves (or re-enters) that listing.
"""

from __future__ import annotations

from pydantic import BaseModel

from .errors import InvalidInput

POST_VISIBLE = "Visible"
POST_STATUSES = (POST_VISIBLE, "Hidden", "Flagged")

MESSAGE_HIDDEN = "Hidden"
MESSAGE_STATUSES = ("Sent", "Read", MESSAGE_HIDDEN)


class StatusUpdate(BaseModel):
    status: str


def check_status(status: str, allowed: tuple[str, ...]) -> str:
    value = (status or "").strip()
    for candidate in allowed:
        if value.lower() == candidate.lower():
            return candidate
    raise InvalidInput(f"Status must be one of: {', '.join(allowed)}")
