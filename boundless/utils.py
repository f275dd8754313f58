# boundless/utils.py
"""
Utility helpers used across the backend.

Goals:
- Provide JSON-file helpers with clear errors
- Generate document ids and timestamps in one place
- Build URL slugs for published hackathons
"""

from __future__ import annotations

import datetime as _dt
import json
import pathlib
import re
import unicodedata
import uuid
from typing import Any


# ----------------------------------------------------------------------
# 1) JSON helpers
# ----------------------------------------------------------------------
def load_json_file(path: pathlib.Path) -> Any:
    """
    Read a JSON file and return its content.

    Collections are stored as lists of documents, but we return Any and let
    callers validate the type.
    """
    if not path.is_file():
        raise FileNotFoundError(f"Data file not found: {path}")

    with path.open("r", encoding="utf-8") as f:
        return json.load(f)


def save_json_file(path: pathlib.Path, content: Any) -> None:
    """
    Write JSON deterministically (UTF-8, pretty-printed).

    The file is written next to its target first and then moved in place so
    a crash never leaves half a collection on disk.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_suffix(path.suffix + ".tmp")
    with tmp.open("w", encoding="utf-8") as f:
        json.dump(content, f, ensure_ascii=False, indent=2)
    tmp.replace(path)


# ----------------------------------------------------------------------
# 2) Ids + time
# ----------------------------------------------------------------------
def new_object_id() -> str:
    """24-char hex id, same shape as the ids issued by the previous backend."""
    return uuid.uuid4().hex[:24]


def utc_now() -> _dt.datetime:
    return _dt.datetime.now(_dt.timezone.utc)


# ----------------------------------------------------------------------
# 3) Slugs
# ----------------------------------------------------------------------
_NON_SLUG_RE = re.compile(r"[^a-z0-9]+")


def slugify(text: str) -> str:
    """
    "Stellar Build Week 2025!" -> "stellar-build-week-2025"
    """
    normalized = unicodedata.normalize("NFKD", text or "")
    ascii_text = normalized.encode("ascii", "ignore").decode("ascii").lower()
    slug = _NON_SLUG_RE.sub("-", ascii_text).strip("-")
    return slug or "hackathon"


__all__ = [
    "load_json_file",
    "save_json_file",
    "new_object_id",
    "utc_now",
    "slugify",
]
