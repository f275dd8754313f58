# boundless/routes/deps.py
"""
Shared route plumbing.

- FastAPI dependencies for the objects built once in create_app()
- Loaders that turn ids into models (or NotFoundError)
- The response envelope used by every endpoint
"""

from __future__ import annotations

import logging
import math
from typing import Any, Dict, List, Optional

from fastapi import Request
from pydantic import BaseModel

from boundless.config import Settings
from boundless.data_client.document_store import (
    HACKATHONS,
    ORGANIZATIONS,
    SUBMISSIONS,
    DocumentStore,
)
from boundless.data_client.notification_client import NotificationClient
from boundless.errors import NotFoundError, NotificationError
from boundless.hackathons.models import HackathonDraft, Submission
from boundless.models import Organization

logger = logging.getLogger("boundless-api")


# ─────────────────────────────────────────────────────────────
# Dependencies
# ─────────────────────────────────────────────────────────────
def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_store(request: Request) -> DocumentStore:
    return request.app.state.store


def get_notifier(request: Request) -> NotificationClient:
    return request.app.state.notifier


# ─────────────────────────────────────────────────────────────
# Loaders
# ─────────────────────────────────────────────────────────────
def load_organization(store: DocumentStore, org_id: str) -> Organization:
    doc = store.find_one(ORGANIZATIONS, {"_id": org_id})
    if doc is None:
        raise NotFoundError("Organization not found")
    return Organization.model_validate(doc)


def load_hackathon(
    store: DocumentStore, org_id: str, hackathon_id: str, status: Optional[str] = None
) -> HackathonDraft:
    filters: Dict[str, Any] = {"_id": hackathon_id, "organizationId": org_id}
    if status is not None:
        filters["status"] = status
    doc = store.find_one(HACKATHONS, filters)
    if doc is None:
        raise NotFoundError("Draft not found" if status == "draft" else "Hackathon not found")
    return HackathonDraft.model_validate(doc)


def find_hackathon(store: DocumentStore, slug_or_id: str) -> HackathonDraft:
    """Participant-facing lookup: accepts either the slug or the id."""
    doc = store.find_one(HACKATHONS, {"slug": slug_or_id}) or store.find_one(
        HACKATHONS, {"_id": slug_or_id}
    )
    if doc is None:
        raise NotFoundError("Hackathon not found")
    return HackathonDraft.model_validate(doc)


def load_submission(store: DocumentStore, hackathon_id: str, submission_id: str) -> Submission:
    doc = store.find_one(SUBMISSIONS, {"_id": submission_id, "hackathonId": hackathon_id})
    if doc is None:
        raise NotFoundError("Submission not found")
    return Submission.model_validate(doc)


# ─────────────────────────────────────────────────────────────
# Response envelope
# ─────────────────────────────────────────────────────────────
def _jsonable(data: Any) -> Any:
    if isinstance(data, BaseModel):
        return data.model_dump(mode="json", by_alias=True)
    if isinstance(data, list):
        return [_jsonable(d) for d in data]
    if isinstance(data, dict):
        return {k: _jsonable(v) for k, v in data.items()}
    return data


def ok(data: Any, message: Optional[str] = None, **meta: Any) -> Dict[str, Any]:
    body_meta: Dict[str, Any] = {"message": message} if message else {}
    body_meta.update(meta)
    errors: List[Dict[str, Any]] = []
    return {"data": _jsonable(data), "meta": body_meta, "errors": errors}


async def notify_best_effort(
    notifier: NotificationClient, event: str, recipients: List[str], data: Dict[str, Any]
) -> None:
    # A failed notification never fails the request that triggered it
    try:
        await notifier.notify(event, recipients, data)
    except NotificationError as exc:
        logger.warning(f"[Notify] {event} not delivered: {exc}")


def pagination(page: int, limit: int, total_items: int) -> Dict[str, Any]:
    total_pages = math.ceil(total_items / limit) if total_items else 0
    return {
        "currentPage": page,
        "totalPages": total_pages,
        "totalItems": total_items,
        "itemsPerPage": limit,
        "hasNext": page < total_pages,
        "hasPrev": page > 1,
    }
