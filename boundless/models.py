# boundless/models.py
from __future__ import annotations

import datetime as _dt
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from boundless.utils import utc_now


# ─────────────────────────────────────────────────────────────
# Base
# ─────────────────────────────────────────────────────────────

class ApiModel(BaseModel):
    """
    snake_case in Python, camelCase on the wire and in stored documents.
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_document(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


# ─────────────────────────────────────────────────────────────
# Organizations
# ─────────────────────────────────────────────────────────────

class Organization(ApiModel):
    id: Optional[str] = Field(default=None, alias="_id")
    name: str
    owner: str                  # owner email
    admins: List[str] = Field(default_factory=list)
    # Owner and admins are always listed here too
    members: List[str] = Field(default_factory=list)
    created_at: _dt.datetime = Field(default_factory=utc_now)
    updated_at: _dt.datetime = Field(default_factory=utc_now)

    def normalized(self) -> "Organization":
        members = list(self.members)
        for email in [self.owner, *self.admins]:
            if email not in members:
                members.append(email)
        return self.model_copy(update={"members": members})


class CreateOrganizationRequest(ApiModel):
    name: str = Field(..., min_length=2, max_length=120)


class AddMemberRequest(ApiModel):
    email: str = Field(..., min_length=3, max_length=254)
    role: Literal["member", "admin"] = "member"


class ChangeRoleRequest(ApiModel):
    role: Literal["member", "admin"]
