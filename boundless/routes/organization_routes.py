# boundless/routes/organization_routes.py
import logging

from fastapi import APIRouter, Depends

from boundless.auth import Authenticated, require_user
from boundless.data_client.document_store import ORGANIZATIONS, DocumentStore
from boundless.errors import NotFoundError, StateError
from boundless.models import (
    AddMemberRequest,
    ChangeRoleRequest,
    CreateOrganizationRequest,
    Organization,
)
from boundless.policy import authorize
from boundless.routes.deps import get_store, load_organization, ok
from boundless.utils import utc_now

logger = logging.getLogger("boundless-api")

router = APIRouter(prefix="/api/organizations", tags=["organizations"])


def _save(store: DocumentStore, org: Organization) -> Organization:
    org = org.normalized().model_copy(update={"updated_at": utc_now()})
    store.update_one(ORGANIZATIONS, {"_id": org.id}, org.to_document())
    return org


@router.post("", status_code=201)
def create_organization(
    req: CreateOrganizationRequest,
    user: Authenticated = Depends(require_user),
    store: DocumentStore = Depends(get_store),
):
    org = Organization(name=req.name.strip(), owner=user.email).normalized()
    doc = store.insert_one(ORGANIZATIONS, org.to_document())
    logger.info(f"[Org] {user.email} created organization {doc['_id']}")
    return ok(Organization.model_validate(doc), "Organization created successfully")


@router.get("/{org_id}")
def get_organization(
    org_id: str,
    user: Authenticated = Depends(require_user),
    store: DocumentStore = Depends(get_store),
):
    org = load_organization(store, org_id)
    role = authorize(org, user.email, "organization", "view")
    return ok(org, "Organization retrieved successfully", role=role)


@router.post("/{org_id}/members", status_code=201)
def add_member(
    org_id: str,
    req: AddMemberRequest,
    user: Authenticated = Depends(require_user),
    store: DocumentStore = Depends(get_store),
):
    org = load_organization(store, org_id)
    authorize(org, user.email, "organization", "manage_members")
    if req.role == "admin":
        authorize(org, user.email, "organization", "assign_roles")

    email = req.email.strip().lower()
    members = [m for m in org.members if m != email] + [email]
    admins = [a for a in org.admins if a != email]
    if req.role == "admin":
        admins.append(email)

    org = _save(store, org.model_copy(update={"members": members, "admins": admins}))
    return ok(org, "Member added successfully")


@router.patch("/{org_id}/members/{email}")
def change_member_role(
    org_id: str,
    email: str,
    req: ChangeRoleRequest,
    user: Authenticated = Depends(require_user),
    store: DocumentStore = Depends(get_store),
):
    org = load_organization(store, org_id)
    authorize(org, user.email, "organization", "assign_roles")

    email = email.strip().lower()
    if email == org.owner.lower():
        raise StateError("The owner's role cannot be changed")
    if email not in org.members:
        raise NotFoundError("Member not found")

    admins = [a for a in org.admins if a != email]
    if req.role == "admin":
        admins.append(email)

    org = _save(store, org.model_copy(update={"admins": admins}))
    return ok(org, "Member role updated successfully")


@router.delete("/{org_id}/members/{email}")
def remove_member(
    org_id: str,
    email: str,
    user: Authenticated = Depends(require_user),
    store: DocumentStore = Depends(get_store),
):
    org = load_organization(store, org_id)
    authorize(org, user.email, "organization", "manage_members")

    email = email.strip().lower()
    if email == org.owner.lower():
        raise StateError("The owner cannot be removed from the organization")
    if email not in org.members:
        raise NotFoundError("Member not found")
    # Only the owner may remove an admin
    if email in org.admins:
        authorize(org, user.email, "organization", "assign_roles")

    org = _save(
        store,
        org.model_copy(
            update={
                "members": [m for m in org.members if m != email],
                "admins": [a for a in org.admins if a != email],
            }
        ),
    )
    return ok(org, "Member removed successfully")
