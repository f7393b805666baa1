"""Persistence helpers for organizations."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from domain.errors import OrganizationNotFound
from models import Organization


def create_organization(
    session: Session,
    *,
    name: str,
    domain: str | None = None,
    created_by: int | None = None,
) -> Organization:
    """Insert a new organization and flush to assign its id."""
    cleaned = name.strip()
    if not cleaned:
        raise ValueError("organization name is required")
    organization = Organization(name=cleaned, domain=domain, created_by=created_by)
    session.add(organization)
    session.flush()
    return organization


def get_organization(session: Session, organization_id: int, *, lock: bool = False) -> Organization:
    """Load one organization, optionally taking a row lock that serializes ledger writes."""
    statement = select(Organization).where(Organization.id == organization_id)
    if lock:
        statement = statement.with_for_update()
    organization = session.execute(statement).scalar_one_or_none()
    if organization is None:
        raise OrganizationNotFound(f"organization_id={organization_id} does not exist")
    return organization
