"""
Church lookup and admin authorization.

Both predicates return the church when the caller may act on it and ``None``
otherwise. "No such church", "not an admin" and "church not active" all look
the same to the caller.
"""
import logging
from typing import Optional

from sqlalchemy.orm import Session

from app.core.exceptions import NotPermitted
from app.models.church import Church, ChurchAdmin

logger = logging.getLogger(__name__)


def normalize_key(value: Optional[str]) -> str:
    return (value or "").strip().lower()


def get_church(session: Session, church_code: str) -> Optional[Church]:
    return session.query(Church).filter(Church.code == normalize_key(church_code)).first()


def is_church_admin(session: Session, church_code: str, email: str) -> Optional[Church]:
    return (
        session.query(Church)
        .join(ChurchAdmin, ChurchAdmin.church_id == Church.id)
        .filter(
            Church.code == normalize_key(church_code),
            ChurchAdmin.email == normalize_key(email),
        )
        .first()
    )


def is_church_admin_and_available(session: Session, church_code: str, email: str) -> Optional[Church]:
    church = is_church_admin(session, church_code, email)
    if church is None or not church.is_available:
        return None
    return church


def require_church_admin(session: Session, church_code: str, email: str) -> Church:
    church = is_church_admin(session, church_code, email)
    if church is None:
        raise NotPermitted("Only church admin able to perform this operation")
    return church


def require_available_church_admin(session: Session, church_code: str, email: str) -> Church:
    church = is_church_admin_and_available(session, church_code, email)
    if church is None:
        raise NotPermitted(
            "Only church admin able to perform this operation or church must be active"
        )
    return church


def get_active_church(session: Session, church_code: str) -> Church:
    church = get_church(session, church_code)
    if church is None or not church.is_available:
        raise NotPermitted("Church does not exist")
    return church
