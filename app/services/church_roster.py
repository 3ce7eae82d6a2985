"""
Church registration, profile updates and roster management (admins, servants,
locations). Churches and roster entries are never deleted; they are switched
between active and inactive.
"""
import logging
from typing import Iterable, List, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.exceptions import InvalidState, StoreFailure, ValidationFailed
from app.models.church import Church, ChurchAdmin, ChurchLocation, ChurchServant
from app.models.common import ChurchStatus, RecordStatus
from app.schemas.church import ChurchRegister, ChurchUpdate, LocationCreate, ServantCreate, ServantUpdate
from app.services.church_directory import (
    normalize_key,
    require_available_church_admin,
    require_church_admin,
)

logger = logging.getLogger(__name__)


def _admin_set(caller: str, others: Iterable[str]) -> List[str]:
    """Caller first, then each distinct non-blank email once."""
    emails = [normalize_key(caller)]
    for email in others or []:
        email = normalize_key(email)
        if email and email not in emails:
            emails.append(email)
    return emails


def _flush(session: Session, action: str) -> None:
    try:
        session.flush()
    except IntegrityError as e:
        session.rollback()
        logger.error(f"Database integrity error while {action}: {str(e)}")
        raise StoreFailure(f"Database integrity error while {action}")
    except SQLAlchemyError as e:
        session.rollback()
        logger.error(f"Database error while {action}: {str(e)}")
        raise StoreFailure(f"Database error while {action}")


# Churches
def register_church(session: Session, email: str, data: ChurchRegister) -> Church:
    code = normalize_key(data.code)
    name = (data.name or "").strip()
    # time_offset 0 is a valid UTC church, only a missing value is rejected
    if not code or not name or data.time_offset is None:
        raise ValidationFailed("Compulsory data is not valid")

    existing = session.query(Church).filter((Church.code == code) | (Church.name == name)).first()
    if existing:
        raise ValidationFailed("Church code or name already exist")

    church = Church(
        code=code,
        name=name,
        address=data.address,
        time_offset=data.time_offset,
        status=ChurchStatus.ACTIVE,
    )
    church.admins = {ChurchAdmin(email=admin) for admin in _admin_set(email, data.admins)}
    session.add(church)
    _flush(session, "registering church")

    logger.info(f"Church {church.code} registered by {email}")
    return church


def update_church(session: Session, church_code: str, email: str, data: ChurchUpdate) -> Church:
    church = require_church_admin(session, church_code, email)

    name = (data.name or "").strip()
    if not name or data.time_offset is None:
        raise ValidationFailed("Compulsory data is not valid")

    duplicate = session.query(Church).filter(Church.name == name, Church.id != church.id).first()
    if duplicate:
        raise ValidationFailed("Church name already exist")

    church.name = name
    church.address = data.address
    church.time_offset = data.time_offset
    set_admins(church, _admin_set(email, data.admins))
    _flush(session, "updating church")
    return church


def set_admins(church: Church, emails: List[str]) -> None:
    """Make the admin set equal to ``emails`` without re-inserting kept entries."""
    wanted = set(emails)
    for admin in list(church.admins):
        if admin.email not in wanted:
            church.admins.remove(admin)
    for admin_email in wanted - church.admin_emails:
        church.admins.add(ChurchAdmin(email=admin_email))


def list_admin_churches(session: Session, email: str) -> List[Church]:
    return (
        session.query(Church)
        .join(ChurchAdmin, ChurchAdmin.church_id == Church.id)
        .filter(ChurchAdmin.email == normalize_key(email))
        .order_by(Church.name)
        .all()
    )


def reactivate_church(session: Session, church_code: str, email: str) -> Church:
    church = require_church_admin(session, church_code, email)
    if church.status != ChurchStatus.INACTIVE:
        raise InvalidState("Church is already active")
    church.status = ChurchStatus.ACTIVE
    _flush(session, "reactivating church")
    return church


def inactivate_church(session: Session, church_code: str, email: str) -> Church:
    church = require_church_admin(session, church_code, email)
    if church.status == ChurchStatus.INACTIVE:
        raise InvalidState("Church is already inactive")
    church.status = ChurchStatus.INACTIVE
    _flush(session, "inactivating church")
    return church


# Servants
def _find_servant(church: Church, servant_email: str) -> Optional[ChurchServant]:
    servant_email = normalize_key(servant_email)
    return next((s for s in church.servants if s.email == servant_email), None)


def add_servant(session: Session, church_code: str, email: str, data: ServantCreate) -> ChurchServant:
    church = require_available_church_admin(session, church_code, email)
    if _find_servant(church, data.email):
        raise ValidationFailed("Servant already exist!")

    servant = ChurchServant(email=data.email, name=data.name.strip(), role=data.role)
    church.servants.append(servant)
    _flush(session, "adding servant")
    return servant


def update_servant(session: Session, church_code: str, email: str, data: ServantUpdate) -> ChurchServant:
    church = require_available_church_admin(session, church_code, email)
    servant = _find_servant(church, data.email)
    if servant is None:
        raise ValidationFailed("Servant does not exist!")
    if servant.status == RecordStatus.INACTIVE:
        raise InvalidState("Unable to update church servant")

    servant.name = data.name.strip()
    servant.role = data.role
    _flush(session, "updating servant")
    return servant


def set_servant_status(
    session: Session, church_code: str, email: str, servant_email: str, status: RecordStatus
) -> ChurchServant:
    church = require_available_church_admin(session, church_code, email)
    servant = _find_servant(church, servant_email)
    if servant is None:
        raise ValidationFailed("Servant does not exist!")
    if servant.status == status:
        raise InvalidState(f"Church servant is already {status.name.lower()}")

    servant.status = status
    _flush(session, "changing servant status")
    return servant


def active_servants(session: Session, church_code: str, email: str) -> List[ChurchServant]:
    church = require_available_church_admin(session, church_code, email)
    return [s for s in church.servants if s.status == RecordStatus.ACTIVE]


# Locations
def _find_location(church: Church, code: str) -> Optional[ChurchLocation]:
    code = normalize_key(code)
    return next((l for l in church.locations if l.code == code), None)


def add_location(session: Session, church_code: str, email: str, data: LocationCreate) -> ChurchLocation:
    church = require_available_church_admin(session, church_code, email)
    if _find_location(church, data.code):
        raise ValidationFailed("Church location code already exist!")

    location = ChurchLocation(code=data.code, location=data.location.strip())
    church.locations.append(location)
    _flush(session, "adding location")
    return location


def update_location(session: Session, church_code: str, email: str, data: LocationCreate) -> ChurchLocation:
    church = require_available_church_admin(session, church_code, email)
    location = _find_location(church, data.code)
    if location is None:
        raise ValidationFailed("Location code does not exist!")
    if location.status == RecordStatus.INACTIVE:
        raise InvalidState("Unable to update church location")

    # Services keep the name copied when they were written.
    location.location = data.location.strip()
    _flush(session, "updating location")
    return location


def set_location_status(
    session: Session, church_code: str, email: str, code: str, status: RecordStatus
) -> ChurchLocation:
    church = require_available_church_admin(session, church_code, email)
    location = _find_location(church, code)
    if location is None:
        raise ValidationFailed("Location does not exist!")
    if location.status == status:
        raise InvalidState(f"Church location is already {status.name.lower()}")

    location.status = status
    _flush(session, "changing location status")
    return location


def active_locations(session: Session, church_code: str, email: str) -> List[ChurchLocation]:
    church = require_available_church_admin(session, church_code, email)
    return [l for l in church.locations if l.status == RecordStatus.ACTIVE]


# Admins
def add_admin(session: Session, church_code: str, email: str, admin_email: str) -> Church:
    church = require_available_church_admin(session, church_code, email)
    admin_email = normalize_key(admin_email)
    if admin_email in church.admin_emails:
        raise ValidationFailed("Church admin already exist!")

    church.admins.add(ChurchAdmin(email=admin_email))
    _flush(session, "adding admin")
    return church


def remove_admin(session: Session, church_code: str, email: str, admin_email: str) -> Church:
    church = require_available_church_admin(session, church_code, email)
    admin_email = normalize_key(admin_email)
    admin = next((a for a in church.admins if a.email == admin_email), None)
    if admin is None:
        raise ValidationFailed("Church admin does not exist!")
    if len(church.admins) == 1:
        raise InvalidState("A church must keep at least one admin")

    church.admins.remove(admin)
    _flush(session, "removing admin")
    return church


def list_admins(session: Session, church_code: str, email: str) -> List[str]:
    church = require_available_church_admin(session, church_code, email)
    return sorted(church.admin_emails)
