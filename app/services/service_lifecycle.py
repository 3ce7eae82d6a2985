"""
Create, update and publish church services and replace their liturgy, news
and servant assignments.

Every operation authorizes the caller as an admin of an active church before
touching the schedule. Scheduling operations normalize the interval with the
church offset and run the overlap check before writing; the write itself is
flushed so that a store-level overlap rejection surfaces as a conflict.
"""
import logging
from typing import Iterable, List, Optional
from uuid import UUID

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.exceptions import NotPermitted, ScheduleConflict, StoreFailure, ValidationFailed
from app.models.church import Church
from app.models.common import ServiceStatus
from app.models.service import ChurchService, LiturgyItem, NewsItem, ServantAssignment
from app.schemas.service import (
    LiturgyItemIn,
    NewsItemIn,
    ServantAssignmentIn,
    ServiceCreate,
    ServiceUpdate,
)
from app.services.church_directory import normalize_key, require_available_church_admin
from app.services.service_conflicts import is_overlap_violation, is_overlapping
from app.services.time_window import normalize_interval

logger = logging.getLogger(__name__)

OVERLAP_MESSAGE = "Service date is overlapping with other schedule at the selected location"


def _is_blank(value: Optional[str]) -> bool:
    return value is None or value.strip() == ""


def resolve_location(church: Church, location_code: Optional[str], location_name: Optional[str]):
    """
    Pick the location code and display name to copy onto a service.

    The code falls back to the default location. The name falls back to the
    church's own location entry for that code, active or not. A code missing
    from the roster gets the default name only for the default code, and its
    own code as name otherwise.
    """
    code = normalize_key(location_code) or settings.DEFAULT_LOCATION_CODE
    if not _is_blank(location_name):
        return code, location_name.strip()

    for location in church.locations:
        if location.code == code:
            return code, location.location

    if code == settings.DEFAULT_LOCATION_CODE:
        return code, settings.DEFAULT_LOCATION_NAME
    return code, code


def _flush(session: Session, action: str) -> None:
    try:
        session.flush()
    except IntegrityError as e:
        session.rollback()
        if is_overlap_violation(e):
            raise ScheduleConflict(OVERLAP_MESSAGE)
        logger.error(f"Database integrity error while {action}: {str(e)}")
        raise StoreFailure(f"Database integrity error while {action}")
    except SQLAlchemyError as e:
        session.rollback()
        logger.error(f"Database error while {action}: {str(e)}")
        raise StoreFailure(f"Database error while {action}")


def get_service(session: Session, service_id: UUID, status: Optional[ServiceStatus] = None) -> ChurchService:
    query = session.query(ChurchService).filter(ChurchService.id == service_id)
    if status is not None:
        query = query.filter(ChurchService.status == status)
    service = query.first()
    if service is None:
        raise NotPermitted("Invalid service record")
    return service


def _service_for_admin(
    session: Session, service_id: UUID, email: str, status: Optional[ServiceStatus] = None
):
    service = get_service(session, service_id, status=status)
    church = require_available_church_admin(session, service.church_code, email)
    return service, church


def create_service(session: Session, church_code: str, email: str, data: ServiceCreate) -> ChurchService:
    church = require_available_church_admin(session, church_code, email)

    start, end = normalize_interval(data.datetime_start, data.datetime_end, church.time_offset)
    location_code, location_name = resolve_location(church, data.location_code, data.location_name)

    if is_overlapping(session, church.code, location_code, start, end):
        raise ScheduleConflict(OVERLAP_MESSAGE)

    service = ChurchService(
        church_code=church.code,
        title=data.title if not _is_blank(data.title) else church.name,
        status=ServiceStatus.PENDING_PUBLISH,
        datetime_start=start,
        datetime_end=end,
        location_code=location_code,
        location_name=location_name,
        reflection=data.reflection,
        remarks=data.remarks,
    )
    session.add(service)
    _flush(session, "creating service")

    logger.info(f"Service {service.id} created for {church.code}/{location_code} by {email}")
    return service


def update_service(session: Session, service_id: UUID, email: str, data: ServiceUpdate) -> ChurchService:
    service, church = _service_for_admin(session, service_id, email)

    start, end = normalize_interval(data.datetime_start, data.datetime_end, church.time_offset)
    location_code, location_name = resolve_location(church, data.location_code, data.location_name)

    if is_overlapping(session, church.code, location_code, start, end, exclude_service_id=service.id):
        raise ScheduleConflict(OVERLAP_MESSAGE)

    service.location_code = location_code
    service.location_name = location_name
    service.datetime_start = start
    service.datetime_end = end
    service.title = data.title if not _is_blank(data.title) else church.name
    service.reflection = data.reflection
    service.remarks = data.remarks
    _flush(session, "updating service")

    logger.info(f"Service {service.id} updated by {email}")
    return service


def publish_service(session: Session, service_id: UUID, email: str) -> ChurchService:
    # Only pending services are found, so publishing twice fails on the lookup.
    service, _ = _service_for_admin(session, service_id, email, status=ServiceStatus.PENDING_PUBLISH)

    service.status = ServiceStatus.PUBLISHED
    _flush(session, "publishing service")

    logger.info(f"Service {service.id} published by {email}")
    return service


def _require_items(items: Iterable) -> List:
    items = list(items or [])
    if not items:
        raise ValidationFailed("Invalid data")
    return items


def replace_liturgy(session: Session, service_id: UUID, email: str, items: List[LiturgyItemIn]) -> ChurchService:
    service, _ = _service_for_admin(session, service_id, email)

    items = _require_items(items)
    if any(_is_blank(item.title) for item in items):
        raise ValidationFailed("One of the record contain empty title")

    service.liturgy = [
        LiturgyItem(
            position=position,
            title=item.title,
            title_link=item.title_link or "",
            content=item.content or "",
            content_link=item.content_link or "",
        )
        for position, item in enumerate(items)
    ]
    _flush(session, "replacing liturgy")
    return service


def replace_news(session: Session, service_id: UUID, email: str, items: List[NewsItemIn]) -> ChurchService:
    service, _ = _service_for_admin(session, service_id, email)

    items = _require_items(items)
    if any(_is_blank(item.title) or _is_blank(item.content) for item in items):
        raise ValidationFailed("One of the record contain empty title or content")

    service.news = [
        NewsItem(
            position=position,
            title=item.title,
            content=item.content,
            link=item.link or "",
        )
        for position, item in enumerate(items)
    ]
    _flush(session, "replacing news")
    return service


def replace_servants(
    session: Session, service_id: UUID, email: str, items: List[ServantAssignmentIn]
) -> ChurchService:
    service, _ = _service_for_admin(session, service_id, email)

    items = _require_items(items)
    invalid = [
        item for item in items
        if _is_blank(item.service_role)
        or _is_blank(item.servant_role)
        or _is_blank(item.name)
        or _is_blank(item.email)
    ]
    if invalid:
        raise ValidationFailed("One of the record contain invalid data")

    service.servants = [
        ServantAssignment(
            position=position,
            service_role=item.service_role,
            servant_role=item.servant_role,
            name=item.name,
            email=normalize_key(item.email),
        )
        for position, item in enumerate(items)
    ]
    _flush(session, "replacing servants")
    return service
