import logging
from datetime import datetime
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session, selectinload

from app.models.church import Church
from app.models.common import ChurchStatus, ServiceStatus
from app.models.service import ChurchService
from app.services.church_directory import get_active_church
from app.services.service_conflicts import overlap_clause
from app.services.time_window import local_day_window, search_window

logger = logging.getLogger(__name__)


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def find_active_churches_by_name(session: Session, name: str) -> List[Church]:
    pattern = f"%{_escape_like(name)}%"
    return (
        session.query(Church)
        .filter(Church.status == ChurchStatus.ACTIVE, Church.name.ilike(pattern, escape="\\"))
        .order_by(Church.name)
        .all()
    )


def search_published_services(
    session: Session,
    name: Optional[str] = None,
    date_from: Optional[datetime] = None,
    date_to: Optional[datetime] = None,
    now: Optional[datetime] = None,
) -> Tuple[List[Church], List[ChurchService]]:
    """
    Find published services in a date window, optionally for churches matching a name.

    Returns the active churches involved and their published services.
    ``name`` is matched as given, so a blank string only matches names
    containing a space; an empty or missing name means no filter. When
    ``name`` matches no active church the result is empty.
    """
    start, end = search_window(date_from, date_to, now=now)

    churches: List[Church] = []
    query = session.query(ChurchService).filter(
        ChurchService.status == ServiceStatus.PUBLISHED,
        overlap_clause(start, end),
    )

    if name:
        churches = find_active_churches_by_name(session, name)
        if not churches:
            return [], []
        query = query.filter(ChurchService.church_code.in_([church.code for church in churches]))

    services = query.order_by(ChurchService.datetime_start).all()

    if not churches and services:
        codes = {service.church_code for service in services}
        churches = (
            session.query(Church)
            .filter(Church.status == ChurchStatus.ACTIVE, Church.code.in_(codes))
            .order_by(Church.name)
            .all()
        )

    # Churches may have gone inactive between the two lookups.
    church_codes = {church.code for church in churches}
    services = [service for service in services if service.church_code in church_codes]

    logger.info(
        f"Service search name={name!r} window={start.isoformat()}..{end.isoformat()} "
        f"found {len(churches)} churches, {len(services)} services"
    )
    return churches, services


def todays_services(
    session: Session, church_code: str, now: Optional[datetime] = None
) -> Tuple[Church, List[ChurchService]]:
    """Published services of an active church overlapping the church's local today."""
    church = get_active_church(session, church_code)
    day_start, day_end = local_day_window(church.time_offset, now=now)

    services = (
        session.query(ChurchService)
        .options(
            selectinload(ChurchService.liturgy),
            selectinload(ChurchService.news),
            selectinload(ChurchService.servants),
        )
        .filter(
            ChurchService.church_code == church.code,
            ChurchService.status == ServiceStatus.PUBLISHED,
            overlap_clause(day_start, day_end),
        )
        .order_by(ChurchService.datetime_start)
        .all()
    )
    return church, services
