"""
Overlap detection for services sharing a church location.

Intervals are half-open: ``[start, end)``. Two intervals overlap iff
``a.start < b.end and a.end > b.start``, so a service ending at 10:00 does
not clash with one starting at 10:00.
"""
import logging
from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy import and_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.models.service import ChurchService, NO_OVERLAP_CONSTRAINT, NO_OVERLAP_SQLSTATE

logger = logging.getLogger(__name__)


def overlaps(a_start: datetime, a_end: datetime, b_start: datetime, b_end: datetime) -> bool:
    return a_start < b_end and a_end > b_start


def overlap_clause(start: datetime, end: datetime):
    """SQL form of :func:`overlaps` against the stored service interval."""
    return and_(
        ChurchService.datetime_start < end,
        ChurchService.datetime_end > start,
    )


def is_overlapping(
    session: Session,
    church_code: str,
    location_code: str,
    start: datetime,
    end: datetime,
    exclude_service_id: Optional[UUID] = None,
) -> bool:
    """
    Check whether any service at the church location intersects ``[start, end)``.

    Args:
        church_code: church owning the location
        location_code: the location being booked
        start, end: UTC bounds of the proposed interval
        exclude_service_id: the service being updated, so it does not clash with itself
    """
    query = session.query(ChurchService.id).filter(
        ChurchService.church_code == church_code,
        ChurchService.location_code == location_code,
        overlap_clause(start, end),
    )
    if exclude_service_id is not None:
        query = query.filter(ChurchService.id != exclude_service_id)

    clash = query.first()
    if clash is not None:
        logger.info(
            f"Interval {start.isoformat()} - {end.isoformat()} at {church_code}/{location_code} "
            f"overlaps service {clash.id}"
        )
        return True
    return False


def is_overlap_violation(error: IntegrityError) -> bool:
    """True when a write was rejected by the store-level no-overlap constraint."""
    orig = error.orig
    if getattr(orig, "sqlstate", None) == NO_OVERLAP_SQLSTATE:
        return True
    return NO_OVERLAP_CONSTRAINT in str(orig)
