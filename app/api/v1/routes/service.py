import logging
from datetime import datetime
from typing import Any, List, Optional
from uuid import UUID

from fastapi import APIRouter, Query, Response, status

from app.api.deps import SessionDep, CurrentEmail
from app.schemas.church import ChurchHeader
from app.schemas.service import (
    ChurchTodayResponse,
    LiturgyItemIn,
    NewsItemIn,
    ServantAssignmentIn,
    ServiceCreate,
    ServiceDetail,
    ServiceEventsResponse,
    ServiceHeader,
    ServiceUpdate,
)
from app.services import service_events, service_lifecycle

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/events", response_model=ServiceEventsResponse)
async def search_service_events(
    *,
    session: SessionDep,
    name: Optional[str] = Query(None, description="Church name, case-insensitive substring"),
    service_datetime_from: Optional[datetime] = Query(None),
    service_datetime_to: Optional[datetime] = Query(None),
) -> Any:
    """
    List published services within a date window (default: the next 30 days).
    """
    churches, services = service_events.search_published_services(
        session,
        name=name,
        date_from=service_datetime_from,
        date_to=service_datetime_to,
    )
    return ServiceEventsResponse(
        churches=[ChurchHeader.model_validate(church) for church in churches],
        services=[ServiceHeader.model_validate(service) for service in services],
    )


@router.get("/events/{church_code}", response_model=ChurchTodayResponse)
async def read_todays_services(*, session: SessionDep, church_code: str) -> Any:
    """
    Published services of one active church happening today in the church's time zone.
    """
    church, services = service_events.todays_services(session, church_code)
    return ChurchTodayResponse(
        churches=ChurchHeader.model_validate(church),
        services=[ServiceDetail.model_validate(service) for service in services],
    )


@router.post("/{church_code}", status_code=status.HTTP_201_CREATED, response_class=Response)
async def create_service(
    *,
    session: SessionDep,
    current_email: CurrentEmail,
    church_code: str,
    service_in: ServiceCreate,
) -> Response:
    """
    Schedule a new service. It starts unpublished.
    """
    service_lifecycle.create_service(session, church_code, current_email, service_in)
    session.commit()
    return Response(status_code=status.HTTP_201_CREATED)


@router.patch("/publish/{service_id}", response_class=Response)
async def publish_service(*, session: SessionDep, current_email: CurrentEmail, service_id: UUID) -> Response:
    service_lifecycle.publish_service(session, service_id, current_email)
    session.commit()
    return Response(status_code=status.HTTP_200_OK)


@router.patch("/{service_id}", response_class=Response)
async def update_service(
    *,
    session: SessionDep,
    current_email: CurrentEmail,
    service_id: UUID,
    service_update: ServiceUpdate,
) -> Response:
    """
    Replace the schedule fields of a service, whatever its status.
    """
    service_lifecycle.update_service(session, service_id, current_email, service_update)
    session.commit()
    return Response(status_code=status.HTTP_200_OK)


@router.post("/liturgy/{service_id}", response_class=Response)
async def replace_liturgy(
    *, session: SessionDep, current_email: CurrentEmail, service_id: UUID, items: List[LiturgyItemIn]
) -> Response:
    service_lifecycle.replace_liturgy(session, service_id, current_email, items)
    session.commit()
    return Response(status_code=status.HTTP_200_OK)


@router.post("/news/{service_id}", response_class=Response)
async def replace_news(
    *, session: SessionDep, current_email: CurrentEmail, service_id: UUID, items: List[NewsItemIn]
) -> Response:
    service_lifecycle.replace_news(session, service_id, current_email, items)
    session.commit()
    return Response(status_code=status.HTTP_200_OK)


@router.post("/servants/{service_id}", response_class=Response)
async def replace_servants(
    *, session: SessionDep, current_email: CurrentEmail, service_id: UUID, items: List[ServantAssignmentIn]
) -> Response:
    service_lifecycle.replace_servants(session, service_id, current_email, items)
    session.commit()
    return Response(status_code=status.HTTP_200_OK)
