import logging
from typing import Any

from fastapi import APIRouter

from app.api.deps import SessionDep, CurrentEmail
from app.models.common import RecordStatus
from app.schemas.church import (
    AdminKey,
    ChurchLocations,
    ChurchServants,
    LocationCreate,
    LocationKey,
    LocationRead,
    ServantCreate,
    ServantKey,
    ServantRead,
    ServantUpdate,
)
from app.schemas.common import APIResponse
from app.services import church_roster
from app.services.church_directory import normalize_key

logger = logging.getLogger(__name__)

router = APIRouter()


# Servants
@router.post("/servants/{church_code}", response_model=APIResponse)
async def add_servant(
    *, session: SessionDep, current_email: CurrentEmail, church_code: str, servant: ServantCreate
) -> Any:
    created = church_roster.add_servant(session, church_code, current_email, servant)
    session.commit()
    return APIResponse(message="Servant added", data=ServantRead.model_validate(created))


@router.patch("/servants/{church_code}", response_model=APIResponse)
async def update_servant(
    *, session: SessionDep, current_email: CurrentEmail, church_code: str, servant: ServantUpdate
) -> Any:
    updated = church_roster.update_servant(session, church_code, current_email, servant)
    session.commit()
    return APIResponse(message="Servant updated", data=ServantRead.model_validate(updated))


@router.patch("/servants/reactivate/{church_code}", response_model=APIResponse)
async def reactivate_servant(
    *, session: SessionDep, current_email: CurrentEmail, church_code: str, servant: ServantKey
) -> Any:
    church_roster.set_servant_status(session, church_code, current_email, servant.email, RecordStatus.ACTIVE)
    session.commit()
    return APIResponse(message="Servant reactivated", data=None)


@router.delete("/servants/{church_code}", response_model=APIResponse)
async def inactivate_servant(
    *, session: SessionDep, current_email: CurrentEmail, church_code: str, servant: ServantKey
) -> Any:
    church_roster.set_servant_status(session, church_code, current_email, servant.email, RecordStatus.INACTIVE)
    session.commit()
    return APIResponse(message="Servant inactivated", data=None)


@router.get("/servants/{church_code}", response_model=APIResponse)
async def read_servants(*, session: SessionDep, current_email: CurrentEmail, church_code: str) -> Any:
    servants = church_roster.active_servants(session, church_code, current_email)
    return APIResponse(
        message=f"Retrieved {len(servants)} servants",
        data=ChurchServants(church_code=normalize_key(church_code), servants=[ServantRead.model_validate(s) for s in servants]),
    )


# Locations
@router.post("/locations/{church_code}", response_model=APIResponse)
async def add_location(
    *, session: SessionDep, current_email: CurrentEmail, church_code: str, location: LocationCreate
) -> Any:
    created = church_roster.add_location(session, church_code, current_email, location)
    session.commit()
    return APIResponse(message="Location added", data=LocationRead.model_validate(created))


@router.patch("/locations/{church_code}", response_model=APIResponse)
async def update_location(
    *, session: SessionDep, current_email: CurrentEmail, church_code: str, location: LocationCreate
) -> Any:
    updated = church_roster.update_location(session, church_code, current_email, location)
    session.commit()
    return APIResponse(message="Location updated", data=LocationRead.model_validate(updated))


@router.patch("/locations/reactivate/{church_code}", response_model=APIResponse)
async def reactivate_location(
    *, session: SessionDep, current_email: CurrentEmail, church_code: str, location: LocationKey
) -> Any:
    church_roster.set_location_status(session, church_code, current_email, location.code, RecordStatus.ACTIVE)
    session.commit()
    return APIResponse(message="Location reactivated", data=None)


@router.delete("/locations/{church_code}", response_model=APIResponse)
async def inactivate_location(
    *, session: SessionDep, current_email: CurrentEmail, church_code: str, location: LocationKey
) -> Any:
    church_roster.set_location_status(session, church_code, current_email, location.code, RecordStatus.INACTIVE)
    session.commit()
    return APIResponse(message="Location inactivated", data=None)


@router.get("/locations/{church_code}", response_model=APIResponse)
async def read_locations(*, session: SessionDep, current_email: CurrentEmail, church_code: str) -> Any:
    locations = church_roster.active_locations(session, church_code, current_email)
    return APIResponse(
        message=f"Retrieved {len(locations)} locations",
        data=ChurchLocations(church_code=normalize_key(church_code), locations=[LocationRead.model_validate(l) for l in locations]),
    )


# Admins
@router.post("/admins/{church_code}", response_model=APIResponse)
async def add_admin(
    *, session: SessionDep, current_email: CurrentEmail, church_code: str, admin: AdminKey
) -> Any:
    church_roster.add_admin(session, church_code, current_email, admin.admin_email)
    session.commit()
    return APIResponse(message="Church admin added", data=None)


@router.delete("/admins/{church_code}", response_model=APIResponse)
async def remove_admin(
    *, session: SessionDep, current_email: CurrentEmail, church_code: str, admin: AdminKey
) -> Any:
    church_roster.remove_admin(session, church_code, current_email, admin.admin_email)
    session.commit()
    return APIResponse(message="Church admin removed", data=None)


@router.get("/admins/{church_code}", response_model=APIResponse)
async def read_admins(*, session: SessionDep, current_email: CurrentEmail, church_code: str) -> Any:
    admins = church_roster.list_admins(session, church_code, current_email)
    return APIResponse(message=f"Retrieved {len(admins)} admins", data=admins)
