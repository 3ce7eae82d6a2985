import logging
from typing import Any

from fastapi import APIRouter, status

from app.api.deps import SessionDep, CurrentEmail
from app.schemas.church import (
    ChurchDetail,
    ChurchHeader,
    ChurchRegister,
    ChurchSummary,
    ChurchUpdate,
    ChurchWithAdmins,
    LocationRead,
    ServantRead,
)
from app.schemas.common import APIResponse
from app.services import church_roster
from app.services.church_directory import require_church_admin

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/register", response_model=APIResponse, status_code=status.HTTP_201_CREATED)
async def register_church(
    *,
    session: SessionDep,
    current_email: CurrentEmail,
    church_in: ChurchRegister,
) -> Any:
    """
    Register a new church. The caller becomes its first admin.
    """
    church = church_roster.register_church(session, current_email, church_in)
    session.commit()

    return APIResponse(
        message="Church registered successfully",
        data=ChurchHeader.model_validate(church),
    )


@router.patch("/update/{church_code}", response_model=APIResponse)
async def update_church(
    *,
    session: SessionDep,
    current_email: CurrentEmail,
    church_code: str,
    church_update: ChurchUpdate,
) -> Any:
    """
    Update name, address, time offset and admins of a church.

    Allowed for any admin, including while the church is pending or inactive.
    The admin set becomes the caller plus the listed admins.
    """
    church = church_roster.update_church(session, church_code, current_email, church_update)
    session.commit()

    return APIResponse(
        message="Church updated successfully",
        data=ChurchWithAdmins(
            **ChurchHeader.model_validate(church).model_dump(),
            admins=sorted(church.admin_emails),
        ),
    )


@router.get("", response_model=APIResponse)
async def read_my_churches(
    *,
    session: SessionDep,
    current_email: CurrentEmail,
) -> Any:
    """
    List the churches administered by the caller.
    """
    churches = church_roster.list_admin_churches(session, current_email)
    return APIResponse(
        message=f"Retrieved {len(churches)} churches",
        data=[ChurchSummary.model_validate(church) for church in churches],
    )


@router.get("/detail/{church_code}", response_model=APIResponse)
async def read_church_detail(
    *,
    session: SessionDep,
    current_email: CurrentEmail,
    church_code: str,
) -> Any:
    church = require_church_admin(session, church_code, current_email)

    detail = ChurchDetail(
        **ChurchSummary.model_validate(church).model_dump(),
        admins=sorted(church.admin_emails - {current_email}),
        servants=[ServantRead.model_validate(s) for s in church.servants],
        locations=[LocationRead.model_validate(l) for l in church.locations],
    )
    return APIResponse(message="Church retrieved successfully", data=detail)


@router.patch("/reactivate/{church_code}", response_model=APIResponse)
async def reactivate_church(
    *,
    session: SessionDep,
    current_email: CurrentEmail,
    church_code: str,
) -> Any:
    church_roster.reactivate_church(session, church_code, current_email)
    session.commit()
    return APIResponse(message="Church reactivated", data=None)


@router.delete("/inactivate/{church_code}", response_model=APIResponse)
async def inactivate_church(
    *,
    session: SessionDep,
    current_email: CurrentEmail,
    church_code: str,
) -> Any:
    church_roster.inactivate_church(session, church_code, current_email)
    session.commit()
    return APIResponse(message="Church inactivated", data=None)
