from datetime import datetime, timezone
from typing import List, Optional
from uuid import UUID
from pydantic import BaseModel, ConfigDict, EmailStr, field_validator

from app.models.common import ServiceStatus
from app.schemas.church import ChurchHeader

# Service Schemas
class ServiceBase(BaseModel):
    title: Optional[str] = None
    datetime_start: datetime
    datetime_end: datetime
    location_code: Optional[str] = None
    location_name: Optional[str] = None
    reflection: Optional[str] = None
    remarks: Optional[str] = None

class ServiceCreate(ServiceBase):
    pass

class ServiceUpdate(ServiceBase):
    pass

# Sub-resource Schemas. Required fields are optional here so that an empty or
# missing value rejects the whole batch in the lifecycle layer.
class LiturgyItemIn(BaseModel):
    title: Optional[str] = None
    title_link: Optional[str] = None
    content: Optional[str] = None
    content_link: Optional[str] = None

class NewsItemIn(BaseModel):
    title: Optional[str] = None
    content: Optional[str] = None
    link: Optional[str] = None

class ServantAssignmentIn(BaseModel):
    service_role: Optional[str] = None
    servant_role: Optional[str] = None
    name: Optional[str] = None
    email: Optional[EmailStr] = None

class LiturgyItemRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    title: str
    title_link: str = ""
    content: str = ""
    content_link: str = ""

class NewsItemRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    title: str
    content: str
    link: str = ""

class ServantAssignmentRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    service_role: str
    servant_role: str
    name: str
    email: str

class ServiceHeader(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    church_code: str
    title: Optional[str] = None
    status: ServiceStatus
    datetime_start: datetime
    datetime_end: datetime
    location_code: str
    location_name: str
    reflection: Optional[str] = None
    remarks: Optional[str] = None

    @field_validator("datetime_start", "datetime_end")
    @classmethod
    def stored_as_utc(cls, v: datetime) -> datetime:
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v.astimezone(timezone.utc)

class ServiceDetail(ServiceHeader):
    liturgy: List[LiturgyItemRead] = []
    news: List[NewsItemRead] = []
    servants: List[ServantAssignmentRead] = []

# Public event listings
class ServiceEventsResponse(BaseModel):
    churches: List[ChurchHeader]
    services: List[ServiceHeader]

class ChurchTodayResponse(BaseModel):
    churches: ChurchHeader
    services: List[ServiceDetail]
