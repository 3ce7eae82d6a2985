from typing import List, Optional
from pydantic import BaseModel, ConfigDict, EmailStr, Field

from app.models.common import ChurchStatus, RecordStatus

# Church Schemas
class ChurchRegister(BaseModel):
    code: Optional[str] = None
    name: Optional[str] = None
    address: Optional[str] = None
    time_offset: Optional[int] = Field(None, ge=-720, le=840, description="Minutes from UTC")
    admins: List[str] = []

class ChurchUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: Optional[str] = None
    address: Optional[str] = None
    time_offset: Optional[int] = Field(None, ge=-720, le=840, description="Minutes from UTC")
    admins: List[str] = []

class ChurchHeader(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    code: str
    name: str
    address: Optional[str] = None
    time_offset: int

class ChurchSummary(ChurchHeader):
    status: ChurchStatus

class ChurchWithAdmins(ChurchHeader):
    admins: List[str] = []

# Roster Schemas
class ServantRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    email: str
    name: str
    role: Optional[str] = None
    status: RecordStatus

class LocationRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    code: str
    location: str
    status: RecordStatus

class ChurchDetail(ChurchSummary):
    admins: List[str] = []
    servants: List[ServantRead] = []
    locations: List[LocationRead] = []

class ServantCreate(BaseModel):
    email: EmailStr
    name: str = Field(..., min_length=1)
    role: Optional[str] = None

class ServantUpdate(BaseModel):
    email: EmailStr
    name: str = Field(..., min_length=1)
    role: Optional[str] = None

class ServantKey(BaseModel):
    email: EmailStr

class ChurchServants(BaseModel):
    church_code: str
    servants: List[ServantRead]

class LocationCreate(BaseModel):
    code: str = Field(..., min_length=1)
    location: str = Field(..., min_length=1)

class LocationKey(BaseModel):
    code: str = Field(..., min_length=1)

class ChurchLocations(BaseModel):
    church_code: str
    locations: List[LocationRead]

class AdminKey(BaseModel):
    admin_email: EmailStr
