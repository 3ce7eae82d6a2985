from datetime import datetime
from sqlalchemy import Column, ForeignKey, Integer, DateTime, String, Text, UniqueConstraint, func, event
from sqlalchemy.orm import relationship as db_relationship
from app.core.database import Base
from app.models.common import ChurchStatus, RecordStatus


class Church(Base):
    __tablename__ = "churches"

    id = Column(Integer, primary_key=True, index=True)
    code = Column(String, unique=True, index=True, nullable=False)
    name = Column(String, unique=True, nullable=False)
    address = Column(Text, nullable=True)
    # minutes from UTC, fixed (no daylight saving)
    time_offset = Column(Integer, nullable=False, default=0)
    status = Column(Integer, nullable=False, default=ChurchStatus.PENDING.value)

    # Relationships
    admins = db_relationship(
        "ChurchAdmin",
        back_populates="church",
        collection_class=set,
        cascade="all, delete-orphan",
    )
    servants = db_relationship(
        "ChurchServant",
        back_populates="church",
        order_by="ChurchServant.id",
        cascade="all, delete-orphan",
    )
    locations = db_relationship(
        "ChurchLocation",
        back_populates="church",
        order_by="ChurchLocation.id",
        cascade="all, delete-orphan",
    )

    # Timestamps
    created_at = Column(DateTime(timezone=True), nullable=False, default=datetime.utcnow, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, default=datetime.utcnow, server_default=func.now(), onupdate=datetime.utcnow)

    @property
    def admin_emails(self) -> set:
        return {admin.email for admin in self.admins}

    @property
    def is_available(self) -> bool:
        return self.status == ChurchStatus.ACTIVE

    def __repr__(self):
        return f"<Church {self.code}>"


class ChurchAdmin(Base):
    __tablename__ = "church_admins"
    __table_args__ = (
        UniqueConstraint("church_id", "email", name="uq_church_admins_church_email"),
    )

    id = Column(Integer, primary_key=True, index=True)
    church_id = Column(Integer, ForeignKey("churches.id", ondelete="CASCADE"), nullable=False, index=True)
    email = Column(String, nullable=False, index=True)

    church = db_relationship("Church", back_populates="admins")

    created_at = Column(DateTime(timezone=True), nullable=False, default=datetime.utcnow, server_default=func.now())


class ChurchServant(Base):
    __tablename__ = "church_servants"
    __table_args__ = (
        UniqueConstraint("church_id", "email", name="uq_church_servants_church_email"),
    )

    id = Column(Integer, primary_key=True, index=True)
    church_id = Column(Integer, ForeignKey("churches.id", ondelete="CASCADE"), nullable=False, index=True)
    email = Column(String, nullable=False)
    name = Column(String, nullable=False)
    role = Column(String, nullable=True)
    status = Column(Integer, nullable=False, default=RecordStatus.ACTIVE.value)

    church = db_relationship("Church", back_populates="servants")

    created_at = Column(DateTime(timezone=True), nullable=False, default=datetime.utcnow, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, default=datetime.utcnow, server_default=func.now(), onupdate=datetime.utcnow)


class ChurchLocation(Base):
    __tablename__ = "church_locations"
    __table_args__ = (
        UniqueConstraint("church_id", "code", name="uq_church_locations_church_code"),
    )

    id = Column(Integer, primary_key=True, index=True)
    church_id = Column(Integer, ForeignKey("churches.id", ondelete="CASCADE"), nullable=False, index=True)
    code = Column(String, nullable=False)
    location = Column(String, nullable=False)
    status = Column(Integer, nullable=False, default=RecordStatus.ACTIVE.value)

    church = db_relationship("Church", back_populates="locations")

    created_at = Column(DateTime(timezone=True), nullable=False, default=datetime.utcnow, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, default=datetime.utcnow, server_default=func.now(), onupdate=datetime.utcnow)


@event.listens_for(ChurchAdmin.email, "set", retval=True)
@event.listens_for(ChurchServant.email, "set", retval=True)
@event.listens_for(ChurchLocation.code, "set", retval=True)
@event.listens_for(Church.code, "set", retval=True)
def normalize_identifier(target, value, oldvalue, initiator):
    if isinstance(value, str):
        return value.strip().lower()
    return value
