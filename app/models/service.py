from datetime import datetime
import uuid
from sqlalchemy import (
    DDL, UUID, CheckConstraint, Column, DateTime, ForeignKey, Index, Integer, String, Text, event, func,
)
from sqlalchemy.orm import relationship as db_relationship
from app.core.database import Base
from app.models.common import ServiceStatus


# Exclusion constraint backing the no-overlap rule: rejects a second service at the
# same church location whose [start, end) range intersects an existing one.
NO_OVERLAP_CONSTRAINT = "ex_church_services_no_overlap"
NO_OVERLAP_SQLSTATE = "23P01"


class ChurchService(Base):
    """
    A scheduled church service at one location of one church.

    ``church_code`` is a weak reference to ``churches.code``; it is not a
    foreign key. ``location_code`` and ``location_name`` are copies of the
    church location taken when the service is written and are not refreshed
    when the location is later edited.
    """
    __tablename__ = "church_services"
    __table_args__ = (
        CheckConstraint("datetime_start < datetime_end", name="ck_church_services_interval"),
        Index("ix_church_services_schedule", "church_code", "location_code", "datetime_start"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, index=True, default=uuid.uuid4)
    church_code = Column(String, nullable=False, index=True)
    title = Column(String, nullable=True)
    status = Column(Integer, nullable=False, default=ServiceStatus.PENDING_PUBLISH.value, index=True)
    datetime_start = Column(DateTime(timezone=True), nullable=False)
    datetime_end = Column(DateTime(timezone=True), nullable=False)
    location_code = Column(String, nullable=False)
    location_name = Column(String, nullable=False)
    reflection = Column(Text, nullable=True)
    remarks = Column(Text, nullable=True)

    # Relationships
    liturgy = db_relationship(
        "LiturgyItem",
        order_by="LiturgyItem.position",
        cascade="all, delete-orphan",
        back_populates="service",
    )
    news = db_relationship(
        "NewsItem",
        order_by="NewsItem.position",
        cascade="all, delete-orphan",
        back_populates="service",
    )
    servants = db_relationship(
        "ServantAssignment",
        order_by="ServantAssignment.position",
        cascade="all, delete-orphan",
        back_populates="service",
    )

    # Timestamps
    created_at = Column(DateTime(timezone=True), nullable=False, default=datetime.utcnow, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, default=datetime.utcnow, server_default=func.now(), onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<ChurchService {self.church_code}/{self.location_code} {self.datetime_start}>"


class LiturgyItem(Base):
    __tablename__ = "service_liturgy"

    id = Column(Integer, primary_key=True, index=True)
    service_id = Column(UUID(as_uuid=True), ForeignKey("church_services.id", ondelete="CASCADE"), nullable=False, index=True)
    position = Column(Integer, nullable=False)
    title = Column(String, nullable=False)
    title_link = Column(String, nullable=False, default="")
    content = Column(Text, nullable=False, default="")
    content_link = Column(String, nullable=False, default="")

    service = db_relationship("ChurchService", back_populates="liturgy")


class NewsItem(Base):
    __tablename__ = "service_news"

    id = Column(Integer, primary_key=True, index=True)
    service_id = Column(UUID(as_uuid=True), ForeignKey("church_services.id", ondelete="CASCADE"), nullable=False, index=True)
    position = Column(Integer, nullable=False)
    title = Column(String, nullable=False)
    content = Column(Text, nullable=False)
    link = Column(String, nullable=False, default="")

    service = db_relationship("ChurchService", back_populates="news")


class ServantAssignment(Base):
    __tablename__ = "service_servants"

    id = Column(Integer, primary_key=True, index=True)
    service_id = Column(UUID(as_uuid=True), ForeignKey("church_services.id", ondelete="CASCADE"), nullable=False, index=True)
    position = Column(Integer, nullable=False)
    service_role = Column(String, nullable=False)
    servant_role = Column(String, nullable=False)
    name = Column(String, nullable=False)
    email = Column(String, nullable=False)

    service = db_relationship("ChurchService", back_populates="servants")


# PostgreSQL only; other dialects rely on the application check alone.
event.listen(
    ChurchService.__table__,
    "after_create",
    DDL("CREATE EXTENSION IF NOT EXISTS btree_gist").execute_if(dialect="postgresql"),
)
event.listen(
    ChurchService.__table__,
    "after_create",
    DDL(
        f"ALTER TABLE church_services ADD CONSTRAINT {NO_OVERLAP_CONSTRAINT} "
        "EXCLUDE USING gist ("
        "church_code WITH =, "
        "location_code WITH =, "
        "tstzrange(datetime_start, datetime_end, '[)') WITH &&)"
    ).execute_if(dialect="postgresql"),
)
