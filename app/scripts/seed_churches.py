#!/usr/bin/env python3
import logging
from sqlalchemy.exc import IntegrityError
from app.core.config import settings
from app.core.database import db
from app.models.church import Church, ChurchAdmin, ChurchLocation
from app.models.common import ChurchStatus

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

CHURCHES_DATA = [
    {
        "code": "hkbps",
        "name": "HKBP Singapore",
        "address": "8 Short Street Singapore",
        "time_offset": 480,
        "locations": [
            {"code": "main", "location": "Main Hall"},
            {"code": "ruang_utama", "location": "Ruang utama gereja lantai 1"},
        ],
    },
]

def seed_churches():
    """Seed demo churches, each administered by FIRST_ADMIN."""
    if not settings.FIRST_ADMIN:
        logger.error("FIRST_ADMIN is not set. Skipping seed.")
        return

    with db.session() as session:
        logger.info("Seeding churches table...")

        for church_data in CHURCHES_DATA:
            existing = session.query(Church).filter(Church.code == church_data["code"]).first()
            if existing:
                logger.info(f"Church '{church_data['code']}' already exists. Skipping.")
                continue

            try:
                church = Church(
                    code=church_data["code"],
                    name=church_data["name"],
                    address=church_data["address"],
                    time_offset=church_data["time_offset"],
                    status=ChurchStatus.ACTIVE,
                )
                church.admins = {ChurchAdmin(email=settings.FIRST_ADMIN)}
                church.locations = [ChurchLocation(**location) for location in church_data["locations"]]
                session.add(church)
                session.commit()
                logger.info(f"Added church: {church_data['name']}")
            except IntegrityError:
                session.rollback()
                logger.warning(f"Church '{church_data['name']}' already exists. Skipping.")

        logger.info("Church seeding completed.")

if __name__ == "__main__":
    seed_churches()
