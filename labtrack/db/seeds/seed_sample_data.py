"""Seed a sample region/school/location hierarchy with devices."""

import logging

from sqlalchemy.orm import Session

from labtrack.models.device import Device, DeviceStatus, DeviceType
from labtrack.models.location import Location
from labtrack.models.region import Region
from labtrack.models.school import School

logger = logging.getLogger("labtrack.seed")

SAMPLE_HIERARCHY = {
    "North Region": {
        "Lincoln High School": ["Computer Lab A", "Computer Lab B"],
        "Washington Middle School": ["Science Lab"],
    },
    "South Region": {
        "Jefferson Elementary": ["Media Center"],
    },
}


def seed_sample_data(db: Session) -> None:
    """Insert the sample hierarchy. Skipped when any region already exists."""
    if db.query(Region).first():
        logger.info("ℹ️  Regions already present, skipping sample data.")
        return

    device_count = 0
    for region_name, schools in SAMPLE_HIERARCHY.items():
        region = Region(name=region_name, description=f"{region_name} schools")
        db.add(region)
        db.flush()
        for school_name, labs in schools.items():
            school = School(name=school_name, address=f"1 {school_name} Way", region_id=region.id)
            db.add(school)
            db.flush()
            for lab_name in labs:
                location = Location(name=lab_name, school_id=school.id, floor=1)
                db.add(location)
                db.flush()
                for n in range(1, 5):
                    db.add(Device(
                        name=f"Desktop PC #{n}",
                        device_type=DeviceType.desktop,
                        status=DeviceStatus.active,
                        location_id=location.id,
                        school_id=school.id,
                    ))
                    device_count += 1
                db.add(Device(
                    name=f"CCTV-{location.id:02d}",
                    device_type=DeviceType.cctv,
                    status=DeviceStatus.active,
                    location_id=location.id,
                    school_id=school.id,
                ))
                device_count += 1

    db.commit()
    logger.info("✅ Seeded %d regions and %d devices", len(SAMPLE_HIERARCHY), device_count)
