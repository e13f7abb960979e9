"""Demo data: one department with the sample store layout and three workers.

Fixed ids make re-seeding an upsert rather than a duplicate.
"""

from __future__ import annotations

import logging

from werkzeug.security import generate_password_hash

from ..departments.model import Department
from ..locations.model import Location
from ..workers.model import Worker

LOGGER = logging.getLogger("cleantrack.seed")

DEMO_DEPARTMENT_ID = "dept-demo"
DEMO_PASSWORD = "demo1234"

SAMPLE_LOCATIONS = (
    ("广场", "Outdoor Square", "Outdoor", 10),
    ("入口（包含购物车购物篮）", "Entrance & Carts", "Entrance", 24),
    ("右边走廊", "Right Corridor", "Sales Floor", 15),
    ("2号台及粮油通道", "Checkout 2 & Grains/Oil", "Sales Floor", 15),
    ("食品区通道", "Food Aisle", "Sales Floor", 15),
    ("3号、4号收银机台", "Checkout 3 & 4", "Front End", 20),
    ("冰品区", "Ice Cream Zone", "Sales Floor", 12),
    ("转盘区走廊", "Turntable Corridor", "Sales Floor", 15),
    ("百货区", "General Merchandise", "Sales Floor", 10),
    ("卫生间", "Restroom", "Facilities", 24),
    ("卫生巾、纸巾、米粉区副通道", "Hygiene & Baby Food Aisle", "Sales Floor", 12),
    ("左边走廊", "Left Corridor", "Sales Floor", 15),
    ("1号台5号台", "Checkout 1 & 5", "Front End", 20),
    ("干货和冻品区主通道（含半圆垃圾桶、果切区）", "Dry/Frozen Main Aisle", "Sales Floor", 18),
    ("蔬果区", "Produce Section", "Fresh", 18),
    ("水产区", "Seafood Section", "Fresh", 20),
    ("肉品区", "Meat Section", "Fresh", 20),
    ("调料区", "Condiments Aisle", "Sales Floor", 12),
    ("熟食烘焙区（含半圆垃圾桶）", "Deli & Bakery", "Fresh", 20),
    ("饮料区", "Beverage Section", "Sales Floor", 15),
)

SAMPLE_WORKERS = ("John Doe", "Jane Smith", "Mike Johnson")


def seed_demo(container) -> Department:
    department = Department(
        department_id=DEMO_DEPARTMENT_ID,
        display_name="Demo Store",
        owner_name="Demo Manager",
        secret_hash=generate_password_hash(DEMO_PASSWORD),
    )
    container.departments_repo.save(department)

    for i, (name_zh, name_en, zone, target) in enumerate(SAMPLE_LOCATIONS, start=1):
        container.locations_repo.save(
            Location(
                location_id=f"loc-demo-{i}",
                department_id=DEMO_DEPARTMENT_ID,
                name_en=name_en,
                name_zh=name_zh,
                zone=zone,
                target_daily_frequency=target,
            )
        )

    for i, name in enumerate(SAMPLE_WORKERS, start=1):
        container.workers_repo.save(
            Worker(
                worker_id=f"w-demo-{i}",
                department_id=DEMO_DEPARTMENT_ID,
                display_name=name,
                secret_hash=generate_password_hash(DEMO_PASSWORD),
                avatar=f"https://i.pravatar.cc/150?img={i}",
            )
        )

    LOGGER.info(
        "Seeded demo department (%d locations, %d workers)",
        len(SAMPLE_LOCATIONS),
        len(SAMPLE_WORKERS),
        extra={"department_id": DEMO_DEPARTMENT_ID},
    )
    return department
