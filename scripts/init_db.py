"""Script to initialize the database, optionally with sample doctors."""

import asyncio
import sys
from decimal import Decimal

from sqlalchemy import insert, select

from outpatient.database import engine
from outpatient.models import doctors, metadata

SAMPLE_DOCTORS = [
    {"name": "Dr. Asha Menon", "specialization": "General Medicine", "fee": Decimal("500.00")},
    {"name": "Dr. Vikram Rao", "specialization": "Pediatrics", "fee": Decimal("600.00")},
    {"name": "Dr. Neha Kulkarni", "specialization": "Dermatology", "fee": Decimal("700.00")},
]


async def seed_doctors(conn) -> None:
    """Insert sample doctors when the directory is empty."""
    existing = await conn.execute(select(doctors.c.id).limit(1))
    if existing.first() is not None:
        print("• Doctors already present, skipping seed")
        return

    await conn.execute(
        insert(doctors),
        [
            {
                "name": doctor["name"],
                "specialization": doctor["specialization"],
                "consultation_fee": doctor["fee"],
            }
            for doctor in SAMPLE_DOCTORS
        ],
    )
    print(f"✓ Seeded {len(SAMPLE_DOCTORS)} doctors")


async def init_db(seed: bool = False) -> None:
    """Initialize the database by creating all tables."""
    try:
        async with engine.begin() as conn:
            await conn.run_sync(metadata.create_all)
            print("✓ Database initialized successfully!")

            if seed:
                await seed_doctors(conn)
    finally:
        await engine.dispose()


if __name__ == "__main__":
    asyncio.run(init_db(seed="--seed" in sys.argv[1:]))
