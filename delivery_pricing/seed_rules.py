"""
Database seeding script for global pricing rules.

Creates a distance bracket ladder, weekday peak hours and a sample holiday
for local development. Run it after the rule tables exist
(``DB_CREATE_TABLES=true`` on first start).
"""

import asyncio
from datetime import date, time

from sqlalchemy import select

from delivery_pricing.app.db.session import AsyncSessionLocal
from delivery_pricing.app.models.distance_bracket import DistanceBracket
from delivery_pricing.app.models.holiday import Holiday
from delivery_pricing.app.models.holiday_surcharge import HolidaySurcharge
from delivery_pricing.app.models.peak_hour import PeakHour
from delivery_pricing.app.models.pricing_enums import DayOfWeek

BRACKETS = [
    (0.0, 3.0, 30.0),
    (3.0, 7.0, 50.0),
    (7.0, 12.0, 80.0),
    (12.0, None, 120.0),
]

WEEKDAYS = [DayOfWeek.MONDAY, DayOfWeek.TUESDAY, DayOfWeek.WEDNESDAY, DayOfWeek.THURSDAY, DayOfWeek.FRIDAY]


async def seed_rules():
    """
    Seed global pricing rules.

    Creates:
    - 4 global distance brackets (unbounded above 12 km)
    - Lunch and dinner peak hours on weekdays
    - New Year's Day holiday with a flat surcharge
    """
    async with AsyncSessionLocal() as db:
        print("Seeding pricing rules...")

        result = await db.execute(
            select(DistanceBracket).where(DistanceBracket.tenant_id.is_(None))
        )
        if result.scalars().first():
            print("Global distance brackets already exist, skipping seeding")
            return

        for min_km, max_km, fare in BRACKETS:
            db.add(DistanceBracket(min_km=min_km, max_km=max_km, flat_fare=fare, is_active=True))

        for day in WEEKDAYS:
            db.add(PeakHour(day_of_week=day, start_time=time(12, 0), end_time=time(14, 0), multiplier=1.2, is_active=True))
            db.add(PeakHour(day_of_week=day, start_time=time(19, 0), end_time=time(22, 0), multiplier=1.3, is_active=True))

        new_year = Holiday(holiday_name="New Year's Day", date=date(date.today().year + 1, 1, 1), is_active=True)
        db.add(new_year)
        await db.flush()
        db.add(HolidaySurcharge(holiday_id=new_year.id, extra_flat=15.0, multiplier=1.0))

        await db.commit()

        print(f"Created {len(BRACKETS)} distance brackets")
        print(f"Created {len(WEEKDAYS) * 2} peak hours")
        print(f"Created holiday {new_year.holiday_name} on {new_year.date}")


if __name__ == "__main__":
    asyncio.run(seed_rules())
