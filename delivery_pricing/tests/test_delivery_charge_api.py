"""
Integration tests for the delivery charge endpoints.

Rules are written to the SQLite test database and priced through the
HTTP surface with the SQL repository.
"""

import pytest
from datetime import date, datetime, time

from delivery_pricing.app.main import app
from delivery_pricing.app.api.v1.endpoints.delivery_charge import get_fare_calculator
from delivery_pricing.app.db.inmemory import InMemoryPricingRuleRepository
from delivery_pricing.app.domain.pricing.fare_calculator import FareCalculator
from delivery_pricing.app.models.area_zone import AreaZone, SurgePricingAreaZone
from delivery_pricing.app.models.distance_bracket import DistanceBracket
from delivery_pricing.app.models.holiday import Holiday
from delivery_pricing.app.models.holiday_surcharge import HolidaySurcharge
from delivery_pricing.app.models.peak_hour import PeakHour
from delivery_pricing.app.models.pricing_enums import DayOfWeek
from delivery_pricing.app.models.surge_pricing import SurgePricing

URL = "/calculate-delivery-charge"
TENANT = "9f1c2d3e-0000-4000-8000-000000000001"


@pytest.fixture
async def base_brackets(db_session):
    """Global ladder: [0, 10) -> 50, [10, inf) -> 80."""
    db_session.add_all([
        DistanceBracket(min_km=0, max_km=10, flat_fare=50, is_active=True),
        DistanceBracket(min_km=10, max_km=None, flat_fare=80, is_active=True),
    ])
    await db_session.commit()


@pytest.fixture
def failing_calculator():
    """Calculator whose repository raises a non-lookup error."""
    class BrokenRepository(InMemoryPricingRuleRepository):
        async def find_holiday(self, day, tenant_id):
            raise RuntimeError("relation \"holidays\" does not exist")

    app.dependency_overrides[get_fare_calculator] = lambda: FareCalculator(
        BrokenRepository(), fallback_rate_per_km=10.0, timezone_name="UTC"
    )
    yield
    app.dependency_overrides.pop(get_fare_calculator, None)


# TEST 1: Base fare
@pytest.mark.asyncio
async def test_charge_from_bracket(client, base_brackets):
    response = await client.post(URL, json={"distanceKm": 5, "timestamp": "2024-01-03T10:00:00Z"})

    assert response.status_code == 200
    assert response.json() == {"charge": 50.0}


@pytest.mark.asyncio
async def test_snake_case_body_accepted(client, base_brackets):
    response = await client.post(URL, json={"distance_km": 12, "timestamp": "2024-01-03T10:00:00Z"})

    assert response.status_code == 200
    assert response.json() == {"charge": 80.0}


@pytest.mark.asyncio
async def test_bracket_upper_bound_exclusive(client, base_brackets):
    response = await client.post(URL, json={"distanceKm": 10, "timestamp": "2024-01-03T10:00:00Z"})

    assert response.status_code == 200
    assert response.json()["charge"] == 80.0


@pytest.mark.asyncio
async def test_fallback_rate_without_brackets(client):
    response = await client.post(URL, json={"distanceKm": 4.25, "timestamp": "2024-01-03T10:00:00Z"})

    assert response.status_code == 200
    assert response.json()["charge"] == 42.5


@pytest.mark.asyncio
async def test_timestamp_defaults_to_now(client, base_brackets):
    response = await client.post(URL, json={"distanceKm": 5})

    assert response.status_code == 200
    assert response.json()["charge"] >= 50.0


# TEST 2: Holiday surcharge
@pytest.mark.asyncio
async def test_global_holiday_surcharge(client, db_session, base_brackets):
    holiday = Holiday(holiday_name="Republic Day", date=date(2024, 1, 26), is_active=True)
    db_session.add(holiday)
    await db_session.flush()
    db_session.add(HolidaySurcharge(holiday_id=holiday.id, extra_flat=10, multiplier=1.0))
    await db_session.commit()

    response = await client.post(URL, json={"distanceKm": 5, "timestamp": "2024-01-26T10:00:00Z"})

    assert response.status_code == 200
    assert response.json()["charge"] == 60.0


@pytest.mark.asyncio
async def test_tenant_holiday_surcharge_wins(client, db_session):
    db_session.add(DistanceBracket(min_km=0, max_km=10, flat_fare=100, tenant_id=TENANT, is_active=True))
    holiday = Holiday(holiday_name="Republic Day", date=date(2024, 1, 26), is_active=True)
    db_session.add(holiday)
    await db_session.flush()
    db_session.add_all([
        HolidaySurcharge(holiday_id=holiday.id, extra_flat=50, multiplier=2.0),
        HolidaySurcharge(holiday_id=holiday.id, extra_flat=20, multiplier=1.5, tenant_id=TENANT),
    ])
    await db_session.commit()

    response = await client.post(
        URL, json={"distanceKm": 5, "timestamp": "2024-01-26T10:00:00Z", "tenantId": TENANT}
    )

    assert response.status_code == 200
    assert response.json()["charge"] == 180.0


# TEST 3: Peak hours
@pytest.mark.asyncio
@pytest.mark.parametrize("ts", ["2024-01-03T12:00:00Z", "2024-01-03T14:00:00Z"])
async def test_peak_hour_bounds_inclusive(client, db_session, ts):
    db_session.add(PeakHour(
        day_of_week=DayOfWeek.WEDNESDAY, start_time=time(12, 0), end_time=time(14, 0),
        multiplier=1.2, is_active=True
    ))
    await db_session.commit()

    response = await client.post(URL, json={"distanceKm": 3, "timestamp": ts})

    assert response.status_code == 200
    assert response.json()["charge"] == 36.0


@pytest.mark.asyncio
async def test_peak_hour_other_day_ignored(client, db_session):
    db_session.add(PeakHour(
        day_of_week=DayOfWeek.MONDAY, start_time=time(12, 0), end_time=time(14, 0),
        multiplier=1.2, is_active=True
    ))
    await db_session.commit()

    response = await client.post(URL, json={"distanceKm": 3, "timestamp": "2024-01-03T13:00:00Z"})

    assert response.json()["charge"] == 30.0


@pytest.mark.asyncio
async def test_tenant_peak_without_uplift_uses_global_peak(client, db_session):
    db_session.add_all([
        DistanceBracket(min_km=0, max_km=10, flat_fare=100, tenant_id=TENANT, is_active=True),
        PeakHour(
            day_of_week=DayOfWeek.WEDNESDAY, start_time=time(9, 0), end_time=time(11, 0),
            multiplier=1.5, is_active=True
        ),
        PeakHour(
            day_of_week=DayOfWeek.WEDNESDAY, start_time=time(9, 0), end_time=time(11, 0),
            multiplier=1.0, tenant_id=TENANT, is_active=True
        ),
    ])
    await db_session.commit()

    response = await client.post(
        URL, json={"distanceKm": 5, "timestamp": "2024-01-03T10:00:00Z", "tenantId": TENANT}
    )

    assert response.json()["charge"] == 150.0


# TEST 4: Surge pricing
@pytest.mark.asyncio
async def test_surge_applies_with_and_without_zones(client, db_session, base_brackets):
    zone = AreaZone(name="Old Town", latitude=12.97, longitude=77.59, price=0, is_active=True)
    surge = SurgePricing(
        reason="Festival rush",
        start_time=datetime.fromisoformat("2024-01-03T00:00:00+00:00"),
        end_time=datetime.fromisoformat("2024-01-03T23:00:00+00:00"),
        extra_charge_amount=12.5,
        is_active=True,
    )
    db_session.add_all([zone, surge])
    await db_session.flush()
    db_session.add(SurgePricingAreaZone(surge_pricing_id=surge.id, area_zone_id=zone.id))
    await db_session.commit()

    response = await client.post(
        f"{URL}/breakdown", json={"distanceKm": 5, "timestamp": "2024-01-03T10:00:00Z"}
    )

    assert response.status_code == 200
    data = response.json()
    assert data["charge"] == 62.5
    assert data["breakdown"]["surge_pricing_id"] == surge.id
    assert data["breakdown"]["surge_zone_count"] == 1


@pytest.mark.asyncio
async def test_tenant_surge_short_circuits_global(client, db_session):
    window = {
        "start_time": datetime.fromisoformat("2024-01-03T00:00:00+00:00"),
        "end_time": datetime.fromisoformat("2024-01-03T23:00:00+00:00"),
        "is_active": True,
    }
    db_session.add_all([
        SurgePricing(reason="Global", extra_charge_amount=40, **window),
        SurgePricing(reason="Tenant", extra_charge_amount=5, tenant_id=TENANT, **window),
    ])
    await db_session.commit()

    response = await client.post(
        URL, json={"distanceKm": 2, "timestamp": "2024-01-03T10:00:00Z", "tenantId": TENANT}
    )

    assert response.json()["charge"] == 25.0


# TEST 5: Breakdown
@pytest.mark.asyncio
async def test_breakdown_reports_applied_rules(client, db_session, base_brackets):
    holiday = Holiday(holiday_name="Republic Day", date=date(2024, 1, 26), is_active=True)
    db_session.add(holiday)
    db_session.add(PeakHour(
        day_of_week=DayOfWeek.FRIDAY, start_time=time(9, 0), end_time=time(11, 0),
        multiplier=1.2, is_active=True
    ))
    await db_session.flush()
    db_session.add(HolidaySurcharge(holiday_id=holiday.id, extra_flat=20, multiplier=1.5))
    await db_session.commit()

    response = await client.post(
        f"{URL}/breakdown", json={"distanceKm": 5, "timestamp": "2024-01-26T10:00:00Z"}
    )

    assert response.status_code == 200
    data = response.json()
    breakdown = data["breakdown"]
    assert data["charge"] == 126.0
    assert breakdown["base_fare"] == 50.0
    assert breakdown["used_fallback_rate"] is False
    assert breakdown["holiday_id"] == holiday.id
    assert breakdown["holiday_extra_flat"] == 20.0
    assert breakdown["holiday_multiplier"] == 1.5
    assert breakdown["peak_multiplier"] == 1.2
    assert breakdown["surge_pricing_id"] is None
    assert breakdown["failed_stages"] == []


# TEST 6: Error responses
@pytest.mark.asyncio
@pytest.mark.parametrize("body", [
    {"distanceKm": 0},
    {"distanceKm": -3},
    {"distanceKm": "5"},
    {"distanceKm": 1e308},
    {},
])
async def test_invalid_distance_returns_400(client, body):
    response = await client.post(URL, json=body)

    assert response.status_code == 400
    assert response.json()["error"] == "Invalid distance parameter"


@pytest.mark.asyncio
async def test_invalid_timestamp_returns_400(client):
    response = await client.post(URL, json={"distanceKm": 5, "timestamp": "yesterday"})

    assert response.status_code == 400
    assert response.json()["error"] == "Invalid timestamp"


@pytest.mark.asyncio
async def test_unexpected_failure_returns_500(client, failing_calculator):
    response = await client.post(URL, json={"distanceKm": 5, "timestamp": "2024-01-03T10:00:00Z"})

    assert response.status_code == 500
    data = response.json()
    assert data["error"] == "Failed to calculate delivery charge"
    assert "holidays" in data["details"]


# TEST 7: Ambient endpoints
@pytest.mark.asyncio
async def test_health_check(client):
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


@pytest.mark.asyncio
async def test_correlation_id_echoed(client):
    response = await client.post(
        URL, json={"distanceKm": 1}, headers={"X-Correlation-ID": "req-123"}
    )

    assert response.headers["X-Correlation-ID"] == "req-123"
    assert "X-Process-Time" in response.headers
