from datetime import date
from typing import cast

import pytest
from pitch_booking.models import BookingStatus, PitchType
from pitch_booking.routers import availability as router
from fastapi import HTTPException
from sqlalchemy.ext.asyncio import AsyncSession


@pytest.mark.asyncio
@pytest.mark.parametrize("raw", ["2025/06/01", "01-06-2025", "tomorrow", "2025-6-1"])
async def test_rejects_malformed_date(raw: str) -> None:
    with pytest.raises(HTTPException) as excinfo:
        await router.get_availability(booking_date=raw, session=cast(AsyncSession, object()))
    assert excinfo.value.status_code == 400


@pytest.mark.asyncio
async def test_rejects_impossible_calendar_date() -> None:
    with pytest.raises(HTTPException) as excinfo:
        await router.get_availability(booking_date="2025-02-30", session=cast(AsyncSession, object()))
    assert excinfo.value.status_code == 400


@pytest.mark.asyncio
async def test_returns_taken_slots_with_counts(monkeypatch: pytest.MonkeyPatch, fake_repo_cls, make_booking) -> None:
    day = date(2025, 6, 2)
    repo = fake_repo_cls(
        [
            make_booking("p", booking_date=day, pitch_type=PitchType.SINGLE_COURT, time_slots=["09:00"]),
            make_booking("d", booking_date=day, status=BookingStatus.DECLINED, time_slots=["10:00"]),
        ]
    )
    monkeypatch.setattr(router, "SqlAlchemyBookingRepository", lambda s: repo)  # type: ignore[assignment]

    result = await router.get_availability(booking_date="2025-06-02", session=cast(AsyncSession, object()))

    body = result.model_dump(mode="json", by_alias=True)
    assert body == {
        "date": "2025-06-02",
        "takenSlots": [{"timeSlot": "09:00", "pitchType": "single_court", "status": "pending"}],
        "approvedBookingsCount": 0,
        "pendingBookingsCount": 1,
    }
