import re
from datetime import date

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..deps import get_session
from ..infrastructure.repositories import SqlAlchemyBookingRepository
from ..schemas import AvailabilityRead
from ..usecases import availability as availability_usecase

router = APIRouter(prefix="/api/availability", tags=["availability"])

_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def _parse_date(value: str) -> date:
    if not _DATE_RE.match(value):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid date format. Use YYYY-MM-DD")
    try:
        return date.fromisoformat(value)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid calendar date") from exc


@router.get("/{booking_date}", response_model=AvailabilityRead)
async def get_availability(
    booking_date: str,
    session: AsyncSession = Depends(get_session),
) -> AvailabilityRead:
    repo = SqlAlchemyBookingRepository(session)
    view = await availability_usecase.get_availability(repo, booking_date=_parse_date(booking_date))
    return AvailabilityRead.from_view(view)
