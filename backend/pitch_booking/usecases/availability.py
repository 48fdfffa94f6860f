from datetime import date

from ..domain.repositories import BookingRepository
from ..domain.services import AvailabilityView, build_availability
from ..models import BookingStatus


async def get_availability(repo: BookingRepository, *, booking_date: date) -> AvailabilityView:
    """Approved slots followed by advisory pending ones; declined bookings are left out."""
    approved = await repo.list_approved(booking_date)
    pending = await repo.list_by_status(booking_date, BookingStatus.PENDING)
    return build_availability(booking_date, approved, pending)
