from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import date

from ..models.booking import Booking


class BookingImport(BaseModel):
    """Batch of reservations pushed by the booking source"""
    bookings: List[Booking]
    default_assignee_ids: List[str] = Field(default_factory=list)


class BookingImportResult(BaseModel):
    imported: int
    skipped: int
    created_job_ids: List[str]


class BookingResponse(BaseModel):
    """Guest name is withheld from roles without view_guest_details"""
    id: str
    property_id: str
    reference: str
    check_in: date
    check_out: date
    guest_name: Optional[str] = None

    @classmethod
    def from_booking(cls, booking: Booking, show_guest: bool) -> "BookingResponse":
        return cls(
            id=booking.id,
            property_id=booking.property_id,
            reference=booking.reference,
            check_in=booking.check_in,
            check_out=booking.check_out,
            guest_name=booking.guest_name if show_guest else None,
        )
