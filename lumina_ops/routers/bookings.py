"""
Bookings API - read-only view plus ingestion from the booking source
"""
from fastapi import APIRouter, Depends, Query
from typing import List, Optional

from ..models.user import User
from ..schemas.booking import BookingImport, BookingImportResult, BookingResponse
from ..services.access_policy import has_permission
from ..services.job_lifecycle import JobLifecycleService
from ..store import OperationsStore
from ..utils.dependencies import get_job_service, get_store, require_admin, require_capability
from ..utils.logging_config import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/api/bookings", tags=["Bookings"])


@router.get("", response_model=List[BookingResponse])
@router.get("/", response_model=List[BookingResponse], include_in_schema=False)
def list_bookings(
    property_id: Optional[str] = Query(None),
    current_user: User = Depends(require_capability("view_jobs")),
    store: OperationsStore = Depends(get_store)
):
    show_guest = has_permission(current_user, "view_guest_details")
    bookings = [
        b for b in store.bookings.values()
        if not property_id or b.property_id == property_id
    ]
    bookings.sort(key=lambda b: (b.check_out, b.reference))
    return [BookingResponse.from_booking(b, show_guest) for b in bookings]


@router.post("/import", response_model=BookingImportResult)
def import_bookings(
    data: BookingImport,
    current_user: User = Depends(require_admin),
    store: OperationsStore = Depends(get_store),
    service: JobLifecycleService = Depends(get_job_service)
):
    """
    Accept bookings from the reservation system and schedule one turnover
    job per booking. Bookings that already have a turnover job are skipped;
    a known booking is never overwritten. All references are checked before
    anything is stored.
    """
    for booking in data.bookings:
        store.get_property(booking.property_id)
    service.check_assignees(data.default_assignee_ids)

    created_job_ids = []
    skipped = 0
    for booking in data.bookings:
        if store.job_for_booking(booking.id) is not None:
            skipped += 1
            continue
        if booking.id not in store.bookings:
            store.add_booking(booking)
        job = service.create_turnover_job(booking.id, data.default_assignee_ids)
        created_job_ids.append(job.id)

    logger.info(f"Imported {len(created_job_ids)} bookings, skipped {skipped}")
    return {
        "imported": len(created_job_ids),
        "skipped": skipped,
        "created_job_ids": created_job_ids,
    }
