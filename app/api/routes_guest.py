"""
Guest portal API routes - public but rate limited
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.api.ws import websocket_manager
from app.core.config import settings
from app.core.db import get_db
from app.schemas.guest import AddressUpdate, LookupRequest
from app.services.notify_service import SeatingNotifier
from app.services.repositories import GuestRepo, SettingsRepo
from app.services.seating_service import SeatingService
from app.utils.responses import error_response, forbidden_error, success_response
from app.utils.security import enforce_rate_limit

router = APIRouter(dependencies=[Depends(enforce_rate_limit)])

notifier = SeatingNotifier(websocket_manager)

def require_search_enabled(db: Session = Depends(get_db)) -> None:
    if not SettingsRepo.get_or_create(db).search_enabled:
        forbidden_error("Guest search is currently disabled")

@router.get("/search", dependencies=[Depends(require_search_enabled)])
async def search_guests(
    name: str = Query(..., min_length=1),
    db: Session = Depends(get_db)
):
    """Name suggestions for the portal search box"""
    guests = GuestRepo.find_by_name(db, name.strip(), limit=settings.SEARCH_SUGGESTION_LIMIT)
    return success_response(
        message="Suggestions retrieved",
        data={"guests": [{"id": guest.id, "name": guest.name} for guest in guests]}
    )

@router.post("/lookup", dependencies=[Depends(require_search_enabled)])
async def lookup_guest(lookup_data: LookupRequest, db: Session = Depends(get_db)):
    """Look up guest seating information"""
    seating_info = SeatingService.find_guest_seating(db, lookup_data.name.strip())

    if not seating_info:
        return error_response(
            message="Guest not found. Please check your name spelling or contact the organizer.",
            error_code="not_found",
            status_code=404
        )

    return success_response(
        message="Guest information found",
        data=seating_info.model_dump()
    )

@router.put("/{guest_id}/address", dependencies=[Depends(require_search_enabled)])
async def update_address(guest_id: str, address_data: AddressUpdate, db: Session = Depends(get_db)):
    """Let a guest fill in their mailing address"""
    guest = SeatingService.update_guest(db, guest_id, {"address": address_data.address})
    await notifier.broadcast_guest_update(guest)

    return success_response(
        message="Address saved. Thank you!",
        data={"id": guest.id, "name": guest.name, "has_address": bool(guest.address)}
    )

@router.get("/portal")
async def guest_portal(db: Session = Depends(get_db)):
    """Entry point the QR code links to"""
    event_settings = SettingsRepo.get_or_create(db)
    return success_response(
        message="Guest portal access",
        data={
            "event_name": event_settings.event_name,
            "home_page_text": event_settings.home_page_text,
            "search_enabled": event_settings.search_enabled,
            "search_url": "/guest/search",
            "lookup_url": "/guest/lookup",
        }
    )
