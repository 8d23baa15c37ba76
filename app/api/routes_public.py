"""
Public API routes - no authentication required
"""

from fastapi import APIRouter, Depends
from fastapi.responses import Response
from sqlalchemy.orm import Session

from app.core.db import get_db
from app.schemas.settings import EventSettingsResponse
from app.schemas.table import PublicTable
from app.services.qr_service import QRService
from app.services.repositories import SettingsRepo
from app.services.seating_service import SeatingService
from app.utils.responses import success_response

router = APIRouter()

@router.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "ok"}

@router.get("/settings")
async def get_settings(db: Session = Depends(get_db)):
    """Event name and home page text (defaults are created on first read)"""
    event_settings = SettingsRepo.get_or_create(db)
    return success_response(
        message="Settings retrieved successfully",
        data=EventSettingsResponse.model_validate(event_settings).model_dump()
    )

@router.get("/tables")
async def get_public_tables(db: Session = Depends(get_db)):
    """Table layout for the portal map, without guest details"""
    tables = [
        PublicTable(**table.model_dump(exclude={"guests", "seats_available", "is_full"}))
        for table in SeatingService.list_tables_with_guests(db)
    ]
    return success_response(
        message="Tables retrieved successfully",
        data={"tables": [table.model_dump() for table in tables]}
    )

@router.get("/portal/qr.png")
async def get_portal_qr():
    """QR code linking to the guest portal"""
    return Response(
        content=QRService.generate_portal_qr(),
        media_type="image/png",
        headers={"Content-Disposition": "inline; filename=guest_portal_qr.png"}
    )
