"""
Admin API routes - requires authentication
"""

from typing import Optional
from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response
from sqlalchemy.orm import Session

from app.api.ws import websocket_manager
from app.core.db import get_db
from app.core.exceptions import NotFound
from app.schemas.common import Pagination
from app.schemas.guest import AssignRequest, GuestCreate, GuestResponse, GuestUpdate
from app.schemas.layout import LabelResponse, LabelsReplace, ShapeResponse, ShapesReplace
from app.schemas.settings import EventSettingsResponse, EventSettingsUpdate
from app.schemas.table import AutoArrangeRequest, TableCreate, TableRename, TableResponse, TableUpdate
from app.services.allocator import auto_arrange_tables, bulk_auto_assign
from app.services.excel_service import ExcelService
from app.services.notify_service import SeatingNotifier
from app.services.repositories import GuestRepo, LayoutRepo, SettingsRepo
from app.services.seating_service import SeatingService
from app.utils.responses import error_response, success_response
from app.utils.security import verify_admin_token

router = APIRouter(dependencies=[Depends(verify_admin_token)])

notifier = SeatingNotifier(websocket_manager)

def _guest_data(guest) -> dict:
    return GuestResponse.model_validate(guest).model_dump()

def _table_data(table) -> dict:
    return TableResponse.model_validate(table).model_dump()

# -------- Guests --------

@router.get("/guests")
async def list_guests(
    search: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    per_page: int = Query(50, ge=1, le=500),
    db: Session = Depends(get_db)
):
    """Search and list guests"""
    guests = GuestRepo.list_guests(db, search=search)
    total = len(guests)
    offset = (page - 1) * per_page

    return success_response(
        message="Guests retrieved successfully",
        data={
            "guests": [_guest_data(guest) for guest in guests[offset:offset + per_page]],
            "pagination": Pagination.build(page, per_page, total).model_dump()
        }
    )

@router.post("/guests")
async def create_guest(guest_data: GuestCreate, db: Session = Depends(get_db)):
    """Create a guest, optionally seated at a table"""
    guest = SeatingService.create_guest(
        db,
        name=guest_data.name,
        party_size=guest_data.party_size,
        table_id=guest_data.table_id,
        phone_number=guest_data.phone_number,
        address=guest_data.address,
    )
    await notifier.broadcast_guest_update(guest, update_type="guest_created")

    return success_response(message="Guest created successfully", data=_guest_data(guest))

@router.patch("/guests/{guest_id}")
async def update_guest(guest_id: str, guest_update: GuestUpdate, db: Session = Depends(get_db)):
    """Update guest information; seat and party size changes are capacity checked"""
    guest = SeatingService.update_guest(db, guest_id, guest_update.model_dump(exclude_unset=True))
    await notifier.broadcast_guest_update(guest)

    return success_response(message="Guest updated successfully", data=_guest_data(guest))

@router.delete("/guests/{guest_id}")
async def delete_guest(guest_id: str, db: Session = Depends(get_db)):
    SeatingService.delete_guest(db, guest_id)
    await notifier.broadcast_guest_deleted(guest_id)

    return success_response(message="Guest deleted successfully", data={"deleted_guest_id": guest_id})

@router.post("/guests/{guest_id}/assign")
async def assign_guest(guest_id: str, assignment: AssignRequest, db: Session = Depends(get_db)):
    """Seat a guest at a table (null table_id unassigns)"""
    guest = SeatingService.assign_guest_to_table(
        db,
        guest_id=guest_id,
        table_id=assignment.table_id,
        party_size=assignment.party_size,
    )
    await notifier.broadcast_guest_update(guest, update_type="guest_assigned")

    return success_response(message="Guest assigned successfully", data=_guest_data(guest))

@router.post("/guests/{guest_id}/unassign")
async def unassign_guest(guest_id: str, db: Session = Depends(get_db)):
    guest = SeatingService.unassign_guest(db, guest_id)
    await notifier.broadcast_guest_update(guest, update_type="guest_unassigned")

    return success_response(message="Guest unassigned successfully", data=_guest_data(guest))

# -------- Tables --------

@router.get("/tables")
async def list_tables(db: Session = Depends(get_db)):
    """Tables with their rosters and seat usage"""
    tables = SeatingService.list_tables_with_guests(db)
    return success_response(
        message="Tables retrieved successfully",
        data={"tables": [table.model_dump() for table in tables]}
    )

@router.post("/tables")
async def create_table(table_data: TableCreate, db: Session = Depends(get_db)):
    table = SeatingService.create_table(
        db,
        name=table_data.name,
        shape=table_data.shape,
        capacity=table_data.capacity,
        position_x=table_data.position_x,
        position_y=table_data.position_y,
        rotation=table_data.rotation,
    )
    await notifier.broadcast_table_update(table, update_type="table_created")

    return success_response(message="Table created successfully", data=_table_data(table))

@router.patch("/tables/{table_id}")
async def update_table(table_id: str, table_update: TableUpdate, db: Session = Depends(get_db)):
    table = SeatingService.update_table(db, table_id, table_update.model_dump(exclude_unset=True))
    await notifier.broadcast_table_update(table)

    return success_response(message="Table updated successfully", data=_table_data(table))

@router.put("/tables/{table_id}/name")
async def rename_table(table_id: str, rename: TableRename, db: Session = Depends(get_db)):
    table = SeatingService.rename_table(db, table_id, rename.name)
    await notifier.broadcast_table_update(table)

    return success_response(message="Table renamed successfully", data=_table_data(table))

@router.delete("/tables/{table_id}")
async def delete_table(table_id: str, db: Session = Depends(get_db)):
    """Delete a table; its guests become unassigned"""
    unassigned_count = SeatingService.delete_table(db, table_id)
    await notifier.broadcast_table_deleted(table_id, unassigned_count)

    return success_response(
        message="Table deleted successfully",
        data={"deleted_table_id": table_id, "unassigned_count": unassigned_count}
    )

# -------- Bulk seating --------

@router.post("/seating/auto-assign")
async def auto_assign(db: Session = Depends(get_db)):
    """Greedily seat all unassigned guests where they fit"""
    result = bulk_auto_assign(db)
    await notifier.broadcast_seating_update(update_type="auto_assigned", detail={"assigned_count": len(result.assigned)})

    return success_response(
        message=f"Auto-assign seated {len(result.assigned)} guest(s)",
        data=result.to_dict()
    )

@router.post("/seating/auto-arrange")
async def auto_arrange(arrange: Optional[AutoArrangeRequest] = None, db: Session = Depends(get_db)):
    """Lay tables out evenly around the canvas centre"""
    arrange = arrange or AutoArrangeRequest()
    result = auto_arrange_tables(db, canvas_width=arrange.canvas_width, canvas_height=arrange.canvas_height)
    await notifier.broadcast_seating_update(update_type="tables_arranged")

    return success_response(
        message=f"Arranged {len(result.positions)} table(s)",
        data=result.to_dict()
    )

@router.get("/seating/summary")
async def seating_summary(db: Session = Depends(get_db)):
    return success_response(
        message="Seating summary retrieved successfully",
        data=SeatingService.get_seating_summary(db)
    )

@router.get("/export/seating.xlsx")
async def export_seating(db: Session = Depends(get_db)):
    """Export current seating to Excel"""
    excel_content = ExcelService.export_seating_chart(db)

    return Response(
        content=excel_content,
        media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        headers={"Content-Disposition": "attachment; filename=seating_chart.xlsx"}
    )

# -------- Event settings --------

@router.put("/settings")
async def update_settings(settings_update: EventSettingsUpdate, db: Session = Depends(get_db)):
    patch = settings_update.model_dump(exclude_unset=True, exclude_none=True)
    if not patch:
        return error_response(message="At least one field is required", error_code="validation_error")

    event_settings = SettingsRepo.update(db, patch)
    return success_response(
        message="Settings updated successfully",
        data=EventSettingsResponse.model_validate(event_settings).model_dump()
    )

# -------- Layout annotations --------

@router.get("/layout/labels")
async def list_labels(db: Session = Depends(get_db)):
    labels = LayoutRepo.list_labels(db)
    return success_response(
        message="Labels retrieved successfully",
        data={"labels": [LabelResponse.model_validate(label).model_dump() for label in labels]}
    )

@router.put("/layout/labels")
async def replace_labels(payload: LabelsReplace, db: Session = Depends(get_db)):
    """Replace every label on the chart with the given set"""
    labels = LayoutRepo.replace_labels(db, [label.model_dump() for label in payload.labels])
    return success_response(
        message="Labels saved successfully",
        data={"labels": [LabelResponse.model_validate(label).model_dump() for label in labels]}
    )

@router.delete("/layout/labels/{label_id}")
async def delete_label(label_id: str, db: Session = Depends(get_db)):
    if not LayoutRepo.delete_label(db, label_id):
        raise NotFound("Label", label_id)
    return success_response(message="Label deleted successfully", data={"deleted_label_id": label_id})

@router.get("/layout/shapes")
async def list_shapes(db: Session = Depends(get_db)):
    shapes = LayoutRepo.list_shapes(db)
    return success_response(
        message="Shapes retrieved successfully",
        data={"shapes": [ShapeResponse.model_validate(shape).model_dump() for shape in shapes]}
    )

@router.put("/layout/shapes")
async def replace_shapes(payload: ShapesReplace, db: Session = Depends(get_db)):
    """Replace every reference shape on the chart with the given set"""
    shapes = LayoutRepo.replace_shapes(db, [shape.model_dump() for shape in payload.shapes])
    return success_response(
        message="Shapes saved successfully",
        data={"shapes": [ShapeResponse.model_validate(shape).model_dump() for shape in shapes]}
    )

@router.delete("/layout/shapes/{shape_id}")
async def delete_shape(shape_id: str, db: Session = Depends(get_db)):
    if not LayoutRepo.delete_shape(db, shape_id):
        raise NotFound("Shape", shape_id)
    return success_response(message="Shape deleted successfully", data={"deleted_shape_id": shape_id})
