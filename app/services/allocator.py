"""
Bulk seating operations: greedy auto-assignment and circular table layout.

Both operations persist item by item. A failure on one guest or table is
logged and recorded in the result; earlier items stay committed.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.exceptions import SeatingError
from app.services.capacity import available_seats, party_size_of
from app.services.repositories import GuestRepo, TableRepo
from app.services.seating_service import SeatingService

logger = logging.getLogger(__name__)

# Fraction of the smaller canvas dimension used as the layout circle radius
ARRANGE_RADIUS_RATIO = 0.35


@dataclass
class AssignmentPlan:
    assignments: List[Tuple[str, str]] = field(default_factory=list)  # (guest_id, table_id)
    skipped: List[str] = field(default_factory=list)
    unprocessed: List[str] = field(default_factory=list)


@dataclass
class AllocationResult:
    assigned: List[Dict[str, str]] = field(default_factory=list)
    unassigned: List[str] = field(default_factory=list)
    failed: List[Dict[str, str]] = field(default_factory=list)

    def to_dict(self) -> Dict:
        return {
            "assigned_count": len(self.assigned),
            "assigned": self.assigned,
            "unassigned_guest_ids": self.unassigned,
            "failed": self.failed,
        }


@dataclass
class ArrangeResult:
    positions: Dict[str, Tuple[float, float]] = field(default_factory=dict)
    failed: List[Dict[str, str]] = field(default_factory=list)

    def to_dict(self) -> Dict:
        return {
            "arranged_count": len(self.positions),
            "positions": {
                table_id: {"position_x": x, "position_y": y}
                for table_id, (x, y) in self.positions.items()
            },
            "failed": self.failed,
        }


def plan_auto_assignment(
    tables: Sequence[Tuple[str, int]],
    guests: Sequence[Tuple[str, int]],
) -> AssignmentPlan:
    """Single left-to-right greedy pass.

    ``tables`` is ``(table_id, available_seats)`` in table order and ``guests``
    is ``(guest_id, party_size)`` in guest order. One cursor walks the guests
    across all tables: a party that does not fit the current table's remaining
    seats is skipped for good, never retried at a later table.
    """
    plan = AssignmentPlan()
    cursor = 0

    for table_id, available in tables:
        if cursor >= len(guests):
            break
        while available > 0 and cursor < len(guests):
            guest_id, party_size = guests[cursor]
            cursor += 1
            if party_size <= available:
                plan.assignments.append((guest_id, table_id))
                available -= party_size
            else:
                plan.skipped.append(guest_id)

    plan.unprocessed = [guest_id for guest_id, _ in guests[cursor:]]
    return plan


def bulk_auto_assign(db: Session) -> AllocationResult:
    """Seat unassigned guests at tables with free seats, best effort"""
    tables = [
        (table.id, available_seats(table.capacity, GuestRepo.list_guests_by_table(db, table.id)))
        for table in TableRepo.list_tables(db)
    ]
    guests = [(guest.id, party_size_of(guest)) for guest in GuestRepo.list_unassigned(db)]

    plan = plan_auto_assignment(tables, guests)
    result = AllocationResult(unassigned=plan.skipped + plan.unprocessed)

    for guest_id, table_id in plan.assignments:
        try:
            # Goes through the engine so capacity is re-checked at commit time
            SeatingService.assign_guest_to_table(db, guest_id, table_id)
        except (SeatingError, SQLAlchemyError) as e:
            db.rollback()
            logger.warning(f"Auto-assign of guest {guest_id} to table {table_id} failed: {e}")
            result.failed.append({"guest_id": guest_id, "table_id": table_id, "error": str(e)})
            result.unassigned.append(guest_id)
            continue
        result.assigned.append({"guest_id": guest_id, "table_id": table_id})

    logger.info(
        f"Auto-assign finished: {len(result.assigned)} seated, "
        f"{len(result.unassigned)} left unassigned, {len(result.failed)} failed"
    )
    return result


def circle_layout(count: int, canvas_width: float, canvas_height: float) -> List[Tuple[float, float]]:
    """Positions for ``count`` tables: one at the centre, or evenly around a circle"""
    center_x = canvas_width / 2
    center_y = canvas_height / 2
    if count <= 0:
        return []
    if count == 1:
        return [(center_x, center_y)]

    radius = min(canvas_width, canvas_height) * ARRANGE_RADIUS_RATIO
    positions = []
    for index in range(count):
        angle = index * 2 * math.pi / count
        positions.append((
            round(center_x + radius * math.cos(angle), 2),
            round(center_y + radius * math.sin(angle), 2),
        ))
    return positions


def auto_arrange_tables(
    db: Session,
    canvas_width: Optional[int] = None,
    canvas_height: Optional[int] = None,
) -> ArrangeResult:
    width = canvas_width or settings.CANVAS_WIDTH
    height = canvas_height or settings.CANVAS_HEIGHT

    tables = TableRepo.list_tables(db)
    table_ids = [table.id for table in tables]
    result = ArrangeResult()

    for table_id, (x, y) in zip(table_ids, circle_layout(len(table_ids), width, height)):
        try:
            SeatingService.move_table(db, table_id, x, y)
        except (SeatingError, SQLAlchemyError) as e:
            db.rollback()
            logger.warning(f"Could not move table {table_id} during auto-arrange: {e}")
            result.failed.append({"table_id": table_id, "error": str(e)})
            continue
        result.positions[table_id] = (x, y)

    logger.info(f"Auto-arranged {len(result.positions)} of {len(table_ids)} tables")
    return result
