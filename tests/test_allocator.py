"""
Tests for greedy auto-assignment and circular auto-arrange
"""

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from app.core.db import Base
from app.services.allocator import (
    auto_arrange_tables,
    bulk_auto_assign,
    circle_layout,
    plan_auto_assignment,
)
from app.services.capacity import seats_used
from app.services.repositories import GuestRepo, TableRepo
from app.services.seating_service import SeatingService

# Test database setup
SQLALCHEMY_DATABASE_URL = "sqlite:///./test_allocator.db"
engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

@pytest.fixture
def db_session():
    """Create test database session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)

def load(db, table_id):
    return seats_used(GuestRepo.list_guests_by_table(db, table_id))

def test_plan_skips_party_that_does_not_fit_without_revisiting():
    plan = plan_auto_assignment(
        tables=[("t1", 5), ("t2", 5)],
        guests=[("g1", 6), ("g2", 3), ("g3", 2)],
    )

    assert plan.assignments == [("g2", "t1"), ("g3", "t1")]
    assert plan.skipped == ["g1"]
    assert plan.unprocessed == []

def test_plan_moves_to_next_table_when_current_is_full():
    plan = plan_auto_assignment(
        tables=[("full", 0), ("t2", 4)],
        guests=[("g1", 2), ("g2", 2), ("g3", 1)],
    )

    assert plan.assignments == [("g1", "t2"), ("g2", "t2")]
    assert plan.unprocessed == ["g3"]

def test_plan_with_nothing_to_do():
    assert plan_auto_assignment([], [("g1", 1)]).unprocessed == ["g1"]
    assert plan_auto_assignment([("t1", 8)], []).assignments == []

def test_bulk_auto_assign_persists_greedy_plan(db_session):
    first = SeatingService.create_table(db_session, name="Table 1", capacity=5)
    second = SeatingService.create_table(db_session, name="Table 2", capacity=5)
    big = SeatingService.create_guest(db_session, name="Big Family", party_size=6)
    couple_plus = SeatingService.create_guest(db_session, name="The Parkers", party_size=3)
    pair = SeatingService.create_guest(db_session, name="The Watsons", party_size=2)

    result = bulk_auto_assign(db_session)

    assert load(db_session, first.id) == 5
    assert load(db_session, second.id) == 0
    assert GuestRepo.get_guest(db_session, big.id).table_id is None
    assert GuestRepo.get_guest(db_session, couple_plus.id).table_id == first.id
    assert GuestRepo.get_guest(db_session, pair.id).table_id == first.id
    assert result.unassigned == [big.id]
    assert result.failed == []
    assert result.to_dict()["assigned_count"] == 2

def test_bulk_auto_assign_counts_existing_load(db_session):
    table = SeatingService.create_table(db_session, name="Table 1", capacity=6)
    SeatingService.create_guest(db_session, name="Already Seated", party_size=4, table_id=table.id)
    fits = SeatingService.create_guest(db_session, name="Fits", party_size=2)
    too_late = SeatingService.create_guest(db_session, name="Too Late", party_size=1)

    result = bulk_auto_assign(db_session)

    assert load(db_session, table.id) == 6
    assert GuestRepo.get_guest(db_session, fits.id).table_id == table.id
    assert result.unassigned == [too_late.id]

def test_bulk_auto_assign_never_overfills(db_session):
    for index in range(3):
        SeatingService.create_table(db_session, name=f"Table {index + 1}", capacity=4)
    for index, size in enumerate([3, 3, 2, 4, 1, 2, 5]):
        SeatingService.create_guest(db_session, name=f"Party {index}", party_size=size)

    bulk_auto_assign(db_session)

    for table in TableRepo.list_tables(db_session):
        assert load(db_session, table.id) <= table.capacity

def test_circle_layout_edge_cases():
    assert circle_layout(0, 1200, 800) == []
    assert circle_layout(1, 1200, 800) == [(600, 400)]

def test_circle_layout_spreads_tables_evenly():
    positions = circle_layout(4, 1200, 800)

    # Radius is 35% of the shorter side
    assert positions == [(880.0, 400.0), (600.0, 680.0), (320.0, 400.0), (600.0, 120.0)]

def test_auto_arrange_persists_positions(db_session):
    tables = [SeatingService.create_table(db_session, name=f"Table {i}", capacity=8) for i in range(1, 5)]
    table_ids = [table.id for table in tables]

    result = auto_arrange_tables(db_session, canvas_width=1000, canvas_height=1000)

    assert result.failed == []
    assert list(result.positions) == table_ids
    first = TableRepo.get_table(db_session, table_ids[0])
    assert (first.position_x, first.position_y) == (850.0, 500.0)
    assert result.to_dict()["arranged_count"] == 4

def test_bulk_auto_assign_records_failure_and_continues(db_session, monkeypatch):
    table = SeatingService.create_table(db_session, name="Table 1", capacity=5)
    early = SeatingService.create_guest(db_session, name="Early", party_size=2)
    squeezed_out = SeatingService.create_guest(db_session, name="Squeezed Out", party_size=2)
    late = SeatingService.create_guest(db_session, name="Late", party_size=1)
    table_id, early_id, squeezed_id, late_id = table.id, early.id, squeezed_out.id, late.id

    assign = SeatingService.assign_guest_to_table

    def assign_after_walk_in(db, guest_id, target_table_id, party_size=None):
        if guest_id == squeezed_id:
            # A walk-in party takes two seats after the plan was made
            other_session = TestingSessionLocal()
            try:
                SeatingService.create_guest(other_session, name="Walk-in", party_size=2, table_id=target_table_id)
            finally:
                other_session.close()
        return assign(db, guest_id, target_table_id, party_size)

    monkeypatch.setattr(SeatingService, "assign_guest_to_table", staticmethod(assign_after_walk_in))

    result = bulk_auto_assign(db_session)

    assert result.assigned == [
        {"guest_id": early_id, "table_id": table_id},
        {"guest_id": late_id, "table_id": table_id},
    ]
    assert [failure["guest_id"] for failure in result.failed] == [squeezed_id]
    assert "cannot fit" in result.failed[0]["error"]
    assert result.unassigned == [squeezed_id]
    assert GuestRepo.get_guest(db_session, early_id).table_id == table_id
    assert GuestRepo.get_guest(db_session, squeezed_id).table_id is None
    assert load(db_session, table_id) == 5

def test_auto_arrange_records_failure_and_continues(db_session, monkeypatch):
    tables = [SeatingService.create_table(db_session, name=f"Table {i}", capacity=8) for i in range(1, 4)]
    first_id, removed_id, last_id = [table.id for table in tables]

    move = SeatingService.move_table

    def move_after_removal(db, table_id, position_x, position_y):
        if table_id == removed_id:
            # Someone deletes the table while the layout is being applied
            other_session = TestingSessionLocal()
            try:
                SeatingService.delete_table(other_session, table_id)
            finally:
                other_session.close()
        return move(db, table_id, position_x, position_y)

    monkeypatch.setattr(SeatingService, "move_table", staticmethod(move_after_removal))

    result = auto_arrange_tables(db_session, canvas_width=1000, canvas_height=1000)

    assert list(result.positions) == [first_id, last_id]
    assert result.failed == [{"table_id": removed_id, "error": "Table not found"}]
    first = TableRepo.get_table(db_session, first_id)
    assert (first.position_x, first.position_y) == (850.0, 500.0)
    assert TableRepo.get_table(db_session, removed_id) is None
    assert TableRepo.get_table(db_session, last_id).position_x == result.positions[last_id][0]
