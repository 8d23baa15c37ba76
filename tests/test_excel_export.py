"""
Tests for the Excel seating chart export
"""

import io

import pandas as pd
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from app.core.db import Base
from app.services.excel_service import ExcelService
from app.services.seating_service import SeatingService

# Test database setup
SQLALCHEMY_DATABASE_URL = "sqlite:///./test_excel.db"
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

@pytest.fixture
def seated_event(db_session):
    head = SeatingService.create_table(db_session, name="Head Table", shape="rectangular", capacity=10)
    family = SeatingService.create_table(db_session, name="Family", capacity=8)
    SeatingService.create_guest(db_session, name="Zoe Walker", party_size=2)
    SeatingService.create_guest(db_session, name="Bride Parents", party_size=2, table_id=head.id)
    SeatingService.create_guest(
        db_session, name="Aunt May", party_size=4, table_id=family.id,
        phone_number="555-0100", address="20 Ingram St",
    )
    return db_session

def test_guest_sheet_groups_by_table_with_unassigned_last(seated_event):
    workbook = io.BytesIO(ExcelService.export_seating_chart(seated_event))
    guests = pd.read_excel(workbook, sheet_name="Guest List").fillna("")

    assert list(guests.columns) == ["Name", "Party Size", "Table", "Phone", "Address"]
    assert list(guests["Name"]) == ["Aunt May", "Bride Parents", "Zoe Walker"]
    assert list(guests["Table"]) == ["Family", "Head Table", "Unassigned"]
    assert guests.iloc[0]["Address"] == "20 Ingram St"

def test_tables_sheet_reports_load(seated_event):
    workbook = io.BytesIO(ExcelService.export_seating_chart(seated_event))
    tables = pd.read_excel(workbook, sheet_name="Tables")

    rows = tables.set_index("Table").to_dict("index")
    assert rows["Head Table"]["Shape"] == "rectangular"
    assert rows["Head Table"]["Seats Used"] == 2
    assert rows["Family"]["Seats Available"] == 4

def test_export_with_no_data(db_session):
    workbook = io.BytesIO(ExcelService.export_seating_chart(db_session))

    guests = pd.read_excel(workbook, sheet_name="Guest List")
    assert guests.empty
    assert list(guests.columns) == ["Name", "Party Size", "Table", "Phone", "Address"]
