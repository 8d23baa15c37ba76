"""
Pydantic schemas package
"""

from .common import *
from .guest import *
from .table import *
from .settings import *
from .layout import *

__all__ = [
    "StandardResponse",
    "ErrorResponse",
    "Pagination",
    "GuestCreate",
    "GuestUpdate",
    "GuestResponse",
    "AssignRequest",
    "LookupRequest",
    "AddressUpdate",
    "TableMate",
    "SeatingInfo",
    "TableCreate",
    "TableUpdate",
    "TableRename",
    "TableResponse",
    "TableWithGuests",
    "PublicTable",
    "AutoArrangeRequest",
    "EventSettingsResponse",
    "EventSettingsUpdate",
    "LabelIn",
    "LabelResponse",
    "LabelsReplace",
    "ShapeIn",
    "ShapeResponse",
    "ShapesReplace",
]
