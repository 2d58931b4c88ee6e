from .company_record import CompanyRecord
from .columns import ColumnSpec, FieldType
from .view_state import SortDirection, ViewState

__all__ = [
    "CompanyRecord",
    "ColumnSpec",
    "FieldType",
    "SortDirection",
    "ViewState",
]
