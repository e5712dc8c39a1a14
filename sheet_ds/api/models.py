"""
sheet_ds.api.models - Pydantic models for API requests/responses
=================================================================
"""

from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Example defaults
# ---------------------------------------------------------------------------

EXAMPLE_WORKSHEET = "crew"
EXAMPLE_COLUMNS = ["name", "timesALady", "createdAt"]
EXAMPLE_ROW = {"name": "Mike Nelson", "timesalady": "8"}


class WorksheetCreateRequest(BaseModel):
    """Request model for creating a worksheet with a header row."""

    name: str = Field(
        ...,
        description="Worksheet title",
        json_schema_extra={"example": EXAMPLE_WORKSHEET}
    )
    columns: List[str] = Field(
        ...,
        min_length=1,
        description="Column names in order; normalized before use",
        json_schema_extra={"example": EXAMPLE_COLUMNS}
    )


class WorksheetResponse(BaseModel):
    """Existence/creation result for one worksheet."""

    name: str
    exists: bool
    columns: Optional[List[str]] = Field(
        default=None,
        description="Normalized column names, when just created"
    )


class RowCreateRequest(BaseModel):
    """Request model for appending one row."""

    values: Dict[str, Any] = Field(
        ...,
        description="Column name -> value; names are normalized",
        json_schema_extra={"example": EXAMPLE_ROW}
    )


class RowCreateResponse(BaseModel):
    worksheet: str
    created: int


class RowsResponse(BaseModel):
    """Rows of a worksheet restricted to the requested columns."""

    worksheet: str
    columns: List[str]
    count: int
    rows: List[Dict[str, Optional[str]]]
