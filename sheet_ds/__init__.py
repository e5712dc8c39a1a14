"""
Spreadsheet feed data store (sheet_ds)
======================================

Table-style create/read/update/delete on top of an Atom-based spreadsheet
feed service. Worksheets are tables, their list feeds are rows.

Usage
-----
>>> from sheet_ds import ConnectionContext
>>> from sheet_ds.sheets import Model, Property, Query, Serial
>>>
>>> crew = Model("CrewMember", [Serial(), Property("name"),
...                             Property("times_a_lady", int)],
...              storage_name="crew")
>>> with ConnectionContext() as conn:
...     adapter = conn.get_adapter()
...     adapter.create_model_storage(crew)
...     adapter.create([crew.new(name="Mike Nelson", times_a_lady=8)])
...     rows = adapter.read(Query(crew))

Subpackages
-----------
- sheet_ds.core: Session, authentication, configuration, errors
- sheet_ds.feed: Links, entries, documents, response pipeline, payloads
- sheet_ds.sheets: Navigator, table adapter, record layer
- sheet_ds.api: Optional FastAPI REST gateway

"""

__version__ = "0.1.0"

# Core exports - available at package root
from sheet_ds.core import (
    FeedAuth,
    FeedConfig,
    SheetFeedSession,
    ConnectionContext,
    SheetFeedError,
    SheetsUpstreamError,
    FeedParseError,
    MissingRelationError,
    WorksheetNotFoundError,
    RowNotFoundError,
)

# Convenience re-exports
from sheet_ds.sheets import SheetAdapter, Navigator

__all__ = [
    # Version
    "__version__",
    # Core
    "FeedAuth",
    "FeedConfig",
    "SheetFeedSession",
    "ConnectionContext",
    # Errors
    "SheetFeedError",
    "SheetsUpstreamError",
    "FeedParseError",
    "MissingRelationError",
    "WorksheetNotFoundError",
    "RowNotFoundError",
    # Sheets
    "SheetAdapter",
    "Navigator",
]
