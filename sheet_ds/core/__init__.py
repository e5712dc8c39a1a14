"""
sheet_ds.core - Core connectivity and authentication
=====================================================

This module provides the foundational classes for talking to the feed service:

- FeedAuth: Authentication configuration (AuthSub or bearer token)
- FeedConfig: Full connection configuration
- SheetFeedSession: Low-level HTTP session running the feed pipeline
- ConnectionContext: High-level connection manager
- SheetFeedError and subclasses: the error taxonomy

"""

from sheet_ds.core.errors import (
    SheetFeedError,
    SheetsUpstreamError,
    FeedParseError,
    MissingRelationError,
    WorksheetNotFoundError,
    RowNotFoundError,
)

from sheet_ds.core.session import (
    FeedAuth,
    FeedConfig,
    SheetFeedSession,
)

from sheet_ds.core.connection import ConnectionContext

__all__ = [
    "SheetFeedError",
    "SheetsUpstreamError",
    "FeedParseError",
    "MissingRelationError",
    "WorksheetNotFoundError",
    "RowNotFoundError",
    "FeedAuth",
    "FeedConfig",
    "SheetFeedSession",
    "ConnectionContext",
]
