"""
sheet_ds.core.errors - Error taxonomy
=====================================

Every failure raised by the package derives from :class:`SheetFeedError`.
Nothing is retried; errors propagate to the caller of the operation.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class SheetFeedError(RuntimeError):
    """Base class for all sheet_ds errors."""


class SheetsUpstreamError(SheetFeedError):
    """
    Exception raised when the feed service answers with a failure status.

    Attributes
    ----------
    status : int
        HTTP status code
    body : str
        Response body (truncated for display)
    url : str
        The URL that was called
    headers : dict
        Response headers
    """

    def __init__(
        self,
        status: int,
        body: str,
        url: str,
        headers: Optional[Dict[str, str]] = None
    ):
        snippet = (body or "")[:1200]
        super().__init__(f"Feed upstream error {status} for {url}: {snippet}")
        self.status = status
        self.body = body or ""
        self.url = url
        self.headers = headers or {}


class FeedParseError(SheetFeedError):
    """A response that should have been an Atom document could not be parsed."""

    def __init__(self, message: str, url: Optional[str] = None):
        super().__init__(f"{message} ({url})" if url else message)
        self.url = url


class MissingRelationError(SheetFeedError):
    """A document lacks a link relation the protocol requires."""

    def __init__(self, rel: str, where: Any = None):
        location = f" on {where}" if where else ""
        super().__init__(f"Missing required link relation {rel!r}{location}")
        self.rel = rel
        self.where = where


class WorksheetNotFoundError(SheetFeedError):
    """No worksheet with the requested title exists in the spreadsheet."""

    def __init__(self, name: str):
        super().__init__(f"Worksheet not found: {name!r}")
        self.name = name


class RowNotFoundError(SheetFeedError):
    """No row in the worksheet matches a resource's key."""

    def __init__(self, storage_name: str, key: Dict[str, Any]):
        super().__init__(f"No row in worksheet {storage_name!r} matches key {key!r}")
        self.storage_name = storage_name
        self.key = key
