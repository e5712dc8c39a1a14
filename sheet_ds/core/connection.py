"""
sheet_ds.core.connection - High-level connection management
============================================================

Provides a ConnectionContext that reads its settings from the environment
and hands out table adapters bound to one spreadsheet.
"""

from __future__ import annotations

import os
from typing import TYPE_CHECKING, Optional

from requests.adapters import BaseAdapter

from sheet_ds.core.session import FeedAuth, FeedConfig, SheetFeedSession

if TYPE_CHECKING:
    from sheet_ds.sheets.adapter import SheetAdapter


class ConnectionContext:
    """
    High-level connection manager for one spreadsheet.

    Supports environment variable configuration and context manager usage.

    Parameters
    ----------
    spreadsheet_url : str, optional
        Spreadsheet URL. Falls back to GSHEET_URL env var.
    token : str, optional
        Access token. Falls back to GSHEET_TOKEN env var.
    auth_scheme : str, optional
        "authsub" or "bearer". Falls back to GSHEET_AUTH_SCHEME, then "authsub".
    verify : bool, optional
        SSL verification. Falls back to GSHEET_VERIFY_TLS env var.
    timeout : float
        Request timeout in seconds.
    transport : requests adapter, optional
        Transport adapter to mount instead of the default HTTPAdapter.
    repository : str
        Repository name handed to models when resolving storage names.

    Examples
    --------
    >>> with ConnectionContext() as conn:  # reads GSHEET_* env vars
    ...     adapter = conn.get_adapter()
    ...     adapter.storage_exists("crew")
    """

    def __init__(
        self,
        spreadsheet_url: Optional[str] = None,
        token: Optional[str] = None,
        auth_scheme: Optional[str] = None,
        verify: Optional[bool] = None,
        timeout: float = 60.0,
        transport: Optional[BaseAdapter] = None,
        repository: str = "default",
    ) -> None:
        self._spreadsheet_url = spreadsheet_url or os.environ.get("GSHEET_URL", "")
        self._token = token or os.environ.get("GSHEET_TOKEN", "")
        self._auth_scheme = (
            auth_scheme or os.environ.get("GSHEET_AUTH_SCHEME", "authsub")
        ).lower()

        if verify is not None:
            self._verify = verify
        else:
            self._verify = os.environ.get("GSHEET_VERIFY_TLS", "true").lower() != "false"

        self._timeout = timeout
        self._transport = transport
        self._repository = repository

        if not self._spreadsheet_url:
            raise ValueError(
                "Missing spreadsheet_url. Set GSHEET_URL environment variable "
                "or pass spreadsheet_url parameter."
            )

        if not self._token:
            raise ValueError(
                "Missing credentials. Set GSHEET_TOKEN environment variable "
                "or pass token parameter."
            )

        if self._auth_scheme not in ("authsub", "bearer"):
            raise ValueError("auth_scheme must be 'authsub' or 'bearer'")

        self._session: Optional[SheetFeedSession] = None

    @property
    def session(self) -> SheetFeedSession:
        """Get or create the underlying feed session."""
        if self._session is None:
            self._session = self._build_session()
        return self._session

    def _build_session(self) -> SheetFeedSession:
        cfg = FeedConfig(
            spreadsheet_url=self._spreadsheet_url,
            auth=FeedAuth(self._auth_scheme, self._token),
            verify=self._verify,
            timeout=self._timeout,
            transport=self._transport,
        )
        return SheetFeedSession(cfg)

    def close(self) -> None:
        """Close the connection."""
        if self._session is not None:
            self._session.close()
            self._session = None

    def __enter__(self) -> "ConnectionContext":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def get_adapter(self) -> "SheetAdapter":
        """
        Get a SheetAdapter bound to this connection's spreadsheet.

        Returns
        -------
        SheetAdapter
            Table-level CRUD over the spreadsheet's worksheets
        """
        # Import here to avoid circular imports
        from sheet_ds.sheets.adapter import SheetAdapter
        return SheetAdapter(self.session, name=self._repository)

    @property
    def spreadsheet_url(self) -> str:
        """The configured spreadsheet URL."""
        return self._spreadsheet_url

    @property
    def repository(self) -> str:
        return self._repository
