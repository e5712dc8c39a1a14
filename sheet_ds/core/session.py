"""
sheet_ds.core.session - Feed HTTP Session Management
=====================================================

Low-level session handling for the spreadsheet feed service with:
- AuthSub and Bearer token authentication
- Pluggable transport adapter
- Atom request/response pipeline on every call
- Unconditional overwrite precondition on writes
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Union
from urllib.parse import urljoin, urlsplit
import logging
import time

import requests
from requests import Session
from requests.adapters import BaseAdapter, HTTPAdapter
from urllib3.util.retry import Retry

from sheet_ds.core.errors import SheetsUpstreamError
from sheet_ds.feed.constants import ATOM_TYPE, OVERWRITE_PRECONDITION
from sheet_ds.feed.links import Link
from sheet_ds.feed.pipeline import CallContext, FeedPipeline

__all__ = [
    "FeedAuth",
    "FeedConfig",
    "SheetFeedSession",
    "SheetsUpstreamError",
]


@dataclass
class FeedAuth:
    """
    Authentication configuration for the feed service.

    Parameters
    ----------
    kind : str
        Either "authsub" or "bearer"
    token : str
        Access token

    Examples
    --------
    >>> FeedAuth("authsub", "abc").header_value()
    'AuthSub token="abc"'
    >>> FeedAuth("bearer", "abc").header_value()
    'Bearer abc'
    """
    kind: str  # "authsub" | "bearer"
    token: str

    def header_value(self) -> str:
        if self.kind == "authsub":
            return f'AuthSub token="{self.token}"'
        if self.kind == "bearer":
            return f"Bearer {self.token}"
        raise ValueError("auth.kind must be 'authsub' or 'bearer'")


@dataclass
class FeedConfig:
    """
    Connection configuration for one spreadsheet.

    Parameters
    ----------
    spreadsheet_url : str
        URL of the spreadsheet resource, e.g.
        "https://spreadsheets.google.com/feeds/spreadsheets/private/full/KEY"
    auth : FeedAuth
        Authentication configuration
    timeout : float
        Request timeout in seconds (default: 60.0)
    retries : int
        Transport retry attempts (default: 0, failures surface immediately)
    backoff : float
        Backoff factor for retries (default: 0.5)
    verify : bool or str
        SSL verification (True, False, or path to CA bundle)
    user_agent : str
        User-Agent header value
    transport : requests adapter, optional
        Adapter mounted for http:// and https:// instead of the default
        HTTPAdapter
    """
    spreadsheet_url: str
    auth: FeedAuth
    timeout: float = 60.0
    retries: int = 0
    backoff: float = 0.5
    verify: Union[bool, str] = True
    user_agent: str = "sheet-ds/0.1"
    transport: Optional[BaseAdapter] = None

    @property
    def site(self) -> str:
        """Scheme and host of the spreadsheet URL."""
        parts = urlsplit(self.spreadsheet_url)
        return f"{parts.scheme}://{parts.netloc}/"

    @property
    def spreadsheet_path(self) -> str:
        return urlsplit(self.spreadsheet_url).path


class SheetFeedSession:
    """
    Low-level HTTP session for the spreadsheet feed service.

    Every call is routed through a :class:`FeedPipeline`; responses with the
    Atom media type come back parsed. Use as a context manager for automatic
    cleanup.

    Parameters
    ----------
    cfg : FeedConfig
        Connection configuration

    Examples
    --------
    >>> cfg = FeedConfig(url, FeedAuth("bearer", token))
    >>> with SheetFeedSession(cfg) as sess:
    ...     doc = sess.get(cfg.spreadsheet_path).document
    """

    def __init__(self, cfg: FeedConfig) -> None:
        self.cfg = cfg
        self.base = cfg.site
        self.timeout = float(cfg.timeout)
        self.verify = cfg.verify
        self.logger = logging.getLogger("sheet_ds.feed")

        self.pipeline = FeedPipeline.default(cfg.auth.header_value())
        self.session = self._build_session()

    def close(self) -> None:
        """Close the underlying HTTP session."""
        self.session.close()

    def __enter__(self) -> "SheetFeedSession":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # ---------------- session ----------------

    def _build_session(self) -> Session:
        sess = requests.Session()
        sess.headers.update({
            "Accept": ATOM_TYPE,
            "User-Agent": self.cfg.user_agent,
        })

        adapter = self.cfg.transport
        if adapter is None:
            retry = Retry(
                total=self.cfg.retries,
                backoff_factor=self.cfg.backoff,
                status_forcelist=(429, 500, 502, 503, 504),
                raise_on_status=False,
            )
            adapter = HTTPAdapter(max_retries=retry)
        sess.mount("https://", adapter)
        sess.mount("http://", adapter)
        return sess

    # ---------------- helpers ----------------

    def _url(self, link_or_url: Union[Link, str]) -> str:
        return urljoin(self.base, str(link_or_url))

    def request(
        self,
        method: str,
        link_or_url: Union[Link, str],
        *,
        data: Optional[Union[str, bytes]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> CallContext:
        """
        Send one request through the pipeline.

        Returns
        -------
        CallContext
            The finished call; ``.document`` holds the parsed feed when the
            response was Atom

        Raises
        ------
        SheetsUpstreamError
            On failure statuses
        FeedParseError
            When an Atom body cannot be parsed
        """
        ctx = CallContext(
            method=method.upper(),
            url=self._url(link_or_url),
            request_headers=dict(headers or {}),
            data=data,
        )
        self.pipeline.before_request(ctx)

        t0 = time.perf_counter()
        r = self.session.request(
            method=ctx.method,
            url=ctx.url,
            headers=ctx.request_headers,
            data=ctx.data,
            timeout=self.timeout,
            verify=self.verify,
        )
        dt = (time.perf_counter() - t0) * 1000.0
        self.logger.debug("%s %s %s %sms", ctx.method, ctx.url, r.status_code, round(dt, 1))

        ctx.status = r.status_code
        ctx.response_headers = r.headers
        ctx.body = r.content
        return self.pipeline.after_response(ctx)

    # ---------------- public ops ----------------

    def get(self, link_or_url: Union[Link, str]) -> CallContext:
        """GET a link or URL."""
        return self.request("GET", link_or_url)

    def post(self, link_or_url: Union[Link, str], payload: bytes) -> CallContext:
        """POST an Atom payload."""
        return self.request(
            "POST",
            link_or_url,
            data=payload,
            headers={"Content-Type": ATOM_TYPE},
        )

    def put(self, link_or_url: Union[Link, str], payload: bytes) -> CallContext:
        """PUT an Atom payload, overwriting unconditionally."""
        headers = {"Content-Type": ATOM_TYPE}
        headers.update(OVERWRITE_PRECONDITION)
        return self.request("PUT", link_or_url, data=payload, headers=headers)

    def delete(self, link_or_url: Union[Link, str]) -> CallContext:
        """DELETE a link or URL, unconditionally."""
        return self.request("DELETE", link_or_url, headers=dict(OVERWRITE_PRECONDITION))
