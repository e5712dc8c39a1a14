"""
sheet_ds.api.gateway - FastAPI Worksheet Gateway
=================================================

Optional REST API gateway exposing a spreadsheet's worksheets as tables.
"""

from __future__ import annotations

import os
from typing import Any, Dict, List, Optional

from fastapi import Depends, FastAPI, Header, HTTPException, Path as PathParam, Query
from fastapi.middleware.cors import CORSMiddleware
from requests.adapters import BaseAdapter

from sheet_ds.core.errors import (
    MissingRelationError,
    FeedParseError,
    SheetsUpstreamError,
    WorksheetNotFoundError,
)
from sheet_ds.core.session import FeedAuth, FeedConfig, SheetFeedSession
from sheet_ds.sheets.adapter import SheetAdapter
from sheet_ds.sheets.records import Model, Property, Query as RowQuery, normalize_field_name
from sheet_ds.api.models import (
    RowCreateRequest,
    RowCreateResponse,
    RowsResponse,
    WorksheetCreateRequest,
    WorksheetResponse,
    EXAMPLE_WORKSHEET,
)


class SheetGateway:
    """
    Configuration and session factory for the API gateway.

    Reads configuration from environment variables by default.
    """

    def __init__(
        self,
        spreadsheet_url: Optional[str] = None,
        token: Optional[str] = None,
        auth_scheme: Optional[str] = None,
        verify_tls: Optional[bool] = None,
        api_key: Optional[str] = None,
        transport: Optional[BaseAdapter] = None,
    ):
        self.spreadsheet_url = spreadsheet_url or os.environ.get("GSHEET_URL", "")
        self.token = token or os.environ.get("GSHEET_TOKEN", "")
        self.auth_scheme = auth_scheme or os.environ.get("GSHEET_AUTH_SCHEME", "authsub")

        if verify_tls is not None:
            self.verify_tls = verify_tls
        else:
            self.verify_tls = os.environ.get("GSHEET_VERIFY_TLS", "true").lower() != "false"

        self.api_key = api_key or os.environ.get("SHEET_API_KEY", "")
        self.transport = transport

    def validate(self) -> None:
        """Validate configuration. Raises RuntimeError if invalid."""
        if not self.spreadsheet_url:
            raise RuntimeError("Missing GSHEET_URL environment variable")
        if not self.token:
            raise RuntimeError("Missing GSHEET_TOKEN environment variable")
        if not self.api_key:
            raise RuntimeError("Missing SHEET_API_KEY - required for security")

    def build_session(self) -> SheetFeedSession:
        """Create a new feed session."""
        cfg = FeedConfig(
            spreadsheet_url=self.spreadsheet_url,
            auth=FeedAuth(self.auth_scheme, self.token),
            verify=self.verify_tls,
            timeout=float(os.environ.get("GSHEET_TIMEOUT", "60")),
            transport=self.transport,
        )
        return SheetFeedSession(cfg)


def table_model(name: str, columns: List[str]) -> Model:
    """A string-typed model over the given columns, deduplicated after normalizing."""
    fields: List[str] = []
    for col in columns:
        normalized = normalize_field_name(col)
        if normalized and normalized not in fields:
            fields.append(normalized)
    if not fields:
        raise HTTPException(status_code=422, detail="No usable column names")
    try:
        return Model(name, [Property(f) for f in fields], storage_name=name)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))


def _upstream_http_error(e: Exception) -> HTTPException:
    if isinstance(e, WorksheetNotFoundError):
        return HTTPException(status_code=404, detail=str(e))
    if isinstance(e, SheetsUpstreamError):
        return HTTPException(
            status_code=502,
            detail={"upstream_status": e.status, "url": e.url, "error": str(e)}
        )
    return HTTPException(status_code=502, detail={"error": str(e)})


_UPSTREAM_ERRORS = (
    WorksheetNotFoundError,
    SheetsUpstreamError,
    MissingRelationError,
    FeedParseError,
)


# Global gateway instance, replaced by create_app
_gateway: Optional[SheetGateway] = None


def get_gateway() -> SheetGateway:
    """Get or create the global gateway instance."""
    global _gateway
    if _gateway is None:
        _gateway = SheetGateway()
    return _gateway


def create_app(
    gateway: Optional[SheetGateway] = None,
    validate_on_startup: bool = True,
) -> FastAPI:
    """
    Create the FastAPI application.

    Parameters
    ----------
    gateway : SheetGateway, optional
        Custom gateway configuration. If None, reads from environment.
    validate_on_startup : bool
        If True, validate configuration on startup.

    Returns
    -------
    FastAPI
        Configured FastAPI application
    """
    global _gateway

    _gateway = gateway or SheetGateway()

    if validate_on_startup:
        try:
            _gateway.validate()
        except RuntimeError:
            # Allow app creation without validation for testing
            pass

    app = FastAPI(
        title="Spreadsheet Feed Gateway",
        description="""
## Worksheets as tables

Create and drop worksheets, append rows, and read rows back.

### Authentication
Include your API key in the `x-api-key` header.
        """,
        version="0.1.0",
        openapi_tags=[
            {"name": "Worksheets", "description": "Create, inspect, and drop worksheets"},
            {"name": "Rows", "description": "Append and read worksheet rows"},
        ],
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # -------------------------------------------------------------------------
    # Dependencies
    # -------------------------------------------------------------------------

    def require_api_key(x_api_key: str = Header(...)) -> None:
        gw = get_gateway()
        if gw.api_key and x_api_key != gw.api_key:
            raise HTTPException(status_code=401, detail="Invalid API key")

    # -------------------------------------------------------------------------
    # Endpoints
    # -------------------------------------------------------------------------

    @app.get("/health")
    def health() -> Dict[str, Any]:
        """Health check endpoint."""
        return {"ok": True, "version": "0.1.0"}

    @app.get("/worksheets/{name}", tags=["Worksheets"], response_model=WorksheetResponse)
    def get_worksheet(
        name: str = PathParam(..., examples=[EXAMPLE_WORKSHEET]),
        _: None = Depends(require_api_key),
    ) -> WorksheetResponse:
        """Check whether a worksheet exists."""
        try:
            with get_gateway().build_session() as sess:
                exists = SheetAdapter(sess).storage_exists(name)
        except _UPSTREAM_ERRORS as e:
            raise _upstream_http_error(e)
        return WorksheetResponse(name=name, exists=exists)

    @app.post(
        "/worksheets",
        tags=["Worksheets"],
        response_model=WorksheetResponse,
        status_code=201,
    )
    def create_worksheet(
        req: WorksheetCreateRequest,
        _: None = Depends(require_api_key),
    ) -> WorksheetResponse:
        """Create a worksheet and write its header row."""
        model = table_model(req.name, req.columns)
        try:
            with get_gateway().build_session() as sess:
                created = SheetAdapter(sess).create_model_storage(model)
        except _UPSTREAM_ERRORS as e:
            raise _upstream_http_error(e)
        if not created:
            raise HTTPException(status_code=409, detail=f"Worksheet {req.name!r} already exists")
        return WorksheetResponse(
            name=req.name,
            exists=True,
            columns=[p.field for p in model.properties()],
        )

    @app.delete("/worksheets/{name}", tags=["Worksheets"])
    def delete_worksheet(
        name: str = PathParam(..., examples=[EXAMPLE_WORKSHEET]),
        _: None = Depends(require_api_key),
    ) -> Dict[str, Any]:
        """Delete every worksheet with this title."""
        model = Model(name, [], storage_name=name)
        try:
            with get_gateway().build_session() as sess:
                destroyed = SheetAdapter(sess).destroy_model_storage(model)
        except _UPSTREAM_ERRORS as e:
            raise _upstream_http_error(e)
        if not destroyed:
            raise HTTPException(status_code=404, detail=f"Worksheet {name!r} not found")
        return {"name": name, "deleted": True}

    @app.get("/worksheets/{name}/rows", tags=["Rows"], response_model=RowsResponse)
    def list_rows(
        name: str = PathParam(..., examples=[EXAMPLE_WORKSHEET]),
        columns: List[str] = Query(..., examples=[["name", "timesalady"]]),
        limit: Optional[int] = Query(default=None, ge=1),
        _: None = Depends(require_api_key),
    ) -> RowsResponse:
        """Read rows, restricted to the requested columns."""
        model = table_model(name, columns)
        try:
            with get_gateway().build_session() as sess:
                records = SheetAdapter(sess).read(RowQuery(model, limit=limit))
        except _UPSTREAM_ERRORS as e:
            raise _upstream_http_error(e)
        rows = [{p.field: value for p, value in r.items()} for r in records]
        return RowsResponse(
            worksheet=name,
            columns=[p.field for p in model.properties()],
            count=len(rows),
            rows=rows,
        )

    @app.post(
        "/worksheets/{name}/rows",
        tags=["Rows"],
        response_model=RowCreateResponse,
        status_code=201,
    )
    def append_row(
        req: RowCreateRequest,
        name: str = PathParam(..., examples=[EXAMPLE_WORKSHEET]),
        _: None = Depends(require_api_key),
    ) -> RowCreateResponse:
        """Append one row."""
        model = table_model(name, list(req.values))
        values = {normalize_field_name(k): v for k, v in req.values.items()}
        resource = model.new(**{k: v for k, v in values.items() if k})
        try:
            with get_gateway().build_session() as sess:
                created = SheetAdapter(sess).create([resource])
        except _UPSTREAM_ERRORS as e:
            raise _upstream_http_error(e)
        return RowCreateResponse(worksheet=name, created=created)

    return app
