"""
Tests for sheet_ds.core module.
"""

import pytest
from unittest.mock import MagicMock, patch

from sheet_ds.core.errors import (
    MissingRelationError,
    RowNotFoundError,
    SheetFeedError,
    SheetsUpstreamError,
    WorksheetNotFoundError,
)
from sheet_ds.core.session import FeedAuth, FeedConfig, SheetFeedSession
from sheet_ds.core.connection import ConnectionContext
from sheet_ds.core.errors import FeedParseError
from sheet_ds.sheets.adapter import SheetAdapter

from fakefeeds import SPREADSHEET_URL, TOKEN


class TestFeedAuth:
    """Tests for FeedAuth dataclass."""

    def test_authsub_header(self):
        auth = FeedAuth("authsub", "token123")
        assert auth.header_value() == 'AuthSub token="token123"'

    def test_bearer_header(self):
        auth = FeedAuth("bearer", "token123")
        assert auth.header_value() == "Bearer token123"

    def test_unknown_kind_raises(self):
        with pytest.raises(ValueError):
            FeedAuth("basic", "token").header_value()


class TestFeedConfig:
    """Tests for FeedConfig dataclass."""

    def test_default_values(self):
        cfg = FeedConfig(
            spreadsheet_url="https://sheets.test/feeds/spreadsheets/private/full/k",
            auth=FeedAuth("authsub", "t"),
        )
        assert cfg.timeout == 60.0
        assert cfg.retries == 0
        assert cfg.verify is True
        assert cfg.transport is None

    def test_site_and_path(self):
        cfg = FeedConfig(
            spreadsheet_url="https://sheets.test/feeds/spreadsheets/private/full/k",
            auth=FeedAuth("authsub", "t"),
        )
        assert cfg.site == "https://sheets.test/"
        assert cfg.spreadsheet_path == "/feeds/spreadsheets/private/full/k"


class TestErrors:
    """Tests for the error taxonomy."""

    def test_upstream_error_attributes(self):
        err = SheetsUpstreamError(
            status=404,
            body="Not found",
            url="https://sheets.test/x",
            headers={"x-request-id": "123"},
        )
        assert err.status == 404
        assert err.body == "Not found"
        assert err.url == "https://sheets.test/x"
        assert err.headers == {"x-request-id": "123"}

    def test_error_message_truncation(self):
        err = SheetsUpstreamError(500, "x" * 2000, "https://sheets.test")
        assert len(str(err)) < 1500

    def test_all_errors_share_base(self):
        for err in (
            SheetsUpstreamError(500, "", "u"),
            FeedParseError("bad"),
            MissingRelationError("edit"),
            WorksheetNotFoundError("crew"),
            RowNotFoundError("crew", {"id": 1}),
        ):
            assert isinstance(err, SheetFeedError)

    def test_missing_relation_message(self):
        err = MissingRelationError("edit", "row 'Mike'")
        assert err.rel == "edit"
        assert "edit" in str(err) and "row 'Mike'" in str(err)


class TestSheetFeedSession:
    """Tests for SheetFeedSession."""

    def _cfg(self, **kwargs):
        return FeedConfig(
            spreadsheet_url="https://sheets.test/feeds/spreadsheets/private/full/k",
            auth=FeedAuth("authsub", "mytoken"),
            **kwargs,
        )

    @patch("sheet_ds.core.session.requests.Session")
    def test_session_creation(self, mock_session_class):
        mock_session = MagicMock()
        mock_session_class.return_value = mock_session

        sess = SheetFeedSession(self._cfg())
        assert sess.base == "https://sheets.test/"
        mock_session.headers.update.assert_called()
        assert mock_session.mount.call_count == 2

    @patch("sheet_ds.core.session.requests.Session")
    def test_custom_transport_is_mounted(self, mock_session_class):
        mock_session = MagicMock()
        mock_session_class.return_value = mock_session
        transport = MagicMock()

        SheetFeedSession(self._cfg(transport=transport))
        mock_session.mount.assert_any_call("https://", transport)
        mock_session.mount.assert_any_call("http://", transport)

    @patch("sheet_ds.core.session.requests.Session")
    def test_context_manager(self, mock_session_class):
        mock_session = MagicMock()
        mock_session_class.return_value = mock_session

        with SheetFeedSession(self._cfg()) as sess:
            assert sess is not None

        mock_session.close.assert_called_once()

    def test_every_request_is_authorized(self, feed_session, fake_service):
        feed_session.get(SPREADSHEET_URL)
        feed_session.get("/feeds/worksheets/sheet-key/private/full")

        assert len(fake_service.requests) == 2
        for req in fake_service.requests:
            assert req.headers["Authorization"] == f'AuthSub token="{TOKEN}"'

    def test_relative_urls_resolve_against_site(self, feed_session, fake_service):
        feed_session.get("/feeds/spreadsheets/private/full/sheet-key")
        assert fake_service.requests[0].url == SPREADSHEET_URL

    def test_get_parses_atom(self, feed_session):
        ctx = feed_session.get(SPREADSHEET_URL)
        assert ctx.status == 200
        assert ctx.document.title == "Test Spreadsheet"

    def test_failure_status_raises(self, feed_session, fake_service):
        fake_service.fail("GET", "/feeds/spreadsheets", 503)
        with pytest.raises(SheetsUpstreamError) as exc:
            feed_session.get(SPREADSHEET_URL)
        assert exc.value.status == 503
        assert "Injected failure" in exc.value.body

    def test_put_and_delete_send_overwrite_precondition(self, feed_session, fake_service):
        ws = fake_service.add_worksheet("crew", ["name"])
        feed_session.put(f"{ws.cells_url}/R1C1", b"<entry xmlns='http://www.w3.org/2005/Atom'>"
                         b"<gs:cell xmlns:gs='http://schemas.google.com/spreadsheets/2006' "
                         b"row='1' col='1' inputValue='name'/></entry>")
        feed_session.delete(ws.self_url)

        put, delete = fake_service.requests
        assert put.headers["If-Match"] == "*"
        assert put.headers["Content-Type"] == "application/atom+xml"
        assert delete.headers["If-Match"] == "*"

    def test_unparsed_body_has_no_document(self, feed_session, fake_service):
        ws = fake_service.add_worksheet("crew", ["name"])
        ctx = feed_session.delete(ws.self_url)
        assert not ctx.is_parsed
        with pytest.raises(FeedParseError):
            ctx.document


class TestConnectionContext:
    """Tests for ConnectionContext."""

    @patch.dict("os.environ", {}, clear=True)
    def test_missing_url_raises(self):
        with pytest.raises(ValueError, match="Missing spreadsheet_url"):
            ConnectionContext(spreadsheet_url="", token="t")

    @patch.dict("os.environ", {}, clear=True)
    def test_missing_credentials_raises(self):
        with pytest.raises(ValueError, match="Missing credentials"):
            ConnectionContext(spreadsheet_url=SPREADSHEET_URL)

    def test_bad_auth_scheme_raises(self):
        with pytest.raises(ValueError, match="auth_scheme"):
            ConnectionContext(spreadsheet_url=SPREADSHEET_URL, token="t", auth_scheme="basic")

    @patch.dict("os.environ", {
        "GSHEET_URL": "https://env.sheets.test/feeds/spreadsheets/private/full/k",
        "GSHEET_TOKEN": "envtoken",
        "GSHEET_AUTH_SCHEME": "bearer",
    })
    def test_reads_from_environment(self):
        conn = ConnectionContext()
        assert conn.spreadsheet_url == "https://env.sheets.test/feeds/spreadsheets/private/full/k"
        assert conn.session.cfg.auth == FeedAuth("bearer", "envtoken")

    def test_explicit_params_override_env(self):
        conn = ConnectionContext(
            spreadsheet_url="https://explicit.test/feeds/spreadsheets/private/full/k",
            token="explicit",
            repository="other",
        )
        assert conn.spreadsheet_url == "https://explicit.test/feeds/spreadsheets/private/full/k"
        assert conn.repository == "other"

    def test_get_adapter_uses_transport(self, fake_service):
        with ConnectionContext(
            spreadsheet_url=SPREADSHEET_URL, token=TOKEN, transport=fake_service
        ) as conn:
            adapter = conn.get_adapter()
            assert isinstance(adapter, SheetAdapter)
            assert adapter.storage_exists("crew") is False
        assert len(fake_service.requests) == 2
