"""
Pytest configuration and shared fixtures.
"""

from datetime import datetime

import pytest
from unittest.mock import Mock

from sheet_ds.core.session import FeedAuth, FeedConfig, SheetFeedSession
from sheet_ds.sheets.adapter import SheetAdapter
from sheet_ds.sheets.records import Model, Property, Serial

from fakefeeds import FakeFeedService, SPREADSHEET_URL, TOKEN


@pytest.fixture
def mock_session():
    """Create a mock SheetFeedSession."""
    session = Mock()
    session.cfg = Mock()
    session.cfg.spreadsheet_path = "/feeds/spreadsheets/private/full/sheet-key"
    session.base = "https://sheets.test/"
    session.timeout = 60.0
    session.verify = True
    return session


@pytest.fixture
def fake_service():
    """In-memory feed service used as the session transport."""
    return FakeFeedService()


@pytest.fixture
def feed_session(fake_service):
    cfg = FeedConfig(
        spreadsheet_url=SPREADSHEET_URL,
        auth=FeedAuth("authsub", TOKEN),
        transport=fake_service,
    )
    with SheetFeedSession(cfg) as sess:
        yield sess


@pytest.fixture
def adapter(feed_session):
    return SheetAdapter(feed_session)


@pytest.fixture
def crew_model():
    """The crew table: serial id, name, times a lady, creation time."""
    return Model(
        "CrewMember",
        [
            Serial("id"),
            Property("name"),
            Property("times_a_lady", int),
            Property("created_at", datetime, default=lambda: datetime(1999, 9, 9, 9, 9, 9)),
        ],
        storage_name="crew",
    )


@pytest.fixture
def crew_storage(adapter, crew_model):
    """Adapter with the crew worksheet already created."""
    adapter.create_model_storage(crew_model)
    return adapter


@pytest.fixture
def sample_list_feed_xml():
    """A list feed with two rows."""
    return b"""<?xml version="1.0" encoding="UTF-8"?>
<feed xmlns="http://www.w3.org/2005/Atom"
      xmlns:gsx="http://schemas.google.com/spreadsheets/2006/extended">
  <title>crew</title>
  <link rel="self" type="application/atom+xml" href="https://sheets.test/feeds/list/k/od1/private/full"/>
  <link rel="http://schemas.google.com/g/2005#post" type="application/atom+xml"
        href="https://sheets.test/feeds/list/k/od1/private/full"/>
  <entry>
    <title>Mike Nelson</title>
    <link rel="self" href="https://sheets.test/feeds/list/k/od1/private/full/r1"/>
    <link rel="edit" href="https://sheets.test/feeds/list/k/od1/private/full/r1/1"/>
    <gsx:id>1</gsx:id>
    <gsx:name>Mike Nelson</gsx:name>
    <gsx:timesalady>8</gsx:timesalady>
  </entry>
  <entry>
    <title>Tom Servo</title>
    <link rel="self" href="https://sheets.test/feeds/list/k/od1/private/full/r2"/>
    <link rel="edit" href="https://sheets.test/feeds/list/k/od1/private/full/r2/3"/>
    <gsx:id>2</gsx:id>
    <gsx:name>Tom Servo</gsx:name>
    <gsx:timesalady>100</gsx:timesalady>
  </entry>
</feed>"""


@pytest.fixture
def sample_spreadsheet_xml():
    """A single-entry spreadsheet document."""
    return b"""<?xml version="1.0" encoding="UTF-8"?>
<entry xmlns="http://www.w3.org/2005/Atom">
  <title>Test Spreadsheet</title>
  <link rel="self" href="https://sheets.test/feeds/spreadsheets/private/full/k"/>
  <link rel="http://schemas.google.com/spreadsheets/2006#worksheetsfeed"
        type="application/atom+xml" title="Worksheets"
        href="https://sheets.test/feeds/worksheets/k/private/full"/>
</entry>"""
