"""
sheet_ds.sheets.navigator - Link navigation
============================================

Resolves named capabilities of a spreadsheet (its worksheets collection, a
worksheet's row list, the row insertion endpoint) by following link
relations from the spreadsheet resource down. Nothing is cached: every call
walks spreadsheet -> worksheets -> worksheet -> list again.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Union

from sheet_ds.core.errors import WorksheetNotFoundError
from sheet_ds.core.session import SheetFeedSession
from sheet_ds.feed.constants import REL_LIST_FEED, REL_POST, REL_WORKSHEETS_FEED
from sheet_ds.feed.document import Document, Entry, TitlePattern
from sheet_ds.feed.links import Link

logger = logging.getLogger("sheet_ds.sheets")


class Navigator:
    """
    Follows link relations through a spreadsheet's feeds.

    Parameters
    ----------
    sess : SheetFeedSession
        Active feed session
    spreadsheet_path : str, optional
        Path (or URL) of the spreadsheet resource; defaults to the session's
        configured spreadsheet

    Examples
    --------
    >>> nav = Navigator(sess)
    >>> nav.find_worksheet_entry("crew").title
    'crew'
    >>> rows = nav.row_list_document("crew").entries
    """

    def __init__(self, sess: SheetFeedSession, spreadsheet_path: Optional[str] = None) -> None:
        self.sess = sess
        self.spreadsheet_path = spreadsheet_path or sess.cfg.spreadsheet_path

    def follow_link(self, link_or_url: Union[Link, str]) -> Document:
        """GET a link's target and return the parsed document."""
        return self.sess.get(link_or_url).document

    def spreadsheet_root(self) -> Document:
        return self.follow_link(self.spreadsheet_path)

    def worksheets_feed_link(self) -> Link:
        return self.spreadsheet_root().links.require(REL_WORKSHEETS_FEED, "spreadsheet")

    def worksheets_collection(self) -> Document:
        return self.follow_link(self.worksheets_feed_link())

    def find_worksheet_entry(self, name_pattern: TitlePattern) -> Optional[Entry]:
        """First worksheet whose title matches, or None."""
        return self.worksheets_collection().entries.find(name_pattern)

    def worksheet_entries(self, name_pattern: TitlePattern) -> List[Entry]:
        """Every worksheet whose title matches."""
        return self.worksheets_collection().entries.select(name_pattern)

    def require_worksheet_entry(self, name: str) -> Entry:
        entry = self.find_worksheet_entry(name)
        if entry is None:
            raise WorksheetNotFoundError(name)
        return entry

    def list_feed_link(self, worksheet_name: str) -> Link:
        entry = self.require_worksheet_entry(worksheet_name)
        return entry.links.require(REL_LIST_FEED, f"worksheet {worksheet_name!r}")

    def row_list_document(self, worksheet_name: str) -> Document:
        """The worksheet's list feed: one entry per data row."""
        return self.follow_link(self.list_feed_link(worksheet_name))

    def row_post_link(self, worksheet_name: str, rows: Optional[Document] = None) -> Link:
        """
        Endpoint accepting new rows for the worksheet. Pass ``rows`` to reuse
        a list feed already fetched.
        """
        doc = rows if rows is not None else self.row_list_document(worksheet_name)
        return doc.links.require(REL_POST, f"list feed of {worksheet_name!r}")

    def row_count(self, worksheet_name: str, rows: Optional[Document] = None) -> int:
        doc = rows if rows is not None else self.row_list_document(worksheet_name)
        count = len(doc.entries)
        logger.debug("worksheet %r holds %d rows", worksheet_name, count)
        return count
