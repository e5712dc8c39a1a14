"""
sheet_ds.feed - Atom feed handling
===================================

This module provides the hypermedia layer of the package:

- Link, LinkSet: relation-indexed references between resources
- Entry, EntryList, Document: parsed feed structures
- FeedPipeline, CallContext: ordered request/response stages
- worksheet_xml, cell_xml, row_xml: request payload builders

"""

from sheet_ds.feed.links import Link, LinkSet
from sheet_ds.feed.document import Document, Entry, EntryList
from sheet_ds.feed.pipeline import CallContext, FeedPipeline, Stage
from sheet_ds.feed.builders import cell_xml, row_xml, stringify_value, worksheet_xml

__all__ = [
    "Link",
    "LinkSet",
    "Document",
    "Entry",
    "EntryList",
    "CallContext",
    "FeedPipeline",
    "Stage",
    "cell_xml",
    "row_xml",
    "stringify_value",
    "worksheet_xml",
]
