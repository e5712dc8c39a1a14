"""
sheet_ds.feed.constants - Protocol constants
=============================================

Namespaces, media type, and link relations used by the spreadsheet feeds.
"""

NS_ATOM = "http://www.w3.org/2005/Atom"
NS_GS = "http://schemas.google.com/spreadsheets/2006"
NS_GD = "http://schemas.google.com/g/2005"
NS_GSX = "http://schemas.google.com/spreadsheets/2006/extended"

NAMESPACES = {
    "atom": NS_ATOM,
    "gs": NS_GS,
    "gd": NS_GD,
    "gsx": NS_GSX,
}

ATOM_TYPE = "application/atom+xml"

# Link relations
REL_SELF = "self"
REL_EDIT = "edit"
REL_LIST_FEED = "http://schemas.google.com/spreadsheets/2006#listfeed"
REL_WORKSHEETS_FEED = "http://schemas.google.com/spreadsheets/2006#worksheetsfeed"
REL_CELLS_FEED = "http://schemas.google.com/spreadsheets/2006#cellsfeed"
REL_POST = "http://schemas.google.com/g/2005#post"

# Sent on every PUT/DELETE: overwrite whatever version the service holds.
OVERWRITE_PRECONDITION = {"If-Match": "*"}
