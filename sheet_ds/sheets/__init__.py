"""
sheet_ds.sheets - Worksheets as tables
=======================================

- SheetAdapter: storage and row CRUD over a spreadsheet's worksheets
- Navigator: link-relation navigation from spreadsheet to row lists
- Model, Property, Resource, Collection, Query, Condition: a minimal record
  layer the adapter can work with

"""

from sheet_ds.sheets.records import (
    Collection,
    Condition,
    Model,
    Property,
    Query,
    Resource,
    Serial,
    normalize_field_name,
)
from sheet_ds.sheets.navigator import Navigator
from sheet_ds.sheets.adapter import SheetAdapter

__all__ = [
    "SheetAdapter",
    "Navigator",
    "Collection",
    "Condition",
    "Model",
    "Property",
    "Query",
    "Resource",
    "Serial",
    "normalize_field_name",
]
