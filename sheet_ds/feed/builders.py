"""
sheet_ds.feed.builders - Request payloads
==========================================

Pure functions producing the Atom entries the feed service expects for
worksheet creation, header cell writes, and row writes.
"""

from __future__ import annotations

from datetime import date, datetime, time
import re
from typing import Any, Mapping, Sequence
import xml.etree.ElementTree as ET

from sheet_ds.feed.constants import NAMESPACES, NS_ATOM, NS_GS, NS_GSX

for _prefix, _uri in NAMESPACES.items():
    ET.register_namespace(_prefix, _uri)


_FIELD_NAME = re.compile(r"^(?!\d)[\w.-]+$")


def is_field_name(name: str) -> bool:
    """Whether ``name`` can stand as the local part of a ``gsx:`` element."""
    return bool(_FIELD_NAME.match(name)) and not name.lower().startswith("xml")


def _q(ns: str, tag: str) -> str:
    return f"{{{ns}}}{tag}"


def _to_xml(root: ET.Element) -> bytes:
    return ET.tostring(root, encoding="utf-8", xml_declaration=True)


def stringify_value(value: Any) -> str:
    """
    Render a Python value as cell text.

    Examples
    --------
    >>> stringify_value(None)
    ''
    >>> stringify_value(True)
    'true'
    >>> stringify_value(8)
    '8'
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    return str(value)


def worksheet_xml(title: str, column_names: Sequence[str]) -> bytes:
    """
    Entry creating a worksheet with one header row.

    Parameters
    ----------
    title : str
        Worksheet title (the table's storage name)
    column_names : sequence of str
        Normalized column names; only their count goes into the payload
    """
    entry = ET.Element(_q(NS_ATOM, "entry"))
    ET.SubElement(entry, _q(NS_ATOM, "title")).text = title
    ET.SubElement(entry, _q(NS_GS, "colCount")).text = str(len(column_names))
    ET.SubElement(entry, _q(NS_GS, "rowCount")).text = "1"
    return _to_xml(entry)


def cell_xml(cell_url: str, value: str, row: int, col: int) -> bytes:
    """Entry writing ``value`` into the 1-based cell ``(row, col)``."""
    entry = ET.Element(_q(NS_ATOM, "entry"))
    ET.SubElement(entry, _q(NS_ATOM, "id")).text = cell_url
    ET.SubElement(entry, _q(NS_GS, "cell"), {
        "row": str(row),
        "col": str(col),
        "inputValue": value,
    })
    return _to_xml(entry)


def row_xml(values: Mapping[str, Any]) -> bytes:
    """
    Entry carrying one row: a ``gsx:<field>`` element per mapping item,
    in mapping order.
    """
    entry = ET.Element(_q(NS_ATOM, "entry"))
    for field_name, value in values.items():
        if not is_field_name(field_name):
            raise ValueError(f"Not a usable column name: {field_name!r}")
        ET.SubElement(entry, _q(NS_GSX, field_name)).text = stringify_value(value)
    return _to_xml(entry)
