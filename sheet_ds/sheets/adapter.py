"""
sheet_ds.sheets.adapter - Table CRUD over worksheet feeds
==========================================================

Maps storage-level operations (create/destroy a table) and row-level
operations (create, read, update, delete) onto sequences of feed requests.
Each worksheet is a table; its header row holds the normalized column names
and its list feed holds one entry per row.
"""

from __future__ import annotations

import logging
from collections import OrderedDict
from typing import Any, Callable, Dict, Iterable, Iterator, List, Mapping, Optional, Sequence, Tuple

from sheet_ds.core.errors import RowNotFoundError
from sheet_ds.core.session import SheetFeedSession
from sheet_ds.feed.builders import cell_xml, row_xml, worksheet_xml
from sheet_ds.feed.constants import REL_CELLS_FEED, REL_EDIT, REL_POST, REL_SELF
from sheet_ds.feed.document import Document, Entry
from sheet_ds.sheets.navigator import Navigator
from sheet_ds.sheets.records import normalize_field_name

logger = logging.getLogger("sheet_ds.sheets")


class SheetAdapter:
    """
    Table-level adapter for one spreadsheet.

    Models, resources, collections, and queries are duck-typed; see
    :mod:`sheet_ds.sheets.records` for the attributes each must expose.

    Parameters
    ----------
    sess : SheetFeedSession
        Active feed session
    name : str
        Repository name passed to models when resolving storage names and
        properties
    spreadsheet_path : str, optional
        Spreadsheet resource path; defaults to the session's configuration

    Examples
    --------
    >>> adapter = SheetAdapter(sess)
    >>> adapter.create_model_storage(crew)
    True
    >>> adapter.create([crew.new(name="Mike Nelson", times_a_lady=8)])
    1
    >>> adapter.read(Query(crew))
    [{...}]
    """

    def __init__(
        self,
        sess: SheetFeedSession,
        name: str = "default",
        spreadsheet_path: Optional[str] = None,
    ) -> None:
        self.sess = sess
        self.name = name
        self.navigator = Navigator(sess, spreadsheet_path)

    # -------------------------------------------------------------------------
    # Storage
    # -------------------------------------------------------------------------

    @property
    def field_naming_convention(self) -> Callable[[Any], str]:
        """Maps a property to its wire field name."""
        return lambda prop: normalize_field_name(prop.name)

    def storage_exists(self, storage_name: str) -> bool:
        return self.navigator.find_worksheet_entry(storage_name) is not None

    def column_names(self, model) -> List[str]:
        convention = model.field_naming_convention(self.name)
        return [convention(p) for p in model.properties(self.name)]

    def create_model_storage(self, model) -> bool:
        """
        Create the model's worksheet and write its header row.

        Returns False without touching anything if the worksheet exists.
        A failure while writing header cells leaves the worksheet partially
        configured.
        """
        storage_name = model.storage_name(self.name)
        if self.storage_exists(storage_name):
            return False

        columns = self.column_names(model)
        worksheets = self.navigator.worksheets_collection()
        post_link = worksheets.links.require(REL_POST, "worksheets feed")
        resp = self.sess.post(post_link, worksheet_xml(storage_name, columns))
        cells_url = resp.document.links.require(
            REL_CELLS_FEED, f"new worksheet {storage_name!r}"
        ).href

        for index, colname in enumerate(columns, start=1):
            cell_url = f"{cells_url}/R1C{index}"
            self.sess.put(cell_url, cell_xml(cell_url, colname, 1, index))

        logger.info("created worksheet %r with columns %s", storage_name, columns)
        return True

    def upgrade_model_storage(self, model) -> bool:
        raise NotImplementedError("Worksheet schema upgrades are not supported")

    def destroy_model_storage(self, model) -> bool:
        """Delete every worksheet titled with the model's storage name."""
        storage_name = model.storage_name(self.name)
        if not self.storage_exists(storage_name):
            return False
        for ws in self.navigator.worksheet_entries(storage_name):
            self.sess.delete(ws.links.require(REL_SELF, f"worksheet {storage_name!r}"))
        logger.info("destroyed worksheet %r", storage_name)
        return True

    def auto_migrate(self, *models) -> None:
        """Drop and recreate storage for each model."""
        for model in models:
            self.destroy_model_storage(model)
            self.create_model_storage(model)

    # -------------------------------------------------------------------------
    # Rows
    # -------------------------------------------------------------------------

    def create(self, resources: Sequence) -> int:
        """
        Append resources as new rows.

        Each resource's serial is set to the worksheet's row count plus one,
        counted again before every insertion.
        """
        for storage_name, group in self._group_by_storage(resources).items():
            for resource in group:
                rows = self.navigator.row_list_document(storage_name)
                resource.initialize_serial(self.navigator.row_count(storage_name, rows) + 1)
                post_link = self.navigator.row_post_link(storage_name, rows)
                self.sess.post(post_link, self._row_payload(resource))
                logger.debug("appended row to %r", storage_name)
        return len(resources)

    def read(self, query) -> List[Dict[Any, Any]]:
        storage_name = query.model.storage_name(self.name)
        rows = self.navigator.row_list_document(storage_name)
        records = [self._entry_record(entry, query.fields) for entry in rows.entries]
        return query.filter_records(records)

    def update(self, attributes: Mapping, collection) -> int:
        """
        Rewrite the rows of every resource in ``collection``.

        Resources must already carry their new values; the whole current row
        is sent, not only ``attributes``. Returns ``len(attributes)``.
        """
        for resource, entry in self._located_entries(collection):
            edit_link = entry.links.require(REL_EDIT, f"row {entry.title!r}")
            self.sess.put(edit_link, self._row_payload(resource))
        return len(attributes)

    def delete(self, collection) -> int:
        for resource, entry in self._located_entries(collection):
            self.sess.delete(entry.links.require(REL_EDIT, f"row {entry.title!r}"))
        return len(collection)

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _group_by_storage(self, resources: Iterable) -> "OrderedDict[str, List[Any]]":
        groups: "OrderedDict[str, List[Any]]" = OrderedDict()
        for resource in resources:
            groups.setdefault(resource.model.storage_name(self.name), []).append(resource)
        return groups

    def _row_payload(self, resource) -> bytes:
        return row_xml(resource.attributes(by="field"))

    @staticmethod
    def _entry_record(entry: Entry, fields: Sequence) -> Dict[Any, Any]:
        return {prop: prop.typecast(entry.cell(prop.field)) for prop in fields}

    def _located_entries(self, collection) -> Iterator[Tuple[Any, Entry]]:
        storage_name = collection.storage_name(self.name)
        rows = self.navigator.row_list_document(storage_name)
        model_key = collection.model.key
        for resource in collection:
            yield resource, self._entry_for_resource(rows, resource, model_key, storage_name)

    @staticmethod
    def _entry_for_resource(
        rows: Document, resource, model_key: Sequence, storage_name: str
    ) -> Entry:
        for entry in rows.entries:
            if all(
                prop.typecast(entry.cell(prop.field)) == resource.attribute_get(prop.name)
                for prop in model_key
            ):
                return entry
        raise RowNotFoundError(
            storage_name, {p.name: resource.attribute_get(p.name) for p in model_key}
        )
