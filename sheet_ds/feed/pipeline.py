"""
sheet_ds.feed.pipeline - Request/response pipeline
===================================================

Every HTTP call is carried by a :class:`CallContext`. Before sending, the
request stages run over it; after the response arrives, the response stages
run in a fixed order:

1. raise_for_status - abort on failure statuses
2. parse_atom       - parse Atom bodies into a :class:`Document`
3. extract_links    - root and per-entry link sets
4. extract_entries  - the document's :class:`EntryList`

Each stage has a guard deciding whether it applies to a given call.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Union
import xml.etree.ElementTree as ET

from sheet_ds.core.errors import FeedParseError, SheetsUpstreamError
from sheet_ds.feed.constants import ATOM_TYPE, NAMESPACES
from sheet_ds.feed.document import Document, Entry, EntryList
from sheet_ds.feed.links import LinkSet


@dataclass
class CallContext:
    """
    Shared state of one HTTP call as it moves through the pipeline.

    ``body`` holds the raw response bytes until the parse stage replaces it
    with a :class:`Document`.
    """
    method: str
    url: str
    request_headers: Dict[str, str] = field(default_factory=dict)
    data: Optional[Union[str, bytes]] = None
    status: Optional[int] = None
    response_headers: Mapping[str, str] = field(default_factory=dict)
    body: Any = None
    links: Optional[LinkSet] = None
    entry_links: List[LinkSet] = field(default_factory=list)
    entries: Optional[EntryList] = None

    @property
    def content_type(self) -> str:
        return (self.response_headers.get("Content-Type") or "").strip().lower()

    @property
    def is_parsed(self) -> bool:
        return isinstance(self.body, Document)

    @property
    def document(self) -> Document:
        """The parsed document; raises FeedParseError if the body was not a feed."""
        if not isinstance(self.body, Document):
            raise FeedParseError(
                f"Expected {ATOM_TYPE} response, got {self.content_type or 'no content type'!r}",
                self.url,
            )
        return self.body

    def text(self) -> str:
        body = self.body.raw if isinstance(self.body, Document) else self.body
        if isinstance(body, bytes):
            return body.decode("utf-8", errors="replace")
        return body or ""


@dataclass(frozen=True)
class Stage:
    """A named pipeline step applied when ``guard`` accepts the call."""
    name: str
    guard: Callable[[CallContext], bool]
    apply: Callable[[CallContext], None]


def _always(ctx: CallContext) -> bool:
    return True


# ---------------- request stages ----------------

def auth_stage(authorization: str) -> Stage:
    """Build the stage that stamps the Authorization header on each request."""
    def apply(ctx: CallContext) -> None:
        ctx.request_headers["Authorization"] = authorization
    return Stage("auth", _always, apply)


# ---------------- response stages ----------------

def _raise_for_status(ctx: CallContext) -> None:
    status = ctx.status or 0
    if status >= 400 or status in (301, 302, 303, 307, 308):
        raise SheetsUpstreamError(status, ctx.text(), ctx.url, dict(ctx.response_headers))


def _is_atom(ctx: CallContext) -> bool:
    return ctx.content_type.startswith(ATOM_TYPE)


def _parse_atom(ctx: CallContext) -> None:
    raw = ctx.body if isinstance(ctx.body, bytes) else (ctx.body or "").encode("utf-8")
    try:
        root = ET.fromstring(raw)
    except ET.ParseError as e:
        raise FeedParseError(f"Malformed Atom document: {e}", ctx.url) from e
    ctx.body = Document(raw=raw, root=root)


def _has_document(ctx: CallContext) -> bool:
    return ctx.is_parsed


def _extract_links(ctx: CallContext) -> None:
    doc = ctx.body
    ctx.links = LinkSet.from_element(doc.root)
    ctx.entry_links = [LinkSet.from_element(e) for e in doc.entry_elements()]
    doc.links = ctx.links


def _has_entries(ctx: CallContext) -> bool:
    return ctx.is_parsed and bool(ctx.entry_links)


def _extract_entries(ctx: CallContext) -> None:
    doc = ctx.body
    entries = []
    for elt, links in zip(doc.entry_elements(), ctx.entry_links):
        title = elt.findtext("atom:title", default="", namespaces=NAMESPACES)
        entries.append(Entry(title=title, links=links, element=elt))
    ctx.entries = EntryList(entries)
    doc.entries = ctx.entries


RESPONSE_STAGES: Sequence[Stage] = (
    Stage("raise_for_status", _always, _raise_for_status),
    Stage("parse_atom", _is_atom, _parse_atom),
    Stage("extract_links", _has_document, _extract_links),
    Stage("extract_entries", _has_entries, _extract_entries),
)


class FeedPipeline:
    """
    Fixed, ordered request and response stages.

    Parameters
    ----------
    request_stages : sequence of Stage
        Run over the context before the request is sent
    response_stages : sequence of Stage
        Run over the context after the response is received
    """

    def __init__(
        self,
        request_stages: Sequence[Stage] = (),
        response_stages: Sequence[Stage] = RESPONSE_STAGES,
    ) -> None:
        self.request_stages = tuple(request_stages)
        self.response_stages = tuple(response_stages)

    @classmethod
    def default(cls, authorization: str) -> "FeedPipeline":
        return cls(request_stages=(auth_stage(authorization),))

    def before_request(self, ctx: CallContext) -> CallContext:
        return self._run(self.request_stages, ctx)

    def after_response(self, ctx: CallContext) -> CallContext:
        return self._run(self.response_stages, ctx)

    @staticmethod
    def _run(stages: Sequence[Stage], ctx: CallContext) -> CallContext:
        for stage in stages:
            if stage.guard(ctx):
                stage.apply(ctx)
        return ctx
