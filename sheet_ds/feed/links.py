"""
sheet_ds.feed.links - Typed, relation-indexed links
====================================================
"""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import total_ordering
from typing import Iterable, Iterator, Optional, Tuple
import xml.etree.ElementTree as ET

from sheet_ds.core.errors import MissingRelationError
from sheet_ds.feed.constants import NAMESPACES


@total_ordering
@dataclass(frozen=True)
class Link:
    """
    A reference from a feed or entry to a related resource.

    Links order by ``(href, rel, rev, type)``; ``title`` takes no part in
    comparisons. A missing ``rel``, ``rev``, or ``type`` sorts before any value.

    Attributes
    ----------
    href : str
        Target URL
    rel : str, optional
        Relation type, e.g. ``"edit"`` or a full relation URI
    rev : str, optional
        Reverse relation
    title : str, optional
        Human readable label
    type : str, optional
        Media type of the target
    """
    href: str
    rel: Optional[str] = None
    rev: Optional[str] = None
    title: Optional[str] = field(default=None, compare=False)
    type: Optional[str] = None

    def __str__(self) -> str:
        return self.href

    def _sort_key(self) -> Tuple[str, str, str, str]:
        return (self.href, self.rel or "", self.rev or "", self.type or "")

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Link):
            return NotImplemented
        return self._sort_key() < other._sort_key()

    @classmethod
    def from_element(cls, elt: ET.Element) -> "Link":
        return cls(
            href=elt.attrib.get("href", ""),
            rel=elt.attrib.get("rel"),
            rev=elt.attrib.get("rev"),
            title=elt.attrib.get("title"),
            type=elt.attrib.get("type"),
        )


class LinkSet:
    """
    Links declared by one document root or one entry, in document order.

    Each relation is assumed to appear at most once; lookups return the
    first link carrying it.
    """

    def __init__(self, links: Iterable[Link] = ()) -> None:
        self._links: Tuple[Link, ...] = tuple(links)

    @classmethod
    def from_element(cls, elt: ET.Element) -> "LinkSet":
        """Collect the ``atom:link`` children of an element."""
        return cls(Link.from_element(l) for l in elt.findall("atom:link", NAMESPACES))

    def by_relation(self, rel: str) -> Optional[Link]:
        for link in self._links:
            if link.rel == rel:
                return link
        return None

    def require(self, rel: str, where: Optional[str] = None) -> Link:
        """Like :meth:`by_relation` but raise MissingRelationError when absent."""
        link = self.by_relation(rel)
        if link is None:
            raise MissingRelationError(rel, where)
        return link

    def __iter__(self) -> Iterator[Link]:
        return iter(self._links)

    def __len__(self) -> int:
        return len(self._links)

    def __contains__(self, rel: object) -> bool:
        return any(l.rel == rel for l in self._links)

    def __repr__(self) -> str:
        return f"LinkSet({list(self._links)!r})"
