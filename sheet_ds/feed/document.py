"""
sheet_ds.feed.document - Parsed feed documents
===============================================

A :class:`Document` wraps one parsed response. The response pipeline fills in
its ``links`` and ``entries`` after parsing; entries themselves are frozen.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import re
from typing import Callable, Dict, Iterable, Iterator, List, Optional, Pattern, Union
import xml.etree.ElementTree as ET

from sheet_ds.feed.constants import NAMESPACES, NS_GSX, REL_SELF
from sheet_ds.feed.links import LinkSet

TitlePattern = Union[str, Pattern[str], Callable[[str], bool]]


def _strip_ns(tag: str) -> str:
    """Strip XML namespace from a tag name."""
    return tag.split("}", 1)[-1] if "}" in tag else tag


def title_matches(pattern: TitlePattern, title: str) -> bool:
    """
    Test a title against a pattern.

    Strings compare for equality, compiled regular expressions are searched
    anywhere in the title, and callables are used as predicates.
    """
    if isinstance(pattern, str):
        return pattern == title
    if isinstance(pattern, re.Pattern):
        return pattern.search(title) is not None
    if callable(pattern):
        return bool(pattern(title))
    raise TypeError(f"Unsupported title pattern: {pattern!r}")


@dataclass(frozen=True)
class Entry:
    """
    One item of a feed: a worksheet in the worksheets feed or a row in a
    list feed.

    Attributes
    ----------
    title : str
        Text of the entry's ``atom:title``
    links : LinkSet
        Links declared on the entry
    element : Element, optional
        The source ``atom:entry`` element, kept for row cell access
    """
    title: str
    links: LinkSet
    element: Optional[ET.Element] = field(default=None, compare=False, repr=False)

    @property
    def url(self) -> str:
        """The entry's canonical URL, its ``self`` link."""
        return self.links.require(REL_SELF, f"entry {self.title!r}").href

    def cell(self, field_name: str) -> Optional[str]:
        """Raw text of the ``gsx:<field_name>`` child, or None if absent."""
        if self.element is None:
            return None
        elt = self.element.find(f"gsx:{field_name}", NAMESPACES)
        if elt is None:
            return None
        return elt.text or ""

    def cells(self) -> Dict[str, str]:
        """All ``gsx:`` children as a field name -> text mapping."""
        if self.element is None:
            return {}
        prefix = "{%s}" % NS_GSX
        return {
            _strip_ns(child.tag): child.text or ""
            for child in self.element
            if child.tag.startswith(prefix)
        }

    def __str__(self) -> str:
        self_link = self.links.by_relation(REL_SELF)
        return f"<{self.title}> {self_link.href if self_link else ''}".rstrip()


class EntryList:
    """Entries of a feed in document order."""

    def __init__(self, entries: Iterable[Entry] = ()) -> None:
        self._entries: List[Entry] = list(entries)

    def find(self, pattern: TitlePattern) -> Optional[Entry]:
        """Return the first entry whose title matches ``pattern``."""
        for entry in self._entries:
            if title_matches(pattern, entry.title):
                return entry
        return None

    def select(self, pattern: TitlePattern) -> List[Entry]:
        """Return every entry whose title matches ``pattern``."""
        return [e for e in self._entries if title_matches(pattern, e.title)]

    def titles(self) -> List[str]:
        return [e.title for e in self._entries]

    def __iter__(self) -> Iterator[Entry]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __getitem__(self, index: int) -> Entry:
        return self._entries[index]

    def __repr__(self) -> str:
        return f"EntryList({self.titles()!r})"


@dataclass
class Document:
    """
    A parsed Atom response.

    Attributes
    ----------
    raw : bytes
        Response body as received
    root : Element
        Parsed document root (an ``atom:feed`` or ``atom:entry``)
    links : LinkSet
        Links declared on the root element
    entries : EntryList
        Child entries, empty for single-entry documents
    """
    raw: bytes
    root: ET.Element
    links: LinkSet = field(default_factory=LinkSet)
    entries: EntryList = field(default_factory=EntryList)

    def entry_elements(self) -> List[ET.Element]:
        return self.root.findall("atom:entry", NAMESPACES)

    @property
    def title(self) -> Optional[str]:
        return self.root.findtext("atom:title", default=None, namespaces=NAMESPACES)
