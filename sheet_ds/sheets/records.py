"""
sheet_ds.sheets.records - Minimal record layer
===============================================

Models, properties, resources, and queries in the shape the
:class:`~sheet_ds.sheets.adapter.SheetAdapter` consumes. Any host object layer
exposing the same attributes can be used instead.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
import operator
from typing import (
    Any, Callable, Dict, Iterable, Iterator, List, Mapping, Optional, Sequence, Tuple,
)

from sheet_ds.feed.builders import is_field_name


def normalize_field_name(name: str) -> str:
    """
    Column/field name used on the wire: alphanumerics only, lower-cased.

    Examples
    --------
    >>> normalize_field_name("times_a_lady")
    'timesalady'
    >>> normalize_field_name("createdAt")
    'createdat'
    """
    return "".join(ch for ch in str(name) if ch.isalnum()).lower()


_TRUE_TEXT = {"true", "t", "1", "yes", "y"}
_FALSE_TEXT = {"false", "f", "0", "no", "n"}


def _to_bool(text: str) -> Optional[bool]:
    lowered = text.strip().lower()
    if lowered in _TRUE_TEXT:
        return True
    if lowered in _FALSE_TEXT:
        return False
    raise ValueError(f"Not a boolean: {text!r}")


_CASTS: Dict[type, Callable[[str], Any]] = {
    int: lambda s: int(s.strip()),
    float: lambda s: float(s.strip()),
    Decimal: lambda s: Decimal(s.strip()),
    bool: _to_bool,
    datetime: lambda s: datetime.fromisoformat(s.strip()),
    date: lambda s: date.fromisoformat(s.strip()),
}


@dataclass(frozen=True)
class Property:
    """
    One column of a model.

    Parameters
    ----------
    name : str
        Attribute name on resources
    kind : type
        Python type cell text is cast to (str, int, float, Decimal, bool,
        date, datetime)
    key : bool
        Part of the model's key
    serial : bool
        Assigned by the adapter on create
    default : value or callable, optional
        Initial value for new resources
    field : str, optional
        Wire name; defaults to the normalized ``name``
    """
    name: str
    kind: type = str
    key: bool = False
    serial: bool = False
    default: Any = field(default=None, compare=False, hash=False)
    field: str = ""

    def __post_init__(self) -> None:
        if not self.field:
            object.__setattr__(self, "field", normalize_field_name(self.name))
        if not is_field_name(self.field):
            raise ValueError(
                f"Property {self.name!r} has no usable column name (got {self.field!r})"
            )

    def typecast(self, text: Optional[str]) -> Any:
        """
        Convert raw cell text to this property's type.

        Empty text reads as ``None`` for every kind but ``str``, which keeps
        it as ``""``. A ``None`` string value is therefore written as an empty
        cell and comes back as ``""``.
        """
        if text is None:
            return None
        if self.kind is str:
            return text
        if not text.strip():
            return None
        cast = _CASTS.get(self.kind, self.kind)
        return cast(text)

    def default_value(self) -> Any:
        return self.default() if callable(self.default) else self.default


def Serial(name: str = "id") -> Property:
    """Integer key property assigned by the adapter on create."""
    return Property(name, int, key=True, serial=True)


class Model:
    """
    A table definition.

    Parameters
    ----------
    name : str
        Model name
    properties : sequence of Property
        Columns in declared order
    storage_name : str, optional
        Worksheet title; defaults to the lower-cased model name

    Examples
    --------
    >>> crew = Model("CrewMember", [Serial(), Property("name"),
    ...                             Property("times_a_lady", int)],
    ...              storage_name="crew")
    >>> [p.field for p in crew.properties()]
    ['id', 'name', 'timesalady']
    """

    def __init__(
        self,
        name: str,
        properties: Sequence[Property],
        storage_name: Optional[str] = None,
    ) -> None:
        self.name = name
        self._properties: Tuple[Property, ...] = tuple(properties)
        self._storage_name = storage_name or name.lower()
        names = [p.name for p in self._properties]
        if len(set(names)) != len(names):
            raise ValueError(f"Duplicate property names in {name}: {names}")

    def storage_name(self, repository: str = "default") -> str:
        return self._storage_name

    def properties(self, repository: str = "default") -> Tuple[Property, ...]:
        return self._properties

    def field_naming_convention(self, repository: str = "default") -> Callable[[Property], str]:
        return lambda prop: prop.field

    @property
    def key(self) -> Tuple[Property, ...]:
        return tuple(p for p in self._properties if p.key)

    @property
    def serial(self) -> Optional[Property]:
        for p in self._properties:
            if p.serial:
                return p
        return None

    def get_property(self, name: str) -> Property:
        for p in self._properties:
            if p.name == name:
                return p
        raise KeyError(f"{self.name} has no property {name!r}")

    def new(self, **values: Any) -> "Resource":
        """Build a resource, filling unspecified properties from defaults."""
        unknown = set(values) - {p.name for p in self._properties}
        if unknown:
            raise KeyError(f"{self.name} has no properties {sorted(unknown)}")
        attrs = {
            p.name: values[p.name] if p.name in values else p.default_value()
            for p in self._properties
        }
        return Resource(self, attrs)

    def load(self, record: Mapping[Property, Any]) -> "Resource":
        """Build a resource from an attribute set returned by a read."""
        return Resource(self, {p.name: record.get(p) for p in self._properties})

    def __repr__(self) -> str:
        return f"Model({self.name!r}, storage_name={self._storage_name!r})"


class Resource:
    """One row's worth of attribute values for a model."""

    def __init__(self, model: Model, attributes: Optional[Dict[str, Any]] = None) -> None:
        self.model = model
        self._attributes: Dict[str, Any] = dict(attributes or {})

    def attribute_get(self, name: str) -> Any:
        return self._attributes.get(name)

    def attribute_set(self, name: str, value: Any) -> None:
        self.model.get_property(name)
        self._attributes[name] = value

    def attributes(self, by: str = "name") -> Dict[str, Any]:
        """
        Current values in property order, keyed by property ``name`` or by
        wire ``field``.
        """
        if by not in ("name", "field"):
            raise ValueError("by must be 'name' or 'field'")
        return {
            getattr(p, by): self._attributes.get(p.name)
            for p in self.model.properties()
        }

    def initialize_serial(self, value: int) -> None:
        """Set the serial property unless it already has a value."""
        prop = self.model.serial
        if prop is not None and self._attributes.get(prop.name) is None:
            self._attributes[prop.name] = value

    def storage_name(self, repository: str = "default") -> str:
        return self.model.storage_name(repository)

    def __getitem__(self, name: str) -> Any:
        return self._attributes[name]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Resource):
            return NotImplemented
        return self.model is other.model and self.attributes() == other.attributes()

    def __repr__(self) -> str:
        return f"<{self.model.name} {self.attributes()!r}>"


class Collection:
    """Resources of one model, acted on together by update/delete."""

    def __init__(self, model: Model, resources: Iterable[Resource] = ()) -> None:
        self.model = model
        self._resources: List[Resource] = list(resources)

    def storage_name(self, repository: str = "default") -> str:
        return self.model.storage_name(repository)

    def __iter__(self) -> Iterator[Resource]:
        return iter(self._resources)

    def __len__(self) -> int:
        return len(self._resources)


_OPERATORS: Dict[str, Callable[[Any, Any], bool]] = {
    "eq": operator.eq,
    "ne": operator.ne,
    "lt": operator.lt,
    "le": operator.le,
    "gt": operator.gt,
    "ge": operator.ge,
    "in": lambda a, b: a in b,
}


@dataclass(frozen=True)
class Condition:
    """
    A predicate on one property, e.g. ``Condition(times_a_lady, "lt", 10)``.

    Ordering comparisons against a missing (None) value are false.
    """
    property: Property
    op: str
    value: Any

    def __post_init__(self) -> None:
        if self.op not in _OPERATORS:
            raise ValueError(f"Unknown operator {self.op!r}")

    def matches(self, record: Mapping[Property, Any]) -> bool:
        actual = record.get(self.property)
        if actual is None and self.op not in ("eq", "ne", "in"):
            return False
        try:
            return bool(_OPERATORS[self.op](actual, self.value))
        except TypeError:
            return False


class Query:
    """
    Field selection plus in-memory filtering, ordering, and paging.

    Parameters
    ----------
    model : Model
        Model being queried
    fields : sequence of Property, optional
        Properties to fetch (default: all)
    conditions : sequence of Condition
        All must hold for a record to be kept
    order : sequence of (Property, bool)
        Sort keys with ascending flags; None values sort first
    offset : int
        Records to skip
    limit : int, optional
        Maximum records to return
    """

    def __init__(
        self,
        model: Model,
        fields: Optional[Sequence[Property]] = None,
        conditions: Sequence[Condition] = (),
        order: Sequence[Tuple[Property, bool]] = (),
        offset: int = 0,
        limit: Optional[int] = None,
    ) -> None:
        self.model = model
        self.fields: Tuple[Property, ...] = tuple(fields) if fields else model.properties()
        self.conditions = tuple(conditions)
        self.order = tuple(order)
        self.offset = offset
        self.limit = limit

    def filter_records(
        self, records: Sequence[Dict[Property, Any]]
    ) -> List[Dict[Property, Any]]:
        kept = [r for r in records if all(c.matches(r) for c in self.conditions)]
        for prop, ascending in reversed(self.order):
            kept.sort(
                key=lambda r: (r.get(prop) is not None, r.get(prop)),
                reverse=not ascending,
            )
        end = None if self.limit is None else self.offset + self.limit
        return kept[self.offset:end]
