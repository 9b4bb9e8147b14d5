# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Record schemas: the static field -> markers mapping of a record type.

A schema is built once per record type and reused for every validation, so
field discovery never happens on the validation path. Schemas come from
``Annotated`` type hints, from an explicit mapping, or from a schema file
(see :mod:`fieldrules.schema.files`).
"""

from __future__ import annotations

import logging
import threading
import types
from collections import defaultdict
from typing import (
    Annotated,
    Any,
    Dict,
    Iterable,
    List,
    Mapping,
    Optional,
    Tuple,
    Union,
    get_args,
    get_origin,
    get_type_hints,
)

from ..exceptions import (
    ConfigurationError,
    DuplicateStartMarkerError,
    FieldAccessError,
    UnmatchedEndMarkerError,
)
from ..markers import AllowedStrings, EndDate, FieldMarker, StartDate, is_marker

logger = logging.getLogger(__name__)

MarkerSpec = Union[FieldMarker, Iterable[FieldMarker]]

# ``X | None`` hints are ``types.UnionType`` rather than ``typing.Union`` (3.10+).
_UNION_ORIGINS = tuple(
    origin for origin in (Union, getattr(types, "UnionType", None)) if origin is not None
)


def _hint_markers(hint: Any) -> List[FieldMarker]:
    """Collect markers from *hint*, looking through ``Optional``/``Union`` members.

    ``get_type_hints`` wraps a field defaulting to ``None`` in ``Optional`` on
    Python < 3.11, so ``Annotated`` is not always the outermost form.
    """
    origin = get_origin(hint)
    if origin is Annotated:
        args = get_args(hint)
        return _hint_markers(args[0]) + [meta for meta in args[1:] if is_marker(meta)]
    if origin in _UNION_ORIGINS:
        return [marker for arg in get_args(hint) for marker in _hint_markers(arg)]
    return []


class RecordSchema:
    """Markers declared on the fields of one record type.

    The marker graph is checked on construction: two start fields for one id
    and end fields whose id has no start field are configuration errors.
    """

    def __init__(self, name: str, fields: Mapping[str, Iterable[FieldMarker]]):
        self.name = name
        self._fields: Dict[str, Tuple[FieldMarker, ...]] = {}
        for field_name, markers in fields.items():
            markers = tuple(markers)
            for marker in markers:
                if not is_marker(marker):
                    raise ConfigurationError(
                        f"Field '{field_name}' on record '{name}' carries a non-marker value: {marker!r}"
                    )
            if markers:
                self._fields[field_name] = markers

        self._check_marker_graph()
        logger.debug(
            "Built schema for %s: %d constrained field(s), %d interval(s)",
            name,
            len(self._fields),
            len(self.interval_ids),
        )

    # ------------------------------------------------------------------
    # Construction helpers
    # ------------------------------------------------------------------

    @classmethod
    def from_type(cls, record_type: type, name: Optional[str] = None) -> "RecordSchema":
        """Build a schema from ``Annotated[...]`` hints on *record_type*."""

        try:
            hints = get_type_hints(record_type, include_extras=True)
        except (NameError, TypeError) as exc:
            raise ConfigurationError(
                f"Cannot resolve type hints of {record_type.__qualname__}: {exc}"
            ) from exc

        fields: Dict[str, List[FieldMarker]] = {}
        for field_name, hint in hints.items():
            markers = _hint_markers(hint)
            if markers:
                fields[field_name] = markers

        return cls(name or record_type.__name__, fields)

    @classmethod
    def from_mapping(cls, name: str, mapping: Mapping[str, MarkerSpec]) -> "RecordSchema":
        """Build a schema from ``{field: marker}`` or ``{field: [markers]}``."""

        fields: Dict[str, List[FieldMarker]] = {}
        for field_name, spec in mapping.items():
            if is_marker(spec):
                fields[field_name] = [spec]
            elif isinstance(spec, (str, bytes)) or not isinstance(spec, Iterable):
                raise ConfigurationError(
                    f"Field '{field_name}' on record '{name}' must map to a marker or a list of markers"
                )
            else:
                fields[field_name] = list(spec)
        return cls(name, fields)

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def fields(self) -> Dict[str, Tuple[FieldMarker, ...]]:
        return dict(self._fields)

    @property
    def field_names(self) -> Tuple[str, ...]:
        return tuple(self._fields)

    def markers(self) -> List[Tuple[str, FieldMarker]]:
        """All ``(field, marker)`` pairs in declaration order."""

        return [(name, marker) for name, markers in self._fields.items() for marker in markers]

    def start_markers(self) -> List[Tuple[str, StartDate]]:
        return [(n, m) for n, m in self.markers() if isinstance(m, StartDate)]

    def end_markers(self) -> List[Tuple[str, EndDate]]:
        return [(n, m) for n, m in self.markers() if isinstance(m, EndDate)]

    def date_markers(self) -> List[Tuple[str, FieldMarker]]:
        return [(n, m) for n, m in self.markers() if isinstance(m, (StartDate, EndDate))]

    def allowed_string_markers(self) -> List[Tuple[str, AllowedStrings]]:
        return [(n, m) for n, m in self.markers() if isinstance(m, AllowedStrings)]

    @property
    def interval_ids(self) -> Tuple[int, ...]:
        return tuple(sorted({m.id for _, m in self.start_markers()}))

    def describe_intervals(self) -> List[Dict[str, Any]]:
        """Summarise each interval: its fields and duration policy."""

        ends: Dict[int, List[Tuple[str, EndDate]]] = defaultdict(list)
        for field_name, marker in self.end_markers():
            ends[marker.id].append((field_name, marker))

        summary = []
        for field_name, marker in sorted(self.start_markers(), key=lambda item: item[1].id):
            entry: Dict[str, Any] = {"id": marker.id, "start": field_name, "end": None, "policy": None}
            declared = ends.get(marker.id, [])
            if declared:
                end_field, end_marker = declared[0]
                entry["end"] = end_field
                if end_marker.allowed_day_ranges:
                    entry["policy"] = {"allowed_day_ranges": list(end_marker.allowed_day_ranges)}
                else:
                    entry["policy"] = {"minimum_days": end_marker.minimum_days}
            if len(declared) > 1:
                entry["ambiguous"] = True
            summary.append(entry)
        return summary

    def read_values(self, record: Any) -> Dict[str, Any]:
        """Read every constrained field of *record* without modifying it.

        Mappings are read by key, other objects by attribute.

        Raises:
            FieldAccessError: a declared field is absent or raises on access.
        """
        values: Dict[str, Any] = {}
        is_mapping = isinstance(record, Mapping)
        for field_name in self._fields:
            try:
                if is_mapping:
                    values[field_name] = record[field_name]
                else:
                    values[field_name] = getattr(record, field_name)
            except (KeyError, AttributeError):
                raise FieldAccessError(field_name, self.name) from None
            except Exception as exc:
                raise FieldAccessError(field_name, self.name, f"{type(exc).__name__}: {exc}") from exc
        return values

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _check_marker_graph(self) -> None:
        starts: Dict[int, str] = {}
        for field_name, marker in self.start_markers():
            if marker.id in starts:
                raise DuplicateStartMarkerError(marker.id, (starts[marker.id], field_name), self.name)
            starts[marker.id] = field_name

        ends = self.end_markers()
        if ends and not starts:
            logger.warning(
                "Record %s declares end date fields but no start date fields; "
                "its date ranges will never be checked",
                self.name,
            )
            return

        seen_ends: Dict[int, str] = {}
        for field_name, marker in ends:
            if marker.id not in starts:
                raise UnmatchedEndMarkerError(marker.id, field_name, self.name)
            if marker.id in seen_ends:
                logger.warning(
                    "Record %s declares interval %d twice (end fields %s, %s); "
                    "the interval is ambiguous whenever its first end field holds a value",
                    self.name,
                    marker.id,
                    seen_ends[marker.id],
                    field_name,
                )
            else:
                seen_ends[marker.id] = field_name

    def __repr__(self) -> str:
        return f"RecordSchema(name={self.name!r}, fields={self._fields!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RecordSchema):
            return NotImplemented
        return self.name == other.name and self._fields == other._fields

    __hash__ = None  # type: ignore[assignment]


# ----------------------------------------------------------------------
# Process-wide registry
# ----------------------------------------------------------------------

_REGISTRY: Dict[type, RecordSchema] = {}
_REGISTRY_LOCK = threading.Lock()


def register_record(
    record_type: type,
    fields: Optional[Mapping[str, MarkerSpec]] = None,
    *,
    name: Optional[str] = None,
) -> RecordSchema:
    """Build and cache the schema of *record_type*.

    With *fields* the explicit mapping is used, otherwise ``Annotated`` hints.
    Registering a type again replaces its schema.
    """
    if fields is None:
        schema = RecordSchema.from_type(record_type, name=name)
    else:
        schema = RecordSchema.from_mapping(name or record_type.__name__, fields)

    with _REGISTRY_LOCK:
        _REGISTRY[record_type] = schema
    return schema


def constrained(cls: Optional[type] = None, *, name: Optional[str] = None):
    """Class decorator that registers the schema of the decorated type.

    Usable bare (``@constrained``) or with a name (``@constrained(name="Stay")``).
    Declaration mistakes therefore surface at import time.
    """

    def decorator(record_type: type) -> type:
        register_record(record_type, name=name)
        return record_type

    if cls is not None:
        return decorator(cls)
    return decorator


def get_schema(record_or_type: Any) -> RecordSchema:
    """Return the cached schema for a record instance or type.

    Unregistered types are built from their ``Annotated`` hints on first use.
    """
    record_type = record_or_type if isinstance(record_or_type, type) else type(record_or_type)
    if issubclass(record_type, Mapping):
        raise ConfigurationError(
            "Mapping records carry no type hints; pass an explicit schema "
            "(e.g. one loaded from a schema file)"
        )

    with _REGISTRY_LOCK:
        schema = _REGISTRY.get(record_type)
        if schema is None:
            schema = RecordSchema.from_type(record_type)
            _REGISTRY[record_type] = schema
    return schema


def clear_registry() -> None:
    with _REGISTRY_LOCK:
        _REGISTRY.clear()


__all__ = [
    "RecordSchema",
    "register_record",
    "constrained",
    "get_schema",
    "clear_registry",
]
