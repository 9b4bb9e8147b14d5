# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Schema files: record declarations kept in YAML or JSON.

Layout::

    records:
      Booking:
        fields:
          check_in:  {start_date: {id: 1}}
          check_out: {end_date: {id: 1, minimum_days: 1}}
          status:    {allowed_strings: {values: [open, closed], null_allowed: false}}

Keys are checked strictly so a typo such as ``minimum_day`` fails at load
time instead of silently disabling a rule.
"""

from __future__ import annotations

import difflib
import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

import yaml

from ..exceptions import ConfigurationError
from ..markers import AllowedStrings, EndDate, FieldMarker, StartDate
from .record import RecordSchema

logger = logging.getLogger(__name__)

SCHEMA_FILE_ENV = "FIELDRULES_SCHEMA_FILE"
DEFAULT_FILE_NAMES = ("schema.yaml", "schema.yml", "schema.json")

_MARKER_OPTIONS: Dict[str, frozenset] = {
    "start_date": frozenset({"id", "message"}),
    "end_date": frozenset({"id", "minimum_days", "allowed_day_ranges", "message"}),
    "allowed_strings": frozenset({"values", "null_allowed", "message"}),
}
_REQUIRED_OPTIONS: Dict[str, frozenset] = {
    "start_date": frozenset({"id"}),
    "end_date": frozenset({"id"}),
    "allowed_strings": frozenset({"values"}),
}


@dataclass
class SchemaBundle:
    """Every record schema declared in one schema file."""

    records: Dict[str, RecordSchema] = field(default_factory=dict)
    source: Optional[Path] = None

    def get(self, name: str) -> RecordSchema:
        try:
            return self.records[name]
        except KeyError:
            raise ConfigurationError(
                f"Unknown record type '{name}'{_suggest(name, self.records)}"
            ) from None

    @property
    def names(self) -> List[str]:
        return sorted(self.records)


def _suggest(name: str, candidates: Iterable[str]) -> str:
    matches = difflib.get_close_matches(name, list(candidates), n=1)
    if matches:
        return f" (did you mean '{matches[0]}'?)"
    return ""


def _check_keys(where: str, keys: Iterable[str], allowed: Iterable[str]) -> None:
    allowed = set(allowed)
    unknown = sorted(str(k) for k in keys if k not in allowed)
    if unknown:
        hints = "".join(_suggest(k, allowed) for k in unknown)
        raise ConfigurationError(f"Unknown key(s) {unknown} in {where}{hints}")


def _build_marker(where: str, kind: str, options: Any) -> FieldMarker:
    if not isinstance(options, Mapping):
        raise ConfigurationError(f"{where}: '{kind}' must be a mapping of options")

    _check_keys(f"{where} '{kind}'", options.keys(), _MARKER_OPTIONS[kind])
    missing = sorted(_REQUIRED_OPTIONS[kind] - set(options))
    if missing:
        raise ConfigurationError(f"{where}: '{kind}' is missing required option(s) {missing}")

    kwargs = dict(options)
    try:
        if kind == "start_date":
            return StartDate(**kwargs)
        if kind == "end_date":
            if "allowed_day_ranges" in kwargs:
                ranges = kwargs["allowed_day_ranges"] or ()
                if not isinstance(ranges, (list, tuple)):
                    raise ConfigurationError(f"{where}: 'allowed_day_ranges' must be a list")
                kwargs["allowed_day_ranges"] = tuple(ranges)
            return EndDate(**kwargs)
        values = kwargs.get("values")
        if not isinstance(values, (list, tuple)):
            raise ConfigurationError(f"{where}: 'values' must be a list of strings")
        kwargs["values"] = tuple(values)
        return AllowedStrings(**kwargs)
    except ConfigurationError as exc:
        if exc.message.startswith(where):
            raise
        raise ConfigurationError(f"{where}: {exc.message}") from exc


def _parse_field(record: str, field_name: str, spec: Any) -> List[FieldMarker]:
    where = f"record '{record}' field '{field_name}'"
    if not isinstance(spec, Mapping) or not spec:
        raise ConfigurationError(f"{where} must map marker names to their options")

    _check_keys(where, spec.keys(), _MARKER_OPTIONS)
    return [_build_marker(where, kind, options) for kind, options in spec.items()]


def parse_schema(raw: Any, source: Optional[Path] = None) -> SchemaBundle:
    """Turn a decoded schema document into a :class:`SchemaBundle`."""

    if not isinstance(raw, Mapping):
        raise ConfigurationError("Schema document must be a mapping with a 'records' key")
    _check_keys("schema document", raw.keys(), ("records", "metadata"))

    records = raw.get("records") or {}
    if not isinstance(records, Mapping):
        raise ConfigurationError("'records' must map record type names to declarations")

    bundle = SchemaBundle(source=source)
    for name, declaration in records.items():
        name = str(name)
        if not isinstance(declaration, Mapping):
            raise ConfigurationError(f"Record '{name}' must be a mapping with a 'fields' key")
        _check_keys(f"record '{name}'", declaration.keys(), ("fields", "description"))

        fields = declaration.get("fields") or {}
        if not isinstance(fields, Mapping):
            raise ConfigurationError(f"Record '{name}': 'fields' must be a mapping")

        bundle.records[name] = RecordSchema(
            name,
            {str(f): _parse_field(name, str(f), spec) for f, spec in fields.items()},
        )

    logger.debug("Parsed %d record schema(s) from %s", len(bundle.records), source or "<memory>")
    return bundle


def load_schema_file(path: Union[str, Path]) -> SchemaBundle:
    """Read and parse a YAML or JSON schema file."""

    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigurationError(f"Cannot read schema file {path}: {exc}") from exc

    try:
        if path.suffix.lower() == ".json":
            raw = json.loads(text)
        else:
            raw = yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise ConfigurationError(f"Schema file {path} is not valid: {exc}") from exc

    return parse_schema(raw, source=path)


def _config_home() -> Path:
    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg)
    return Path.home() / ".config"


def locate_schema_file(schema_path: Optional[Union[str, Path]] = None) -> Path:
    """Find the schema file to use.

    Precedence: *schema_path*, then ``FIELDRULES_SCHEMA_FILE``, then
    ``$XDG_CONFIG_HOME/fieldrules/schema.{yaml,yml,json}``.

    Raises:
        ConfigurationError: nothing found, the explicit file is missing, or
            more than one default candidate exists.
    """
    explicit = schema_path or os.environ.get(SCHEMA_FILE_ENV)
    if explicit:
        path = Path(explicit).expanduser()
        if not path.is_file():
            raise ConfigurationError(f"Schema file not found: {path}")
        return path

    directory = _config_home() / "fieldrules"
    candidates = [directory / name for name in DEFAULT_FILE_NAMES if (directory / name).is_file()]
    if not candidates:
        raise ConfigurationError(
            f"No schema file found. Pass --schema, set {SCHEMA_FILE_ENV}, "
            f"or create {directory / DEFAULT_FILE_NAMES[0]}"
        )
    if len(candidates) > 1:
        raise ConfigurationError(
            "Multiple schema files found: "
            + ", ".join(str(c) for c in candidates)
            + ". Keep only one."
        )
    return candidates[0]


__all__ = [
    "DEFAULT_FILE_NAMES",
    "SCHEMA_FILE_ENV",
    "SchemaBundle",
    "load_schema_file",
    "locate_schema_file",
    "parse_schema",
]
