# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Command handlers for the ``fieldrules`` CLI."""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Mapping

import yaml

from ..exceptions import ConfigurationError
from ..runtime import format_validation_reason, get_record_validator
from ..schema import load_schema_file, locate_schema_file

logger = logging.getLogger("fieldrules.cli")


def _load_records(path: Path) -> List[Mapping[str, Any]]:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigurationError(f"Cannot read records file {path}: {exc}") from exc

    try:
        if path.suffix.lower() == ".json":
            data = json.loads(text)
        else:
            data = yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise ConfigurationError(f"Records file {path} is not valid: {exc}") from exc

    records = data if isinstance(data, list) else [data]
    for index, record in enumerate(records):
        if not isinstance(record, Mapping):
            raise ConfigurationError(f"Record #{index} in {path} is not a mapping")
    return records


def check_command(args: argparse.Namespace) -> int:
    schema_path = locate_schema_file(args.schema)
    schema = load_schema_file(schema_path).get(args.record_type)
    records = _load_records(args.records)
    logger.debug("Checking %d %s record(s) against %s", len(records), schema.name, schema_path)

    validator = get_record_validator()
    reports: List[Dict[str, Any]] = []
    for index, record in enumerate(records):
        result = validator.validate(record, schema)
        reports.append(
            {
                "index": index,
                "valid": result.valid,
                "failed_interval_ids": sorted(result.failed_interval_ids),
                "violations": [
                    {"field": v.field, "rule": v.rule, "message": v.message}
                    for v in result.violations
                ],
            }
        )
        if args.format == "text":
            if result.valid:
                print(f"record #{index}: valid")
            else:
                print(f"record #{index}: " + format_validation_reason(schema.name, result))

    invalid = sum(1 for report in reports if not report["valid"])
    if args.format == "json":
        print(json.dumps({"record_type": schema.name, "records": reports}, indent=2, default=str))
    else:
        print(f"{len(reports) - invalid} of {len(reports)} record(s) valid")
    return 1 if invalid else 0


def inspect_command(args: argparse.Namespace) -> int:
    bundle = load_schema_file(locate_schema_file(args.schema))

    if args.format == "json":
        payload = {
            name: {
                "fields": list(bundle.records[name].field_names),
                "intervals": bundle.records[name].describe_intervals(),
            }
            for name in bundle.names
        }
        print(json.dumps(payload, indent=2))
        return 0

    for name in bundle.names:
        schema = bundle.records[name]
        print(f"{name}: {len(schema.field_names)} constrained field(s)")
        for interval in schema.describe_intervals():
            end = interval["end"] or "<no end field>"
            policy = interval["policy"] or {}
            rendered = ", ".join(f"{k}={v}" for k, v in policy.items()) or "unchecked"
            suffix = " (ambiguous)" if interval.get("ambiguous") else ""
            print(f"  interval {interval['id']}: {interval['start']} -> {end} [{rendered}]{suffix}")
        for field_name, marker in schema.allowed_string_markers():
            print(f"  {field_name}: one of {list(marker.values)} (null allowed: {marker.null_allowed})")
    return 0


__all__ = ["check_command", "inspect_command"]
