# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Schema package - field -> marker declarations for record types."""

from .files import (
    SCHEMA_FILE_ENV,
    SchemaBundle,
    load_schema_file,
    locate_schema_file,
    parse_schema,
)
from .record import (
    RecordSchema,
    clear_registry,
    constrained,
    get_schema,
    register_record,
)

__all__ = [
    "RecordSchema",
    "SchemaBundle",
    "SCHEMA_FILE_ENV",
    "clear_registry",
    "constrained",
    "get_schema",
    "load_schema_file",
    "locate_schema_file",
    "parse_schema",
    "register_record",
]
