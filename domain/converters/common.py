"""
Helpers shared by the forward and rollback converters.

Legacy records arrive as loosely-typed JSON, so these helpers normalise the
few shapes every converter has to cope with (missing lists, numeric ids,
``None`` for "not set") and build the standard failure result.
"""

import logging
import random
import string
import time
from collections.abc import Mapping
from typing import Any, Dict, List, Optional

from domain.models import (
    ErrorCode,
    MigrationError,
    MigrationMetadata,
    MigrationOptions,
    MigrationResult,
    MigrationWarning,
    WorkoutFormat,
)

logger = logging.getLogger(__name__)

_ID_ALPHABET = string.digits + string.ascii_lowercase
_ID_SUFFIX_LENGTH = 9


def generate_workout_id() -> str:
    """
    Mint an id for a record that arrived without one.

    Format: ``migrated-<epoch ms>-<9 random base36 chars>``.
    """
    suffix = "".join(random.choices(_ID_ALPHABET, k=_ID_SUFFIX_LENGTH))
    return f"migrated-{int(time.time() * 1000)}-{suffix}"


def resolve_workout_id(record: Mapping, options: MigrationOptions) -> str:
    """Keep the source id unless ids are not preserved or none is present."""
    source_id = record.get("id")
    if options.preserve_ids and source_id not in (None, ""):
        return str(source_id)
    return generate_workout_id()


def as_list(value: Any) -> List[Any]:
    """Return ``value`` if it is a list, otherwise an empty list."""
    return value if isinstance(value, list) else []


def as_mapping(value: Any) -> Mapping:
    return value if isinstance(value, Mapping) else {}


def optional_str(value: Any) -> Optional[str]:
    """Legacy ids are sometimes numeric; the unified schema stores strings."""
    if value is None:
        return None
    return str(value)


def drop_none(values: Dict[str, Any]) -> Dict[str, Any]:
    """Drop keys whose value is ``None`` so model defaults apply."""
    return {key: value for key, value in values.items() if value is not None}


def failed_result(
    source_type: WorkoutFormat,
    errors: List[MigrationError],
    warnings: Optional[List[MigrationWarning]] = None,
) -> MigrationResult:
    """Build a failed result: no data, nothing modified, no data loss."""
    return MigrationResult(
        success=False,
        data=None,
        errors=errors,
        warnings=warnings or [],
        metadata=MigrationMetadata(
            source_type=source_type,
            fields_modified=[],
            data_loss=False,
        ),
    )


def migration_failure(source_type: WorkoutFormat, exc: Exception) -> MigrationResult:
    """Wrap an unexpected converter exception as a ``MIGRATION_ERROR`` result."""
    logger.warning(f"{source_type.value} migration failed: {exc}")
    return failed_result(
        source_type,
        [
            MigrationError(
                field="general",
                message=f"Migration failed: {exc}",
                code=ErrorCode.MIGRATION_ERROR,
            )
        ],
    )
