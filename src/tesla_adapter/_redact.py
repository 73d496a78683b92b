"""Secret masking for debug logs.

Job payloads carry ``apiToken``, stored records carry ``tokenToStore``
and outbound requests carry an ``Authorization`` header. Only decoded
JSON shapes (mappings, lists, scalars) are expected here.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

_SECRET_KEYS = frozenset({"apitoken", "tokentostore", "authorization"})


def redact_for_log(value: Any) -> Any:
    """Return a copy of *value* with every secret field masked."""
    if isinstance(value, Mapping):
        return {
            key: "<redacted>" if str(key).lower() in _SECRET_KEYS else redact_for_log(item)
            for key, item in value.items()
        }
    if isinstance(value, list):
        return [redact_for_log(item) for item in value]
    return value
