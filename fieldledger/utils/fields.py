"""
Attribute access that works for both models and plain mappings.

Records reach the engine as pydantic models, arbitrary objects or dicts
decoded from JSON; every operation reads fields through `get_field`.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any


def get_field(record: Any, name: str, default: Any = None) -> Any:
    """Return `record[name]` for mappings, else `getattr(record, name)`."""
    if isinstance(record, Mapping):
        return record.get(name, default)
    return getattr(record, name, default)


__all__ = ["get_field"]
