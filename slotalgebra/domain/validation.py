"""
Well-formedness checks for values handed to collection operations.
"""

from datetime import datetime
from typing import Any, Mapping

from .models import Slot


def _is_aware(value: Any) -> bool:
    return isinstance(value, datetime) and value.tzinfo is not None and value.utcoffset() is not None


def is_slot(value: Any) -> bool:
    """
    Check whether a value is a well-formed slot.

    ``Slot`` validates itself on construction, but collection operations also
    receive arbitrary caller values, so the fields are checked again here.
    """
    if not isinstance(value, Slot):
        return False
    return (
        _is_aware(value.start)
        and _is_aware(value.end)
        and value.start <= value.end
        and isinstance(value.metadata, Mapping)
    )
