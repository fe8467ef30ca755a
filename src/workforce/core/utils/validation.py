"""Validators shared by partial-update schemas."""

from typing import Any

from pydantic import ValidationInfo


def reject_null(value: Any, info: ValidationInfo) -> Any:
    """Refuse an explicit ``null`` for a field whose column is NOT NULL.

    Omitting the field leaves it unchanged; only a sent ``null`` is an error.
    """
    if value is None:
        raise ValueError(f"{info.field_name} cannot be null")
    return value
