"""JSON helpers for IDs."""

import json
from typing import Any

from idx.exceptions import InvalidFormatError
from idx.identifier import ID, NIL_ID


class IDJSONEncoder(json.JSONEncoder):
    """JSON encoder writing IDs as their canonical string."""

    def default(self, o: Any) -> Any:
        if isinstance(o, ID):
            return str(o)
        return super().default(o)


def dumps(obj: Any, **kwargs: Any) -> str:
    """json.dumps with IDJSONEncoder."""
    kwargs.setdefault("cls", IDJSONEncoder)
    return json.dumps(obj, **kwargs)


def load_id(value: Any) -> ID:
    """Decode an ID from an already-parsed JSON value.

    Args:
        value: Value taken from json.loads output

    Returns:
        NIL_ID for null or "", the parsed ID for a string

    Raises:
        InvalidFormatError: If value is not a valid ID string
    """
    if value is None or value == "":
        return NIL_ID
    if not isinstance(value, str):
        raise InvalidFormatError(
            f"ID JSON value must be a string or null, got {type(value).__name__}"
        )
    return ID.from_string(value)
