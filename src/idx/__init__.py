"""
idx - Sortable 128-bit identifiers

Provides a 16-byte time-ordered identifier with strict 26-character text
encoding and JSON, Pydantic and psycopg adapters that map the zero value
to null.
"""

from idx.decoder import IDComponents, IDDecoder
from idx.exceptions import (
    DataSizeError,
    IdxError,
    InvalidCharactersError,
    InvalidFormatError,
    ScanValueError,
    ValueOverflowError,
)
from idx.generator import IDGenerator
from idx.identifier import (
    ID,
    NIL_ID,
    NOT_NULL_NIL_ID,
    from_string,
    is_valid_id,
    new_id,
)
from idx.validator import IDValidator, ValidationResult

__version__ = "0.1.0"

__all__ = [
    "ID",
    "NIL_ID",
    "NOT_NULL_NIL_ID",
    "new_id",
    "from_string",
    "is_valid_id",
    "IDGenerator",
    "IDDecoder",
    "IDComponents",
    "IDValidator",
    "ValidationResult",
    "IdxError",
    "InvalidFormatError",
    "DataSizeError",
    "InvalidCharactersError",
    "ValueOverflowError",
    "ScanValueError",
]
