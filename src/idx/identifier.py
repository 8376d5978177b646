"""Sortable 128-bit identifier and its text, JSON and storage forms.

Layout (16 bytes, big-endian):
    TTTTTTTTTTTT RRRRRRRRRRRRRRRRRRRR
    └─48-bit ms─┘└───80-bit random───┘

Canonical text is 26 upper-case Crockford base32 characters, e.g.
``01HAJ2Q3T69HJMMBDNAMVZ3FQB``. The base32 math comes from ``python-ulid``;
the strict character and range checks in ``idx.validator`` run first, so
anything that library would tolerate leniently is rejected here.
"""

from datetime import datetime
from typing import Any

from pydantic import GetCoreSchemaHandler, GetJsonSchemaHandler
from pydantic.json_schema import JsonSchemaValue
from pydantic_core import core_schema
from ulid import ULID

from idx.exceptions import (
    DataSizeError,
    InvalidFormatError,
    ScanValueError,
)
from idx.validator import (
    BINARY_SIZE,
    ENCODED_SIZE,
    TEXT_PATTERN,
    check_string,
    check_text,
)

_QUOTE = 0x22
_JSON_NULL = b"null"
_JSON_EMPTY = b'""'


class ID:
    """Immutable 16-byte sortable identifier.

    Equality is byte-wise; ordering is unsigned byte order, which for
    generated values is creation order.
    """

    __slots__ = ("_bytes",)

    def __init__(self, value: bytes | bytearray | memoryview = bytes(BINARY_SIZE)):
        """Initialize from raw bytes.

        Args:
            value: Exactly 16 bytes

        Raises:
            DataSizeError: If value is not 16 bytes long
        """
        data = bytes(value)
        if len(data) != BINARY_SIZE:
            raise DataSizeError(len(data), f"{BINARY_SIZE} bytes")
        object.__setattr__(self, "_bytes", data)

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError("ID is immutable")

    def __reduce__(self) -> tuple[type["ID"], tuple[bytes]]:
        return (self.__class__, (self._bytes,))

    # Construction

    @classmethod
    def generate(cls) -> "ID":
        """Generate a new identifier from the default generator."""
        from idx.generator import new_id

        return new_id()

    @classmethod
    def from_string(cls, text: str) -> "ID":
        """Parse canonical text strictly.

        Args:
            text: 26-character upper-case Crockford base32 string

        Returns:
            Parsed identifier

        Raises:
            InvalidFormatError: On bad length, characters or range
        """
        check_string(text)
        return cls._decode(text)

    @classmethod
    def _decode(cls, text: str) -> "ID":
        # Text has already passed the strict checks
        try:
            return cls(ULID.from_str(text).bytes)
        except ValueError as e:
            raise InvalidFormatError(f"Invalid ID text {text!r}: {e}") from e

    @classmethod
    def unmarshal_text(cls, data: bytes | bytearray | memoryview) -> "ID":
        """Decode UTF-8 canonical text.

        Each byte is checked against the decode table before any decoding.

        Raises:
            DataSizeError: If data is not 26 bytes
            InvalidCharactersError: If a byte is outside the alphabet
            ValueOverflowError: If the value exceeds 128 bits
        """
        raw = bytes(data)
        check_text(raw)
        return cls._decode(raw.decode("ascii"))

    @classmethod
    def unmarshal_json(cls, data: bytes | bytearray | memoryview | str) -> "ID":
        """Decode a raw JSON value.

        ``null`` and ``""`` decode to NIL_ID. A quoted 26-character string
        decodes through unmarshal_text. Any other size raises DataSizeError.
        """
        raw = data.encode("utf-8") if isinstance(data, str) else bytes(data)

        if raw == _JSON_EMPTY or raw == _JSON_NULL:
            return NIL_ID

        if len(raw) == ENCODED_SIZE + 2:
            if raw[0] != _QUOTE or raw[-1] != _QUOTE:
                raise InvalidFormatError(f"ID JSON value must be a string: {raw!r}")
            return cls.unmarshal_text(raw[1:-1])

        raise DataSizeError(len(raw), f'{ENCODED_SIZE + 2} bytes, null or ""')

    @classmethod
    def scan(cls, src: Any) -> "ID":
        """Build an identifier from a value read from storage.

        Args:
            src: None, 16 raw bytes, canonical text (str or bytes) or an ID

        Returns:
            NIL_ID for None, the decoded identifier otherwise

        Raises:
            InvalidFormatError: If src holds invalid content
            ScanValueError: If src has an unsupported type
        """
        if src is None:
            return NIL_ID
        if isinstance(src, ID):
            return src
        if isinstance(src, (bytes, bytearray, memoryview)):
            raw = bytes(src)
            if len(raw) == BINARY_SIZE:
                return cls(raw)
            return cls.unmarshal_text(raw)
        if isinstance(src, str):
            return cls.from_string(src)
        raise ScanValueError(src)

    # Conversion

    def to_bytes(self) -> bytes:
        """Return the raw 16-byte value."""
        return self._bytes

    def __bytes__(self) -> bytes:
        return self._bytes

    def to_ulid(self) -> ULID:
        return ULID.from_bytes(self._bytes)

    def string(self) -> str:
        """Return the 26-character canonical text."""
        return str(ULID.from_bytes(self._bytes))

    def __str__(self) -> str:
        return self.string()

    def __repr__(self) -> str:
        return f"ID('{self.string()}')"

    def marshal_text(self) -> bytes:
        """Return the canonical text as UTF-8 bytes (usable as a map key)."""
        return self.string().encode("utf-8")

    def marshal_json(self) -> bytes:
        """Return the canonical text as a JSON string."""
        return b'"' + self.marshal_text() + b'"'

    def value(self) -> bytes | None:
        """Return the storage driver value.

        NIL_ID maps to None (SQL NULL) so optional reference columns store
        "no reference" instead of sixteen zero bytes.
        """
        if self.is_zero():
            return None
        return self._bytes

    @property
    def timestamp_ms(self) -> int:
        """Milliseconds since the Unix epoch encoded in the first 48 bits."""
        return int.from_bytes(self._bytes[:6], "big")

    @property
    def created_at(self) -> datetime:
        """UTC datetime of the timestamp part."""
        return self.to_ulid().datetime

    # Comparison

    def is_zero(self) -> bool:
        return self._bytes == _NIL_BYTES

    def compare(self, other: "ID") -> int:
        """Compare byte-wise.

        Returns:
            -1 if self < other, 0 if equal, 1 if self > other
        """
        a, b = self._bytes, other._bytes
        return (a > b) - (a < b)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ID):
            return NotImplemented
        return self._bytes == other._bytes

    def __hash__(self) -> int:
        return hash((ID, self._bytes))

    def __lt__(self, other: "ID") -> bool:
        if not isinstance(other, ID):
            return NotImplemented
        return self._bytes < other._bytes

    def __le__(self, other: "ID") -> bool:
        if not isinstance(other, ID):
            return NotImplemented
        return self._bytes <= other._bytes

    def __gt__(self, other: "ID") -> bool:
        if not isinstance(other, ID):
            return NotImplemented
        return self._bytes > other._bytes

    def __ge__(self, other: "ID") -> bool:
        if not isinstance(other, ID):
            return NotImplemented
        return self._bytes >= other._bytes

    # Pydantic integration

    @classmethod
    def __get_pydantic_core_schema__(
        cls,
        source: type[Any],
        handler: GetCoreSchemaHandler,
    ) -> core_schema.CoreSchema:
        return core_schema.no_info_plain_validator_function(
            cls._validate,
            serialization=core_schema.plain_serializer_function_ser_schema(
                str,
                info_arg=False,
                return_schema=core_schema.str_schema(),
                when_used="json",
            ),
        )

    @classmethod
    def __get_pydantic_json_schema__(
        cls,
        schema: core_schema.CoreSchema,
        handler: GetJsonSchemaHandler,
    ) -> JsonSchemaValue:
        text_schema = {
            "type": "string",
            "pattern": TEXT_PATTERN,
            "minLength": ENCODED_SIZE,
            "maxLength": ENCODED_SIZE,
            "examples": ["01HAJ2Q3T69HJMMBDNAMVZ3FQB"],
        }
        if handler.mode == "validation":
            # Input may also be null or "" (both read as NIL_ID)
            return {"anyOf": [text_schema, {"const": ""}, {"type": "null"}]}
        return text_schema

    @classmethod
    def _validate(cls, value: Any) -> "ID":
        # Same null handling as unmarshal_json
        if value is None or value == "":
            return NIL_ID
        return cls.scan(value)


_NIL_BYTES = bytes(BINARY_SIZE)

NIL_ID = ID(_NIL_BYTES)

NOT_NULL_NIL_ID = ID(bytes(BINARY_SIZE - 1) + b"\x01")


def new_id() -> ID:
    """Generate a new identifier."""
    return ID.generate()


def from_string(text: str) -> ID:
    """Parse canonical text strictly (see ID.from_string)."""
    return ID.from_string(text)


def is_valid_id(text: Any) -> bool:
    """Check whether text is a valid canonical identifier."""
    try:
        check_string(text)
    except InvalidFormatError:
        return False
    return True
