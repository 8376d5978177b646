"""Strict validation of canonical identifier text."""

from dataclasses import dataclass

from idx.exceptions import (
    DataSizeError,
    InvalidCharactersError,
    InvalidFormatError,
    ValueOverflowError,
)

ENCODED_SIZE = 26
BINARY_SIZE = 16

# Crockford base32, upper case only.
ALPHABET = "0123456789ABCDEFGHJKMNPQRSTVWXYZ"

INVALID = 0xFF


def _build_decode_table() -> bytes:
    table = bytearray([INVALID] * 256)
    for index, char in enumerate(ALPHABET):
        table[ord(char)] = index
    return bytes(table)


# Byte to index table for O(1) lookups; INVALID marks bytes outside ALPHABET.
DECODE = _build_decode_table()

# Highest value a leading character may take and still fit in 128 bits.
_MAX_LEADING = ord("7")

# Regular expression equivalent of check_text, for JSON schemas.
TEXT_PATTERN = "^[0-7][0-9A-HJKMNP-TV-Z]{25}$"


def check_text(data: bytes) -> None:
    """Check encoded identifier bytes without decoding them.

    Args:
        data: Candidate canonical text as bytes

    Raises:
        DataSizeError: If data is not exactly 26 bytes
        InvalidCharactersError: If any byte is outside the alphabet
        ValueOverflowError: If the value does not fit in 128 bits
    """
    if len(data) != ENCODED_SIZE:
        raise DataSizeError(len(data), f"{ENCODED_SIZE} characters")

    if any(DECODE[b] == INVALID for b in data):
        raise InvalidCharactersError(bytes(data).decode("latin-1"))

    if data[0] > _MAX_LEADING:
        raise ValueOverflowError(bytes(data).decode("ascii"))


def check_string(text: str) -> bytes:
    """Check canonical text given as str and return its ASCII bytes."""
    if not isinstance(text, str):
        raise InvalidFormatError(f"ID text must be str, got {type(text).__name__}")
    try:
        data = text.encode("ascii")
    except UnicodeEncodeError:
        if len(text) != ENCODED_SIZE:
            raise DataSizeError(len(text), f"{ENCODED_SIZE} characters") from None
        raise InvalidCharactersError(text) from None
    check_text(data)
    return data


@dataclass
class ValidationResult:
    """ID validation result."""

    valid: bool
    error: str | None = None
    warnings: list[str] | None = None

    def __post_init__(self) -> None:
        """Initialize warnings list."""
        if self.warnings is None:
            self.warnings = []


class IDValidator:
    """Validator for canonical identifier text."""

    def __init__(self, allow_nil: bool = True):
        """Initialize validator.

        Args:
            allow_nil: Accept the all-zero identifier as valid
        """
        self.allow_nil = allow_nil

    def validate(self, text: str) -> ValidationResult:
        """Validate identifier text.

        Args:
            text: Text to validate

        Returns:
            Validation result; never raises for bad input
        """
        try:
            check_string(text)
        except InvalidFormatError as e:
            return ValidationResult(valid=False, error=str(e).split("\n", 1)[0])

        if text == "0" * ENCODED_SIZE:
            if not self.allow_nil:
                return ValidationResult(valid=False, error="Nil ID is not allowed")
            return ValidationResult(valid=True, warnings=["Nil ID means unset"])

        return ValidationResult(valid=True)
