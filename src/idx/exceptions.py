"""Custom exceptions with helpful error messages."""


class IdxError(Exception):
    """Base exception for idx errors."""

    pass


class InvalidFormatError(IdxError, ValueError):
    """Input is not a valid identifier encoding."""

    pass


class DataSizeError(InvalidFormatError):
    """Input has the wrong length for an identifier."""

    def __init__(self, size: int, expected: str):
        self.size = size
        super().__init__(
            f"Bad data size when decoding ID: got {size} bytes, expected {expected}.\n\n"
            f"Suggestions:\n"
            f"1. Canonical text is exactly 26 characters\n"
            f"2. Binary form is exactly 16 bytes\n"
            f'3. JSON form is a quoted string, null or ""'
        )


class InvalidCharactersError(InvalidFormatError):
    """Input contains characters outside the canonical alphabet."""

    def __init__(self, value: object):
        self.value = value
        super().__init__(
            f"Invalid characters in ID text: {value!r}.\n\n"
            f"Suggestions:\n"
            f"1. Use upper-case Crockford base32: 0-9 and A-Z without I, L, O, U\n"
            f"2. Lower-case text is not accepted; do not hand-edit identifiers"
        )


class ValueOverflowError(InvalidFormatError):
    """Text decodes to a value above the 128-bit maximum."""

    def __init__(self, value: object):
        self.value = value
        super().__init__(
            f"ID text overflows 128 bits: {value!r}.\n\n"
            f"Suggestions:\n"
            f"1. The first character must be between 0 and 7\n"
            f"2. The largest identifier is 7ZZZZZZZZZZZZZZZZZZZZZZZZZ"
        )


class ScanValueError(InvalidFormatError, TypeError):
    """Storage value has a type that cannot hold an identifier."""

    def __init__(self, src: object):
        super().__init__(
            f"Cannot scan ID from source of type {type(src).__name__}.\n\n"
            f"Suggestions:\n"
            f"1. Store identifiers in a bytea (16 bytes) or text (26 chars) column\n"
            f"2. NULL columns scan to NIL_ID"
        )
