"""Tests for IDValidator and the decode table."""

import pytest
from idx import IDValidator, ValidationResult, new_id
from idx.exceptions import DataSizeError, InvalidCharactersError, ValueOverflowError
from idx.validator import ALPHABET, DECODE, INVALID, check_text


class TestDecodeTable:
    """Tests for the byte lookup table."""

    def test_size(self) -> None:
        """Test that every byte value has an entry."""
        assert len(DECODE) == 256

    def test_immutable(self) -> None:
        """Test that the table cannot be modified."""
        with pytest.raises(TypeError):
            DECODE[0] = 0  # type: ignore[index]

    def test_alphabet_values(self) -> None:
        """Test that alphabet characters map to their index."""
        for index, char in enumerate(ALPHABET):
            assert DECODE[ord(char)] == index

    def test_everything_else_invalid(self) -> None:
        """Test that all other bytes map to the sentinel."""
        valid = {ord(c) for c in ALPHABET}
        for b in range(256):
            if b not in valid:
                assert DECODE[b] == INVALID

    def test_excluded_letters(self) -> None:
        """Test that ambiguous letters and lower case are invalid."""
        for char in "ILOUilou" + "abcxyz":
            assert DECODE[ord(char)] == INVALID


class TestCheckText:
    """Tests for check_text()."""

    def test_valid(self) -> None:
        """Test that valid text passes."""
        check_text(b"01HAJ2Q3T69HJMMBDNAMVZ3FQB")

    def test_size(self) -> None:
        """Test that wrong sizes raise DataSizeError."""
        with pytest.raises(DataSizeError):
            check_text(b"")

    def test_characters(self) -> None:
        """Test that a bad byte raises InvalidCharactersError."""
        with pytest.raises(InvalidCharactersError):
            check_text(b"01HAJ2Q3T69HJMMBDNAMVZ3FQ-")

    def test_overflow(self) -> None:
        """Test that a leading 8 raises ValueOverflowError."""
        with pytest.raises(ValueOverflowError):
            check_text(b"8" + b"0" * 25)


class TestValidationResult:
    """Tests for ValidationResult."""

    def test_warnings_default(self) -> None:
        """Test that warnings default to an empty list."""
        assert ValidationResult(valid=True).warnings == []


class TestIDValidatorValidate:
    """Tests for IDValidator.validate()."""

    def test_valid(self) -> None:
        """Test that a generated ID is valid."""
        result = IDValidator().validate(str(new_id()))

        assert result.valid is True
        assert result.error is None

    def test_invalid_reports_error(self) -> None:
        """Test that the first line of the error is reported."""
        result = IDValidator().validate("wrong")

        assert result.valid is False
        assert result.error is not None
        assert "Bad data size" in result.error
        assert "\n" not in result.error

    def test_invalid_characters(self) -> None:
        """Test the error for characters outside the alphabet."""
        result = IDValidator().validate("01HAJ2Q3T69IJMMBDNAMVZ3FQB")

        assert result.valid is False
        assert "Invalid characters" in result.error

    def test_nil_allowed(self) -> None:
        """Test that the zero ID is valid with a warning by default."""
        result = IDValidator().validate("0" * 26)

        assert result.valid is True
        assert result.warnings == ["Nil ID means unset"]

    def test_nil_rejected(self) -> None:
        """Test that allow_nil=False rejects the zero ID."""
        result = IDValidator(allow_nil=False).validate("0" * 26)

        assert result.valid is False
        assert result.error == "Nil ID is not allowed"

    def test_non_string(self) -> None:
        """Test that non-string input is invalid, not an exception."""
        result = IDValidator().validate(None)  # type: ignore[arg-type]

        assert result.valid is False
