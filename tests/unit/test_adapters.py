"""Tests for psycopg adapters (no database needed)."""

import psycopg
import pytest
from psycopg.adapt import AdaptersMap, PyFormat
from psycopg.pq import Format

from idx import ID, NIL_ID, InvalidFormatError, new_id
from idx.adapters import (
    BYTEA_OID,
    TEXT_OID,
    IDBinaryDumper,
    IDBinaryLoader,
    IDStringDumper,
    IDStringLoader,
    IDTextDumper,
    TextValuer,
    TextValuerDumper,
    register_adapters,
    register_loaders,
    scan_row,
)
from idx.config import Config, StorageConfig


@pytest.fixture
def adapters() -> AdaptersMap:
    """Fresh adapters map, isolated from the global one."""
    return AdaptersMap(psycopg.adapters)


class TestTextValuer:
    """Tests for TextValuer."""

    def test_value(self) -> None:
        """Test that the value is the canonical string."""
        id_ = new_id()
        assert TextValuer(id_).value() == str(id_)

    def test_nil_is_null(self) -> None:
        """Test that NIL_ID gives NULL."""
        assert TextValuer(NIL_ID).value() is None


class TestDumpers:
    """Tests for the ID dumpers."""

    def test_binary_dumper(self) -> None:
        """Test binary bytea dumping."""
        id_ = new_id()
        dumper = IDBinaryDumper(ID)

        assert dumper.dump(id_) == id_.to_bytes()
        assert dumper.dump(NIL_ID) is None
        assert dumper.oid == BYTEA_OID
        assert dumper.format == Format.BINARY

    def test_text_dumper_nil(self) -> None:
        """Test that the text bytea dumper writes NULL for NIL_ID."""
        dumper = IDTextDumper(ID)

        assert dumper.dump(NIL_ID) is None
        assert dumper.dump(new_id()) is not None

    def test_string_dumper(self) -> None:
        """Test dumping as canonical text."""
        id_ = new_id()
        dumper = IDStringDumper(ID)

        assert dumper.dump(id_) == str(id_).encode()
        assert dumper.dump(NIL_ID) is None
        assert dumper.oid == TEXT_OID

    def test_text_valuer_dumper(self) -> None:
        """Test dumping a TextValuer."""
        id_ = new_id()
        dumper = TextValuerDumper(TextValuer)

        assert dumper.dump(TextValuer(id_)) == str(id_).encode()
        assert dumper.dump(TextValuer(NIL_ID)) is None


class TestLoaders:
    """Tests for the ID loaders."""

    def test_binary_loader(self) -> None:
        """Test loading binary bytea."""
        id_ = new_id()
        loader = IDBinaryLoader(BYTEA_OID)

        assert loader.load(id_.to_bytes()) == id_
        assert loader.load(memoryview(id_.to_bytes())) == id_

    def test_string_loader(self) -> None:
        """Test loading canonical text."""
        id_ = new_id()
        assert IDStringLoader(TEXT_OID).load(str(id_).encode()) == id_

    def test_string_loader_strict(self) -> None:
        """Test that the text loader rejects lower case."""
        with pytest.raises(InvalidFormatError):
            IDStringLoader(TEXT_OID).load(str(new_id()).lower().encode())


class TestRegisterAdapters:
    """Tests for register_adapters()."""

    def test_binary_default(self, adapters: AdaptersMap) -> None:
        """Test that the default config dumps bytea."""
        register_adapters(adapters)

        assert adapters.get_dumper(ID, PyFormat.BINARY) is IDBinaryDumper
        assert adapters.get_dumper(ID, PyFormat.TEXT) is IDTextDumper
        assert adapters.get_dumper(TextValuer, PyFormat.TEXT) is TextValuerDumper

    def test_text_format(self, adapters: AdaptersMap) -> None:
        """Test that storage.format = text dumps strings."""
        config = Config(storage=StorageConfig(format="text"))
        register_adapters(adapters, config)

        assert adapters.get_dumper(ID, PyFormat.TEXT) is IDStringDumper

    def test_global_untouched(self, adapters: AdaptersMap) -> None:
        """Test that registering on a copy leaves the global map alone."""
        register_adapters(adapters)

        with pytest.raises(psycopg.ProgrammingError):
            psycopg.adapters.get_dumper(ID, PyFormat.BINARY)


class TestRegisterLoaders:
    """Tests for register_loaders()."""

    def test_bytea(self, adapters: AdaptersMap) -> None:
        """Test registering bytea loaders."""
        register_loaders(adapters)

        assert adapters.get_loader(BYTEA_OID, Format.BINARY) is IDBinaryLoader

    def test_text(self, adapters: AdaptersMap) -> None:
        """Test registering text loaders."""
        register_loaders(adapters, "text")

        assert adapters.get_loader(TEXT_OID, Format.TEXT) is IDStringLoader

    def test_unsupported(self, adapters: AdaptersMap) -> None:
        """Test that other types raise ValueError."""
        with pytest.raises(ValueError, match="Unsupported column type"):
            register_loaders(adapters, "uuid")


class TestScanRow:
    """Tests for scan_row()."""

    def test_null_becomes_nil(self) -> None:
        """Test that NULL cells scan to NIL_ID."""
        id_ = new_id()
        row = ("name", id_.to_bytes(), None)

        assert scan_row(row, 1, 2) == (id_, NIL_ID)
