"""psycopg 3 adapters for IDs.

Dumpers write NIL_ID as NULL and any other ID as 16 bytes (``bytea``) or,
with ``storage.format = "text"``, as its canonical string. Loaders are
opt-in because they take over every column of the given type.

Example:
    >>> conn = psycopg.connect(dsn)
    >>> register_adapters(conn)
    >>> conn.execute("INSERT INTO item (id, fk_parent) VALUES (%s, %s)", (new_id(), NIL_ID))
"""

import logging
from typing import Any

from psycopg import postgres
from psycopg.abc import AdaptContext, Buffer
from psycopg.adapt import Dumper, Loader
from psycopg.pq import Escaping, Format
from psycopg.types.string import ByteaLoader

from idx.config import DEFAULT_CONFIG, Config
from idx.identifier import ID

logger = logging.getLogger(__name__)

BYTEA_OID = postgres.types["bytea"].oid
TEXT_OID = postgres.types["text"].oid


class TextValuer:
    """Wrapper storing an ID as canonical text instead of bytes.

    Example:
        >>> cur.execute("INSERT INTO log (ref) VALUES (%s)", (TextValuer(id_),))
    """

    __slots__ = ("id",)

    def __init__(self, id_: ID):
        self.id = id_

    def value(self) -> str | None:
        """Return the storage driver value (None for NIL_ID)."""
        if self.id.is_zero():
            return None
        return str(self.id)

    def __repr__(self) -> str:
        return f"TextValuer({self.id!r})"


class IDBinaryDumper(Dumper):
    """Dump an ID as binary bytea."""

    format = Format.BINARY
    oid = BYTEA_OID

    def dump(self, obj: ID) -> Buffer | None:
        return obj.value()


class IDTextDumper(Dumper):
    """Dump an ID as escaped text bytea."""

    oid = BYTEA_OID

    def __init__(self, cls: type, context: AdaptContext | None = None):
        super().__init__(cls, context)
        self._esc = Escaping(self.connection.pgconn if self.connection else None)

    def dump(self, obj: ID) -> Buffer | None:
        value = obj.value()
        if value is None:
            return None
        return self._esc.escape_bytea(value)


class IDStringDumper(Dumper):
    """Dump an ID as its canonical text."""

    oid = TEXT_OID

    def dump(self, obj: ID) -> Buffer | None:
        if obj.is_zero():
            return None
        return obj.marshal_text()


class TextValuerDumper(Dumper):
    """Dump a TextValuer as text."""

    oid = TEXT_OID

    def dump(self, obj: TextValuer) -> Buffer | None:
        value = obj.value()
        if value is None:
            return None
        return value.encode("ascii")


class IDBinaryLoader(Loader):
    """Load a binary bytea value into an ID."""

    format = Format.BINARY

    def load(self, data: Buffer) -> ID:
        return ID.scan(bytes(data))


class IDTextLoader(ByteaLoader):
    """Load a text bytea value into an ID."""

    def load(self, data: Buffer) -> ID:
        return ID.scan(super().load(data))


class IDStringLoader(Loader):
    """Load a text column holding canonical text into an ID."""

    def load(self, data: Buffer) -> ID:
        return ID.unmarshal_text(bytes(data))


def register_adapters(context: AdaptContext, config: Config | None = None) -> None:
    """Register ID dumpers on a connection or cursor.

    Args:
        context: psycopg connection, cursor or adapters map
        config: Configuration (storage.format picks bytes or text)
    """
    cfg = config or DEFAULT_CONFIG
    adapters = context.adapters

    if cfg.storage.format == "text":
        adapters.register_dumper(ID, IDStringDumper)
    else:
        adapters.register_dumper(ID, IDTextDumper)
        adapters.register_dumper(ID, IDBinaryDumper)
    adapters.register_dumper(TextValuer, TextValuerDumper)

    logger.debug(f"Registered ID dumpers ({cfg.storage.format}) on {context!r}")


def register_loaders(context: AdaptContext, typename: str = "bytea") -> None:
    """Register ID loaders for every column of a type.

    Args:
        context: psycopg connection, cursor or adapters map
        typename: "bytea" for binary storage, "text" or "varchar" for text storage

    Note:
        psycopg does not call loaders for NULL; use ``ID.scan(value)`` on the
        fetched value when NULL must become NIL_ID.
    """
    adapters = context.adapters

    if typename == "bytea":
        adapters.register_loader(typename, IDTextLoader)
        adapters.register_loader(typename, IDBinaryLoader)
    elif typename in ("text", "varchar", "bpchar"):
        adapters.register_loader(typename, IDStringLoader)
    else:
        raise ValueError(
            f"Unsupported column type for IDs: {typename}. "
            f"Available: bytea, text, varchar, bpchar"
        )

    logger.debug(f"Registered ID loaders for {typename} on {context!r}")


def scan_row(row: Any, *indexes: int) -> tuple[ID, ...]:
    """Scan the given positions of a fetched row into IDs (NULL becomes NIL_ID)."""
    return tuple(ID.scan(row[i]) for i in indexes)
