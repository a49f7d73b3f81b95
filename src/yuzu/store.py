"""Read and write the delimited plaintext database file.

Store is the public API:
    store = Store.open("/path/to/yuzu.db", "=")
    store.get("colour")
    store.set("colour", "orange")     # rewrites the whole file
    store.remove("colour")            # rewrites the whole file

File layout (one record per line, no header, no escaping):
    key<delimiter>value\\n

Every line must split on the delimiter into exactly two segments, otherwise
the whole load fails. Later rows win over earlier rows with the same key.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator

logger = logging.getLogger("yuzu.store")

_PARSE_ERROR = "failed: parser error"


class StoreError(Exception):
    """Base class for store failures."""


class ParseError(StoreError, ValueError):
    """A line did not split into exactly one key and one value."""

    def __init__(self, msg: str = _PARSE_ERROR, *, lineno: int | None = None) -> None:
        super().__init__(msg)
        self.lineno = lineno


class StoreIOError(StoreError, OSError):
    """The backing file could not be read or written."""


def parse(raw: str, delimiter: str) -> dict[str, str]:
    """Convert the raw plaintext format to a dict. Raises ParseError."""
    db: dict[str, str] = {}
    for lineno, row in enumerate(_lines(raw), start=1):
        pair = row.split(delimiter)
        if len(pair) != 2:
            raise ParseError(lineno=lineno)
        db[pair[0]] = pair[1]
    return db


def serialize(db: dict[str, str], delimiter: str) -> str:
    """Convert a dict to the raw plaintext format."""
    return "".join(f"{key}{delimiter}{value}\n" for key, value in db.items())


def _lines(raw: str) -> list[str]:
    # Only "\n" ends a record; a trailing one does not open an empty record.
    if not raw:
        return []
    rows = raw.split("\n")
    if rows[-1] == "":
        rows.pop()
    return [row.removesuffix("\r") for row in rows]


class Store:
    """Plaintext key-value database held in memory, written through on every change."""

    def __init__(self, path: Path | str, delimiter: str) -> None:
        if not delimiter:
            msg = "delimiter must be a non-empty string"
            raise ValueError(msg)
        self.path = Path(path)
        self.delimiter = delimiter
        self.db: dict[str, str] = self._load()

    @classmethod
    def open(cls, path: Path | str, delimiter: str) -> Store:
        """Load the file at path. The file must already exist."""
        return cls(path, delimiter)

    def __repr__(self) -> str:
        return f"Store(path={str(self.path)!r}, delimiter={self.delimiter!r}, rows={len(self.db)})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Store):
            return NotImplemented
        return (self.db, self.path, self.delimiter) == (other.db, other.path, other.delimiter)

    __hash__ = None  # type: ignore[assignment]

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def get(self, key: str) -> str | None:
        """Retrieve the value for key."""
        return self.db.get(key)

    def __len__(self) -> int:
        return len(self.db)

    def __contains__(self, key: object) -> bool:
        return key in self.db

    def __iter__(self) -> Iterator[str]:
        return iter(self.db)

    def items(self) -> list[tuple[str, str]]:
        return list(self.db.items())

    def to_dict(self) -> dict[str, str]:
        return dict(self.db)

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    def set(self, key: str, value: str) -> str | None:
        """Set key to value and rewrite the file. Returns the previous value."""
        previous = self.db.get(key)
        self.db[key] = value
        self.save()
        return previous

    def remove(self, key: str) -> str | None:
        """Remove a row and rewrite the file. Returns the removed value."""
        removed = self.db.pop(key, None)
        self.save()
        return removed

    def save(self) -> None:
        """Overwrite the backing file with the whole mapping."""
        # Encode before opening: open("w") truncates the file.
        try:
            data = serialize(self.db, self.delimiter).encode("utf-8")
        except UnicodeEncodeError as exc:
            msg = f"cannot write {self.path}: row is not encodable as UTF-8"
            raise StoreIOError(msg) from exc
        try:
            self.path.write_bytes(data)
        except OSError as exc:
            msg = f"cannot write {self.path}: {exc.strerror or exc}"
            raise StoreIOError(msg) from exc
        logger.debug("saved %d rows to %s", len(self.db), self.path)

    def reload(self) -> None:
        """Discard in-memory changes and re-read the backing file."""
        self.db = self._load()

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _load(self) -> dict[str, str]:
        try:
            # newline="" keeps "\r" so CRLF handling stays in _lines
            with self.path.open(encoding="utf-8", newline="") as f:
                raw = f.read()
        except OSError as exc:
            msg = f"cannot read {self.path}: {exc.strerror or exc}"
            raise StoreIOError(msg) from exc
        except UnicodeDecodeError as exc:
            msg = f"cannot read {self.path}: not valid UTF-8 text"
            raise StoreIOError(msg) from exc
        db = parse(raw, self.delimiter)
        logger.debug("loaded %d rows from %s", len(db), self.path)
        return db
