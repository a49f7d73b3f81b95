"""Plaintext key-value store: one delimited text file, loaded whole, rewritten on every change.

Layout:
    yuzu.toml             # optional project config: database file + delimiter
    yuzu.db               # rows of key<delimiter>value, one per line

The file and the in-memory mapping are kept in lockstep: set() and remove()
rewrite the entire file before returning. There is no locking, no escaping
and no temp-file swap; a crash mid-write can truncate the file.
"""

from yuzu.config import ConfigError, YuzuConfig, init_config, load_config
from yuzu.store import ParseError, Store, StoreError, StoreIOError

__all__ = [
    "ConfigError",
    "ParseError",
    "Store",
    "StoreError",
    "StoreIOError",
    "YuzuConfig",
    "init_config",
    "load_config",
]
