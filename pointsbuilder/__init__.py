"""secp256k1 point-range generation by batched addition, with SQLite storage and lookup."""

__version__ = "0.1.0"