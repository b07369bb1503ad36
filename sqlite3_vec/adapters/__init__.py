"""Backend shims: call-based ``sqlite3`` and step-based ``aiosqlite``."""
