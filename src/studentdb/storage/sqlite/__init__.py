"""Low-level SQLite helpers: connections, cursors and the versioned schema."""

__all__: list[str] = []
