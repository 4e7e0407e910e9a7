"""PostgreSQL-backed block store."""

from namada_explorer.database.connection import Database

__all__ = ["Database"]
