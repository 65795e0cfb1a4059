"""Database package for the contact identity engine."""
from db.connection import (
    contact_transaction,
    dispose_engine,
    get_db,
    get_engine,
    get_sessionmaker,
)

__all__ = ["get_engine", "get_sessionmaker", "get_db", "contact_transaction", "dispose_engine"]
