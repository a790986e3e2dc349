"""Mini README: Relational persistence for the donation ledger.

``RecordStore`` is the only entry point other packages use; ``database``
builds engines and sessions, ``schema`` holds the table mappings.
"""

from .database import create_database_engine, create_session_factory, init_database
from .repository import AdminAccount, RecordStore

__all__ = [
    "AdminAccount",
    "RecordStore",
    "create_database_engine",
    "create_session_factory",
    "init_database",
]
