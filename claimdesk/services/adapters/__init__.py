"""
Record store adapters.
"""

from claimdesk.services.adapters.base import RecordStore
from claimdesk.services.adapters.memory_store import InMemoryRecordStore
from claimdesk.services.adapters.sql_store import SqlRecordStore

__all__ = [
    "RecordStore",
    "InMemoryRecordStore",
    "SqlRecordStore",
]
