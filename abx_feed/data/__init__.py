"""
Data Layer - Storage for records received from the feed.

Main Components:
    RecordStore: Append-only record list with sequence membership tracking
"""

from .record_store import RecordStore

__all__ = [
    "RecordStore",
]
