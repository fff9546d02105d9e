"""
Persistence adapters.

Services depend on JsonStore's load/save/transaction primitives rather than
touching the JSON file themselves.
"""

from .json_storage import JsonStore, get_store, next_id

__all__ = ["JsonStore", "get_store", "next_id"]
