"""Storage port and the bundled implementations."""
from orderflow.storage.base import Storage, customer_matches
from orderflow.storage.json_store import JsonFileStore
from orderflow.storage.memory import MemoryStore

__all__ = ["JsonFileStore", "MemoryStore", "Storage", "customer_matches"]
