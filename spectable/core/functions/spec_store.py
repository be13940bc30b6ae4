# spectable/core/functions/spec_store.py
"""
Spec Store - Abstract Interface for Spec Table Persistence

The spec table payload is stored as an opaque JSON value attached to a
parent content record (for example the ``specs`` column of a product row).
This module defines the collaborator interface the editor saves through.

Module Components:
- BaseSpecStore: Abstract base class for persistence backends
- InMemorySpecStore: Dict-backed store (tests, previews, offline editing)

Usage Example:
    from spectable.core.functions.spec_store import BaseSpecStore

    class ProductSpecStore(BaseSpecStore):
        def load_specs(self, record_id):
            return db.table("products").select("specs").eq("id", record_id)...

        def save_specs(self, record_id, payload):
            result = db.table("products").update({"specs": payload}).eq("id", record_id)...
            return result.ok
"""
import copy
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from spectable.core.grid.grid_constants import PersistenceError

logger = logging.getLogger("spec-table")


class BaseSpecStore(ABC):
    """Abstract base class for spec payload persistence.

    Implementations replace the whole payload on every save; partial
    writes are not supported. A failed save is reported either by
    returning False or by raising (PersistenceError or any transport
    error); the editor treats both the same way.
    """

    @abstractmethod
    def load_specs(self, record_id: str) -> Optional[Dict[str, Any]]:
        """Return the stored payload for a record, or None for a fresh table."""
        pass

    @abstractmethod
    def save_specs(self, record_id: str, payload: Optional[Dict[str, Any]]) -> bool:
        """Replace the stored payload; return True on success."""
        pass


class InMemorySpecStore(BaseSpecStore):
    """Dict-backed store. Payloads are deep-copied in both directions."""

    def __init__(self, initial: Optional[Dict[str, Any]] = None):
        self._records: Dict[str, Any] = copy.deepcopy(initial) if initial else {}
        self.save_count = 0

    def load_specs(self, record_id: str) -> Optional[Dict[str, Any]]:
        return copy.deepcopy(self._records.get(record_id))

    def save_specs(self, record_id: str, payload: Optional[Dict[str, Any]]) -> bool:
        if record_id is None or record_id == "":
            raise PersistenceError("Cannot save specs without a record id")
        self._records[record_id] = copy.deepcopy(payload)
        self.save_count += 1
        logger.debug(f"Stored specs for record '{record_id}' (save #{self.save_count})")
        return True

    def __contains__(self, record_id: object) -> bool:
        return record_id in self._records
