"""Charge point persistence used by the OCPP handlers and the HTTP API."""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from .models import ChargePoint


class ChargePointNotFoundError(LookupError):
    pass


class DuplicateChargePointError(ValueError):
    pass


class ChargePointRepository(ABC):
    """Storage port for :class:`ChargePoint` records."""

    @abstractmethod
    def find(self, id: str) -> Optional[ChargePoint]:
        """Return the record with technical id ``id``."""

    @abstractmethod
    def find_by_charge_point_id(self, charge_point_id: str) -> Optional[ChargePoint]:
        """Return the record announced under ``charge_point_id``."""

    @abstractmethod
    def find_all(self) -> List[ChargePoint]:
        """Return every stored record."""

    @abstractmethod
    def create(self, **data: Any) -> ChargePoint:
        """Store a new record; raises :class:`DuplicateChargePointError`."""

    @abstractmethod
    def update(self, id: str, **changes: Any) -> ChargePoint:
        """Apply ``changes``; raises :class:`ChargePointNotFoundError`."""

    @abstractmethod
    def delete(self, id: str) -> None:
        """Remove a record; raises :class:`ChargePointNotFoundError`."""


class InMemoryChargePointRepository(ChargePointRepository):
    """Process-local store.

    Handlers run on the event loop while FastAPI runs sync endpoints in a
    worker thread, so every access goes through a lock.
    """

    def __init__(self) -> None:
        self._records: Dict[str, ChargePoint] = {}
        self._lock = threading.Lock()

    def find(self, id: str) -> Optional[ChargePoint]:
        with self._lock:
            return self._records.get(id)

    def find_by_charge_point_id(self, charge_point_id: str) -> Optional[ChargePoint]:
        with self._lock:
            return self._by_charge_point_id(charge_point_id)

    def find_all(self) -> List[ChargePoint]:
        with self._lock:
            return sorted(self._records.values(), key=lambda cp: cp.created_at)

    def create(self, **data: Any) -> ChargePoint:
        record = ChargePoint(**data)
        with self._lock:
            if self._by_charge_point_id(record.charge_point_id) is not None:
                raise DuplicateChargePointError(
                    f"ChargePoint {record.charge_point_id!r} already exists"
                )
            self._records[record.id] = record
        return record

    def update(self, id: str, **changes: Any) -> ChargePoint:
        with self._lock:
            current = self._records.get(id)
            if current is None:
                raise ChargePointNotFoundError(f"ChargePoint with id={id!r} not found")
            changes.pop("id", None)
            changes.pop("charge_point_id", None)
            changes["updated_at"] = datetime.now(timezone.utc)
            updated = current.model_copy(update=changes)
            self._records[id] = updated
        return updated

    def delete(self, id: str) -> None:
        with self._lock:
            if self._records.pop(id, None) is None:
                raise ChargePointNotFoundError(f"ChargePoint with id={id!r} not found")

    def _by_charge_point_id(self, charge_point_id: str) -> Optional[ChargePoint]:
        for record in self._records.values():
            if record.charge_point_id == charge_point_id:
                return record
        return None
