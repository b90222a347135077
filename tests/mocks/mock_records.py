"""
Mock record service for testing
Implements the EntityApi interface against an in-memory table
"""
import asyncio
import itertools
from typing import Any, Dict, List, Mapping, Optional

from campuscore.core.exceptions import RecordNotFoundError, TransportError
from campuscore.modules.entities.base import EntitySchema
from campuscore.modules.reconciliation.projection import project


class FakeEntityApi:
    """
    In-memory EntityApi with switchable failure modes.

    Modes (set `write_mode` before a create/update):
        "ok"        - store the row and echo it back
        "partial"   - store the row but echo no results
        "reject"    - answer with a failed envelope
        "transport" - raise TransportError

    `hold_fetches()` makes every fetch wait on a future in `pending` so
    tests can resolve overlapping loads in any order.
    """

    def __init__(self, schema: EntitySchema, rows: Optional[List[Dict[str, Any]]] = None, first_id: int = 1):
        self.schema = schema
        self.rows: Dict[Any, Dict[str, Any]] = {row["Id"]: dict(row) for row in rows or []}
        existing = [r for r in self.rows if isinstance(r, int)]
        self._ids = itertools.count(max([first_id] + [r + 1 for r in existing]))
        self.write_mode = "ok"
        self.reject_message = "Record rejected by service"
        self.fail_fetch = False
        self.calls: List[tuple] = []
        self.pending: List[asyncio.Future] = []
        self._hold = False

    def hold_fetches(self):
        self._hold = True

    def snapshot(self) -> List[Dict[str, Any]]:
        return [dict(row) for row in self.rows.values()]

    async def fetch(self, criteria: Mapping[str, Any]) -> List[Dict[str, Any]]:
        self.calls.append(("fetch", dict(criteria)))
        if self._hold:
            future = asyncio.get_running_loop().create_future()
            self.pending.append(future)
            return await future
        if self.fail_fetch:
            raise TransportError("Record service unreachable")
        rows = self.snapshot()
        parsed = [self.schema.parse_record(row) for row in rows]
        kept = {record.id for record in project(parsed, criteria, self.schema.filter_rules)}
        return [row for row in rows if row["Id"] in kept]

    async def get(self, record_id: Any) -> Optional[Dict[str, Any]]:
        self.calls.append(("get", record_id))
        row = self.rows.get(record_id)
        return dict(row) if row is not None else None

    async def create(self, fields: Mapping[str, Any]) -> Dict[str, Any]:
        self.calls.append(("create", dict(fields)))
        if self.write_mode == "transport":
            raise TransportError("Record service unreachable")
        if self.write_mode == "reject":
            return {"success": False, "message": self.reject_message}

        row = {"Id": next(self._ids), **self.schema.to_payload(fields)}
        self.rows[row["Id"]] = row
        if self.write_mode == "partial":
            return {"success": True, "results": []}
        return {"success": True, "results": [{"success": True, "data": dict(row)}]}

    async def update(self, record_id: Any, fields: Mapping[str, Any]) -> Dict[str, Any]:
        self.calls.append(("update", record_id, dict(fields)))
        if self.write_mode == "transport":
            raise TransportError("Record service unreachable")
        if record_id not in self.rows:
            raise RecordNotFoundError(self.schema.table, record_id)
        if self.write_mode == "reject":
            return {"success": False, "message": self.reject_message}

        row = {"Id": record_id, **self.schema.to_payload(fields)}
        self.rows[record_id] = row
        if self.write_mode == "partial":
            return {"success": True, "results": [{"success": True}]}
        return {"success": True, "results": [{"success": True, "data": dict(row)}]}

    async def delete(self, record_id: Any) -> Dict[str, Any]:
        self.calls.append(("delete", record_id))
        if self.write_mode == "transport":
            raise TransportError("Record service unreachable")
        if record_id not in self.rows:
            return {
                "success": True,
                "results": [{"success": False, "message": "Record not found"}],
            }
        del self.rows[record_id]
        return {"success": True, "results": [{"success": True}]}

    def writes(self) -> List[tuple]:
        return [call for call in self.calls if call[0] in ("create", "update", "delete")]
