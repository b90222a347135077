"""
Entity List Controller

The page-level controller shared by every entity. It owns the collection,
the filter criteria and derived projection, the form session and the
mutation controller.

Loads may overlap when criteria change quickly. Each load takes the next
sequence number and only the latest issued one may touch the collection.
"""

from typing import Any, Dict, List, Mapping, Optional

from campuscore.core.logging_config import logger, set_entity, set_request_seq
from campuscore.modules.entities.base import EntitySchema
from campuscore.modules.reconciliation.collection import RecordCollection
from campuscore.modules.reconciliation.form_session import FormSessionState
from campuscore.modules.reconciliation.mutation_controller import MutationController
from campuscore.modules.reconciliation.notifications import NotificationCenter
from campuscore.modules.reconciliation.projection import FilterProjection
from campuscore.modules.reconciliation.result import (
    DeleteResult,
    LoadFailure,
    SubmitResult,
)
from campuscore.modules.reconciliation.store import RemoteCollectionStore
from campuscore.schemas.records import RecordBase
from campuscore.services.entity_api import EntityApi


class EntityListController:
    """
    Usage:
        students = EntityListController(STUDENT_SCHEMA, RecordsEntityApi(STUDENT_SCHEMA, client))
        await students.refresh()
        students.set_filter("search", "emma")
        students.projection        # filtered, in collection order

        students.start_add()
        students.form.update({"name": "Emma", ...})
        await students.submit()
    """

    def __init__(
        self,
        schema: EntitySchema,
        api: EntityApi,
        notifications: Optional[NotificationCenter] = None,
    ):
        self.schema = schema
        self.store = RemoteCollectionStore(schema, api)
        self.notifications = notifications or NotificationCenter()
        self.collection = RecordCollection()
        self.criteria: Dict[str, Any] = {}
        self.filter = FilterProjection(schema.filter_rules)
        self.projection: List[RecordBase] = []
        self.form = FormSessionState(schema)
        self.controller = MutationController(
            schema,
            self.store,
            self.collection,
            self.notifications,
            reload=self.resync,
        )
        self.loading = False
        self.last_error: Optional[str] = None
        self._load_seq = 0

        self.collection.on_change(self._recompute)

    # ==================== Projection ====================

    def _recompute(self):
        self.projection = self.filter.project(self.collection, self.criteria)

    def set_filter(self, key: str, value: Any):
        self.criteria[key] = value
        self._recompute()

    def set_criteria(self, criteria: Mapping[str, Any]):
        self.criteria = dict(criteria)
        self._recompute()

    def clear_filters(self):
        self.criteria = {}
        self._recompute()

    # ==================== Loading ====================

    @property
    def load_sequence(self) -> int:
        return self._load_seq

    async def refresh(self, criteria: Optional[Mapping[str, Any]] = None, silent: bool = False) -> bool:
        """
        Reload the collection from the store.

        Returns True when this call's result was applied; False when it
        failed or a newer load superseded it.
        """
        self._load_seq += 1
        seq = self._load_seq
        set_entity(self.schema.name)
        set_request_seq(seq)
        self.loading = True

        result = await self.store.load(dict(criteria or {}))

        if seq != self._load_seq:
            logger.debug(f"[{self.schema.name}] Discarding stale load #{seq} (latest #{self._load_seq})")
            return False

        self.loading = False
        if isinstance(result, LoadFailure):
            self.last_error = result.message
            if not silent:
                self.notifications.error(result.message, self.schema.name)
            return False

        self.last_error = None
        self.collection.replace_all(result)
        skipped = getattr(result, "skipped", 0)
        if skipped and not silent:
            self.notifications.warning(
                f"{skipped} {self.schema.label.lower()} row(s) could not be read and were skipped",
                self.schema.name,
            )
        return True

    async def resync(self) -> bool:
        """Full reload after the service left local state in doubt"""
        return await self.refresh(silent=True)

    async def search(self, key: str, value: Any) -> bool:
        """Update one criterion locally, then refetch from the service with all criteria"""
        self.set_filter(key, value)
        return await self.refresh(self.criteria)

    # ==================== Mutations ====================

    def start_add(self):
        self.form.open_new()

    def start_edit(self, record_id: Any) -> bool:
        record = self.collection.find(record_id)
        if record is None:
            self.notifications.error(
                f"{self.schema.label} with ID '{record_id}' not found", self.schema.name
            )
            return False
        self.form.open_edit(record)
        return True

    def cancel(self):
        self.form.close()

    async def submit(self) -> Optional[SubmitResult]:
        return await self.controller.submit(self.form)

    async def delete(self, record_id: Any) -> Optional[DeleteResult]:
        return await self.controller.delete(record_id)

    @property
    def busy(self) -> bool:
        return self.controller.busy
