"""
Mutation Controller

Runs one user-initiated add, edit or delete at a time:

    validate draft → submit through the store → reconcile the collection
    → emit exactly one notification

Invalid drafts never reach the store. A second submit while one is in
flight is ignored. Failures leave the collection and the draft untouched.
"""

from enum import Enum
from typing import Any, Awaitable, Callable, Optional

from campuscore.core.exceptions import CampusCoreError, ValidationError
from campuscore.core.logging_config import logger, set_entity
from campuscore.modules.entities.base import EntitySchema
from campuscore.modules.reconciliation.collection import RecordCollection
from campuscore.modules.reconciliation.form_session import FormSessionState
from campuscore.modules.reconciliation.notifications import NotificationCenter
from campuscore.modules.reconciliation.result import (
    DeleteResult,
    Failure,
    Invalid,
    PartialSuccess,
    SubmitResult,
    Success,
)
from campuscore.modules.reconciliation.state_machine import MutationStateMachine
from campuscore.modules.reconciliation.store import RemoteCollectionStore


ReloadCallback = Callable[[], Awaitable[Any]]


class MutationAction(str, Enum):
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


PAST_TENSE = {
    MutationAction.CREATE: "added",
    MutationAction.UPDATE: "updated",
    MutationAction.DELETE: "deleted",
}

INVALID_FORM_MESSAGE = ValidationError().message


class MutationController:

    def __init__(
        self,
        schema: EntitySchema,
        store: RemoteCollectionStore,
        collection: RecordCollection,
        notifications: NotificationCenter,
        reload: Optional[ReloadCallback] = None,
    ):
        self.schema = schema
        self.store = store
        self.collection = collection
        self.notifications = notifications
        self.reload = reload
        self.state = MutationStateMachine(schema.name)

    @property
    def busy(self) -> bool:
        return not self.state.is_idle

    async def submit(self, form: FormSessionState) -> Optional[SubmitResult]:
        """
        Validate and send the form's draft as a create or update.

        Returns None when ignored because another mutation is in flight.
        """
        if self.busy:
            logger.debug(f"[{self.schema.name}] Submit ignored: {self.state.state.value}")
            return None

        set_entity(self.schema.name)
        action = MutationAction.UPDATE if form.is_editing else MutationAction.CREATE
        self.state.validate(action.value)

        errors = form.validate()
        if errors:
            form.apply_errors(errors)
            logger.debug(f"[{self.schema.name}] Draft rejected: {sorted(errors)}")
            self.state.settle("validation failed")
            self.notifications.error(INVALID_FORM_MESSAGE, self.schema.name)
            return Invalid(errors)

        self.state.submit()
        try:
            try:
                if action is MutationAction.CREATE:
                    result = await self.store.create(dict(form.draft))
                else:
                    result = await self.store.update(form.editing_id, dict(form.draft))
            except CampusCoreError as e:
                logger.log_error_with_context(e, context=f"{self.schema.name} {action.value}")
                result = Failure(e.message, code=e.code)

            if isinstance(result, Success):
                self.state.reconcile(result.outcome)
                if action is MutationAction.CREATE:
                    self.collection.append(result.record)
                elif not self.collection.replace(result.record):
                    self.collection.append(result.record)
                form.close()
                self.notifications.success(self._message(action), self.schema.name)
            elif isinstance(result, PartialSuccess):
                self.state.reconcile(result.outcome)
                self.notifications.warning(
                    f"{self.schema.label} {PAST_TENSE[action]} but details not returned",
                    self.schema.name,
                )
                if self.reload is not None:
                    await self.reload()
            else:
                self.state.fail(result.message)
                self.notifications.error(result.message, self.schema.name)

            logger.log_mutation(
                self.schema.name, action.value, result.outcome,
                record_id=self._record_id(result, form.editing_id),
            )
            return result
        finally:
            if not self.state.is_idle:
                self.state.settle("done") or self.state.abort("unexpected error")

    async def delete(self, record_id: Any) -> Optional[DeleteResult]:
        """Delete by identity; the record leaves the collection only on confirmed success"""
        if self.busy:
            logger.debug(f"[{self.schema.name}] Delete ignored: {self.state.state.value}")
            return None

        set_entity(self.schema.name)
        self.state.validate(MutationAction.DELETE.value)
        if record_id is None:
            self.state.settle("no identity")
            message = f"{self.schema.label} has no identity to delete"
            self.notifications.error(message, self.schema.name)
            return Failure(message, code="VALIDATION_ERROR")

        self.state.submit()
        try:
            try:
                result = await self.store.delete(record_id)
            except CampusCoreError as e:
                logger.log_error_with_context(e, context=f"{self.schema.name} delete")
                result = Failure(e.message, code=e.code)

            if isinstance(result, Success):
                self.state.reconcile(result.outcome)
                self.collection.remove(record_id)
                self.notifications.success(self._message(MutationAction.DELETE), self.schema.name)
            else:
                self.state.fail(result.message)
                self.notifications.error(result.message, self.schema.name)

            logger.log_mutation(self.schema.name, "delete", result.outcome, record_id=record_id)
            return result
        finally:
            if not self.state.is_idle:
                self.state.settle("done") or self.state.abort("unexpected error")

    def _message(self, action: MutationAction) -> str:
        return f"{self.schema.label} {PAST_TENSE[action]} successfully"

    @staticmethod
    def _record_id(result: Any, fallback: Any) -> Any:
        record = getattr(result, "record", None)
        return record.id if record is not None else fallback
