"""
Remote Collection Store

Wraps one entity's EntityApi and turns every raw response into a typed
outcome. Nothing here touches local state: `load` returns a fresh list and
the write methods return MutationResults for the caller to reconcile.
"""

from typing import Any, Mapping, Optional, Union

from pydantic import ValidationError as PydanticValidationError

from campuscore.core.exceptions import (
    EnvelopeError,
    PartialAcceptanceError,
    RecordNotFoundError,
    TransportError,
)
from campuscore.core.logging_config import logger
from campuscore.modules.entities.base import EntitySchema
from campuscore.modules.reconciliation.result import (
    DeleteResult,
    Failure,
    LoadedRecords,
    LoadFailure,
    MutationResult,
    PartialSuccess,
    Success,
)
from campuscore.schemas.envelopes import MutationEnvelope
from campuscore.schemas.records import RecordBase
from campuscore.services.entity_api import EntityApi


TRANSPORT_FAILURE_MESSAGE = "Unable to reach the record service. Please try again."


class RemoteCollectionStore:
    """Typed load/create/update/delete over one entity's remote records"""

    def __init__(self, schema: EntitySchema, api: EntityApi):
        self.schema = schema
        self.api = api

    # ==================== Reads ====================

    async def load(self, criteria: Optional[Mapping[str, Any]] = None) -> Union[LoadedRecords, LoadFailure]:
        try:
            rows = await self.api.fetch(dict(criteria or {}))
        except (TransportError, EnvelopeError) as e:
            logger.warning(f"Loading {self.schema.name} failed: {e.message}")
            return LoadFailure(f"Failed to load {self.schema.plural_label.lower()}", code=e.code)

        records = LoadedRecords()
        for row in rows or []:
            try:
                records.append(self.schema.parse_record(row))
            except PydanticValidationError as e:
                records.skipped += 1
                logger.warning(f"Skipping malformed {self.schema.name} row: {e.error_count()} error(s)")
        return records

    async def get(self, record_id: Any) -> Union[RecordBase, LoadFailure]:
        try:
            row = await self.api.get(record_id)
        except (TransportError, EnvelopeError) as e:
            logger.warning(f"Fetching {self.schema.name} {record_id} failed: {e.message}")
            return LoadFailure(f"Failed to load {self.schema.label.lower()}", code=e.code)

        if row is None:
            error = RecordNotFoundError(self.schema.label, record_id)
            return LoadFailure(error.message, code=error.code)
        try:
            return self.schema.parse_record(row)
        except PydanticValidationError:
            return LoadFailure(EnvelopeError().message, code="ENVELOPE_ERROR")

    # ==================== Writes ====================

    async def create(self, fields: Mapping[str, Any]) -> MutationResult:
        try:
            raw = await self.api.create(fields)
        except (TransportError, EnvelopeError) as e:
            logger.warning(f"Creating {self.schema.name} failed: {e.message}")
            return Failure(TRANSPORT_FAILURE_MESSAGE, code=e.code)
        return self._parse_write(raw, "create")

    async def update(self, record_id: Any, fields: Mapping[str, Any]) -> MutationResult:
        try:
            raw = await self.api.update(record_id, fields)
        except RecordNotFoundError:
            error = RecordNotFoundError(self.schema.label, record_id)
            return Failure(error.message, code=error.code)
        except (TransportError, EnvelopeError) as e:
            logger.warning(f"Updating {self.schema.name} {record_id} failed: {e.message}")
            return Failure(TRANSPORT_FAILURE_MESSAGE, code=e.code)
        return self._parse_write(raw, "update", record_id)

    async def delete(self, record_id: Any) -> DeleteResult:
        try:
            raw = await self.api.delete(record_id)
        except RecordNotFoundError:
            error = RecordNotFoundError(self.schema.label, record_id)
            return Failure(error.message, code=error.code)
        except (TransportError, EnvelopeError) as e:
            logger.warning(f"Deleting {self.schema.name} {record_id} failed: {e.message}")
            return Failure(TRANSPORT_FAILURE_MESSAGE, code=e.code)

        envelope = self._validate_envelope(raw)
        if envelope is None:
            return Failure(EnvelopeError().message, code="ENVELOPE_ERROR")

        first = envelope.first_result
        if not envelope.success or (first is not None and not first.success):
            return Failure(
                envelope.failure_message() or f"Failed to delete {self.schema.label.lower()}"
            )
        return Success(None)

    # ==================== Envelope parsing ====================

    @staticmethod
    def _validate_envelope(raw: Any) -> Optional[MutationEnvelope]:
        try:
            return MutationEnvelope.model_validate(raw)
        except PydanticValidationError:
            logger.warning("Record service returned a malformed envelope")
            return None

    def _parse_write(self, raw: Any, action: str, record_id: Any = None) -> MutationResult:
        envelope = self._validate_envelope(raw)
        if envelope is None:
            return Failure(EnvelopeError().message, code="ENVELOPE_ERROR")

        if not envelope.success:
            return Failure(
                envelope.failure_message() or f"Failed to {action} {self.schema.label.lower()}"
            )

        # Accepted; only an echoed record with an identity lets us trust local state
        first = envelope.first_result
        record = None
        if first is not None and first.success and first.data:
            try:
                record = self.schema.parse_record(first.data)
            except PydanticValidationError:
                record = None

        if record is not None and record.id is None and record_id is not None:
            record = record.model_copy(update={"id": record_id})

        if record is None or record.id is None:
            partial = PartialAcceptanceError(self.schema.label, action)
            logger.warning(partial.message)
            return PartialSuccess(partial.message)

        return Success(record)
