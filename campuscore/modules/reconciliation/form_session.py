from typing import Any, Dict, Mapping, Optional

from campuscore.modules.entities.base import EntitySchema
from campuscore.schemas.records import RecordBase


class FormSessionState:
    """
    Transient add/edit draft for one entity, independent of the collection.

    Errors come only from `validate()` at submit time; editing a field
    clears that field's error and the fields that depend on it.
    """

    def __init__(self, schema: EntitySchema):
        self.schema = schema
        self.draft: Dict[str, str] = schema.defaults()
        self.errors: Dict[str, str] = {}
        self.is_open = False
        self.editing_id: Optional[Any] = None

    @property
    def is_editing(self) -> bool:
        return self.editing_id is not None

    def open_new(self):
        self.reset()
        self.editing_id = None
        self.is_open = True

    def open_edit(self, record: RecordBase):
        self.draft = self.schema.to_draft(record)
        self.errors = {}
        self.editing_id = record.id
        self.is_open = True

    def set_field(self, key: str, value: Any):
        spec = self.schema.field_spec(key)
        value = "" if value is None else str(value)
        previous = self.draft.get(key, "")
        self.draft[key] = value
        self.errors.pop(key, None)

        if value != previous:
            for dependent in spec.resets:
                self.draft[dependent] = self.schema.field_spec(dependent).default_value()
                self.errors.pop(dependent, None)

    def update(self, fields: Mapping[str, Any]):
        for key, value in fields.items():
            self.set_field(key, value)

    def validate(self) -> Dict[str, str]:
        return self.schema.validate(self.draft)

    def apply_errors(self, errors: Mapping[str, str]):
        self.errors = dict(errors)

    def reset(self):
        self.draft = self.schema.defaults()
        self.errors = {}

    def close(self):
        self.reset()
        self.editing_id = None
        self.is_open = False
