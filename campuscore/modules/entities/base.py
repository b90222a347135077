"""
Entity schemas

An EntitySchema is everything the generic list controller needs to know
about one entity: its draft fields and their rules, how criteria map to
local filters and remote conditions, and how a draft becomes the payload
the record service stores.
"""

import re
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple, Type, Union

from campuscore.modules.reconciliation.projection import FilterRule
from campuscore.schemas.records import RecordBase


# A rule receives the field value and the whole draft and returns an error message or None
Rule = Callable[[str, Mapping[str, str]], Optional[str]]
Converter = Callable[[str], Any]

EMAIL_PATTERN = re.compile(r"\S+@\S+\.\S+")
DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


# ==========================================
# Validation rules
# ==========================================

def email(message: str = "Email is invalid") -> Rule:
    def rule(value: str, draft: Mapping[str, str]) -> Optional[str]:
        return None if EMAIL_PATTERN.search(value) else message
    return rule


def number_between(low: float, high: float, message: str) -> Rule:
    def rule(value: str, draft: Mapping[str, str]) -> Optional[str]:
        try:
            number = float(value)
        except ValueError:
            return message
        if number != number or number < low or number > high:
            return message
        return None
    return rule


def integer_at_least(low: int, message: str) -> Rule:
    def rule(value: str, draft: Mapping[str, str]) -> Optional[str]:
        try:
            number = int(str(value).strip())
        except ValueError:
            return message
        return None if number >= low else message
    return rule


def one_of(choices: Tuple[str, ...], message: str) -> Rule:
    def rule(value: str, draft: Mapping[str, str]) -> Optional[str]:
        return None if value in choices else message
    return rule


def iso_date(message: str) -> Rule:
    def rule(value: str, draft: Mapping[str, str]) -> Optional[str]:
        if not DATE_PATTERN.match(value):
            return message
        try:
            date.fromisoformat(value)
        except ValueError:
            return message
        return None
    return rule


def not_before(other: str, message: str) -> Rule:
    """Date must not precede the date held in `other` (skipped when that is empty)"""
    def rule(value: str, draft: Mapping[str, str]) -> Optional[str]:
        start = (draft.get(other) or "").strip()
        if not start or not DATE_PATTERN.match(start) or not DATE_PATTERN.match(value):
            return None
        return message if value < start else None
    return rule


# ==========================================
# Converters (draft strings -> stored values)
# ==========================================

def to_text(value: str) -> Optional[str]:
    value = value.strip()
    return value or None


def to_int(value: str) -> Optional[int]:
    value = str(value).strip()
    return int(value) if value else None


def to_int_or_zero(value: str) -> int:
    value = str(value).strip()
    return int(value) if value else 0


def to_float(value: str) -> Optional[float]:
    value = str(value).strip()
    return float(value) if value else None


def today() -> str:
    return date.today().isoformat()


@dataclass(frozen=True)
class FieldSpec:
    key: str
    label: str
    default: Union[str, Callable[[], str]] = ""
    required: bool = False
    rules: Tuple[Rule, ...] = ()
    choices: Optional[Tuple[str, ...]] = None
    resets: Tuple[str, ...] = ()
    convert: Converter = to_text
    # False for form-only fields the table has no column for
    stored: bool = True

    def default_value(self) -> str:
        return self.default() if callable(self.default) else self.default

    def check(self, draft: Mapping[str, str]) -> Optional[str]:
        value = draft.get(self.key)
        value = "" if value is None else str(value)
        if not value.strip():
            return f"{self.label} is required" if self.required else None
        for rule in self.rules:
            error = rule(value, draft)
            if error:
                return error
        return None


@dataclass(frozen=True)
class RemoteFilter:
    field_name: str
    operator: str  # Contains | ExactMatch | Equals


@dataclass
class EntitySchema:
    name: str
    label: str
    plural_label: str
    table: str
    record_model: Type[RecordBase]
    fields: Tuple[FieldSpec, ...]
    display_name: Callable[[Mapping[str, Any]], str]
    filter_rules: Dict[str, FilterRule] = field(default_factory=dict)
    remote_filters: Dict[str, List[RemoteFilter]] = field(default_factory=dict)
    summary_fields: Tuple[str, ...] = ()

    def __post_init__(self):
        self._by_key = {spec.key: spec for spec in self.fields}

    # === draft ===

    @property
    def field_keys(self) -> List[str]:
        return [spec.key for spec in self.fields]

    @property
    def stored_keys(self) -> List[str]:
        return [spec.key for spec in self.fields if spec.stored]

    def field_spec(self, key: str) -> FieldSpec:
        try:
            return self._by_key[key]
        except KeyError:
            raise KeyError(f"{self.label} has no field '{key}'") from None

    def defaults(self) -> Dict[str, str]:
        return {spec.key: spec.default_value() for spec in self.fields}

    def validate(self, draft: Mapping[str, str]) -> Dict[str, str]:
        """Pure: map of field -> message, empty iff the draft is submittable"""
        errors: Dict[str, str] = {}
        for spec in self.fields:
            error = spec.check(draft)
            if error:
                errors[spec.key] = error
        return errors

    def to_draft(self, record: RecordBase) -> Dict[str, str]:
        """Edit draft: the record's values as text, blank where the record has none"""
        draft: Dict[str, str] = {}
        for key in self.field_keys:
            value = getattr(record, key, None)
            draft[key] = "" if value is None else str(value)
        return draft

    # === remote ===

    def to_values(self, draft: Mapping[str, Any]) -> Dict[str, Any]:
        """Convert draft strings to typed values keyed by field name"""
        values: Dict[str, Any] = {}
        for spec in self.fields:
            raw = draft.get(spec.key, spec.default_value())
            if raw is None or not isinstance(raw, str):
                values[spec.key] = raw
            else:
                values[spec.key] = spec.convert(raw)
        return values

    def to_payload(self, draft: Mapping[str, Any]) -> Dict[str, Any]:
        """Updateable fields under the record service's names, plus `Name`"""
        values = self.to_values(draft)
        model_fields = self.record_model.model_fields
        payload: Dict[str, Any] = {"Name": self.display_name(values)}
        for key in self.stored_keys:
            if key == "name":
                continue
            value = values[key]
            alias = model_fields[key].serialization_alias if key in model_fields else None
            payload[alias or key] = value
        return payload

    @property
    def remote_fields(self) -> List[str]:
        model_fields = self.record_model.model_fields
        names = ["Name"]
        for key in self.stored_keys:
            if key == "name":
                continue
            alias = model_fields[key].serialization_alias if key in model_fields else None
            names.append(alias or key)
        return names

    def parse_record(self, data: Mapping[str, Any]) -> RecordBase:
        return self.record_model.model_validate(data)
