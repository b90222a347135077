"""
Typed outcomes of record store operations.

Raw service envelopes are parsed once at the store boundary into one of
these, so nothing downstream re-inspects `results[0].success`.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Union


@dataclass(frozen=True)
class Success:
    """Service confirmed the write; `record` is the authoritative copy (None for deletes)"""
    record: Optional[Any] = None

    outcome = "success"


@dataclass(frozen=True)
class PartialSuccess:
    """Service accepted the write but did not echo the record; local state needs a reload"""
    message: str = ""

    outcome = "partial"


@dataclass(frozen=True)
class Failure:
    """Write rejected or never reached the service"""
    message: str
    code: str = "MUTATION_FAILED"

    outcome = "failure"


@dataclass(frozen=True)
class Invalid:
    """Draft failed local validation; nothing was sent"""
    errors: Dict[str, str] = field(default_factory=dict)

    outcome = "invalid"


class LoadedRecords(list):
    """Records from one load; `skipped` counts rows that could not be parsed"""

    def __init__(self, records=(), skipped: int = 0):
        super().__init__(records)
        self.skipped = skipped


@dataclass(frozen=True)
class LoadFailure:
    """A load could not produce a collection"""
    message: str
    code: str = "LOAD_FAILED"


MutationResult = Union[Success, PartialSuccess, Failure]
DeleteResult = Union[Success, Failure]
SubmitResult = Union[Success, PartialSuccess, Failure, Invalid]
