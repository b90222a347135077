from typing import Any, Callable, Iterator, List, Optional, Sequence

from campuscore.schemas.records import RecordBase


ChangeListener = Callable[[], None]


class RecordCollection:
    """
    Ordered in-memory mirror of one entity's records.

    Only confirmed store results should reach the mutators; every change
    notifies listeners so projections can recompute.
    """

    def __init__(self, records: Optional[Sequence[RecordBase]] = None):
        self._records: List[RecordBase] = list(records or [])
        self._listeners: List[ChangeListener] = []

    def on_change(self, listener: ChangeListener):
        self._listeners.append(listener)

    def _changed(self):
        for listener in self._listeners:
            listener()

    # === reads ===

    @property
    def records(self) -> List[RecordBase]:
        return list(self._records)

    @property
    def ids(self) -> List[Any]:
        return [record.id for record in self._records]

    def find(self, record_id: Any) -> Optional[RecordBase]:
        for record in self._records:
            if record.id == record_id:
                return record
        return None

    def __contains__(self, record_id: Any) -> bool:
        return self.find(record_id) is not None

    def __iter__(self) -> Iterator[RecordBase]:
        return iter(list(self._records))

    def __len__(self) -> int:
        return len(self._records)

    # === mutators ===

    def replace_all(self, records: Sequence[RecordBase]):
        self._records = list(records)
        self._changed()

    def append(self, record: RecordBase):
        self._records.append(record)
        self._changed()

    def replace(self, record: RecordBase) -> bool:
        """Swap in `record` for the entry with the same id; False if absent"""
        for index, existing in enumerate(self._records):
            if existing.id == record.id:
                self._records[index] = record
                self._changed()
                return True
        return False

    def remove(self, record_id: Any) -> int:
        """Drop every entry with `record_id`; returns how many were removed"""
        kept = [record for record in self._records if record.id != record_id]
        removed = len(self._records) - len(kept)
        if removed:
            self._records = kept
            self._changed()
        return removed
