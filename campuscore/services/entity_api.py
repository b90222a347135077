"""
Entity API adapters

One adapter per entity, built from its schema and an injected
RecordsClient. This is the collaborator the record store talks to:

    fetch(criteria)       -> list of raw rows
    get(record_id)        -> raw row or None
    create(fields)        -> write envelope
    update(id, fields)    -> write envelope
    delete(id)            -> write envelope
"""

from typing import Any, Dict, List, Mapping, Optional, Protocol

from campuscore.modules.entities.base import EntitySchema
from campuscore.modules.reconciliation.projection import is_empty_value
from campuscore.services.records_client import RecordsClient


class EntityApi(Protocol):
    """Uniform per-entity collaborator interface"""

    async def fetch(self, criteria: Mapping[str, Any]) -> List[Dict[str, Any]]:
        ...

    async def get(self, record_id: Any) -> Optional[Dict[str, Any]]:
        ...

    async def create(self, fields: Mapping[str, Any]) -> Dict[str, Any]:
        ...

    async def update(self, record_id: Any, fields: Mapping[str, Any]) -> Dict[str, Any]:
        ...

    async def delete(self, record_id: Any) -> Dict[str, Any]:
        ...


def build_conditions(schema: EntitySchema, criteria: Mapping[str, Any]) -> List[Dict[str, Any]]:
    """Translate criteria into record service `where` conditions; unmapped keys stay local"""
    conditions: List[Dict[str, Any]] = []
    for key, value in criteria.items():
        if is_empty_value(value):
            continue
        for remote in schema.remote_filters.get(key, []):
            conditions.append({
                "fieldName": remote.field_name,
                "operator": remote.operator,
                "values": [value],
            })
    return conditions


class RecordsEntityApi:
    """EntityApi backed by the hosted record service"""

    def __init__(self, schema: EntitySchema, client: RecordsClient):
        self.schema = schema
        self.client = client

    async def fetch(self, criteria: Mapping[str, Any]) -> List[Dict[str, Any]]:
        params = {
            "fields": self.schema.remote_fields,
            "where": build_conditions(self.schema, criteria),
        }
        return await self.client.fetch_records(self.schema.table, params)

    async def get(self, record_id: Any) -> Optional[Dict[str, Any]]:
        return await self.client.get_record_by_id(self.schema.table, record_id)

    async def create(self, fields: Mapping[str, Any]) -> Dict[str, Any]:
        params = {"records": [self.schema.to_payload(fields)]}
        return await self.client.create_record(self.schema.table, params)

    async def update(self, record_id: Any, fields: Mapping[str, Any]) -> Dict[str, Any]:
        payload = {"Id": record_id, **self.schema.to_payload(fields)}
        return await self.client.update_record(self.schema.table, {"records": [payload]})

    async def delete(self, record_id: Any) -> Dict[str, Any]:
        return await self.client.delete_record(self.schema.table, {"RecordIds": [record_id]})
