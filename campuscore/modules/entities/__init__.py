"""
Per-entity schemas

Each entity supplies its field list, validation rules, filter rules and
display mapping; everything else is generic.
"""

from typing import Dict

from campuscore.modules.entities.base import EntitySchema, FieldSpec, RemoteFilter
from campuscore.modules.entities.students import STUDENT_SCHEMA
from campuscore.modules.entities.courses import COURSE_SCHEMA
from campuscore.modules.entities.schedules import SCHEDULE_SCHEMA
from campuscore.modules.entities.attendance import ATTENDANCE_SCHEMA
from campuscore.modules.entities.analytics import ANALYTICS_SCHEMA


ENTITY_SCHEMAS: Dict[str, EntitySchema] = {
    schema.name: schema
    for schema in (
        STUDENT_SCHEMA,
        COURSE_SCHEMA,
        SCHEDULE_SCHEMA,
        ATTENDANCE_SCHEMA,
        ANALYTICS_SCHEMA,
    )
}


def get_schema(name: str) -> EntitySchema:
    try:
        return ENTITY_SCHEMAS[name]
    except KeyError:
        raise KeyError(
            f"Unknown entity '{name}'. Available: {', '.join(sorted(ENTITY_SCHEMAS))}"
        ) from None


__all__ = [
    "EntitySchema",
    "FieldSpec",
    "RemoteFilter",
    "ENTITY_SCHEMAS",
    "get_schema",
    "STUDENT_SCHEMA",
    "COURSE_SCHEMA",
    "SCHEDULE_SCHEMA",
    "ATTENDANCE_SCHEMA",
    "ANALYTICS_SCHEMA",
]
