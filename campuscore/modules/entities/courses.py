from campuscore.modules.entities.base import (
    EntitySchema, FieldSpec, RemoteFilter, integer_at_least, one_of, to_int, to_int_or_zero,
)
from campuscore.modules.reconciliation.projection import FilterRule
from campuscore.schemas.records import CourseRecord


COURSE_STATUSES = ("active", "inactive")

COURSE_SCHEMA = EntitySchema(
    name="courses",
    label="Course",
    plural_label="Courses",
    table="course",
    record_model=CourseRecord,
    fields=(
        FieldSpec("code", "Course code", required=True),
        FieldSpec("name", "Course name", required=True),
        FieldSpec(
            "credits", "Credits", required=True,
            rules=(integer_at_least(1, "Credits must be a whole number of at least 1"),),
            convert=to_int,
        ),
        FieldSpec("department", "Department", required=True),
        FieldSpec("instructor", "Instructor"),
        FieldSpec("schedule", "Schedule"),
        FieldSpec(
            "max_enrollment", "Max enrollment",
            rules=(integer_at_least(0, "Max enrollment must be a whole number"),),
            convert=to_int_or_zero,
        ),
        FieldSpec(
            "status", "Status", default="active", choices=COURSE_STATUSES,
            rules=(one_of(COURSE_STATUSES, "Status must be active or inactive"),),
        ),
    ),
    display_name=lambda values: values.get("name") or "",
    filter_rules={
        "search": FilterRule.contains("name", "code", "department", "instructor"),
        "department": FilterRule.exact("department"),
        "status": FilterRule.exact("status"),
    },
    remote_filters={
        "department": [RemoteFilter("department", "ExactMatch")],
        "status": [RemoteFilter("status", "ExactMatch")],
    },
    summary_fields=("code", "credits", "department", "instructor", "schedule", "status"),
)
