from campuscore.modules.entities.base import (
    EntitySchema, FieldSpec, RemoteFilter, email, number_between, to_float,
)
from campuscore.modules.reconciliation.projection import FilterRule
from campuscore.schemas.records import StudentRecord


STUDENT_STATUSES = ("Active", "Inactive", "Graduated", "Suspended")

STUDENT_SCHEMA = EntitySchema(
    name="students",
    label="Student",
    plural_label="Students",
    table="student3",
    record_model=StudentRecord,
    fields=(
        FieldSpec("name", "Name", required=True),
        FieldSpec("email", "Email", required=True, rules=(email(),)),
        FieldSpec("student_id", "Student ID", required=True),
        FieldSpec("department", "Department", required=True),
        FieldSpec("year", "Year", required=True),
        FieldSpec(
            "gpa", "GPA",
            rules=(number_between(0.0, 4.0, "GPA must be a number between 0 and 4.0"),),
            convert=to_float,
        ),
        FieldSpec("status", "Status", default="Active", choices=STUDENT_STATUSES),
    ),
    display_name=lambda values: values.get("name") or "",
    filter_rules={
        "search": FilterRule.contains("name", "email", "student_id", "department"),
        "name": FilterRule.contains("name"),
        "department": FilterRule.exact("department"),
        "status": FilterRule.exact("status"),
    },
    remote_filters={
        "name": [RemoteFilter("Name", "Contains")],
        "department": [RemoteFilter("department", "ExactMatch")],
        "status": [RemoteFilter("status", "ExactMatch")],
    },
    summary_fields=("student_id", "email", "department", "year", "gpa", "status"),
)
