from campuscore.modules.entities.base import (
    EntitySchema, FieldSpec, RemoteFilter, iso_date, one_of, today,
)
from campuscore.modules.reconciliation.projection import FilterRule
from campuscore.schemas.records import AnalyticsRecord


REPORT_TYPES = ("performance", "attendance", "enrollment", "financial", "progression", "distribution")

DEPARTMENTS = (
    "Computer Science", "Mathematics", "Engineering", "Physics", "Chemistry",
    "Biology", "Business", "Psychology", "English",
)

ANALYTICS_SCHEMA = EntitySchema(
    name="analytics",
    label="Report",
    plural_label="Reports",
    table="analytics",
    record_model=AnalyticsRecord,
    fields=(
        FieldSpec("title", "Title", required=True),
        FieldSpec(
            "type", "Report type", default="performance", required=True, choices=REPORT_TYPES,
            rules=(one_of(REPORT_TYPES, "Report type is not supported"),),
        ),
        FieldSpec("description", "Description"),
        FieldSpec("date", "Date", default=today, rules=(iso_date("Date must be YYYY-MM-DD"),)),
        # Report scope only; the analytics table stores neither.
        # Course options depend on the department, so a new department clears the course
        FieldSpec("department", "Department", choices=DEPARTMENTS, resets=("course",), stored=False),
        FieldSpec("course", "Course", stored=False),
    ),
    display_name=lambda values: values.get("title") or "",
    filter_rules={
        "search": FilterRule.contains("title", "description", "type"),
        "type": FilterRule.exact("type"),
    },
    remote_filters={
        "type": [RemoteFilter("type", "ExactMatch")],
    },
    summary_fields=("title", "type", "date", "description"),
)
