from campuscore.modules.entities.base import (
    EntitySchema, FieldSpec, RemoteFilter, iso_date, not_before, one_of,
)
from campuscore.modules.reconciliation.projection import FilterRule
from campuscore.schemas.records import ScheduleRecord


WEEKDAYS = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")


def schedule_name(values) -> str:
    return f"{values.get('course_name') or ''} - {values.get('day') or ''}"


SCHEDULE_SCHEMA = EntitySchema(
    name="schedules",
    label="Schedule",
    plural_label="Schedules",
    table="schedule",
    record_model=ScheduleRecord,
    fields=(
        FieldSpec("course_name", "Course name", required=True),
        FieldSpec("instructor", "Instructor", required=True),
        FieldSpec("location", "Location"),
        FieldSpec("start_time", "Start time"),
        FieldSpec("end_time", "End time"),
        FieldSpec(
            "day", "Day", required=True, choices=WEEKDAYS,
            rules=(one_of(WEEKDAYS, "Day must be a day of the week"),),
        ),
        FieldSpec("start_date", "Start date", rules=(iso_date("Start date must be YYYY-MM-DD"),)),
        FieldSpec(
            "end_date", "End date",
            rules=(
                iso_date("End date must be YYYY-MM-DD"),
                not_before("start_date", "End date cannot be before start date"),
            ),
        ),
    ),
    display_name=schedule_name,
    filter_rules={
        "search": FilterRule.contains("course_name", "instructor", "location"),
        "day": FilterRule.exact("day"),
    },
    remote_filters={
        "day": [RemoteFilter("day", "ExactMatch")],
    },
    summary_fields=("course_name", "instructor", "location", "day", "start_time", "end_time"),
)
