from campuscore.modules.entities.base import (
    EntitySchema, FieldSpec, RemoteFilter, iso_date, one_of, today,
)
from campuscore.modules.reconciliation.projection import FilterRule
from campuscore.schemas.records import AttendanceRecord


ATTENDANCE_STATUSES = ("Present", "Absent", "Late", "Excused")


def attendance_name(values) -> str:
    return (
        f"{values.get('student_name') or ''} - "
        f"{values.get('course_name') or ''} - "
        f"{values.get('date') or ''}"
    )


ATTENDANCE_SCHEMA = EntitySchema(
    name="attendance",
    label="Attendance record",
    plural_label="Attendance records",
    table="attendance",
    record_model=AttendanceRecord,
    fields=(
        FieldSpec("student_id", "Student ID", required=True),
        FieldSpec("student_name", "Student name", required=True),
        FieldSpec("course_id", "Course ID", required=True),
        FieldSpec("course_name", "Course name", required=True),
        FieldSpec("date", "Date", default=today, required=True, rules=(iso_date("Date must be YYYY-MM-DD"),)),
        FieldSpec(
            "status", "Status", default="Present", required=True, choices=ATTENDANCE_STATUSES,
            rules=(one_of(ATTENDANCE_STATUSES, "Status must be Present, Absent, Late or Excused"),),
        ),
        FieldSpec("notes", "Notes"),
    ),
    display_name=attendance_name,
    filter_rules={
        "student": FilterRule.contains("student_name", "student_id"),
        "course": FilterRule.contains("course_name", "course_id"),
        "date": FilterRule.exact("date"),
        "status": FilterRule.exact("status"),
    },
    remote_filters={
        "student": [RemoteFilter("studentName", "Contains")],
        "course": [RemoteFilter("courseName", "Contains")],
        "date": [RemoteFilter("date", "Equals")],
        "status": [RemoteFilter("status", "ExactMatch")],
    },
    summary_fields=("student_name", "course_name", "date", "status", "notes"),
)
