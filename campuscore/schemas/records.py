from pydantic import BaseModel, ConfigDict, Field, AliasChoices
from pydantic.alias_generators import to_snake
from typing import Optional, Union, Any


RecordId = Union[int, str]


def remote_field(remote_name: str, default: Any = None) -> Any:
    """Field stored under a camelCase name by the record service"""
    return Field(
        default=default,
        validation_alias=AliasChoices(remote_name, to_snake(remote_name)),
        serialization_alias=remote_name,
    )


class RecordBase(BaseModel):
    """
    A persisted entity instance.

    The record service names identity and display name `Id` and `Name`;
    both spellings are accepted here and exposed as `id` and `name`.
    """
    id: Optional[RecordId] = Field(
        default=None,
        validation_alias=AliasChoices("Id", "id"),
        serialization_alias="Id",
    )
    name: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("Name", "name"),
        serialization_alias="Name",
    )

    # Cross-entity ids and years arrive as numbers from the record service
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore", coerce_numbers_to_str=True)

    @property
    def display_name(self) -> str:
        return self.name or ""


class StudentRecord(RecordBase):
    email: Optional[str] = None
    student_id: Optional[str] = remote_field("studentId")
    department: Optional[str] = None
    year: Optional[str] = None
    gpa: Optional[float] = None
    status: Optional[str] = None


class CourseRecord(RecordBase):
    code: Optional[str] = None
    credits: Optional[int] = None
    department: Optional[str] = None
    instructor: Optional[str] = None
    schedule: Optional[str] = None
    max_enrollment: Optional[int] = remote_field("maxEnrollment")
    status: Optional[str] = None


class ScheduleRecord(RecordBase):
    course_name: Optional[str] = remote_field("courseName")
    instructor: Optional[str] = None
    location: Optional[str] = None
    start_time: Optional[str] = remote_field("startTime")
    end_time: Optional[str] = remote_field("endTime")
    day: Optional[str] = None
    start_date: Optional[str] = remote_field("startDate")
    end_date: Optional[str] = remote_field("endDate")

    @property
    def display_name(self) -> str:
        if self.name:
            return self.name
        return f"{self.course_name or ''} - {self.day or ''}"


class AttendanceRecord(RecordBase):
    student_id: Optional[str] = remote_field("studentId")
    student_name: Optional[str] = remote_field("studentName")
    course_id: Optional[str] = remote_field("courseId")
    course_name: Optional[str] = remote_field("courseName")
    date: Optional[str] = None
    status: Optional[str] = None
    notes: Optional[str] = None

    @property
    def display_name(self) -> str:
        if self.name:
            return self.name
        return f"{self.student_name or ''} - {self.course_name or ''} - {self.date or ''}"


class AnalyticsRecord(RecordBase):
    title: Optional[str] = None
    type: Optional[str] = None
    description: Optional[str] = None
    date: Optional[str] = None

    @property
    def display_name(self) -> str:
        return self.name or self.title or ""
