"""
CampusCore - Test Configuration and Fixtures
"""
import os
import pytest
from faker import Faker

# Set testing environment before settings are imported
os.environ['ENVIRONMENT'] = 'testing'
os.environ['RECORDS_API_URL'] = 'http://records.test/api'
os.environ['RECORDS_PROJECT_ID'] = 'test-project'
os.environ['RECORDS_PUBLIC_KEY'] = 'test-public-key'
os.environ['LOG_FILE'] = ''

from campuscore.modules.entities import STUDENT_SCHEMA, ANALYTICS_SCHEMA
from campuscore.modules.reconciliation.notifications import NotificationCenter
from tests.mocks.mock_records import FakeEntityApi

fake = Faker()


def make_student_draft(**overrides):
    """A draft that passes student validation"""
    draft = {
        'name': fake.name(),
        'email': fake.email(),
        'student_id': f"S{fake.unique.random_int(min=1000, max=9999)}",
        'department': 'Physics',
        'year': '2',
        'gpa': '3.4',
        'status': 'Active',
    }
    draft.update(overrides)
    return draft


def make_student_row(record_id, **overrides):
    """A raw student row as the record service returns it"""
    row = {
        'Id': record_id,
        'Name': fake.name(),
        'email': fake.email(),
        'studentId': f"S{record_id:04d}" if isinstance(record_id, int) else f"S{record_id}",
        'department': 'Physics',
        'year': '2',
        'gpa': 3.2,
        'status': 'Active',
    }
    row.update(overrides)
    return row


@pytest.fixture
def notifications() -> NotificationCenter:
    """Fresh notification center with a long display duration"""
    return NotificationCenter(duration_ms=60000, max_queue=50)


@pytest.fixture
def student_api() -> FakeEntityApi:
    """In-memory student service seeded with three rows"""
    return FakeEntityApi(STUDENT_SCHEMA, rows=[make_student_row(i) for i in (1, 2, 3)])


@pytest.fixture
def empty_student_api() -> FakeEntityApi:
    return FakeEntityApi(STUDENT_SCHEMA, first_id=100)


@pytest.fixture
def analytics_api() -> FakeEntityApi:
    return FakeEntityApi(ANALYTICS_SCHEMA, first_id=100)
