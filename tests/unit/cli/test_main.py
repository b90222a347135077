"""
Unit Tests for CLI
Tests for: argument parsing, command execution and exit codes
"""
import argparse
import io
import pytest
from unittest.mock import AsyncMock, MagicMock

from rich.console import Console

from campuscore.cli.main import (
    create_parser,
    parse_assignments,
    parse_record_id,
    run_command,
)
from campuscore.cli.renderer import RecordRenderer
from campuscore.services.export_service import ExportService
from tests.conftest import make_student_row


@pytest.fixture
def output():
    return io.StringIO()


@pytest.fixture
def renderer(output):
    return RecordRenderer(Console(file=output, width=200, force_terminal=False))


@pytest.fixture
def client():
    """RecordsClient stand-in serving two students"""
    client = MagicMock()
    client.fetch_records = AsyncMock(return_value=[
        make_student_row(1, Name="Emma Stone", email="emma@uni.edu", department="Physics"),
        make_student_row(2, Name="Liam Hart", email="liam@uni.edu", department="Mathematics"),
    ])
    client.get_record_by_id = AsyncMock(return_value=make_student_row(1, Name="Emma Stone"))
    client.create_record = AsyncMock()
    client.update_record = AsyncMock()
    client.delete_record = AsyncMock()
    return client


class TestParsing:
    """Test argument parsing helpers"""

    def test_parse_assignments(self):
        assert parse_assignments(["name=Emma Stone", "notes=a=b"]) == {"name": "Emma Stone", "notes": "a=b"}
        assert parse_assignments(None) == {}

    def test_parse_assignments_rejects_bare_words(self):
        with pytest.raises(argparse.ArgumentTypeError):
            parse_assignments(["Emma"])

    def test_parse_record_id(self):
        assert parse_record_id("12") == 12
        assert parse_record_id("abc-1") == "abc-1"

    def test_list_arguments(self):
        args = create_parser().parse_args(["students", "list", "--filter", "search=emma", "-f", "status=Active", "--remote"])

        assert args.entity == "students"
        assert args.command == "list"
        assert args.filters == ["search=emma", "status=Active"]
        assert args.remote is True

    def test_edit_arguments(self):
        args = create_parser().parse_args(["courses", "edit", "7", "credits=4"])

        assert args.record_id == 7
        assert args.fields == ["credits=4"]

    def test_unknown_entity_exits(self):
        with pytest.raises(SystemExit):
            create_parser().parse_args(["alumni", "list"])

    def test_export_format_choices(self):
        with pytest.raises(SystemExit):
            create_parser().parse_args(["students", "export", "--format", "xml"])


class TestCommands:
    """Test command execution"""

    @pytest.mark.asyncio
    async def test_list_filters_locally(self, client, renderer, output):
        """Test list loads everything and filters client-side by default"""
        args = create_parser().parse_args(["students", "list", "--filter", "department=Mathematics"])

        code = await run_command(args, client, renderer)

        assert code == 0
        text = output.getvalue()
        assert "Liam Hart" in text
        assert "Emma Stone" not in text
        assert client.fetch_records.await_args.args[1]["where"] == []

    @pytest.mark.asyncio
    async def test_list_remote_sends_conditions(self, client, renderer):
        args = create_parser().parse_args(["students", "list", "--filter", "department=Physics", "--remote"])

        await run_command(args, client, renderer)

        where = client.fetch_records.await_args.args[1]["where"]
        assert where == [{"fieldName": "department", "operator": "ExactMatch", "values": ["Physics"]}]

    @pytest.mark.asyncio
    async def test_list_load_failure(self, client, renderer, output):
        from campuscore.core.exceptions import TransportError

        client.fetch_records = AsyncMock(side_effect=TransportError("down"))
        args = create_parser().parse_args(["students", "list"])

        assert await run_command(args, client, renderer) == 1
        assert "Failed to load students" in output.getvalue()

    @pytest.mark.asyncio
    async def test_add_invalid_exits_with_error(self, client, renderer, output):
        """Test an invalid draft prints field errors and never calls the service"""
        args = create_parser().parse_args(["students", "add", "name=Emma", "email=nope"])

        code = await run_command(args, client, renderer)

        assert code == 1
        text = output.getvalue()
        assert "Please fix the errors in the form" in text
        assert "Email is invalid" in text
        client.create_record.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_add_success(self, client, renderer, output):
        client.create_record = AsyncMock(return_value={
            "success": True,
            "results": [{"success": True, "data": make_student_row(3, Name="Ava")}],
        })
        args = create_parser().parse_args([
            "students", "add", "name=Ava", "email=ava@uni.edu", "student_id=S3",
            "department=Physics", "year=1",
        ])

        assert await run_command(args, client, renderer) == 0
        assert "Student added successfully" in output.getvalue()
        assert "Ava" in output.getvalue()

    @pytest.mark.asyncio
    async def test_edit_merges_fields(self, client, renderer, output):
        """Test edit starts from the stored record and applies the given fields"""
        client.update_record = AsyncMock(return_value={
            "success": True,
            "results": [{"success": True, "data": make_student_row(1, Name="Emma Stone", gpa=3.9)}],
        })
        args = create_parser().parse_args(["students", "edit", "1", "gpa=3.9"])

        assert await run_command(args, client, renderer) == 0

        _, params = client.update_record.await_args.args
        assert params["records"][0]["Id"] == 1
        assert params["records"][0]["Name"] == "Emma Stone"
        assert params["records"][0]["gpa"] == 3.9
        assert "Student updated successfully" in output.getvalue()

    @pytest.mark.asyncio
    async def test_edit_missing_record(self, client, renderer, output):
        client.get_record_by_id = AsyncMock(return_value=None)
        args = create_parser().parse_args(["students", "edit", "9", "gpa=3.0"])

        assert await run_command(args, client, renderer) == 1
        assert "not found" in output.getvalue()

    @pytest.mark.asyncio
    async def test_delete_failure_exit_code(self, client, renderer, output):
        client.delete_record = AsyncMock(return_value={
            "success": True, "results": [{"success": False, "message": "Record not found"}],
        })
        args = create_parser().parse_args(["students", "delete", "5"])

        assert await run_command(args, client, renderer) == 1
        assert "Record not found" in output.getvalue()

    @pytest.mark.asyncio
    async def test_export(self, client, renderer, output, tmp_path):
        args = create_parser().parse_args(["students", "export", "--format", "json", "-f", "search=emma"])
        exporter = ExportService(export_dir=tmp_path, formats=["csv", "json"])

        assert await run_command(args, client, renderer, exporter) == 0

        files = list(tmp_path.glob("students-*.json"))
        assert len(files) == 1
        assert "Exported 1 record(s)" in output.getvalue()
