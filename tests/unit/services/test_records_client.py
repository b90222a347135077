"""
Unit Tests for Records Client
Tests for: request shape, headers, error mapping, 404 handling
"""
import json
import pytest
import httpx

from campuscore.core.config import settings
from campuscore.core.exceptions import (
    ConfigurationError,
    EnvelopeError,
    RecordNotFoundError,
    RecordTimeoutError,
    TransportError,
)
from campuscore.services.records_client import RecordsClient


BASE_URL = "http://records.test/api"


def make_client(handler):
    """RecordsClient whose HTTP traffic goes to `handler`"""
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return RecordsClient(BASE_URL, "proj-1", public_key="pk-1", http_client=http_client)


class TestFetch:
    """Test record fetching"""

    @pytest.mark.asyncio
    async def test_fetch_request_shape(self):
        """Test fetch posts params to the table's fetch endpoint with auth headers"""
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["method"] = request.method
            seen["url"] = str(request.url)
            seen["headers"] = request.headers
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"success": True, "data": [{"Id": 1, "Name": "Emma"}]})

        client = make_client(handler)
        params = {"fields": ["Name"], "where": [{"fieldName": "status", "operator": "ExactMatch", "values": ["Active"]}]}

        rows = await client.fetch_records("student3", params)

        assert rows == [{"Id": 1, "Name": "Emma"}]
        assert seen["method"] == "POST"
        assert seen["url"] == f"{BASE_URL}/tables/student3/fetch"
        assert seen["headers"]["X-Project-Id"] == "proj-1"
        assert seen["headers"]["Authorization"] == "Bearer pk-1"
        assert seen["body"] == params

    @pytest.mark.asyncio
    async def test_fetch_without_data(self):
        client = make_client(lambda request: httpx.Response(200, json={"success": True}))

        assert await client.fetch_records("course", {}) == []

    @pytest.mark.asyncio
    async def test_server_error_is_transport_error(self):
        """Test 5xx responses raise TransportError with the status"""
        client = make_client(lambda request: httpx.Response(503, text="unavailable"))

        with pytest.raises(TransportError) as exc_info:
            await client.fetch_records("course", {})

        assert exc_info.value.details["status_code"] == 503

    @pytest.mark.asyncio
    async def test_connection_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        client = make_client(handler)

        with pytest.raises(TransportError):
            await client.fetch_records("course", {})

    @pytest.mark.asyncio
    async def test_timeout(self):
        """Test timeouts surface as RecordTimeoutError"""
        def handler(request):
            raise httpx.ReadTimeout("too slow", request=request)

        client = make_client(handler)

        with pytest.raises(RecordTimeoutError) as exc_info:
            await client.fetch_records("course", {})

        assert exc_info.value.code == "TRANSPORT_TIMEOUT"

    @pytest.mark.asyncio
    async def test_non_json_body(self):
        client = make_client(lambda request: httpx.Response(200, text="<html></html>"))

        with pytest.raises(EnvelopeError):
            await client.fetch_records("course", {})

    @pytest.mark.asyncio
    async def test_non_list_data(self):
        client = make_client(lambda request: httpx.Response(200, json={"data": {"Id": 1}}))

        with pytest.raises(EnvelopeError):
            await client.fetch_records("course", {})


class TestGetById:
    """Test single record lookups"""

    @pytest.mark.asyncio
    async def test_get_record(self):
        seen = {}

        def handler(request):
            seen["url"] = str(request.url)
            return httpx.Response(200, json={"success": True, "data": {"Id": 5, "Name": "Calculus"}})

        client = make_client(handler)

        row = await client.get_record_by_id("course", 5)

        assert row == {"Id": 5, "Name": "Calculus"}
        assert seen["url"] == f"{BASE_URL}/tables/course/records/5"

    @pytest.mark.asyncio
    async def test_get_missing_returns_none(self):
        client = make_client(lambda request: httpx.Response(404, json={"message": "not found"}))

        assert await client.get_record_by_id("course", 5) is None


class TestWrites:
    """Test create, update and delete"""

    @pytest.mark.asyncio
    async def test_create_returns_envelope(self):
        envelope = {"success": True, "results": [{"success": True, "data": {"Id": 9}}]}
        client = make_client(lambda request: httpx.Response(200, json=envelope))

        assert await client.create_record("course", {"records": [{"Name": "X"}]}) == envelope

    @pytest.mark.asyncio
    async def test_client_error_becomes_failed_envelope(self):
        """Test a 4xx without an envelope is normalized to success=False"""
        client = make_client(lambda request: httpx.Response(400, json={"message": "Invalid field"}))

        result = await client.create_record("course", {"records": [{}]})

        assert result == {"success": False, "message": "Invalid field"}

    @pytest.mark.asyncio
    async def test_update_uses_put(self):
        seen = {}

        def handler(request):
            seen["method"] = request.method
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"success": True, "results": []})

        client = make_client(handler)

        await client.update_record("course", {"records": [{"Id": 3, "Name": "Y"}]})

        assert seen["method"] == "PUT"
        assert seen["body"]["records"][0]["Id"] == 3

    @pytest.mark.asyncio
    async def test_update_not_found(self):
        client = make_client(lambda request: httpx.Response(404, json={}))

        with pytest.raises(RecordNotFoundError) as exc_info:
            await client.update_record("course", {"records": [{"Id": 3}]})

        assert exc_info.value.details["record_id"] == 3

    @pytest.mark.asyncio
    async def test_delete_sends_ids(self):
        seen = {}

        def handler(request):
            seen["method"] = request.method
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"success": True, "results": [{"success": True}]})

        client = make_client(handler)

        result = await client.delete_record("course", {"RecordIds": [4]})

        assert result["success"] is True
        assert seen["method"] == "DELETE"
        assert seen["body"] == {"RecordIds": [4]}

    @pytest.mark.asyncio
    async def test_delete_not_found(self):
        client = make_client(lambda request: httpx.Response(404, json={}))

        with pytest.raises(RecordNotFoundError):
            await client.delete_record("course", {"RecordIds": [4]})


class TestConstruction:
    """Test settings-based construction"""

    @pytest.mark.asyncio
    async def test_from_settings(self):
        async with RecordsClient.from_settings() as client:
            assert client.base_url == settings.RECORDS_API_URL
            assert client.project_id == settings.RECORDS_PROJECT_ID

    def test_missing_url(self, monkeypatch):
        monkeypatch.setattr(settings, "RECORDS_API_URL", "")

        with pytest.raises(ConfigurationError) as exc_info:
            RecordsClient.from_settings()

        assert exc_info.value.details["setting"] == "RECORDS_API_URL"

    def test_missing_project(self, monkeypatch):
        monkeypatch.setattr(settings, "RECORDS_PROJECT_ID", "")

        with pytest.raises(ConfigurationError):
            RecordsClient.from_settings()

    def test_headers_without_key(self):
        client = RecordsClient(BASE_URL + "/", "proj-1", http_client=httpx.AsyncClient())

        assert "Authorization" not in client._headers()
        assert client.base_url == BASE_URL
