"""
Limitless Lifelog Tests.

This module tests LifelogClient and the lifelog models:
- Headers and parameter mapping
- Single-entry unwrapping
- Client-side search filtering
- Error message normalization
- Tool handlers with a configured client
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import httpx
import pytest

from todoist_mcp.exceptions import LifelogAPIError
from todoist_mcp.lifelog import LifelogClient
from todoist_mcp.models import ContentNode, LifelogEntry, ListLifelogsResponse
from todoist_mcp.settings import Settings
from todoist_mcp.tools import handlers
from todoist_mcp.tools.inputs import ListLifelogsInput, SearchLifelogsInput

if TYPE_CHECKING:
    from tests.conftest import LifelogFactory, RecordingTransport


pytestmark = [pytest.mark.lifelog, pytest.mark.unit]


@pytest.fixture
def make_lifelogs(recording_transport: type[RecordingTransport]):
    """Build a LifelogClient whose requests go to `handler`."""

    def build(handler) -> tuple[LifelogClient, RecordingTransport]:
        recorder = recording_transport(handler)
        client = LifelogClient(api_key="test-api-key", base_url="https://api.limitless.ai", transport=recorder.transport)
        return client, recorder

    return build


def json_reply(payload):
    return lambda request: httpx.Response(200, json=payload)


# =============================================================================
# Listing Tests
# =============================================================================


class TestGetLifelogs:
    """Tests for GET /v1/lifelogs."""

    async def test_headers(self, make_lifelogs, lifelog_factory: type[LifelogFactory]):
        client, recorder = make_lifelogs(json_reply(lifelog_factory.listing([])))

        async with client:
            await client.get_lifelogs()

        request = recorder.last
        assert request.headers["X-API-Key"] == "test-api-key"
        assert request.headers["Content-Type"] == "application/json"
        assert request.url.path == "/v1/lifelogs"

    async def test_default_params(self, make_lifelogs, lifelog_factory: type[LifelogFactory]):
        client, recorder = make_lifelogs(json_reply(lifelog_factory.listing([])))

        async with client:
            await client.get_lifelogs()

        assert dict(recorder.last.url.params) == {"limit": "10"}

    async def test_param_mapping(self, make_lifelogs, lifelog_factory: type[LifelogFactory]):
        client, recorder = make_lifelogs(json_reply(lifelog_factory.listing([])))

        async with client:
            await client.get_lifelogs(
                ListLifelogsInput(
                    date="2024-01-15",
                    timezone="Europe/Berlin",
                    start_time="2024-01-15 08:00:00",
                    end_time="2024-01-15 18:00:00",
                    cursor="abc",
                    sort_direction="asc",
                    limit=5,
                )
            )

        assert dict(recorder.last.url.params) == {
            "date": "2024-01-15",
            "timezone": "Europe/Berlin",
            "start": "2024-01-15 08:00:00",
            "end": "2024-01-15 18:00:00",
            "cursor": "abc",
            "direction": "asc",
            "limit": "5",
        }

    async def test_parses_response(self, make_lifelogs, lifelog_factory: type[LifelogFactory]):
        payload = lifelog_factory.listing([lifelog_factory.entry()], next_cursor="next")
        client, _ = make_lifelogs(json_reply(payload))

        async with client:
            page = await client.get_lifelogs(ListLifelogsInput(date="2024-01-15"))

        assert isinstance(page, ListLifelogsResponse)
        assert page.data.lifelogs[0].title == "Test conversation"
        assert page.meta.lifelogs.next_cursor == "next"
        assert page.to_dict()["data"]["lifelogs"][0]["isStarred"] is False


class TestGetLifelog:
    """Tests for GET /v1/lifelogs/{id}."""

    async def test_unwraps_entry(self, make_lifelogs, lifelog_factory: type[LifelogFactory]):
        entry = lifelog_factory.entry(id="entry_123", title="Detailed conversation")
        client, recorder = make_lifelogs(json_reply({"data": {"lifelog": entry}}))

        async with client:
            result = await client.get_lifelog("entry_123")

        assert recorder.last.url.path == "/v1/lifelogs/entry_123"
        assert result.id == "entry_123"
        assert result.is_starred is False

    async def test_not_found(self, make_lifelogs):
        client, _ = make_lifelogs(lambda request: httpx.Response(404, json={"message": "Entry not found"}))

        async with client:
            with pytest.raises(LifelogAPIError, match=r"^Limitless API error \(404\): Entry not found$"):
                await client.get_lifelog("non_existent")

    async def test_missing_lifelog_in_body(self, make_lifelogs):
        client, _ = make_lifelogs(json_reply({"data": {}}))

        async with client:
            with pytest.raises(LifelogAPIError, match="^Limitless API error: "):
                await client.get_lifelog("x")


# =============================================================================
# Search Tests
# =============================================================================


class TestSearchLifelogs:
    """Tests for the client-side text search."""

    @pytest.fixture
    def entries(self, lifelog_factory: type[LifelogFactory]) -> list[dict]:
        return [
            lifelog_factory.entry(
                id="entry_1",
                title="Planning discussion",
                contents=[{"content": "This is about project planning", "type": "blockquote"}],
            ),
            lifelog_factory.entry(
                id="entry_2",
                title="Other topic",
                contents=[{"content": "Unrelated content", "type": "blockquote"}],
            ),
            lifelog_factory.entry(
                id="entry_3",
                title="Meeting summary",
                contents=[
                    {
                        "content": "Agenda",
                        "type": "heading1",
                        "children": [{"content": "PROJECT PLANNING session", "type": "blockquote"}],
                    }
                ],
            ),
        ]

    async def test_filters_by_content(self, make_lifelogs, lifelog_factory: type[LifelogFactory], entries):
        client, _ = make_lifelogs(json_reply(lifelog_factory.listing(entries)))

        async with client:
            result = await client.search_lifelogs(SearchLifelogsInput(query="project planning", limit=5))

        assert [e.id for e in result.data.lifelogs] == ["entry_1", "entry_3"]

    async def test_matches_title(self, make_lifelogs, lifelog_factory: type[LifelogFactory], entries):
        client, _ = make_lifelogs(json_reply(lifelog_factory.listing(entries)))

        async with client:
            result = await client.search_lifelogs(SearchLifelogsInput(query="meeting"))

        assert [e.id for e in result.data.lifelogs] == ["entry_3"]

    async def test_no_matches(self, make_lifelogs, lifelog_factory: type[LifelogFactory], entries):
        client, _ = make_lifelogs(json_reply(lifelog_factory.listing(entries)))

        async with client:
            result = await client.search_lifelogs(SearchLifelogsInput(query="nonexistent topic"))

        assert result.data.lifelogs == []

    async def test_limit_truncates_matches(self, make_lifelogs, lifelog_factory: type[LifelogFactory], entries):
        client, _ = make_lifelogs(json_reply(lifelog_factory.listing(entries)))

        async with client:
            result = await client.search_lifelogs(SearchLifelogsInput(query="planning", limit=1))

        assert [e.id for e in result.data.lifelogs] == ["entry_1"]

    async def test_window_params(self, make_lifelogs, lifelog_factory: type[LifelogFactory]):
        client, recorder = make_lifelogs(json_reply(lifelog_factory.listing([])))

        async with client:
            await client.search_lifelogs(
                SearchLifelogsInput(query="x", date_from="2024-01-01", date_to="2024-01-31", timezone="UTC", limit=3)
            )

        assert dict(recorder.last.url.params) == {
            "start": "2024-01-01",
            "end": "2024-01-31",
            "timezone": "UTC",
            "limit": "10",
        }


# =============================================================================
# Error Tests
# =============================================================================


@pytest.mark.errors
class TestLifelogErrors:
    """Tests for error message normalization."""

    async def test_status_with_json_message(self, make_lifelogs):
        client, _ = make_lifelogs(lambda request: httpx.Response(401, json={"message": "Invalid API key"}))

        async with client:
            with pytest.raises(LifelogAPIError) as exc_info:
                await client.get_lifelogs()

        assert str(exc_info.value) == "Limitless API error (401): Invalid API key"
        assert exc_info.value.status_code == 401

    async def test_status_with_text_body(self, make_lifelogs):
        client, _ = make_lifelogs(lambda request: httpx.Response(502, text="Bad Gateway upstream"))

        async with client:
            with pytest.raises(LifelogAPIError, match=r"^Limitless API error \(502\): Bad Gateway upstream$"):
                await client.get_lifelogs()

    async def test_no_response(self, make_lifelogs):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("Request timeout", request=request)

        client, _ = make_lifelogs(handler)

        async with client:
            with pytest.raises(LifelogAPIError, match=r"^Limitless API error \(unknown\): Request timeout$"):
                await client.get_lifelogs()

    async def test_invalid_json(self, make_lifelogs):
        client, _ = make_lifelogs(lambda request: httpx.Response(200, text="<html>oops</html>"))

        async with client:
            with pytest.raises(LifelogAPIError, match="^Limitless API error: "):
                await client.get_lifelogs()

    async def test_unexpected_shape(self, make_lifelogs):
        client, _ = make_lifelogs(json_reply({"data": {"lifelogs": [{"id": "no-title"}]}}))

        async with client:
            with pytest.raises(LifelogAPIError, match="^Limitless API error: unexpected response"):
                await client.get_lifelogs()


# =============================================================================
# Model & Configuration Tests
# =============================================================================


class TestLifelogModels:
    def test_wire_and_attribute_names(self, lifelog_factory: type[LifelogFactory]):
        entry = LifelogEntry.model_validate(lifelog_factory.entry(isStarred=True))

        assert entry.start_time == "2024-01-15T09:00:00Z"
        assert entry.is_starred is True
        assert entry.to_dict()["startTime"] == "2024-01-15T09:00:00Z"

    def test_is_starred_defaults_false(self, lifelog_factory: type[LifelogFactory]):
        assert LifelogEntry.model_validate(lifelog_factory.entry()).is_starred is False

    def test_nested_content_match(self):
        node = ContentNode(
            content="Intro",
            type="heading1",
            children=[ContentNode(content="budget review", type="blockquote", speaker_name="Sam")],
        )

        assert node.contains("budget")
        assert not node.contains("forecast")

    def test_from_settings(self):
        assert LifelogClient.from_settings(Settings(todoist_api_token="t", limitless_api_key="")) is None
        assert isinstance(
            LifelogClient.from_settings(Settings(todoist_api_token="t", limitless_api_key="k")),
            LifelogClient,
        )


class TestLifelogHandlers:
    """Handlers with a configured lifelog client."""

    async def test_get_lifelogs_envelope(self, make_lifelogs, lifelog_factory: type[LifelogFactory]):
        client, _ = make_lifelogs(json_reply(lifelog_factory.listing([lifelog_factory.entry()])))

        async with client:
            envelope = await handlers.get_lifelogs(client, {"date": "2024-01-15"})

        assert envelope["success"] is True
        assert envelope["data"]["lifelogs"][0]["id"] == "entry_1"

    async def test_limit_validated(self, make_lifelogs):
        client, recorder = make_lifelogs(lambda request: httpx.Response(500))

        async with client:
            envelope = await handlers.get_lifelogs(client, {"limit": 25})

        assert envelope["success"] is False
        assert recorder.requests == []

    async def test_get_lifelog_error(self, make_lifelogs):
        client, _ = make_lifelogs(lambda request: httpx.Response(404, json={"message": "Entry not found"}))

        async with client:
            envelope = await handlers.get_lifelog(client, {"lifelog_id": "missing"})

        assert envelope == {"success": False, "error": "Limitless API error (404): Entry not found"}

    async def test_search_envelope(self, make_lifelogs, lifelog_factory: type[LifelogFactory]):
        entries = [lifelog_factory.entry(id="a", title="Standup"), lifelog_factory.entry(id="b", title="Lunch")]
        client, _ = make_lifelogs(json_reply(lifelog_factory.listing(entries)))

        async with client:
            envelope = await handlers.search_lifelogs(client, {"query": "standup"})

        assert envelope["success"] is True
        assert envelope["count"] == 1
        assert envelope["query"] == "standup"
        assert envelope["lifelogs"][0]["id"] == "a"
