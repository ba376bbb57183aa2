"""
Limitless lifelog client.

A small async HTTP client for the Limitless API. It lists lifelog entries,
fetches one entry, and offers a client-side text search over a listing.
Every failure is raised as LifelogAPIError:

    "Limitless API error (<status>): <message>"   HTTP error response
    "Limitless API error (unknown): <message>"    no response received
    "Limitless API error: <message>"              anything else
"""

from __future__ import annotations

import logging
from types import TracebackType
from typing import Any, TypeVar

import httpx
from pydantic import ValidationError

from todoist_mcp.constants import (
    DEFAULT_LIFELOG_URL,
    DEFAULT_TIMEOUT,
    LIFELOG_DEFAULT_LIMIT,
    LIFELOG_MAX_LIMIT,
)
from todoist_mcp.exceptions import LifelogAPIError
from todoist_mcp.models import LifelogEntry, ListLifelogsResponse
from todoist_mcp.settings import Settings, get_settings
from todoist_mcp.tools.inputs import ListLifelogsInput, SearchLifelogsInput

logger = logging.getLogger(__name__)

T = TypeVar("T", bound="LifelogClient")

LIFELOGS_PATH = "/v1/lifelogs"
ERROR_PREFIX = "Limitless API error"


def _error_detail(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return response.text or response.reason_phrase


class LifelogClient:
    """
    Async client for the Limitless lifelog API.

    Usage:
        async with LifelogClient(api_key="...") as lifelogs:
            page = await lifelogs.get_lifelogs(ListLifelogsInput(date="2024-01-15"))
            entry = await lifelogs.get_lifelog("entry_123")
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_LIFELOG_URL,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._http = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            headers={
                "X-API-Key": api_key,
                "Content-Type": "application/json",
            },
            timeout=timeout,
            transport=transport,
        )

    @classmethod
    def from_settings(cls: type[T], settings: Settings | None = None) -> T | None:
        """Build a client when a Limitless API key is configured, else None."""
        settings = settings or get_settings()
        if not settings.lifelog_enabled:
            return None
        return cls(
            api_key=settings.limitless_api_key,
            base_url=settings.limitless_api_url,
            timeout=settings.todoist_timeout,
        )

    async def close(self) -> None:
        await self._http.aclose()

    async def __aenter__(self: T) -> T:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.close()

    async def _get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        logger.debug("GET %s params=%s", path, params)
        try:
            response = await self._http.get(path, params=params)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            raise LifelogAPIError(
                f"{ERROR_PREFIX} ({status}): {_error_detail(e.response)}",
                status_code=status,
            ) from e
        except httpx.RequestError as e:
            raise LifelogAPIError(f"{ERROR_PREFIX} (unknown): {str(e) or type(e).__name__}") from e
        except ValueError as e:
            raise LifelogAPIError(f"{ERROR_PREFIX}: {e}") from e

    # =========================================================================
    # Lifelogs
    # =========================================================================

    async def get_lifelogs(self, params: ListLifelogsInput | None = None) -> ListLifelogsResponse:
        """List lifelog entries (GET /v1/lifelogs)."""
        params = params or ListLifelogsInput()
        query = {
            "date": params.date,
            "timezone": params.timezone,
            "start": params.start_time,
            "end": params.end_time,
            "cursor": params.cursor,
            "direction": params.sort_direction.value if params.sort_direction else None,
            "limit": params.limit,
        }
        data = await self._get(LIFELOGS_PATH, {k: v for k, v in query.items() if v is not None})
        return self._parse(ListLifelogsResponse, data)

    async def get_lifelog(self, lifelog_id: str) -> LifelogEntry:
        """Fetch one entry (GET /v1/lifelogs/{id})."""
        data = await self._get(f"{LIFELOGS_PATH}/{lifelog_id}")
        lifelog = (data or {}).get("data", {}).get("lifelog")
        if lifelog is None:
            raise LifelogAPIError(f"{ERROR_PREFIX}: lifelog {lifelog_id} missing from response")
        return self._parse(LifelogEntry, lifelog)

    async def search_lifelogs(self, params: SearchLifelogsInput) -> ListLifelogsResponse:
        """
        Search entries in a date window.

        The window is listed with the largest page the API allows, entries
        whose title or any transcript node contains the query (ignoring case)
        are kept, and the result is cut to `params.limit`.
        """
        page = await self.get_lifelogs(
            ListLifelogsInput(
                start_time=params.date_from,
                end_time=params.date_to,
                timezone=params.timezone,
                cursor=params.cursor,
                limit=LIFELOG_MAX_LIMIT,
            )
        )
        matches = [entry for entry in page.data.lifelogs if entry.matches(params.query)]
        limit = params.limit or LIFELOG_DEFAULT_LIMIT
        logger.debug("Lifelog search %r matched %d entries", params.query, len(matches))
        return page.model_copy(
            update={"data": page.data.model_copy(update={"lifelogs": matches[:limit]})}
        )

    @staticmethod
    def _parse(model: Any, data: Any) -> Any:
        try:
            return model.model_validate(data)
        except ValidationError as e:
            raise LifelogAPIError(f"{ERROR_PREFIX}: unexpected response ({e.error_count()} errors)") from e
