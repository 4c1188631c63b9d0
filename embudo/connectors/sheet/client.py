"""EMBUDO — Published Sheet Client.

Fetches the CSV export of a published spreadsheet. One attempt per call:
a failure is reported to the caller, who keeps the data it already has.
"""

from typing import List, Optional

import httpx

from embudo.config import settings
from embudo.ingest.parser import ParseResult, parse_text
from embudo.models.record_models import DailyRecord
from embudo.core.logging import get_logger

logger = get_logger("sheet.client")


class SheetFetchError(Exception):
    """Raised when the sheet export cannot be downloaded."""

    def __init__(self, message: str, status_code: int = 0):
        self.status_code = status_code
        super().__init__(message)


class SheetClient:
    """Async HTTP client for a published CSV export."""

    def __init__(
        self,
        url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.url = url or settings.sheet_csv_url
        self.timeout = timeout if timeout is not None else settings.sheet_fetch_timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=self.timeout, follow_redirects=True, transport=self._transport
            )
        return self._client

    async def close(self) -> None:
        if self._client and not self._client.is_closed:
            await self._client.aclose()

    async def fetch_text(self) -> str:
        """Download the export as text."""
        if not self.url:
            raise SheetFetchError("No sheet URL configured (set SHEET_CSV_URL)")

        client = await self._get_client()
        try:
            resp = await client.get(self.url)
            resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise SheetFetchError(
                f"Sheet export returned HTTP {e.response.status_code}",
                e.response.status_code,
            ) from e
        except httpx.RequestError as e:
            raise SheetFetchError(f"Connection to sheet export failed: {e}") from e

        logger.info(f"Fetched {len(resp.content)} bytes from sheet export")
        return resp.text

    async def fetch_and_parse(self) -> tuple[str, ParseResult]:
        """Download the export and run it through the parse pipeline."""
        text = await self.fetch_text()
        return text, parse_text(text)


async def load_external(
    url: str | None = None, transport: httpx.AsyncBaseTransport | None = None
) -> List[DailyRecord]:
    """Fetch and parse the remote sheet; the caller owns the returned records."""
    client = SheetClient(url=url, transport=transport)
    try:
        _, result = await client.fetch_and_parse()
        return result.records
    finally:
        await client.close()
