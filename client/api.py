"""
Async HTTP client for the public portfolio endpoints.
"""
import logging
from typing import Optional

import httpx

from utils.catalog import CategoryDirectory, FeedFetchError, FeedPage

logger = logging.getLogger(__name__)


class PortfolioApiClient:
    def __init__(self, base_url: str, *, transport: Optional[httpx.AsyncBaseTransport] = None, timeout: float = 10.0):
        self._client = httpx.AsyncClient(base_url=base_url.rstrip("/"), transport=transport, timeout=timeout)

    async def __aenter__(self) -> "PortfolioApiClient":
        return self

    async def __aexit__(self, *exc) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def list_categories(self) -> CategoryDirectory:
        r = await self._client.get("/api/portfolio/categories")
        r.raise_for_status()
        data = r.json()
        return CategoryDirectory.from_dicts(data.get("categories") or [], protected=data.get("protected") or [])

    async def fetch_page(self, category: str, page_index: int) -> FeedPage:
        try:
            r = await self._client.get("/api/portfolio/feed", params={"category": category, "page": page_index})
        except httpx.HTTPError as ex:
            logger.warning(f"feed request for {category!r} page {page_index} failed: {ex}")
            raise FeedFetchError(f"feed request failed: {ex}") from ex
        if r.status_code != 200:
            try:
                detail = r.json().get("error")
            except ValueError:
                detail = r.text
            raise FeedFetchError(f"feed request returned {r.status_code}: {detail}")
        data = r.json()
        return FeedPage(items=list(data.get("items") or []), has_more=bool(data.get("hasMore")))

    async def verify_category_password(self, category: str, password: str) -> bool:
        r = await self._client.post(
            "/api/portfolio/categories/verify",
            json={"category": category, "password": password},
        )
        r.raise_for_status()
        return bool(r.json().get("ok"))
