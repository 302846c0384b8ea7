# app/services/search_service.py

import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional

from config import Config
from app.errors import ConfigurationError, UpstreamError, ValidationError
from app.models.search_models import (
    MergedSearchResponse,
    SearchResultItem,
    SearchScope,
    TokenSearchResponse,
)
from app.services.twelvelabs_client import MediaFile, TwelveLabsClient

logger = logging.getLogger(__name__)


def tag_results(raw_items: List[Dict[str, Any]], index_id: str) -> List[SearchResultItem]:
    """Normalize raw Twelve Labs matches and tag each one with its index."""
    return [
        SearchResultItem(
            video_id=item.get("video_id"),
            thumbnail_url=item.get("thumbnail_url"),
            start=item.get("start"),
            end=item.get("end"),
            confidence=item.get("confidence"),
            score=item.get("score"),
            index_id=index_id,
        )
        for item in raw_items
        if isinstance(item, dict)
    ]


def score_key(item: SearchResultItem) -> float:
    # Matches without a score sort last
    return item.score if item.score is not None else float("-inf")


def merge_search_results(results_by_index: List[tuple]) -> MergedSearchResponse:
    """
    Merge per-index search bodies into one response.

    Args:
        results_by_index: (index_id, upstream body) pairs in query order

    Returns:
        MergedSearchResponse with items sorted by score, highest first
    """
    page_info_by_index: Dict[str, Dict[str, Any]] = {}
    merged: List[SearchResultItem] = []

    for index_id, body in results_by_index:
        body = body or {}
        page_info_by_index[index_id] = body.get("page_info") or {}
        raw_items = body.get("data")
        if isinstance(raw_items, list):
            merged.extend(tag_results(raw_items, index_id))

    # sorted() is stable, equal scores keep index order
    merged = sorted(merged, key=score_key, reverse=True)

    next_page_tokens = {
        index_id: page_info.get("next_page_token") or None
        for index_id, page_info in page_info_by_index.items()
    }

    return MergedSearchResponse(
        page_info_by_index=page_info_by_index,
        data=merged,
        has_more=any(next_page_tokens.values()),
        next_page_tokens=next_page_tokens,
    )


class SearchService:
    """
    Text and image search across the brand and creator indexes.
    """

    def __init__(self, config: Config, client: Optional[TwelveLabsClient]):
        self.config = config
        self.client = client

    def resolve_indexes(self, scope: Optional[str]) -> List[str]:
        """Map a scope string to the index ids it covers."""
        brand = self.config.BRAND_INDEX_ID
        creator = self.config.CREATOR_INDEX_ID
        indexes = {
            SearchScope.ALL.value: [brand, creator],
            SearchScope.BRAND.value: [brand],
            SearchScope.CREATOR.value: [creator],
        }.get(scope or "", [])
        if not indexes:
            raise ValidationError("Invalid scope specified")
        return indexes

    def _check_ready(self):
        if not self.config.has_credentials or self.client is None:
            raise ConfigurationError("API key or API base URL is not set")

    def _check_indexes(self):
        if not self.config.BRAND_INDEX_ID or not self.config.CREATOR_INDEX_ID:
            raise ConfigurationError("Brand or Creator index ID is not set")

    async def _fan_out(
        self,
        indexes: List[str],
        search_one: Callable[[str], Awaitable[Dict[str, Any]]],
    ) -> MergedSearchResponse:
        """
        Query every index concurrently and merge the bodies.

        All calls are allowed to settle and the first failure (in index order)
        is raised, so a single failing index fails the whole search.
        """
        outcomes = await asyncio.gather(
            *(search_one(index_id) for index_id in indexes),
            return_exceptions=True,
        )
        for outcome in outcomes:
            if isinstance(outcome, BaseException):
                raise outcome

        response = merge_search_results(list(zip(indexes, outcomes)))

        first = response.data[0] if response.data else None
        logger.info(
            f"Merged {len(response.data)} results from {len(indexes)} index(es); "
            f"has_more={response.has_more} first="
            + (f"{first.video_id}@{first.index_id} score={first.score}" if first else "none")
        )
        return response

    async def text_search(
        self,
        query: Optional[str],
        scope: Optional[str],
        page_limit: Optional[int] = None,
        page: int = 1,
    ) -> MergedSearchResponse:
        """Search one or both indexes by text and merge the results."""
        self._check_ready()
        self._check_indexes()
        if not query or not query.strip():
            raise ValidationError("Search query is required")

        indexes = self.resolve_indexes(scope)
        page_limit = page_limit or self.config.SEARCH_PAGE_LIMIT
        logger.info(
            f"Text search: query_len={len(query)} scope={scope} "
            f"page={page} page_limit={page_limit} indexes={len(indexes)}"
        )

        return await self._fan_out(
            indexes, lambda index_id: self.client.search(index_id, query, page_limit, page)
        )

    async def image_search(
        self,
        scope: Optional[str] = None,
        page_limit: Optional[int] = None,
        image_url: Optional[str] = None,
        image_file: Optional[MediaFile] = None,
    ) -> MergedSearchResponse:
        """
        Search one or both indexes with an image given by URL or upload.

        Args:
            scope: brand, creator or all (default all)
            page_limit: Results per index
            image_url: Public URL of the query image
            image_file: Uploaded (filename, content, content_type)
        """
        self._check_ready()
        self._check_indexes()
        if not image_url and image_file is None:
            raise ValidationError("No image file or URL provided")

        indexes = self.resolve_indexes(scope or SearchScope.ALL.value)
        page_limit = page_limit or self.config.SEARCH_PAGE_LIMIT
        logger.info(
            f"Image search: source={'url' if image_url else 'file'} scope={scope or 'all'} "
            f"page_limit={page_limit} indexes={len(indexes)}"
        )

        return await self._fan_out(
            indexes,
            lambda index_id: self.client.search_image(
                index_id, page_limit, media_url=image_url, media_file=image_file
            ),
        )

    async def search_by_token(self, page_token: Optional[str], index_id: Optional[str]) -> TokenSearchResponse:
        """Fetch the next page of results for one index."""
        self._check_ready()
        if not page_token:
            raise ValidationError("Page token is required")
        if not index_id:
            raise ValidationError("Index ID is required")

        body = await self.client.search_by_token(index_id, page_token)
        raw_items = body.get("data") if isinstance(body, dict) else None
        if not isinstance(raw_items, list):
            raise UpstreamError("Invalid response from Twelve Labs API")

        logger.info(f"Token search for index {index_id}: {len(raw_items)} results")
        return TokenSearchResponse(
            page_info=body.get("page_info") or {},
            data=tag_results(raw_items, index_id),
        )
