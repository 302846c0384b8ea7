# app/services/twelvelabs_client.py

import asyncio
import logging
from typing import Any, Dict, List, Optional, Tuple

import httpx
from tenacity import AsyncRetrying, retry_if_result, stop_after_attempt, wait_incrementing

from app.errors import (
    AuthenticationError,
    RateLimitError,
    UpstreamError,
    UpstreamUnavailableError,
)

logger = logging.getLogger(__name__)

TEXT_SEARCH_OPTIONS = ("visual", "audio")
IMAGE_SEARCH_OPTIONS = ("visual",)
EMBEDDING_OPTIONS = ("visual-text", "audio")

# (filename, content, content_type) of an uploaded query image
MediaFile = Tuple[str, bytes, str]


async def _sleep(seconds: float):
    await asyncio.sleep(seconds)


def _is_server_error(response: httpx.Response) -> bool:
    return response.status_code == 500


class TwelveLabsClient:
    """
    Thin async wrapper around the Twelve Labs HTTP API.

    Search calls retry on upstream 500 with a linear backoff
    (``retry_delay``, ``2 * retry_delay``, ...); every other non-2xx answer
    fails at once. Listing, detail and metadata calls are single attempts and
    return the raw ``httpx.Response`` so callers can echo upstream status codes.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        base_url: str,
        api_key: str,
        max_retries: int = 2,
        retry_delay: float = 1.0,
    ):
        self.http_client = http_client
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.max_retries = max_retries
        self.retry_delay = retry_delay

    @property
    def headers(self) -> Dict[str, str]:
        return {"x-api-key": self.api_key, "accept": "application/json"}

    async def search(self, index_id: str, query_text: str, page_limit: int, page: int) -> Dict[str, Any]:
        """
        Run a text search against one index.

        Args:
            index_id: Index to search
            query_text: Text query
            page_limit: Results per page
            page: Page number

        Returns:
            Parsed JSON body ({"data": [...], "page_info": {...}})

        Raises:
            RateLimitError, AuthenticationError, UpstreamUnavailableError, UpstreamError
        """
        form = [("search_options", (None, option)) for option in TEXT_SEARCH_OPTIONS]
        form += [
            ("group_by", (None, "clip")),
            ("sort_option", (None, "score")),
            ("page_limit", (None, str(page_limit))),
            ("page", (None, str(page))),
            ("index_id", (None, index_id)),
            ("query_text", (None, query_text)),
        ]
        return await self._post_search(index_id, form)

    async def search_image(
        self,
        index_id: str,
        page_limit: int,
        media_url: Optional[str] = None,
        media_file: Optional[MediaFile] = None,
    ) -> Dict[str, Any]:
        """Run an image search against one index, by URL or by uploaded file."""
        form: List[Tuple[str, Any]] = [
            ("search_options", (None, option)) for option in IMAGE_SEARCH_OPTIONS
        ]
        form += [
            ("group_by", (None, "clip")),
            ("threshold", (None, "medium")),
            ("sort_option", (None, "score")),
            ("page_limit", (None, str(page_limit))),
            ("index_id", (None, index_id)),
            ("query_media_type", (None, "image")),
        ]
        if media_url:
            form.append(("query_media_url", (None, media_url)))
        elif media_file is not None:
            form.append(("query_media_file", media_file))
        return await self._post_search(index_id, form)

    async def search_by_token(self, index_id: str, page_token: str) -> Dict[str, Any]:
        """Fetch the next page of a previous search."""
        async def send() -> httpx.Response:
            return await self.http_client.get(
                f"{self.base_url}/search/{page_token}",
                params={"index_id": index_id},
                headers=self.headers,
            )

        response = await self._send_with_retry(index_id, send)
        return response.json()

    async def list_videos(self, index_id: str, page: int, page_limit: int) -> httpx.Response:
        return await self._request(
            "GET",
            f"{self.base_url}/indexes/{index_id}/videos",
            params={"page": page, "page_limit": page_limit},
        )

    async def get_video(self, index_id: str, video_id: str, embed: bool = False) -> httpx.Response:
        params: Optional[List[Tuple[str, str]]] = None
        if embed:
            params = [("embedding_option", option) for option in EMBEDDING_OPTIONS]
        return await self._request(
            "GET",
            f"{self.base_url}/indexes/{index_id}/videos/{video_id}",
            params=params,
        )

    async def update_user_metadata(
        self, index_id: str, video_id: str, user_metadata: Dict[str, Any]
    ) -> httpx.Response:
        return await self._request(
            "PUT",
            f"{self.base_url}/indexes/{index_id}/videos/{video_id}",
            json={"user_metadata": user_metadata},
        )

    async def _post_search(self, index_id: str, form: List[Tuple[str, Any]]) -> Dict[str, Any]:
        # Multipart boundary is set by httpx
        headers = {"x-api-key": self.api_key}

        async def send() -> httpx.Response:
            return await self.http_client.post(f"{self.base_url}/search", files=form, headers=headers)

        response = await self._send_with_retry(index_id, send)
        return response.json()

    async def _request(self, method: str, url: str, **kwargs) -> httpx.Response:
        try:
            return await self.http_client.request(method, url, headers=self.headers, **kwargs)
        except httpx.RequestError as e:
            logger.error(f"Request to Twelve Labs failed: {e!r}")
            raise UpstreamError(f"Failed to reach Twelve Labs API: {e}") from e

    async def _send_with_retry(self, index_id: str, send) -> httpx.Response:
        attempts = max(self.max_retries, 0) + 1

        def log_retry(retry_state):
            logger.info(
                f"Retrying API call for index {index_id} "
                f"(attempt {retry_state.attempt_number}/{attempts}) "
                f"in {retry_state.next_action.sleep:.1f}s"
            )

        retrying = AsyncRetrying(
            retry=retry_if_result(_is_server_error),
            stop=stop_after_attempt(attempts),
            wait=wait_incrementing(start=self.retry_delay, increment=self.retry_delay),
            sleep=_sleep,
            before_sleep=log_retry,
            # Hand back the last 500 so it maps to UpstreamUnavailableError
            retry_error_callback=lambda retry_state: retry_state.outcome.result(),
        )
        try:
            response = await retrying(send)
        except httpx.RequestError as e:
            logger.error(f"Request to Twelve Labs failed for index {index_id}: {e!r}")
            raise UpstreamError(f"Failed to reach Twelve Labs API: {e}") from e

        raise_for_search_status(response)
        return response


def raise_for_search_status(response: httpx.Response):
    """Map a non-2xx search response to the matching ServiceError."""
    if response.is_success:
        return

    status = response.status_code
    text = response.text
    logger.error(f"Twelve Labs API error {status}: {text}")

    if status == 500:
        raise UpstreamUnavailableError()
    if status == 429:
        raise RateLimitError()
    if status == 401:
        raise AuthenticationError()
    raise UpstreamError(
        f"Twelve Labs API error {status}: {text or response.reason_phrase}",
        status_code=status,
    )
