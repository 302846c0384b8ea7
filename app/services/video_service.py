# app/services/video_service.py

import logging
from typing import Any, Dict, Optional

from config import Config
from app.errors import ConfigurationError, ServiceError, UpstreamError, ValidationError
from app.models.video_models import (
    UserMetadataUpdateResponse,
    VideoDetailResponse,
    VideoListingResponse,
    VideoPageInfo,
)
from app.services.twelvelabs_client import TwelveLabsClient

logger = logging.getLogger(__name__)

DETAIL_SECTIONS = ("hls", "system_metadata", "user_metadata", "source", "embedding")


def parse_int(value: Any, name: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{name} must be an integer")


class VideoService:
    """
    Video listing, detail lookups and metadata updates for a single index.
    """

    def __init__(self, config: Config, client: Optional[TwelveLabsClient]):
        self.config = config
        self.client = client

    def _check_ready(self):
        if not self.config.has_credentials or self.client is None:
            logger.error("Missing API key or base URL in environment variables")
            raise ConfigurationError("API credentials not configured")

    def clamp_limit(self, limit: int) -> int:
        max_limit = self.config.VIDEOS_MAX_LIMIT
        if limit > max_limit:
            logger.warning(
                f"Requested limit {limit} exceeds maximum allowed ({max_limit}). "
                f"Using limit={max_limit} instead."
            )
            return max_limit
        return limit

    async def list_videos(
        self,
        index_id: Optional[str],
        page: Optional[str] = "1",
        limit: Optional[str] = "12",
    ) -> VideoListingResponse:
        """
        List the videos of an index.

        Args:
            index_id: Index to list
            page: Requested page (echoed back as an integer)
            limit: Videos per page, clamped to VIDEOS_MAX_LIMIT

        Returns:
            VideoListingResponse with upstream videos passed through
        """
        if not index_id:
            raise ValidationError("Index ID is required")
        page_number = parse_int(page or "1", "page")
        page_limit = self.clamp_limit(parse_int(limit or "12", "limit"))
        self._check_ready()

        try:
            response = await self.client.list_videos(index_id, page_number, page_limit)
        except UpstreamError as e:
            raise UpstreamError("Failed to fetch videos", details=e.message) from e

        if not response.is_success:
            logger.error(f"API error: {response.status_code} - {response.text}")
            raise UpstreamError(
                f"Failed to fetch videos: {response.reason_phrase}",
                status_code=response.status_code,
            )

        try:
            body = response.json()
            page_info = body.get("page_info") or {}
            return VideoListingResponse(
                data=body.get("data") or [],
                page_info=VideoPageInfo(
                    page=page_number,
                    total_page=page_info.get("total_page"),
                    total_count=page_info.get("total_results"),
                ),
            )
        except (ValueError, AttributeError) as e:
            logger.error(f"Error in videos API: {e}")
            raise UpstreamError("Failed to fetch videos", details=str(e)) from e

    async def get_video(
        self,
        video_id: Optional[str],
        index_id: Optional[str],
        embed: bool = False,
    ) -> VideoDetailResponse:
        """Fetch one video's metadata, optionally with its embeddings."""
        if not index_id:
            raise ValidationError("Index ID is required")
        if not video_id:
            raise ValidationError("Video ID is required")
        self._check_ready()

        response = await self.client.get_video(index_id, video_id, embed=embed)

        if not response.is_success:
            error_text = response.text
            logger.error(f"API error: {response.status_code} {response.reason_phrase}: {error_text}")
            if response.status_code == 404:
                logger.error(f"Video {video_id} not found in index {index_id}. It might still be processing.")
            raise UpstreamError(
                f"Failed to fetch video data: {response.reason_phrase}",
                status_code=response.status_code,
                details=error_text,
            )

        try:
            video_data = response.json()
        except ValueError as e:
            raise ServiceError(f"Failed to fetch or process video data: {e}") from e
        if not isinstance(video_data, dict):
            raise ServiceError("Failed to fetch or process video data: Invalid video data structure received.")

        if embed and not video_data.get("embedding"):
            logger.warning(f"Embedding was requested but not found in API response for video {video_id}")

        sections: Dict[str, Any] = {
            name: video_data[name] for name in DETAIL_SECTIONS if video_data.get(name)
        }
        return VideoDetailResponse(video_id=video_id, index_id=index_id, **sections)

    async def update_user_metadata(
        self,
        video_id: Optional[str],
        index_id: Optional[str],
        user_metadata: Any,
    ) -> UserMetadataUpdateResponse:
        """
        Replace a video's user metadata on Twelve Labs.

        Args:
            video_id: Video to update
            index_id: Index containing the video
            user_metadata: Flat mapping of metadata values

        Returns:
            UserMetadataUpdateResponse, with the upstream body when one is sent
        """
        if not video_id or not index_id:
            logger.error(f"Missing required parameters: video_id={video_id!r} index_id={index_id!r}")
            raise ValidationError("Video ID and Index ID are required")
        if not isinstance(user_metadata, dict):
            logger.error(f"Invalid user_metadata: {user_metadata!r}")
            raise ValidationError("user_metadata must be a valid object")
        self._check_ready()

        response = await self.client.update_user_metadata(index_id, video_id, user_metadata)

        if not response.is_success:
            error_text = response.text
            logger.error(f"TwelveLabs API error: {response.status_code} - {error_text}")
            raise UpstreamError(
                f"Failed to update metadata: {response.reason_phrase} - {error_text}",
                status_code=response.status_code,
            )

        logger.info(f"Updated user metadata for video {video_id} in index {index_id}")
        data = None
        if response.status_code != 204 and response.content:
            try:
                data = response.json()
            except ValueError:
                logger.warning(f"Metadata update for video {video_id} returned a non-JSON body")
        return UserMetadataUpdateResponse(
            success=True,
            message="Video metadata updated successfully",
            data=data,
        )
