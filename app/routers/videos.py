from typing import Optional

from fastapi import APIRouter, Query

from app.dependencies import VideoServiceDeps
from app.models.error_models import ErrorResponse
from app.models.video_models import (
    UserMetadataUpdateRequest,
    UserMetadataUpdateResponse,
    VideoDetailResponse,
    VideoListingResponse,
)

router = APIRouter(prefix="/videos")

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


@router.put(
    "/updateUserMetadata",
    response_model=UserMetadataUpdateResponse,
    response_model_exclude_none=True,
    responses=ERROR_RESPONSES,
)
async def update_user_metadata(request: UserMetadataUpdateRequest, service: VideoServiceDeps):
    """
    Replace the user metadata of a video.

    - **videoId**: Video to update
    - **indexId**: Index containing the video
    - **user_metadata**: Object of string, number or boolean values
    """
    return await service.update_user_metadata(
        video_id=request.video_id,
        index_id=request.index_id,
        user_metadata=request.user_metadata,
    )


@router.get("", response_model=VideoListingResponse, responses=ERROR_RESPONSES)
async def list_videos(
    service: VideoServiceDeps,
    index_id: Optional[str] = Query(None, description="Index to list"),
    page: str = Query("1", description="Page number"),
    limit: str = Query("12", description="Videos per page (max 50)"),
):
    """
    List the videos of an index.

    Returns the videos as Twelve Labs sends them plus a `page_info` block
    with `page`, `total_page` and `total_count`.
    """
    return await service.list_videos(index_id=index_id, page=page, limit=limit)


@router.get(
    "/{video_id}",
    response_model=VideoDetailResponse,
    response_model_exclude_none=True,
    responses=ERROR_RESPONSES,
)
async def get_video(
    video_id: str,
    service: VideoServiceDeps,
    index_id: Optional[str] = Query(None, description="Index containing the video"),
    embed: bool = Query(False, description="Include video embeddings"),
):
    """
    Get one video's details (HLS, system/user metadata, source, embeddings).
    """
    return await service.get_video(video_id=video_id, index_id=index_id, embed=embed)
