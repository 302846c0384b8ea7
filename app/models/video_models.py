# app/models/video_models.py

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class VideoPageInfo(BaseModel):
    """
    Pagination block returned to the client
    """
    page: int
    total_page: Optional[int] = None
    total_count: Optional[int] = None


class VideoListingResponse(BaseModel):
    """
    Videos of one index; ``data`` is passed through from Twelve Labs untouched
    """
    data: List[Dict[str, Any]]
    page_info: VideoPageInfo


class VideoDetailResponse(BaseModel):
    """
    Single video with the sections Twelve Labs returned for it
    """
    model_config = ConfigDict(populate_by_name=True)

    video_id: str = Field(..., alias="_id")
    index_id: str
    hls: Optional[Dict[str, Any]] = None
    system_metadata: Optional[Dict[str, Any]] = None
    user_metadata: Optional[Dict[str, Any]] = None
    source: Optional[Dict[str, Any]] = None
    embedding: Optional[Dict[str, Any]] = None


class UserMetadataUpdateRequest(BaseModel):
    """
    Body of PUT /videos/updateUserMetadata; accepts videoId/indexId or snake_case names
    """
    model_config = ConfigDict(populate_by_name=True)

    video_id: Optional[str] = Field(default=None, alias="videoId")
    index_id: Optional[str] = Field(default=None, alias="indexId")
    user_metadata: Optional[Any] = None


class UserMetadataUpdateResponse(BaseModel):
    success: bool
    message: str
    data: Optional[Any] = None
