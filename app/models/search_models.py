# app/models/search_models.py

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class SearchScope(str, Enum):
    BRAND = "brand"
    CREATOR = "creator"
    ALL = "all"


class TextSearchRequest(BaseModel):
    """
    Body of POST /search/text.

    ``scope`` stays a plain string here so an unknown value reaches the
    service and is rejected there with a 400 instead of a schema error.
    """
    query: Optional[str] = Field(default=None, description="Text to search for")
    scope: Optional[str] = Field(default=None, description="brand, creator or all")
    page_limit: Optional[int] = Field(default=None, description="Results per index and page (default SEARCH_PAGE_LIMIT)")
    page: int = Field(default=1, description="Page number")


class SearchResultItem(BaseModel):
    video_id: Optional[str] = None
    thumbnail_url: Optional[str] = None
    start: Optional[float] = None
    end: Optional[float] = None
    confidence: Optional[str] = None
    score: Optional[float] = None
    index_id: str


class MergedSearchResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    page_info_by_index: Dict[str, Dict[str, Any]] = Field(..., alias="pageInfoByIndex")
    data: List[SearchResultItem] = Field(..., description="Merged results ordered by score")
    has_more: bool = Field(..., alias="hasMore")
    next_page_tokens: Dict[str, Optional[str]] = Field(..., alias="nextPageTokens")


class TokenSearchResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    page_info: Dict[str, Any] = Field(..., alias="pageInfo")
    data: List[SearchResultItem]
