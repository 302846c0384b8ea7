# app/dependencies.py

from typing import Annotated, Optional

import httpx
from fastapi import Depends, Request

from config import Config
from app.services import SearchService, TwelveLabsClient, VideoService


def get_config(request: Request) -> Config:
    """Configuration loaded once at start-up."""
    return request.app.state.config


def get_http_client(request: Request) -> httpx.AsyncClient:
    """Pooled HTTP client opened by the application lifespan."""
    return request.app.state.http_client


def get_twelvelabs_client(
    config: Annotated[Config, Depends(get_config)],
    http_client: Annotated[httpx.AsyncClient, Depends(get_http_client)],
) -> Optional[TwelveLabsClient]:
    # Services report missing credentials per request
    if not config.has_credentials:
        return None
    return TwelveLabsClient(
        http_client,
        base_url=config.base_url,
        api_key=config.TWELVELABS_API_KEY,
        max_retries=config.SEARCH_MAX_RETRIES,
        retry_delay=config.SEARCH_RETRY_DELAY,
    )


def get_search_service(
    config: Annotated[Config, Depends(get_config)],
    client: Annotated[Optional[TwelveLabsClient], Depends(get_twelvelabs_client)],
) -> SearchService:
    return SearchService(config, client)


def get_video_service(
    config: Annotated[Config, Depends(get_config)],
    client: Annotated[Optional[TwelveLabsClient], Depends(get_twelvelabs_client)],
) -> VideoService:
    return VideoService(config, client)


SearchServiceDeps = Annotated[SearchService, Depends(get_search_service)]
VideoServiceDeps = Annotated[VideoService, Depends(get_video_service)]
