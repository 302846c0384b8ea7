# app/services/__init__.py

from .search_service import SearchService
from .twelvelabs_client import TwelveLabsClient
from .video_service import VideoService

# Export all available services
__all__ = [
    "SearchService",
    "TwelveLabsClient",
    "VideoService",
]
