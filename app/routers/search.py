from typing import Optional

from fastapi import APIRouter, File, Form, Query, UploadFile

from app.dependencies import SearchServiceDeps
from app.models.error_models import ErrorResponse
from app.models.search_models import MergedSearchResponse, TextSearchRequest, TokenSearchResponse

router = APIRouter(prefix="/search")

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    401: {"model": ErrorResponse},
    429: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


@router.post("/text", response_model=MergedSearchResponse, responses=ERROR_RESPONSES)
async def text_search(request: TextSearchRequest, service: SearchServiceDeps):
    """
    Search the brand index, the creator index, or both.

    - **query**: Text to search for
    - **scope**: `brand`, `creator` or `all`
    - **page_limit**: Results per index (default 12)
    - **page**: Page number (default 1)

    Results from every index are merged and ordered by score; each result
    carries the `index_id` it came from.
    """
    return await service.text_search(
        query=request.query,
        scope=request.scope,
        page_limit=request.page_limit,
        page=request.page,
    )


@router.post("/image", response_model=MergedSearchResponse, responses=ERROR_RESPONSES)
async def image_search(
    service: SearchServiceDeps,
    scope: Optional[str] = Form(None, description="brand, creator or all (default all)"),
    page_limit: Optional[int] = Form(None, description="Results per index"),
    query: Optional[str] = Form(None, description="URL of the query image"),
    file: Optional[UploadFile] = File(None, description="Query image (JPG, PNG, ...)"),
):
    """
    Search with an image, given either as an upload or as a URL.

    The URL wins when both are sent. Results are merged across indexes
    exactly like the text search.
    """
    image_file = None
    if file is not None and not query:
        content = await file.read()
        image_file = (file.filename or "image.jpg", content, file.content_type or "application/octet-stream")

    return await service.image_search(
        scope=scope,
        page_limit=page_limit,
        image_url=query,
        image_file=image_file,
    )


@router.get("/by-token", response_model=TokenSearchResponse, responses=ERROR_RESPONSES)
async def search_by_token(
    service: SearchServiceDeps,
    page_token: Optional[str] = Query(None, description="next_page_token from a previous search"),
    index_id: Optional[str] = Query(None, description="Index the token belongs to"),
    page_token_camel: Optional[str] = Query(None, alias="pageToken", include_in_schema=False),
    index_id_camel: Optional[str] = Query(None, alias="indexId", include_in_schema=False),
):
    """
    Fetch the next page of a previous search for a single index.

    `pageToken` and `indexId` are accepted as well.
    """
    return await service.search_by_token(
        page_token=page_token or page_token_camel,
        index_id=index_id or index_id_camel,
    )
