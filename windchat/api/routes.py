"""Preview endpoint serving staged image bytes to the browser.

Preview URLs stay valid only while some owner (a staged attachment or a sent
message) holds a reference; afterwards the endpoint answers 404.
"""

import logging

from fastapi import APIRouter, HTTPException, Request, Response, status

from windchat.compose.previews import PREVIEW_URL_PREFIX, PreviewRegistry

logger = logging.getLogger(__name__)

router = APIRouter(prefix=PREVIEW_URL_PREFIX, tags=["previews"])


def _registry(request: Request) -> PreviewRegistry:
    return request.app.state.previews


@router.get("/{key}")
async def get_preview(key: str, request: Request) -> Response:
    """Return the bytes behind a live preview URL.

    Raises:
        404: Unknown or already revoked preview.
    """
    found = _registry(request).get(key)
    if found is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Preview not found or already released",
        )

    content, mime_type = found
    return Response(
        content=content,
        media_type=mime_type,
        headers={"Cache-Control": "no-store"},
    )
