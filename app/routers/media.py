"""
Media routes - serves live locators
"""

from fastapi import APIRouter, HTTPException, Response, status

from app.locators import allocator

router = APIRouter(prefix="/media", tags=["Media"])


@router.get("/{token}")
async def get_media(token: str) -> Response:
    """
    Fetch uploaded media by locator token.

    Only locators whose lease has not been released are served.
    """
    entry = allocator.resolve(token)

    if entry is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Media not found",
        )

    payload, content_type = entry
    return Response(content=payload, media_type=content_type)
