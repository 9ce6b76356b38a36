import logging

from fastapi import APIRouter, Response

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/")
def index() -> Response:
    content = "Registry submission service\n\nPOST a report to /submissions to synchronize it with the registry.\n"
    return Response(content, media_type="text/plain")
