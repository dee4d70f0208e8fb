"""Encoding lookup route"""
import logging

from fastapi import APIRouter, HTTPException, Query
from fastapi.responses import JSONResponse

from ytzip.errors import ExtractionError
from ytzip.services import list_encodings, runner

from .schemas import INVALID_URL_MESSAGE, is_supported_url

router = APIRouter()
_logger = logging.getLogger("ytzip")


@router.get("/formats", response_class=JSONResponse)
async def api_list_formats(url: str = Query(..., description="Video URL")):
    """
    List the encodings available for a video.
    """
    if not is_supported_url(url.strip()):
        raise HTTPException(status_code=400, detail=INVALID_URL_MESSAGE)
    try:
        _logger.info("Formats request url=%s", url)
        encodings = await runner.run_in_threadpool(list_encodings, url.strip())
    except ExtractionError as exc:
        _logger.warning("Formats request failed url=%s error=%s", url, exc)
        raise HTTPException(status_code=502, detail=str(exc))
    return [e.model_dump() for e in encodings]
