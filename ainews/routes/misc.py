"""
Miscellaneous routes: health check and reader mode.
"""

from fastapi import APIRouter, Depends, HTTPException

from .. import __version__
from ..auth import verify_api_key
from ..config import config, state
from ..schemas import ReadableContentResponse, ReaderModeResponse, StatusResponse
from ..url_validator import validate_url_or_raise_http

router = APIRouter(tags=["misc"])


# ─────────────────────────────────────────────────────────────
# Health Check
# ─────────────────────────────────────────────────────────────

@router.get("/status")
async def health_check() -> StatusResponse:
    """API health check."""
    last_run = state.aggregator.last_aggregation_time() if state.aggregator else None
    return StatusResponse(
        status="ok",
        version=__version__,
        classification_enabled=bool(state.classifier and state.classifier.provider),
        summarization_enabled=state.summarizer is not None,
        refresh_in_progress=state.refresh_in_progress,
        last_aggregation=last_run.isoformat() if last_run else None,
        feed_count=len(config.FEED_SOURCES),
    )


# ─────────────────────────────────────────────────────────────
# Reader Mode
# ─────────────────────────────────────────────────────────────

@router.get("/reader-mode", dependencies=[Depends(verify_api_key)])
async def reader_mode(url: str) -> ReaderModeResponse:
    """Fetch a page and return its main content for distraction-free reading."""
    validate_url_or_raise_http(url)

    if state.extractor is None:
        raise HTTPException(status_code=503, detail="Content extractor not initialized")

    readable = await state.extractor.extract_reader_mode_content(url)
    if readable is None:
        return ReaderModeResponse(success=False, error="Could not extract readable content")

    return ReaderModeResponse(success=True, data=ReadableContentResponse.from_content(readable))
