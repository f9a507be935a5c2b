"""Internal job endpoints for cron/scripts.

These endpoints are secured with a static token (X-Internal-Token header).
They are meant for automated triggers and for other backend services that
need a suggestion refresh after writing athlete data.
"""

from __future__ import annotations

import logging
import secrets
from collections.abc import Callable

from fastapi import APIRouter, Depends, Header, HTTPException
from sqlalchemy.orm import Session

from recruit_tracker.api.deps import get_session_factory
from recruit_tracker.config import get_settings
from recruit_tracker.schemas.suggestion import TriggerSuggestionRequest, TriggerSuggestionResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/internal", include_in_schema=False)


# ── Token dependency ────────────────────────────────────────────────


def _require_internal_token(x_internal_token: str = Header(...)) -> None:
    """Validate the internal job token from the request header.

    Uses constant-time comparison. Raises 403 if the token is empty or does
    not match the configured value.
    """
    expected = get_settings().internal_job_token
    if not expected or not secrets.compare_digest(x_internal_token, expected):
        logger.warning("Internal endpoint auth failed: invalid or missing token")
        raise HTTPException(status_code=403, detail="Invalid internal token")


# ── Endpoints ───────────────────────────────────────────────────────


@router.post("/suggestions/trigger", response_model=TriggerSuggestionResponse)
async def trigger_suggestions(
    body: TriggerSuggestionRequest,
    session_factory: Callable[[], Session] = Depends(get_session_factory),
    _token: None = Depends(_require_internal_token),
):
    """Run one suggestion cycle for an athlete.

    Returns counts of generated and surfaced suggestions plus the echoed reason.
    """
    from recruit_tracker.services.suggestions.trigger import trigger_suggestion_update

    options = {
        "interaction_school_id": body.interaction_school_id,
        "interaction_coach_id": body.interaction_coach_id,
    }
    try:
        result = await trigger_suggestion_update(
            session_factory, body.athlete_id, body.reason, options
        )
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from None
    except Exception:
        logger.exception("Suggestion trigger failed for athlete %s", body.athlete_id)
        raise HTTPException(status_code=500, detail="Suggestion update failed") from None

    return TriggerSuggestionResponse(
        generated=result.generated,
        surfaced=result.surfaced,
        reason=result.reason,
    )


@router.post("/run_suggestion_refresh")
async def run_suggestion_refresh(
    session_factory: Callable[[], Session] = Depends(get_session_factory),
    _token: None = Depends(_require_internal_token),
):
    """Trigger the daily suggestion refresh for every athlete.

    Returns the batch summary.
    """
    from recruit_tracker.services.suggestions.trigger import run_daily_refresh

    try:
        return await run_daily_refresh(session_factory)
    except Exception as exc:
        logger.exception("Internal suggestion refresh failed")
        return {"status": "failed", "error": str(exc)}
