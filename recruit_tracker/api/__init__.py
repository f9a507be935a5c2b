"""API routes."""

from recruit_tracker.api.internal import router as internal_router

__all__ = ["internal_router"]
