#!/usr/bin/env python3
"""Run the daily suggestion refresh locally or from cron.

Usage:
    python scripts/run_daily_suggestion_refresh.py

Re-evaluates suggestions for every athlete with a player profile and
surfaces pending ones. Exits 0 when every athlete succeeded, 1 otherwise.
"""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from recruit_tracker.db.session import SessionLocal
from recruit_tracker.services.suggestions.trigger import run_daily_refresh


def main() -> int:
    try:
        result = asyncio.run(run_daily_refresh(SessionLocal))
        print(
            f"status={result['status']} "
            f"athletes_processed={result['athletes_processed']} "
            f"athletes_failed={result['athletes_failed']} "
            f"suggestions_generated={result['suggestions_generated']} "
            f"suggestions_surfaced={result['suggestions_surfaced']}"
        )
        return 0 if result["status"] == "completed" else 1
    except Exception as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
