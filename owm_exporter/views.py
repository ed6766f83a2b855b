from __future__ import annotations

from typing import Any

from .models import Failed, Outcome, Ready, Unavailable


def outcome_to_json(outcome: Outcome) -> Any:
    """JSON-ready rendering of ``outcome`` with no unit conversion or relabeling."""
    if isinstance(outcome, Unavailable):
        return None
    if isinstance(outcome, Failed):
        return {"error": outcome.status}
    if isinstance(outcome, Ready):
        return outcome.reading.model_dump(mode="json", by_alias=True)
    raise TypeError(f"unknown outcome: {outcome!r}")
