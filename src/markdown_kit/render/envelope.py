"""JSON envelopes that wrap a render result for machine callers."""

from __future__ import annotations

import json
from typing import Any, Mapping, Optional


def success_envelope(markdown: str) -> dict[str, Any]:
    return {"success": True, "markdown": markdown}


def failure_envelope(
    message: str, error: Optional[str] = None
) -> dict[str, Any]:
    """Build the failure shape; ``error`` carries backend detail if any."""

    envelope: dict[str, Any] = {"success": False, "message": message}
    if error is not None:
        envelope["error"] = error
    return envelope


def dump_envelope(envelope: Mapping[str, Any]) -> str:
    return json.dumps(envelope, ensure_ascii=False)


__all__ = ["dump_envelope", "failure_envelope", "success_envelope"]
