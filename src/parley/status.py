from __future__ import annotations

import logging

from .metrics import STATUS_UNRECOGNIZED
from .models import RunStatus

log = logging.getLogger(__name__)

_STATUS_BY_TOKEN = {status.value: status for status in RunStatus}


def normalize_status(raw: str | None) -> RunStatus | None:
    """Map a vendor run-status string to RunStatus.

    Exact match only. Unknown strings and None give None; this never raises.
    """
    if raw is None:
        return None
    status = _STATUS_BY_TOKEN.get(raw)
    if status is None:
        STATUS_UNRECOGNIZED.inc()
        log.debug(f"Unrecognized run status: {raw!r}")
    return status
