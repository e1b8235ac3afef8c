"""Service error extraction hook.

Rules:
- 2xx is always a success, whatever the body says.
- Non-2xx with no body: `DomainError` with the status only.
- Non-2xx with a JSON body holding a string `"error"`: `DomainError` with
  status and message.
- Non-2xx with a body that is not JSON (or has no usable `"error"`): `None`.
  The failure is then reported by the transport-level status check instead.
"""

from __future__ import annotations

import logging
from typing import Callable

from core.errors import DecodeError, DomainError
from core.json_value import JSONValue

ErrorMapper = Callable[[int, "bytes | None"], "DomainError | None"]

logger = logging.getLogger(__name__)


def map_service_error(status_code: int, body: bytes | None) -> DomainError | None:
    if 200 <= status_code < 300:
        return None
    if not body:
        return DomainError(status_code)
    try:
        message = JSONValue.parse(body).get_string("error")
    except DecodeError:
        logger.debug("Unreadable error body for HTTP %s; deferring to status check", status_code)
        return None
    return DomainError(status_code, message)
