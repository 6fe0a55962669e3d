from __future__ import annotations

import logging

from .base import ApiRejected, InvalidCredentials
from .schemas import decode_error_envelope

LOGGER = logging.getLogger(__name__)


def classify_response(status_code: int, body: bytes) -> None:
    """Raise the typed error for a failed upstream status, otherwise return.

    4xx bodies are checked for the ``{"cod", "message"}`` envelope. 5xx bodies
    are never parsed since upstream does not guarantee their shape.
    """
    if status_code == 401:
        envelope = decode_error_envelope(body)
        LOGGER.warning("Upstream rejected credentials (envelope=%s)", envelope is not None)
        if envelope is not None:
            raise ApiRejected(envelope.message, status_code=status_code)
        raise InvalidCredentials()

    if 400 <= status_code <= 499:
        envelope = decode_error_envelope(body)
        LOGGER.warning("Upstream client error %s", status_code)
        if envelope is not None:
            raise ApiRejected(envelope.message, status_code=status_code)
        raise ApiRejected(f"client error {status_code}", status_code=status_code)

    if 500 <= status_code <= 599:
        LOGGER.warning("Upstream server error %s", status_code)
        raise ApiRejected(f"server error {status_code}", status_code=status_code)
