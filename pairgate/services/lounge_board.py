"""Lounge Board — durable, anonymous co-signed responses per lounge."""

import threading
from datetime import datetime, timedelta

from pairgate.core.cosign import (
    LOUNGE_RESPONSE_VISIBILITY, LoungeResponse, response_is_visible,
)


class LoungeBoard:
    def __init__(self, visibility: timedelta = LOUNGE_RESPONSE_VISIBILITY):
        self._visibility = visibility
        self._responses: dict[str, list[LoungeResponse]] = {}
        self._lock = threading.Lock()

    def post(self, response: LoungeResponse) -> LoungeResponse:
        with self._lock:
            self._responses.setdefault(response.lounge_id, []).append(response)
        return response

    def visible(self, lounge_id: str, now: datetime) -> list[LoungeResponse]:
        with self._lock:
            responses = list(self._responses.get(lounge_id, ()))
        return [r for r in responses if response_is_visible(r, now, self._visibility)]
