"""In-process change notifier.

Callbacks for a (table, user) pair run synchronously inside
:meth:`InMemoryChangeNotifier.publish`, in subscription order.  A callback
that raises is logged and skipped; the remaining callbacks still run.
"""

from __future__ import annotations

import logging
import uuid

from mindcheck_assessment.interfaces import ChangeCallback, ChangeEvent, ChangeNotifier

logger = logging.getLogger(__name__)


class InMemoryChangeNotifier(ChangeNotifier):
    """Dictionary-backed :class:`ChangeNotifier` for a single process."""

    def __init__(self) -> None:
        # handle -> (table, user_id, callback); dicts keep insertion order
        self._subscriptions: dict[str, tuple[str, str, ChangeCallback]] = {}

    def subscribe(self, table: str, user_id: str, on_event: ChangeCallback) -> str:
        handle = uuid.uuid4().hex
        self._subscriptions[handle] = (table, user_id, on_event)
        logger.debug("Subscribed %s to %s for user %s", handle, table, user_id)
        return handle

    def unsubscribe(self, handle: str) -> None:
        if self._subscriptions.pop(handle, None) is None:
            logger.debug("Ignoring unsubscribe for unknown handle %s", handle)

    def publish(self, event: ChangeEvent) -> None:
        # copy so callbacks may (un)subscribe while we iterate
        targets = [
            (handle, callback)
            for handle, (table, user_id, callback) in list(self._subscriptions.items())
            if table == event.table and user_id == event.user_id
        ]
        for handle, callback in targets:
            try:
                callback(event)
            except Exception:
                logger.exception(
                    "Change callback %s failed for %s/%s", handle, event.table, event.user_id
                )

    def subscription_count(self) -> int:
        return len(self._subscriptions)
