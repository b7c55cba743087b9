"""Progress tracking — mood timeline derived from completed assessments.

Pure helpers:
  - mood_score_for: assessment score (0-20) -> mood score (1-10)
  - activities_for: default activities recorded for a severity level
  - mood_distribution: bucket counts over a user's assessments
  - activity_stats / current_streak: summary figures for the progress page

:class:`ProgressFeed` keeps a bounded per-user cache of assessments and
progress entries, refetched lazily.  It subscribes to the change notifier for
both tables; an event only invalidates the cache of the table it names.
Events are expected after commit (see :func:`publish_pending_events`), so the
cache only ever holds committed rows.
"""

from __future__ import annotations

import logging
from collections import OrderedDict
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone
from typing import Any, Iterable

from pydantic import BaseModel

from mindcheck_assessment.classifier import round_half_up
from mindcheck_assessment.constants import (
    ASSESSMENTS_TABLE,
    DEFAULT_PROGRESS_CACHE_USERS,
    MAX_MOOD_SCORE,
    MIN_MOOD_SCORE,
    MOOD_BUCKETS,
    PROGRESS_TABLE,
    SEVERITY_ACTIVITIES,
)
from mindcheck_assessment.interfaces import AssessmentStore, ChangeEvent, ChangeNotifier
from mindcheck_assessment.models.result import AssessmentRecord, ProgressEntry

logger = logging.getLogger(__name__)


def mood_score_for(score: int) -> int:
    """Map an assessment score to the 1-10 mood scale."""
    return max(MIN_MOOD_SCORE, min(MAX_MOOD_SCORE, round_half_up(score / 2)))


def activities_for(level: str) -> list[str]:
    # unknown levels get the most thorough plan
    return list(SEVERITY_ACTIVITIES.get(level, SEVERITY_ACTIVITIES["major"]))


def mood_label(score: int) -> str:
    for minimum, label in MOOD_BUCKETS:
        if score >= minimum:
            return label
    return MOOD_BUCKETS[-1][1]


def mood_distribution(assessments: Iterable[AssessmentRecord]) -> dict[str, int]:
    """Count assessments per mood bucket.  Every bucket key is present."""
    distribution = {label: 0 for _, label in MOOD_BUCKETS}
    for record in assessments:
        distribution[mood_label(record.score)] += 1
    return distribution


def activity_stats(entries: Iterable[ProgressEntry]) -> dict[str, int]:
    """How often each tracked activity was logged (substring match)."""
    stats = {"meditation": 0, "exercise": 0, "journaling": 0}
    for entry in entries:
        for activity in entry.activities:
            lowered = activity.lower()
            if "meditation" in lowered:
                stats["meditation"] += 1
            if "exercise" in lowered:
                stats["exercise"] += 1
            if "journal" in lowered:
                stats["journaling"] += 1
    return stats


def current_streak(entries: Iterable[ProgressEntry], today: date | None = None) -> int:
    """Consecutive days, ending today, that each have a progress entry."""
    today = today or datetime.now(timezone.utc).date()
    days = {entry.date.date() for entry in entries}
    streak = 0
    while today - timedelta(days=streak) in days:
        streak += 1
    return streak


class ProgressSnapshot(BaseModel):
    """Everything the progress page shows for one user."""

    user_id: str
    entries: list[ProgressEntry]
    assessments: list[AssessmentRecord]
    mood_distribution: dict[str, int]
    activity_stats: dict[str, int]
    streak: int


@dataclass
class _UserCache:
    handles: list[str]
    records: dict[str, list[Any]] = field(default_factory=dict)
    # bumped on every invalidation; a fetch that straddles one is not stored
    versions: dict[str, int] = field(
        default_factory=lambda: {ASSESSMENTS_TABLE: 0, PROGRESS_TABLE: 0}
    )


class ProgressFeed:
    """Per-user cached view over an :class:`AssessmentStore`.

    At most ``max_users`` users are tracked.  The least recently read user is
    evicted past that, dropping both the cached records and the notifier
    subscriptions.

    Args:
        store: where assessments and progress entries are read and written
        notifier: change source used to invalidate cached tables
        max_users: cap on users held in the cache
    """

    def __init__(
        self,
        store: AssessmentStore,
        notifier: ChangeNotifier,
        *,
        max_users: int = DEFAULT_PROGRESS_CACHE_USERS,
    ) -> None:
        if max_users < 1:
            raise ValueError("max_users must be at least 1")
        self._store = store
        self._notifier = notifier
        self._max_users = max_users
        # user_id -> cache; order is least to most recently read
        self._users: OrderedDict[str, _UserCache] = OrderedDict()

    # ------------------------------------------------------------------
    # Subscriptions
    # ------------------------------------------------------------------

    def _track(self, user_id: str) -> _UserCache:
        cache = self._users.get(user_id)
        if cache is not None:
            self._users.move_to_end(user_id)
            return cache

        cache = _UserCache(handles=[
            self._notifier.subscribe(table, user_id, self._on_event)
            for table in (ASSESSMENTS_TABLE, PROGRESS_TABLE)
        ])
        self._users[user_id] = cache
        while len(self._users) > self._max_users:
            evicted = next(iter(self._users))
            logger.debug("Evicting progress cache for user %s", evicted)
            self._forget(evicted)
        return cache

    def _forget(self, user_id: str) -> None:
        cache = self._users.pop(user_id, None)
        if cache is None:
            return
        for handle in cache.handles:
            self._notifier.unsubscribe(handle)

    def _on_event(self, event: ChangeEvent) -> None:
        logger.debug("Invalidating %s cache for user %s", event.table, event.user_id)
        self.invalidate(event.table, event.user_id)

    def invalidate(self, table: str, user_id: str) -> None:
        cache = self._users.get(user_id)
        if cache is None:
            return
        cache.records.pop(table, None)
        cache.versions[table] = cache.versions.get(table, 0) + 1

    def is_cached(self, table: str, user_id: str) -> bool:
        cache = self._users.get(user_id)
        return cache is not None and table in cache.records

    @property
    def tracked_users(self) -> int:
        return len(self._users)

    def close(self) -> None:
        """Drop every subscription and cached record."""
        for user_id in list(self._users):
            self._forget(user_id)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def _cached(self, table: str, user_id: str, fetch) -> list[Any]:
        cache = self._track(user_id)
        if table in cache.records:
            return list(cache.records[table])

        version = cache.versions[table]
        records = await fetch()
        # skip the store if the user was evicted or the table changed meanwhile
        if self._users.get(user_id) is cache and cache.versions[table] == version:
            cache.records[table] = records
        return list(records)

    async def assessments(self, db: Any, user_id: str) -> list[AssessmentRecord]:
        """Assessments for ``user_id`` in ascending date order (cached)."""
        return await self._cached(
            ASSESSMENTS_TABLE, user_id, lambda: self._store.query_assessments(db, user_id)
        )

    async def entries(self, db: Any, user_id: str) -> list[ProgressEntry]:
        """Progress entries for ``user_id`` in ascending date order (cached)."""
        return await self._cached(
            PROGRESS_TABLE, user_id, lambda: self._store.query_progress(db, user_id)
        )

    async def refresh(
        self, db: Any, user_id: str, *, now: datetime | None = None
    ) -> ProgressSnapshot:
        """Load the user's progress, logging today's entry if it is missing.

        When at least one assessment exists and no progress entry is dated
        today (UTC), an entry is created from the latest assessment.  The
        list read back after that insert includes the caller's uncommitted
        row, so it is returned but not cached.
        """
        now = now or datetime.now(timezone.utc)
        assessments = await self.assessments(db, user_id)
        entries = await self.entries(db, user_id)

        if assessments and not any(e.date.date() == now.date() for e in entries):
            latest = assessments[-1]
            entry = ProgressEntry(
                user_id=user_id,
                date=now,
                mood_score=mood_score_for(latest.score),
                activities=activities_for(latest.severity_level),
            )
            await self._store.insert_progress(db, entry)
            self.invalidate(PROGRESS_TABLE, user_id)
            entries = await self._store.query_progress(db, user_id)

        return ProgressSnapshot(
            user_id=user_id,
            entries=entries,
            assessments=assessments,
            mood_distribution=mood_distribution(assessments),
            activity_stats=activity_stats(entries),
            streak=current_streak(entries, now.date()),
        )
