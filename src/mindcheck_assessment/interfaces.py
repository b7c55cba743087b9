"""Abstract interfaces for the external collaborators of the assessment core.

These ABCs define the contracts the engine and the progress feed rely on.
Concrete implementations live elsewhere:

  - AssessmentStore: :class:`mindcheck_assessment.persistence.DatabaseAssessmentStore`
  - ChangeNotifier: :class:`mindcheck_assessment.notifications.InMemoryChangeNotifier`
  - SchedulingService: :class:`mindcheck_assessment.scheduling.HttpSchedulingService`

Typical integration flow::

    notifier = InMemoryChangeNotifier()
    store = DatabaseAssessmentStore(notifier)
    engine = AssessmentEngine(bank, store)

    step = await engine.submit_answer(db, session_id=sid, option_index=2, user_id=uid)
    # step.saved / step.submission_error report the hand-off to the store
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Callable

from mindcheck_assessment.models.result import AssessmentRecord, ProgressEntry
from mindcheck_assessment.models.scheduling import ScheduleRequest, ScheduleResult


class AssessmentStore(ABC):
    """Persistence adapter for completed assessments and progress entries.

    Every method receives the caller's unit-of-work handle ``db`` (an
    ``AsyncSession`` for the database implementation) so that the caller
    controls transaction boundaries.  Implementations must raise
    :class:`~mindcheck_assessment.errors.PersistenceFailure` for any
    storage error.
    """

    @abstractmethod
    async def insert_assessment(self, db: Any, record: AssessmentRecord) -> AssessmentRecord:
        """Store a completed assessment and return it with its id set."""
        ...

    @abstractmethod
    async def query_assessments(self, db: Any, user_id: str) -> list[AssessmentRecord]:
        """All assessments for ``user_id`` ordered by ascending assessment date."""
        ...

    @abstractmethod
    async def insert_progress(self, db: Any, entry: ProgressEntry) -> ProgressEntry:
        """Store a progress entry and return it with its id set."""
        ...

    @abstractmethod
    async def query_progress(self, db: Any, user_id: str) -> list[ProgressEntry]:
        """All progress entries for ``user_id`` ordered by ascending date."""
        ...


@dataclass(frozen=True)
class ChangeEvent:
    """A change to one stored record, delivered to subscribers."""

    table: str
    user_id: str
    event_type: str = "INSERT"
    record: dict[str, Any] = field(default_factory=dict)


ChangeCallback = Callable[[ChangeEvent], None]


class ChangeNotifier(ABC):
    """Subscribe/unsubscribe capability for stored-record change events."""

    @abstractmethod
    def subscribe(self, table: str, user_id: str, on_event: ChangeCallback) -> str:
        """Register ``on_event`` for changes to ``table`` rows owned by ``user_id``.

        Returns an opaque handle for :meth:`unsubscribe`.
        """
        ...

    @abstractmethod
    def unsubscribe(self, handle: str) -> None:
        """Remove a subscription.  Unknown handles are ignored."""
        ...

    @abstractmethod
    def publish(self, event: ChangeEvent) -> None:
        """Deliver ``event`` to every matching subscriber."""
        ...


class SchedulingService(ABC):
    """Remote calendar integration used by the counselor booking flow."""

    @abstractmethod
    async def schedule(self, request: ScheduleRequest) -> ScheduleResult:
        """Book a meeting.

        Remote failures are reported as ``ScheduleResult(success=False)``
        rather than raised.
        """
        ...
