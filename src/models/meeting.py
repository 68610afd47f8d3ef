"""Meeting session, active set, and turn models."""

import asyncio
from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass, field
from datetime import UTC, datetime
from uuid import UUID, uuid4

from src.models.summary import SummaryRecord
from src.models.transcript import Transcript, TranscriptEntry


class ActiveSet(Sequence[str]):
    """Ordered, duplicate-free set of persona ids attending a meeting.

    Order is the default speaking order. Membership is fixed once the
    meeting starts; only the order changes.
    """

    def __init__(self, persona_ids: Iterable[str]):
        ids: list[str] = []
        for pid in persona_ids:
            if pid not in ids:
                ids.append(pid)
        self._ids = tuple(ids)

    def __getitem__(self, index):  # type: ignore[override]
        return self._ids[index]

    def __len__(self) -> int:
        return len(self._ids)

    def __iter__(self) -> Iterator[str]:
        return iter(self._ids)

    def __contains__(self, persona_id: object) -> bool:
        return persona_id in self._ids

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ActiveSet):
            return self._ids == other._ids
        if isinstance(other, (list, tuple)):
            return list(self._ids) == list(other)
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._ids)

    def __repr__(self) -> str:
        return f"ActiveSet({list(self._ids)!r})"

    def prioritize(self, persona_id: str) -> "ActiveSet":
        """Return a new set with persona_id first, others in relative order.

        Raises:
            ValueError: If persona_id is not a member
        """
        if persona_id not in self._ids:
            msg = f"Persona '{persona_id}' is not in the active set"
            raise ValueError(msg)
        return ActiveSet([persona_id, *(p for p in self._ids if p != persona_id)])

    def reordered(self, order: Sequence[str]) -> "ActiveSet":
        """Return a new set in the given order, which must be a permutation.

        Raises:
            ValueError: If order adds, drops, or duplicates members
        """
        if len(order) != len(self._ids) or set(order) != set(self._ids):
            msg = f"{list(order)!r} is not a permutation of {list(self._ids)!r}"
            raise ValueError(msg)
        return ActiveSet(order)

    def to_list(self) -> list[str]:
        return list(self._ids)


@dataclass
class Turn:
    """One user utterance and the replies it produced."""

    utterance: str
    speaker_order: list[str]
    entries: list[TranscriptEntry] = field(default_factory=list)


@dataclass
class MeetingSession:
    """State of one in-memory meeting.

    The transcript is owned by the session and passed explicitly to
    the orchestrator on every turn.
    """

    active_set: ActiveSet
    transcript: Transcript
    id: UUID = field(default_factory=uuid4)
    started_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    ended_at: datetime | None = None
    summary: SummaryRecord | None = None
    turn_count: int = 0
    turn_lock: asyncio.Lock = field(default_factory=asyncio.Lock, repr=False)

    @property
    def is_ended(self) -> bool:
        return self.ended_at is not None

    @property
    def turn_in_progress(self) -> bool:
        return self.turn_lock.locked()
