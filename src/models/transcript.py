"""Transcript model: the append-only history of a meeting."""

from collections.abc import Iterable, Iterator
from datetime import UTC, datetime
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field

from src.models.persona import SYSTEM_SPEAKER_ID, USER_SPEAKER_ID


class TranscriptEntry(BaseModel):
    """A single message in the meeting transcript."""

    model_config = ConfigDict(frozen=True)

    id: UUID = Field(default_factory=uuid4, description="Unique entry identifier")
    speaker_id: str = Field(description="'user', 'system', or a persona id")
    speaker_name: str = Field(description="Display name at the time of speaking")
    content: str = Field(description="Message text")
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(UTC),
        description="When the entry was appended",
    )

    @property
    def is_system(self) -> bool:
        return self.speaker_id == SYSTEM_SPEAKER_ID

    @property
    def is_user(self) -> bool:
        return self.speaker_id == USER_SPEAKER_ID


class Transcript:
    """Ordered, append-only sequence of transcript entries.

    Entries are never edited, removed, or reordered. When persona ids
    are supplied, only those personas (plus the user and system) may
    speak.
    """

    def __init__(
        self,
        persona_ids: Iterable[str] | None = None,
        entries: Iterable[TranscriptEntry] = (),
    ):
        """Initialize transcript.

        Args:
            persona_ids: Personas allowed to speak. None disables the check.
            entries: Entries to seed the transcript with, in order
        """
        self._allowed: frozenset[str] | None = None
        if persona_ids is not None:
            self._allowed = frozenset(persona_ids) | {
                USER_SPEAKER_ID,
                SYSTEM_SPEAKER_ID,
            }
        self._entries: list[TranscriptEntry] = []
        for entry in entries:
            self.append(entry)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[TranscriptEntry]:
        return iter(tuple(self._entries))

    def __getitem__(self, index: int) -> TranscriptEntry:
        return self._entries[index]

    @property
    def entries(self) -> tuple[TranscriptEntry, ...]:
        """Immutable snapshot of the entries at call time."""
        return tuple(self._entries)

    @property
    def last(self) -> TranscriptEntry | None:
        return self._entries[-1] if self._entries else None

    def append(self, entry: TranscriptEntry) -> TranscriptEntry:
        """Append an existing entry.

        Raises:
            ValueError: If the speaker is not allowed, or the entry would
                go back in time relative to the last entry
        """
        if self._allowed is not None and entry.speaker_id not in self._allowed:
            msg = f"Speaker '{entry.speaker_id}' is not part of this meeting"
            raise ValueError(msg)
        last = self.last
        if last is not None and entry.created_at < last.created_at:
            msg = "Transcript entries must be appended in chronological order"
            raise ValueError(msg)
        self._entries.append(entry)
        return entry

    def add(self, speaker_id: str, speaker_name: str, content: str) -> TranscriptEntry:
        """Create an entry stamped no earlier than the last one and append it."""
        now = datetime.now(UTC)
        last = self.last
        if last is not None and now < last.created_at:
            now = last.created_at
        entry = TranscriptEntry(
            speaker_id=speaker_id,
            speaker_name=speaker_name,
            content=content,
            created_at=now,
        )
        return self.append(entry)

    def without_system(self) -> list[TranscriptEntry]:
        """Entries excluding system notices."""
        return [e for e in self._entries if not e.is_system]


def format_transcript(entries: Iterable[TranscriptEntry]) -> str:
    """Flatten entries to 'speaker: text' lines for LLM prompts."""
    return "\n".join(f"{e.speaker_name}: {e.content}" for e in entries)
