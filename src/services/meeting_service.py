"""MeetingService: in-memory meeting sessions for the API layer.

Each session owns its transcript and active set. Only one turn may
run per meeting at a time; a second submission while a turn is in
flight is rejected rather than queued.
"""

from collections.abc import AsyncIterator, Iterable
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from uuid import UUID

import structlog

from src.models.meeting import ActiveSet, MeetingSession, Turn
from src.models.persona import SYSTEM_SPEAKER_ID
from src.models.summary import SummaryRecord
from src.models.transcript import Transcript, TranscriptEntry
from src.orchestration.turns import TurnOrchestrator
from src.personas.registry import PersonaRegistry
from src.services.summarizer import MeetingSummarizer

logger = structlog.get_logger()

WELCOME_MESSAGE = (
    "Meeting started. The attendees are reviewing the agenda. "
    "Please state your problem or topic."
)
SYSTEM_DISPLAY_NAME = "System"


class MeetingError(Exception):
    """Base class for meeting session errors."""

    pass


class MeetingNotFoundError(MeetingError):
    """Raised when a meeting id is unknown."""

    def __init__(self, meeting_id: UUID):
        self.meeting_id = meeting_id
        super().__init__(f"Meeting {meeting_id} not found")


class TurnInProgressError(MeetingError):
    """Raised when a turn is submitted while another is still running."""

    def __init__(self, meeting_id: UUID):
        self.meeting_id = meeting_id
        super().__init__(f"Meeting {meeting_id} already has a turn in progress")


class MeetingEndedError(MeetingError):
    """Raised when a turn is submitted to a meeting that has ended."""

    def __init__(self, meeting_id: UUID):
        self.meeting_id = meeting_id
        super().__init__(f"Meeting {meeting_id} has ended")


class MeetingService:
    """Creates meetings and routes turns and summaries to them."""

    def __init__(
        self,
        registry: PersonaRegistry,
        orchestrator: TurnOrchestrator,
        summarizer: MeetingSummarizer,
    ):
        """Initialize the meeting service.

        Args:
            registry: Persona catalog used to validate selections
            orchestrator: Runs turns against a session's transcript
            summarizer: Produces meeting minutes
        """
        self._registry = registry
        self._orchestrator = orchestrator
        self._summarizer = summarizer
        self._sessions: dict[UUID, MeetingSession] = {}

    @property
    def registry(self) -> PersonaRegistry:
        return self._registry

    def start_meeting(self, persona_ids: Iterable[str]) -> MeetingSession:
        """Start a meeting with the selected personas.

        Duplicate ids are collapsed, keeping the first occurrence; the
        resulting order is the initial speaking order.

        Raises:
            ValueError: If no persona is selected
            UnknownPersonaError: If any id is not in the catalog
        """
        ids = self._registry.validate_ids(persona_ids)
        active_set = ActiveSet(ids)
        if not active_set:
            raise ValueError("Select at least one persona to start a meeting")

        transcript = Transcript(persona_ids=active_set)
        transcript.add(SYSTEM_SPEAKER_ID, SYSTEM_DISPLAY_NAME, WELCOME_MESSAGE)

        session = MeetingSession(active_set=active_set, transcript=transcript)
        self._sessions[session.id] = session
        logger.info(
            "meeting started",
            meeting_id=str(session.id),
            persona_ids=active_set.to_list(),
        )
        return session

    def get(self, meeting_id: UUID) -> MeetingSession:
        """Get a meeting session.

        Raises:
            MeetingNotFoundError: If the meeting does not exist
        """
        session = self._sessions.get(meeting_id)
        if session is None:
            raise MeetingNotFoundError(meeting_id)
        return session

    def discard(self, meeting_id: UUID) -> None:
        """Forget a meeting and its transcript.

        Raises:
            MeetingNotFoundError: If the meeting does not exist
            TurnInProgressError: If a turn is still running
        """
        session = self.get(meeting_id)
        if session.turn_in_progress:
            raise TurnInProgressError(meeting_id)
        del self._sessions[meeting_id]
        logger.info("meeting discarded", meeting_id=str(meeting_id))

    @asynccontextmanager
    async def _turn_slot(self, session: MeetingSession) -> AsyncIterator[None]:
        if session.is_ended:
            raise MeetingEndedError(session.id)
        if session.turn_lock.locked():
            raise TurnInProgressError(session.id)
        async with session.turn_lock:
            yield

    def _finish_turn(self, session: MeetingSession, order: list[str]) -> None:
        # The mentioned persona keeps priority in later turns
        session.active_set = session.active_set.reordered(order)
        session.turn_count += 1

    async def submit_turn(self, meeting_id: UUID, utterance: str) -> Turn:
        """Run a full turn and return it.

        Raises:
            MeetingNotFoundError: If the meeting does not exist
            MeetingEndedError: If the meeting has ended
            TurnInProgressError: If another turn is running
            ValueError: If the utterance is blank
        """
        session = self.get(meeting_id)
        if not utterance.strip():
            raise ValueError("Utterance cannot be empty")

        async with self._turn_slot(session):
            turn = await self._orchestrator.run_turn(
                utterance, session.transcript, session.active_set
            )
            self._finish_turn(session, turn.speaker_order)

        logger.info(
            "turn submitted",
            meeting_id=str(meeting_id),
            speaker_order=turn.speaker_order,
        )
        return turn

    async def stream_turn(
        self, meeting_id: UUID, utterance: str
    ) -> AsyncIterator[TranscriptEntry]:
        """Run a turn, yielding entries as they are appended.

        Validation happens before the first entry is produced, so errors
        surface on the first iteration.
        """
        session = self.get(meeting_id)
        if not utterance.strip():
            raise ValueError("Utterance cannot be empty")

        async with self._turn_slot(session):
            order = self._orchestrator.compute_order(utterance, session.active_set)
            async for entry in self._orchestrator.stream_turn(
                utterance, session.transcript, session.active_set
            ):
                yield entry
            self._finish_turn(session, order)

    async def summarize(self, meeting_id: UUID) -> SummaryRecord:
        """Summarize the transcript as it stands now.

        A summary requested during a turn reflects the partial transcript.

        Raises:
            MeetingNotFoundError: If the meeting does not exist
        """
        session = self.get(meeting_id)
        snapshot = session.transcript.entries
        summary = await self._summarizer.summarize(snapshot)
        session.summary = summary
        return summary

    async def end_meeting(self, meeting_id: UUID) -> SummaryRecord:
        """End the meeting and produce its final minutes.

        Raises:
            MeetingNotFoundError: If the meeting does not exist
            TurnInProgressError: If a turn is still running
        """
        session = self.get(meeting_id)
        if session.turn_lock.locked():
            raise TurnInProgressError(meeting_id)
        if session.ended_at is None:
            session.ended_at = datetime.now(UTC)
            logger.info(
                "meeting ended",
                meeting_id=str(meeting_id),
                turn_count=session.turn_count,
            )
        return await self.summarize(meeting_id)
