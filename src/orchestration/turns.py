"""TurnOrchestrator: speaker ordering and the sequential reply loop.

A turn is one user utterance followed by one reply from every active
persona. Replies are requested strictly one after another, and each
reply is appended to the transcript before the next persona is asked,
so later speakers see what earlier speakers said in the same turn.
"""

import asyncio
from collections.abc import AsyncIterator, Awaitable, Callable, Sequence

import structlog

from src.models.meeting import ActiveSet, Turn
from src.models.persona import USER_SPEAKER_ID, Persona
from src.models.transcript import Transcript, TranscriptEntry
from src.orchestration.mentions import MentionResolver
from src.personas.registry import PersonaRegistry
from src.services.responder import ResponderError

logger = structlog.get_logger()

USER_DISPLAY_NAME = "You"
FALLBACK_REPLY_TEXT = "I apologize, I'm having trouble connecting right now."

RespondFn = Callable[[Persona, Sequence[TranscriptEntry], str], Awaitable[str]]


class TurnOrchestrator:
    """Decides who speaks in which order and runs the reply loop."""

    def __init__(
        self,
        registry: PersonaRegistry,
        respond: RespondFn | None = None,
        reply_delay_seconds: float = 0.0,
    ):
        """Initialize orchestrator.

        Args:
            registry: Persona catalog
            respond: Default reply generator, e.g. a PersonaResponder
            reply_delay_seconds: Pause before each persona reply
        """
        self._registry = registry
        self._mentions = MentionResolver(registry)
        self._respond = respond
        self._delay = reply_delay_seconds

    def compute_order(self, utterance: str, active_set: Sequence[str]) -> list[str]:
        """Compute the speaking order for a turn.

        A mentioned, attending persona moves to the front; everyone else
        keeps their relative order. Without a usable mention the active
        set's current order is returned unchanged.

        Args:
            utterance: The user's input
            active_set: Attending persona ids in their current order

        Returns:
            A permutation of active_set
        """
        order = ActiveSet(active_set)
        mentioned = self._mentions.resolve(utterance, order)
        if mentioned is None:
            return order.to_list()
        return order.prioritize(mentioned).to_list()

    async def stream_turn(
        self,
        utterance: str,
        transcript: Transcript,
        active_set: Sequence[str],
        respond: RespondFn | None = None,
    ) -> AsyncIterator[TranscriptEntry]:
        """Run a turn, yielding each entry as soon as it is appended.

        The user entry is appended and yielded first, then one entry per
        persona in the computed order. If the consumer stops iterating,
        entries already appended stay in the transcript.

        Args:
            utterance: The user's input
            transcript: Working transcript, extended in place
            active_set: Attending persona ids in their current order
            respond: Reply generator overriding the default

        Raises:
            ValueError: If the utterance is blank or no responder is set
            LLMNotConfiguredError: If the LLM has no credentials
        """
        if not utterance.strip():
            raise ValueError("Utterance cannot be empty")
        respond = respond or self._respond
        if respond is None:
            raise ValueError("No responder configured for this turn")

        user_entry = transcript.add(USER_SPEAKER_ID, USER_DISPLAY_NAME, utterance)
        yield user_entry

        order = self.compute_order(utterance, active_set)
        logger.info("turn started", speaker_order=order, transcript_size=len(transcript))

        for persona_id in order:
            persona = self._registry.get(persona_id)
            if self._delay:
                await asyncio.sleep(self._delay)

            try:
                text = await respond(persona, transcript.entries, utterance)
            except ResponderError as e:
                logger.warning(
                    "persona reply replaced with fallback",
                    persona_id=persona_id,
                    error=str(e),
                )
                text = FALLBACK_REPLY_TEXT

            yield transcript.add(persona.id, persona.name, text)

        logger.info("turn completed", speaker_count=len(order))

    async def run_turn(
        self,
        utterance: str,
        transcript: Transcript,
        active_set: Sequence[str],
        respond: RespondFn | None = None,
    ) -> Turn:
        """Run a whole turn and return it once every persona has replied.

        See stream_turn for arguments and errors.
        """
        order = self.compute_order(utterance, active_set)
        turn = Turn(utterance=utterance, speaker_order=order)
        async for entry in self.stream_turn(utterance, transcript, active_set, respond):
            turn.entries.append(entry)
        return turn
