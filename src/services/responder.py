"""PersonaResponder: generates one persona's reply through the LLM."""

from collections.abc import Iterable

import structlog

from src.models.persona import Persona
from src.models.transcript import TranscriptEntry, format_transcript
from src.services.llm_client import LLMClient, LLMClientError, LLMNotConfiguredError
from src.services.prompts import PERSONA_REPLY_PROMPT

logger = structlog.get_logger()

EMPTY_REPLY_TEXT = "Thinking..."


class ResponderError(Exception):
    """Raised when a single persona reply cannot be generated."""

    def __init__(self, persona_id: str, message: str):
        self.persona_id = persona_id
        super().__init__(f"Reply from '{persona_id}' failed: {message}")


class PersonaResponder:
    """Builds the reply prompt and calls the LLM for one persona.

    Instances are callable with (persona, transcript, utterance) so they
    can be handed to the turn orchestrator directly.
    """

    def __init__(
        self,
        llm_client: LLMClient,
        temperature: float = 0.7,
        max_tokens: int = 1024,
    ):
        """Initialize responder.

        Args:
            llm_client: LLM client for text generation
            temperature: Sampling temperature for replies
            max_tokens: Maximum tokens per reply
        """
        self._llm = llm_client
        self._temperature = temperature
        self._max_tokens = max_tokens

    @staticmethod
    def build_prompt(transcript: Iterable[TranscriptEntry], utterance: str) -> str:
        """Build the user prompt from the transcript and the new input."""
        return PERSONA_REPLY_PROMPT.format(
            transcript=format_transcript(transcript),
            utterance=utterance,
        )

    async def __call__(
        self,
        persona: Persona,
        transcript: Iterable[TranscriptEntry],
        utterance: str,
    ) -> str:
        return await self.respond(persona, transcript, utterance)

    async def respond(
        self,
        persona: Persona,
        transcript: Iterable[TranscriptEntry],
        utterance: str,
    ) -> str:
        """Generate the persona's reply.

        Args:
            persona: Persona whose system prompt sets the tone
            transcript: Meeting so far, including earlier replies this turn
            utterance: The user's input that started the turn

        Returns:
            Reply text ("Thinking..." if the model returned nothing)

        Raises:
            LLMNotConfiguredError: If no API key is configured
            ResponderError: If the LLM call fails
        """
        prompt = self.build_prompt(transcript, utterance)
        try:
            text = await self._llm.generate(
                prompt,
                system=persona.system_prompt,
                temperature=self._temperature,
                max_tokens=self._max_tokens,
            )
        except LLMNotConfiguredError:
            raise
        except LLMClientError as e:
            logger.warning("persona reply failed", persona_id=persona.id, error=str(e))
            raise ResponderError(persona.id, str(e)) from e

        return text.strip() or EMPTY_REPLY_TEXT
