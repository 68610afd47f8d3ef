"""MeetingSummarizer: structured minutes for a meeting transcript.

Summaries never raise for model or network problems. Any failure, or
a payload that does not match the SummaryRecord shape, yields
SummaryRecord.fallback() so the caller can show a placeholder panel.
"""

import json
from collections.abc import Iterable

import structlog
from pydantic import BaseModel, ValidationError

from src.models.summary import SummaryRecord
from src.models.transcript import TranscriptEntry, format_transcript
from src.services.llm_client import LLMClient, LLMClientError, LLMNotConfiguredError
from src.services.prompts import SUMMARY_PROMPT

logger = structlog.get_logger()

EMPTY_TRANSCRIPT_TOPIC = "No discussion yet"
EMPTY_TRANSCRIPT_CONCLUSION = "The meeting has no messages to summarize."


class SummarizerError(Exception):
    """Raised when the summarizer's output cannot be used."""

    pass


class MeetingSummarizer:
    """Builds the secretary prompt and validates the model's minutes."""

    def __init__(self, llm_client: LLMClient, max_tokens: int = 4096):
        """Initialize summarizer.

        Args:
            llm_client: LLM client for structured generation
            max_tokens: Maximum tokens for the summary response
        """
        self._llm = llm_client
        self._max_tokens = max_tokens

    async def summarize(self, entries: Iterable[TranscriptEntry]) -> SummaryRecord:
        """Summarize a transcript snapshot.

        System notices are dropped before the transcript is sent.

        Args:
            entries: Transcript entries in order

        Returns:
            The validated SummaryRecord, or SummaryRecord.fallback() on failure

        Raises:
            LLMNotConfiguredError: If no API key is configured
        """
        conversation = [e for e in entries if not e.is_system]
        if not conversation:
            return SummaryRecord(
                topic=EMPTY_TRANSCRIPT_TOPIC,
                key_points=[],
                action_items=[],
                conclusion=EMPTY_TRANSCRIPT_CONCLUSION,
            )

        prompt = SUMMARY_PROMPT.format(transcript=format_transcript(conversation))
        try:
            payload = await self._llm.extract(
                prompt, SummaryRecord, max_tokens=self._max_tokens
            )
            summary = self.validate_payload(payload)
        except LLMNotConfiguredError:
            raise
        except (LLMClientError, SummarizerError) as e:
            logger.error("summary generation failed", error=str(e))
            return SummaryRecord.fallback()

        logger.info(
            "summary generated",
            entry_count=len(conversation),
            key_point_count=len(summary.key_points),
            action_item_count=len(summary.action_items),
        )
        return summary

    @staticmethod
    def validate_payload(payload: object) -> SummaryRecord:
        """Validate a model payload against the SummaryRecord shape.

        Accepts a SummaryRecord, any other Pydantic model, a dict, or a
        JSON string.

        Raises:
            SummarizerError: If the payload is missing or malformed
        """
        if isinstance(payload, SummaryRecord):
            return payload
        if payload is None:
            raise SummarizerError("Summarizer returned no output")
        if isinstance(payload, BaseModel):
            payload = payload.model_dump(by_alias=True)
        try:
            if isinstance(payload, (str, bytes)):
                return SummaryRecord.model_validate_json(payload)
            return SummaryRecord.model_validate(payload)
        except (ValidationError, json.JSONDecodeError) as e:
            raise SummarizerError(f"Malformed summary payload: {e}") from e
