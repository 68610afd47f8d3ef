"""Canonical data models for Boardroom.

This module exports all domain models used throughout the application:
- Persona: Simulated meeting attendees
- TranscriptEntry, Transcript: Append-only meeting history
- ActiveSet, Turn, MeetingSession: Meeting state
- SummaryRecord: Structured meeting minutes
"""

from src.models.meeting import ActiveSet, MeetingSession, Turn
from src.models.persona import (
    SYSTEM_SPEAKER_ID,
    USER_SPEAKER_ID,
    Persona,
)
from src.models.summary import (
    ActionItemStatus,
    DecisionStep,
    SummaryActionItem,
    SummaryRecord,
)
from src.models.transcript import Transcript, TranscriptEntry, format_transcript

__all__ = [
    # Persona
    "Persona",
    "USER_SPEAKER_ID",
    "SYSTEM_SPEAKER_ID",
    # Transcript
    "Transcript",
    "TranscriptEntry",
    "format_transcript",
    # Meeting
    "ActiveSet",
    "MeetingSession",
    "Turn",
    # Summary
    "SummaryRecord",
    "SummaryActionItem",
    "ActionItemStatus",
    "DecisionStep",
]
