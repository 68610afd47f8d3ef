"""Output schemas for meeting minutes rendering."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from src.models.meeting import MeetingSession
from src.models.summary import SummaryRecord
from src.personas.registry import PersonaRegistry


class AttendeeItem(BaseModel):
    """Attendee data for template rendering."""

    name: str = Field(description="Display name")
    title: str = Field(description="Job title")
    is_expert: bool = Field(default=False, description="Expert badge")


class MinutesContext(BaseModel):
    """Context data for rendering meeting minutes templates.

    This is the main input to the MinutesRenderer.
    """

    model_config = ConfigDict(str_strip_whitespace=True)

    meeting_id: UUID = Field(description="Meeting the minutes belong to")
    started_at: datetime = Field(description="When the meeting started")
    ended_at: datetime | None = Field(default=None, description="When it ended")
    attendees: list[AttendeeItem] = Field(default_factory=list)
    message_count: int = Field(default=0, ge=0, description="Non-system messages")
    summary: SummaryRecord

    @classmethod
    def from_session(
        cls,
        session: MeetingSession,
        registry: PersonaRegistry,
        summary: SummaryRecord,
    ) -> "MinutesContext":
        """Build a context from a meeting session and its summary."""
        attendees = []
        for persona_id in session.active_set:
            persona = registry.get(persona_id)
            attendees.append(
                AttendeeItem(
                    name=persona.name,
                    title=persona.title,
                    is_expert=persona.is_expert,
                )
            )
        return cls(
            meeting_id=session.id,
            started_at=session.started_at,
            ended_at=session.ended_at,
            attendees=attendees,
            message_count=len(session.transcript.without_system()),
            summary=summary,
        )


class RenderedMinutes(BaseModel):
    """Rendered meeting minutes."""

    meeting_id: UUID
    markdown: str
    template_used: str
