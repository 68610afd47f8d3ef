"""Meeting API endpoints: start, turns, summaries, and minutes."""

import json
from collections.abc import AsyncIterator
from datetime import datetime
from uuid import UUID

import structlog
from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import PlainTextResponse, StreamingResponse
from pydantic import BaseModel, Field

from src.models.meeting import MeetingSession, Turn
from src.models.summary import SummaryRecord
from src.models.transcript import TranscriptEntry
from src.output.renderer import MinutesRenderer
from src.output.schemas import MinutesContext
from src.personas.registry import UnknownPersonaError
from src.services.llm_client import LLMNotConfiguredError
from src.services.meeting_service import (
    MeetingEndedError,
    MeetingNotFoundError,
    MeetingService,
    TurnInProgressError,
)

logger = structlog.get_logger()

router = APIRouter(prefix="/meetings", tags=["meetings"])


class StartMeetingRequest(BaseModel):
    """Request body for starting a meeting."""

    persona_ids: list[str] = Field(
        min_length=1,
        description="Selected persona ids; order is the initial speaking order",
    )


class TurnRequest(BaseModel):
    """Request body for submitting a user utterance."""

    utterance: str = Field(min_length=1, description="What the user says")


class MeetingResponse(BaseModel):
    """Meeting state with its full transcript."""

    id: UUID
    persona_ids: list[str] = Field(description="Attendees in current speaking order")
    started_at: datetime
    ended_at: datetime | None
    turn_count: int
    turn_in_progress: bool
    transcript: list[TranscriptEntry]

    @classmethod
    def from_session(cls, session: MeetingSession) -> "MeetingResponse":
        return cls(
            id=session.id,
            persona_ids=session.active_set.to_list(),
            started_at=session.started_at,
            ended_at=session.ended_at,
            turn_count=session.turn_count,
            turn_in_progress=session.turn_in_progress,
            transcript=list(session.transcript.entries),
        )


class TurnResponse(BaseModel):
    """Entries produced by one turn."""

    meeting_id: UUID
    utterance: str
    speaker_order: list[str]
    entries: list[TranscriptEntry]

    @classmethod
    def from_turn(cls, meeting_id: UUID, turn: Turn) -> "TurnResponse":
        return cls(
            meeting_id=meeting_id,
            utterance=turn.utterance,
            speaker_order=turn.speaker_order,
            entries=turn.entries,
        )


def get_meeting_service(request: Request) -> MeetingService:
    """Get MeetingService from app state."""
    if not hasattr(request.app.state, "meeting_service"):
        raise HTTPException(status_code=500, detail="MeetingService not initialized")
    return request.app.state.meeting_service


def get_minutes_renderer() -> MinutesRenderer:
    """Dependency to create the minutes renderer."""
    return MinutesRenderer()


def _get_session(service: MeetingService, meeting_id: UUID) -> MeetingSession:
    try:
        return service.get(meeting_id)
    except MeetingNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


def _llm_unavailable(e: LLMNotConfiguredError) -> HTTPException:
    logger.error("llm not configured", error=str(e))
    return HTTPException(status_code=503, detail=str(e))


@router.post("", response_model=MeetingResponse, status_code=201)
async def start_meeting(
    request_body: StartMeetingRequest,
    service: MeetingService = Depends(get_meeting_service),
) -> MeetingResponse:
    """Start a meeting with the selected personas.

    The transcript opens with a system welcome notice.

    Raises:
        HTTPException: 422 if a persona id is unknown
    """
    try:
        session = service.start_meeting(request_body.persona_ids)
    except UnknownPersonaError as e:
        raise HTTPException(
            status_code=422,
            detail=f"Unknown persona id(s): {', '.join(e.persona_ids)}",
        )
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return MeetingResponse.from_session(session)


@router.get("/{meeting_id}", response_model=MeetingResponse)
async def get_meeting(
    meeting_id: UUID,
    service: MeetingService = Depends(get_meeting_service),
) -> MeetingResponse:
    """Get meeting state and transcript."""
    return MeetingResponse.from_session(_get_session(service, meeting_id))


@router.delete("/{meeting_id}", status_code=204)
async def discard_meeting(
    meeting_id: UUID,
    service: MeetingService = Depends(get_meeting_service),
) -> None:
    """Discard a meeting and its transcript."""
    try:
        service.discard(meeting_id)
    except MeetingNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except TurnInProgressError as e:
        raise HTTPException(status_code=409, detail=str(e))


@router.post("/{meeting_id}/turns", response_model=TurnResponse)
async def submit_turn(
    meeting_id: UUID,
    request_body: TurnRequest,
    service: MeetingService = Depends(get_meeting_service),
) -> TurnResponse:
    """Submit a user utterance and wait for every persona to reply.

    An '@name' mention moves that attendee to the front of the
    speaking order for this and later turns.

    Raises:
        HTTPException: 404 unknown meeting, 409 turn running or meeting
            ended, 422 blank utterance, 503 LLM not configured
    """
    try:
        turn = await service.submit_turn(meeting_id, request_body.utterance)
    except MeetingNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except (TurnInProgressError, MeetingEndedError) as e:
        raise HTTPException(status_code=409, detail=str(e))
    except LLMNotConfiguredError as e:
        raise _llm_unavailable(e)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return TurnResponse.from_turn(meeting_id, turn)


@router.post("/{meeting_id}/turns/stream")
async def stream_turn(
    meeting_id: UUID,
    request_body: TurnRequest,
    service: MeetingService = Depends(get_meeting_service),
) -> StreamingResponse:
    """Submit a user utterance and stream entries as NDJSON.

    Each line is one transcript entry, written as soon as it is
    appended. A failure after streaming started is reported as a
    final {"error": ...} line.
    """
    session = _get_session(service, meeting_id)
    if session.is_ended:
        raise HTTPException(status_code=409, detail=str(MeetingEndedError(meeting_id)))
    if session.turn_in_progress:
        raise HTTPException(
            status_code=409, detail=str(TurnInProgressError(meeting_id))
        )
    if not request_body.utterance.strip():
        raise HTTPException(status_code=422, detail="Utterance cannot be empty")

    async def ndjson() -> AsyncIterator[str]:
        try:
            async for entry in service.stream_turn(meeting_id, request_body.utterance):
                yield entry.model_dump_json() + "\n"
        except (LLMNotConfiguredError, TurnInProgressError, MeetingEndedError) as e:
            logger.error("streamed turn aborted", meeting_id=str(meeting_id), error=str(e))
            yield json.dumps({"error": str(e)}) + "\n"

    return StreamingResponse(ndjson(), media_type="application/x-ndjson")


@router.post("/{meeting_id}/summary", response_model=SummaryRecord)
async def summarize_meeting(
    meeting_id: UUID,
    service: MeetingService = Depends(get_meeting_service),
) -> SummaryRecord:
    """Generate minutes for the transcript so far.

    Model failures return the placeholder summary, not an error.
    """
    try:
        return await service.summarize(meeting_id)
    except MeetingNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except LLMNotConfiguredError as e:
        raise _llm_unavailable(e)


@router.post("/{meeting_id}/end", response_model=SummaryRecord)
async def end_meeting(
    meeting_id: UUID,
    service: MeetingService = Depends(get_meeting_service),
) -> SummaryRecord:
    """End the meeting and return its final minutes."""
    try:
        return await service.end_meeting(meeting_id)
    except MeetingNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except TurnInProgressError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except LLMNotConfiguredError as e:
        raise _llm_unavailable(e)


@router.get("/{meeting_id}/minutes", response_class=PlainTextResponse)
async def get_minutes(
    meeting_id: UUID,
    service: MeetingService = Depends(get_meeting_service),
    renderer: MinutesRenderer = Depends(get_minutes_renderer),
) -> PlainTextResponse:
    """Render the latest summary as Markdown minutes.

    Raises:
        HTTPException: 404 if the meeting has no summary yet
    """
    session = _get_session(service, meeting_id)
    if session.summary is None:
        raise HTTPException(
            status_code=404,
            detail="No summary yet. Request a summary or end the meeting first.",
        )
    context = MinutesContext.from_session(session, service.registry, session.summary)
    rendered = renderer.render(context)
    return PlainTextResponse(rendered.markdown, media_type="text/markdown")
