"""FastAPI application entry point."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from src.api.router import api_router
from src.config import settings
from src.orchestration.turns import TurnOrchestrator
from src.personas.registry import PersonaRegistry
from src.services.llm_client import LLMClient
from src.services.meeting_service import MeetingService
from src.services.responder import PersonaResponder
from src.services.summarizer import MeetingSummarizer

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def build_meeting_service(
    llm_client: LLMClient,
    registry: PersonaRegistry | None = None,
    reply_delay_seconds: float | None = None,
) -> MeetingService:
    """Wire the orchestrator, responder, and summarizer into a MeetingService.

    Args:
        llm_client: LLM client shared by replies and summaries
        registry: Persona catalog (defaults to the built-in personas)
        reply_delay_seconds: Pause before each reply (defaults to settings)
    """
    registry = registry or PersonaRegistry()
    if reply_delay_seconds is None:
        reply_delay_seconds = settings.reply_delay_seconds

    responder = PersonaResponder(
        llm_client,
        temperature=settings.reply_temperature,
        max_tokens=settings.reply_max_tokens,
    )
    orchestrator = TurnOrchestrator(
        registry,
        respond=responder,
        reply_delay_seconds=reply_delay_seconds,
    )
    summarizer = MeetingSummarizer(llm_client, max_tokens=settings.summary_max_tokens)
    return MeetingService(registry, orchestrator, summarizer)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan management.

    Startup:
    - Create the LLM client (missing credentials fail at first call)
    - Load the persona catalog
    - Initialize the meeting service

    Shutdown:
    - Drop in-memory meetings
    """
    logger.info(f"Starting {settings.app_name}...")

    llm_client = LLMClient()
    app.state.llm_client = llm_client
    if not llm_client.is_configured:
        logger.warning("ANTHROPIC_API_KEY not set; persona replies will fail")

    registry = PersonaRegistry()
    app.state.persona_registry = registry
    logger.info(f"Persona registry loaded: {len(registry)} personas")

    app.state.meeting_service = build_meeting_service(llm_client, registry)
    logger.info("MeetingService initialized")

    yield

    logger.info(f"Shutting down {settings.app_name}...")
    del app.state.meeting_service


app = FastAPI(
    title=settings.app_name,
    description="Simulated meeting room with AI persona attendees",
    version=settings.app_version,
    lifespan=lifespan,
)

app.include_router(api_router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "src.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )
