"""Persona catalog endpoints."""

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel, Field

from src.models.persona import Persona
from src.personas.registry import PersonaRegistry, UnknownPersonaError

router = APIRouter(prefix="/personas", tags=["personas"])


class PersonaResponse(BaseModel):
    """Persona as shown in the attendee picker."""

    id: str
    name: str
    title: str
    avatar: str
    initials: str
    is_expert: bool
    color: str | None = None

    @classmethod
    def from_persona(cls, persona: Persona) -> "PersonaResponse":
        return cls(
            id=persona.id,
            name=persona.name,
            title=persona.title,
            avatar=persona.avatar,
            initials=persona.initials,
            is_expert=persona.is_expert,
            color=persona.color,
        )


class PersonaListResponse(BaseModel):
    """Response for the persona catalog."""

    personas: list[PersonaResponse] = Field(default_factory=list)
    total: int = Field(description="Number of personas in the catalog")


def get_registry(request: Request) -> PersonaRegistry:
    """Get PersonaRegistry from app state."""
    if not hasattr(request.app.state, "persona_registry"):
        raise HTTPException(status_code=500, detail="PersonaRegistry not initialized")
    return request.app.state.persona_registry


@router.get("", response_model=PersonaListResponse)
async def list_personas(
    registry: PersonaRegistry = Depends(get_registry),
) -> PersonaListResponse:
    """List available personas in catalog order."""
    personas = [PersonaResponse.from_persona(p) for p in registry.all()]
    return PersonaListResponse(personas=personas, total=len(personas))


@router.get("/{persona_id}", response_model=PersonaResponse)
async def get_persona(
    persona_id: str,
    registry: PersonaRegistry = Depends(get_registry),
) -> PersonaResponse:
    """Get a single persona."""
    try:
        return PersonaResponse.from_persona(registry.get(persona_id))
    except UnknownPersonaError:
        raise HTTPException(status_code=404, detail=f"Persona {persona_id} not found")
