"""Persona catalog.

Exports:
- PersonaRegistry: Ordered lookup of available personas
- DEFAULT_PERSONAS: Built-in attendee catalog
"""

from src.personas.registry import (
    DEFAULT_PERSONAS,
    PersonaRegistry,
    UnknownPersonaError,
)

__all__ = [
    "DEFAULT_PERSONAS",
    "PersonaRegistry",
    "UnknownPersonaError",
]
