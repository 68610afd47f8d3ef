"""Output module for meeting minutes rendering."""

from src.output.renderer import MinutesRenderer
from src.output.schemas import AttendeeItem, MinutesContext, RenderedMinutes

__all__ = [
    "AttendeeItem",
    "MinutesContext",
    "MinutesRenderer",
    "RenderedMinutes",
]
