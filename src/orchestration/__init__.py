"""Turn orchestration: mention resolution and the sequential reply loop.

Exports:
- MentionResolver: Resolves '@name' tokens to attending personas
- TurnOrchestrator: Computes speaking order and runs turns
"""

from src.orchestration.mentions import MentionResolver, extract_mention_token
from src.orchestration.turns import (
    FALLBACK_REPLY_TEXT,
    USER_DISPLAY_NAME,
    TurnOrchestrator,
)

__all__ = [
    "FALLBACK_REPLY_TEXT",
    "USER_DISPLAY_NAME",
    "MentionResolver",
    "TurnOrchestrator",
    "extract_mention_token",
]
